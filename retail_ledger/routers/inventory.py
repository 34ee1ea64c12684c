from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retail_ledger.core.api_docs import error_responses
from retail_ledger.core.deps import get_db
from retail_ledger.core.errors import ProductNotFoundError
from retail_ledger.core.money import to_money
from retail_ledger.schemas.inventory import (
    InventoryLineOut,
    InventoryListOut,
    MinStockIn,
    MinStockOut,
    StockLevelOut,
)
from retail_ledger.services import inventory_service, pricing_service
from retail_ledger.services.inventory_service import LocationKind
from retail_ledger.services.unit_of_work import atomic

router = APIRouter(prefix="/inventory", tags=["inventory"])


def _require_product(db: Session, product_id: str) -> None:
    if pricing_service.get_product(db, product_id) is None:
        raise ProductNotFoundError(product_id)


@router.get(
    "/{kind}/{location_id}",
    response_model=InventoryListOut,
    summary="List the inventory of a warehouse or sales area",
    responses={
        200: {
            "description": "Current stock per product, ordered by product name",
            "content": {
                "application/json": {
                    "example": {
                        "location_kind": "warehouse",
                        "location_id": "warehouse-id",
                        "items": [
                            {
                                "product_id": "product-id",
                                "product_name": "Refresco de cola 355ml",
                                "unit": "un",
                                "category": "bebidas",
                                "quantity": 48,
                                "min_stock": 10,
                                "cost_price": 8.5,
                                "sale_price": 19.99,
                                "cost_value": 408.0,
                                "sale_value": 959.52,
                                "is_low_stock": False,
                            }
                        ],
                        "total_cost_value": 408.0,
                        "total_sale_value": 959.52,
                    }
                }
            },
        },
        **error_responses(404, 422, 500),
    },
)
def list_inventory(
    kind: LocationKind,
    location_id: str,
    in_stock: bool = Query(default=False, description="Only products with quantity above zero"),
    db: Session = Depends(get_db),
):
    inventory_service.get_location_or_404(db, kind, location_id)
    lines = inventory_service.list_location_inventory(db, kind, location_id, in_stock_only=in_stock)
    items = [
        InventoryLineOut(
            product_id=line.product_id,
            product_name=line.product_name,
            unit=line.unit,
            category=line.category,
            quantity=line.quantity,
            min_stock=line.min_stock,
            cost_price=float(line.cost_price),
            sale_price=float(line.sale_price),
            cost_value=float(line.cost_value),
            sale_value=float(line.sale_value),
            is_low_stock=line.is_low_stock,
        )
        for line in lines
    ]
    return InventoryListOut(
        location_kind=kind.value,
        location_id=location_id,
        items=items,
        total_cost_value=float(to_money(sum((line.cost_value for line in lines), to_money(0)))),
        total_sale_value=float(to_money(sum((line.sale_value for line in lines), to_money(0)))),
    )


@router.get(
    "/{kind}/{location_id}/products/{product_id}",
    response_model=StockLevelOut,
    summary="Stock level of one product at a location",
    responses=error_responses(404, 422, 500),
)
def get_stock_level(
    kind: LocationKind,
    location_id: str,
    product_id: str,
    db: Session = Depends(get_db),
):
    inventory_service.get_location_or_404(db, kind, location_id)
    _require_product(db, product_id)
    return StockLevelOut(
        location_kind=kind.value,
        location_id=location_id,
        product_id=product_id,
        quantity=inventory_service.get_quantity(db, kind, location_id, product_id),
        is_low_stock=inventory_service.is_low_stock(db, kind, location_id, product_id),
    )


@router.put(
    "/{kind}/{location_id}/products/{product_id}/min-stock",
    response_model=MinStockOut,
    summary="Set the low-stock threshold of one product at a location",
    responses=error_responses(400, 404, 422, 500),
)
def set_min_stock(
    kind: LocationKind,
    location_id: str,
    product_id: str,
    payload: MinStockIn,
    db: Session = Depends(get_db),
):
    with atomic(db, operation="min_stock", rows=1):
        inventory_service.get_location_or_404(db, kind, location_id)
        _require_product(db, product_id)
        record = inventory_service.set_min_stock(db, kind, location_id, product_id, payload.min_stock)
        out = MinStockOut(
            location_kind=kind.value,
            location_id=location_id,
            product_id=product_id,
            quantity=record.quantity,
            min_stock=record.min_stock,
            is_low_stock=record.quantity <= record.min_stock,
        )
    return out
