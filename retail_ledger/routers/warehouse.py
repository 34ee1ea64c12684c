from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retail_ledger.core.api_docs import error_responses
from retail_ledger.core.deps import get_db
from retail_ledger.models.ledger import Inflow, Outflow
from retail_ledger.schemas.common import build_pagination
from retail_ledger.schemas.ledger import (
    BatchCommitOut,
    InflowBatchIn,
    InflowListOut,
    InflowOut,
    OutflowBatchIn,
    OutflowListOut,
    OutflowOut,
)
from retail_ledger.services import ledger_service, transfer_service
from retail_ledger.services.inventory_service import LocationKind, get_location_or_404

router = APIRouter(prefix="/warehouse", tags=["warehouse"])


def _inflow_out(row: Inflow) -> InflowOut:
    return InflowOut(
        id=row.id,
        warehouse_id=row.warehouse_id,
        in_type=row.in_type,
        provider_company_id=row.provider_company_id,
        provider_store_id=row.provider_store_id,
        source_movement_id=row.source_movement_id,
        pay_method=row.pay_method,
        invoice_number=row.invoice_number,
        in_number=row.in_number,
        product_id=row.product_id,
        quantity=row.quantity,
        cost_amount=float(row.cost_amount),
        sale_amount=float(row.sale_amount),
        date=row.date,
        user_id=row.user_id,
        created_at=row.created_at,
    )


def _outflow_out(row: Outflow) -> OutflowOut:
    return OutflowOut(
        id=row.id,
        warehouse_id=row.warehouse_id,
        out_type=row.out_type,
        destination_store_id=row.destination_store_id,
        destination_sales_area_id=row.destination_sales_area_id,
        pay_method=row.pay_method,
        out_number=row.out_number,
        product_id=row.product_id,
        quantity=row.quantity,
        cost_amount=float(row.cost_amount),
        sale_amount=float(row.sale_amount),
        date=row.date,
        user_id=row.user_id,
        created_at=row.created_at,
    )


@router.post(
    "/inflows",
    response_model=BatchCommitOut,
    summary="Receive stock into warehouses",
    description="Commits every row or none. Each row appends an inflow record and adds its quantity to the warehouse.",
    responses=error_responses(400, 404, 422, 500),
)
def commit_inflows(payload: InflowBatchIn, db: Session = Depends(get_db)):
    result = transfer_service.apply_inflows(db, payload.rows)
    return BatchCommitOut(operation=result.operation, count=result.count, record_ids=result.record_ids)


@router.post(
    "/outflows",
    response_model=BatchCommitOut,
    summary="Dispatch stock out of warehouses",
    description=(
        "Commits every row or none. VALE rows move the quantity into the destination sales area; "
        "TRASLADO, VENTA and BAJA rows only take it out of the warehouse."
    ),
    responses=error_responses(400, 404, 409, 422, 500),
)
def commit_outflows(payload: OutflowBatchIn, db: Session = Depends(get_db)):
    result = transfer_service.apply_outflows(db, payload.rows)
    return BatchCommitOut(operation=result.operation, count=result.count, record_ids=result.record_ids)


@router.get(
    "/{warehouse_id}/inflows",
    response_model=InflowListOut,
    summary="List inflow records for a warehouse",
    responses=error_responses(404, 422, 500),
)
def list_inflows(
    warehouse_id: str,
    start_date: date | None = Query(default=None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(default=None, description="Inclusive upper bound (YYYY-MM-DD)"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.WAREHOUSE, warehouse_id)
    rows, total = ledger_service.list_records(
        db,
        Inflow,
        location_column=Inflow.warehouse_id,
        location_id=warehouse_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = [_inflow_out(row) for row in rows]
    return InflowListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )


@router.get(
    "/{warehouse_id}/outflows",
    response_model=OutflowListOut,
    summary="List outflow records for a warehouse",
    responses=error_responses(404, 422, 500),
)
def list_outflows(
    warehouse_id: str,
    start_date: date | None = Query(default=None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(default=None, description="Inclusive upper bound (YYYY-MM-DD)"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.WAREHOUSE, warehouse_id)
    rows, total = ledger_service.list_records(
        db,
        Outflow,
        location_column=Outflow.warehouse_id,
        location_id=warehouse_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = [_outflow_out(row) for row in rows]
    return OutflowListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )
