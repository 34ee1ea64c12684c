from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from retail_ledger.core.config import settings
from retail_ledger.core.errors import InsufficientStockError, InvalidQuantityError, LocationNotFoundError
from retail_ledger.core.id_utils import generate_shortuuid
from retail_ledger.core.money import to_money
from retail_ledger.models.inventory import SalesAreaInventory, WarehouseInventory
from retail_ledger.models.product import Product
from retail_ledger.models.store import SalesArea, Warehouse


class LocationKind(str, Enum):
    WAREHOUSE = "warehouse"
    SALES_AREA = "sales_area"


InventoryRecord = WarehouseInventory | SalesAreaInventory

_INVENTORY_MODELS: dict[LocationKind, type[InventoryRecord]] = {
    LocationKind.WAREHOUSE: WarehouseInventory,
    LocationKind.SALES_AREA: SalesAreaInventory,
}

_LOCATION_MODELS: dict[LocationKind, type[Warehouse] | type[SalesArea]] = {
    LocationKind.WAREHOUSE: Warehouse,
    LocationKind.SALES_AREA: SalesArea,
}


@dataclass(frozen=True)
class InventoryLine:
    location_id: str
    product_id: str
    product_name: str
    unit: str
    category: str | None
    quantity: int
    min_stock: int
    cost_price: Decimal
    sale_price: Decimal
    cost_value: Decimal
    sale_value: Decimal
    is_low_stock: bool


def inventory_model(kind: LocationKind) -> type[InventoryRecord]:
    return _INVENTORY_MODELS[LocationKind(kind)]


def get_location_or_404(db: Session, kind: LocationKind, location_id: str) -> Warehouse | SalesArea:
    model = _LOCATION_MODELS[LocationKind(kind)]
    location = db.get(model, location_id)
    if location is None:
        raise LocationNotFoundError(LocationKind(kind).value, location_id)
    return location


def _require_positive_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidQuantityError(amount)


def _record_stmt(kind: LocationKind, location_id: str, product_id: str):
    model = inventory_model(kind)
    return select(model).where(model.location_id == location_id, model.product_id == product_id)


def _locked_record(db: Session, kind: LocationKind, location_id: str, product_id: str) -> InventoryRecord | None:
    # populate_existing: the row may already sit in the identity map with values read before the lock.
    stmt = _record_stmt(kind, location_id, product_id).with_for_update().execution_options(populate_existing=True)
    return db.execute(stmt).scalar_one_or_none()


def _insert_if_absent(db: Session, kind: LocationKind, location_id: str, product_id: str) -> None:
    model = inventory_model(kind)
    values = {
        "id": generate_shortuuid(),
        "location_id": location_id,
        "product_id": product_id,
        "quantity": 0,
        "min_stock": settings.low_stock_default_threshold,
    }
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = pg_insert(model).values(**values).on_conflict_do_nothing(
            index_elements=["location_id", "product_id"]
        )
    elif dialect == "sqlite":
        stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing(
            index_elements=["location_id", "product_id"]
        )
    else:
        existing = db.execute(_record_stmt(kind, location_id, product_id)).scalar_one_or_none()
        if existing is None:
            db.add(model(**values))
            db.flush()
        return
    db.execute(stmt)


def get_quantity(db: Session, kind: LocationKind, location_id: str, product_id: str) -> int:
    model = inventory_model(kind)
    quantity = db.execute(
        select(model.quantity).where(model.location_id == location_id, model.product_id == product_id)
    ).scalar_one_or_none()
    return int(quantity or 0)


def increment(db: Session, kind: LocationKind, location_id: str, product_id: str, amount: int) -> int:
    _require_positive_amount(amount)
    _insert_if_absent(db, kind, location_id, product_id)
    record = _locked_record(db, kind, location_id, product_id)
    record.quantity = record.quantity + amount
    db.flush()
    return record.quantity


def decrement(db: Session, kind: LocationKind, location_id: str, product_id: str, amount: int) -> int:
    _require_positive_amount(amount)
    record = _locked_record(db, kind, location_id, product_id)
    available = record.quantity if record is not None else 0
    if record is None or available < amount:
        raise InsufficientStockError(
            available=available,
            requested=amount,
            location_kind=LocationKind(kind).value,
            location_id=location_id,
            product_id=product_id,
        )
    record.quantity = available - amount
    db.flush()
    return record.quantity


def is_low_stock(db: Session, kind: LocationKind, location_id: str, product_id: str) -> bool:
    record = db.execute(_record_stmt(kind, location_id, product_id)).scalar_one_or_none()
    if record is None:
        return True
    return record.quantity <= record.min_stock


def set_min_stock(
    db: Session,
    kind: LocationKind,
    location_id: str,
    product_id: str,
    min_stock: int,
) -> InventoryRecord:
    if isinstance(min_stock, bool) or not isinstance(min_stock, int) or min_stock < 0:
        raise InvalidQuantityError(min_stock)
    _insert_if_absent(db, kind, location_id, product_id)
    record = _locked_record(db, kind, location_id, product_id)
    record.min_stock = min_stock
    db.flush()
    return record


def list_location_inventory(
    db: Session,
    kind: LocationKind,
    location_id: str,
    *,
    in_stock_only: bool = False,
) -> list[InventoryLine]:
    model = inventory_model(kind)
    stmt = (
        select(model, Product)
        .join(Product, Product.id == model.product_id)
        .where(model.location_id == location_id)
    )
    if in_stock_only:
        stmt = stmt.where(model.quantity > 0)
    rows = db.execute(stmt.order_by(Product.name.asc())).all()

    lines: list[InventoryLine] = []
    for record, product in rows:
        cost_price = to_money(product.cost_price)
        sale_price = to_money(product.sale_price)
        lines.append(
            InventoryLine(
                location_id=record.location_id,
                product_id=product.id,
                product_name=product.name,
                unit=product.unit,
                category=product.category,
                quantity=record.quantity,
                min_stock=record.min_stock,
                cost_price=cost_price,
                sale_price=sale_price,
                cost_value=to_money(cost_price * record.quantity),
                sale_value=to_money(sale_price * record.quantity),
                is_low_stock=record.quantity <= record.min_stock,
            )
        )
    return lines
