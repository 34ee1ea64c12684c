"""
Inventory transfer operations: warehouse inflows and outflows, sales area
movements and sales.

Every operation takes an ordered batch of rows and runs it inside one
transaction. Rows are parsed and their references resolved first, so a
malformed row rejects the batch before anything is written; the rows are then
applied in submission order, which means two rows draining the same counter
are checked against each other.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from retail_ledger.core.errors import (
    InvalidDestinationError,
    InvalidQuantityError,
    LocationNotFoundError,
    ProductNotFoundError,
)
from retail_ledger.core.id_utils import generate_document_number, generate_shortuuid
from retail_ledger.core.money import MAX_MONEY, to_money
from retail_ledger.models.ledger import Inflow, Movement, Outflow, Sale
from retail_ledger.models.product import Product
from retail_ledger.models.store import Company, SalesArea, Store, Warehouse
from retail_ledger.schemas.ledger import InflowRowIn, MovementRowIn, OutflowRowIn, SaleRowIn
from retail_ledger.services import inventory_service, ledger_service, pricing_service
from retail_ledger.services.inventory_service import LocationKind
from retail_ledger.services.pricing_service import Amounts
from retail_ledger.services.row_parsing import parse_ledger_date, parse_quantity
from retail_ledger.services.unit_of_work import atomic

INVOICE_PAY_METHOD = "CHEQUE"


@dataclass(frozen=True)
class StoreDestination:
    store_id: str


@dataclass(frozen=True)
class SalesAreaDestination:
    sales_area_id: str


@dataclass(frozen=True)
class WarehouseDestination:
    warehouse_id: str


@dataclass(frozen=True)
class NoDestination:
    pass


Destination = StoreDestination | SalesAreaDestination | WarehouseDestination | NoDestination


@dataclass(frozen=True)
class CompanySource:
    company_id: str
    invoice_number: str | None = None


@dataclass(frozen=True)
class StoreSource:
    store_id: str


InflowSource = CompanySource | StoreSource


@dataclass(frozen=True)
class BatchResult:
    operation: str
    record_ids: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.record_ids)


class _Lookup:
    """Per-batch cache of referenced catalog rows."""

    def __init__(self, db: Session):
        self.db = db
        self._cache: dict[tuple[type, str], object] = {}

    def _get(self, model: type, key: str):
        cache_key = (model, key)
        if cache_key not in self._cache:
            self._cache[cache_key] = self.db.get(model, key)
        return self._cache[cache_key]

    def product(self, product_id: str) -> Product:
        product = self._get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def location(self, model: type, kind: str, location_id: str):
        location = self._get(model, location_id)
        if location is None:
            raise LocationNotFoundError(kind, location_id)
        return location

    def warehouse(self, warehouse_id: str) -> Warehouse:
        return self.location(Warehouse, LocationKind.WAREHOUSE.value, warehouse_id)

    def sales_area(self, sales_area_id: str) -> SalesArea:
        return self.location(SalesArea, LocationKind.SALES_AREA.value, sales_area_id)

    def store(self, store_id: str) -> Store:
        return self.location(Store, "store", store_id)

    def company(self, company_id: str) -> Company:
        return self.location(Company, "company", company_id)


@dataclass
class _PreparedRow:
    user_id: str
    on_date: date
    product: Product
    quantity: int
    amounts: Amounts


def _prepare(lookup: _Lookup, row) -> _PreparedRow:
    on_date = parse_ledger_date(row.date)
    quantity = parse_quantity(row.quantity)
    product = lookup.product(row.product_id)
    amounts = pricing_service.compute_amounts(product, quantity)
    if amounts is None or max(amounts.cost_amount, amounts.sale_amount) > MAX_MONEY:
        raise InvalidQuantityError(row.quantity)
    return _PreparedRow(
        user_id=row.user_id,
        on_date=on_date,
        product=product,
        quantity=quantity,
        amounts=amounts,
    )


def _document_number(value: str | None, prefix: str) -> str:
    cleaned = (value or "").strip()
    return cleaned or generate_document_number(prefix)


def _override(value: Decimal | None, computed: Decimal) -> Decimal:
    return computed if value is None else to_money(value)


# Inflows


def inflow_source(row: InflowRowIn) -> InflowSource:
    if row.in_type == "FACTURA":
        return CompanySource(company_id=row.provider_id, invoice_number=row.invoice_number)
    return StoreSource(store_id=row.provider_id)


def apply_inflows(db: Session, rows: Sequence[InflowRowIn]) -> BatchResult:
    result = BatchResult(operation="inflow")
    with atomic(db, operation=result.operation, rows=len(rows)):
        lookup = _Lookup(db)
        prepared: list[tuple[InflowRowIn, _PreparedRow, InflowSource]] = []
        for row in rows:
            item = _prepare(lookup, row)
            lookup.warehouse(row.warehouse_id)
            source = inflow_source(row)
            if isinstance(source, CompanySource):
                lookup.company(source.company_id)
            else:
                lookup.store(source.store_id)
            prepared.append((row, item, source))

        for row, item, source in prepared:
            record = Inflow(
                id=generate_shortuuid(),
                warehouse_id=row.warehouse_id,
                in_type=row.in_type,
                in_number=_document_number(row.in_number, "IN"),
                product_id=item.product.id,
                quantity=item.quantity,
                cost_amount=_override(row.cost_amount, item.amounts.cost_amount),
                sale_amount=_override(row.sale_amount, item.amounts.sale_amount),
                date=item.on_date,
                user_id=item.user_id,
            )
            if isinstance(source, CompanySource):
                record.provider_company_id = source.company_id
                record.invoice_number = source.invoice_number
                record.pay_method = INVOICE_PAY_METHOD
            else:
                record.provider_store_id = source.store_id
            ledger_service.append(db, record)
            inventory_service.increment(db, LocationKind.WAREHOUSE, row.warehouse_id, item.product.id, item.quantity)
            result.record_ids.append(record.id)
    return result


# Outflows


def outflow_destination(row: OutflowRowIn) -> Destination:
    if row.out_type == "TRASLADO":
        return StoreDestination(store_id=row.destination_id)
    if row.out_type == "VALE":
        return SalesAreaDestination(sales_area_id=row.destination_id)
    return NoDestination()


def apply_outflows(db: Session, rows: Sequence[OutflowRowIn]) -> BatchResult:
    result = BatchResult(operation="outflow")
    with atomic(db, operation=result.operation, rows=len(rows)):
        lookup = _Lookup(db)
        prepared: list[tuple[OutflowRowIn, _PreparedRow, Destination]] = []
        for row in rows:
            item = _prepare(lookup, row)
            lookup.warehouse(row.warehouse_id)
            destination = outflow_destination(row)
            if isinstance(destination, StoreDestination):
                lookup.store(destination.store_id)
            elif isinstance(destination, SalesAreaDestination):
                lookup.sales_area(destination.sales_area_id)
            prepared.append((row, item, destination))

        for row, item, destination in prepared:
            inventory_service.decrement(db, LocationKind.WAREHOUSE, row.warehouse_id, item.product.id, item.quantity)
            record = Outflow(
                id=generate_shortuuid(),
                warehouse_id=row.warehouse_id,
                out_type=row.out_type,
                pay_method=row.pay_method,
                out_number=_document_number(row.out_number, "OUT"),
                product_id=item.product.id,
                quantity=item.quantity,
                cost_amount=item.amounts.cost_amount,
                sale_amount=item.amounts.sale_amount,
                date=item.on_date,
                user_id=item.user_id,
            )
            if isinstance(destination, StoreDestination):
                # Stock leaves this engine's books; the receiving store records its own inflow.
                record.destination_store_id = destination.store_id
            elif isinstance(destination, SalesAreaDestination):
                record.destination_sales_area_id = destination.sales_area_id
            ledger_service.append(db, record)
            if isinstance(destination, SalesAreaDestination):
                inventory_service.increment(
                    db, LocationKind.SALES_AREA, destination.sales_area_id, item.product.id, item.quantity
                )
            result.record_ids.append(record.id)
    return result


# Movements


def movement_destination(row: MovementRowIn) -> Destination:
    if row.movement_type == "DEVOLUCION":
        return WarehouseDestination(warehouse_id=row.destination_warehouse_id)
    return SalesAreaDestination(sales_area_id=row.destination_sales_area_id)


def apply_movements(db: Session, rows: Sequence[MovementRowIn]) -> BatchResult:
    result = BatchResult(operation="movement")
    with atomic(db, operation=result.operation, rows=len(rows)):
        lookup = _Lookup(db)
        prepared: list[tuple[MovementRowIn, _PreparedRow, Destination]] = []
        for row in rows:
            item = _prepare(lookup, row)
            lookup.sales_area(row.source_sales_area_id)
            destination = movement_destination(row)
            if isinstance(destination, WarehouseDestination):
                lookup.warehouse(destination.warehouse_id)
            else:
                if destination.sales_area_id == row.source_sales_area_id:
                    raise InvalidDestinationError(
                        f"Cannot move stock from sales area {destination.sales_area_id} to itself"
                    )
                lookup.sales_area(destination.sales_area_id)
            prepared.append((row, item, destination))

        for row, item, destination in prepared:
            inventory_service.decrement(
                db, LocationKind.SALES_AREA, row.source_sales_area_id, item.product.id, item.quantity
            )
            movement = Movement(
                id=generate_shortuuid(),
                source_sales_area_id=row.source_sales_area_id,
                movement_type=row.movement_type,
                movement_number=_document_number(row.movement_number, "MOV"),
                product_id=item.product.id,
                quantity=item.quantity,
                cost_amount=item.amounts.cost_amount,
                sale_amount=item.amounts.sale_amount,
                date=item.on_date,
                user_id=item.user_id,
            )
            if isinstance(destination, WarehouseDestination):
                movement.destination_warehouse_id = destination.warehouse_id
                ledger_service.append(db, movement)
                ledger_service.append(db, _return_inflow(movement, destination.warehouse_id))
                inventory_service.increment(
                    db, LocationKind.WAREHOUSE, destination.warehouse_id, item.product.id, item.quantity
                )
            else:
                movement.destination_sales_area_id = destination.sales_area_id
                ledger_service.append(db, movement)
                inventory_service.increment(
                    db, LocationKind.SALES_AREA, destination.sales_area_id, item.product.id, item.quantity
                )
            result.record_ids.append(movement.id)
    return result


def _return_inflow(movement: Movement, warehouse_id: str) -> Inflow:
    """The warehouse-side record of a DEVOLUCION, linked back to its movement."""
    return Inflow(
        id=generate_shortuuid(),
        warehouse_id=warehouse_id,
        in_type="DEVOLUCION",
        source_movement_id=movement.id,
        in_number=movement.movement_number,
        product_id=movement.product_id,
        quantity=movement.quantity,
        cost_amount=movement.cost_amount,
        sale_amount=movement.sale_amount,
        date=movement.date,
        user_id=movement.user_id,
    )


# Sales


def apply_sales(db: Session, rows: Sequence[SaleRowIn]) -> BatchResult:
    result = BatchResult(operation="sale")
    with atomic(db, operation=result.operation, rows=len(rows)):
        lookup = _Lookup(db)
        prepared: list[tuple[SaleRowIn, _PreparedRow]] = []
        for row in rows:
            item = _prepare(lookup, row)
            lookup.sales_area(row.sales_area_id)
            prepared.append((row, item))

        for row, item in prepared:
            inventory_service.decrement(db, LocationKind.SALES_AREA, row.sales_area_id, item.product.id, item.quantity)
            record = Sale(
                id=generate_shortuuid(),
                sales_area_id=row.sales_area_id,
                pay_method=row.pay_method,
                product_id=item.product.id,
                quantity=item.quantity,
                cost_amount=item.amounts.cost_amount,
                sale_amount=item.amounts.sale_amount,
                date=item.on_date,
                user_id=item.user_id,
            )
            ledger_service.append(db, record)
            result.record_ids.append(record.id)
    return result
