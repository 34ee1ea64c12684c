from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retail_ledger.core.api_docs import error_responses
from retail_ledger.core.deps import get_db
from retail_ledger.models.ledger import Movement, Sale, Withdraw
from retail_ledger.schemas.common import build_pagination
from retail_ledger.schemas.ledger import (
    AvailableCashOut,
    BatchCommitOut,
    MovementBatchIn,
    MovementListOut,
    MovementOut,
    SaleBatchIn,
    SaleListOut,
    SaleOut,
    WithdrawBatchIn,
    WithdrawListOut,
    WithdrawOut,
)
from retail_ledger.services import ledger_service, transfer_service, withdrawal_service
from retail_ledger.services.inventory_service import LocationKind, get_location_or_404
from retail_ledger.services.row_parsing import parse_ledger_date

router = APIRouter(prefix="/sales-area", tags=["sales-area"])


def _movement_out(row: Movement) -> MovementOut:
    return MovementOut(
        id=row.id,
        movement_type=row.movement_type,
        source_sales_area_id=row.source_sales_area_id,
        destination_warehouse_id=row.destination_warehouse_id,
        destination_sales_area_id=row.destination_sales_area_id,
        movement_number=row.movement_number,
        product_id=row.product_id,
        quantity=row.quantity,
        cost_amount=float(row.cost_amount),
        sale_amount=float(row.sale_amount),
        date=row.date,
        user_id=row.user_id,
        created_at=row.created_at,
    )


def _sale_out(row: Sale) -> SaleOut:
    return SaleOut(
        id=row.id,
        sales_area_id=row.sales_area_id,
        pay_method=row.pay_method,
        product_id=row.product_id,
        quantity=row.quantity,
        cost_amount=float(row.cost_amount),
        sale_amount=float(row.sale_amount),
        profit=float(row.sale_amount - row.cost_amount),
        date=row.date,
        user_id=row.user_id,
        created_at=row.created_at,
    )


def _withdraw_out(row: Withdraw) -> WithdrawOut:
    return WithdrawOut(
        id=row.id,
        sales_area_id=row.sales_area_id,
        amount=float(row.amount),
        date=row.date,
        user_id=row.user_id,
        created_at=row.created_at,
    )


@router.post(
    "/movements",
    response_model=BatchCommitOut,
    summary="Move stock out of sales areas",
    description=(
        "Commits every row or none. DEVOLUCION returns stock to a warehouse and also records the "
        "matching warehouse inflow; TRASLADO moves stock to another sales area."
    ),
    responses=error_responses(400, 404, 409, 422, 500),
)
def commit_movements(payload: MovementBatchIn, db: Session = Depends(get_db)):
    result = transfer_service.apply_movements(db, payload.rows)
    return BatchCommitOut(operation=result.operation, count=result.count, record_ids=result.record_ids)


@router.post(
    "/sales",
    response_model=BatchCommitOut,
    summary="Record sales",
    description="Commits every row or none. Amounts are valued at the product's current prices.",
    responses=error_responses(400, 404, 409, 422, 500),
)
def commit_sales(payload: SaleBatchIn, db: Session = Depends(get_db)):
    result = transfer_service.apply_sales(db, payload.rows)
    return BatchCommitOut(operation=result.operation, count=result.count, record_ids=result.record_ids)


@router.post(
    "/withdrawals",
    response_model=BatchCommitOut,
    summary="Withdraw cash from sales areas",
    description="Commits every row or none. A withdrawal cannot exceed the cash sales of its day minus earlier withdrawals.",
    responses=error_responses(400, 404, 409, 422, 500),
)
def commit_withdrawals(payload: WithdrawBatchIn, db: Session = Depends(get_db)):
    result = withdrawal_service.apply_withdrawals(db, payload.rows)
    return BatchCommitOut(operation=result.operation, count=result.count, record_ids=result.record_ids)


@router.get(
    "/{sales_area_id}/available-cash",
    response_model=AvailableCashOut,
    summary="Cash available for withdrawal on a day",
    description="Advisory only; the authoritative check runs when the withdrawal is committed.",
    responses=error_responses(400, 404, 422, 500),
)
def get_available_cash(
    sales_area_id: str,
    on_date: str = Query(alias="date", description="Calendar date formatted as dd/MM/yyyy"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.SALES_AREA, sales_area_id)
    position = withdrawal_service.available_cash(db, sales_area_id, parse_ledger_date(on_date))
    return AvailableCashOut(
        sales_area_id=sales_area_id,
        date=position.on_date,
        total_cash_sales=float(position.total_cash_sales),
        total_withdrawals=float(position.total_withdrawals),
        available_cash=float(position.available_cash),
    )


@router.get(
    "/{sales_area_id}/movements",
    response_model=MovementListOut,
    summary="List movements out of a sales area",
    responses=error_responses(404, 422, 500),
)
def list_movements(
    sales_area_id: str,
    start_date: date | None = Query(default=None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(default=None, description="Inclusive upper bound (YYYY-MM-DD)"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.SALES_AREA, sales_area_id)
    rows, total = ledger_service.list_records(
        db,
        Movement,
        location_column=Movement.source_sales_area_id,
        location_id=sales_area_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = [_movement_out(row) for row in rows]
    return MovementListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )


@router.get(
    "/{sales_area_id}/sales",
    response_model=SaleListOut,
    summary="List sales of a sales area",
    responses=error_responses(404, 422, 500),
)
def list_sales(
    sales_area_id: str,
    start_date: date | None = Query(default=None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(default=None, description="Inclusive upper bound (YYYY-MM-DD)"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.SALES_AREA, sales_area_id)
    rows, total = ledger_service.list_records(
        db,
        Sale,
        location_column=Sale.sales_area_id,
        location_id=sales_area_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = [_sale_out(row) for row in rows]
    return SaleListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )


@router.get(
    "/{sales_area_id}/withdrawals",
    response_model=WithdrawListOut,
    summary="List cash withdrawals of a sales area",
    responses=error_responses(404, 422, 500),
)
def list_withdrawals(
    sales_area_id: str,
    start_date: date | None = Query(default=None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(default=None, description="Inclusive upper bound (YYYY-MM-DD)"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    get_location_or_404(db, LocationKind.SALES_AREA, sales_area_id)
    rows, total = ledger_service.list_records(
        db,
        Withdraw,
        location_column=Withdraw.sales_area_id,
        location_id=sales_area_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = [_withdraw_out(row) for row in rows]
    return WithdrawListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )
