from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from retail_ledger.core.config import settings
from retail_ledger.core.errors import ExcessiveWithdrawalError, LocationNotFoundError
from retail_ledger.core.id_utils import generate_shortuuid
from retail_ledger.core.money import to_money
from retail_ledger.models.ledger import Sale, Withdraw
from retail_ledger.models.store import SalesArea
from retail_ledger.schemas.ledger import WithdrawRowIn
from retail_ledger.services import ledger_service
from retail_ledger.services.inventory_service import LocationKind
from retail_ledger.services.row_parsing import parse_amount, parse_ledger_date
from retail_ledger.services.transfer_service import BatchResult
from retail_ledger.services.unit_of_work import atomic


@dataclass(frozen=True)
class CashPosition:
    sales_area_id: str
    on_date: date
    total_cash_sales: Decimal
    total_withdrawals: Decimal

    @property
    def available_cash(self) -> Decimal:
        return to_money(self.total_cash_sales - self.total_withdrawals)


def available_cash(db: Session, sales_area_id: str, on_date: date) -> CashPosition:
    """
    Cash on hand for one sales area and calendar day.

    Only sales paid with the configured cash method count; card and mobile
    payments never reach the drawer.
    """
    cash_sales = db.execute(
        select(func.coalesce(func.sum(Sale.sale_amount), 0)).where(
            Sale.sales_area_id == sales_area_id,
            Sale.date == on_date,
            Sale.pay_method == settings.cash_pay_method,
        )
    ).scalar_one()
    withdrawals = db.execute(
        select(func.coalesce(func.sum(Withdraw.amount), 0)).where(
            Withdraw.sales_area_id == sales_area_id,
            Withdraw.date == on_date,
        )
    ).scalar_one()
    return CashPosition(
        sales_area_id=sales_area_id,
        on_date=on_date,
        total_cash_sales=to_money(cash_sales),
        total_withdrawals=to_money(withdrawals),
    )


def _lock_sales_area(db: Session, sales_area_id: str) -> SalesArea:
    # Serializes withdrawals per sales area so two drawers cannot both pass the same balance check.
    stmt = select(SalesArea).where(SalesArea.id == sales_area_id).with_for_update()
    area = db.execute(stmt).scalar_one_or_none()
    if area is None:
        raise LocationNotFoundError(LocationKind.SALES_AREA.value, sales_area_id)
    return area


def withdraw(db: Session, *, sales_area_id: str, on_date: date, amount: Decimal, user_id: str) -> Withdraw:
    _lock_sales_area(db, sales_area_id)
    position = available_cash(db, sales_area_id, on_date)
    if amount > position.available_cash:
        raise ExcessiveWithdrawalError(
            amount=amount,
            available=position.available_cash,
            on_date=on_date,
            date_format=settings.ledger_date_format,
        )
    record = Withdraw(
        id=generate_shortuuid(),
        sales_area_id=sales_area_id,
        amount=amount,
        date=on_date,
        user_id=user_id,
    )
    return ledger_service.append(db, record)


def apply_withdrawals(db: Session, rows: Sequence[WithdrawRowIn]) -> BatchResult:
    result = BatchResult(operation="withdrawal")
    with atomic(db, operation=result.operation, rows=len(rows)):
        parsed = [(row, parse_ledger_date(row.date), parse_amount(row.amount)) for row in rows]
        for row, on_date, amount in parsed:
            record = withdraw(
                db,
                sales_area_id=row.sales_area_id,
                on_date=on_date,
                amount=amount,
                user_id=row.user_id,
            )
            result.record_ids.append(record.id)
    return result
