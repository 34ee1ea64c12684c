from datetime import date
from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from retail_ledger.models.ledger import Inflow, Movement, Outflow, Sale, Withdraw

LedgerRecord = Inflow | Outflow | Movement | Sale | Withdraw
RecordT = TypeVar("RecordT", Inflow, Outflow, Movement, Sale, Withdraw)


def append(db: Session, record: RecordT) -> RecordT:
    """
    Persist one ledger record inside the caller's transaction.

    Inventory counters are not touched here; the transfer operations pair each
    append with the matching counter change. There is no update or
    delete counterpart.
    """
    db.add(record)
    db.flush()
    return record


def list_records(
    db: Session,
    model: type[RecordT],
    *,
    location_column: InstrumentedAttribute,
    location_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[RecordT], int]:
    count_stmt = select(func.count(model.id)).where(location_column == location_id)
    stmt = select(model).where(location_column == location_id)
    if start_date:
        count_stmt = count_stmt.where(model.date >= start_date)
        stmt = stmt.where(model.date >= start_date)
    if end_date:
        count_stmt = count_stmt.where(model.date <= end_date)
        stmt = stmt.where(model.date <= end_date)

    total = int(db.execute(count_stmt).scalar_one())
    rows = db.execute(
        stmt.order_by(model.date.desc(), model.created_at.desc(), model.id.desc()).offset(offset).limit(limit)
    ).scalars().all()
    return list(rows), total
