"""
Transaction boundary for ledger batches.

A batch either commits every row or none of them: any exception inside the
block rolls the session back before it propagates. Database failures are
logged with their detail and surfaced as a generic ``StorageError``.
"""

import logging
import time
import traceback
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from retail_ledger.core.errors import LedgerError, StorageError
from retail_ledger.core.observability import log_event


@contextmanager
def atomic(db: Session, *, operation: str, rows: int) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
        db.commit()
    except LedgerError as exc:
        db.rollback()
        log_event(
            "batch_rejected",
            operation=operation,
            rows=rows,
            code=exc.code,
            message=exc.message,
        )
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        log_event(
            "batch_storage_error",
            level=logging.ERROR,
            operation=operation,
            rows=rows,
            error=str(exc),
            traceback=traceback.format_exc(limit=10),
        )
        raise StorageError() from exc
    except Exception:
        db.rollback()
        raise

    log_event(
        "batch_committed",
        operation=operation,
        rows=rows,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
