import pytest

from conftest import seed_store
from retail_ledger.core.errors import InsufficientStockError
from retail_ledger.schemas.ledger import SaleRowIn
from retail_ledger.services import inventory_service, transfer_service
from retail_ledger.services.inventory_service import LocationKind
from retail_ledger.services.staging import PendingBatch


def test_pending_batch_edits_by_position():
    batch = PendingBatch()
    batch.add("a")
    batch.add("b")
    assert batch.add("c") == 2

    assert batch.edit(1, "B") == "b"
    assert batch.remove(0) == "a"
    assert list(batch) == ["B", "c"]
    assert len(batch) == 2

    batch.clear()
    assert len(batch) == 0
    with pytest.raises(ValueError):
        batch.submit(lambda rows: rows)


def _sale_row(ids, quantity: str) -> SaleRowIn:
    return SaleRowIn(
        user_id="dependiente",
        sales_area_id=ids["sales_area_id"],
        pay_method="ENZONA",
        product_id=ids["product_id"],
        date="20/02/2024",
        quantity=quantity,
    )


def test_submit_clears_only_after_commit(db_session):
    ids = seed_store(db_session)
    inventory_service.increment(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"], 5)
    db_session.commit()

    batch = PendingBatch([_sale_row(ids, "3"), _sale_row(ids, "3")])
    with pytest.raises(InsufficientStockError):
        batch.submit(lambda rows: transfer_service.apply_sales(db_session, rows))
    assert len(batch) == 2

    batch.edit(1, _sale_row(ids, "2"))
    result = batch.submit(lambda rows: transfer_service.apply_sales(db_session, rows))

    assert result.count == 2
    assert len(batch) == 0
    assert inventory_service.get_quantity(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"]) == 0
