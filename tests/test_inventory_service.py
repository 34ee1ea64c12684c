import pytest

from conftest import seed_store
from retail_ledger.core.errors import InsufficientStockError, InvalidQuantityError, LocationNotFoundError
from retail_ledger.services import inventory_service
from retail_ledger.services.inventory_service import LocationKind


def test_increment_creates_record_on_first_arrival(db_session):
    ids = seed_store(db_session)

    assert inventory_service.get_quantity(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"]) == 0
    assert inventory_service.increment(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"], 7) == 7
    assert inventory_service.increment(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"], 3) == 10
    db_session.commit()

    assert inventory_service.get_quantity(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"]) == 10
    # The sales area counter is a separate record.
    assert inventory_service.get_quantity(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"]) == 0


def test_decrement_rejects_overdraw_and_keeps_quantity(db_session):
    ids = seed_store(db_session)
    inventory_service.increment(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"], 10)
    db_session.commit()

    with pytest.raises(InsufficientStockError) as exc_info:
        inventory_service.decrement(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"], 15)

    assert exc_info.value.available == 10
    assert exc_info.value.requested == 15
    assert "Available: 10, requested: 15" in exc_info.value.message
    db_session.rollback()
    assert inventory_service.get_quantity(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"]) == 10

    assert inventory_service.decrement(db_session, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"], 10) == 0


def test_decrement_without_record_reports_zero_available(db_session):
    ids = seed_store(db_session)

    with pytest.raises(InsufficientStockError) as exc_info:
        inventory_service.decrement(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"], 1)

    assert exc_info.value.available == 0


@pytest.mark.parametrize("amount", [0, -4, True, 2.5])
def test_counter_changes_require_positive_whole_amounts(db_session, amount):
    ids = seed_store(db_session)

    with pytest.raises(InvalidQuantityError):
        inventory_service.increment(db_session, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"], amount)


def test_low_stock_flag_follows_min_stock(db_session):
    ids = seed_store(db_session)
    warehouse_id, product_id = ids["warehouse_id"], ids["product_id"]

    # No record yet counts as zero against a zero threshold.
    assert inventory_service.is_low_stock(db_session, LocationKind.WAREHOUSE, warehouse_id, product_id) is True

    inventory_service.increment(db_session, LocationKind.WAREHOUSE, warehouse_id, product_id, 6)
    assert inventory_service.is_low_stock(db_session, LocationKind.WAREHOUSE, warehouse_id, product_id) is False

    record = inventory_service.set_min_stock(db_session, LocationKind.WAREHOUSE, warehouse_id, product_id, 6)
    assert record.min_stock == 6
    assert inventory_service.is_low_stock(db_session, LocationKind.WAREHOUSE, warehouse_id, product_id) is True


def test_listing_filters_in_stock_and_values_lines(db_session):
    ids = seed_store(db_session)
    area_id, product_id = ids["sales_area_id"], ids["product_id"]

    inventory_service.set_min_stock(db_session, LocationKind.SALES_AREA, area_id, product_id, 2)
    db_session.commit()
    assert len(inventory_service.list_location_inventory(db_session, LocationKind.SALES_AREA, area_id)) == 1
    assert inventory_service.list_location_inventory(db_session, LocationKind.SALES_AREA, area_id, in_stock_only=True) == []

    inventory_service.increment(db_session, LocationKind.SALES_AREA, area_id, product_id, 4)
    db_session.commit()
    [line] = inventory_service.list_location_inventory(db_session, LocationKind.SALES_AREA, area_id, in_stock_only=True)
    assert line.quantity == 4
    assert str(line.cost_value) == "34.00"
    assert str(line.sale_value) == "79.96"
    assert line.is_low_stock is False


def test_unknown_location_raises_not_found(db_session):
    with pytest.raises(LocationNotFoundError) as exc_info:
        inventory_service.get_location_or_404(db_session, LocationKind.SALES_AREA, "missing")
    assert exc_info.value.message == "Sales area not found: missing"
