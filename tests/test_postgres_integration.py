import os
import threading
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker

import retail_ledger.models  # noqa: F401
from conftest import seed_store
from retail_ledger.core.errors import ExcessiveWithdrawalError, InsufficientStockError
from retail_ledger.db.base import Base
from retail_ledger.models.ledger import Sale
from retail_ledger.schemas.ledger import SaleRowIn, WithdrawRowIn
from retail_ledger.services import inventory_service, transfer_service, withdrawal_service
from retail_ledger.services.inventory_service import LocationKind


def _test_pg_url() -> str | None:
    return os.getenv("TEST_POSTGRES_DATABASE_URL")


@pytest.fixture()
def pg_sessions():
    url = _test_pg_url()
    if not url:
        pytest.skip("Set TEST_POSTGRES_DATABASE_URL to run Postgres integration tests.")
    engine = create_engine(url, pool_pre_ping=True, pool_size=10)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield session_local
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _run_concurrently(workers: int, target) -> list[object]:
    outcomes: list[object] = []
    lock = threading.Lock()
    barrier = threading.Barrier(workers)

    def run():
        barrier.wait()
        try:
            outcome = target()
        except Exception as exc:  # collected for assertions
            outcome = exc
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=run) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


@pytest.mark.integration
def test_concurrent_sales_never_oversell(pg_sessions):
    with pg_sessions() as db:
        ids = seed_store(db)
        inventory_service.increment(db, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"], 10)
        db.commit()

    row = SaleRowIn(
        user_id="dependiente",
        sales_area_id=ids["sales_area_id"],
        pay_method="EFECTIVO",
        product_id=ids["product_id"],
        date="20/02/2024",
        quantity="3",
    )

    def sell():
        with pg_sessions() as db:
            return transfer_service.apply_sales(db, [row])

    outcomes = _run_concurrently(5, sell)

    committed = [o for o in outcomes if isinstance(o, transfer_service.BatchResult)]
    rejected = [o for o in outcomes if isinstance(o, InsufficientStockError)]
    assert len(committed) == 3
    assert len(rejected) == 2
    with pg_sessions() as db:
        assert inventory_service.get_quantity(db, LocationKind.SALES_AREA, ids["sales_area_id"], ids["product_id"]) == 1


@pytest.mark.integration
def test_concurrent_first_arrivals_share_one_record(pg_sessions):
    with pg_sessions() as db:
        ids = seed_store(db)

    def receive():
        with pg_sessions() as db:
            inventory_service.increment(db, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"], 2)
            db.commit()
            return True

    outcomes = _run_concurrently(6, receive)

    assert outcomes == [True] * 6
    with pg_sessions() as db:
        assert inventory_service.get_quantity(db, LocationKind.WAREHOUSE, ids["warehouse_id"], ids["product_id"]) == 12


@pytest.mark.integration
def test_concurrent_withdrawals_respect_cash_on_hand(pg_sessions):
    with pg_sessions() as db:
        ids = seed_store(db)
        sale = Sale(
            id="cash-sale",
            sales_area_id=ids["sales_area_id"],
            pay_method="EFECTIVO",
            product_id=ids["product_id"],
            quantity=1,
            cost_amount=Decimal("40.00"),
            sale_amount=Decimal("100.00"),
            date=date(2024, 2, 20),
            user_id="dependiente",
        )
        db.add(sale)
        db.commit()

    row = WithdrawRowIn(user_id="cajero", sales_area_id=ids["sales_area_id"], date="20/02/2024", amount="40.00")

    def take_cash():
        with pg_sessions() as db:
            return withdrawal_service.apply_withdrawals(db, [row])

    outcomes = _run_concurrently(4, take_cash)

    assert sum(isinstance(o, ExcessiveWithdrawalError) for o in outcomes) == 2
    with pg_sessions() as db:
        position = withdrawal_service.available_cash(db, ids["sales_area_id"], date(2024, 2, 20))
        assert position.available_cash == Decimal("20.00")


@pytest.mark.integration
def test_alembic_upgrade_downgrade_smoke():
    url = _test_pg_url()
    if not url:
        pytest.skip("Set TEST_POSTGRES_DATABASE_URL to run migration smoke tests.")
    if os.getenv("ALLOW_DESTRUCTIVE_MIGRATION_TESTS") != "1":
        pytest.skip("Set ALLOW_DESTRUCTIVE_MIGRATION_TESTS=1 for downgrade smoke test.")

    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))

    previous_database_url = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = url
    try:
        command.upgrade(alembic_cfg, "head")
        engine = create_engine(url)
        table_names = set(inspect(engine).get_table_names())
        with engine.connect() as conn:
            assert conn.execute(text("SELECT 1")).scalar_one() == 1
        engine.dispose()
        assert {"warehouse_inventory", "sales_area_inventory", "inflows", "movements", "withdraws"} <= table_names
        command.downgrade(alembic_cfg, "base")
        command.upgrade(alembic_cfg, "head")
    finally:
        if previous_database_url is None:
            os.environ.pop("DATABASE_URL", None)
        else:
            os.environ["DATABASE_URL"] = previous_database_url
