import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

import retail_ledger.models  # noqa: F401
from retail_ledger.core.deps import get_db
from retail_ledger.core.id_utils import generate_shortuuid
from retail_ledger.db.base import Base
from retail_ledger.main import app
from retail_ledger.models.product import Product
from retail_ledger.models.store import Company, SalesArea, Store, Warehouse


def _memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def test_context():
    engine = _memory_engine()
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client, session_local

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    engine = _memory_engine()
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def seed_store(db, *, name: str = "Tienda Centro") -> dict[str, str]:
    """One store with a warehouse, two sales areas, a provider and a product priced 8.50 / 19.99."""
    store = Store(id=generate_shortuuid(), name=name)
    db.add(store)
    db.flush()
    warehouse = Warehouse(id=generate_shortuuid(), store_id=store.id, name="Almacen")
    area = SalesArea(id=generate_shortuuid(), store_id=store.id, name="Piso 1")
    other_area = SalesArea(id=generate_shortuuid(), store_id=store.id, name="Piso 2")
    company = Company(id=generate_shortuuid(), name="Distribuidora Habana")
    product = Product(
        id=generate_shortuuid(),
        name="Refresco de cola",
        unit="un",
        category="bebidas",
        cost_price=Decimal("8.50"),
        sale_price=Decimal("19.99"),
        is_active=True,
    )
    db.add_all([warehouse, area, other_area, company, product])
    db.commit()
    return {
        "store_id": store.id,
        "warehouse_id": warehouse.id,
        "sales_area_id": area.id,
        "other_sales_area_id": other_area.id,
        "company_id": company.id,
        "product_id": product.id,
    }


@pytest.fixture()
def seeded(test_context):
    client, session_local = test_context
    with session_local() as db:
        ids = seed_store(db)
    return client, session_local, ids
