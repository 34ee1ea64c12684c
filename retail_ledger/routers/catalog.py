from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from retail_ledger.core.api_docs import error_responses
from retail_ledger.core.deps import get_db
from retail_ledger.core.errors import LocationNotFoundError, ProductNotFoundError
from retail_ledger.core.id_utils import generate_shortuuid
from retail_ledger.core.money import to_money
from retail_ledger.models.product import Product
from retail_ledger.models.store import Company, SalesArea, Store, Warehouse
from retail_ledger.schemas.catalog import (
    CompanyCreate,
    CompanyListOut,
    CompanyOut,
    CreatedOut,
    LocationCreate,
    LocationOut,
    ProductCreate,
    ProductListOut,
    ProductOut,
    ProductUpdate,
    StoreCreate,
    StoreListOut,
    StoreOut,
)
from retail_ledger.schemas.common import build_pagination

router = APIRouter(tags=["catalog"])


def _get_store(db: Session, store_id: str) -> Store:
    store = db.get(Store, store_id)
    if store is None:
        raise LocationNotFoundError("store", store_id)
    return store


def _product_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        name=product.name,
        unit=product.unit,
        category=product.category,
        cost_price=float(product.cost_price),
        sale_price=float(product.sale_price),
        is_active=product.is_active,
        created_at=product.created_at,
    )


@router.post(
    "/stores",
    response_model=CreatedOut,
    status_code=201,
    summary="Create a store",
    responses=error_responses(409, 422, 500),
)
def create_store(payload: StoreCreate, db: Session = Depends(get_db)):
    existing = db.execute(select(Store.id).where(Store.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="Store name already exists")
    store = Store(id=generate_shortuuid(), name=payload.name)
    db.add(store)
    db.commit()
    return CreatedOut(id=store.id)


@router.get(
    "/stores",
    response_model=StoreListOut,
    summary="List stores with their warehouses and sales areas",
    responses=error_responses(500),
)
def list_stores(db: Session = Depends(get_db)):
    stores = db.execute(select(Store).order_by(Store.name.asc())).scalars().all()
    warehouses = db.execute(select(Warehouse).order_by(Warehouse.name.asc())).scalars().all()
    sales_areas = db.execute(select(SalesArea).order_by(SalesArea.name.asc())).scalars().all()

    warehouses_by_store: dict[str, list[LocationOut]] = {}
    for row in warehouses:
        warehouses_by_store.setdefault(row.store_id, []).append(
            LocationOut(id=row.id, store_id=row.store_id, name=row.name)
        )
    areas_by_store: dict[str, list[LocationOut]] = {}
    for row in sales_areas:
        areas_by_store.setdefault(row.store_id, []).append(
            LocationOut(id=row.id, store_id=row.store_id, name=row.name)
        )

    return StoreListOut(
        items=[
            StoreOut(
                id=store.id,
                name=store.name,
                warehouses=warehouses_by_store.get(store.id, []),
                sales_areas=areas_by_store.get(store.id, []),
                created_at=store.created_at,
            )
            for store in stores
        ]
    )


@router.post(
    "/stores/{store_id}/warehouses",
    response_model=CreatedOut,
    status_code=201,
    summary="Create a warehouse in a store",
    responses=error_responses(404, 409, 422, 500),
)
def create_warehouse(store_id: str, payload: LocationCreate, db: Session = Depends(get_db)):
    _get_store(db, store_id)
    existing = db.execute(
        select(Warehouse.id).where(Warehouse.store_id == store_id, Warehouse.name == payload.name)
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="Warehouse name already exists in this store")
    warehouse = Warehouse(id=generate_shortuuid(), store_id=store_id, name=payload.name)
    db.add(warehouse)
    db.commit()
    return CreatedOut(id=warehouse.id)


@router.post(
    "/stores/{store_id}/sales-areas",
    response_model=CreatedOut,
    status_code=201,
    summary="Create a sales area in a store",
    responses=error_responses(404, 409, 422, 500),
)
def create_sales_area(store_id: str, payload: LocationCreate, db: Session = Depends(get_db)):
    _get_store(db, store_id)
    existing = db.execute(
        select(SalesArea.id).where(SalesArea.store_id == store_id, SalesArea.name == payload.name)
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="Sales area name already exists in this store")
    area = SalesArea(id=generate_shortuuid(), store_id=store_id, name=payload.name)
    db.add(area)
    db.commit()
    return CreatedOut(id=area.id)


@router.post(
    "/companies",
    response_model=CreatedOut,
    status_code=201,
    summary="Register a provider company",
    responses=error_responses(422, 500),
)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db)):
    company = Company(id=generate_shortuuid(), name=payload.name)
    db.add(company)
    db.commit()
    return CreatedOut(id=company.id)


@router.get(
    "/companies",
    response_model=CompanyListOut,
    summary="List provider companies",
    responses=error_responses(500),
)
def list_companies(db: Session = Depends(get_db)):
    rows = db.execute(select(Company).order_by(Company.name.asc())).scalars().all()
    return CompanyListOut(items=[CompanyOut(id=row.id, name=row.name, created_at=row.created_at) for row in rows])


@router.post(
    "/products",
    response_model=CreatedOut,
    status_code=201,
    summary="Create a product",
    responses=error_responses(422, 500),
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = Product(
        id=generate_shortuuid(),
        name=payload.name,
        unit=payload.unit,
        category=payload.category,
        cost_price=to_money(payload.cost_price),
        sale_price=to_money(payload.sale_price),
        is_active=True,
    )
    db.add(product)
    db.commit()
    return CreatedOut(id=product.id)


@router.get(
    "/products",
    response_model=ProductListOut,
    summary="List products",
    responses=error_responses(422, 500),
)
def list_products(
    q: str | None = Query(default=None, description="Search by product name"),
    category: str | None = Query(default=None, description="Filter by category"),
    include_inactive: bool = Query(default=False, description="Include deactivated products"),
    limit: int = Query(default=50, ge=1, le=200, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    count_stmt = select(func.count(Product.id))
    stmt = select(Product)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        count_stmt = count_stmt.where(Product.name.ilike(pattern))
        stmt = stmt.where(Product.name.ilike(pattern))
    if category and category.strip():
        count_stmt = count_stmt.where(Product.category == category.strip())
        stmt = stmt.where(Product.category == category.strip())
    if not include_inactive:
        count_stmt = count_stmt.where(Product.is_active.is_(True))
        stmt = stmt.where(Product.is_active.is_(True))

    total = int(db.execute(count_stmt).scalar_one())
    rows = db.execute(stmt.order_by(Product.name.asc()).offset(offset).limit(limit)).scalars().all()
    items = [_product_out(row) for row in rows]
    return ProductListOut(
        items=items,
        pagination=build_pagination(total=total, limit=limit, offset=offset, count=len(items)),
    )


@router.patch(
    "/products/{product_id}",
    response_model=ProductOut,
    summary="Update a product's details or reference prices",
    description="Price changes apply to future ledger records only; committed records keep their amounts.",
    responses=error_responses(404, 422, 500),
)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)

    updates = payload.model_dump(exclude_unset=True)
    for field_name in ("cost_price", "sale_price"):
        if updates.get(field_name) is not None:
            updates[field_name] = to_money(updates[field_name])
    for field_name, value in updates.items():
        if value is None and field_name in {"name", "unit", "cost_price", "sale_price", "is_active"}:
            continue
        setattr(product, field_name, value)

    db.commit()
    db.refresh(product)
    return _product_out(product)
