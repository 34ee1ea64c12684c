from sqlalchemy import text

from retail_ledger.core.observability import (
    http_exception_handler,
    ledger_error_handler,
    log_event,
    request_logging_middleware,
    setup_observability,
    unhandled_exception_handler,
    validation_exception_handler,
)
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from retail_ledger.core.config import settings
from retail_ledger.core.errors import LedgerError
from retail_ledger.db.session import engine
from retail_ledger.routers import catalog, inventory, sales_area, warehouse

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description=(
        "Inventory and cash ledger for stores with warehouses and sales areas.\n\n"
        "Every write endpoint takes a batch of rows and commits all of them or none. "
        "Dates are written as dd/MM/yyyy and quantities as whole numbers.\n\n"
        "Quick test flow:\n"
        "1. Create a store, a warehouse, a sales area and a product under **catalog**.\n"
        "2. Receive stock with `POST /warehouse/inflows`.\n"
        "3. Send it to a sales area with a VALE row on `POST /warehouse/outflows`.\n"
        "4. Sell it with `POST /sales-area/sales` and check `/inventory/sales_area/{id}`."
    ),
    swagger_ui_parameters={
        "displayRequestDuration": True,
        "defaultModelsExpandDepth": 1,
    },
    openapi_tags=[
        {"name": "health", "description": "Service status and quick links."},
        {"name": "catalog", "description": "Stores, warehouses, sales areas, provider companies and products."},
        {"name": "warehouse", "description": "Warehouse inflows and outflows with their history."},
        {"name": "sales-area", "description": "Sales area movements, sales, cash withdrawals and history."},
        {"name": "inventory", "description": "Current stock levels and low-stock thresholds per location."},
    ],
)

setup_observability()
app.middleware("http")(request_logging_middleware)
app.add_exception_handler(LedgerError, ledger_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

cors_origins = settings.cors_origins or ["http://localhost:3000"]
allow_all_origins = "*" in cors_origins
env_value = settings.env.lower().strip()
allow_origin_regex = settings.cors_origin_regex

if (
    not allow_origin_regex
    and env_value in {"dev", "development", "staging", "stage"}
):
    # Local frontends run on dynamic localhost ports.
    allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all_origins else cors_origins,
    allow_origin_regex=allow_origin_regex,
    allow_credentials=not allow_all_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog.router)
app.include_router(warehouse.router)
app.include_router(sales_area.router)
app.include_router(inventory.router)


@app.get("/", tags=["health"])
def root():
    return {
        "app": settings.app_name,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health",
        "ready": "/ready",
    }


@app.get("/health", tags=["health"])
def health():
    return {"ok": True}


@app.get("/ready", tags=["health"])
def ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        log_event("readiness_failed", error=str(exc))
        return {"ok": False}
    return {"ok": True}
