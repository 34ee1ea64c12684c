from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from retail_ledger.schemas.common import PaginationMeta


def _clean_required(value: str, field_name: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} is required")
    return cleaned


class StoreCreate(BaseModel):
    name: str = Field(max_length=120)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_required(value, "name")

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Tienda Centro"}})


class LocationCreate(BaseModel):
    name: str = Field(max_length=120)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_required(value, "name")

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Almacen principal"}})


class CompanyCreate(BaseModel):
    name: str = Field(max_length=160)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_required(value, "name")

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Distribuidora Habana S.A."}})


class ProductCreate(BaseModel):
    name: str = Field(max_length=255)
    unit: str = Field(default="un", max_length=20)
    category: Optional[str] = Field(default=None, max_length=100)
    cost_price: Decimal = Field(ge=0)
    sale_price: Decimal = Field(ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_required(value, "name")

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, value: str) -> str:
        return _clean_required(value, "unit")

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Refresco de cola 355ml",
                "unit": "un",
                "category": "bebidas",
                "cost_price": 8.5,
                "sale_price": 19.99,
            }
        }
    )


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    unit: Optional[str] = Field(default=None, max_length=20)
    category: Optional[str] = Field(default=None, max_length=100)
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("name", "unit")
    @classmethod
    def validate_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _clean_required(value, "value")

    model_config = ConfigDict(json_schema_extra={"example": {"sale_price": 21.5}})


class CreatedOut(BaseModel):
    id: str


class LocationOut(BaseModel):
    id: str
    store_id: str
    name: str


class StoreOut(BaseModel):
    id: str
    name: str
    warehouses: list[LocationOut]
    sales_areas: list[LocationOut]
    created_at: datetime


class CompanyOut(BaseModel):
    id: str
    name: str
    created_at: datetime


class ProductOut(BaseModel):
    id: str
    name: str
    unit: str
    category: Optional[str] = None
    cost_price: float
    sale_price: float
    is_active: bool
    created_at: datetime


class StoreListOut(BaseModel):
    items: list[StoreOut]


class CompanyListOut(BaseModel):
    items: list[CompanyOut]


class ProductListOut(BaseModel):
    items: list[ProductOut]
    pagination: PaginationMeta

