from pydantic import BaseModel, ConfigDict, Field


class InventoryLineOut(BaseModel):
    product_id: str
    product_name: str
    unit: str
    category: str | None = None
    quantity: int
    min_stock: int
    cost_price: float
    sale_price: float
    cost_value: float
    sale_value: float
    is_low_stock: bool


class InventoryListOut(BaseModel):
    location_kind: str
    location_id: str
    items: list[InventoryLineOut]
    total_cost_value: float
    total_sale_value: float


class StockLevelOut(BaseModel):
    location_kind: str
    location_id: str
    product_id: str
    quantity: int
    is_low_stock: bool


class MinStockIn(BaseModel):
    min_stock: int = Field(ge=0)

    model_config = ConfigDict(json_schema_extra={"example": {"min_stock": 5}})


class MinStockOut(BaseModel):
    location_kind: str
    location_id: str
    product_id: str
    quantity: int
    min_stock: int
    is_low_stock: bool
