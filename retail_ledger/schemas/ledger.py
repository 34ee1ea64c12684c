from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from retail_ledger.schemas.common import PaginationMeta


PayMethod = Literal["EFECTIVO", "TRANSFERMOVIL", "ENZONA"]
InflowType = Literal["FACTURA", "TRASLADO"]
OutflowType = Literal["TRASLADO", "VALE", "VENTA", "BAJA"]
MovementType = Literal["DEVOLUCION", "TRASLADO"]


class _LedgerRowIn(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    date: str = Field(description="Calendar date formatted as dd/MM/yyyy")

    @field_validator("user_id")
    @classmethod
    def normalize_user_id(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("user_id cannot be empty")
        return cleaned


class _StockRowIn(_LedgerRowIn):
    product_id: str = Field(min_length=1, max_length=36)
    quantity: str | int = Field(description="Positive whole number of units")


class InflowRowIn(_StockRowIn):
    warehouse_id: str = Field(min_length=1, max_length=36)
    in_type: InflowType
    provider_id: str = Field(
        min_length=1,
        max_length=36,
        description="Provider company id for FACTURA, provider store id for TRASLADO",
    )
    invoice_number: str | None = Field(default=None, max_length=60)
    in_number: str | None = Field(default=None, max_length=60)
    cost_amount: Decimal | None = Field(
        default=None, ge=0, max_digits=12, decimal_places=2, description="Invoice cost; computed when omitted"
    )
    sale_amount: Decimal | None = Field(
        default=None, ge=0, max_digits=12, decimal_places=2, description="Sale valuation; computed when omitted"
    )

    @model_validator(mode="after")
    def validate_invoice_number(self) -> "InflowRowIn":
        if self.in_type != "FACTURA" and self.invoice_number:
            raise ValueError("invoice_number is only allowed for FACTURA inflows")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-id",
                "warehouse_id": "warehouse-id",
                "in_type": "FACTURA",
                "provider_id": "company-id",
                "invoice_number": "F-00123",
                "in_number": "E-0045",
                "product_id": "product-id",
                "date": "20/02/2024",
                "quantity": "50",
            }
        }
    )


class OutflowRowIn(_StockRowIn):
    warehouse_id: str = Field(min_length=1, max_length=36)
    out_type: OutflowType
    destination_id: str | None = Field(
        default=None,
        max_length=36,
        description="Store id for TRASLADO, sales area id for VALE, empty otherwise",
    )
    pay_method: PayMethod | None = None
    out_number: str | None = Field(default=None, max_length=60)

    @model_validator(mode="after")
    def validate_destination(self) -> "OutflowRowIn":
        if self.out_type in {"TRASLADO", "VALE"}:
            if not self.destination_id:
                raise ValueError(f"destination_id is required for {self.out_type} outflows")
        elif self.destination_id:
            raise ValueError(f"{self.out_type} outflows do not take a destination")
        if self.out_type == "VENTA":
            if self.pay_method is None:
                raise ValueError("pay_method is required for VENTA outflows")
        elif self.pay_method is not None:
            raise ValueError("pay_method is only allowed for VENTA outflows")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-id",
                "warehouse_id": "warehouse-id",
                "out_type": "VALE",
                "destination_id": "sales-area-id",
                "out_number": "S-0012",
                "product_id": "product-id",
                "date": "20/02/2024",
                "quantity": "12",
            }
        }
    )


class MovementRowIn(_StockRowIn):
    movement_type: MovementType
    source_sales_area_id: str = Field(min_length=1, max_length=36)
    destination_warehouse_id: str | None = Field(default=None, max_length=36)
    destination_sales_area_id: str | None = Field(default=None, max_length=36)
    movement_number: str | None = Field(default=None, max_length=60)

    @model_validator(mode="after")
    def validate_destination(self) -> "MovementRowIn":
        if self.movement_type == "DEVOLUCION":
            if not self.destination_warehouse_id:
                raise ValueError("destination_warehouse_id is required for DEVOLUCION movements")
            if self.destination_sales_area_id:
                raise ValueError("DEVOLUCION movements cannot target a sales area")
        else:
            if not self.destination_sales_area_id:
                raise ValueError("destination_sales_area_id is required for TRASLADO movements")
            if self.destination_warehouse_id:
                raise ValueError("TRASLADO movements cannot target a warehouse")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-id",
                "movement_type": "DEVOLUCION",
                "source_sales_area_id": "sales-area-id",
                "destination_warehouse_id": "warehouse-id",
                "movement_number": "M-0003",
                "product_id": "product-id",
                "date": "20/02/2024",
                "quantity": "5",
            }
        }
    )


class SaleRowIn(_StockRowIn):
    sales_area_id: str = Field(min_length=1, max_length=36)
    pay_method: PayMethod

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-id",
                "sales_area_id": "sales-area-id",
                "pay_method": "EFECTIVO",
                "product_id": "product-id",
                "date": "20/02/2024",
                "quantity": "3",
            }
        }
    )


class WithdrawRowIn(_LedgerRowIn):
    sales_area_id: str = Field(min_length=1, max_length=36)
    amount: Decimal | str = Field(description="Positive amount with at most two decimals")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user-id",
                "sales_area_id": "sales-area-id",
                "date": "20/02/2024",
                "amount": "70.00",
            }
        }
    )


class InflowBatchIn(BaseModel):
    rows: list[InflowRowIn] = Field(min_length=1)


class OutflowBatchIn(BaseModel):
    rows: list[OutflowRowIn] = Field(min_length=1)


class MovementBatchIn(BaseModel):
    rows: list[MovementRowIn] = Field(min_length=1)


class SaleBatchIn(BaseModel):
    rows: list[SaleRowIn] = Field(min_length=1)


class WithdrawBatchIn(BaseModel):
    rows: list[WithdrawRowIn] = Field(min_length=1)


class BatchCommitOut(BaseModel):
    ok: bool = True
    operation: str
    count: int
    record_ids: list[str]


class InflowOut(BaseModel):
    id: str
    warehouse_id: str
    in_type: str
    provider_company_id: str | None = None
    provider_store_id: str | None = None
    source_movement_id: str | None = None
    pay_method: str | None = None
    invoice_number: str | None = None
    in_number: str
    product_id: str
    quantity: int
    cost_amount: float
    sale_amount: float
    date: date
    user_id: str
    created_at: datetime


class OutflowOut(BaseModel):
    id: str
    warehouse_id: str
    out_type: str
    destination_store_id: str | None = None
    destination_sales_area_id: str | None = None
    pay_method: str | None = None
    out_number: str
    product_id: str
    quantity: int
    cost_amount: float
    sale_amount: float
    date: date
    user_id: str
    created_at: datetime


class MovementOut(BaseModel):
    id: str
    movement_type: str
    source_sales_area_id: str
    destination_warehouse_id: str | None = None
    destination_sales_area_id: str | None = None
    movement_number: str
    product_id: str
    quantity: int
    cost_amount: float
    sale_amount: float
    date: date
    user_id: str
    created_at: datetime


class SaleOut(BaseModel):
    id: str
    sales_area_id: str
    pay_method: str
    product_id: str
    quantity: int
    cost_amount: float
    sale_amount: float
    profit: float
    date: date
    user_id: str
    created_at: datetime


class WithdrawOut(BaseModel):
    id: str
    sales_area_id: str
    amount: float
    date: date
    user_id: str
    created_at: datetime


class InflowListOut(BaseModel):
    items: list[InflowOut]
    pagination: PaginationMeta


class OutflowListOut(BaseModel):
    items: list[OutflowOut]
    pagination: PaginationMeta


class MovementListOut(BaseModel):
    items: list[MovementOut]
    pagination: PaginationMeta


class SaleListOut(BaseModel):
    items: list[SaleOut]
    pagination: PaginationMeta


class WithdrawListOut(BaseModel):
    items: list[WithdrawOut]
    pagination: PaginationMeta


class AvailableCashOut(BaseModel):
    sales_area_id: str
    date: date
    total_cash_sales: float
    total_withdrawals: float
    available_cash: float
