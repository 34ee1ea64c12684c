"""
Append-only ledger records.

One row per committed operation. Rows are never updated or deleted; a
correction is a new offsetting record. Amounts are frozen at commit time.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from retail_ledger.db.base import Base


class Inflow(Base):
    __tablename__ = "inflows"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    warehouse_id: Mapped[str] = mapped_column(String(36), ForeignKey("warehouses.id"), nullable=False, index=True)
    in_type: Mapped[str] = mapped_column(String(20), nullable=False)  # FACTURA / TRASLADO / DEVOLUCION
    provider_company_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("companies.id"), nullable=True, index=True
    )
    provider_store_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("stores.id"), nullable=True)
    source_movement_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("movements.id"), nullable=True, unique=True
    )
    pay_method: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    invoice_number: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    in_number: Mapped[str] = mapped_column(String(60), nullable=False)

    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_inflows_quantity_positive"),
        Index("ix_inflows_warehouse_date", "warehouse_id", "date"),
    )


class Outflow(Base):
    __tablename__ = "outflows"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    warehouse_id: Mapped[str] = mapped_column(String(36), ForeignKey("warehouses.id"), nullable=False, index=True)
    out_type: Mapped[str] = mapped_column(String(20), nullable=False)  # TRASLADO / VALE / VENTA / BAJA
    destination_store_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("stores.id"), nullable=True)
    destination_sales_area_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("sales_areas.id"), nullable=True
    )
    pay_method: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    out_number: Mapped[str] = mapped_column(String(60), nullable=False)

    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_outflows_quantity_positive"),
        Index("ix_outflows_warehouse_date", "warehouse_id", "date"),
    )


class Movement(Base):
    __tablename__ = "movements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    source_sales_area_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sales_areas.id"), nullable=False, index=True
    )
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False)  # DEVOLUCION / TRASLADO
    destination_warehouse_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("warehouses.id"), nullable=True
    )
    destination_sales_area_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("sales_areas.id"), nullable=True
    )
    movement_number: Mapped[str] = mapped_column(String(60), nullable=False)

    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
        Index("ix_movements_source_date", "source_sales_area_id", "date"),
    )


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    sales_area_id: Mapped[str] = mapped_column(String(36), ForeignKey("sales_areas.id"), nullable=False, index=True)
    pay_method: Mapped[str] = mapped_column(String(30), nullable=False)  # EFECTIVO / TRANSFERMOVIL / ENZONA

    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        Index("ix_sales_area_date_pay_method", "sales_area_id", "date", "pay_method"),
    )


class Withdraw(Base):
    __tablename__ = "withdraws"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    sales_area_id: Mapped[str] = mapped_column(String(36), ForeignKey("sales_areas.id"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_withdraws_amount_positive"),
        Index("ix_withdraws_area_date", "sales_area_id", "date"),
    )
