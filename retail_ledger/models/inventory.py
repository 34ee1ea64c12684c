from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from retail_ledger.db.base import Base


class WarehouseInventory(Base):
    """
    Current quantity of one product in one warehouse. Created on first arrival, never deleted.
    """
    __tablename__ = "warehouse_inventory"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    location_id: Mapped[str] = mapped_column(String(36), ForeignKey("warehouses.id"), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("location_id", "product_id", name="uq_warehouse_inventory_location_product"),
        CheckConstraint("quantity >= 0", name="ck_warehouse_inventory_quantity_non_negative"),
        CheckConstraint("min_stock >= 0", name="ck_warehouse_inventory_min_stock_non_negative"),
    )


class SalesAreaInventory(Base):
    """
    Current quantity of one product in one sales area. Same lifecycle as WarehouseInventory.
    """
    __tablename__ = "sales_area_inventory"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    location_id: Mapped[str] = mapped_column(String(36), ForeignKey("sales_areas.id"), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("location_id", "product_id", name="uq_sales_area_inventory_location_product"),
        CheckConstraint("quantity >= 0", name="ck_sales_area_inventory_quantity_non_negative"),
        CheckConstraint("min_stock >= 0", name="ck_sales_area_inventory_min_stock_non_negative"),
    )
