"""create catalog, inventory and ledger tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _inventory_table(name: str, location_table: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("product_id", sa.String(length=36), nullable=False),
        sa.Column("quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("min_stock", sa.Integer(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("quantity >= 0", name=f"ck_{name}_quantity_non_negative"),
        sa.CheckConstraint("min_stock >= 0", name=f"ck_{name}_min_stock_non_negative"),
        sa.ForeignKeyConstraint(["location_id"], [f"{location_table}.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("location_id", "product_id", name=f"uq_{name}_location_product"),
    )
    op.create_index(op.f(f"ix_{name}_location_id"), name, ["location_id"], unique=False)
    op.create_index(op.f(f"ix_{name}_product_id"), name, ["product_id"], unique=False)


def _amount_columns() -> list[sa.Column]:
    return [
        sa.Column("product_id", sa.String(length=36), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("cost_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("sale_amount", sa.Numeric(12, 2), nullable=False),
    ]


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "stores",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "warehouses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("store_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "name", name="uq_warehouses_store_name"),
    )
    op.create_index(op.f("ix_warehouses_store_id"), "warehouses", ["store_id"], unique=False)
    op.create_table(
        "sales_areas",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("store_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "name", name="uq_sales_areas_store_name"),
    )
    op.create_index(op.f("ix_sales_areas_store_id"), "sales_areas", ["store_id"], unique=False)
    op.create_table(
        "companies",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_name", "companies", ["name"], unique=False)
    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("unit", sa.String(length=20), server_default="un", nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_name", "products", ["name"], unique=False)

    _inventory_table("warehouse_inventory", "warehouses")
    _inventory_table("sales_area_inventory", "sales_areas")

    op.create_table(
        "movements",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("source_sales_area_id", sa.String(length=36), nullable=False),
        sa.Column("movement_type", sa.String(length=20), nullable=False),
        sa.Column("destination_warehouse_id", sa.String(length=36), nullable=True),
        sa.Column("destination_sales_area_id", sa.String(length=36), nullable=True),
        sa.Column("movement_number", sa.String(length=60), nullable=False),
        *_amount_columns(),
        *_audit_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
        sa.ForeignKeyConstraint(["source_sales_area_id"], ["sales_areas.id"]),
        sa.ForeignKeyConstraint(["destination_warehouse_id"], ["warehouses.id"]),
        sa.ForeignKeyConstraint(["destination_sales_area_id"], ["sales_areas.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_movements_source_sales_area_id"), "movements", ["source_sales_area_id"], unique=False)
    op.create_index(op.f("ix_movements_product_id"), "movements", ["product_id"], unique=False)
    op.create_index("ix_movements_source_date", "movements", ["source_sales_area_id", "date"], unique=False)

    op.create_table(
        "inflows",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("warehouse_id", sa.String(length=36), nullable=False),
        sa.Column("in_type", sa.String(length=20), nullable=False),
        sa.Column("provider_company_id", sa.String(length=36), nullable=True),
        sa.Column("provider_store_id", sa.String(length=36), nullable=True),
        sa.Column("source_movement_id", sa.String(length=36), nullable=True),
        sa.Column("pay_method", sa.String(length=30), nullable=True),
        sa.Column("invoice_number", sa.String(length=60), nullable=True),
        sa.Column("in_number", sa.String(length=60), nullable=False),
        *_amount_columns(),
        *_audit_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_inflows_quantity_positive"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"]),
        sa.ForeignKeyConstraint(["provider_company_id"], ["companies.id"]),
        sa.ForeignKeyConstraint(["provider_store_id"], ["stores.id"]),
        sa.ForeignKeyConstraint(["source_movement_id"], ["movements.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_movement_id"),
    )
    op.create_index(op.f("ix_inflows_warehouse_id"), "inflows", ["warehouse_id"], unique=False)
    op.create_index(op.f("ix_inflows_provider_company_id"), "inflows", ["provider_company_id"], unique=False)
    op.create_index(op.f("ix_inflows_product_id"), "inflows", ["product_id"], unique=False)
    op.create_index("ix_inflows_warehouse_date", "inflows", ["warehouse_id", "date"], unique=False)

    op.create_table(
        "outflows",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("warehouse_id", sa.String(length=36), nullable=False),
        sa.Column("out_type", sa.String(length=20), nullable=False),
        sa.Column("destination_store_id", sa.String(length=36), nullable=True),
        sa.Column("destination_sales_area_id", sa.String(length=36), nullable=True),
        sa.Column("pay_method", sa.String(length=30), nullable=True),
        sa.Column("out_number", sa.String(length=60), nullable=False),
        *_amount_columns(),
        *_audit_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_outflows_quantity_positive"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"]),
        sa.ForeignKeyConstraint(["destination_store_id"], ["stores.id"]),
        sa.ForeignKeyConstraint(["destination_sales_area_id"], ["sales_areas.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_outflows_warehouse_id"), "outflows", ["warehouse_id"], unique=False)
    op.create_index(op.f("ix_outflows_product_id"), "outflows", ["product_id"], unique=False)
    op.create_index("ix_outflows_warehouse_date", "outflows", ["warehouse_id", "date"], unique=False)

    op.create_table(
        "sales",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("sales_area_id", sa.String(length=36), nullable=False),
        sa.Column("pay_method", sa.String(length=30), nullable=False),
        *_amount_columns(),
        *_audit_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        sa.ForeignKeyConstraint(["sales_area_id"], ["sales_areas.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sales_sales_area_id"), "sales", ["sales_area_id"], unique=False)
    op.create_index(op.f("ix_sales_product_id"), "sales", ["product_id"], unique=False)
    op.create_index("ix_sales_area_date_pay_method", "sales", ["sales_area_id", "date", "pay_method"], unique=False)

    op.create_table(
        "withdraws",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("sales_area_id", sa.String(length=36), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        *_audit_columns(),
        sa.CheckConstraint("amount > 0", name="ck_withdraws_amount_positive"),
        sa.ForeignKeyConstraint(["sales_area_id"], ["sales_areas.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_withdraws_sales_area_id"), "withdraws", ["sales_area_id"], unique=False)
    op.create_index("ix_withdraws_area_date", "withdraws", ["sales_area_id", "date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_withdraws_area_date", table_name="withdraws")
    op.drop_index(op.f("ix_withdraws_sales_area_id"), table_name="withdraws")
    op.drop_table("withdraws")

    op.drop_index("ix_sales_area_date_pay_method", table_name="sales")
    op.drop_index(op.f("ix_sales_product_id"), table_name="sales")
    op.drop_index(op.f("ix_sales_sales_area_id"), table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_outflows_warehouse_date", table_name="outflows")
    op.drop_index(op.f("ix_outflows_product_id"), table_name="outflows")
    op.drop_index(op.f("ix_outflows_warehouse_id"), table_name="outflows")
    op.drop_table("outflows")

    op.drop_index("ix_inflows_warehouse_date", table_name="inflows")
    op.drop_index(op.f("ix_inflows_product_id"), table_name="inflows")
    op.drop_index(op.f("ix_inflows_provider_company_id"), table_name="inflows")
    op.drop_index(op.f("ix_inflows_warehouse_id"), table_name="inflows")
    op.drop_table("inflows")

    op.drop_index("ix_movements_source_date", table_name="movements")
    op.drop_index(op.f("ix_movements_product_id"), table_name="movements")
    op.drop_index(op.f("ix_movements_source_sales_area_id"), table_name="movements")
    op.drop_table("movements")

    for name in ("sales_area_inventory", "warehouse_inventory"):
        op.drop_index(op.f(f"ix_{name}_product_id"), table_name=name)
        op.drop_index(op.f(f"ix_{name}_location_id"), table_name=name)
        op.drop_table(name)

    op.drop_index("ix_products_name", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_companies_name", table_name="companies")
    op.drop_table("companies")
    op.drop_index(op.f("ix_sales_areas_store_id"), table_name="sales_areas")
    op.drop_table("sales_areas")
    op.drop_index(op.f("ix_warehouses_store_id"), table_name="warehouses")
    op.drop_table("warehouses")
    op.drop_table("stores")
