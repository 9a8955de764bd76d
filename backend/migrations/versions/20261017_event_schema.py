"""Event schema: products, promotions, inventory, sales, expenses

Revision ID: 20261017_event_schema
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_event_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("unit_cost_cents", sa.Integer(), nullable=False),
        sa.Column("suggested_price_cents", sa.Integer(), nullable=False),
        sa.Column("units_per_pack", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
        sa.UniqueConstraint("name", name="uq_products_name"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "promotions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("trigger_quantity", sa.Integer(), nullable=False),
        sa.Column("bundle_price_cents", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("trigger_quantity > 0", name="ck_promotions_trigger_positive"),
        sa.CheckConstraint("bundle_price_cents >= 0", name="ck_promotions_bundle_price_non_negative"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_promotions_product_id_products"),
        sa.PrimaryKeyConstraint("id", name="pk_promotions"),
        sa.UniqueConstraint("product_id", "trigger_quantity", name="uq_promotions_product_trigger"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_promotions_product_id", "promotions", ["product_id"])

    op.create_table(
        "inventory",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("initial_total_quantity", sa.Integer(), nullable=False),
        sa.Column("current_quantity", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("current_quantity >= 0", name="ck_inventory_current_non_negative"),
        sa.CheckConstraint("initial_total_quantity >= 0", name="ck_inventory_initial_non_negative"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_inventory_product_id_products"),
        sa.PrimaryKeyConstraint("product_id", name="pk_inventory"),
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity_sold", sa.Integer(), nullable=False),
        sa.Column("total_price_cents", sa.Integer(), nullable=False),
        sa.Column("sold_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity_sold > 0", name="ck_sales_quantity_positive"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_sales_product_id_products"),
        sa.PrimaryKeyConstraint("id", name="pk_sales"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_sales_product_id", "sales", ["product_id"])
    op.create_index("ix_sales_sold_at", "sales", ["sold_at"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("label", sa.String(120), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("total_cost_cents", sa.Integer(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_expenses_quantity_positive"),
        sa.CheckConstraint("total_cost_cents > 0", name="ck_expenses_cost_positive"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_expenses_product_id_products"),
        sa.PrimaryKeyConstraint("id", name="pk_expenses"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_expenses_product_id", "expenses", ["product_id"])
    op.create_index("ix_expenses_recorded_at", "expenses", ["recorded_at"])


def downgrade():
    op.drop_index("ix_expenses_recorded_at", table_name="expenses")
    op.drop_index("ix_expenses_product_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_sales_sold_at", table_name="sales")
    op.drop_index("ix_sales_product_id", table_name="sales")
    op.drop_table("sales")
    op.drop_table("inventory")
    op.drop_index("ix_promotions_product_id", table_name="promotions")
    op.drop_table("promotions")
    op.drop_table("products")
