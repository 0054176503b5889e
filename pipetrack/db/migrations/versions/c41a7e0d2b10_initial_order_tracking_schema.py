"""Initial order tracking schema.

- users
- orders
- sub_orders (per-line counters and status)
- production_records, shipping_records (append-only ledger)
- production_plans
- master_data_values
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "c41a7e0d2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text("CURRENT_TIMESTAMP")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("hashed_password", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_no", sa.Text(), nullable=False),
        sa.Column("customer_name", sa.Text(), nullable=True),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("workshop", sa.Text(), nullable=True),
        sa.Column("warehouse", sa.Text(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), server_default="new", nullable=False),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.UniqueConstraint("order_no", name="uq_orders_order_no"),
    )
    op.create_index("ix_orders_deleted_at", "orders", ["deleted_at"])

    op.create_table(
        "sub_orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("line_no", sa.Integer(), nullable=False),
        sa.Column("spec", sa.Text(), nullable=False),
        sa.Column("level", sa.Text(), nullable=False),
        sa.Column("interface_type", sa.Text(), nullable=False),
        sa.Column("lining", sa.Text(), nullable=False),
        sa.Column("length", sa.Text(), nullable=False),
        sa.Column("coating", sa.Text(), nullable=False),
        sa.Column("planned_quantity", sa.Integer(), nullable=False),
        sa.Column("unit_weight", sa.Numeric(10, 3), nullable=True),
        sa.Column("total_weight", sa.Numeric(12, 3), nullable=True),
        sa.Column("batch_no", sa.Text(), nullable=True),
        sa.Column("produced_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("pulling_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("hydrostatic_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("lining_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("coating_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("shipped_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.Text(), server_default="new", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_sub_orders"),
        sa.ForeignKeyConstraint(
            ["order_id"], ["orders.id"], name="fk_sub_orders_order_id_orders", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_sub_orders_order_id", "sub_orders", ["order_id"])

    op.create_table(
        "production_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("sub_order_id", sa.Uuid(), nullable=False),
        sa.Column("team", sa.Text(), nullable=False),
        sa.Column("shift", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("workshop", sa.Text(), nullable=True),
        sa.Column("warehouse", sa.Text(), nullable=True),
        sa.Column("operator_id", sa.Text(), nullable=False),
        sa.Column("heat_no", sa.Text(), nullable=True),
        sa.Column("process", sa.Text(), server_default="packaging", nullable=False),
        sa.Column("pressure", sa.Numeric(10, 3), nullable=True),
        sa.Column("pressure_time", sa.Numeric(10, 3), nullable=True),
        sa.Column("zinc_weight", sa.Numeric(10, 3), nullable=True),
        sa.Column("lining_thickness", sa.Numeric(10, 3), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_production_records"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], name="fk_production_records_order_id_orders"),
        sa.ForeignKeyConstraint(
            ["sub_order_id"], ["sub_orders.id"], name="fk_production_records_sub_order_id_sub_orders"
        ),
    )
    op.create_index("ix_production_records_order_id", "production_records", ["order_id"])
    op.create_index("ix_production_records_sub_order_id", "production_records", ["sub_order_id"])

    op.create_table(
        "shipping_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("sub_order_id", sa.Uuid(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("transport_type", sa.Text(), nullable=False),
        sa.Column("shipping_type", sa.Text(), nullable=False),
        sa.Column("shipping_warehouse", sa.Text(), nullable=True),
        sa.Column("vehicle_info", sa.Text(), nullable=True),
        sa.Column("shipping_no", sa.Text(), nullable=True),
        sa.Column("destination", sa.Text(), nullable=True),
        sa.Column("operator_id", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_shipping_records"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], name="fk_shipping_records_order_id_orders"),
        sa.ForeignKeyConstraint(
            ["sub_order_id"], ["sub_orders.id"], name="fk_shipping_records_sub_order_id_sub_orders"
        ),
    )
    op.create_index("ix_shipping_records_order_id", "shipping_records", ["order_id"])
    op.create_index("ix_shipping_records_sub_order_id", "shipping_records", ["sub_order_id"])

    op.create_table(
        "production_plans",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("sub_order_id", sa.Uuid(), nullable=False),
        sa.Column("workshop", sa.Text(), nullable=False),
        sa.Column("team", sa.Text(), nullable=True),
        sa.Column("shift", sa.Text(), nullable=True),
        sa.Column("planned_date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("process", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), server_default="pending", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_production_plans"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], name="fk_production_plans_order_id_orders"),
        sa.ForeignKeyConstraint(
            ["sub_order_id"], ["sub_orders.id"], name="fk_production_plans_sub_order_id_sub_orders"
        ),
    )
    op.create_index("ix_production_plans_order_id", "production_plans", ["order_id"])
    op.create_index("ix_production_plans_status", "production_plans", ["status"])

    op.create_table(
        "master_data_values",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_master_data_values"),
        sa.UniqueConstraint("category", "value", name="uq_master_data_values_category_value"),
    )
    op.create_index("ix_master_data_values_category", "master_data_values", ["category"])


def downgrade() -> None:
    op.drop_index("ix_master_data_values_category", table_name="master_data_values")
    op.drop_table("master_data_values")
    op.drop_index("ix_production_plans_status", table_name="production_plans")
    op.drop_index("ix_production_plans_order_id", table_name="production_plans")
    op.drop_table("production_plans")
    op.drop_index("ix_shipping_records_sub_order_id", table_name="shipping_records")
    op.drop_index("ix_shipping_records_order_id", table_name="shipping_records")
    op.drop_table("shipping_records")
    op.drop_index("ix_production_records_sub_order_id", table_name="production_records")
    op.drop_index("ix_production_records_order_id", table_name="production_records")
    op.drop_table("production_records")
    op.drop_index("ix_sub_orders_order_id", table_name="sub_orders")
    op.drop_table("sub_orders")
    op.drop_index("ix_orders_deleted_at", table_name="orders")
    op.drop_table("orders")
    op.drop_table("users")
