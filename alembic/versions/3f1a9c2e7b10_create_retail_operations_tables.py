"""create_retail_operations_tables

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    # Timestamps (from TimestampMixin)
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Apply migration - create directory, attendance and sales tables."""
    # Directory tables
    for table in ("employee", "store"):
        op.create_table(
            table,
            sa.Column("id", sa.String(length=64), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("province", sa.String(length=100), nullable=True),
            sa.Column("latitude", sa.Float(), nullable=True),
            sa.Column("longitude", sa.Float(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )

    op.create_table(
        "product",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_product_code"), "product", ["code"], unique=True)

    # Attendance
    op.create_table(
        "attendance_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.String(length=64), nullable=False),
        sa.Column("store_id", sa.String(length=64), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('check-in', 'check-out')",
            name="ck_attendance_log_status",
        ),
    )
    op.create_index(
        op.f("ix_attendance_log_employee_id"), "attendance_log", ["employee_id"], unique=False
    )
    op.create_index(
        op.f("ix_attendance_log_store_id"), "attendance_log", ["store_id"], unique=False
    )
    op.create_index(
        "ix_attendance_log_recorded_at", "attendance_log", ["recorded_at"], unique=False
    )

    # Sales
    op.create_table(
        "sale",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("transaction_id", sa.String(length=64), nullable=True),
        sa.Column("employee_id", sa.String(length=64), nullable=False),
        sa.Column("store_id", sa.String(length=64), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quantity >= 0", name="ck_sale_quantity_positive"),
    )
    op.create_index(op.f("ix_sale_employee_id"), "sale", ["employee_id"], unique=False)
    op.create_index(op.f("ix_sale_store_id"), "sale", ["store_id"], unique=False)
    op.create_index("ix_sale_recorded_at", "sale", ["recorded_at"], unique=False)

    op.create_table(
        "sale_line",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("product_code", sa.String(length=50), nullable=False),
        sa.Column("product_name", sa.String(length=200), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["sale_id"], ["sale.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_sale_line_sale_id"), "sale_line", ["sale_id"], unique=False)


def downgrade() -> None:
    """Revert migration - drop retail operations tables."""
    op.drop_index(op.f("ix_sale_line_sale_id"), table_name="sale_line")
    op.drop_table("sale_line")

    op.drop_index("ix_sale_recorded_at", table_name="sale")
    op.drop_index(op.f("ix_sale_store_id"), table_name="sale")
    op.drop_index(op.f("ix_sale_employee_id"), table_name="sale")
    op.drop_table("sale")

    op.drop_index("ix_attendance_log_recorded_at", table_name="attendance_log")
    op.drop_index(op.f("ix_attendance_log_store_id"), table_name="attendance_log")
    op.drop_index(op.f("ix_attendance_log_employee_id"), table_name="attendance_log")
    op.drop_table("attendance_log")

    op.drop_index(op.f("ix_product_code"), table_name="product")
    op.drop_table("product")
    op.drop_table("store")
    op.drop_table("employee")
