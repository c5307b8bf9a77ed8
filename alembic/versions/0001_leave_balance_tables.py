"""Leave balance and balance history tables

Revision ID: 0001_leave_balance_tables
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_leave_balance_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leave_balance",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("leave_type", sa.String(length=20), nullable=False),
        sa.Column("total_allocated", sa.Numeric(5, 2), nullable=False),
        sa.Column("used_days", sa.Numeric(5, 2), nullable=False),
        sa.Column("available_days", sa.Numeric(5, 2), nullable=False),
        sa.Column("carry_forward", sa.Numeric(5, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "year", "leave_type", name="uq_leave_balance_employee_year_type"),
    )
    op.create_index(op.f("ix_leave_balance_employee_id"), "leave_balance", ["employee_id"], unique=False)
    op.create_index("ix_leave_balance_year", "leave_balance", ["year"], unique=False)

    op.create_table(
        "leave_balance_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("leave_type", sa.String(length=20), nullable=False),
        sa.Column("total_allocated", sa.Numeric(5, 2), nullable=False),
        sa.Column("used_days", sa.Numeric(5, 2), nullable=False),
        sa.Column("available_days", sa.Numeric(5, 2), nullable=False),
        sa.Column("carry_forward", sa.Numeric(5, 2), nullable=False),
        sa.Column("archived_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("archived_by_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_leave_balance_history_employee_id"), "leave_balance_history", ["employee_id"], unique=False
    )
    op.create_index(op.f("ix_leave_balance_history_year"), "leave_balance_history", ["year"], unique=False)
    op.create_index(
        "ix_leave_balance_history_employee_year", "leave_balance_history", ["employee_id", "year"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_leave_balance_history_employee_year", table_name="leave_balance_history")
    op.drop_index(op.f("ix_leave_balance_history_year"), table_name="leave_balance_history")
    op.drop_index(op.f("ix_leave_balance_history_employee_id"), table_name="leave_balance_history")
    op.drop_table("leave_balance_history")
    op.drop_index("ix_leave_balance_year", table_name="leave_balance")
    op.drop_index(op.f("ix_leave_balance_employee_id"), table_name="leave_balance")
    op.drop_table("leave_balance")
