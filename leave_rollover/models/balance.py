# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leave_rollover.models.base import TimestampMixin, UUIDBase


class LeaveBalance(UUIDBase, TimestampMixin, table=True):
    """Active leave balance for one employee, year and leave type."""

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "year", "leave_type", name="uq_leave_balance_employee_year_type"),
        sa.Index("ix_leave_balance_year", "year"),
    )

    employee_id: uuid.UUID = Field(index=True)
    year: int
    leave_type: str = Field(max_length=20)
    total_allocated: Decimal = Field(max_digits=5, decimal_places=2)
    used_days: Decimal = Field(default=Decimal(0), max_digits=5, decimal_places=2)
    available_days: Decimal = Field(max_digits=5, decimal_places=2)
    carry_forward: Decimal = Field(default=Decimal(0), max_digits=5, decimal_places=2)
