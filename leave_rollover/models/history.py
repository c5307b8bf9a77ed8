# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leave_rollover.models.base import UTCDateTime, UUIDBase, _now_utc


class LeaveBalanceHistory(UUIDBase, table=True):
    """Append-only copy of a balance as it stood before a rollover reset it.

    ``year`` is the archived (source) year. ``archived_by_id`` is None for
    system runs and holds the acting admin's user id for manual resets.
    """

    __tablename__ = "leave_balance_history"
    __table_args__ = (sa.Index("ix_leave_balance_history_employee_year", "employee_id", "year"),)

    employee_id: uuid.UUID = Field(index=True)
    year: int = Field(index=True)
    leave_type: str = Field(max_length=20)
    total_allocated: Decimal = Field(max_digits=5, decimal_places=2)
    used_days: Decimal = Field(max_digits=5, decimal_places=2)
    available_days: Decimal = Field(max_digits=5, decimal_places=2)
    carry_forward: Decimal = Field(default=Decimal(0), max_digits=5, decimal_places=2)
    archived_at: datetime = Field(
        default_factory=_now_utc,
        sa_type=UTCDateTime,
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    archived_by_id: uuid.UUID | None = Field(default=None, sa_type=sa.Uuid)
