# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Active balances
# ---------------------------------------------------------------------------


class LeaveBalanceResponse(BaseModel):
    """An employee's balance for one leave type and year."""

    id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    leave_type: str
    total_allocated: Decimal
    used_days: Decimal
    available_days: Decimal
    carry_forward: Decimal


class LeaveBalanceListResponse(BaseModel):
    """All matching balances for an employee."""

    items: list[LeaveBalanceResponse]
    total: int


# ---------------------------------------------------------------------------
# Archived balances
# ---------------------------------------------------------------------------


class LeaveBalanceHistoryResponse(BaseModel):
    """A balance as it stood when a rollover archived it."""

    id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    leave_type: str
    total_allocated: Decimal
    used_days: Decimal
    available_days: Decimal
    carry_forward: Decimal
    archived_at: datetime
    archived_by_id: uuid.UUID | None


class LeaveBalanceHistoryListResponse(BaseModel):
    """Paginated archived balances."""

    items: list[LeaveBalanceHistoryResponse]
    total: int
