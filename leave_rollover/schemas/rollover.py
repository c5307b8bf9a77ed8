# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class YearEndResetRequest(BaseModel):
    """Request body for the system-wide year-end reset."""

    notify_employees: bool = False


class EmployeeResetRequest(BaseModel):
    """Request body for resetting a single employee's balances."""

    target_year: int = Field(ge=1900, le=9999)
    notify_employee: bool = False


class RolloverResponse(BaseModel):
    """Outcome of a rollover triggered over HTTP."""

    success: bool = True
    message: str
    archived_count: int
    reset_count: int
    timestamp: datetime
