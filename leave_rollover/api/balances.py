# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query

from leave_rollover.api.deps import get_auth_context
from leave_rollover.db import SessionDep
from leave_rollover.schemas.balance import LeaveBalanceHistoryListResponse, LeaveBalanceListResponse
from leave_rollover.services import balance as balance_service

employee_balance_router = APIRouter(
    prefix="/employees/{employee_id}/leave-balances",
    tags=["balances"],
    dependencies=[Depends(get_auth_context)],
)


@employee_balance_router.get("", response_model=LeaveBalanceListResponse)
async def get_employee_balances(
    employee_id: uuid.UUID,
    session: SessionDep,
    year: int | None = Query(default=None),
) -> LeaveBalanceListResponse:
    """Get an employee's active leave balances."""
    return await balance_service.get_employee_balances(session, employee_id, year)


@employee_balance_router.get("/history", response_model=LeaveBalanceHistoryListResponse)
async def get_employee_balance_history(
    employee_id: uuid.UUID,
    session: SessionDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveBalanceHistoryListResponse:
    """Get an employee's archived balances, newest first."""
    return await balance_service.get_employee_balance_history(session, employee_id, year, offset, limit)
