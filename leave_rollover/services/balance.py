from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leave_rollover.models.balance import LeaveBalance
from leave_rollover.models.history import LeaveBalanceHistory
from leave_rollover.schemas.balance import (
    LeaveBalanceHistoryListResponse,
    LeaveBalanceHistoryResponse,
    LeaveBalanceListResponse,
    LeaveBalanceResponse,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def _build_balance_response(balance: LeaveBalance) -> LeaveBalanceResponse:
    """Map a balance model to its response schema."""
    return LeaveBalanceResponse(
        id=balance.id,
        employee_id=balance.employee_id,
        year=balance.year,
        leave_type=balance.leave_type,
        total_allocated=balance.total_allocated,
        used_days=balance.used_days,
        available_days=balance.available_days,
        carry_forward=balance.carry_forward,
    )


def _build_history_response(entry: LeaveBalanceHistory) -> LeaveBalanceHistoryResponse:
    """Map a history row to its response schema."""
    return LeaveBalanceHistoryResponse(
        id=entry.id,
        employee_id=entry.employee_id,
        year=entry.year,
        leave_type=entry.leave_type,
        total_allocated=entry.total_allocated,
        used_days=entry.used_days,
        available_days=entry.available_days,
        carry_forward=entry.carry_forward,
        archived_at=entry.archived_at,
        archived_by_id=entry.archived_by_id,
    )


async def get_employee_balances(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int | None = None,
) -> LeaveBalanceListResponse:
    """List an employee's active balances, optionally for a single year."""
    filters = [col(LeaveBalance.employee_id) == employee_id]
    if year is not None:
        filters.append(col(LeaveBalance.year) == year)

    result = await session.execute(
        select(LeaveBalance).where(*filters).order_by(col(LeaveBalance.year), col(LeaveBalance.leave_type))
    )
    items = [_build_balance_response(b) for b in result.scalars().all()]
    return LeaveBalanceListResponse(items=items, total=len(items))


async def get_employee_balance_history(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveBalanceHistoryListResponse:
    """Page through an employee's archived balances, newest archive first."""
    filters = [col(LeaveBalanceHistory.employee_id) == employee_id]
    if year is not None:
        filters.append(col(LeaveBalanceHistory.year) == year)

    total = (await session.execute(select(func.count()).select_from(LeaveBalanceHistory).where(*filters))).scalar_one()

    result = await session.execute(
        select(LeaveBalanceHistory)
        .where(*filters)
        .order_by(col(LeaveBalanceHistory.archived_at).desc(), col(LeaveBalanceHistory.leave_type))
        .offset(offset)
        .limit(limit)
    )
    items = [_build_history_response(e) for e in result.scalars().all()]
    return LeaveBalanceHistoryListResponse(items=items, total=total)
