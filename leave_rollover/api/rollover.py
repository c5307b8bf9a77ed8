# ruff: noqa: B008, TC001, TC003
"""Admin endpoints that trigger leave balance rollovers on demand."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter

from leave_rollover.api.deps import AdminDep
from leave_rollover.db import SessionDep
from leave_rollover.exceptions import AppError, RolloverFailedError
from leave_rollover.schemas.rollover import EmployeeResetRequest, RolloverResponse, YearEndResetRequest
from leave_rollover.services.rollover import process_year_end_reset, reset_leave_balances_for_employee

logger = logging.getLogger(__name__)

admin_rollover_router = APIRouter(
    prefix="/admin/leave-balances",
    tags=["rollover"],
)


@admin_rollover_router.post("/year-end-reset", response_model=RolloverResponse)
async def trigger_year_end_reset(
    session: SessionDep,
    auth: AdminDep,
    payload: YearEndResetRequest | None = None,
) -> RolloverResponse:
    """Run the system-wide year-end reset now (admin only)."""
    notify = payload.notify_employees if payload is not None else False
    logger.info("Year-end reset triggered by user %s (notify=%s)", auth.user_id, notify)
    try:
        result = await process_year_end_reset(session, notify)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Year-end reset failed")
        raise RolloverFailedError(f"Failed to process year-end reset: {exc}") from exc

    return RolloverResponse(
        message="Year-end reset process completed successfully",
        archived_count=result.archived_count,
        reset_count=result.reset_count,
        timestamp=result.timestamp,
    )


@admin_rollover_router.post("/reset/{employee_id}", response_model=RolloverResponse)
async def reset_employee_balances(
    employee_id: uuid.UUID,
    payload: EmployeeResetRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RolloverResponse:
    """Reset one employee's balances into the target year (admin only).

    The acting admin is recorded on every archived row.
    """
    try:
        result = await reset_leave_balances_for_employee(
            session,
            employee_id,
            payload.target_year,
            archived_by_id=auth.user_id,
            notify_employee=payload.notify_employee,
        )
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Leave balance reset failed for employee %s", employee_id)
        raise RolloverFailedError(f"Failed to reset employee leave balances: {exc}") from exc

    return RolloverResponse(
        message=f"Leave balances for employee {employee_id} reset successfully for year {payload.target_year}",
        archived_count=result.archived_count,
        reset_count=result.reset_count,
        timestamp=result.timestamp,
    )
