"""Year-end leave balance rollover.

Archives an employee's balances for a source year into the history ledger,
then writes fresh balances for the following year from the default
allocation policy. Each employee is one unit of work: its history rows and
balance resets are written inside a savepoint and committed before the next
employee starts, so a failure part-way leaves earlier employees complete and
the failing one untouched.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from itertools import groupby
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_rollover.exceptions import BalancesNotFoundError
from leave_rollover.models.balance import LeaveBalance
from leave_rollover.models.history import LeaveBalanceHistory
from leave_rollover.services.allocation import DEFAULT_ALLOCATION_POLICY, AllocationPolicy, default_allocation
from leave_rollover.services.employee import get_employee_service
from leave_rollover.services.mail import get_mail_service

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_rollover.services.employee import EmployeeService
    from leave_rollover.services.mail import MailService

logger = logging.getLogger(__name__)


@dataclass
class RolloverResult:
    """Summary of a rollover run."""

    timestamp: datetime
    archived_count: int = 0
    reset_count: int = 0


# ---------------------------------------------------------------------------
# Unit of work
# ---------------------------------------------------------------------------


def _archive_balance(
    balance: LeaveBalance,
    archived_at: datetime,
    archived_by_id: uuid.UUID | None,
) -> LeaveBalanceHistory:
    """Value-copy a balance into a new history row."""
    return LeaveBalanceHistory(
        employee_id=balance.employee_id,
        year=balance.year,
        leave_type=balance.leave_type,
        total_allocated=balance.total_allocated,
        used_days=balance.used_days,
        available_days=balance.available_days,
        carry_forward=balance.carry_forward,
        archived_at=archived_at,
        archived_by_id=archived_by_id,
    )


async def _reset_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int,
    leave_type: str,
    total_allocated: Decimal,
    now: datetime,
) -> LeaveBalance:
    """Create the (employee, year, leave_type) balance or reset it in place."""
    result = await session.execute(
        select(LeaveBalance).where(
            col(LeaveBalance.employee_id) == employee_id,
            col(LeaveBalance.year) == year,
            col(LeaveBalance.leave_type) == leave_type,
        )
    )
    balance = result.scalar_one_or_none()

    if balance is None:
        balance = LeaveBalance(
            employee_id=employee_id,
            year=year,
            leave_type=leave_type,
            total_allocated=total_allocated,
            used_days=Decimal(0),
            available_days=total_allocated,
            carry_forward=Decimal(0),
            created_at=now,
            updated_at=now,
        )
        session.add(balance)
    else:
        balance.total_allocated = total_allocated
        balance.used_days = Decimal(0)
        balance.available_days = total_allocated
        balance.carry_forward = Decimal(0)
        balance.updated_at = now

    # Flush per row so a later lookup for the same key sees it.
    await session.flush()
    return balance


async def _roll_over_employee(
    session: AsyncSession,
    employee_id: uuid.UUID,
    source_balances: Sequence[LeaveBalance],
    target_year: int,
    timestamp: datetime,
    archived_by_id: uuid.UUID | None,
    policy: AllocationPolicy,
) -> tuple[list[LeaveBalanceHistory], list[LeaveBalance]]:
    """Archive and reset one employee's balances as a single committed unit."""
    async with session.begin_nested():
        archived = [_archive_balance(b, timestamp, archived_by_id) for b in source_balances]
        session.add_all(archived)

        reset: list[LeaveBalance] = []
        for source in source_balances:
            reset.append(
                await _reset_balance(
                    session,
                    employee_id,
                    target_year,
                    source.leave_type,
                    default_allocation(source.leave_type, policy),
                    timestamp,
                )
            )

    await session.commit()
    return archived, reset


async def _notify_employee(
    employee_id: uuid.UUID,
    year: int,
    balances: Sequence[LeaveBalance],
    employee_service: EmployeeService,
    mail_service: MailService,
) -> bool:
    """Send a reset notification. Failures are logged, never raised.

    Returns True when a message was handed to the mail service.
    """
    try:
        employee = await employee_service.get_employee(employee_id)
        if employee is None:
            logger.warning("Skipping reset notification: employee %s not found", employee_id)
            return False
        if not employee.email:
            logger.info("Skipping reset notification: employee %s has no email", employee_id)
            return False
        await mail_service.send_leave_balance_reset_notification(
            employee.email,
            employee.first_name,
            year,
            balances,
        )
    except Exception:
        logger.exception("Failed to send notification to employee %s", employee_id)
        return False
    return True


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


async def process_year_end_reset(
    session: AsyncSession,
    notify_employees: bool = False,
    *,
    employee_service: EmployeeService | None = None,
    mail_service: MailService | None = None,
    now: datetime | None = None,
    year: int | None = None,
    allocation_policy: AllocationPolicy = DEFAULT_ALLOCATION_POLICY,
) -> RolloverResult:
    """Roll every current-year balance over into next year.

    The current year is ``year`` when given, else the year of ``now``.

    History rows are tagged as system archives (``archived_by_id`` None).
    Next-year balances are created or, when one already exists for the same
    employee and leave type, reset in place, so re-running leaves a single
    active balance per type while history keeps one row per run.
    """
    timestamp = now or datetime.now(UTC)
    current_year = year if year is not None else timestamp.year
    next_year = current_year + 1
    employee_service = employee_service or get_employee_service()
    mail_service = mail_service or get_mail_service()

    logger.info("Starting year-end leave balance reset from %d to %d", current_year, next_year)

    rows = await session.execute(
        select(LeaveBalance)
        .where(col(LeaveBalance.year) == current_year)
        .order_by(col(LeaveBalance.employee_id), col(LeaveBalance.leave_type))
    )
    current_balances = list(rows.scalars().all())
    logger.info("Found %d leave balance records to process", len(current_balances))

    result = RolloverResult(timestamp=timestamp)

    for employee_id, group in groupby(current_balances, key=lambda b: b.employee_id):
        source_balances = list(group)
        archived, reset = await _roll_over_employee(
            session,
            employee_id,
            source_balances,
            next_year,
            timestamp,
            None,
            allocation_policy,
        )
        result.archived_count += len(archived)
        result.reset_count += len(reset)

        if notify_employees:
            await _notify_employee(employee_id, next_year, reset, employee_service, mail_service)

    logger.info(
        "Year-end reset complete: archived=%d reset=%d year=%d",
        result.archived_count,
        result.reset_count,
        next_year,
    )
    return result


async def reset_leave_balances_for_employee(
    session: AsyncSession,
    employee_id: uuid.UUID,
    target_year: int,
    archived_by_id: uuid.UUID | None = None,
    notify_employee: bool = False,
    *,
    employee_service: EmployeeService | None = None,
    mail_service: MailService | None = None,
    now: datetime | None = None,
    allocation_policy: AllocationPolicy = DEFAULT_ALLOCATION_POLICY,
) -> RolloverResult:
    """Reset one employee's balances into ``target_year`` from the prior year.

    Raises BalancesNotFoundError, before writing anything, when the employee
    has no balances for ``target_year - 1``.
    """
    source_year = target_year - 1
    timestamp = now or datetime.now(UTC)

    logger.info(
        "Starting leave balance reset for employee %s from %d to %d",
        employee_id,
        source_year,
        target_year,
    )

    rows = await session.execute(
        select(LeaveBalance)
        .where(
            col(LeaveBalance.employee_id) == employee_id,
            col(LeaveBalance.year) == source_year,
        )
        .order_by(col(LeaveBalance.leave_type))
    )
    source_balances = list(rows.scalars().all())

    if not source_balances:
        msg = f"No leave balances found for employee {employee_id} for year {source_year}"
        raise BalancesNotFoundError(msg)

    archived, reset = await _roll_over_employee(
        session,
        employee_id,
        source_balances,
        target_year,
        timestamp,
        archived_by_id,
        allocation_policy,
    )

    if notify_employee:
        await _notify_employee(
            employee_id,
            target_year,
            reset,
            employee_service or get_employee_service(),
            mail_service or get_mail_service(),
        )

    logger.info(
        "Employee %s reset complete: archived=%d reset=%d year=%d",
        employee_id,
        len(archived),
        len(reset),
        target_year,
    )
    return RolloverResult(timestamp=timestamp, archived_count=len(archived), reset_count=len(reset))
