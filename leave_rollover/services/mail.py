# ruff: noqa: TC003
from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel

if TYPE_CHECKING:
    from leave_rollover.models.balance import LeaveBalance

logger = logging.getLogger(__name__)


class ResetBalanceLine(BaseModel):
    """One leave type's fresh allocation, as shown in a reset notification."""

    leave_type: str
    total_allocated: Decimal
    available_days: Decimal


class ResetNotification(BaseModel):
    """A leave-balance reset message handed to the mail transport."""

    email: str
    first_name: str
    year: int
    balances: list[ResetBalanceLine]


@runtime_checkable
class MailService(Protocol):
    """Interface for the outbound mail collaborator."""

    async def send_leave_balance_reset_notification(
        self,
        email: str,
        first_name: str,
        year: int,
        balances: Sequence[LeaveBalance],
    ) -> None:
        """Tell an employee their balances were reset for ``year``. May raise."""
        ...


def build_reset_notification(
    email: str,
    first_name: str,
    year: int,
    balances: Sequence[LeaveBalance],
) -> ResetNotification:
    """Snapshot the balances into a transport-neutral message."""
    return ResetNotification(
        email=email,
        first_name=first_name,
        year=year,
        balances=[
            ResetBalanceLine(
                leave_type=b.leave_type,
                total_allocated=b.total_allocated,
                available_days=b.available_days,
            )
            for b in balances
        ],
    )


class InMemoryMailService:
    """In-memory stub that records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[ResetNotification] = []

    async def send_leave_balance_reset_notification(
        self,
        email: str,
        first_name: str,
        year: int,
        balances: Sequence[LeaveBalance],
    ) -> None:
        """Record the notification."""
        message = build_reset_notification(email, first_name, year, balances)
        self.sent.append(message)
        logger.info("Leave balance reset notification queued for %s (year=%d)", email, year)


_mail_service: MailService = InMemoryMailService()


def get_mail_service() -> MailService:
    """Return the configured mail collaborator."""
    return _mail_service


def set_mail_service(service: MailService) -> None:
    """Override the service (for testing or production wiring)."""
    global _mail_service
    _mail_service = service
