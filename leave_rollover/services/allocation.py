"""Yearly default allocation per leave type.

Rollover assigns these fixed amounts to every employee for the new year. It
does not consult per-employee entitlements.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType

from leave_rollover.models.enums import LeaveType

AllocationPolicy = Mapping[str, Decimal]

DEFAULT_ALLOCATION_POLICY: AllocationPolicy = MappingProxyType(
    {
        LeaveType.EARNED: Decimal(12),
        LeaveType.SICK: Decimal(8),
        LeaveType.CASUAL: Decimal(8),
        LeaveType.COMPENSATION: Decimal(0),  # accrues separately, never allocated here
    }
)


def default_allocation(leave_type: str, policy: AllocationPolicy = DEFAULT_ALLOCATION_POLICY) -> Decimal:
    """Return the yearly allocation for a leave type, 0 for unknown types."""
    return policy.get(leave_type, Decimal(0))
