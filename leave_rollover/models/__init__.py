from sqlmodel import SQLModel

from leave_rollover.models.balance import LeaveBalance
from leave_rollover.models.base import TimestampMixin, UTCDateTime, UUIDBase
from leave_rollover.models.enums import LeaveType
from leave_rollover.models.history import LeaveBalanceHistory

__all__ = [
    "LeaveBalance",
    "LeaveBalanceHistory",
    "LeaveType",
    "SQLModel",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDBase",
]
