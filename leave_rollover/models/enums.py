from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of paid time off a balance tracks."""

    SICK = "sick"
    CASUAL = "casual"
    EARNED = "earned"
    COMPENSATION = "compensation"
