from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...common.datetime_utils import whole_minutes_between
from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after shift start plus grace."""

    def decide_checkin(self, *, now: datetime, today: date, shift: Optional[Shift]) -> StatusDecision:
        if shift is None:
            return StatusDecision(status=AttendanceStatus.LATE)
        minutes = whole_minutes_between(shift.starts_at(today), now)
        return StatusDecision(
            status=AttendanceStatus.LATE,
            shift_id=shift.shift_id,
            note=f"Late by {minutes} minutes",
        )
