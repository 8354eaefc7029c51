from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision

NO_SHIFT_NOTE = "No shift scheduled"


class NormalStrategy(AttendanceStrategy):
    """On-time check-in (also used when the user has no shift that day)."""

    def decide_checkin(self, *, now: datetime, today: date, shift: Optional[Shift]) -> StatusDecision:
        if shift is None:
            return StatusDecision(status=AttendanceStatus.ON_TIME, note=NO_SHIFT_NOTE)
        return StatusDecision(status=AttendanceStatus.ON_TIME, shift_id=shift.shift_id)
