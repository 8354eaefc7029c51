from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...common.datetime_utils import whole_minutes_between
from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class EarlyStrategy(AttendanceStrategy):
    """Check-in before shift start minus the organization's early tolerance."""

    def decide_checkin(self, *, now: datetime, today: date, shift: Optional[Shift]) -> StatusDecision:
        if shift is None:
            return StatusDecision(status=AttendanceStatus.EARLY)
        minutes = whole_minutes_between(now, shift.starts_at(today))
        return StatusDecision(
            status=AttendanceStatus.EARLY,
            shift_id=shift.shift_id,
            note=f"Early by {minutes} minutes",
        )
