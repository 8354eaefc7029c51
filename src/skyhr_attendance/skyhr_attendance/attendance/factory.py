from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..shifts.model import Shift
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(
        self,
        *,
        now: datetime,
        today: date,
        shift: Optional[Shift],
        grace_minutes: int,
        early_tolerance_minutes: int,
    ) -> AttendanceStrategy:
        if not shift:
            return NormalStrategy()

        shift_start = shift.starts_at(today)
        if now < shift_start - timedelta(minutes=early_tolerance_minutes):
            return EarlyStrategy()
        if now <= shift_start + timedelta(minutes=grace_minutes):
            return NormalStrategy()
        return LateStrategy()
