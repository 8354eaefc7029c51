from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class Shift:
    """Domain entity: a work shift owned by one organization."""

    shift_id: int
    organization_id: str
    shift_name: str
    start_time: time
    end_time: time

    @property
    def is_overnight(self) -> bool:
        return self.end_time <= self.start_time

    def starts_at(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    def ends_at(self, work_date: date) -> datetime:
        # Overnight shifts end on the following day.
        end = datetime.combine(work_date, self.end_time)
        if self.is_overnight:
            end += timedelta(days=1)
        return end
