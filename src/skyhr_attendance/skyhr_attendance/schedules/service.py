from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..members.repository import MemberRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .repository import ScheduleRepository


class ShiftLookup:
    """Resolve the shift a member works on a given day.

    A schedule row for the day wins; otherwise the member's default shift
    applies. Shifts belonging to another organization are ignored.
    """

    def __init__(self, schedules: ScheduleRepository, shifts: ShiftRepository, members: MemberRepository):
        self._schedules = schedules
        self._shifts = shifts
        self._members = members

    def effective_shift(self, *, user_id: str, organization_id: str, work_date: date) -> Optional[Shift]:
        sc = self._schedules.get_for_user_and_date(
            user_id=user_id, organization_id=organization_id, work_date=work_date
        )
        if sc:
            shift_id = sc.shift_id
        else:
            member = self._members.get(user_id=user_id, organization_id=organization_id)
            shift_id = member.default_shift_id if member else None

        if not shift_id:
            return None
        shift = self._shifts.get_by_id(shift_id)
        if shift and shift.organization_id != organization_id:
            return None
        return shift

    def overnight_shift_before(self, *, user_id: str, organization_id: str, day: date) -> Optional[Shift]:
        """The previous day's shift when it runs past midnight into ``day``."""
        shift = self.effective_shift(
            user_id=user_id, organization_id=organization_id, work_date=day - timedelta(days=1)
        )
        return shift if shift and shift.is_overnight else None

    def shift_at(self, *, user_id: str, organization_id: str, at: datetime) -> tuple[date, Optional[Shift]]:
        """Work date and shift for a moment in time.

        An overnight shift from the previous day that has not ended yet at
        ``at`` takes precedence over the shift of ``at``'s calendar day.
        """
        carried = self.overnight_shift_before(user_id=user_id, organization_id=organization_id, day=at.date())
        previous_day = at.date() - timedelta(days=1)
        if carried and at < carried.ends_at(previous_day):
            return previous_day, carried
        return at.date(), self.effective_shift(
            user_id=user_id, organization_id=organization_id, work_date=at.date()
        )
