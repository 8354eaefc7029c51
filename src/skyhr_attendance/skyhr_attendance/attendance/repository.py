from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    """Persistence for attendance events.

    Every read is scoped by organization and skips soft-deleted rows.
    """

    def get_by_id(self, *, event_id: str, organization_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_open_for_user_and_date(
        self, *, user_id: str, organization_id: str, work_date: date
    ) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def has_event_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date) -> bool:
        raise NotImplementedError

    def create(self, event: AttendanceEvent) -> AttendanceEvent:
        """Insert ``event``; raises ConflictError when it would be a second open session
        (or a second absence) for the same user/org/day."""

        raise NotImplementedError

    def update_check_out(self, *, event_id: str, organization_id: str, check_out: datetime) -> bool:
        """Close an open event. Returns False when no open event matched."""

        raise NotImplementedError

    def update_status(
        self, *, event_id: str, organization_id: str, status: AttendanceStatus, notes: Optional[str]
    ) -> bool:
        raise NotImplementedError

    def list_by_statuses(
        self, *, organization_id: str, statuses: Iterable[AttendanceStatus]
    ) -> Sequence[AttendanceEvent]:
        """Newest check-in first."""

        raise NotImplementedError
