"""Attendance Event Store: the only writer of attendance rows."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Sequence

from ..core.enums import FLAGGED_STATUSES, AttendanceSource, AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..members.repository import MemberRepository
from ..schedules.service import ShiftLookup
from ..shifts.model import Shift
from .model import AttendanceEvent, NewAttendanceEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

VALID_STATUSES = tuple(s.value for s in AttendanceStatus)


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")


class AttendanceEventStore:
    def __init__(self, events: AttendanceRepository, members: MemberRepository, shift_lookup: ShiftLookup):
        self._events = events
        self._members = members
        self._shift_lookup = shift_lookup

    def work_date_for(self, user_id: str, organization_id: str, at: datetime) -> date:
        work_date, _ = self._shift_lookup.shift_at(user_id=user_id, organization_id=organization_id, at=at)
        return work_date

    def find_existing_check_in(self, user_id: str, day: date, organization_id: str) -> Optional[AttendanceEvent]:
        """Open session (checked in, not checked out) for the user/org/day, if any."""
        return self._events.get_open_for_user_and_date(
            user_id=user_id, organization_id=organization_id, work_date=day
        )

    def find_open_session(self, user_id: str, organization_id: str, at: datetime) -> Optional[AttendanceEvent]:
        """Session to close at ``at``.

        Last night's session is still closable after its shift has ended,
        as long as that shift ran past midnight.
        """
        work_date = self.work_date_for(user_id, organization_id, at)
        session = self.find_existing_check_in(user_id, work_date, organization_id)
        if session:
            return session
        if self._shift_lookup.overnight_shift_before(user_id=user_id, organization_id=organization_id, day=at.date()):
            return self.find_existing_check_in(user_id, at.date() - timedelta(days=1), organization_id)
        return None

    def create_event(self, new: NewAttendanceEvent) -> AttendanceEvent:
        event = AttendanceEvent(
            event_id=str(uuid.uuid4()),
            user_id=new.user_id,
            organization_id=new.organization_id,
            work_date=new.work_date or new.check_in.date(),
            check_in=new.check_in,
            check_out=None,
            status=new.status,
            source=new.source,
            is_verified=new.is_verified,
            shift_id=new.shift_id,
            geofence_id=new.geofence_id,
            latitude=new.latitude,
            longitude=new.longitude,
            distance_to_geofence_m=new.distance_to_geofence_m,
            is_within_geofence=new.is_within_geofence,
            face_confidence=new.face_confidence,
            spoof_flag=new.spoof_flag,
            notes=new.notes,
        )
        created = self._events.create(event)
        logger.info(
            "Attendance event %s created: user=%s org=%s status=%s",
            created.event_id,
            created.user_id,
            created.organization_id,
            created.status.value,
        )
        return created

    def update_check_out(self, event_id: str, organization_id: str, check_out: datetime) -> AttendanceEvent:
        """Close a session. Check-in containment and status are left as recorded."""
        updated = self._events.update_check_out(
            event_id=event_id, organization_id=organization_id, check_out=check_out
        )
        event = self._events.get_by_id(event_id=event_id, organization_id=organization_id)
        if not event:
            raise NotFoundError("Attendance event not found")
        if not updated:
            raise ConflictError("Attendance event is already checked out")
        return event

    def update_status(
        self, event_id: str, organization_id: str, status, notes: Optional[str] = None
    ) -> AttendanceEvent:
        """Admin correction of a persisted event. ``status`` must be a known status value."""
        new_status = parse_status(status)
        if not self._events.get_by_id(event_id=event_id, organization_id=organization_id):
            raise NotFoundError("Attendance event not found")

        # rowcount is 0 when nothing changed; existence was checked above.
        self._events.update_status(
            event_id=event_id, organization_id=organization_id, status=new_status, notes=notes
        )
        event = self._events.get_by_id(event_id=event_id, organization_id=organization_id)
        if not event:
            raise NotFoundError("Attendance event not found")
        logger.info("Attendance event %s status set to %s", event_id, new_status.value)
        return event

    def _ended_shifts(self, user_id: str, organization_id: str, now: datetime) -> Iterator[tuple[date, Shift]]:
        today = now.date()
        overnight = self._shift_lookup.overnight_shift_before(
            user_id=user_id, organization_id=organization_id, day=today
        )
        if overnight:
            yield today - timedelta(days=1), overnight
        shift = self._shift_lookup.effective_shift(user_id=user_id, organization_id=organization_id, work_date=today)
        if shift:
            yield today, shift

    def mark_absent_users(self, organization_id: str, *, now: datetime) -> list[AttendanceEvent]:
        """Record ``absent`` for members whose shift has ended with no attendance.

        Covers today's shift and last night's overnight shift, each under its
        own work date. Safe to re-run: a member with any event for that work
        date (including an earlier absence) is skipped.
        """
        created: list[AttendanceEvent] = []

        for member in self._members.list_for_organization(organization_id):
            for work_date, shift in self._ended_shifts(member.user_id, organization_id, now):
                if shift.ends_at(work_date) >= now:
                    continue
                if self._events.has_event_for_user_and_date(
                    user_id=member.user_id, organization_id=organization_id, work_date=work_date
                ):
                    continue

                try:
                    event = self.create_event(
                        NewAttendanceEvent(
                            user_id=member.user_id,
                            organization_id=organization_id,
                            check_in=shift.starts_at(work_date),
                            status=AttendanceStatus.ABSENT,
                            source=AttendanceSource.SYSTEM,
                            is_verified=False,
                            shift_id=shift.shift_id,
                            notes=f"No check-in recorded for shift {shift.shift_name}",
                            work_date=work_date,
                        )
                    )
                except ConflictError:
                    # A concurrent sweep or check-in won the race.
                    logger.info("Skipping absence for user %s on %s: already recorded", member.user_id, work_date)
                    continue
                created.append(event)

        logger.info("Marked %d absence(s) for organization %s", len(created), organization_id)
        return created

    def report_flagged(self, organization_id: str) -> Sequence[AttendanceEvent]:
        return self._events.list_by_statuses(organization_id=organization_id, statuses=FLAGGED_STATUSES)
