"""Check-in/check-out flow.

Per user and day the session moves ``NoSession -> CheckedIn -> CheckedOut``.
A check-in runs, in order: QR decode and ownership check, active geofence
lookup, duplicate open-session check, face match, geofence containment and
timing status, then persistence. Admin operations act on stored rows directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..biometrics.gate import FaceMatchGate
from ..common.datetime_utils import now_local, whole_minutes_between
from ..common.validators import require_latitude, require_longitude, require_non_empty
from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD
from ..core.enums import AttendanceSource, AttendanceStatus
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..geofence import geometry
from ..geofence.service import GeofenceService
from ..members.model import Identity
from ..members.service import MembershipService
from ..qr.service import QrService
from .classifier import AttendanceStatusClassifier
from .model import AttendanceEvent, NewAttendanceEvent
from .store import AttendanceEventStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    event: AttendanceEvent

    @property
    def message(self) -> str:
        if self.event.is_within_geofence is False:
            return "Attendance recorded but flagged as out of bounds"
        return "Attendance recorded successfully"


@dataclass(frozen=True)
class CheckOutResult:
    event: AttendanceEvent
    work_duration_minutes: int


class AttendanceService:
    def __init__(
        self,
        qr: QrService,
        store: AttendanceEventStore,
        classifier: AttendanceStatusClassifier,
        face_gate: FaceMatchGate,
        membership: MembershipService,
        geofences: GeofenceService,
        *,
        face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
        clock: Callable[[], datetime] = now_local,
    ):
        self._qr = qr
        self._store = store
        self._classifier = classifier
        self._face_gate = face_gate
        self._membership = membership
        self._geofences = geofences
        self._threshold = float(face_match_threshold)
        self._clock = clock

    def validate_qr(self, qr_data: str, identity: Identity) -> dict:
        self._membership.require_member(identity)
        geofence = self._qr.resolve_location(qr_data, identity.organization_id)
        return {"location_id": geofence.geofence_id, "organization_id": identity.organization_id}

    def check_in(
        self,
        identity: Identity,
        *,
        qr_data: str,
        image_bytes: Optional[bytes],
        latitude,
        longitude,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        if not qr_data or not image_bytes:
            raise ValidationError("qr_data and image are required")
        if latitude in (None, "") or longitude in (None, ""):
            raise ValidationError("latitude and longitude are required for geofence validation")
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)

        self._membership.require_member(identity)
        user_id, org_id = identity.user_id, identity.organization_id
        now = now or self._clock()

        # QR ownership and active geofence.
        geofence = self._qr.resolve_location(qr_data, org_id)

        work_date = self._store.work_date_for(user_id, org_id, now)
        if self._store.find_existing_check_in(user_id, work_date, org_id):
            raise ConflictError("You already have an active check-in today. Please check out first.")

        match = self._face_gate.search_best_match(image_bytes, org_id)
        if not match or match.external_id != user_id or match.similarity < self._threshold:
            logger.warning(
                "Face rejected for user %s in organization %s (matched=%s, similarity=%s)",
                user_id,
                org_id,
                match.external_id if match else None,
                match.similarity if match else None,
            )
            raise AuthorizationError("Face does not match the current user")

        containment = geometry.evaluate(lat, lon, geofence)
        decision = self._classifier.classify(now, user_id, org_id)

        status = decision.status
        notes = decision.note
        distance = containment.rounded_distance_m
        if not containment.is_within:
            # Geofence violation outranks any timing status.
            status = AttendanceStatus.OUT_OF_BOUNDS
            notes = f"Check-in {distance}m from geofence (radius: {geofence.radius_m}m). {notes or ''}".strip()

        event = self._store.create_event(
            NewAttendanceEvent(
                user_id=user_id,
                organization_id=org_id,
                check_in=now,
                status=status,
                source=AttendanceSource.QR_FACE,
                is_verified=True,
                shift_id=decision.shift_id,
                geofence_id=geofence.geofence_id,
                latitude=str(latitude).strip(),
                longitude=str(longitude).strip(),
                distance_to_geofence_m=distance,
                is_within_geofence=containment.is_within,
                face_confidence=match.similarity_text,
                notes=notes,
                work_date=work_date,
            )
        )
        return CheckInResult(event=event)

    def check_out(self, identity: Identity, *, latitude, longitude, now: Optional[datetime] = None) -> CheckOutResult:
        if latitude in (None, "") or longitude in (None, ""):
            raise ValidationError("latitude and longitude are required for geofence validation")
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)

        self._membership.require_member(identity)
        user_id, org_id = identity.user_id, identity.organization_id
        now = now or self._clock()

        session = self._store.find_open_session(user_id, org_id, now)
        if not session:
            raise ValidationError("No active check-in found. Please check in first.")

        geofence = (
            self._geofences.find_active(geofence_id=session.geofence_id, organization_id=org_id)
            if session.geofence_id
            else None
        )
        if geofence:
            # Logged only; the row keeps the check-in containment.
            containment = geometry.evaluate(lat, lon, geofence)
            if not containment.is_within:
                logger.info(
                    "Check-out for user %s is %sm outside geofence %s",
                    user_id,
                    containment.rounded_distance_m,
                    geofence.geofence_id,
                )

        event = self._store.update_check_out(session.event_id, org_id, now)
        duration = max(0, whole_minutes_between(session.check_in, now))
        return CheckOutResult(event=event, work_duration_minutes=duration)

    def mark_absences(self, identity: Identity, *, now: Optional[datetime] = None) -> list[AttendanceEvent]:
        self._membership.require_admin(identity)
        return self._store.mark_absent_users(identity.organization_id, now=now or self._clock())

    def update_status(self, identity: Identity, event_id: str, status, notes: Optional[str] = None) -> AttendanceEvent:
        self._membership.require_admin(identity)
        event_id = require_non_empty(event_id, "Event ID")
        if not status:
            raise ValidationError("Status is required")
        return self._store.update_status(event_id, identity.organization_id, status, notes)

    def report(self, identity: Identity) -> Sequence[AttendanceEvent]:
        self._membership.require_admin(identity)
        return self._store.report_flagged(identity.organization_id)
