from __future__ import annotations

import io
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.skyhr_attendance.skyhr_attendance.attendance.classifier import AttendanceStatusClassifier
from src.skyhr_attendance.skyhr_attendance.attendance.model import AttendanceEvent
from src.skyhr_attendance.skyhr_attendance.attendance.service import AttendanceService
from src.skyhr_attendance.skyhr_attendance.attendance.store import AttendanceEventStore
from src.skyhr_attendance.skyhr_attendance.biometrics.gate import FaceMatch
from src.skyhr_attendance.skyhr_attendance.core.enums import AttendanceStatus, GeofenceType, MemberRole
from src.skyhr_attendance.skyhr_attendance.core.exceptions import ConflictError
from src.skyhr_attendance.skyhr_attendance.geofence.model import Geofence
from src.skyhr_attendance.skyhr_attendance.geofence.service import GeofenceService
from src.skyhr_attendance.skyhr_attendance.members.model import Identity, Member
from src.skyhr_attendance.skyhr_attendance.members.service import MembershipService
from src.skyhr_attendance.skyhr_attendance.organizations.model import Organization
from src.skyhr_attendance.skyhr_attendance.qr.model import QrPayload
from src.skyhr_attendance.skyhr_attendance.qr.service import QrService
from src.skyhr_attendance.skyhr_attendance.schedules.model import Schedule
from src.skyhr_attendance.skyhr_attendance.schedules.service import ShiftLookup
from src.skyhr_attendance.skyhr_attendance.shifts.model import Shift
from src.skyhr_attendance.skyhr_attendance.storage.base import StoredObject

QR_SECRET = "test-qr-secret"
FIXED_NOW = datetime(2025, 1, 6, 8, 3, 0)


@dataclass
class InMemoryOrganizations:
    orgs: dict[str, Organization]

    def get_by_id(self, organization_id: str) -> Optional[Organization]:
        return self.orgs.get(organization_id)

    def set_collection_id(self, organization_id: str, collection_id: Optional[str]) -> bool:
        org = self.orgs.get(organization_id)
        if not org:
            return False
        self.orgs[organization_id] = replace(org, rekognition_collection_id=collection_id)
        return True


@dataclass
class InMemoryMembers:
    members: dict[tuple[str, str], Member]

    def get(self, *, user_id: str, organization_id: str) -> Optional[Member]:
        return self.members.get((user_id, organization_id))

    def list_for_organization(self, organization_id: str):
        return [m for (_, org), m in self.members.items() if org == organization_id]


@dataclass
class InMemoryShifts:
    shifts: dict[int, Shift]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.shifts.get(shift_id)


@dataclass
class InMemorySchedules:
    rows: dict[tuple[str, str, date], Schedule] = field(default_factory=dict)

    def get_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date):
        return self.rows.get((user_id, organization_id, work_date))

    def assign(self, user_id: str, organization_id: str, work_date: date, shift_id: int) -> None:
        self.rows[(user_id, organization_id, work_date)] = Schedule(
            schedule_id=len(self.rows) + 1,
            organization_id=organization_id,
            user_id=user_id,
            work_date=work_date,
            shift_id=shift_id,
        )


@dataclass
class InMemoryGeofences:
    items: dict[str, Geofence]

    def get(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        gf = self.items.get(geofence_id)
        if gf and gf.organization_id == organization_id and gf.deleted_at is None:
            return gf
        return None

    def find_active(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        gf = self.get(geofence_id=geofence_id, organization_id=organization_id)
        return gf if gf and gf.active else None

    def create(self, geofence: Geofence) -> Geofence:
        self.items[geofence.geofence_id] = geofence
        return geofence

    def set_active(self, *, geofence_id: str, organization_id: str, active: bool) -> bool:
        gf = self.get(geofence_id=geofence_id, organization_id=organization_id)
        if not gf:
            return False
        self.items[geofence_id] = replace(gf, active=active)
        return True


class InMemoryAttendance:
    """Mirrors the schema's unique keys: one open session and one absence per user/org/day."""

    def __init__(self):
        self.events: dict[str, AttendanceEvent] = {}

    def _same_day(self, user_id: str, organization_id: str, work_date: date):
        return [
            e
            for e in self.events.values()
            if e.user_id == user_id
            and e.organization_id == organization_id
            and e.work_date == work_date
            and e.deleted_at is None
        ]

    def get_by_id(self, *, event_id: str, organization_id: str) -> Optional[AttendanceEvent]:
        e = self.events.get(event_id)
        if e and e.organization_id == organization_id and e.deleted_at is None:
            return e
        return None

    def get_open_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date):
        for e in self._same_day(user_id, organization_id, work_date):
            if e.is_open:
                return e
        return None

    def has_event_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date) -> bool:
        return bool(self._same_day(user_id, organization_id, work_date))

    def create(self, event: AttendanceEvent) -> AttendanceEvent:
        for e in self._same_day(event.user_id, event.organization_id, event.work_date):
            if e.is_open and event.is_open:
                raise ConflictError("An attendance record already exists for this user today")
            if e.status == AttendanceStatus.ABSENT and event.status == AttendanceStatus.ABSENT:
                raise ConflictError("An attendance record already exists for this user today")
        self.events[event.event_id] = event
        return event

    def update_check_out(self, *, event_id, organization_id, check_out):
        e = self.get_by_id(event_id=event_id, organization_id=organization_id)
        if not e or e.check_out is not None:
            return False
        self.events[event_id] = replace(e, check_out=check_out)
        return True

    def update_status(self, *, event_id, organization_id, status, notes):
        e = self.get_by_id(event_id=event_id, organization_id=organization_id)
        if not e:
            return False
        self.events[event_id] = replace(e, status=status, notes=notes, updated_at=FIXED_NOW)
        return True

    def list_by_statuses(self, *, organization_id, statuses):
        wanted = set(statuses)
        items = [
            e
            for e in self.events.values()
            if e.organization_id == organization_id and e.status in wanted and e.deleted_at is None
        ]
        items.sort(key=lambda e: e.check_in, reverse=True)
        return items


class StubFaceGate:
    def __init__(self, match: Optional[FaceMatch] = None):
        self.match = match
        self.calls: list[str] = []
        self.indexed: list[tuple[str, str]] = []

    def search_best_match(self, image_bytes: bytes, organization_id: str) -> Optional[FaceMatch]:
        self.calls.append(organization_id)
        return self.match

    def index_face(self, image_bytes: bytes, external_id: str, organization_id: str) -> str:
        self.indexed.append((external_id, organization_id))
        return f"face-{external_id}"


class MemoryStorage:
    def __init__(self):
        self.objects: dict[str, bytes] = {}

    def upload(self, fileobj, name: str, content_type: str) -> StoredObject:
        self.objects[name] = fileobj.read()
        return StoredObject(url=f"memory://{name}", key=name)


@dataclass
class World:
    organizations: InMemoryOrganizations
    members: InMemoryMembers
    shifts: InMemoryShifts
    schedules: InMemorySchedules
    geofences: InMemoryGeofences
    attendance: InMemoryAttendance
    face_gate: StubFaceGate
    storage: MemoryStorage
    membership: MembershipService
    geofence_service: GeofenceService
    qr_service: QrService
    classifier: AttendanceStatusClassifier
    store: AttendanceEventStore
    attendance_service: AttendanceService

    def token(self, organization_id: str = "org1", location_id: str = "geo1") -> str:
        return self.qr_service.build_token(QrPayload(organization_id=organization_id, location_id=location_id))


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def member_identity() -> Identity:
    return Identity(user_id="u1", organization_id="org1")


@pytest.fixture
def admin_identity() -> Identity:
    return Identity(user_id="admin1", organization_id="org1")


@pytest.fixture
def world() -> World:
    organizations = InMemoryOrganizations(
        {
            "org1": Organization(organization_id="org1", name="Acme", rekognition_collection_id="skyhr_org_org1"),
            "org2": Organization(organization_id="org2", name="Globex"),
        }
    )
    members = InMemoryMembers(
        {
            ("u1", "org1"): Member("u1", "org1", MemberRole.MEMBER, full_name="Alice", default_shift_id=1),
            ("u2", "org1"): Member("u2", "org1", MemberRole.MEMBER, full_name="Bob", default_shift_id=1),
            ("admin1", "org1"): Member("admin1", "org1", MemberRole.ADMIN, full_name="Ada"),
            ("u9", "org2"): Member("u9", "org2", MemberRole.OWNER, default_shift_id=3),
        }
    )
    shifts = InMemoryShifts(
        {
            1: Shift(1, "org1", "Morning", time(8, 0), time(17, 0)),
            2: Shift(2, "org1", "Late", time(13, 0), time(22, 0)),
            3: Shift(3, "org2", "Globex Day", time(9, 0), time(18, 0)),
            4: Shift(4, "org1", "Night", time(22, 0), time(6, 0)),
        }
    )
    schedules = InMemorySchedules()
    geofences = InMemoryGeofences(
        {
            "geo1": Geofence("geo1", "org1", "HQ", GeofenceType.CIRCULAR, "10.0", "20.0", 50),
            "geo-off": Geofence("geo-off", "org1", "Old office", GeofenceType.CIRCULAR, "10.0", "20.0", 50, active=False),
            "geo2": Geofence("geo2", "org2", "Globex HQ", GeofenceType.CIRCULAR, "0", "0", 1000),
        }
    )
    attendance = InMemoryAttendance()
    face_gate = StubFaceGate(FaceMatch(external_id="u1", similarity=98.0))
    storage = MemoryStorage()

    membership = MembershipService(members)
    geofence_service = GeofenceService(geofences)
    qr_service = QrService(QR_SECRET, geofence_service, storage)
    shift_lookup = ShiftLookup(schedules, shifts, members)
    classifier = AttendanceStatusClassifier(shift_lookup, organizations)
    store = AttendanceEventStore(attendance, members, shift_lookup)
    attendance_service = AttendanceService(
        qr_service,
        store,
        classifier,
        face_gate,
        membership,
        geofence_service,
        face_match_threshold=90.0,
        clock=lambda: FIXED_NOW,
    )

    return World(
        organizations=organizations,
        members=members,
        shifts=shifts,
        schedules=schedules,
        geofences=geofences,
        attendance=attendance,
        face_gate=face_gate,
        storage=storage,
        membership=membership,
        geofence_service=geofence_service,
        qr_service=qr_service,
        classifier=classifier,
        store=store,
        attendance_service=attendance_service,
    )


@pytest.fixture
def image_file():
    def _make(data: bytes = b"\xff\xd8fake-jpeg"):
        return (io.BytesIO(data), "face.jpg", "image/jpeg")

    return _make
