from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import boto3

from .attendance.classifier import AttendanceStatusClassifier
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.store import AttendanceEventStore
from .biometrics.collections import FaceCollectionRegistry
from .biometrics.rekognition import RekognitionFaceGate
from .biometrics.service import BiometricsService
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_geofence_repository import MySQLGeofenceRepository
from .geofence.service import GeofenceService
from .members.mysql_member_repository import MySQLMemberRepository
from .members.service import MembershipService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .qr.service import QrService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ShiftLookup
from .settings import Settings
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .storage.base import StorageBackend
from .storage.factory import build_storage


@dataclass(frozen=True)
class Container:
    settings: Settings

    membership_service: MembershipService
    geofence_service: GeofenceService
    qr_service: QrService
    biometrics_service: BiometricsService
    attendance_service: AttendanceService


def build_container(
    settings: Settings,
    *,
    rekognition_client=None,
    storage: Optional[StorageBackend] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.db_config))

    organizations_repo = MySQLOrganizationRepository(conn)
    members_repo = MySQLMemberRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    geofences_repo = MySQLGeofenceRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    storage = storage or build_storage(settings)
    rekognition_client = rekognition_client or boto3.client("rekognition", **settings.aws_client_kwargs())

    membership_service = MembershipService(members_repo)
    geofence_service = GeofenceService(geofences_repo)
    qr_service = QrService(settings.qr_secret, geofence_service, storage)

    registry = FaceCollectionRegistry(
        rekognition_client, organizations_repo, prefix=settings.face_collection_prefix
    )
    face_gate = RekognitionFaceGate(
        rekognition_client,
        registry,
        threshold=settings.face_match_threshold,
        max_faces=settings.face_max_matches,
    )
    biometrics_service = BiometricsService(face_gate, registry, storage)

    shift_lookup = ShiftLookup(schedules_repo, shifts_repo, members_repo)
    classifier = AttendanceStatusClassifier(
        shift_lookup,
        organizations_repo,
        strategy_factory=AttendanceStrategyFactory(),
        default_grace_minutes=settings.default_grace_minutes,
        default_early_tolerance_minutes=settings.default_early_tolerance_minutes,
    )
    store = AttendanceEventStore(attendance_repo, members_repo, shift_lookup)
    attendance_service = AttendanceService(
        qr_service,
        store,
        classifier,
        face_gate,
        membership_service,
        geofence_service,
        face_match_threshold=settings.face_match_threshold,
    )

    return Container(
        settings=settings,
        membership_service=membership_service,
        geofence_service=geofence_service,
        qr_service=qr_service,
        biometrics_service=biometrics_service,
        attendance_service=attendance_service,
    )
