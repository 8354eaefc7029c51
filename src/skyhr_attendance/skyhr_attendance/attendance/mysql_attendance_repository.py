from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceSource, AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceEvent
from .repository import AttendanceRepository

_COLUMNS = """
    event_id, user_id, organization_id, work_date, check_in, check_out, is_verified, source,
    shift_id, geofence_id, latitude, longitude, distance_to_geofence_m, is_within_geofence,
    status, face_confidence, liveness_score, spoof_flag, notes, updated_at, deleted_at
"""


def _to_event(r: dict) -> AttendanceEvent:
    within = r.get("is_within_geofence")
    return AttendanceEvent(
        event_id=r["event_id"],
        user_id=r["user_id"],
        organization_id=r["organization_id"],
        work_date=r["work_date"],
        check_in=r["check_in"],
        check_out=r.get("check_out"),
        status=AttendanceStatus(r["status"]),
        source=AttendanceSource(r["source"]),
        is_verified=as_bool(r.get("is_verified")),
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        geofence_id=r.get("geofence_id"),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
        distance_to_geofence_m=(
            int(r["distance_to_geofence_m"]) if r.get("distance_to_geofence_m") is not None else None
        ),
        is_within_geofence=as_bool(within) if within is not None else None,
        face_confidence=r.get("face_confidence"),
        liveness_score=r.get("liveness_score"),
        spoof_flag=as_bool(r.get("spoof_flag")),
        notes=r.get("notes"),
        updated_at=r.get("updated_at"),
        deleted_at=r.get("deleted_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, event_id: str, organization_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE event_id=%s AND organization_id=%s AND deleted_at IS NULL
                """,
                (event_id, organization_id),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_open_for_user_and_date(
        self, *, user_id: str, organization_id: str, work_date: date
    ) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE user_id=%s AND organization_id=%s AND work_date=%s
                  AND check_out IS NULL AND status <> 'absent' AND deleted_at IS NULL
                ORDER BY check_in DESC
                LIMIT 1
                """,
                (user_id, organization_id, work_date),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def has_event_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_events
                WHERE user_id=%s AND organization_id=%s AND work_date=%s AND deleted_at IS NULL
                LIMIT 1
                """,
                (user_id, organization_id, work_date),
            )
            return fetchone(cur) is not None

    def create(self, event: AttendanceEvent) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        event_id, user_id, organization_id, work_date, check_in, check_out,
                        is_verified, source, shift_id, geofence_id, latitude, longitude,
                        distance_to_geofence_m, is_within_geofence, status, face_confidence,
                        liveness_score, spoof_flag, notes
                    )
                    VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        event.event_id,
                        event.user_id,
                        event.organization_id,
                        event.work_date,
                        event.check_in,
                        event.check_out,
                        1 if event.is_verified else 0,
                        event.source.value,
                        event.shift_id,
                        event.geofence_id,
                        event.latitude,
                        event.longitude,
                        event.distance_to_geofence_m,
                        None if event.is_within_geofence is None else int(event.is_within_geofence),
                        event.status.value,
                        event.face_confidence,
                        event.liveness_score,
                        1 if event.spoof_flag else 0,
                        event.notes,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                if is_duplicate_key(exc):
                    raise ConflictError("An attendance record already exists for this user today") from exc
                raise
        return event

    def update_check_out(self, *, event_id: str, organization_id: str, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_events
                SET check_out=%s
                WHERE event_id=%s AND organization_id=%s AND check_out IS NULL AND deleted_at IS NULL
                """,
                (check_out, event_id, organization_id),
            )
            return cur.rowcount > 0

    def update_status(
        self, *, event_id: str, organization_id: str, status: AttendanceStatus, notes: Optional[str]
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    UPDATE attendance_events
                    SET status=%s, notes=%s
                    WHERE event_id=%s AND organization_id=%s AND deleted_at IS NULL
                    """,
                    (status.value, notes, event_id, organization_id),
                )
            except mysql.connector.IntegrityError as exc:
                # Reopening an absence row while another session is open, or a second absence that day.
                if is_duplicate_key(exc):
                    raise ConflictError("Status change conflicts with another record for this user today") from exc
                raise
            return cur.rowcount > 0

    def list_by_statuses(
        self, *, organization_id: str, statuses: Iterable[AttendanceStatus]
    ) -> Sequence[AttendanceEvent]:
        values = [s.value for s in statuses]
        if not values:
            return []
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE organization_id=%s AND status IN ({placeholders}) AND deleted_at IS NULL
                ORDER BY check_in DESC
                """,
                (organization_id, *values),
            )
            return [_to_event(r) for r in fetchall(cur)]
