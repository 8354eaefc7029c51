from __future__ import annotations

from typing import Optional

from ..core.enums import GeofenceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone
from .model import Geofence
from .repository import GeofenceRepository

_COLUMNS = """
    geofence_id, organization_id, name, type, center_latitude, center_longitude,
    radius, active, deleted_at
"""


def _to_geofence(r: dict) -> Geofence:
    return Geofence(
        geofence_id=r["geofence_id"],
        organization_id=r["organization_id"],
        name=r["name"],
        geofence_type=GeofenceType(r["type"]),
        center_latitude=r.get("center_latitude"),
        center_longitude=r.get("center_longitude"),
        radius_m=int(r["radius"]) if r.get("radius") is not None else None,
        active=as_bool(r.get("active")),
        deleted_at=r.get("deleted_at"),
    )


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM geofences
                WHERE geofence_id=%s AND organization_id=%s AND deleted_at IS NULL
                """,
                (geofence_id, organization_id),
            )
            r = fetchone(cur)
            return _to_geofence(r) if r else None

    def find_active(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM geofences
                WHERE geofence_id=%s AND organization_id=%s AND active=1 AND deleted_at IS NULL
                LIMIT 1
                """,
                (geofence_id, organization_id),
            )
            r = fetchone(cur)
            return _to_geofence(r) if r else None

    def create(self, geofence: Geofence) -> Geofence:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO geofences(geofence_id, organization_id, name, type,
                                      center_latitude, center_longitude, radius, active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    geofence.geofence_id,
                    geofence.organization_id,
                    geofence.name,
                    geofence.geofence_type.value,
                    geofence.center_latitude,
                    geofence.center_longitude,
                    geofence.radius_m,
                    int(geofence.active),
                ),
            )
        return geofence

    def set_active(self, *, geofence_id: str, organization_id: str, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE geofences
                SET active=%s
                WHERE geofence_id=%s AND organization_id=%s AND deleted_at IS NULL
                """,
                (int(active), geofence_id, organization_id),
            )
            return cur.rowcount > 0
