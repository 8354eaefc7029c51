from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_EARLY_TOLERANCE_MINUTES, DEFAULT_LATE_GRACE_MINUTES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Organization
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, organization_id: str) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, rekognition_collection_id,
                       late_grace_minutes, early_tolerance_minutes
                FROM organizations
                WHERE organization_id=%s
                """,
                (organization_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Organization(
                organization_id=r["organization_id"],
                name=r["name"],
                rekognition_collection_id=r.get("rekognition_collection_id"),
                late_grace_minutes=int(r.get("late_grace_minutes") if r.get("late_grace_minutes") is not None else DEFAULT_LATE_GRACE_MINUTES),
                early_tolerance_minutes=int(
                    r.get("early_tolerance_minutes")
                    if r.get("early_tolerance_minutes") is not None
                    else DEFAULT_EARLY_TOLERANCE_MINUTES
                ),
            )

    def set_collection_id(self, organization_id: str, collection_id: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE organizations SET rekognition_collection_id=%s WHERE organization_id=%s",
                (collection_id, organization_id),
            )
            return cur.rowcount > 0
