from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Schedule
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, *, user_id: str, organization_id: str, work_date: date) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, organization_id, user_id, work_date, shift_id, note
                FROM schedules
                WHERE user_id=%s AND organization_id=%s AND work_date=%s
                """,
                (user_id, organization_id, work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Schedule(
                schedule_id=int(r["schedule_id"]),
                organization_id=r["organization_id"],
                user_id=r["user_id"],
                work_date=r["work_date"],
                shift_id=int(r["shift_id"]),
                note=r.get("note"),
            )
