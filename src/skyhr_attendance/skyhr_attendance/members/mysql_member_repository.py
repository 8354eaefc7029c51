from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MemberRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Member
from .repository import MemberRepository


def _to_member(r: dict) -> Member:
    return Member(
        user_id=r["user_id"],
        organization_id=r["organization_id"],
        role=MemberRole(r["role"]),
        full_name=r.get("full_name"),
        default_shift_id=int(r["default_shift_id"]) if r.get("default_shift_id") else None,
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: str, organization_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, organization_id, role, full_name, default_shift_id
                FROM members
                WHERE user_id=%s AND organization_id=%s
                """,
                (user_id, organization_id),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_for_organization(self, organization_id: str) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, organization_id, role, full_name, default_shift_id
                FROM members
                WHERE organization_id=%s
                ORDER BY user_id
                """,
                (organization_id,),
            )
            return [_to_member(r) for r in fetchall(cur)]
