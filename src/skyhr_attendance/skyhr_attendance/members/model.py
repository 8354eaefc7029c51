from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ADMIN_ROLES, MemberRole


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as supplied by the auth provider."""

    user_id: str
    organization_id: str


@dataclass(frozen=True)
class Member:
    """Domain entity: a user's membership in one organization.

    Note: Plain data object (no DB access). Rows are written by the auth provider.
    """

    user_id: str
    organization_id: str
    role: MemberRole
    full_name: Optional[str] = None
    default_shift_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
