from __future__ import annotations

from ..core.exceptions import AuthorizationError
from .model import Identity, Member
from .repository import MemberRepository


class MembershipService:
    def __init__(self, members: MemberRepository):
        self._members = members

    def require_member(self, identity: Identity) -> Member:
        member = self._members.get(user_id=identity.user_id, organization_id=identity.organization_id)
        if not member:
            raise AuthorizationError("You are not a member of this organization")
        return member

    def require_admin(self, identity: Identity) -> Member:
        """Owner/admin gate for administrative attendance operations."""
        member = self.require_member(identity)
        if not member.is_admin:
            raise AuthorizationError("Admin or owner role required")
        return member
