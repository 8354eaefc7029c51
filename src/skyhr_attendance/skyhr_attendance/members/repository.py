from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    """Repository interface for organization members.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get(self, *, user_id: str, organization_id: str) -> Optional[Member]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: str) -> Sequence[Member]:
        raise NotImplementedError
