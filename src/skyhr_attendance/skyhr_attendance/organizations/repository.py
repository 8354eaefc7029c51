from __future__ import annotations

from typing import Optional, Protocol

from .model import Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: str) -> Optional[Organization]:
        raise NotImplementedError

    def set_collection_id(self, organization_id: str, collection_id: Optional[str]) -> bool:
        raise NotImplementedError
