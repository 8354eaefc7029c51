from __future__ import annotations

from typing import Optional, Protocol

from .model import Geofence


class GeofenceRepository(Protocol):
    def get(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        """Non-deleted geofence owned by the organization (active or not)."""

        raise NotImplementedError

    def find_active(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        raise NotImplementedError

    def create(self, geofence: Geofence) -> Geofence:
        raise NotImplementedError

    def set_active(self, *, geofence_id: str, organization_id: str, active: bool) -> bool:
        raise NotImplementedError
