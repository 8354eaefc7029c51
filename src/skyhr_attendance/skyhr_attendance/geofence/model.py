from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import GeofenceType


@dataclass(frozen=True)
class Geofence:
    """Domain entity: a named circular region gating where check-ins are valid.

    Center coordinates are kept as submitted (decimal-degree strings); they are
    parsed and validated whenever the geofence is evaluated.
    """

    geofence_id: str
    organization_id: str
    name: str
    geofence_type: GeofenceType
    center_latitude: Optional[str]
    center_longitude: Optional[str]
    radius_m: Optional[int]
    active: bool = True
    deleted_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.geofence_id,
            "organization_id": self.organization_id,
            "name": self.name,
            "type": self.geofence_type.value,
            "center_latitude": self.center_latitude,
            "center_longitude": self.center_longitude,
            "radius": self.radius_m,
            "active": self.active,
        }
