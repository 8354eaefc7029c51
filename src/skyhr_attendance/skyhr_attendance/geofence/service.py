from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Optional

from ..common.validators import require_latitude, require_longitude, require_non_empty
from ..core.enums import GeofenceType
from ..core.exceptions import NotFoundError, ValidationError
from .geometry import GeofenceCheck, evaluate, require_radius
from .model import Geofence
from .repository import GeofenceRepository

logger = logging.getLogger(__name__)


class GeofenceService:
    def __init__(self, geofences: GeofenceRepository):
        self._geofences = geofences

    def create(
        self,
        *,
        organization_id: str,
        name: str,
        center_latitude,
        center_longitude,
        radius,
        geofence_type: str = GeofenceType.CIRCULAR.value,
    ) -> Geofence:
        name = require_non_empty(name, "name")
        if geofence_type and geofence_type != GeofenceType.CIRCULAR.value:
            raise ValidationError("Only circular geofences are supported")

        # Validate now so a stored geofence is always evaluable later.
        require_latitude(center_latitude, "center_latitude")
        require_longitude(center_longitude, "center_longitude")
        radius_value = require_radius(radius)
        if not float(radius_value).is_integer():
            raise ValidationError("radius must be a whole number of meters")

        geofence = Geofence(
            geofence_id=str(uuid.uuid4()),
            organization_id=organization_id,
            name=name,
            geofence_type=GeofenceType.CIRCULAR,
            center_latitude=str(center_latitude).strip(),
            center_longitude=str(center_longitude).strip(),
            radius_m=int(radius_value),
            active=True,
        )
        created = self._geofences.create(geofence)
        logger.info("Geofence %s created for organization %s", created.geofence_id, organization_id)
        return created

    def get(self, *, geofence_id: str, organization_id: str) -> Geofence:
        geofence = self._geofences.get(geofence_id=geofence_id, organization_id=organization_id)
        if not geofence:
            raise NotFoundError("Geofence not found")
        return geofence

    def find_active(self, *, geofence_id: str, organization_id: str) -> Optional[Geofence]:
        return self._geofences.find_active(geofence_id=geofence_id, organization_id=organization_id)

    def deactivate(self, *, geofence_id: str, organization_id: str) -> Geofence:
        """Disable a geofence; QR codes pointing at it stop validating immediately."""
        geofence = self.get(geofence_id=geofence_id, organization_id=organization_id)
        self._geofences.set_active(geofence_id=geofence_id, organization_id=organization_id, active=False)
        logger.info("Geofence %s deactivated for organization %s", geofence_id, organization_id)
        return replace(geofence, active=False)

    def check_point(self, *, geofence_id: str, organization_id: str, latitude, longitude) -> GeofenceCheck:
        geofence = self.get(geofence_id=geofence_id, organization_id=organization_id)
        return evaluate(latitude, longitude, geofence)
