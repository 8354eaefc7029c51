"""Great-circle geometry for circular geofences.

Distances use the Haversine formula on a spherical Earth (radius 6,371,000 m)
in double precision. No special handling of the antimeridian or the poles is
done beyond what the formula already gives.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..common.validators import require_float, require_latitude, require_longitude
from ..core.constants import EARTH_RADIUS_M
from ..core.enums import GeofenceType
from ..core.exceptions import ValidationError
from .model import Geofence


@dataclass(frozen=True)
class GeofenceCheck:
    is_within: bool
    distance_m: float

    @property
    def rounded_distance_m(self) -> int:
        return int(round(self.distance_m))


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two points given in decimal degrees."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def require_radius(value) -> float:
    radius = require_float(value, "radius")
    if radius <= 0:
        raise ValidationError("radius must be a positive number")
    return radius


def evaluate(latitude, longitude, geofence: Geofence) -> GeofenceCheck:
    """Decide whether (latitude, longitude) lies inside ``geofence``.

    Raises ValidationError when the point or the geofence definition is not
    numeric, or the geofence is not circular.
    """
    if geofence.geofence_type != GeofenceType.CIRCULAR:
        raise ValidationError(f"Unsupported geofence type: {geofence.geofence_type.value}")

    lat = require_latitude(latitude)
    lon = require_longitude(longitude)
    center_lat = require_latitude(geofence.center_latitude, "center_latitude")
    center_lon = require_longitude(geofence.center_longitude, "center_longitude")
    radius = require_radius(geofence.radius_m)

    distance = haversine_distance(lat, lon, center_lat, center_lon)
    return GeofenceCheck(is_within=distance <= radius, distance_m=distance)
