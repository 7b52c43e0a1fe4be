from __future__ import annotations

import logging
import math
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import GeofenceMisconfigured, InvalidRequest
from .model import Coordinates, Geofence, GeofenceCheck

logger = logging.getLogger(__name__)


def _problem(point: Optional[Coordinates]) -> Optional[str]:
    if point is None:
        return "is required"
    lat, lon = point.latitude, point.longitude
    if not (isinstance(lat, (int, float)) and isinstance(lon, (int, float))):
        return "must be numeric"
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return "must be finite"
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return "is out of range"
    return None


def _require_usable_fence(fence: Geofence) -> None:
    problem = _problem(fence.center)
    if problem is None and (fence.radius_meters is None or fence.radius_meters < 0):
        problem = "radius must be a non-negative number of meters"
    if problem is not None:
        logger.error("Geofence of company %s is unusable: center/radius %s", fence.company_code, problem)
        raise GeofenceMisconfigured(
            "Geofence for this company is misconfigured",
            details={"companyCode": fence.company_code},
        )


def haversine_meters(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points, in meters."""
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class GeoValidator:
    def is_within_fence(self, point: Optional[Coordinates], fence: Geofence) -> GeofenceCheck:
        # Fence data is validated before the caller's point.
        _require_usable_fence(fence)
        problem = _problem(point)
        if problem is not None:
            raise InvalidRequest(f"Location {problem}")

        distance = haversine_meters(point, fence.center)
        return GeofenceCheck(
            within_fence=distance <= fence.radius_meters,
            distance_meters=distance,
            radius_meters=int(fence.radius_meters),
        )
