from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class Geofence:
    """Circular check-in area of a tenant (one per company)."""

    company_code: str
    latitude: float
    longitude: float
    radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS

    @property
    def center(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class GeofenceCheck:
    within_fence: bool
    distance_meters: float
    radius_meters: int
