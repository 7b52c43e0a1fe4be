from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import GeofenceNotConfigured, OutsideGeofence
from .model import Coordinates, Geofence, GeofenceCheck
from .validator import GeoValidator

logger = logging.getLogger(__name__)


class GeofencePolicy(ABC):
    """Strategy Pattern: how a check-in location is judged for one tenant."""

    @abstractmethod
    def enforce(self, *, company_code: str, point: Optional[Coordinates]) -> Optional[GeofenceCheck]:
        raise NotImplementedError


@dataclass(frozen=True)
class FenceCheckPolicy(GeofencePolicy):
    """Tenant has a geofence: the point must lie inside it."""

    fence: Geofence
    validator: GeoValidator

    def enforce(self, *, company_code: str, point: Optional[Coordinates]) -> GeofenceCheck:
        check = self.validator.is_within_fence(point, self.fence)
        if not check.within_fence:
            raise OutsideGeofence(
                f"Too far from office ({check.distance_meters:.1f}m > {check.radius_meters}m)",
                distance_meters=check.distance_meters,
                radius_meters=check.radius_meters,
            )
        return check


class AllowWithoutFencePolicy(GeofencePolicy):
    """No geofence configured and the deployment allows that: skip the check."""

    def enforce(self, *, company_code: str, point: Optional[Coordinates]) -> None:
        logger.warning("No geofence configured for company %s; location check skipped", company_code)
        return None


class RequireFencePolicy(GeofencePolicy):
    """No geofence configured and the deployment fails closed."""

    def enforce(self, *, company_code: str, point: Optional[Coordinates]) -> None:
        raise GeofenceNotConfigured(f"No geofence configured for company {company_code}")


@dataclass
class GeofencePolicyFactory:
    """Factory Pattern: choose the policy from the tenant's fence and the config flag."""

    validator: GeoValidator
    allow_without_geofence: bool = True

    def for_company(self, fence: Optional[Geofence]) -> GeofencePolicy:
        if fence is not None:
            return FenceCheckPolicy(fence=fence, validator=self.validator)
        if self.allow_without_geofence:
            return AllowWithoutFencePolicy()
        return RequireFencePolicy()
