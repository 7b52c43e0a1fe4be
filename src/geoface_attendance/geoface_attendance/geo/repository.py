from __future__ import annotations

from typing import Optional, Protocol

from .model import Geofence


class GeofenceRepository(Protocol):
    def get_for_company(self, company_code: str) -> Optional[Geofence]:
        raise NotImplementedError
