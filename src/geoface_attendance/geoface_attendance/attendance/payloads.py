"""Typed request boundary for check-in/check-out.

Raw JSON is parsed here or rejected with ``InvalidRequest``; nothing loosely
typed reaches the face or geofence comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import optional_float, require_non_empty
from ..core.exceptions import InvalidRequest
from ..face.matcher import Descriptor, DescriptorFormatError, parse_descriptor
from ..geo.model import Coordinates


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _location(payload: Mapping[str, Any]) -> Optional[Coordinates]:
    lat = optional_float(_first(payload, "latitude", "lat"), "latitude")
    lon = optional_float(_first(payload, "longitude", "lon", "lng"), "longitude")
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise InvalidRequest("latitude and longitude must be given together")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise InvalidRequest("latitude/longitude out of range")
    return Coordinates(latitude=lat, longitude=lon)


@dataclass(frozen=True)
class CheckInRequest:
    user_id: str
    location: Optional[Coordinates]
    face_descriptor: Optional[Descriptor]

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "CheckInRequest":
        if not isinstance(payload, Mapping):
            raise InvalidRequest("Request body must be a JSON object")

        raw_descriptor = _first(payload, "faceDescriptor", "face_descriptor")
        descriptor = None
        if raw_descriptor is not None:
            try:
                descriptor = parse_descriptor(raw_descriptor)
            except DescriptorFormatError as exc:
                raise InvalidRequest(f"Face descriptor format error: {exc}") from None

        return cls(
            user_id=require_non_empty(_first(payload, "userId", "user_id"), "userId"),
            location=_location(payload),
            face_descriptor=descriptor,
        )


@dataclass(frozen=True)
class CheckOutRequest:
    user_id: str
    location: Optional[Coordinates]
    hours_worked_hint: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "CheckOutRequest":
        if not isinstance(payload, Mapping):
            raise InvalidRequest("Request body must be a JSON object")

        hint = _first(payload, "hoursWorked", "hours_worked")
        return cls(
            user_id=require_non_empty(_first(payload, "userId", "user_id"), "userId"),
            location=_location(payload),
            # Non-string hints are ignored, not rejected: the server measures instead.
            hours_worked_hint=hint if isinstance(hint, str) else None,
        )
