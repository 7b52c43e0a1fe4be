from __future__ import annotations

import math
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttendanceError(DomainError):
    """A check-in/check-out request was refused.

    ``kind`` is the stable, machine readable failure name returned to clients;
    ``details`` carries numeric diagnostics (distances, radius, ...).
    """

    kind = "AttendanceError"
    retryable = False

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class InvalidRequest(AttendanceError, ValidationError):
    """Request payload could not be parsed into typed values."""

    kind = "InvalidRequest"


class PreconditionError(AttendanceError):
    """Caller must change its input (or the account) before retrying."""


class UserNotFound(PreconditionError):
    kind = "UserNotFound"


class NoCompanyAssociation(PreconditionError):
    kind = "NoCompanyAssociation"


class RoleNotAllowed(PreconditionError):
    kind = "RoleNotAllowed"


class GeofenceNotConfigured(PreconditionError):
    kind = "GeofenceNotConfigured"


class VerificationError(AttendanceError):
    """Face or location check failed; a fresh capture may succeed."""

    retryable = True


class FaceVerificationFailed(VerificationError):
    kind = "FaceVerificationFailed"

    def __init__(self, message: str, *, distance: float, threshold: float):
        # JSON has no Infinity; "not comparable" is reported as null.
        shown = distance if math.isfinite(distance) else None
        super().__init__(message, details={"distance": shown, "threshold": threshold})
        self.distance = distance
        self.threshold = threshold


class OutsideGeofence(VerificationError):
    kind = "OutsideGeofence"

    def __init__(self, message: str, *, distance_meters: float, radius_meters: int):
        super().__init__(message, details={"distanceMeters": distance_meters, "radiusMeters": radius_meters})
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters


class StateConflictError(AttendanceError):
    """The day's record already reflects or precludes the transition."""


class AlreadyCheckedIn(StateConflictError):
    kind = "AlreadyCheckedIn"


class AlreadyCheckedOut(StateConflictError):
    kind = "AlreadyCheckedOut"


class NoActiveCheckIn(StateConflictError):
    kind = "NoActiveCheckIn"


class GeofenceMisconfigured(AttendanceError):
    """The stored geofence itself is unusable (bad center or radius); not the caller's fault."""

    kind = "GeofenceMisconfigured"


class StorageUnavailable(AttendanceError):
    kind = "StorageUnavailable"
    retryable = True


class DuplicateRecordError(DomainError):
    """Raised by repositories when the (user, day) unique key is violated."""
