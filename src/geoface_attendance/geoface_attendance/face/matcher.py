"""Face descriptor comparison.

Descriptors are produced by an external model (128 floats for the browser
face-api models); this module only parses and compares them.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD

Descriptor = Tuple[float, ...]


class DescriptorFormatError(ValueError):
    """Value is not a flat, non-empty vector of finite numbers."""


def parse_descriptor(value: Any) -> Descriptor:
    """Parse-or-reject a face descriptor.

    Accepts a sequence of real numbers or a JSON string encoding one.
    """

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise DescriptorFormatError("descriptor is not valid JSON") from None

    if isinstance(value, (str, dict)) or not isinstance(value, Sequence):
        raise DescriptorFormatError("descriptor must be an array of numbers")
    if not value:
        raise DescriptorFormatError("descriptor is empty")

    out = []
    for item in value:
        # bool is a Real subclass; "true" is not a coordinate of a face.
        if isinstance(item, bool) or not isinstance(item, Real):
            raise DescriptorFormatError("descriptor must contain only numbers")
        number = float(item)
        if not math.isfinite(number):
            raise DescriptorFormatError("descriptor must contain only finite numbers")
        out.append(number)
    return tuple(out)


@dataclass(frozen=True)
class FaceMatch:
    matches: bool
    distance: float
    threshold: float


class FaceMatcher:
    def __init__(self, threshold: float = DEFAULT_FACE_MATCH_THRESHOLD):
        self.threshold = float(threshold)

    @staticmethod
    def euclidean(stored: Optional[Sequence[float]], candidate: Optional[Sequence[float]]) -> float:
        """Distance between two descriptors; ``inf`` when they are not comparable."""
        if not stored or not candidate or len(stored) != len(candidate):
            return math.inf
        try:
            a = np.asarray(stored, dtype=np.float64)
            b = np.asarray(candidate, dtype=np.float64)
        except (TypeError, ValueError):
            return math.inf
        if a.ndim != 1 or b.ndim != 1:
            return math.inf
        if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
            return math.inf
        return float(np.linalg.norm(a - b))

    def matches(
        self,
        stored: Optional[Sequence[float]],
        candidate: Optional[Sequence[float]],
        threshold: Optional[float] = None,
    ) -> FaceMatch:
        limit = self.threshold if threshold is None else float(threshold)
        distance = self.euclidean(stored, candidate)
        return FaceMatch(matches=distance <= limit, distance=distance, threshold=limit)
