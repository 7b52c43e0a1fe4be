from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import InvalidRequest


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidRequest(f"{field_name} is required")
    return str(value).strip()


def optional_float(value: Any, field_name: str) -> Optional[float]:
    """Parse a finite float; ``None``/empty means absent, anything else unparsable is rejected."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise InvalidRequest(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"{field_name} must be a number") from None
    if not math.isfinite(number):
        raise InvalidRequest(f"{field_name} must be a finite number")
    return number
