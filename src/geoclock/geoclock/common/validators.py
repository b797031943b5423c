from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_float(payload: Mapping[str, Any], field_name: str) -> float:
    value = optional_float(payload, field_name)
    if value is None:
        raise ValidationError(f"{field_name} is required")
    return value


def optional_float(payload: Mapping[str, Any], field_name: str) -> Optional[float]:
    raw = payload.get(field_name)
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isinf(value):
        raise ValidationError(f"{field_name} must be finite")
    return value
