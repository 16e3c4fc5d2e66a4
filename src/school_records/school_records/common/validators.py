from __future__ import annotations

from typing import Any, Mapping

from ..core.exceptions import ValidationError


def require_fields(data: Mapping[str, Any], *fields: str, message: str) -> None:
    """Raise ValidationError(message) unless every field is present and truthy."""
    for name in fields:
        if not data.get(name):
            raise ValidationError(message)


def require_positive_amount(value: Any, message: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if amount <= 0:
        raise ValidationError(message)
    return amount


def to_amount(value: Any) -> float:
    """Lenient numeric parse used for totals: unparseable values count as 0."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
