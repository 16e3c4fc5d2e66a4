from __future__ import annotations

from typing import Any, Mapping


def person_matches(record: Mapping[str, Any], term: str, *extra_fields: str) -> bool:
    """Case-insensitive match on the full name or any of extra_fields."""
    term = (term or "").lower()
    full_name = f"{record.get('firstName') or ''} {record.get('surname') or ''} {record.get('otherNames') or ''}".lower()
    if term in full_name:
        return True
    for field in extra_fields:
        value = record.get(field)
        if value and term in str(value).lower():
            return True
    return False
