from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def isoformat_utc(value: Optional[datetime] = None) -> str:
    value = value or now_utc()
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse the date part of an ISO string (YYYY-MM-DD[...]); None if unparseable."""
    if not value:
        return None
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        return None
