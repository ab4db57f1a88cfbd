from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now', timezone-aware UTC."""
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime read back from the database to aware UTC.

    Some drivers (SQLite) drop tzinfo on the way out; naive values are
    interpreted as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_since(start: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``start``, rounded up."""
    now = now or utcnow()
    delta = abs((now - as_utc(start)).total_seconds())
    return math.ceil(delta / 86400)
