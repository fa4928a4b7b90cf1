"""Timezone-aware datetime helpers shared by the store and services."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Any) -> Optional[datetime]:
    """Coerce stored date values (datetime or ISO string) to aware UTC datetimes."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def day_bounds(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return [start, end) of the UTC day containing ``moment``."""
    moment = ensure_aware(moment) or utcnow()
    start = moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
