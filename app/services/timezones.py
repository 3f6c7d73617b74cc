"""
Client-local datetime handling.

Clients send wall-clock strings plus an IANA zone in `X-User-Timezone`.
Everything is stored and compared in UTC.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from app.config import get_settings
from app.services.errors import ValidationError


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the zone for `name`, falling back to the server timezone, then UTC."""
    for candidate in ((name or "").strip(), get_settings().app_timezone, "UTC"):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            continue
    return ZoneInfo("UTC")


def parse_datetime(value: str | datetime | date, tz: ZoneInfo) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        raw = value.strip()
        if not raw:
            raise ValueError("empty datetime string")
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc)


def to_utc(value, tz_name: str | None = None):
    """
    Convert a client-local datetime to a UTC instant.

    On parse failure the original value is returned unchanged instead of raising.
    Callers doing precision-critical work must pass the result through `ensure_utc`.
    """
    if value is None:
        return None
    try:
        return parse_datetime(value, resolve_timezone(tz_name))
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug(f"Could not normalize datetime {value!r} (tz={tz_name}): {e}")
        return value


def ensure_utc(value, field: str = "date") -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(f"{field} must be an ISO datetime string")
    return as_utc(value)


def as_utc(dt: datetime | None) -> datetime | None:
    """Rows read back from SQLite lose tzinfo; stored values are always UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return as_utc(dt).isoformat().replace("+00:00", "Z")


def current_month_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    now = as_utc(now) if now else datetime.now(timezone.utc)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - timedelta(microseconds=1)
