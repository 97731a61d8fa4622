from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Epoch used by the original app's JSON encoder for numeric dates.
REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        # Treat naive as UTC.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_utc(dt_str: str) -> datetime:
    """Parse an ISO-8601 datetime string, accepting a trailing ``Z``."""
    s = dt_str.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(s))


def from_unix_seconds(seconds: float) -> datetime:
    return datetime.fromtimestamp(float(seconds), tz=timezone.utc)


def from_reference_seconds(seconds: float) -> datetime:
    return REFERENCE_EPOCH + timedelta(seconds=float(seconds))


def as_iso(dt: datetime) -> str:
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
