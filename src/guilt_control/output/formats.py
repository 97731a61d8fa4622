from __future__ import annotations

from datetime import datetime

from ..core.models import TapEvent
from ..core.time import as_iso, ensure_utc
from ..scoring.model import ScoreSnapshot


def format_timestamp(dt: datetime) -> str:
    """Medium date + time in local time, e.g. ``Oct 16, 2026, 03:04:05 PM``."""
    return ensure_utc(dt).astimezone().strftime("%b %d, %Y, %I:%M:%S %p")


def event_to_json(e: TapEvent) -> dict:
    return {
        "id": e.id,
        "timestamp": as_iso(e.timestamp),
        "minutes_wasted": e.minutes_wasted,
    }


def snapshot_to_json(s: ScoreSnapshot) -> dict:
    return {
        "computed_at": as_iso(s.computed_at),
        "decayed_total": round(s.decayed_total, 4),
        "progress": round(s.progress, 4),
        "banded_progress": round(s.banded_progress, 4),
        "color": s.color.to_hex(),
        "is_critical": s.is_critical,
        "all_time_total": s.all_time_total,
        "last_7d_total": s.last_7d_total,
        "count": s.count,
        "last_tap": as_iso(s.last_tap) if s.last_tap else None,
    }
