from __future__ import annotations

import json
from typing import Any, Iterable, List
from uuid import UUID

from guilt_control.core.exceptions import BlobDecodeError
from guilt_control.core.models import TapEvent
from guilt_control.core.time import as_iso, from_reference_seconds, from_unix_seconds, parse_utc


def encode_events(events: Iterable[TapEvent]) -> bytes:
    rows = [{"id": e.id, "date": as_iso(e.timestamp), "minutes": e.minutes_wasted} for e in events]
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _load_list(data: bytes) -> list:
    try:
        obj = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise BlobDecodeError(f"blob is not JSON: {e}") from e
    if not isinstance(obj, list):
        raise BlobDecodeError(f"expected a JSON array, got {type(obj).__name__}")
    return obj


def _record_to_event(row: Any) -> TapEvent:
    if not isinstance(row, dict):
        raise BlobDecodeError(f"expected an object, got {type(row).__name__}")

    raw_id = row.get("id")
    if not isinstance(raw_id, str):
        raise BlobDecodeError("record id must be a string")
    try:
        UUID(raw_id)
    except ValueError as e:
        raise BlobDecodeError(f"record id is not a UUID: {raw_id!r}") from e

    raw_date = row.get("date")
    if isinstance(raw_date, str):
        parse = parse_utc
    elif _is_number(raw_date):
        # Numeric dates count from 2001-01-01, not the Unix epoch.
        parse = from_reference_seconds
    else:
        raise BlobDecodeError(f"record date has unsupported type: {type(raw_date).__name__}")
    try:
        ts = parse(raw_date)
    except (ValueError, OverflowError) as e:
        raise BlobDecodeError(f"record date is invalid: {raw_date!r}") from e

    minutes = row.get("minutes", 0)
    if not isinstance(minutes, int) or isinstance(minutes, bool):
        raise BlobDecodeError("record minutes must be an integer")

    return TapEvent(id=raw_id, timestamp=ts, minutes_wasted=minutes)


def decode_events(data: bytes) -> List[TapEvent]:
    """Decode the current format: ``[{"id", "date", "minutes"}, ...]``."""
    return [_record_to_event(row) for row in _load_list(data)]


def decode_legacy(data: bytes) -> List[TapEvent]:
    """Decode the legacy format: a flat array of Unix epoch seconds."""
    out: List[TapEvent] = []
    for value in _load_list(data):
        if not _is_number(value):
            raise BlobDecodeError(f"legacy entry is not a number: {value!r}")
        try:
            ts = from_unix_seconds(value)
        except (ValueError, OverflowError, OSError) as e:
            raise BlobDecodeError(f"legacy timestamp out of range: {value!r}") from e
        out.append(TapEvent(timestamp=ts, minutes_wasted=0))
    return out
