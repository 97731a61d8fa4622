from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from .time import ensure_utc


def new_event_id() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class TapEvent:
    timestamp: datetime
    minutes_wasted: int = 0  # "time wasted", floored at 0
    id: str = field(default_factory=new_event_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        object.__setattr__(self, "minutes_wasted", max(0, int(self.minutes_wasted)))

    def with_changes(self, **changes: Any) -> "TapEvent":
        return replace(self, **changes)
