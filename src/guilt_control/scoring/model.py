from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from guilt_control.core.exceptions import ConfigurationError
from guilt_control.core.models import TapEvent
from guilt_control.core.time import ensure_utc
from guilt_control.scoring.palette import DEFAULT_PALETTE, DEFAULT_THRESHOLDS, RGB

WEEK = timedelta(days=7)


@dataclass(frozen=True)
class ScoreConfig:
    repair_window_seconds: float = 24 * 3600   # each entry fades to 0 influence over 24h
    full_scale_minutes: float = 120.0          # decayed minutes needed for full severity
    band_thresholds: Tuple[float, float, float] = DEFAULT_THRESHOLDS
    gamma: float = 0.88                        # <1 reaches later bands sooner
    palette: Tuple[RGB, RGB, RGB, RGB, RGB] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if not (math.isfinite(self.gamma) and self.gamma > 0):
            raise ConfigurationError(f"gamma must be a finite positive number: {self.gamma}")
        if not math.isfinite(self.repair_window_seconds):
            raise ConfigurationError(f"repair_window_seconds must be finite: {self.repair_window_seconds}")
        if not math.isfinite(self.full_scale_minutes):
            raise ConfigurationError(f"full_scale_minutes must be finite: {self.full_scale_minutes}")
        if len(self.band_thresholds) != 3:
            raise ConfigurationError("band_thresholds must hold exactly three values")
        s1, s2, s3 = self.band_thresholds
        if not (0.0 < s1 < s2 < s3 < 1.0):
            raise ConfigurationError(f"band_thresholds must be strictly ascending within (0, 1): {self.band_thresholds}")
        if len(self.palette) != 5:
            raise ConfigurationError("palette must hold exactly five colors")
        object.__setattr__(self, "palette", tuple(RGB(*c) for c in self.palette))


@dataclass(frozen=True)
class ScoreSnapshot:
    computed_at: datetime
    decayed_total: float
    progress: float
    banded_progress: float
    color: RGB
    is_critical: bool
    all_time_total: int
    last_7d_total: int
    count: int
    last_tap: Optional[datetime]


class ScoreModel:
    """Severity derived from tap history with linear time decay.

    An event counts fully at age 0 and linearly less until the repair window,
    after which it contributes nothing. The decayed total normalized by
    ``full_scale_minutes`` is the linear progress. Color banding runs on
    ``progress ** gamma`` while the critical flag uses linear progress; the two
    curves differ on purpose.
    """

    def __init__(self, config: Optional[ScoreConfig] = None) -> None:
        self.config = config or ScoreConfig()

    def contribution(self, event: TapEvent, *, now: datetime) -> float:
        window = self.config.repair_window_seconds
        # Future-dated events count as age 0.
        age = max((ensure_utc(now) - event.timestamp).total_seconds(), 0.0)
        if age >= window:
            return 0.0
        weight = min(max(1.0 - age / window, 0.0), 1.0)
        return event.minutes_wasted * weight

    def decayed_total(self, now: datetime, events: Iterable[TapEvent]) -> float:
        return sum((self.contribution(e, now=now) for e in events), 0.0)

    def progress_for_total(self, decayed_total: float) -> float:
        full_scale = self.config.full_scale_minutes
        if full_scale <= 0:
            return 0.0
        return min(max(decayed_total / full_scale, 0.0), 1.0)

    def progress(self, now: datetime, events: Iterable[TapEvent]) -> float:
        return self.progress_for_total(self.decayed_total(now, events))

    def banded_progress(self, progress: float) -> float:
        return progress ** self.config.gamma

    def color_for(self, progress: float) -> RGB:
        p = self.banded_progress(progress)
        s1, s2, s3 = self.config.band_thresholds
        fresh, band2, band3, band4, critical = self.config.palette

        # Right-open bands; the last one is closed at 1.
        if p < s1:
            lower, upper, a, b = 0.0, s1, fresh, band2
        elif p < s2:
            lower, upper, a, b = s1, s2, band2, band3
        elif p < s3:
            lower, upper, a, b = s2, s3, band3, band4
        else:
            lower, upper, a, b = s3, 1.0, band4, critical
        return a.lerp(b, (p - lower) / (upper - lower))

    def is_critical(self, progress: float) -> bool:
        return progress >= self.config.band_thresholds[2]

    @staticmethod
    def all_time_total(events: Iterable[TapEvent]) -> int:
        return sum(e.minutes_wasted for e in events)

    @staticmethod
    def last_7d_total(now: datetime, events: Iterable[TapEvent]) -> int:
        now = ensure_utc(now)
        return sum(e.minutes_wasted for e in events if now - e.timestamp <= WEEK)

    def recompute(self, now: datetime, events: Sequence[TapEvent]) -> ScoreSnapshot:
        events = list(events)
        total = self.decayed_total(now, events)
        progress = self.progress_for_total(total)
        return ScoreSnapshot(
            computed_at=ensure_utc(now),
            decayed_total=total,
            progress=progress,
            banded_progress=self.banded_progress(progress),
            color=self.color_for(progress),
            is_critical=self.is_critical(progress),
            all_time_total=self.all_time_total(events),
            last_7d_total=self.last_7d_total(now, events),
            count=len(events),
            last_tap=max((e.timestamp for e in events), default=None),
        )
