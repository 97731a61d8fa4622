from __future__ import annotations

from dataclasses import dataclass
import math
import os

from guilt_control.core.validation import clamp_tap_minutes


def _get_env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


def _get_env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _get_env_float(name: str, default: float, *, positive: bool = False) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        f = float(v)
    except ValueError:
        return default
    if not math.isfinite(f) or (positive and f <= 0):
        return default
    return f


@dataclass(frozen=True)
class Settings:
    # Storage
    data_dir: str = "./data"

    # Logging
    log_level: str = "INFO"

    # Decay model
    repair_window_seconds: float = 24 * 3600
    full_scale_minutes: float = 120.0
    gamma: float = 0.88

    # Host behaviour
    refresh_seconds: int = 60
    tap_minutes: int = 30


def load_settings() -> Settings:
    return Settings(
        data_dir=_get_env("GUILT_DATA_DIR", "./data") or "./data",
        log_level=(_get_env("GUILT_LOG_LEVEL", "INFO") or "INFO").upper(),
        repair_window_seconds=_get_env_float("GUILT_REPAIR_WINDOW_SECONDS", 24 * 3600),
        full_scale_minutes=_get_env_float("GUILT_FULL_SCALE_MINUTES", 120.0),
        gamma=_get_env_float("GUILT_GAMMA", 0.88, positive=True),
        refresh_seconds=max(1, _get_env_int("GUILT_REFRESH_SECONDS", 60)),
        tap_minutes=clamp_tap_minutes(_get_env_int("GUILT_TAP_MINUTES", 30)),
    )
