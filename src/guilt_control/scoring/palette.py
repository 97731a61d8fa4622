from __future__ import annotations

from typing import NamedTuple, Tuple


class RGB(NamedTuple):
    r: float
    g: float
    b: float

    def lerp(self, other: "RGB", t: float) -> "RGB":
        return RGB(
            lerp(self.r, other.r, t),
            lerp(self.g, other.g, t),
            lerp(self.b, other.b, t),
        )

    def to_hex(self) -> str:
        def channel(v: float) -> int:
            return int(round(min(max(v, 0.0), 1.0) * 255))

        return "#{:02x}{:02x}{:02x}".format(channel(self.r), channel(self.g), channel(self.b))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# Muted and progressively darker.
FRESH = RGB(0.38, 0.74, 0.46)       # healthy green
BROWNING = RGB(0.60, 0.52, 0.24)    # olive / amber
ROTTEN_RED = RGB(0.62, 0.20, 0.18)  # dull spoiled red
BRUISE = RGB(0.42, 0.22, 0.50)      # dark bruised purple
CRITICAL = RGB(0.03, 0.03, 0.04)    # near-black

DEFAULT_PALETTE: Tuple[RGB, RGB, RGB, RGB, RGB] = (FRESH, BROWNING, ROTTEN_RED, BRUISE, CRITICAL)

# 0-s1 fresh -> browning, s1-s2 browning -> red, s2-s3 red -> bruise, s3-1 bruise -> black
DEFAULT_THRESHOLDS: Tuple[float, float, float] = (0.35, 0.65, 0.85)
