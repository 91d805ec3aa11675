"""Stable per-symbol colors.

Hash mode maps a symbol's literal text to a hue via MD5 and picks a saturation
from a hand-tuned hue table, so that a given identifier keeps its color across
sessions. Palette mode hands out colors from a fixed ring instead.
"""

from __future__ import annotations

import hashlib
from bisect import bisect_right
from typing import Sequence

from PySide6.QtGui import QColor

# (hue, saturation) control points, strictly increasing by hue. Yellows and
# greens read well at lower saturation on dark text; blues and purples need
# more to stay distinguishable from the editor background.
HUE_SATURATION_POINTS: tuple[tuple[float, float], ...] = (
    (15.0, 0.42),
    (45.0, 0.50),
    (60.0, 0.62),
    (90.0, 0.55),
    (130.0, 0.45),
    (170.0, 0.40),
    (200.0, 0.38),
    (230.0, 0.32),
    (260.0, 0.30),
    (290.0, 0.34),
    (320.0, 0.38),
    (345.0, 0.40),
)

DEFAULT_PALETTE: tuple[str, ...] = (
    "#ffff00",
    "#ff1493",
    "#00ffff",
    "#ab82ff",
    "#00ff7f",
    "#ff8c00",
    "#ff6eb4",
    "#4876ff",
    "#6b8e23",
)


def hue_for_symbol(symbol_text: str) -> int:
    digest = hashlib.md5(str(symbol_text).encode("utf-8")).hexdigest()
    return int(digest, 16) % 360


def bracketing_points(
    hue: float,
    points: Sequence[tuple[float, float]] = HUE_SATURATION_POINTS,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Return the control points around ``hue``, wrapping past 360 cyclically.

    Hues below the first point or above the last one are bracketed by the last
    point and the first point shifted by 360.
    """
    if not points:
        raise ValueError("Hue table cannot be empty.")
    hues = [p[0] for p in points]
    idx = bisect_right(hues, hue)
    if 0 < idx < len(points):
        return points[idx - 1], points[idx]
    last_hue, last_sat = points[-1]
    first_hue, first_sat = points[0]
    if idx == 0:
        return (last_hue - 360.0, last_sat), (first_hue, first_sat)
    return (last_hue, last_sat), (first_hue + 360.0, first_sat)


def saturation_for_hue(
    hue: float,
    points: Sequence[tuple[float, float]] = HUE_SATURATION_POINTS,
) -> float:
    (lo_hue, lo_sat), (hi_hue, hi_sat) = bracketing_points(hue, points)
    span = hi_hue - lo_hue
    if span <= 0:
        return lo_sat
    ratio = (hue - lo_hue) / span
    return lo_sat + (hi_sat - lo_sat) * ratio


class ColorAssigner:
    def __init__(self, points: Sequence[tuple[float, float]] = HUE_SATURATION_POINTS) -> None:
        self._points = tuple(points)
        if not self._points:
            raise ValueError("Hue table cannot be empty.")

    def color_for(self, symbol_text: str) -> QColor:
        hue = hue_for_symbol(symbol_text)
        saturation = max(0.0, min(1.0, saturation_for_hue(hue, self._points)))
        return QColor.fromHsvF(hue / 360.0, saturation, 1.0)


class PaletteColorAssigner:
    """Cycles through a bounded palette, wrapping to the start when exhausted."""

    def __init__(self, palette: Sequence[str] = DEFAULT_PALETTE) -> None:
        colors = [QColor(str(value)) for value in palette]
        self._palette = [color for color in colors if color.isValid()]
        if not self._palette:
            raise ValueError("Palette must contain at least one valid color.")
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def color_for(self, symbol_text: str) -> QColor:
        color = QColor(self._palette[self._index])
        self._index = (self._index + 1) % len(self._palette)
        return color

    def reset(self) -> None:
        self._index = 0


def make_color_assigner(color_mode: str, palette: Sequence[str] | None = None):
    if str(color_mode or "").strip().lower() == "palette":
        return PaletteColorAssigner(palette or DEFAULT_PALETTE)
    return ColorAssigner()
