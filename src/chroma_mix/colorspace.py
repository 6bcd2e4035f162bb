from __future__ import annotations

import logging
import math
import re
from functools import lru_cache
from typing import Sequence

import numpy as np

from .models import RGB, Color, Hex
from .palette import WHEEL

log = logging.getLogger(__name__)

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def hex_to_rgb(value: str) -> RGB | None:
    """Parse '#RRGGBB' or 'RRGGBB' (any case).  No 3-digit shorthand."""
    if not isinstance(value, str):
        return None
    m = _HEX_RE.fullmatch(value)
    if m is None:
        return None
    r, g, b = (int(part, 16) for part in m.groups())
    return RGB(r, g, b)


def _channel(c: float) -> int:
    # round half up, like Math.round() for the non-negative inputs we get
    return min(255, max(0, int(math.floor(float(c) + 0.5))))


def rgb_to_hex(r: float, g: float, b: float) -> Hex:
    return "#" + "".join(f"{_channel(c):02X}" for c in (r, g, b))


def color_distance(a: RGB, b: RGB) -> float:
    """Squared Euclidean distance in the RGB cube (comparison only)."""
    dr, dg, db = a.r - b.r, a.g - b.g, a.b - b.b
    return dr * dr + dg * dg + db * db


@lru_cache(maxsize=8)
def _palette_matrix(palette: tuple[Color, ...]) -> np.ndarray:
    rows = []
    for entry in palette:
        rgb = hex_to_rgb(entry.hex)
        # an unparseable entry can never win
        rows.append(rgb if rgb is not None else (np.inf, np.inf, np.inf))
    return np.asarray(rows, dtype=np.float64)  # N×3


def find_closest_palette_entry(
    target_hex: str, palette: Sequence[Color] = WHEEL
) -> Color:
    """Nearest palette entry by RGB distance; first entry if `target_hex` is bad.

    Ties go to the earlier entry (np.argmin returns the first minimum).
    """
    entries = tuple(palette)
    target = hex_to_rgb(target_hex)
    if target is None:
        log.debug("Unparseable hex %r, falling back to %s", target_hex, entries[0].hex)
        return entries[0]
    diff = _palette_matrix(entries) - np.asarray(target, dtype=np.float64)
    dist = np.einsum("ij,ij->i", diff, diff)
    return entries[int(np.argmin(dist))]


__all__ = ["color_distance", "find_closest_palette_entry", "hex_to_rgb", "rgb_to_hex"]
