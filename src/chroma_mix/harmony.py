"""Hue-rotation harmonies.

complementary  h+180
analogous      h-30, h+30
triadic        h+120, h+240

All hues are normalised into [0, 360).  For wheel highlighting each
companion hue is snapped to the nearest wheel hue using *circular* hue
distance; that is a different nearest-neighbour from the RGB-cube one in
`colorspace.find_closest_palette_entry`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from coloraide import Color as CAColor

from .models import Color, Hex, Hue
from .palette import WHEEL

COMPLEMENTARY_OFFSET = 180
ANALOGOUS_OFFSETS = (-30, 30)
TRIADIC_OFFSETS = (120, 240)


def normalize_hue(h: float) -> Hue:
    return int(round(h)) % 360


@dataclass(frozen=True)
class Harmony:
    base_hue: Hue
    complementary: Hue
    analogous: tuple[Hue, Hue]
    triadic: tuple[Hue, Hue]

    def hues(self) -> tuple[Hue, ...]:
        """Companion hues in display order (complementary, analogous, triadic)."""
        return (self.complementary, *self.analogous, *self.triadic)


def harmonies(hue: float) -> Harmony:
    h = normalize_hue(hue)
    return Harmony(
        base_hue=h,
        complementary=normalize_hue(h + COMPLEMENTARY_OFFSET),
        analogous=(
            normalize_hue(h + ANALOGOUS_OFFSETS[0]),
            normalize_hue(h + ANALOGOUS_OFFSETS[1]),
        ),
        triadic=(
            normalize_hue(h + TRIADIC_OFFSETS[0]),
            normalize_hue(h + TRIADIC_OFFSETS[1]),
        ),
    )


def hsl_string(hue: float) -> str:
    return f"hsl({normalize_hue(hue)}, 100%, 50%)"


def swatch_hex(hue: float) -> Hex:
    """Hex of the fully saturated swatch for `hue` (sRGB, uppercase)."""
    return CAColor(hsl_string(hue)).convert("srgb").to_string(hex=True).upper()


def closest_palette_hue(hue: float, palette: Sequence[Color] = WHEEL) -> Hue:
    """Snap `hue` to the nearest palette hue; ties go to the earlier entry."""
    hues = np.asarray([c.hue for c in palette], dtype=np.float64)
    d = np.abs(hues - (float(hue) % 360.0)) % 360.0
    d = np.minimum(d, 360.0 - d)
    return palette[int(np.argmin(d))].hue


def highlighted_hues(hue: float, palette: Sequence[Color] = WHEEL) -> frozenset[Hue]:
    """Wheel hues to highlight for `hue`; at most five, fewer when snaps collide."""
    return frozenset(closest_palette_hue(h, palette) for h in harmonies(hue).hues())


def describe(hue: float, palette: Sequence[Color] = WHEEL) -> dict:
    """JSON-friendly summary used by the web layer."""
    harm = harmonies(hue)
    labels = ("complementary", "analogous1", "analogous2", "triadic1", "triadic2")
    return {
        "base_hue": harm.base_hue,
        "swatches": [
            {"role": role, "hue": h, "hsl": hsl_string(h), "hex": swatch_hex(h)}
            for role, h in zip(labels, harm.hues())
        ],
        "highlighted": sorted(highlighted_hues(hue, palette)),
    }


__all__ = [
    "Harmony",
    "closest_palette_hue",
    "describe",
    "harmonies",
    "highlighted_hues",
    "hsl_string",
    "normalize_hue",
    "swatch_hex",
]
