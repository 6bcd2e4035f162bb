# mixer.py – part-weighted linear RGB blending of the five pigments
#   - every entry with parts > 0 contributes channel * parts
#   - result = sum / total_parts per channel, independently for r, g, b
#   - no parts at all → white ("nothing mixed yet")
#   - fractional channels are kept; rounding happens only in rgb_to_hex

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

import numpy as np

from .colorspace import hex_to_rgb, rgb_to_hex
from .models import RGB, Color, Hex, MixingStep
from .palette import PIGMENTS, Pigment, pigment

log = logging.getLogger(__name__)

EMPTY_MIX = RGB(255.0, 255.0, 255.0)
LAB_MIN_PARTS = 0
LAB_MAX_PARTS = 10


def mix(parts: Iterable[tuple[RGB, int]]) -> RGB:
    rows = [(tuple(rgb), p) for rgb, p in parts if p > 0]
    if not rows:
        return EMPTY_MIX
    w = np.asarray([p for _, p in rows], dtype=np.float64)  # N
    c = np.asarray([rgb for rgb, _ in rows], dtype=np.float64)  # N×3
    out = (w @ c) / w.sum()
    return RGB(float(out[0]), float(out[1]), float(out[2]))


def mix_hex(parts: Iterable[tuple[RGB, int]]) -> Hex:
    return rgb_to_hex(*mix(parts))


def mix_recipe(steps: Sequence[MixingStep]) -> Hex:
    """Colour a recipe would produce when its own steps are blended."""
    parts: list[tuple[RGB, int]] = []
    for step in steps:
        rgb = hex_to_rgb(step.color_hex)
        if rgb is None:
            log.warning("Skipping recipe step with bad hex %r", step.color_hex)
            continue
        parts.append((rgb, step.parts))
    return mix_hex(parts)


class PigmentLab:
    """Manual-mix slider state: one integer in [0, 10] per pigment."""

    def __init__(self, pigments: Sequence[Pigment] = PIGMENTS) -> None:
        self._pigments = tuple(pigments)
        self._parts: dict[str, int] = {p.key: 0 for p in self._pigments}

    @property
    def parts(self) -> Mapping[str, int]:
        return dict(self._parts)

    def _check(self, key: str, value: int) -> str:
        p = pigment(key)
        if p.key not in self._parts:
            raise ValueError(f"pigment '{key}' is not available in this lab")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"parts for '{p.key}' must be an integer")
        if not LAB_MIN_PARTS <= value <= LAB_MAX_PARTS:
            raise ValueError(
                f"parts for '{p.key}' must be in [{LAB_MIN_PARTS}, {LAB_MAX_PARTS}]"
            )
        return p.key

    def set_parts(self, key: str, value: int) -> None:
        self._parts[self._check(key, value)] = value

    def update(self, values: Mapping[str, int]) -> None:
        # validate everything first so a bad entry leaves the lab untouched
        checked = [(self._check(k, v), v) for k, v in values.items()]
        for k, v in checked:
            self._parts[k] = v

    def reset(self) -> None:
        self._parts = {key: 0 for key in self._parts}

    @property
    def total_parts(self) -> int:
        return sum(self._parts.values())

    @property
    def mixed_rgb(self) -> RGB:
        return mix((p.rgb, self._parts[p.key]) for p in self._pigments)

    @property
    def mixed_hex(self) -> Hex:
        return rgb_to_hex(*self.mixed_rgb)

    def as_color(self) -> Color | None:
        """The current mix as a saveable colour, or None when nothing is mixed.

        Mixed colours have no meaningful hue and carry hue 0.
        """
        if self.total_parts == 0:
            return None
        h = self.mixed_hex
        return Color(name=f"Mix {h}", hex=h, hue=0)

    def to_dict(self) -> dict:
        return {
            "parts": self.parts,
            "total_parts": self.total_parts,
            "rgb": list(self.mixed_rgb),
            "hex": self.mixed_hex,
        }


__all__ = [
    "EMPTY_MIX",
    "LAB_MAX_PARTS",
    "LAB_MIN_PARTS",
    "PigmentLab",
    "mix",
    "mix_hex",
    "mix_recipe",
]
