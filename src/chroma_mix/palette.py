"""Fixed colour data: the 12-slice wheel and the five mixing pigments.

The wheel slices sit every 30 degrees at full saturation / 50 % lightness,
in wheel order starting from red.  Both tables are read-only module data.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import RGB, Color, Hex

# --- 1) colour wheel ---------------------------------------------------------
WHEEL: tuple[Color, ...] = (
    Color("Red", "#FF0000", 0),
    Color("Orange", "#FF8000", 30),
    Color("Yellow", "#FFFF00", 60),
    Color("Chartreuse", "#80FF00", 90),
    Color("Green", "#00FF00", 120),
    Color("Spring Green", "#00FF80", 150),
    Color("Cyan", "#00FFFF", 180),
    Color("Azure", "#0080FF", 210),
    Color("Blue", "#0000FF", 240),
    Color("Violet", "#8000FF", 270),
    Color("Magenta", "#FF00FF", 300),
    Color("Rose", "#FF0080", 330),
)


# --- 2) pigments -------------------------------------------------------------
@dataclass(frozen=True)
class Pigment:
    key: str
    name: str
    hex: Hex
    rgb: RGB


RED = Pigment("red", "Red", "#FF0000", RGB(255, 0, 0))
YELLOW = Pigment("yellow", "Yellow", "#FFFF00", RGB(255, 255, 0))
BLUE = Pigment("blue", "Blue", "#0000FF", RGB(0, 0, 255))
WHITE = Pigment("white", "White", "#FFFFFF", RGB(255, 255, 255))
BLACK = Pigment("black", "Black", "#000000", RGB(0, 0, 0))

PIGMENTS: tuple[Pigment, ...] = (RED, YELLOW, BLUE, WHITE, BLACK)
PIGMENTS_BY_KEY: dict[str, Pigment] = {p.key: p for p in PIGMENTS}


def pigment(key: str) -> Pigment:
    try:
        return PIGMENTS_BY_KEY[key.strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown pigment '{key}' (expected one of {', '.join(PIGMENTS_BY_KEY)})"
        ) from None


__all__ = [
    "BLACK",
    "BLUE",
    "PIGMENTS",
    "PIGMENTS_BY_KEY",
    "Pigment",
    "RED",
    "WHEEL",
    "WHITE",
    "YELLOW",
    "pigment",
]
