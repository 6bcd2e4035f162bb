from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

Hex = str
Hue = int


class RGB(NamedTuple):
    """RGB triplet on the 0-255 scale; channels may be fractional mid-computation."""

    r: float
    g: float
    b: float


@dataclass(frozen=True)
class Color:
    name: str
    hex: Hex
    hue: Hue = 0

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Color":
        return cls(
            name=str(record["name"]),
            hex=str(record["hex"]),
            hue=int(record.get("hue", 0)) % 360,
        )


def colors_to_records(colors: Iterable[Color]) -> list[dict[str, Any]]:
    return [c.to_record() for c in colors]


def colors_from_records(records: Iterable[Mapping[str, Any]]) -> list[Color]:
    return [Color.from_record(r) for r in records]


class MixingStep(BaseModel):
    """One line of a recipe, as returned by the recipe backend."""

    model_config = ConfigDict(strict=True, frozen=True)

    color_name: str = Field(alias="colorName")
    color_hex: str = Field(alias="colorHex")
    parts: int = Field(ge=1)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = [
    "Color",
    "Hex",
    "Hue",
    "MixingStep",
    "RGB",
    "colors_from_records",
    "colors_to_records",
]
