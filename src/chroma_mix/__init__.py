"""Colour wheel harmonies, pigment mixing and paint recipes."""

from .colorspace import color_distance, find_closest_palette_entry, hex_to_rgb, rgb_to_hex
from .harmony import harmonies, highlighted_hues
from .mixer import PigmentLab, mix
from .models import RGB, Color, MixingStep
from .recipe import RecipeService
from .session import Session

__version__ = "0.1.0"
