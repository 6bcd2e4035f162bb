"""Per-user interactive state: selection, recipe status, saved palette, lab.

Only `request_recipe` suspends.  Every selection change and every new
request bumps a generation counter; a recipe request applies its outcome
only if the counter still holds the value it started with, so a late
answer for an earlier colour is dropped instead of shown against the new
one.

State changes go through one re-entrant lock, so the Flask app can serve
requests on several threads; the lock is never held across the await.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Iterable, Mapping

from .colorspace import find_closest_palette_entry
from .errors import RecipeError
from .harmony import Harmony, harmonies
from .mixer import PigmentLab, mix_recipe
from .models import Color, Hex, MixingStep, colors_from_records, colors_to_records
from .recipe import RecipeService
from .storage import KeyValueStore

log = logging.getLogger(__name__)

PALETTE_KEY = "chromamix_palette"
THEME_KEY = "theme"
TUTORIAL_KEY = "chromamix_tutorial_seen"


class Session:
    def __init__(self, service: RecipeService, store: KeyValueStore) -> None:
        self._service = service
        self._store = store
        self._generation = 0
        self._lock = threading.RLock()

        self.selected: Color | None = None
        self.recipe: list[MixingStep] | None = None
        self.loading = False
        self.error: RecipeError | None = None
        self.lab = PigmentLab()
        self._palette: list[Color] = self.load_palette()

    # ---- selection & recipe ----

    def select_color(self, color: Color) -> None:
        with self._lock:
            self._generation += 1
            self.selected = color
            self.recipe = None
            self.error = None
            self.loading = False

    def select_hex(self, hex_value: str) -> Color:
        """Select the wheel colour closest to an arbitrary sampled hex."""
        color = find_closest_palette_entry(hex_value)
        self.select_color(color)
        return color

    def reset_selection(self) -> None:
        with self._lock:
            self._generation += 1
            self.selected = None
            self.recipe = None
            self.error = None
            self.loading = False

    @property
    def harmony(self) -> Harmony | None:
        return None if self.selected is None else harmonies(self.selected.hue)

    @property
    def recipe_preview_hex(self) -> Hex | None:
        return None if self.recipe is None else mix_recipe(self.recipe)

    async def request_recipe(self) -> list[MixingStep] | None:
        """Fetch a recipe for the current selection.

        Returns the recipe, or None if the request failed (see `error`) or
        was overtaken by a newer selection or request.
        """
        with self._lock:
            if self.selected is None:
                raise ValueError("no color selected")
            self._generation += 1
            token = self._generation
            target = self.selected.hex
            self.loading = True
            self.error = None
            self.recipe = None

        try:
            steps = await self._service.get_mixing_recipe(target)
        except RecipeError as exc:
            with self._lock:
                if token != self._generation:
                    log.debug("Discarding stale recipe error for %s", target)
                    return None
                self.error = exc
                self.recipe = None
                self.loading = False
            return None

        with self._lock:
            if token != self._generation:
                log.debug("Discarding stale recipe for %s", target)
                return None
            self.recipe = steps
            self.loading = False
        return steps

    # ---- saved palette ----

    @property
    def palette(self) -> tuple[Color, ...]:
        with self._lock:
            return tuple(self._palette)

    def add_to_palette(self, color: Color) -> bool:
        with self._lock:
            if any(c.hex == color.hex for c in self._palette):
                return False
            self._palette.append(color)
            self.save_palette()
            return True

    def clear_palette(self) -> None:
        with self._lock:
            self._palette = []
            self.save_palette()

    def save_lab_mix(self) -> Color | None:
        with self._lock:
            color = self.lab.as_color()
            if color is not None:
                self.add_to_palette(color)
            return color

    def export_palette(self) -> list[dict[str, Any]]:
        with self._lock:
            return colors_to_records(self._palette)

    def import_palette(self, records: Iterable[Mapping[str, Any]]) -> None:
        loaded: list[Color] = []
        for color in colors_from_records(records):
            if not any(c.hex == color.hex for c in loaded):
                loaded.append(color)
        with self._lock:
            self._palette = loaded
            self.save_palette()

    def load_palette(self) -> list[Color]:
        raw = self._store.get(PALETTE_KEY)
        if raw is None:
            return []
        try:
            return colors_from_records(json.loads(raw))
        except (ValueError, TypeError, KeyError):
            log.warning("Ignoring unreadable saved palette", exc_info=True)
            return []

    def save_palette(self) -> None:
        with self._lock:
            self._store.set(PALETTE_KEY, json.dumps(self.export_palette()))

    # ---- preferences ----

    @property
    def dark_mode(self) -> bool:
        theme = self._store.get(THEME_KEY)
        return True if theme is None else theme == "dark"

    @dark_mode.setter
    def dark_mode(self, enabled: bool) -> None:
        self._store.set(THEME_KEY, "dark" if enabled else "light")

    def toggle_dark_mode(self) -> bool:
        with self._lock:
            self.dark_mode = not self.dark_mode
            return self.dark_mode

    @property
    def tutorial_seen(self) -> bool:
        return self._store.get(TUTORIAL_KEY) == "true"

    def mark_tutorial_seen(self) -> None:
        self._store.set(TUTORIAL_KEY, "true")

    # ---- snapshot ----

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            harm = self.harmony
            return {
                "selected": None if self.selected is None else self.selected.to_record(),
                "harmony": None if harm is None else list(harm.hues()),
                "loading": self.loading,
                "recipe": None if self.recipe is None else [s.to_record() for s in self.recipe],
                "recipe_preview": self.recipe_preview_hex,
                "error": None if self.error is None else self.error.to_dict(),
                "palette": self.export_palette(),
            }


__all__ = ["PALETTE_KEY", "Session", "THEME_KEY", "TUTORIAL_KEY"]
