"""Recipe generation: demo fallback, persistent cache and the remote backend.

Request flow for `RecipeService.get_mixing_recipe(hex)`:

1. no credential  → fixed demo recipe after a short delay, no cache, no network
2. cache hit      → cached raw recipe, no network
3. cache miss     → exactly one backend call, raw result cached, then returned

The raw string is decoded last by `parse_recipe`; anything that is not a
JSON array of {colorName, colorHex, parts>=1} becomes `ResponseParseError`.
There is no retry: each call is one attempt.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import requests
from pydantic import TypeAdapter, ValidationError

from .errors import (
    InvalidCredentialError,
    RecipeError,
    RecipeGenerationError,
    ResponseParseError,
)
from .models import MixingStep
from .palette import PIGMENTS
from .storage import KeyValueStore

log = logging.getLogger(__name__)

CACHE_KEY = "chromamix_recipes_cache"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 60.0
DEMO_DELAY = 0.8

DEMO_RECIPE = json.dumps(
    [
        {"colorName": "Red", "colorHex": "#FF0000", "parts": 1},
        {"colorName": "Yellow", "colorHex": "#FFFF00", "parts": 2},
        {"colorName": "White", "colorHex": "#FFFFFF", "parts": 1},
    ]
)

AUTH_MARKERS = ("PERMISSION_DENIED", "API key not valid")

_RECIPE = TypeAdapter(list[MixingStep])


def parse_recipe(raw: str | bytes) -> list[MixingStep]:
    try:
        return _RECIPE.validate_json(raw)
    except ValidationError as exc:
        log.warning("Malformed recipe payload: %s", exc)
        raise ResponseParseError() from exc


# --- cache -------------------------------------------------------------------
class RecipeCache:
    """target hex → raw recipe string, stored as one JSON object.

    Keys are the hex exactly as requested; '#ff0000' and '#FF0000' are
    different entries.  Storage failures are logged and otherwise ignored.
    """

    def __init__(self, store: KeyValueStore, key: str = CACHE_KEY) -> None:
        self._store = store
        self._key = key

    def _read(self) -> dict[str, Any]:
        raw = self._store.get(self._key)
        if raw is None:
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("recipe cache is not a JSON object")
        return data

    def get(self, target_hex: str) -> str | None:
        try:
            value = self._read().get(target_hex)
        except Exception:
            log.warning("Could not read from recipe cache", exc_info=True)
            return None
        return value if isinstance(value, str) else None

    def put(self, target_hex: str, raw: str) -> None:
        try:
            data = self._read()
            data[target_hex] = raw
            self._store.set(self._key, json.dumps(data))
        except Exception:
            log.warning("Could not save recipe for %s to cache", target_hex, exc_info=True)
            return
        log.info("Saved new recipe for %s to cache.", target_hex)

    def clear(self) -> None:
        try:
            self._store.delete(self._key)
        except Exception:
            log.warning("Could not clear recipe cache", exc_info=True)


# --- backend -----------------------------------------------------------------
class BackendError(Exception):
    """Backend call failed with status or invalid response."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RecipeBackend(Protocol):
    def generate(self, target_hex: str) -> str: ...


RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "colorName": {
                "type": "STRING",
                "description": "Name of the base paint to mix (e.g. 'Yellow', 'Red', 'White').",
            },
            "colorHex": {
                "type": "STRING",
                "description": "Hex code of the base paint (e.g. '#FFFF00').",
            },
            "parts": {
                "type": "INTEGER",
                "description": "Number of parts of this paint in the mix.",
            },
        },
        "required": ["colorName", "colorHex", "parts"],
    },
}


def build_prompt(target_hex: str) -> str:
    paints = ", ".join(f"{p.name}: {p.hex}" for p in PIGMENTS)
    return (
        "Act as an art teacher specialised in colour theory.\n"
        f"Write a colour recipe so a beginner can mix the colour {target_hex} with paint.\n"
        f"The painter only has these paints: {paints}.\n"
        "Return a JSON array following the provided schema: the base paints used "
        "and their proportions as whole numbers of parts.\n"
        "For example an orange could be 2 parts yellow and 1 part red; a dark green "
        "could be 3 parts yellow, 2 parts blue and 1 part black.\n"
        f"Choose proportions that get as close as possible to {target_hex}.\n"
        "Answer with the JSON array only."
    )


class GeminiBackend:
    """Generative Language API `generateContent` call via requests."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float | None = DEFAULT_TIMEOUT,
        http: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._http = http or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def payload(self, target_hex: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": build_prompt(target_hex)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def generate(self, target_hex: str) -> str:
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        try:
            resp = self._http.post(
                self.url, json=self.payload(target_hex), headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text[:500] if e.response is not None and e.response.text else None
            raise BackendError(f"generateContent failed: {e}", status_code=status, body=body) from e
        except requests.exceptions.RequestException as e:
            raise BackendError(f"generateContent failed: {e}") from e

        try:
            return resp.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise BackendError(
                f"unexpected generateContent response: {e}",
                status_code=resp.status_code,
                body=resp.text[:500] if resp.text else None,
            ) from e


def is_authorization_denied(exc: BaseException) -> bool:
    if getattr(exc, "status_code", None) in (401, 403):
        return True
    text = f"{exc} {getattr(exc, 'body', None) or ''}"
    return any(marker in text for marker in AUTH_MARKERS)


def classify_backend_error(exc: BaseException) -> RecipeError:
    if is_authorization_denied(exc):
        return InvalidCredentialError()
    return RecipeGenerationError()


# --- service -----------------------------------------------------------------
class RecipeService:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        api_key: str | None = None,
        backend: RecipeBackend | None = None,
        demo_delay: float = DEMO_DELAY,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key or None
        self.cache = RecipeCache(store)
        self.demo_delay = demo_delay
        if backend is None and self.api_key:
            backend = GeminiBackend(self.api_key, model=model, endpoint=endpoint, timeout=timeout)
        self._backend = backend

    @classmethod
    def from_settings(cls, settings, store: KeyValueStore) -> "RecipeService":
        return cls(
            store,
            api_key=settings.api_key,
            demo_delay=settings.demo_delay,
            model=settings.model,
            endpoint=settings.endpoint,
            timeout=settings.timeout,
        )

    @property
    def demo_mode(self) -> bool:
        return self.api_key is None or self._backend is None

    async def fetch_recipe_json(self, target_hex: str) -> str:
        """Raw recipe string for `target_hex` (demo, cached or freshly generated)."""
        if self.demo_mode:
            log.warning(
                "No recipe API key configured; returning the demo recipe. "
                "Set GEMINI_API_KEY to get real recipes."
            )
            await asyncio.sleep(self.demo_delay)
            return DEMO_RECIPE

        cached = self.cache.get(target_hex)
        if cached is not None:
            log.info("Cache hit for %s. Returning cached recipe.", target_hex)
            return cached

        log.info("Cache miss for %s. Fetching from backend.", target_hex)
        try:
            raw = await asyncio.to_thread(self._backend.generate, target_hex)
        except Exception as exc:
            log.exception("Error fetching mixing recipe for %s", target_hex)
            raise classify_backend_error(exc) from exc

        self.cache.put(target_hex, raw)
        return raw

    async def get_mixing_recipe(self, target_hex: str) -> list[MixingStep]:
        return parse_recipe(await self.fetch_recipe_json(target_hex))


__all__ = [
    "BackendError",
    "CACHE_KEY",
    "DEMO_RECIPE",
    "GeminiBackend",
    "RecipeBackend",
    "RecipeCache",
    "RecipeService",
    "build_prompt",
    "classify_backend_error",
    "is_authorization_denied",
    "parse_recipe",
]
