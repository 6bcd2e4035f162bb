"""
Runtime settings from the environment (optionally a local .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .recipe import DEFAULT_ENDPOINT, DEFAULT_MODEL, DEFAULT_TIMEOUT, DEMO_DELAY
from .storage import JsonFileStore, KeyValueStore, MemoryStore


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float | None = DEFAULT_TIMEOUT
    store_path: Path | None = None
    demo_delay: float = DEMO_DELAY
    log_level: str = "INFO"


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _timeout(env: Mapping[str, str]) -> float | None:
    raw = (env.get("CHROMAMIX_TIMEOUT") or "").strip().lower()
    if raw in ("none", "off"):
        return None
    value = _float(env, "CHROMAMIX_TIMEOUT", DEFAULT_TIMEOUT)
    return value if value > 0 else None


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from `env`; defaults to os.environ after reading .env."""
    if env is None:
        load_dotenv()
        env = os.environ
    api_key = (env.get("GEMINI_API_KEY") or env.get("API_KEY") or "").strip() or None
    store = (env.get("CHROMAMIX_STORE") or "").strip()
    return Settings(
        api_key=api_key,
        model=(env.get("CHROMAMIX_MODEL") or DEFAULT_MODEL).strip(),
        endpoint=(env.get("CHROMAMIX_ENDPOINT") or DEFAULT_ENDPOINT).strip(),
        timeout=_timeout(env),
        store_path=Path(store).expanduser() if store else None,
        demo_delay=_float(env, "CHROMAMIX_DEMO_DELAY", DEMO_DELAY),
        log_level=(env.get("CHROMAMIX_LOG_LEVEL") or "INFO").strip().upper(),
    )


def open_store(settings: Settings) -> KeyValueStore:
    if settings.store_path is None:
        return MemoryStore()
    return JsonFileStore(settings.store_path)


__all__ = ["Settings", "load_settings", "open_store"]
