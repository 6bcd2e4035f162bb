from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, jsonify, request

from .colorspace import find_closest_palette_entry, hex_to_rgb, rgb_to_hex
from .config import Settings, load_settings, open_store
from .harmony import describe
from .mixer import mix
from .models import Color
from .palette import PIGMENTS, WHEEL
from .recipe import RecipeService
from .session import Session
from .storage import KeyValueStore

log = logging.getLogger(__name__)


def canon_hex(s: Any) -> str:
    """Normalize to '#RRGGBB'; accept 6-digit hex only (optional '#')."""
    if not isinstance(s, str):
        raise ValueError("hex must be 6 hex digits")
    rgb = hex_to_rgb(s.strip())
    if rgb is None:
        raise ValueError("hex must be 6 hex digits")
    return rgb_to_hex(*rgb)


def parse_hue(val: Any) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ValueError("hue must be an integer") from None


def parse_parts(args: Mapping[str, Any]) -> list[tuple[Any, int]]:
    out = []
    for p in PIGMENTS:
        raw = args.get(p.key, 0)
        try:
            out.append((p.rgb, int(raw)))
        except (TypeError, ValueError):
            raise ValueError(f"{p.key} must be an integer") from None
    return out


def parse_color(data: Any) -> Color:
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    h = canon_hex(data.get("hex"))
    if "name" in data and "hue" in data:
        return Color(name=str(data["name"]), hex=h, hue=parse_hue(data["hue"]) % 360)
    # a bare sampled hex snaps to the wheel, like the image picker
    return find_closest_palette_entry(h)


def _bad(msg: str, code: int = 400):
    return jsonify({"error": msg}), code


# ----------------------------- Flask app ----------------------------------


def create_app(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
    service: RecipeService | None = None,
) -> Flask:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    store = store if store is not None else open_store(settings)
    service = service or RecipeService.from_settings(settings, store)
    session = Session(service, store)

    app = Flask(__name__)
    app.extensions["chroma_mix"] = session
    if service.demo_mode:
        log.warning("Recipe API key not configured; recipes will be demo data")

    @app.get("/wheel")
    def wheel():
        return jsonify([c.to_record() for c in WHEEL])

    @app.get("/closest")
    def closest():
        # unparseable input falls back to the first wheel entry
        return jsonify(find_closest_palette_entry(request.args.get("hex", "")).to_record())

    @app.get("/harmony")
    def harmony():
        try:
            if "hue" in request.args:
                hue = parse_hue(request.args["hue"])
            else:
                hue = find_closest_palette_entry(canon_hex(request.args.get("hex"))).hue
        except ValueError as e:
            return _bad(f"invalid input: {e}")
        return jsonify(describe(hue))

    @app.get("/mix")
    def mix_route():
        try:
            parts = parse_parts(request.args)
        except ValueError as e:
            return _bad(str(e))
        rgb = mix(parts)
        return jsonify({"rgb": list(rgb), "hex": rgb_to_hex(*rgb)})

    # ---- session ----

    @app.get("/state")
    def state():
        return jsonify(session.to_dict())

    @app.delete("/state")
    def reset_state():
        session.reset_selection()
        return jsonify(session.to_dict())

    @app.post("/select")
    def select():
        try:
            color = parse_color(request.get_json(silent=True))
        except ValueError as e:
            return _bad(f"invalid color: {e}")
        session.select_color(color)
        return jsonify(session.to_dict())

    @app.post("/recipe")
    async def recipe():
        try:
            await session.request_recipe()
        except ValueError as e:
            return _bad(str(e), 409)
        return jsonify(session.to_dict())

    @app.get("/palette")
    def palette():
        return jsonify(session.export_palette())

    @app.post("/palette")
    def add_palette():
        try:
            color = parse_color(request.get_json(silent=True))
        except ValueError as e:
            return _bad(f"invalid color: {e}")
        added = session.add_to_palette(color)
        return jsonify({"added": added, "palette": session.export_palette()}), 201 if added else 200

    @app.delete("/palette")
    def clear_palette():
        session.clear_palette()
        return jsonify(session.export_palette())

    # ---- manual mixing lab ----

    @app.get("/lab")
    def lab():
        return jsonify(session.lab.to_dict())

    @app.post("/lab")
    def set_lab():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad("expected a JSON object of pigment parts")
        try:
            session.lab.update(data)
        except ValueError as e:
            return _bad(str(e))
        return jsonify(session.lab.to_dict())

    @app.post("/lab/reset")
    def reset_lab():
        session.lab.reset()
        return jsonify(session.lab.to_dict())

    @app.post("/lab/save")
    def save_lab():
        color = session.save_lab_mix()
        if color is None:
            return _bad("nothing mixed yet")
        return jsonify({"color": color.to_record(), "palette": session.export_palette()})

    # ---- preferences ----

    @app.get("/preferences")
    def preferences():
        return jsonify({"dark_mode": session.dark_mode, "tutorial_seen": session.tutorial_seen})

    @app.post("/preferences")
    def set_preferences():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad("expected a JSON object of preferences")
        if "dark_mode" in data:
            session.dark_mode = bool(data["dark_mode"])
        if data.get("tutorial_seen"):
            session.mark_tutorial_seen()
        return jsonify({"dark_mode": session.dark_mode, "tutorial_seen": session.tutorial_seen})

    return app


def main() -> None:
    # Production: debug=False; threaded=True is fine for this I/O profile.
    create_app().run(debug=False, threaded=True)


if __name__ == "__main__":
    main()
