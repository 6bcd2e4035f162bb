from chroma_mix.harmony import (
    closest_palette_hue,
    describe,
    harmonies,
    highlighted_hues,
    hsl_string,
    swatch_hex,
)
from chroma_mix.models import Color


def test_harmony_of_red():
    h = harmonies(0)
    assert h.complementary == 180
    assert h.analogous == (330, 30)
    assert h.triadic == (120, 240)
    assert set(h.hues()) == {180, 330, 30, 120, 240}


def test_complementary_is_its_own_inverse():
    assert harmonies(180).complementary == 0
    for hue in range(0, 360, 15):
        assert harmonies(harmonies(hue).complementary).complementary == hue


def test_hues_stay_in_range():
    for hue in (-30, 0, 359, 360, 725):
        assert all(0 <= x < 360 for x in harmonies(hue).hues())


def test_hsl_string_normalizes():
    assert hsl_string(-30) == "hsl(330, 100%, 50%)"
    assert hsl_string(420) == "hsl(60, 100%, 50%)"


def test_swatch_hex():
    assert swatch_hex(0) == "#FF0000"
    assert swatch_hex(120) == "#00FF00"
    assert swatch_hex(240) == "#0000FF"
    assert swatch_hex(180) == "#00FFFF"


def test_closest_palette_hue_wraps_around():
    assert closest_palette_hue(355) == 0
    assert closest_palette_hue(344) == 330
    assert closest_palette_hue(100) == 90


def test_highlighted_hues_on_wheel():
    assert highlighted_hues(0) == frozenset({180, 330, 30, 120, 240})


def test_highlighted_hues_collapse_on_coarse_palette():
    coarse = (Color("Red", "#FF0000", 0), Color("Cyan", "#00FFFF", 180))
    # 330 and 30 snap to 0, 120 and 240 snap to 180
    assert highlighted_hues(0, coarse) == frozenset({0, 180})


def test_describe_payload():
    out = describe(60)
    assert out["base_hue"] == 60
    assert [s["role"] for s in out["swatches"]] == [
        "complementary",
        "analogous1",
        "analogous2",
        "triadic1",
        "triadic2",
    ]
    assert out["swatches"][0]["hue"] == 240
    assert out["swatches"][0]["hex"] == "#0000FF"
    assert out["highlighted"] == [30, 90, 180, 240, 300]
