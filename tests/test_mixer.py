import numpy as np
import pytest

from chroma_mix.mixer import EMPTY_MIX, PigmentLab, mix, mix_hex, mix_recipe
from chroma_mix.models import RGB, MixingStep
from chroma_mix.palette import BLACK, BLUE, PIGMENTS, RED, WHITE, YELLOW


def test_empty_mix_is_white():
    assert mix([]) == RGB(255, 255, 255)
    assert mix([(p.rgb, 0) for p in PIGMENTS]) == EMPTY_MIX


def test_negative_parts_are_ignored():
    assert mix([(RED.rgb, 2), (BLUE.rgb, -3)]) == RGB(255, 0, 0)


def test_red_and_yellow():
    assert mix([(RED.rgb, 1), (YELLOW.rgb, 1)]) == RGB(255, 127.5, 0)


def test_white_and_black_weighted():
    assert mix([(WHITE.rgb, 3), (BLACK.rgb, 1)]) == RGB(191.25, 191.25, 191.25)


def test_zero_entries_do_not_dilute():
    with_zeros = mix([(RED.rgb, 1), (YELLOW.rgb, 1), (BLUE.rgb, 0), (WHITE.rgb, 0)])
    assert with_zeros == mix([(RED.rgb, 1), (YELLOW.rgb, 1)])


def test_channels_are_independent_weighted_averages():
    parts = [(RED.rgb, 2), (BLUE.rgb, 1), (WHITE.rgb, 1)]
    out = np.asarray(mix(parts))
    expected = (2 * np.array(RED.rgb) + np.array(BLUE.rgb) + np.array(WHITE.rgb)) / 4
    assert np.allclose(out, expected)


def test_rounding_only_at_hex():
    assert mix_hex([(RED.rgb, 1), (YELLOW.rgb, 1)]) == "#FF8000"


def test_mix_recipe_skips_bad_steps():
    steps = [
        MixingStep(colorName="Red", colorHex="#FF0000", parts=1),
        MixingStep(colorName="Mystery", colorHex="??", parts=5),
        MixingStep(colorName="Yellow", colorHex="#FFFF00", parts=1),
    ]
    assert mix_recipe(steps) == "#FF8000"


def test_lab_starts_empty():
    lab = PigmentLab()
    assert lab.total_parts == 0
    assert lab.mixed_hex == "#FFFFFF"
    assert lab.as_color() is None


def test_lab_mix_and_save_color():
    lab = PigmentLab()
    lab.set_parts("white", 3)
    lab.set_parts("Black", 1)
    assert lab.mixed_rgb == RGB(191.25, 191.25, 191.25)
    color = lab.as_color()
    assert color.hex == "#BFBFBF"
    assert color.name == "Mix #BFBFBF"
    assert color.hue == 0


@pytest.mark.parametrize("value", [-1, 11, 2.5, True, "3"])
def test_lab_rejects_out_of_range(value):
    lab = PigmentLab()
    with pytest.raises(ValueError):
        lab.set_parts("red", value)


def test_lab_rejects_unknown_pigment():
    with pytest.raises(ValueError):
        PigmentLab().set_parts("green", 1)


def test_lab_update_is_all_or_nothing():
    lab = PigmentLab()
    lab.set_parts("blue", 4)
    with pytest.raises(ValueError):
        lab.update({"red": 2, "yellow": 42})
    assert lab.parts == {"red": 0, "yellow": 0, "blue": 4, "white": 0, "black": 0}


def test_lab_reset():
    lab = PigmentLab()
    lab.update({"red": 10, "yellow": 10})
    lab.reset()
    assert lab.total_parts == 0
