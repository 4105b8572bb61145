# tests/test_palette_tools.py
import numpy as np
import pytest
from pickup import palette_tools


def test_to_hex_is_lowercase_and_rounded():
    assert palette_tools.to_hex([1.0, 0.0, 0.0]) == "#ff0000"
    assert palette_tools.to_hex([0.5, 0.5, 0.5]) == "#808080"  # 127.5 + 0.5 rounds up
    assert palette_tools.to_hex([0.0, 0.25, 1.0]) == "#0040ff"


def test_to_rgb255_clamps():
    assert palette_tools.to_rgb255([1.2, -0.1, 0.0]) == (255, 0, 0)


def test_hue_of_primaries():
    hues = palette_tools.hue_of([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    # CIELAB hue angles for sRGB primaries (D65)
    assert hues[0] == pytest.approx(40.0, abs=1.0)
    assert hues[1] == pytest.approx(136.0, abs=1.0)
    assert hues[2] == pytest.approx(306.3, abs=1.0)
    assert np.all((hues >= 0.0) & (hues < 360.0))


def test_sort_by_hue_orders_ascending():
    colors = np.array([
        [0.0, 0.0, 1.0],  # blue
        [1.0, 0.0, 0.0],  # red
        [0.0, 1.0, 0.0],  # green
    ])
    ordered = palette_tools.sort_by_hue(colors)

    assert np.array_equal(ordered[0], [1.0, 0.0, 0.0])
    assert np.array_equal(ordered[1], [0.0, 1.0, 0.0])
    assert np.array_equal(ordered[2], [0.0, 0.0, 1.0])


def test_format_palette_lines():
    lines = palette_tools.format_palette_lines([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    assert lines == ["0 #ff0000", "1 #0000ff"]


def test_empty_palette():
    assert palette_tools.hue_of(np.empty((0, 3))).shape == (0,)
    assert palette_tools.format_palette_lines(np.empty((0, 3))) == []
