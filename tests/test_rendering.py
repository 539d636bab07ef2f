"""Tests for host rendering helpers."""

import numpy as np
import pytest
from chipvm import create_state, display_to_rgb, display_to_text, create_color_scheme


def test_display_to_rgb_shape_and_colors(fresh_state):
    display = fresh_state.display.at[0, 1].set(True)

    rgb = display_to_rgb(display, scale=2, on_color=(1, 2, 3), off_color=(9, 9, 9))

    assert rgb.shape == (64, 128, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 2]) == (1, 2, 3)
    assert tuple(rgb[1, 3]) == (1, 2, 3)
    assert tuple(rgb[0, 0]) == (9, 9, 9)


def test_display_to_rgb_rejects_bad_scale(fresh_state):
    with pytest.raises(ValueError):
        display_to_rgb(fresh_state.display, scale=0)


def test_color_schemes():
    assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))
    with pytest.raises(ValueError, match="Unknown color scheme"):
        create_color_scheme("nope")


def test_display_to_text():
    state = create_state()
    display = state.display.at[31, 63].set(True)

    lines = display_to_text(display).splitlines()

    assert len(lines) == 32
    assert all(len(line) == 64 for line in lines)
    assert lines[31].endswith(".#")
    assert set(lines[0]) == {"."}
