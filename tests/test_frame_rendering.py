"""Tests for terminal frame rendering helpers."""

from __future__ import annotations

import math

import pytest

from tree_lights.coordinates import Coordinate
from tree_lights.playback import MappedPixel, PlaybackState
from tree_lights.ui.frame_rendering import (
    PIXEL_GLYPH,
    build_layout,
    color_to_rich,
    render_frame,
    status_line,
)


def test_build_layout_projects_x_and_z() -> None:
    coords = (
        Coordinate(0.0, 5.0, 0.0),
        Coordinate(10.0, -5.0, 10.0),
        Coordinate(5.0, 0.0, 5.0),
    )
    assert build_layout(coords, 11, 11) == ((0, 10), (10, 0), (5, 5))


def test_build_layout_skips_non_finite() -> None:
    coords = (Coordinate(0.0, 0.0, 0.0), Coordinate(math.nan, 0.0, 1.0))
    assert build_layout(coords, 4, 4) == ((0, 0), None)


def test_build_layout_degenerate_inputs() -> None:
    single = (Coordinate(3.0, 3.0, 3.0),)
    assert build_layout(single, 5, 5) == ((0, 0),)
    assert build_layout(single, 0, 5) == (None,)
    assert build_layout((), 5, 5) == ()


@pytest.mark.parametrize(
    ("color", "expected"),
    [
        ((255.0, 0.0, 0.0), (255, 0, 0)),
        ((300.0, -5.0, 10.4), (255, 0, 10)),
        ("#00ff00", (0, 255, 0)),
        ([1, 2, 3, 4], (1, 2, 3)),
    ],
)
def test_color_to_rich(color, expected) -> None:
    rich_color = color_to_rich(color)
    assert rich_color is not None
    assert tuple(rich_color.get_truecolor()) == expected


@pytest.mark.parametrize(
    "color", [(math.nan, 0.0, 0.0), (1.0, None, 2.0), "#ff", "nope", 5, None]
)
def test_color_to_rich_rejects_non_colors(color) -> None:
    assert color_to_rich(color) is None


def test_render_frame_places_glyphs() -> None:
    layout = ((0, 0), (2, 1), None)
    pixels = [
        MappedPixel(index=0, position=None, color=(255.0, 0.0, 0.0)),
        MappedPixel(index=1, position=None, color="#0000ff"),
        MappedPixel(index=2, position=None, color=(1.0, 1.0, 1.0)),
        MappedPixel(index=7, position=None, color=(1.0, 1.0, 1.0)),
    ]
    text = render_frame(pixels, layout, 3, 2)
    assert text.plain == f"{PIXEL_GLYPH}  \n  {PIXEL_GLYPH}"


def test_render_frame_skips_uncolorable_pixels() -> None:
    text = render_frame([MappedPixel(0, None, "not a color")], ((0, 0),), 2, 1)
    assert text.plain == "  "


def test_render_frame_empty_area() -> None:
    assert render_frame([], (), 0, 3).plain == ""


def test_status_line() -> None:
    state = PlaybackState(
        current_time=1.25,
        playback_rate=-0.5,
        base_frame_rate=24.0,
        is_playing=True,
        dirty=False,
        dirty_geometry=False,
    )
    line = status_line(state, 1, 4)
    assert line.startswith("[ PLAYING ]")
    assert "frame 2/4" in line
    assert "rate=-0.50x" in line
    assert "fps=24" in line
    paused = status_line(
        PlaybackState(0.0, 1.0, 60.0, False, False, False), None, 0
    )
    assert "PAUSED" in paused
    assert "--/--" in paused
