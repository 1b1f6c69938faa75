"""Pytest configuration for Tree Lights."""

from __future__ import annotations

from pathlib import Path

import pytest

from tree_lights.coordinates import JsonArrayCoordinateDecoder
from tree_lights.mapping import CoordinateMapping
from tree_lights.playback import PlaybackController, PlaybackOptions

FOUR_FRAMES = (
    ((255.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
    ((0.0, 255.0, 0.0), (0.0, 0.0, 0.0)),
    ((0.0, 0.0, 255.0), (0.0, 0.0, 0.0)),
    ((255.0, 255.0, 255.0), (0.0, 0.0, 0.0)),
)


@pytest.fixture
def four_frames() -> tuple:
    return FOUR_FRAMES


@pytest.fixture
def mapping() -> CoordinateMapping:
    mapping = CoordinateMapping(JsonArrayCoordinateDecoder())
    mapping.load("[[0, 0, 0], [1, 0, 1]]")
    return mapping


@pytest.fixture
def controller(mapping: CoordinateMapping) -> PlaybackController:
    """Four frames at 2 fps: frame duration 0.5s, duration 2.0s."""
    ctrl = PlaybackController(PlaybackOptions(base_frame_rate=2))
    ctrl.set_data(animation_frames=FOUR_FRAMES, coordinate_mapping=mapping)
    return ctrl


@pytest.fixture
def sample_files(tmp_path: Path) -> tuple[Path, Path]:
    coords = tmp_path / "coords.csv"
    coords.write_text("0,0,0\n1,0,1\n2,0,2\n", encoding="utf-8")
    animation = tmp_path / "anim.csv"
    animation.write_text(
        "FRAME_ID,R_0,G_0,B_0,R_1,G_1,B_1\n"
        "0,255,0,0,0,0,0\n"
        "1,0,255,0,0,0,0\n"
        "2,0,0,255,10,20,30\n",
        encoding="utf-8",
    )
    return coords, animation
