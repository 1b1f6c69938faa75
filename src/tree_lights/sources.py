"""Load coordinate and animation files from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from tree_lights.animation import AnimationSet, CsvAnimationDecoder
from tree_lights.config import (
    AppConfig,
    animation_options,
    coordinate_options,
    playback_options,
)
from tree_lights.coordinates import (
    CoordinateDecoder,
    CsvCoordinateDecoder,
    JsonArrayCoordinateDecoder,
    LineDelimitedJsonCoordinateDecoder,
)
from tree_lights.mapping import CoordinateMapping
from tree_lights.playback import PlaybackController

logger = logging.getLogger(__name__)

CoordinateFormat = Literal["auto", "lines", "json", "csv"]

COORDINATE_FORMATS: tuple[str, ...] = ("auto", "lines", "json", "csv")


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def coordinate_decoder_for(
    path: Path,
    cfg: AppConfig | None = None,
    fmt: CoordinateFormat = "auto",
) -> CoordinateDecoder:
    """Pick a coordinate decoder from ``fmt`` or, for "auto", the suffix."""
    if fmt not in COORDINATE_FORMATS:
        raise ValueError(f"Unknown coordinate format: {fmt!r}")
    cfg = cfg or AppConfig()
    if fmt == "auto":
        suffix = path.suffix.lower()
        if suffix == ".csv":
            fmt = "csv"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = "lines"
    if fmt == "csv":
        return CsvCoordinateDecoder(coordinate_options(cfg))
    if fmt == "json":
        return JsonArrayCoordinateDecoder()
    return LineDelimitedJsonCoordinateDecoder()


def load_coordinates(
    path: Path,
    cfg: AppConfig | None = None,
    fmt: CoordinateFormat = "auto",
) -> CoordinateMapping:
    mapping = CoordinateMapping(coordinate_decoder_for(path, cfg, fmt))
    mapping.load(read_text(path))
    logger.info("Loaded %d coordinates from %s", len(mapping), path)
    return mapping


def load_animation(path: Path, cfg: AppConfig | None = None) -> AnimationSet:
    decoder = CsvAnimationDecoder(animation_options(cfg or AppConfig()))
    frames = decoder.decode(read_text(path))
    logger.info("Loaded %d animation frames from %s", len(frames), path)
    return frames


def build_controller(
    coords_path: Path,
    animation_path: Path,
    cfg: AppConfig | None = None,
    fmt: CoordinateFormat = "auto",
) -> PlaybackController:
    """Load both files into a fresh controller using the config defaults."""
    cfg = cfg or AppConfig()
    controller = PlaybackController(playback_options(cfg))
    controller.set_data(
        animation_frames=load_animation(animation_path, cfg),
        coordinate_mapping=load_coordinates(coords_path, cfg, fmt),
    )
    return controller
