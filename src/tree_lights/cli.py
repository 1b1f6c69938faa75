"""Command-line interface for Tree Lights."""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
from typing import Iterable, Optional

from tree_lights.config import AppConfig, load_config
from tree_lights.errors import DecodeError
from tree_lights.logging_setup import init_logging
from tree_lights.playback import PlaybackController
from tree_lights.sources import COORDINATE_FORMATS, build_controller

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="tree-lights", description="Preview LED animations on a 3D layout"
    )
    parser.add_argument("coords", help="Path to the LED coordinate file")
    parser.add_argument("animation", help="Path to the animation CSV file")
    parser.add_argument(
        "--coords-format",
        choices=COORDINATE_FORMATS,
        default="auto",
        help="Coordinate file format (default: pick by file extension)",
    )
    parser.add_argument(
        "--fps", type=float, default=None, help="Base animation frame rate"
    )
    parser.add_argument("--rate", type=float, default=None, help="Playback rate")
    parser.add_argument(
        "--hex",
        action="store_true",
        help="Decode pixel colors into #rrggbb strings",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a summary of the decoded files and exit",
    )
    return parser


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.fps is not None:
        if args.fps <= 0:
            raise ValueError("--fps must be positive")
        cfg = replace(cfg, base_frame_rate=args.fps)
    if args.rate is not None:
        cfg = replace(cfg, playback_rate=args.rate)
    if args.hex:
        cfg = replace(cfg, output_hex_colors=True)
    return cfg


def format_summary(controller: PlaybackController) -> str:
    mapping = controller.coordinate_mapping
    points = len(mapping) if mapping is not None else 0
    return "\n".join(
        [
            f"Coordinates:    {points}",
            f"Frames:         {controller.frame_count}",
            f"Frame duration: {controller.frame_duration:.4f}s",
            f"Duration:       {controller.duration:.3f}s",
        ]
    )


def _run_preview(controller: PlaybackController, refresh_fps: float) -> int:
    try:
        from tree_lights.ui.preview import run_preview
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_preview(controller, refresh_fps=refresh_fps)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")

    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        cfg = _apply_overrides(load_config(), args)
        controller = build_controller(
            Path(args.coords), Path(args.animation), cfg, args.coords_format
        )
    except (DecodeError, OSError, ValueError) as exc:
        logger.error("Failed to load input files: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.summary:
        print(format_summary(controller))
        return 0

    exit_code = _run_preview(controller, cfg.refresh_fps)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
