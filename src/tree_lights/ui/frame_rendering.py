"""Render mapped animation frames as rich text for the terminal preview."""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Sequence

from rich.color import Color, ColorParseError
from rich.style import Style
from rich.text import Text

from tree_lights.coordinates import Coordinate
from tree_lights.playback import MappedPixel, PlaybackState

Cell = tuple[int, int]
Layout = tuple[Optional[Cell], ...]

PIXEL_GLYPH = "●"


def _is_finite(coord: Coordinate) -> bool:
    return all(math.isfinite(v) for v in coord)


def build_layout(
    coordinates: Sequence[Coordinate], width: int, height: int
) -> Layout:
    """Project coordinates onto a ``width`` x ``height`` grid.

    X maps to columns and Z to rows, highest Z on the top row. Indices with
    non-finite coordinates get no cell.
    """
    if width <= 0 or height <= 0:
        return tuple(None for _ in coordinates)
    finite = [c for c in coordinates if _is_finite(c)]
    if not finite:
        return tuple(None for _ in coordinates)
    min_x = min(c.x for c in finite)
    max_x = max(c.x for c in finite)
    min_z = min(c.z for c in finite)
    max_z = max(c.z for c in finite)
    span_x = max_x - min_x
    span_z = max_z - min_z
    cells: list[Optional[Cell]] = []
    for coord in coordinates:
        if not _is_finite(coord):
            cells.append(None)
            continue
        col = 0 if span_x == 0 else round((coord.x - min_x) / span_x * (width - 1))
        row = 0 if span_z == 0 else round((max_z - coord.z) / span_z * (height - 1))
        cells.append((int(col), int(row)))
    return tuple(cells)


def _channel(value: Any) -> Optional[int]:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    if not math.isfinite(value):
        return None
    return max(0, min(255, int(round(value))))


def color_to_rich(color: Any) -> Optional[Color]:
    """Convert a decoded pixel color to a rich Color, if it looks like one."""
    if isinstance(color, str):
        try:
            return Color.parse(color)
        except ColorParseError:
            return None
    if isinstance(color, (tuple, list)) and len(color) >= 3:
        channels = [_channel(v) for v in color[:3]]
        if any(c is None for c in channels):
            return None
        red, green, blue = channels
        return Color.from_rgb(red, green, blue)  # type: ignore[arg-type]
    return None


def render_frame(
    pixels: Iterable[MappedPixel], layout: Layout, width: int, height: int
) -> Text:
    """Draw every pixel with a known cell and color onto a blank grid."""
    if width <= 0 or height <= 0:
        return Text()
    grid: list[list[tuple[str, Optional[Style]]]] = [
        [(" ", None)] * width for _ in range(height)
    ]
    for pixel in pixels:
        if pixel.index >= len(layout):
            continue
        cell = layout[pixel.index]
        color = color_to_rich(pixel.color)
        if cell is None or color is None:
            continue
        col, row = cell
        if 0 <= col < width and 0 <= row < height:
            grid[row][col] = (PIXEL_GLYPH, Style(color=color))
    rendered = Text()
    for row_idx, row in enumerate(grid):
        if row_idx > 0:
            rendered.append("\n")
        for glyph, style in row:
            rendered.append(glyph, style=style)
    return rendered


def status_line(state: PlaybackState, frame_index: int | None, frame_count: int) -> str:
    label = "PLAYING" if state.is_playing else "PAUSED"
    if frame_index is None:
        frame_text = "--/--"
    else:
        frame_text = f"{frame_index + 1}/{frame_count}"
    return (
        f"[ {label.ljust(7)} ] frame {frame_text}  "
        f"t={state.current_time:6.2f}s  "
        f"rate={state.playback_rate:+.2f}x  fps={state.base_frame_rate:g}"
    )
