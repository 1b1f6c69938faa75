"""CSV animation decoder.

An animation file has exactly one heading row (after any skipped rows) with
labels of the form ``<component>_<pixel>``, for example ``R_0,G_0,B_0,R_1``.
Every following row is one frame. Columns whose label does not name a known
component are ignored, so files may carry extra metadata columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, Callable, Optional, Sequence

from tree_lights.errors import DecodeError
from tree_lights.text_helpers import parse_float, parse_index, split_rows

logger = logging.getLogger(__name__)

DEFAULT_MAX_PIXEL_INDEX = 65535

Channel = Optional[float]
PixelChannels = tuple[Channel, ...]
Frame = Sequence[Any]
AnimationSet = tuple[Frame, ...]

PixelCallable = Callable[[Any], Any]
FrameCallable = Callable[[tuple[Any, ...]], Any]


def hex_color(channels: Sequence[Channel]) -> str:
    """Pack channel values into a ``#rrggbb``-style string.

    Values are rounded to the nearest integer; a missing or nan channel
    contributes nothing.
    """
    parts: list[str] = []
    for value in channels:
        if value is None or math.isnan(value) or math.isinf(value):
            continue
        parts.append(format(int(round(value)), "x").rjust(2, "0"))
    return "#" + "".join(parts)


class PixelMapperKind(Enum):
    IDENTITY = "identity"
    HEX = "hex"
    CUSTOM = "custom"
    HEX_THEN_CUSTOM = "hex_then_custom"


@dataclass(frozen=True)
class PixelMapper:
    """Per-pixel transform chosen once from the decoder options."""

    kind: PixelMapperKind = PixelMapperKind.IDENTITY
    custom: PixelCallable | None = None

    @classmethod
    def build(
        cls, *, output_hex_colors: bool, custom: PixelCallable | None
    ) -> "PixelMapper":
        if custom is None:
            kind = (
                PixelMapperKind.HEX if output_hex_colors else PixelMapperKind.IDENTITY
            )
        elif output_hex_colors:
            kind = PixelMapperKind.HEX_THEN_CUSTOM
        else:
            kind = PixelMapperKind.CUSTOM
        return cls(kind=kind, custom=custom)

    def __call__(self, channels: PixelChannels) -> Any:
        if self.kind is PixelMapperKind.IDENTITY:
            return channels
        if self.kind is PixelMapperKind.HEX:
            return hex_color(channels)
        if self.custom is None:
            raise ValueError(f"{self.kind.value} pixel mapper needs a callable.")
        if self.kind is PixelMapperKind.HEX_THEN_CUSTOM:
            return self.custom(hex_color(channels))
        return self.custom(channels)


@dataclass(frozen=True)
class FrameMapper:
    """Per-frame transform; identity unless a callable is configured."""

    custom: FrameCallable | None = None

    def __call__(self, pixels: tuple[Any, ...]) -> Frame:
        if self.custom is None:
            return pixels
        return self.custom(pixels)


@dataclass(frozen=True)
class AnimationDecoderOptions:
    skip_row_count: int = 0
    components: tuple[str, ...] = ("r", "g", "b")
    output_hex_colors: bool = False
    max_pixel_index: int = DEFAULT_MAX_PIXEL_INDEX
    custom_pixel_mapper: PixelCallable | None = field(default=None, compare=False)
    custom_frame_mapper: FrameCallable | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        components = tuple(c.lower() for c in self.components)
        if not components:
            raise ValueError("components must name at least one channel.")
        if len(set(components)) != len(components):
            raise ValueError(f"components must be unique: {components!r}")
        if self.max_pixel_index < 0:
            raise ValueError("max_pixel_index must be non-negative.")
        object.__setattr__(self, "components", components)


@dataclass(frozen=True)
class ColumnTarget:
    pixel: int
    channel: int


@dataclass(frozen=True)
class HeadingLayout:
    """Parsed heading row: total column count plus mapped columns."""

    total_column_count: int
    columns: dict[int, ColumnTarget]


class CsvAnimationDecoder:
    """Primitive CSV decoder. Does not handle quoting or escaping."""

    def __init__(self, options: AnimationDecoderOptions | None = None) -> None:
        self.options = options or AnimationDecoderOptions()
        self._channels = {name: idx for idx, name in enumerate(self.options.components)}
        self.pixel_mapper = PixelMapper.build(
            output_hex_colors=self.options.output_hex_colors,
            custom=self.options.custom_pixel_mapper,
        )
        self.frame_mapper = FrameMapper(self.options.custom_frame_mapper)

    def decode_heading_row(self, line: str) -> HeadingLayout:
        labels = line.lower().split(",")
        columns: dict[int, ColumnTarget] = {}
        for idx, label in enumerate(labels):
            parts = label.strip().split("_")
            if len(parts) != 2 or parts[0] not in self._channels:
                continue
            pixel = parse_index(parts[1])
            if pixel is None:
                continue
            if pixel > self.options.max_pixel_index:
                logger.warning(
                    "Ignoring column %r: pixel index above %d",
                    label.strip(),
                    self.options.max_pixel_index,
                )
                continue
            columns[idx] = ColumnTarget(pixel=pixel, channel=self._channels[parts[0]])
        return HeadingLayout(total_column_count=len(labels), columns=columns)

    def decode(self, text: str) -> AnimationSet:
        rows = split_rows(text, self.options.skip_row_count)
        if not rows:
            raise DecodeError("Animation CSV has no heading row.")
        layout = self.decode_heading_row(rows[0])
        if not layout.columns:
            logger.warning("Animation heading row maps no known columns")

        frames: list[Frame] = []
        dropped = 0
        for row in rows[1:]:
            fields = row.split(",")
            if len(fields) < layout.total_column_count:
                dropped += 1
                continue
            pixels = self._assemble_pixels(fields, layout)
            mapped = tuple(
                None if pixel is None else self.pixel_mapper(pixel) for pixel in pixels
            )
            frames.append(self.frame_mapper(mapped))
        logger.debug(
            "Decoded %d animation frames (%d short rows dropped)",
            len(frames),
            dropped,
        )
        return tuple(frames)

    def _assemble_pixels(
        self, fields: list[str], layout: HeadingLayout
    ) -> list[PixelChannels | None]:
        channel_count = len(self.options.components)
        pixels: list[list[Channel] | None] = []
        for column, target in layout.columns.items():
            if target.pixel >= len(pixels):
                pixels.extend([None] * (target.pixel + 1 - len(pixels)))
            pixel = pixels[target.pixel]
            if pixel is None:
                pixel = [None] * channel_count
                pixels[target.pixel] = pixel
            pixel[target.channel] = parse_float(fields[column])
        return [None if p is None else tuple(p) for p in pixels]
