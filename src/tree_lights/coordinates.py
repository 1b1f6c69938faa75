"""Decoders for LED coordinate files.

Three input shapes are supported:
- line-delimited JSON, one ``[x, y, z]`` array per line;
- a single JSON document holding an array of ``[x, y, z]`` arrays;
- comma-separated rows with configurable X/Y/Z columns.

Every decoder returns a tuple of ``Coordinate`` values, so callers only ever
get read access to the decoded set.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import math
from typing import Any, NamedTuple, Protocol

from tree_lights.errors import DecodeError
from tree_lights.text_helpers import parse_float, split_rows

logger = logging.getLogger(__name__)


class Coordinate(NamedTuple):
    """A single LED position, passed through without unit conversion."""

    x: float
    y: float
    z: float


CoordinateSet = tuple[Coordinate, ...]


class CoordinateDecoder(Protocol):
    def decode(self, text: str) -> CoordinateSet: ...


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _is_xyz(row: Any) -> bool:
    return isinstance(row, list) and len(row) == 3 and all(_is_number(v) for v in row)


def _to_coordinate(row: list[Any]) -> Coordinate:
    return Coordinate(float(row[0]), float(row[1]), float(row[2]))


class LineDelimitedJsonCoordinateDecoder:
    """Decode newline-separated JSON ``[x, y, z]`` arrays."""

    def decode(self, text: str) -> CoordinateSet:
        rows: list[Any] = []
        # Lines of two characters or fewer (blank, "[]") are placeholders.
        for line_no, line in enumerate(text.split("\n"), start=1):
            if len(line) <= 2:
                continue
            try:
                rows.append(json.loads(line))
            except ValueError as exc:
                raise DecodeError(f"Line {line_no} is not valid JSON: {exc}") from exc
        if not all(_is_xyz(row) for row in rows):
            raise DecodeError(
                "Provided text should be line-separated JSON representations "
                "of 3-element X,Y,Z arrays."
            )
        geometry = tuple(_to_coordinate(row) for row in rows)
        logger.debug("Decoded %d line-delimited coordinates", len(geometry))
        return geometry


class JsonArrayCoordinateDecoder:
    """Decode one JSON document holding an array of ``[x, y, z]`` arrays."""

    def decode(self, text: str) -> CoordinateSet:
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise DecodeError(f"Coordinate JSON is not valid: {exc}") from exc
        if (
            not isinstance(document, list)
            or len(document) < 1
            or not all(_is_xyz(row) for row in document)
        ):
            raise DecodeError(
                "Provided JSON must represent an array containing "
                "3-element X,Y,Z arrays."
            )
        geometry = tuple(_to_coordinate(row) for row in document)
        logger.debug("Decoded %d JSON array coordinates", len(geometry))
        return geometry


@dataclass(frozen=True)
class CsvCoordinateOptions:
    """Options for ``CsvCoordinateDecoder``.

    ``validation_max_columns`` only guards against obviously wrong files: a
    row with that many commas or more rejects the whole input.
    """

    xyz_columns: tuple[int, ...] = (0, 1, 2)
    skip_row_count: int = 0
    validation_max_columns: int = 10

    def __post_init__(self) -> None:
        columns = tuple(self.xyz_columns)
        if len(columns) != 3:
            raise ValueError(
                "xyz_columns should contain 3 integers corresponding to X, Y "
                "and Z column numbers (0-based)."
            )
        if any(not isinstance(c, int) or c < 0 for c in columns):
            raise ValueError("xyz_columns must be non-negative integers.")
        object.__setattr__(self, "xyz_columns", columns)


class CsvCoordinateDecoder:
    """Primitive CSV decoder. Does not handle quoting or escaping."""

    def __init__(self, options: CsvCoordinateOptions | None = None) -> None:
        self.options = options or CsvCoordinateOptions()

    def decode(self, text: str) -> CoordinateSet:
        opts = self.options
        rows = split_rows(text, opts.skip_row_count)

        max_columns = opts.validation_max_columns
        if any(row.count(",") >= max_columns for row in rows):
            raise DecodeError(
                f"Selected coordinate CSV file has more than {max_columns} "
                "columns! Rejecting."
            )

        field_x, field_y, field_z = opts.xyz_columns
        highest_field = max(opts.xyz_columns)
        geometry: list[Coordinate] = []
        dropped = 0
        for row in rows:
            fields = row.strip().split(",")
            if len(fields) <= highest_field:
                dropped += 1
                continue
            geometry.append(
                Coordinate(
                    parse_float(fields[field_x]),
                    parse_float(fields[field_y]),
                    parse_float(fields[field_z]),
                )
            )
        logger.debug(
            "Decoded %d CSV coordinates (%d short rows dropped)",
            len(geometry),
            dropped,
        )
        return tuple(geometry)
