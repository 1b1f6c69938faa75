"""Helpers shared by the plain-text decoders."""

from __future__ import annotations

import math
import re

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def split_rows(text: str, skip_row_count: int = 0) -> list[str]:
    """Split text on newlines and drop the first ``skip_row_count`` rows."""
    rows = text.split("\n")
    if skip_row_count > 0:
        del rows[:skip_row_count]
    return rows


def parse_float(cell: str) -> float:
    """Parse the leading numeric part of a cell, or return nan.

    Leading whitespace is ignored and trailing garbage after the number is
    tolerated, so ``" 12px"`` parses as ``12.0``.
    """
    match = _FLOAT_PREFIX.match(cell.lstrip())
    if match is None:
        return math.nan
    token = match.group(0)
    if token.endswith("Infinity"):
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def parse_index(text: str) -> int | None:
    """Return the leading non-negative integer of ``text``, if any."""
    match = re.match(r"\d+", text.strip())
    if match is None:
        return None
    return int(match.group(0))
