"""Error types raised by the tree_lights decoders."""

from __future__ import annotations


class DecodeError(ValueError):
    """Raised when decoder input does not have the expected shape."""
