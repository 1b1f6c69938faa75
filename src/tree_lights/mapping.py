"""Index-addressable access to a decoded coordinate set."""

from __future__ import annotations

import logging
from typing import TypeVar

from tree_lights.coordinates import Coordinate, CoordinateDecoder, CoordinateSet

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class CoordinateMapping:
    """Wraps one coordinate set produced by the bound decoder."""

    def __init__(self, decoder: CoordinateDecoder) -> None:
        self.decoder = decoder
        self._coordinates: CoordinateSet = ()

    def __len__(self) -> int:
        return len(self._coordinates)

    def load(self, text: str) -> None:
        """Decode ``text`` and replace the held coordinate set wholesale."""
        self._coordinates = self.decoder.decode(text)
        logger.debug("Coordinate mapping loaded %d points", len(self._coordinates))

    def coordinate_at(
        self, index: int, default: _T | None = None
    ) -> Coordinate | _T | None:
        # Animation pixel counts and coordinate counts need not match.
        if index < 0 or index >= len(self._coordinates):
            return default
        return self._coordinates[index]

    def all_coordinates(self) -> CoordinateSet:
        return self._coordinates
