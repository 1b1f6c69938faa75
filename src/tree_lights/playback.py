"""Loop-aware playback state for decoded animations.

The controller owns no clock: a host calls ``process_time_advance`` (or
``seek_relative`` when scrubbing) once per rendering tick and then queries the
current frame. Two consume-once dirty flags tell the host whether colors
and/or geometry need refreshing.

Time wrapping is asymmetric. Negative times are normalized when written;
positive overflow is left in the stored value and removed when read, so the
per-tick forward advance never takes the normalization branch.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Optional, Sequence

from tree_lights.animation import AnimationSet, Frame
from tree_lights.coordinates import Coordinate
from tree_lights.mapping import CoordinateMapping

logger = logging.getLogger(__name__)

MIN_DURATION = 1e-9
# Absorbs float error in time / frame_duration so exact frame starts never
# land on the previous frame.
FRAME_INDEX_EPSILON = 1e-9


@dataclass(frozen=True)
class PlaybackOptions:
    """Session defaults; ``reset_playback`` falls back to these."""

    start_playing: bool = False
    start_time: float = 0.0
    initial_playback_rate: float = 1.0
    base_frame_rate: float = 60.0

    def __post_init__(self) -> None:
        if not self.base_frame_rate > 0:
            raise ValueError("base_frame_rate must be positive.")


@dataclass(frozen=True)
class PlaybackState:
    current_time: float
    playback_rate: float
    base_frame_rate: float
    is_playing: bool
    dirty: bool
    dirty_geometry: bool


@dataclass(frozen=True)
class MappedPixel:
    """One lit pixel of the current frame joined with its position."""

    index: int
    position: Optional[Coordinate]
    color: Any


class PlaybackController:
    """Maps continuous elapsed time onto a wrapped animation frame index."""

    def __init__(self, options: PlaybackOptions | None = None) -> None:
        self.options = options or PlaybackOptions()
        self.base_frame_rate = self.options.base_frame_rate
        self.playback_rate = self.options.initial_playback_rate
        self.is_playing = self.options.start_playing
        self.animation_frames: AnimationSet = ()
        self.coordinate_mapping: CoordinateMapping | None = None
        self._current_time = 0.0
        self.current_time = self.options.start_time
        self.dirty = True
        self.dirty_geometry = True

    # --- Derived timing ---
    @property
    def frame_count(self) -> int:
        return len(self.animation_frames)

    @property
    def frame_duration(self) -> float:
        return 1 / self.base_frame_rate

    @property
    def duration(self) -> float:
        return max(MIN_DURATION, self.frame_count * self.frame_duration)

    # --- Time ---
    @property
    def current_time(self) -> float:
        return math.fmod(self._current_time, self.duration)

    @current_time.setter
    def current_time(self, value: float) -> None:
        if value < 0:
            duration = self.duration
            value = math.fmod(value, duration)
            value += duration
        self._current_time = value
        self.dirty = True

    @property
    def current_frame_index(self) -> int:
        """Index of the frame shown at ``current_time``.

        Raises ZeroDivisionError when no frames are loaded; callers must check
        ``frame_count`` first.
        """
        if self.frame_count == 0:
            raise ZeroDivisionError("No animation frames loaded")
        position = self.current_time / self.frame_duration + FRAME_INDEX_EPSILON
        return math.floor(position) % self.frame_count

    @property
    def current_progress(self) -> float:
        # Quantized to whole frames, not current_time / duration.
        return self.current_frame_index / self.frame_count

    @current_progress.setter
    def current_progress(self, progress: float) -> None:
        frame = math.floor(progress * self.frame_count + FRAME_INDEX_EPSILON)
        self.current_time = frame * self.frame_duration

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            current_time=self.current_time,
            playback_rate=self.playback_rate,
            base_frame_rate=self.base_frame_rate,
            is_playing=self.is_playing,
            dirty=self.dirty,
            dirty_geometry=self.dirty_geometry,
        )

    # --- Frame queries ---
    def current_frame(self) -> Frame:
        return self.animation_frames[self.current_frame_index]

    def get_current_frame_mapped(self) -> tuple[MappedPixel, ...]:
        """Pair every set pixel of the current frame with its coordinate.

        Unset (sparse) pixel slots are skipped rather than reported as a
        color. Positions are None when out of range or when no coordinate
        mapping is loaded.
        """
        frame = self.current_frame()
        mapping = self.coordinate_mapping
        return tuple(
            MappedPixel(
                index=idx,
                position=mapping.coordinate_at(idx) if mapping is not None else None,
                color=color,
            )
            for idx, color in enumerate(frame)
            if color is not None
        )

    # --- Data and resets ---
    def set_data(
        self,
        *,
        animation_frames: Sequence[Frame] | None = None,
        coordinate_mapping: CoordinateMapping | None = None,
    ) -> None:
        if animation_frames is not None:
            self.animation_frames = tuple(animation_frames)
        if coordinate_mapping is not None:
            self.coordinate_mapping = coordinate_mapping
            self.dirty_geometry = True
        self.current_time = 0
        logger.debug(
            "Playback data set: frames=%d points=%d",
            self.frame_count,
            len(self.coordinate_mapping) if self.coordinate_mapping else 0,
        )

    def reset_playback(
        self,
        *,
        start_playing: bool | None = None,
        playback_rate: float | None = None,
        base_frame_rate: float | None = None,
        start_time: float = 0.0,
    ) -> None:
        """Return to session defaults, overriding only the options given."""
        if base_frame_rate is not None and not base_frame_rate > 0:
            raise ValueError("base_frame_rate must be positive.")
        opts = self.options
        self.is_playing = opts.start_playing if start_playing is None else start_playing
        self.playback_rate = (
            opts.initial_playback_rate if playback_rate is None else playback_rate
        )
        self.base_frame_rate = (
            opts.base_frame_rate if base_frame_rate is None else base_frame_rate
        )
        self.current_time = start_time
        logger.debug(
            "Playback reset: playing=%s rate=%s fps=%s start=%s",
            self.is_playing,
            self.playback_rate,
            self.base_frame_rate,
            start_time,
        )

    # --- Ticks and transport ---
    def process_time_advance(self, delta_time: float) -> None:
        if self.is_playing:
            self.seek_relative(delta_time * self.playback_rate)

    def seek_relative(self, delta_time: float) -> None:
        self.current_time = self.current_time + delta_time

    def set_playback_rate(self, rate: float = 1.0) -> None:
        if self.playback_rate != rate:
            self.playback_rate = rate

    def play(self) -> None:
        self.is_playing = True

    def pause(self) -> None:
        self.is_playing = False

    def toggle_playing(self) -> bool:
        self.is_playing = not self.is_playing
        logger.debug("Playback %s", "playing" if self.is_playing else "paused")
        return self.is_playing

    # --- Dirty flags ---
    def clear_dirty(self) -> bool:
        ret = self.dirty
        self.dirty = False
        return ret

    def clear_geometry_dirty(self) -> bool:
        ret = self.dirty_geometry
        self.dirty_geometry = False
        return ret
