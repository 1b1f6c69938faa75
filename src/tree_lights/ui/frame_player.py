"""Tick driver that advances a playback controller on a Textual timer."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

from textual.timer import Timer

from tree_lights.playback import PlaybackController

logger = logging.getLogger(__name__)


class PlayerHost(Protocol):
    def set_timer(self, delay: float, callback: Callable[[], None]) -> Timer: ...

    def _show_frame(self) -> None: ...

    def _set_message(self, message: str, level: str = "info") -> None: ...


class FramePlayer:
    """Non-blocking clock for the preview: one controller tick per timer."""

    def __init__(
        self,
        app: PlayerHost,
        controller: PlaybackController,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._app = app
        self._controller = controller
        self._clock = clock
        self._timer: Optional[Timer] = None
        self._interval = 1 / 30
        self._last_tick: Optional[float] = None

    def start(self, refresh_fps: float = 30.0) -> None:
        self.stop()
        self._interval = 1.0 / max(1.0, refresh_fps)
        self._last_tick = self._clock()
        self._app._show_frame()
        self._schedule_next()

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self._last_tick = None

    @property
    def is_running(self) -> bool:
        return self._last_tick is not None

    def _advance(self) -> None:
        if self._last_tick is None:
            return
        now = self._clock()
        delta = now - self._last_tick
        self._last_tick = now
        try:
            self._controller.process_time_advance(delta)
            self._app._show_frame()
        except Exception as exc:
            logger.exception("Preview frame error")
            self._app._set_message(f"Preview error: {exc}", level="error")
            self.stop()
            return
        self._schedule_next()

    def _schedule_next(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.stop()
            return
        self._timer = self._app.set_timer(self._interval, self._advance)
