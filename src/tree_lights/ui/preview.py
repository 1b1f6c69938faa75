"""Textual terminal preview for a loaded light animation."""

from __future__ import annotations

import logging
from typing import Optional

try:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Static
    from rich.text import Text
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the preview. Install the 'textual' dependency."
    ) from exc

from tree_lights.logging_setup import set_console_level
from tree_lights.playback import PlaybackController
from tree_lights.ui.frame_player import FramePlayer
from tree_lights.ui.frame_rendering import (
    Layout,
    build_layout,
    render_frame,
    status_line,
)

logger = logging.getLogger(__name__)

SEEK_SECONDS = 1.0
RATE_STEP = 0.25


class LightsPreviewApp(App):
    """Draws the current frame of a PlaybackController every tick."""

    TITLE = "Tree Lights"
    CSS = """
    #lights {
        height: 1fr;
    }
    #status {
        height: 1;
    }
    #message {
        height: 1;
        color: $warning;
    }
    """

    BINDINGS = [
        Binding("space", "toggle_playing", "Play/Pause"),
        Binding("left", "seek_back", "Seek -1s"),
        Binding("right", "seek_forward", "Seek +1s"),
        Binding("comma", "step_back", "Frame -1"),
        Binding("full_stop", "step_forward", "Frame +1"),
        Binding("left_square_bracket", "speed_down", "Speed -0.25x"),
        Binding("right_square_bracket", "speed_up", "Speed +0.25x"),
        Binding("backslash", "speed_reset", "Speed 1.00x"),
        Binding("r", "reset_playback", "Reset"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, controller: PlaybackController, *, refresh_fps: float = 30.0):
        super().__init__()
        self.controller = controller
        self.refresh_fps = refresh_fps
        self.frame_player = FramePlayer(self, controller)
        self.last_frame_text: Optional[Text] = None
        self.message: str = ""
        self._layout: Layout = ()
        self._layout_size: Optional[tuple[int, int]] = None

    def compose(self) -> ComposeResult:
        yield Static(id="lights")
        yield Static("", id="status", markup=False)
        yield Static("", id="message", markup=False)

    def on_mount(self) -> None:
        self.frame_player.start(self.refresh_fps)

    def on_unmount(self) -> None:
        self.frame_player.stop()

    def on_resize(self) -> None:
        self._layout_size = None

    # --- Rendering ---
    def _lights_size(self) -> tuple[int, int]:
        size = self.query_one("#lights", Static).size
        return (max(1, size.width), max(1, size.height))

    def _show_frame(self, force: bool = False) -> None:
        controller = self.controller
        size = self._lights_size()
        geometry_changed = controller.clear_geometry_dirty()
        if geometry_changed or self._layout_size != size:
            mapping = controller.coordinate_mapping
            coords = mapping.all_coordinates() if mapping is not None else ()
            self._layout = build_layout(coords, *size)
            self._layout_size = size
            force = True
        time_changed = controller.clear_dirty()
        if not (force or time_changed):
            return
        lights = self.query_one("#lights", Static)
        if controller.frame_count == 0:
            frame_index = None
            self.last_frame_text = Text("No animation frames loaded")
        else:
            frame_index = controller.current_frame_index
            self.last_frame_text = render_frame(
                controller.get_current_frame_mapped(), self._layout, *size
            )
        lights.update(self.last_frame_text)
        self.query_one("#status", Static).update(
            status_line(controller.state, frame_index, controller.frame_count)
        )

    def _set_message(self, message: str, level: str = "info") -> None:
        self.message = message
        self.query_one("#message", Static).update(message)
        if level == "error":
            logger.error("%s", message)

    def _apply_playback_rate(self, rate: float) -> None:
        self.controller.set_playback_rate(round(rate, 2))
        self._set_message(f"Speed {self.controller.playback_rate:+.2f}x")
        self._show_frame(force=True)

    # --- Actions (Textual) ---
    def action_toggle_playing(self) -> None:
        playing = self.controller.toggle_playing()
        self._set_message("Playing" if playing else "Paused")
        self._show_frame(force=True)

    def action_seek_back(self) -> None:
        self.controller.seek_relative(-SEEK_SECONDS)
        self._show_frame()

    def action_seek_forward(self) -> None:
        self.controller.seek_relative(SEEK_SECONDS)
        self._show_frame()

    def action_step_back(self) -> None:
        self.controller.seek_relative(-self.controller.frame_duration)
        self._show_frame()

    def action_step_forward(self) -> None:
        self.controller.seek_relative(self.controller.frame_duration)
        self._show_frame()

    def action_speed_down(self) -> None:
        self._apply_playback_rate(self.controller.playback_rate - RATE_STEP)

    def action_speed_up(self) -> None:
        self._apply_playback_rate(self.controller.playback_rate + RATE_STEP)

    def action_speed_reset(self) -> None:
        self._apply_playback_rate(1.0)

    def action_reset_playback(self) -> None:
        self.controller.reset_playback()
        self._set_message("Reset")
        self._show_frame(force=True)


def run_preview(controller: PlaybackController, *, refresh_fps: float = 30.0) -> int:
    """Run the preview and return an exit code."""
    logger.info(
        "Preview start frames=%d refresh_fps=%s", controller.frame_count, refresh_fps
    )
    try:
        set_console_level(logging.WARNING)
    except Exception:
        logger.exception("Failed to set console log level for preview")
    app = LightsPreviewApp(controller, refresh_fps=refresh_fps)
    app.run()
    logger.info("Preview exit")
    return 0
