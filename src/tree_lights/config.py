"""User configuration for Tree Lights.

Only decoder and session defaults are stored here; playback position is never
persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

from tree_lights.animation import DEFAULT_MAX_PIXEL_INDEX, AnimationDecoderOptions
from tree_lights.coordinates import CsvCoordinateOptions
from tree_lights.playback import PlaybackOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    base_frame_rate: float = 60.0
    playback_rate: float = 1.0
    start_playing: bool = True
    refresh_fps: int = 30
    coords_skip_rows: int = 0
    xyz_columns: tuple[int, int, int] = (0, 1, 2)
    validation_max_columns: int = 10
    animation_skip_rows: int = 0
    components: tuple[str, ...] = ("r", "g", "b")
    output_hex_colors: bool = False
    max_pixel_index: int = DEFAULT_MAX_PIXEL_INDEX


def get_config_dir(app_name: str = "tree-lights") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "base_frame_rate": cfg.base_frame_rate,
        "playback_rate": cfg.playback_rate,
        "start_playing": cfg.start_playing,
        "refresh_fps": cfg.refresh_fps,
        "coords_skip_rows": cfg.coords_skip_rows,
        "xyz_columns": list(cfg.xyz_columns),
        "validation_max_columns": cfg.validation_max_columns,
        "animation_skip_rows": cfg.animation_skip_rows,
        "components": list(cfg.components),
        "output_hex_colors": cfg.output_hex_colors,
        "max_pixel_index": cfg.max_pixel_index,
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def coordinate_options(cfg: AppConfig) -> CsvCoordinateOptions:
    return CsvCoordinateOptions(
        xyz_columns=cfg.xyz_columns,
        skip_row_count=cfg.coords_skip_rows,
        validation_max_columns=cfg.validation_max_columns,
    )


def animation_options(cfg: AppConfig) -> AnimationDecoderOptions:
    return AnimationDecoderOptions(
        skip_row_count=cfg.animation_skip_rows,
        components=cfg.components,
        output_hex_colors=cfg.output_hex_colors,
        max_pixel_index=cfg.max_pixel_index,
    )


def playback_options(cfg: AppConfig) -> PlaybackOptions:
    return PlaybackOptions(
        start_playing=cfg.start_playing,
        initial_playback_rate=cfg.playback_rate,
        base_frame_rate=cfg.base_frame_rate,
    )


def _ensure_dir(path: Path) -> Path:
    """Create the directory if needed and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False  # pyright: ignore[reportAttributeAccessIssue]


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    """Fetch a boolean value with fallback for invalid types."""
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    return default


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_float(
    raw: dict[str, Any],
    key: str,
    default: float,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """Fetch a numeric value as float with optional clamping."""
    value = raw.get(key, default)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        value = default
    value = float(value)
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_columns(
    raw: dict[str, Any], key: str, default: tuple[int, int, int]
) -> tuple[int, int, int]:
    """Fetch exactly three non-negative column indices."""
    value = raw.get(key)
    if not isinstance(value, list) or len(value) != 3:
        return default
    if any(not isinstance(v, int) or isinstance(v, bool) or v < 0 for v in value):
        return default
    return (value[0], value[1], value[2])


def _get_components(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Fetch a non-empty list of unique component names."""
    value = raw.get(key)
    if not isinstance(value, list) or not value:
        return default
    if any(not isinstance(v, str) or not v for v in value):
        return default
    names = tuple(v.lower() for v in value)
    if len(set(names)) != len(names):
        return default
    return names


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    defaults = AppConfig()
    base_frame_rate = _get_float(
        raw, "base_frame_rate", defaults.base_frame_rate, min_value=0.1
    )
    return AppConfig(
        base_frame_rate=base_frame_rate,
        playback_rate=_get_float(
            raw,
            "playback_rate",
            defaults.playback_rate,
            min_value=-16.0,
            max_value=16.0,
        ),
        start_playing=_get_bool(raw, "start_playing", defaults.start_playing),
        refresh_fps=_get_int(
            raw, "refresh_fps", defaults.refresh_fps, min_value=1, max_value=120
        ),
        coords_skip_rows=_get_int(
            raw, "coords_skip_rows", defaults.coords_skip_rows, min_value=0
        ),
        xyz_columns=_get_columns(raw, "xyz_columns", defaults.xyz_columns),
        validation_max_columns=_get_int(
            raw, "validation_max_columns", defaults.validation_max_columns, min_value=1
        ),
        animation_skip_rows=_get_int(
            raw, "animation_skip_rows", defaults.animation_skip_rows, min_value=0
        ),
        components=_get_components(raw, "components", defaults.components),
        output_hex_colors=_get_bool(
            raw, "output_hex_colors", defaults.output_hex_colors
        ),
        max_pixel_index=_get_int(
            raw, "max_pixel_index", defaults.max_pixel_index, min_value=0
        ),
    )
