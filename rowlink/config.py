"""
Runtime configuration.

Defaults live in ``DEFAULT_CONFIG``; ``$XDG_CONFIG_HOME/rowlink/config.json``
may override any subset of them.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from rowlink.clicker import ClickTimings

log = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, object] = {
    "screen_width": None,
    "screen_height": None,
    "grid_size": 26,
    "sub_rows": 3,
    "sub_cols": 8,
    "sub_padding": 4.0,
    "font_size": 11,
    "colors": {
        "grid_border": [255, 255, 255, 38],
        "main_text": [255, 204, 51, 255],
        "row_focus": [0, 255, 0, 76],
        "sub_home_row": [0, 255, 128, 255],
        "sub_default": [255, 255, 255, 204],
    },
    "timings": {
        "surface_destroy_ms": 60,
        "zero_ms": 5,
        "move_ms": 20,
        "clamp_offset": 10000,
    },
    "tap_activation": {
        "key": None,
        "threshold": 0.4,
    },
}

Color = Tuple[int, int, int, int]


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    screen_width: Optional[int]
    screen_height: Optional[int]
    grid_size: int
    sub_rows: int
    sub_cols: int
    sub_padding: float
    font_size: int
    colors: Dict[str, Color]
    timings: ClickTimings
    tap_key: Optional[str]
    tap_threshold: float


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "rowlink" / "config.json"


def load_settings(path: Optional[Path] = None) -> Settings:
    path = path or default_config_path()
    override = _load_raw_config(path)
    try:
        return normalize(_deep_merge(DEFAULT_CONFIG, override))
    except ConfigError as exc:
        log.warning("Ignoring overrides from %s: %s", path, exc)
        return normalize(_deep_merge(DEFAULT_CONFIG, {}))


def _load_raw_config(path: Path) -> Dict[str, object]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Could not read %s: %s. Using defaults.", path, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Top-level JSON in %s must be an object. Using defaults.", path)
        return {}
    return data


def _deep_merge(base: Dict[str, object], override: Dict[str, object]) -> Dict[str, object]:
    result: Dict[str, object] = {}
    for key, value in base.items():
        result[key] = _deep_merge(value, {}) if isinstance(value, dict) else value
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)  # type: ignore[arg-type]
        else:
            result[key] = value
    return result


def normalize(raw: Dict[str, object]) -> Settings:
    timings = _section(raw, "timings")
    tap = _section(raw, "tap_activation")
    colors = _section(raw, "colors")
    tap_key = tap.get("key")
    if tap_key is not None and not isinstance(tap_key, str):
        raise ConfigError("tap_activation.key must be a key name or null")
    try:
        return Settings(
            screen_width=_optional_int(raw.get("screen_width")),
            screen_height=_optional_int(raw.get("screen_height")),
            grid_size=_bounded_int(raw["grid_size"], "grid_size", 1, 26),
            sub_rows=_bounded_int(raw["sub_rows"], "sub_rows", 1, 3),
            sub_cols=_bounded_int(raw["sub_cols"], "sub_cols", 1, 8),
            sub_padding=_finite_float(raw["sub_padding"], "sub_padding"),
            font_size=int(raw["font_size"]),  # type: ignore[arg-type]
            colors={name: _to_color(value) for name, value in colors.items()},
            timings=ClickTimings(
                surface_destroy_ms=int(timings["surface_destroy_ms"]),  # type: ignore[arg-type]
                zero_ms=int(timings["zero_ms"]),  # type: ignore[arg-type]
                move_ms=int(timings["move_ms"]),  # type: ignore[arg-type]
                clamp_offset=int(timings["clamp_offset"]),  # type: ignore[arg-type]
            ),
            tap_key=tap_key or None,
            tap_threshold=_finite_float(tap["threshold"], "tap_activation.threshold"),
        )
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(str(exc)) from exc


def parse_screen_size(value: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError as exc:
        raise ConfigError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise ConfigError(f"Screen size must be positive, got {value!r}")
    return width, height


def _section(raw: Dict[str, object], name: str) -> Dict[str, object]:
    value = raw.get(name)
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be an object")
    return value


def _optional_int(value: object) -> Optional[int]:
    if value is None:
        return None
    number = int(value)  # type: ignore[call-overload]
    if number <= 0:
        raise ConfigError(f"Screen dimensions must be positive, got {number}")
    return number


def _finite_float(value: object, name: str) -> float:
    number = float(value)  # type: ignore[arg-type]
    if not math.isfinite(number):
        raise ConfigError(f"{name} must be a finite number, got {number}")
    return number


def _bounded_int(value: object, name: str, low: int, high: int) -> int:
    number = int(value)  # type: ignore[call-overload]
    if not low <= number <= high:
        raise ConfigError(f"{name} must be within {low}..{high}, got {number}")
    return number


def _to_color(value: object) -> Color:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigError(f"Colors are [r, g, b] or [r, g, b, a] lists, got {value!r}")
    components = [int(c) for c in value]
    if len(components) not in (3, 4):
        raise ConfigError(f"Color needs 3 or 4 components, got {components}")
    if len(components) == 3:
        components.append(255)
    r, g, b, a = components
    return r, g, b, a
