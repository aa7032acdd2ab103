"""Render configuration objects, file loading and validation."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .geometry import Point, Size, Window

MAX_LIMIT = 10_000
SUPPORTED_COLOR_COMPONENTS = (3,)

Color = Tuple[float, ...]


@dataclass(frozen=True)
class RenderConfig:
    """Everything needed to render one image of the field."""

    ppu: int  # pixels per window unit
    limit: int
    color_steps: float
    color_components: int
    color_palette: Tuple[Color, ...]
    window: Window
    workers: Optional[int] = None

    @property
    def image_size(self) -> Size:
        return Size(self.ppu * self.window.width, self.ppu * self.window.height)

    @property
    def run_name(self) -> str:
        """Generate a run name embedding the main parameters."""
        size = self.image_size
        return f"ppu{self.ppu}_limit{self.limit}_{size.grid_width}x{size.grid_height}"

    def to_dict(self) -> dict:
        """Flat parameters for MLflow logging."""
        data = asdict(self)
        data.pop("window")
        data["color_palette"] = [list(color) for color in self.color_palette]
        data.update(
            window_x=self.window.origin.x,
            window_y=self.window.origin.y,
            window_width=self.window.width,
            window_height=self.window.height,
        )
        return data


DEFAULT_RENDER_CONFIG = RenderConfig(
    ppu=100,
    limit=200,
    color_steps=64.0,
    color_components=3,
    color_palette=(
        (0.0, 7.0, 100.0),
        (32.0, 107.0, 203.0),
        (237.0, 255.0, 255.0),
        (255.0, 170.0, 0.0),
        (0.0, 2.0, 0.0),
    ),
    window=Window(Point(-2.5, -1.25), Size(3.5, 2.5)),
)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def load_config(path: str | Path) -> RenderConfig:
    """Load a render config from a JSON or YAML file.

    Files ending in ``.json`` are decoded with ``json``, anything else with
    the YAML loader. Both are read as UTF-8.
    """
    loader = json.load if Path(path).suffix.lower() == ".json" else yaml.safe_load
    try:
        with open(path, encoding="utf-8") as f:
            raw = loader(f)
    except OSError as exc:
        raise ConfigurationError(f"Could not read config file at {path}: {exc}") from exc
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Error parsing config file at {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file at {path} must contain a mapping")
    return build_render_config(raw)


def build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    required = ("ppu", "limit", "color_steps", "color_components", "color_palette", "window")
    missing = [key for key in required if key not in raw_data]
    if missing:
        raise ConfigurationError(f"Config is missing keys: {', '.join(missing)}")
    unknown = set(raw_data) - set(required) - {"workers"}
    if unknown:
        raise ConfigurationError(f"Config has unknown keys: {', '.join(sorted(unknown))}")
    return RenderConfig(**_coerce_fields(raw_data))  # type: ignore[arg-type]


def validate_config(config: RenderConfig) -> None:
    """Raise ``ConfigurationError`` if ``config`` cannot be rendered."""
    if config.limit > MAX_LIMIT:
        raise ConfigurationError(f"limit is over {MAX_LIMIT:,}")
    if config.limit < 1:
        raise ConfigurationError(f"limit must be positive, got {config.limit}")

    if config.color_components not in SUPPORTED_COLOR_COMPONENTS:
        raise ConfigurationError(
            f"Unsupported color component count {config.color_components}"
        )
    if not config.color_palette:
        raise ConfigurationError("color_palette must contain at least one color")
    for color in config.color_palette:
        if len(color) != config.color_components:
            raise ConfigurationError(
                f"Color {list(color)} does not match color component count"
            )

    if not (config.color_steps > 0 and math.isfinite(config.color_steps)):
        raise ConfigurationError(f"color_steps must be positive, got {config.color_steps}")
    if config.ppu < 1:
        raise ConfigurationError(f"ppu must be positive, got {config.ppu}")
    if config.workers is not None and config.workers < 1:
        raise ConfigurationError(f"workers must be positive, got {config.workers}")

    window = config.window
    if not window.is_finite():
        raise ConfigurationError(f"window must be finite, got {window}")
    if window.width <= 0 or window.height <= 0:
        raise ConfigurationError(
            f"window size must be positive, got {window.width}x{window.height}"
        )


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    try:
        for key in ("ppu", "limit", "color_components"):
            if key in result:
                result[key] = int(result[key])  # type: ignore[arg-type]
        if "color_steps" in result:
            result["color_steps"] = float(result["color_steps"])  # type: ignore[arg-type]
        if result.get("workers") is not None:
            result["workers"] = int(result["workers"])  # type: ignore[arg-type]
        if "color_palette" in result:
            result["color_palette"] = tuple(
                tuple(float(c) for c in color)  # type: ignore[union-attr]
                for color in result["color_palette"]  # type: ignore[union-attr]
            )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config value: {exc}") from exc
    if "window" in result:
        result["window"] = _normalize_window(result["window"])
    return result


def _normalize_window(entry: object) -> Window:
    if isinstance(entry, Window):
        return entry
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Unsupported window specification: {entry!r}")
    origin = entry.get("origin")
    size = entry.get("size")
    if origin is None or size is None:
        raise ConfigurationError("window must include 'origin' and 'size'")
    x, y = _normalize_pair(origin, ("x", "y"))
    width, height = _normalize_pair(size, ("width", "height"))
    return Window(Point(x, y), Size(width, height))


def _normalize_pair(entry: object, names: Tuple[str, str]) -> Tuple[float, float]:
    if isinstance(entry, dict):
        pair = entry.get(names[0]), entry.get(names[1])
        if pair[0] is None or pair[1] is None:
            raise ConfigurationError(f"expected keys {names[0]!r} and {names[1]!r}, got {entry!r}")
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        pair = entry[0], entry[1]
    else:
        raise ConfigurationError(f"Unsupported {'/'.join(names)} specification: {entry!r}")
    try:
        return float(pair[0]), float(pair[1])
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid window value {entry!r}: {exc}") from exc
