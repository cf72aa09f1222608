"""
Drawing parameters for the single line diagram, and loading them from YAML.

Every spacing value is in SVG user units (pixels). A YAML file only needs
the keys it changes.
"""

# Standard library imports
import logging
import math
from dataclasses import dataclass, fields, replace
from enum import Enum

# Third-party imports
import yaml

logger = logging.getLogger(__name__)

# --- Constants ---
CANVAS_MIN_WIDTH = 1200
CANVAS_MIN_HEIGHT = 800
MARGIN = 50
COMPONENT_SPACING = 120
FONT_SIZE = 12
LINE_THICKNESS = 2


class ConfigError(ValueError):
    """Raised when drawing parameters are unknown or out of range."""


class LayoutStyle(Enum):
    DAISY = "daisy"
    GRID = "grid"


@dataclass(frozen=True)
class LayoutConfig:
    margin: float = MARGIN
    component_spacing: float = COMPONENT_SPACING
    canvas_min_width: float = CANVAS_MIN_WIDTH
    canvas_min_height: float = CANVAS_MIN_HEIGHT
    canvas_padding_x: float = 80
    canvas_padding_y: float = 120  # room for the legend
    title_space: float = 60

    # daisy-chain layout
    string_spacing: float = 70
    isolator_spacing: float = 60
    inverter_spacing: float = 150
    min_block_height: float = 140
    panel_spacing: float = 80

    # grid layout
    grid_columns: int = 4
    grid_row_offset: float = 80
    grid_row_spacing: float = 90
    grid_column_spacing: float = 110
    grid_isolator_spacing: float = 120
    busbar_column_gap: float = 200
    busbar_padding: float = 60

    font_size: float = FONT_SIZE
    line_thickness: float = LINE_THICKNESS
    layout_style: LayoutStyle = LayoutStyle.DAISY

    def validate(self) -> "LayoutConfig":
        """Check every numeric parameter is finite and positive; returns self."""
        for f in fields(self):
            if f.name == "layout_style":
                if not isinstance(self.layout_style, LayoutStyle):
                    raise ConfigError(
                        f"layout_style must be a LayoutStyle, got {self.layout_style!r}"
                    )
                continue
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{f.name} must be finite, got {value!r}")
            if value <= 0:
                raise ConfigError(f"{f.name} must be positive, got {value!r}")
        if not isinstance(self.grid_columns, int):
            raise ConfigError(
                f"grid_columns must be an integer, got {self.grid_columns!r}"
            )
        return self

    def with_overrides(self, **overrides) -> "LayoutConfig":
        """Return a copy with the given fields replaced. None values are skipped."""
        changes = {}
        for key, value in overrides.items():
            if value is None:
                continue
            changes[key] = _coerce_field(key, value)
        return replace(self, **changes).validate()


def _coerce_field(key: str, value):
    known = {f.name for f in fields(LayoutConfig)}
    if key not in known:
        raise ConfigError(f"Unknown drawing parameter '{key}'")
    if key == "layout_style" and not isinstance(value, LayoutStyle):
        try:
            return LayoutStyle(value)
        except ValueError:
            choices = ", ".join(style.value for style in LayoutStyle)
            raise ConfigError(
                f"Unknown layout style '{value}' (expected one of: {choices})"
            ) from None
    return value


def config_from_dict(data: dict) -> LayoutConfig:
    """Build a LayoutConfig from a mapping of field names to values."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Drawing parameters must be a mapping, got {type(data).__name__}"
        )
    for key in data:
        if not isinstance(key, str):
            raise ConfigError(f"Drawing parameter names must be strings, got {key!r}")
    return LayoutConfig().with_overrides(**data)


def load_config(filename) -> LayoutConfig:
    """Load drawing parameters from a YAML file."""
    with open(filename, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    config = config_from_dict(data)
    logger.debug("Loaded drawing parameters from %s: %s", filename, config)
    return config
