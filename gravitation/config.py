#!/usr/bin/env python3
"""
Configuration objects for the gravity sandbox.

GravityConfig holds the world and physics parameters shared by every manager.
GeodesicSettings holds the tuning knobs of the geodesic tracer; the UI writes
them directly and the tracer reads them as plain numbers.
"""
import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

from .constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    G,
    GRID_SPACING,
    MAX_SPEED,
    MAX_VERSIONS,
    PROPAGATION_RATE,
    SPEED_OF_LIGHT,
)
from .utils import try_float


@dataclass
class GravityConfig:
    """World geometry and physical parameters."""
    spacing: int = GRID_SPACING
    canvas_width: int = CANVAS_WIDTH
    canvas_height: int = CANVAS_HEIGHT
    G: float = G
    c: float = SPEED_OF_LIGHT
    max_speed: float = MAX_SPEED
    max_versions: int = MAX_VERSIONS
    propagation_rate: float = PROPAGATION_RATE  # grid units per second

    @property
    def grid_width(self) -> int:
        return math.ceil(self.canvas_width / self.spacing)

    @property
    def grid_height(self) -> int:
        return math.ceil(self.canvas_height / self.spacing)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.canvas_width, self.canvas_height)

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x <= self.canvas_width and 0 <= y <= self.canvas_height


@dataclass
class GeodesicSettings:
    """Parameters of the level-curve tracer."""
    curve_step: float = 10.0  # px advanced per step
    max_steps: int = 10000
    min_gradient_threshold: float = 0.001  # below this no geodesic is created
    stop_gradient_threshold: float = 0.001  # tracing stops below this
    min_points: int = 3
    min_distance_between_points: float = 2.0
    max_angle: float = 400.0  # degrees of signed turning before stopping
    bounding_box_multiplier: float = 3.0
    thickness_amplification: float = 1.0  # scales drawn line width

    def update(self, **values: Any) -> None:
        """Set known fields from loosely typed values, ignoring unparsable ones."""
        for f in fields(self):
            if f.name not in values:
                continue
            val = try_float(values[f.name])
            if val is None:
                continue
            if f.type in (int, "int"):
                val = int(val)
            setattr(self, f.name, val)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeodesicSettings":
        settings = cls()
        settings.update(**(data or {}))
        return settings
