#!/usr/bin/env python3
"""
Display configuration of the light-cone diagram.

resolution selects the heat-map cell size (1 coarse .. 3 fine). green_limit and
red_limit are the velocities (fractions of c) where the heat-map colour ramp
reaches pure green and pure red.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict

from .constants import RESOLUTION_PIXEL_SIZES
from .utils import clamp, try_float


@dataclass
class DiagramConfig:
    resolution: int = 2
    green_limit: float = 0.5  # fraction of c
    red_limit: float = 1.0  # fraction of c
    show_past_cone: bool = False

    @property
    def pixel_size(self) -> int:
        return RESOLUTION_PIXEL_SIZES.get(self.resolution, RESOLUTION_PIXEL_SIZES[2])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "resolution": data["resolution"],
            "greenLimit": data["green_limit"],
            "redLimit": data["red_limit"],
            "showPastCone": data["show_past_cone"],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramConfig":
        """Lenient: unparsable or out-of-range values fall back to the defaults."""
        config = cls()
        data = data or {}
        resolution = try_float(data.get("resolution"))
        if resolution is not None and int(resolution) in RESOLUTION_PIXEL_SIZES:
            config.resolution = int(resolution)
        green = try_float(data.get("greenLimit"))
        if green is not None:
            config.green_limit = clamp(green, 0.0, 1.0)
        red = try_float(data.get("redLimit"))
        if red is not None:
            config.red_limit = clamp(red, 0.0, 1.0)
        if "showPastCone" in data:
            config.show_past_cone = bool(data["showPastCone"])
        return config
