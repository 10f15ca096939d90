#!/usr/bin/env python3
"""
Data models for the light-cone tool.

Units and usage
- x is a spatial coordinate and t a coordinate time, both in units where c = 1.
- ReferenceFrame.source_index points at the parent frame in the owning list
  (-1 for the origin). The cumulative_* fields are a cache refreshed by
  FrameDiagram after every edit; the physics is always recomputable from
  positions alone.
"""
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple


class SpacetimePoint(NamedTuple):
    x: float
    t: float


@dataclass
class ReferenceFrame:
    """An event reached by an accelerated observer departing from its source frame."""
    x: float
    t: float
    source_index: int = -1
    cumulative_velocity: float = 0.0
    cumulative_proper_time: float = 0.0
    total_coordinate_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "t": self.t,
            "sourceIndex": self.source_index,
            "cumulativeVelocity": self.cumulative_velocity,
            "cumulativeProperTime": self.cumulative_proper_time,
            "totalCoordinateTime": self.total_coordinate_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReferenceFrame":
        return cls(
            x=float(data["x"]),
            t=float(data["t"]),
            source_index=int(data.get("sourceIndex", -1)),
            cumulative_velocity=float(data.get("cumulativeVelocity", 0.0)),
            cumulative_proper_time=float(data.get("cumulativeProperTime", 0.0)),
            total_coordinate_time=float(data.get("totalCoordinateTime", 0.0)),
        )
