#!/usr/bin/env python3
"""
Data models for the gravity sandbox.

Units and usage
- Positions are canvas pixels, velocities px/s, times seconds of simulation time.
- Mass is the live, mutable source object; MassSnapshot and VersionEntry are
  frozen copies stored in the version history and never change once created.
- Trails are bounded deques mutated by the simulation thread.
- Access to all of these is coordinated by SimulationController using a lock.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Tuple

from .constants import LASER_TRAIL_LENGTH, SPACECRAFT_MASS, SPACECRAFT_TRAIL_LENGTH

NORMAL = "normal"
BLACK_HOLE = "blackhole"
PLANET = "planet"


@dataclass
class Mass:
    """A gravitating point mass on a grid point."""
    x: float
    y: float
    mass: float
    type: str = NORMAL

    @property
    def is_black_hole(self) -> bool:
        return self.type == BLACK_HOLE


@dataclass(frozen=True)
class MassSnapshot:
    """Immutable copy of a Mass at the time a version was recorded."""
    x: float
    y: float
    mass: float
    type: str = NORMAL

    @property
    def is_black_hole(self) -> bool:
        return self.type == BLACK_HOLE


@dataclass(frozen=True)
class VersionEntry:
    """One entry of the mass history: the whole configuration after a change."""
    version: int
    type: str  # "creation" | "modification" | "deletion"
    x: float
    y: float
    mass_change: float
    masses: Tuple[MassSnapshot, ...]
    timestamp: float


@dataclass(frozen=True)
class VersionInfo:
    """Metadata returned to the caller that triggered a new version."""
    version: int
    x: float
    y: float
    type: str
    mass_change: float


@dataclass
class PropagationFront:
    """Expanding circle that carries a version outwards from its origin."""
    x: float
    y: float
    start_time: float  # simulation seconds
    spacing: float
    version: int
    type: str
    mass_change: float


@dataclass
class Spacecraft:
    x: float
    y: float
    vx: float
    vy: float
    mass: float = SPACECRAFT_MASS
    creation_time: float = 0.0
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=SPACECRAFT_TRAIL_LENGTH))

    def add_trail_point(self) -> None:
        self.trail.append((self.x, self.y))


@dataclass
class Laser:
    x: float
    y: float
    vx: float
    vy: float
    creation_time: float = 0.0
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=LASER_TRAIL_LENGTH))

    def add_trail_point(self) -> None:
        self.trail.append((self.x, self.y))


@dataclass
class Clock:
    """A clock ticking at the local gravitational time-dilation rate."""
    x: float
    y: float
    reference_time: float
    local_time: float
    selected: bool = False


@dataclass
class Geodesic:
    start_x: float
    start_y: float
    max_length: int
    points: List[Tuple[float, float]] = field(default_factory=list)
