#!/usr/bin/env python3
"""
Special-relativity light-cone diagram editor.

Reference frames are points in (x, t) reached by uniformly accelerated
observers, each departing from a parent frame inside whose future light cone
it lies. The physics modules compute cumulative velocity and proper time
along these causal chains.
"""
from .errors import (
    LightConeError,
    PhysicsValidationError,
    PositionValidationError,
    SourceFrameValidationError,
    TrajectoryError,
)
from .frames import FrameDiagram, ReferenceFrame

__all__ = [
    "FrameDiagram",
    "ReferenceFrame",
    "LightConeError",
    "PhysicsValidationError",
    "PositionValidationError",
    "SourceFrameValidationError",
    "TrajectoryError",
]
