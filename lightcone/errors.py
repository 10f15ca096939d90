#!/usr/bin/env python3
"""
Exceptions raised by the light-cone tool.

The functional physics layer returns degenerate values instead of raising;
these are for validation at API boundaries and for infeasible trajectories.
"""


class LightConeError(Exception):
    """Base class for light-cone errors."""


class PhysicsValidationError(LightConeError, ValueError):
    """A numeric argument is not finite or is outside the physical domain."""


class PositionValidationError(PhysicsValidationError):
    """Spacetime coordinates of a frame are invalid."""


class SourceFrameValidationError(LightConeError, ValueError):
    """A source frame does not exist or cannot causally reach the target."""


class TrajectoryError(LightConeError, ValueError):
    """A requested trajectory is geometrically impossible."""
