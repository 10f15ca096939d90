#!/usr/bin/env python3
"""
Relativity engine: constant proper acceleration between spacetime events.

A segment goes from a source event to a target event separated by (X, T). The
observer starts at rest relative to the source frame and accelerates uniformly
so as to arrive at the target. For such hyperbolic motion

    a = 2|X| c^2 / (T^2 - X^2)
    v = a T / sqrt(1 + (a T / c)^2)
    tau = (c / a) asinh(a T / c)

Chains of segments are composed with relativistic velocity addition; proper
times simply add because each is local to its own segment.

Numerical edge cases never raise here. Unreachable targets produce a zero
acceleration, velocities are clamped just below c, and tiny accelerations
are treated as inertial motion.
"""
import math
from dataclasses import dataclass
from typing import List, Sequence

from .constants import (
    ACCELERATION_PRECISION,
    LIGHT_LIKE_DENOMINATOR,
    MAX_VELOCITY,
    MIN_TIME_STEP,
    SAFETY_MARGIN,
    SPEED_OF_LIGHT,
)
from .errors import SourceFrameValidationError


@dataclass(frozen=True)
class SegmentPhysics:
    acceleration: float
    segment_velocity: float  # magnitude, direction comes from sign(X)
    segment_proper_time: float
    segment_coordinate_time: float


@dataclass(frozen=True)
class CumulativePhysics:
    cumulative_velocity: float
    cumulative_proper_time: float
    total_coordinate_time: float
    segment_velocity: float
    segment_acceleration: float
    segment_proper_time: float
    segment_coordinate_time: float


ORIGIN_PHYSICS = CumulativePhysics(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


def limit_velocity(v: float) -> float:
    """Clamp v to [-MAX_VELOCITY, MAX_VELOCITY]."""
    if abs(v) >= MAX_VELOCITY:
        return sign(v) * MAX_VELOCITY
    return v


def lorentz_factor(v: float) -> float:
    c = SPEED_OF_LIGHT
    if v * v >= c * c:
        return math.inf
    return 1.0 / math.sqrt(1.0 - (v * v) / (c * c))


def add_velocities_relativistic(v1: float, v2: float) -> float:
    """(v1 + v2) / (1 + v1 v2 / c^2), clamped below c."""
    c = SPEED_OF_LIGHT
    numerator = v1 + v2
    denominator = 1.0 + (v1 * v2) / (c * c)
    if abs(denominator) < 1e-10:
        return sign(numerator) * MAX_VELOCITY
    return limit_velocity(numerator / denominator)


def calculate_velocity_ratio(x: float, y: float, t: float) -> float:
    """
    Apparent speed of an event at (x, y, t) seen from the origin, capped at 1.

    heatmap.py evaluates the same ratio over whole pixel grids with numpy.
    """
    if t <= 0:
        return 0.0
    return min(1.0, math.hypot(x, y) / t)


def is_inside_light_cone(dx: float, dt: float, margin: float = 0.0) -> bool:
    if dt <= 0:
        return False
    return abs(dx) <= SPEED_OF_LIGHT * dt * (1 - margin)


def is_reachable_from_source(target_x: float, target_t: float, source) -> bool:
    """True if (target_x, target_t) lies in the closed future light cone of `source`."""
    dt = target_t - source.t
    return dt > 0 and abs(target_x - source.x) <= dt * SPEED_OF_LIGHT


def calculate_proper_acceleration(dx: float, dt: float) -> float:
    """
    Proper acceleration needed to cover dx in coordinate time dt from rest.

    Returns 0 when the target is outside the future light cone. On the light
    cone itself the denominator is floored so the result stays finite.
    """
    c = SPEED_OF_LIGHT
    if dt <= 0 or abs(dx) > dt * c:
        return 0.0
    denominator = max(dt * dt - dx * dx, LIGHT_LIKE_DENOMINATOR)
    return (2.0 * abs(dx) * c * c) / denominator


def calculate_final_velocity(acceleration: float, dt: float) -> float:
    c = SPEED_OF_LIGHT
    if abs(acceleration) < ACCELERATION_PRECISION:
        return 0.0
    at = acceleration * dt
    return limit_velocity(at / math.sqrt(1.0 + (at / c) ** 2))


def calculate_proper_time(acceleration: float, dt: float) -> float:
    c = SPEED_OF_LIGHT
    if abs(acceleration) < ACCELERATION_PRECISION:
        return dt
    return (c / acceleration) * math.asinh(acceleration * dt / c)


def calculate_hyperbolic_position(acceleration: float, initial_velocity: float, time: float,
                                  initial_position: float = 0.0) -> float:
    """
    Position after `time` under constant proper acceleration.

    A non-zero initial velocity is handled by adding the inertial drift to the
    from-rest displacement scaled by 1/gamma0. This is an approximation, not an
    exact relativistic composition.
    """
    c = SPEED_OF_LIGHT
    if abs(acceleration) < ACCELERATION_PRECISION:
        return initial_position + initial_velocity * time
    at_over_c = acceleration * time / c
    from_rest = (c * c / acceleration) * (math.sqrt(1.0 + at_over_c * at_over_c) - 1.0)
    if abs(initial_velocity) < ACCELERATION_PRECISION:
        return initial_position + from_rest
    gamma0 = lorentz_factor(initial_velocity)
    return initial_position + initial_velocity * time + from_rest / gamma0


def calculate_segment_physics(dx: float, dt: float) -> SegmentPhysics:
    """
    Physics of one segment, with the degenerate branches of the frame chain:
    near or beyond the light cone (or dt <= 0) the segment is treated as
    inertial with tau = dt; with no spatial displacement it is at rest.
    """
    c = SPEED_OF_LIGHT
    if dt <= 0 or abs(dx) >= dt * c * (1 - SAFETY_MARGIN):
        return SegmentPhysics(0.0, 0.0, dt, dt)
    if abs(dx) < MIN_TIME_STEP:
        return SegmentPhysics(0.001, 0.0, dt, dt)
    a = 2.0 * abs(dx) * c * c / (dt * dt - dx * dx)
    at_over_c = a * dt / c
    v = limit_velocity((a * dt) / math.sqrt(1.0 + at_over_c * at_over_c))
    tau = (c / a) * math.asinh(at_over_c)
    return SegmentPhysics(a, v, tau, dt)


def frame_ancestry(cone_index: int, frames: Sequence) -> List[int]:
    """Indices from the root of the chain down to cone_index."""
    chain = []
    index = cone_index
    seen = set()
    while index != -1:
        if index in seen:
            raise SourceFrameValidationError(f"Cycle in frame chain at index {index}")
        seen.add(index)
        chain.append(index)
        index = frames[index].source_index
    chain.reverse()
    return chain


def calculate_cumulative_physics(cone_index: int, frames: Sequence) -> CumulativePhysics:
    """
    Cumulative velocity and proper time at frame `cone_index`.

    Walks up the source chain to the root, then folds the segments forward.
    The root frame (source_index == -1) has all-zero physics.
    """
    chain = frame_ancestry(cone_index, frames)
    result = ORIGIN_PHYSICS
    for parent, child in zip(chain, chain[1:]):
        source = frames[parent]
        cone = frames[child]
        dx = cone.x - source.x
        dt = cone.t - source.t
        seg = calculate_segment_physics(dx, dt)
        velocity = add_velocities_relativistic(result.cumulative_velocity, sign(dx) * seg.segment_velocity)
        result = CumulativePhysics(
            cumulative_velocity=velocity,
            cumulative_proper_time=result.cumulative_proper_time + seg.segment_proper_time,
            total_coordinate_time=result.total_coordinate_time + seg.segment_coordinate_time,
            segment_velocity=seg.segment_velocity,
            segment_acceleration=seg.acceleration,
            segment_proper_time=seg.segment_proper_time,
            segment_coordinate_time=seg.segment_coordinate_time,
        )
    return result
