#!/usr/bin/env python3
"""
Trajectories and isochrones.

Responsibilities
- Isochrones: curves of equal proper time since departure from an origin,
  sampled across the visible x range.
- Isochrone inversion: the coordinate time at which an accelerated observer
  reaching target_x has aged exactly `proper_time` (Newton-Raphson).
- Hyperbolic trajectories between two events, sampled in coordinate time.
- Cumulative analysis of a sequence of frames and the twin-paradox scenario.
- Drawn frame paths, via the rendezvous solver in rapidity.py so a frame
  departs with the velocity it inherited from its chain.

Numerical notes
- The inversion clamps dT to [1.001 |dx|, 1000 |dx|] so it stays strictly inside
  the light cone; after NEWTON_MAX_ITERATIONS it returns the best estimate found.
- Trajectory sampling raises TrajectoryError for impossible requests; the
  relativity helpers it builds on never raise.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .constants import (
    ISOCHRONE_MARGIN,
    ISOCHRONE_POINTS_COUNT,
    MIN_PROPER_TIME,
    NEWTON_EPSILON,
    NEWTON_MAX_ITERATIONS,
    NEWTON_TOLERANCE,
    SPEED_OF_LIGHT,
    TRAJECTORY_STEPS,
    VIEW_SCALE,
)
from .data_models import ReferenceFrame, SpacetimePoint
from .errors import LightConeError, TrajectoryError
from .rapidity import generate_rendezvous_trajectory
from .relativity import (
    add_velocities_relativistic,
    calculate_final_velocity,
    calculate_hyperbolic_position,
    calculate_proper_acceleration,
    calculate_proper_time,
    is_inside_light_cone,
    sign,
)

logger = logging.getLogger(__name__)


# ============================================================
# Isochrones
# ============================================================

def calculate_isochrone_points(tau: float, origin, selected_cone=None, canvas_width: float = 1100,
                               scale: float = VIEW_SCALE) -> List[SpacetimePoint]:
    """
    Sample t = origin.t + k * sqrt(tau^2 + dx^2 / c^2) across the visible x range.

    k calibrates the curve to pass through `selected_cone`; it is 1.0 when no
    cone is given or the cone is not in the future of `origin`.

    Args:
        tau: Proper time of the isochrone.
        origin: Departure event (.x, .t).
        selected_cone: Optional event (.x, .t) the curve must pass through.
        canvas_width: Visible width in pixels.
        scale: Pixels per spacetime unit.

    Returns:
        Points strictly in the future of the origin, ordered by x.
    """
    if tau < MIN_PROPER_TIME:
        return []
    c = SPEED_OF_LIGHT
    half_extent = (canvas_width / 2) / scale
    x_min = -half_extent - ISOCHRONE_MARGIN
    x_max = half_extent + ISOCHRONE_MARGIN
    if x_max <= x_min:
        return []
    step = max(1.0, (x_max - x_min) / ISOCHRONE_POINTS_COUNT)

    calibration = 1.0
    if selected_cone is not None:
        dx_sel = selected_cone.x - origin.x
        dt_sel = selected_cone.t - origin.t
        t_formula = math.sqrt(tau * tau + (dx_sel * dx_sel) / (c * c))
        if t_formula > 0 and dt_sel > 0:
            calibration = dt_sel / t_formula

    points: List[SpacetimePoint] = []
    count = int((x_max - x_min) / step)
    for i in range(count + 1):
        x = x_min + i * step
        dx = x - origin.x
        t = origin.t + calibration * math.sqrt(tau * tau + (dx * dx) / (c * c))
        if t > origin.t:
            points.append(SpacetimePoint(x, t))
    return points


def _proper_time_for(dx: float, dt: float) -> float:
    return calculate_proper_time(calculate_proper_acceleration(dx, dt), dt)


def calculate_coordinate_time_for_isochrone(origin_x: float, origin_t: float, target_x: float,
                                            proper_time: float) -> float:
    """
    Coordinate time at which an observer accelerating from (origin_x, origin_t)
    to target_x has experienced `proper_time`.

    Solved with Newton-Raphson on dT. Without convergence the estimate with
    the smallest error is returned; this is logged at debug level only.
    """
    dx = target_x - origin_x
    adx = abs(dx)
    if adx < 1e-10:
        return origin_t + proper_time

    delta_t = adx / 0.5
    best_dt, best_error = delta_t, math.inf
    for _ in range(NEWTON_MAX_ITERATIONS):
        if delta_t <= adx:
            delta_t = adx * 1.1
            continue
        acceleration = calculate_proper_acceleration(dx, delta_t)
        if acceleration == 0:
            delta_t *= 1.1
            continue
        current = calculate_proper_time(acceleration, delta_t)
        error = current - proper_time
        if abs(error) < best_error:
            best_dt, best_error = delta_t, abs(error)
        if abs(error) < NEWTON_TOLERANCE:
            return origin_t + delta_t

        derivative = (_proper_time_for(dx, delta_t + NEWTON_EPSILON) - current) / NEWTON_EPSILON
        if abs(derivative) > 1e-15:
            delta_t -= error / derivative
        else:
            delta_t *= 1.01
        delta_t = min(max(delta_t, adx * 1.001), adx * 1000)

    logger.debug("Isochrone inversion did not converge for dx=%.4g tau=%.4g (residual %.3g)",
                 dx, proper_time, best_error)
    return origin_t + best_dt


# ============================================================
# Hyperbolic trajectory
# ============================================================

@dataclass(frozen=True)
class HyperbolicPhysics:
    acceleration: float  # signed, along the direction of travel
    initial_velocity: float
    final_velocity: float  # signed
    proper_time: float
    coordinate_time: float


@dataclass(frozen=True)
class HyperbolicTrajectory:
    points: List[SpacetimePoint]
    physics: HyperbolicPhysics
    bounds: Dict[str, float]


def calculate_hyperbolic_trajectory(start_x: float, start_t: float, end_x: float, end_t: float,
                                    initial_velocity: float = 0.0, points: int = 100) -> HyperbolicTrajectory:
    """
    Sample points + 1 events along the constant-acceleration path between two events.

    Raises:
        TrajectoryError: if end_t <= start_t or the end event is outside the
            future light cone of the start event.
    """
    dx = end_x - start_x
    dt = end_t - start_t
    if dt <= 0:
        raise TrajectoryError("Arrival time must be after departure time")
    if not is_inside_light_cone(dx, dt):
        raise TrajectoryError("Trajectory must stay inside the light cone")
    points = max(1, int(points))

    magnitude = calculate_proper_acceleration(dx, dt)
    acceleration = sign(dx) * magnitude
    samples = []
    for i in range(points + 1):
        elapsed = dt * i / points
        x = start_x + calculate_hyperbolic_position(acceleration, initial_velocity, elapsed)
        samples.append(SpacetimePoint(x, start_t + elapsed))

    physics = HyperbolicPhysics(
        acceleration=acceleration,
        initial_velocity=initial_velocity,
        final_velocity=sign(dx) * calculate_final_velocity(magnitude, dt),
        proper_time=calculate_proper_time(magnitude, dt),
        coordinate_time=dt,
    )
    bounds = {"start_x": start_x, "start_t": start_t, "end_x": end_x, "end_t": end_t}
    return HyperbolicTrajectory(samples, physics, bounds)


# ============================================================
# Cumulative trajectories
# ============================================================

@dataclass(frozen=True)
class TrajectorySegment:
    source: ReferenceFrame
    target: ReferenceFrame
    delta_x: float
    delta_t: float
    acceleration: float
    segment_velocity: float  # signed
    proper_time: float
    initial_cumulative_velocity: float
    final_cumulative_velocity: float
    cumulative_proper_time: float
    total_coordinate_time: float


@dataclass(frozen=True)
class TotalPhysics:
    final_velocity: float = 0.0
    total_proper_time: float = 0.0
    total_coordinate_time: float = 0.0
    time_dilation_factor: float = 1.0
    time_dilation_percentage: float = 0.0


@dataclass(frozen=True)
class CumulativeTrajectory:
    segments: List[TrajectorySegment] = field(default_factory=list)
    total_physics: TotalPhysics = TotalPhysics()


def calculate_cumulative_trajectory(frames: Sequence) -> CumulativeTrajectory:
    """
    Analyse consecutive frame pairs as accelerated segments.

    Raises:
        TrajectoryError: if `frames` is empty.
    """
    if not frames:
        raise TrajectoryError("At least one reference frame is required")

    segments: List[TrajectorySegment] = []
    velocity = 0.0
    proper_time = 0.0
    coordinate_time = 0.0
    for source, target in zip(frames, frames[1:]):
        dx = target.x - source.x
        dt = target.t - source.t
        acceleration = calculate_proper_acceleration(dx, dt)
        segment_velocity = sign(dx) * calculate_final_velocity(acceleration, dt)
        segment_tau = calculate_proper_time(acceleration, dt)
        new_velocity = add_velocities_relativistic(velocity, segment_velocity)
        proper_time += segment_tau
        coordinate_time += dt
        segments.append(TrajectorySegment(
            source=source,
            target=target,
            delta_x=dx,
            delta_t=dt,
            acceleration=acceleration,
            segment_velocity=segment_velocity,
            proper_time=segment_tau,
            initial_cumulative_velocity=velocity,
            final_cumulative_velocity=new_velocity,
            cumulative_proper_time=proper_time,
            total_coordinate_time=coordinate_time,
        ))
        velocity = new_velocity

    if coordinate_time > 0:
        percentage = (coordinate_time - proper_time) / coordinate_time * 100
    else:
        percentage = 0.0
    if proper_time > 0:
        factor = coordinate_time / proper_time
    else:
        factor = 1.0 if coordinate_time == 0 else math.inf
    total = TotalPhysics(velocity, proper_time, coordinate_time, factor, percentage)
    return CumulativeTrajectory(segments, total)


def generate_twin_paradox_demo(max_distance: float, total_time: float,
                               acceleration_phase: float = 0.1) -> List[ReferenceFrame]:
    """
    Seven-frame round trip: accelerate, cruise, turn around, accelerate back,
    cruise, arrive. Each frame's source is the previous one.
    """
    accel_time = total_time * acceleration_phase
    cruise_time = total_time * (0.5 - acceleration_phase)
    half = total_time * 0.5
    events = [
        (0.0, 0.0),
        (max_distance * 0.1, accel_time),
        (max_distance * 0.9, accel_time + cruise_time),
        (max_distance, half),
        (max_distance * 0.9, half + accel_time),
        (max_distance * 0.1, half + accel_time + cruise_time),
        (0.0, total_time),
    ]
    return [ReferenceFrame(x, t, source_index=i - 1) for i, (x, t) in enumerate(events)]


# ============================================================
# Analysis helpers
# ============================================================

@dataclass(frozen=True)
class Intersection:
    trajectory: SpacetimePoint
    isochrone: SpacetimePoint
    distance: float


def find_trajectory_isochrone_intersections(trajectory: Sequence[SpacetimePoint],
                                            isochrone: Sequence[SpacetimePoint],
                                            tolerance: float = 5.0) -> List[Intersection]:
    """Up to ten closest (trajectory, isochrone) point pairs within `tolerance`."""
    hits = []
    for tp in trajectory:
        for ip in isochrone:
            d = math.hypot(tp.x - ip.x, tp.t - ip.t)
            if d <= tolerance:
                hits.append(Intersection(tp, ip, d))
    hits.sort(key=lambda h: h.distance)
    return hits[:10]


def calculate_trajectory_curvature(points: Sequence[SpacetimePoint], index: int) -> float:
    """Discrete curvature at points[index]; 0 at the ends or for repeated points."""
    if index <= 0 or index >= len(points) - 1:
        return 0.0
    p1, p2, p3 = points[index - 1], points[index], points[index + 1]
    dx1, dt1 = p2.x - p1.x, p2.t - p1.t
    dx2, dt2 = p3.x - p2.x, p3.t - p2.t
    norm1 = math.hypot(dx1, dt1)
    norm2 = math.hypot(dx2, dt2)
    if norm1 == 0 or norm2 == 0:
        return 0.0
    return abs(dx1 * dt2 - dt1 * dx2) / (norm1 * norm1 * norm2)


def sample_frame_trajectory(source, target, steps: Optional[int] = None) -> List[SpacetimePoint]:
    """
    Path drawn from source to target: the constant-acceleration rendezvous that
    leaves `source` with its cumulative velocity. Empty if no such path exists.
    """
    try:
        points, _ = generate_rendezvous_trajectory(source.x, source.t, source.cumulative_velocity,
                                                   target.x, target.t,
                                                   samples=(steps or TRAJECTORY_STEPS) + 1)
    except LightConeError as e:
        logger.debug("No trajectory from (%g, %g) to (%g, %g): %s", source.x, source.t, target.x, target.t, e)
        return []
    return [SpacetimePoint(p.x, p.t) for p in points]
