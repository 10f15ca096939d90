#!/usr/bin/env python3
"""
Rapidity formulation of the relativistic rendezvous.

With rapidity phi = artanh(v / c), uniformly accelerated motion is linear in
proper time, phi(tau) = phi0 + alpha tau / c, which makes the rendezvous
problem closed form: given a start event with velocity v0 and a target event,
find the constant proper acceleration alpha that arrives exactly on time.

    beta      = dx / (c dt)
    delta_phi = 2 (artanh(beta) - phi0)
    alpha     = c (sinh(phi0 + delta_phi) - sinh(phi0)) / dt
    tau_f     = c |delta_phi| / |alpha|

Unlike relativity.py this module validates its input and raises.
"""
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .constants import SPEED_OF_LIGHT, TAU_SAMPLES
from .errors import PhysicsValidationError, TrajectoryError

NUMERICAL_PRECISION = 1e-12


# ============================================================
# Hyperbolic functions
# ============================================================

def artanh(x: float) -> float:
    if x <= -1 or x >= 1:
        raise PhysicsValidationError(f"artanh: |x| must be < 1, got {x}")
    return 0.5 * math.log((1 + x) / (1 - x))


def arsinh(x: float) -> float:
    return math.log(x + math.sqrt(x * x + 1))


def arcosh(x: float) -> float:
    if x < 1:
        raise PhysicsValidationError(f"arcosh: x must be >= 1, got {x}")
    return math.log(x + math.sqrt(x * x - 1))


def velocity_to_rapidity(v: float) -> float:
    """v in units of c."""
    if abs(v) >= 1:
        raise PhysicsValidationError(f"velocity must be below c, got {v}")
    return artanh(v)


def rapidity_to_velocity(phi: float) -> float:
    return math.tanh(phi)


# ============================================================
# Rendezvous
# ============================================================

@dataclass(frozen=True)
class Rendezvous:
    alpha: float  # signed proper acceleration
    tau_f: float  # proper time on arrival
    phi_f: float
    v_f: float
    delta_phi: float  # signed
    energy_consumed: float  # |delta_phi|, in units of m0 c^2


def validate_rendezvous(delta_x: float, delta_t: float) -> bool:
    if delta_t <= 0:
        return False
    return abs(delta_x) / (SPEED_OF_LIGHT * delta_t) < 1


def calculate_rendezvous_rapidity(v0: float, delta_x: float, delta_t: float) -> float:
    beta = delta_x / (SPEED_OF_LIGHT * delta_t)
    if abs(beta) >= 1:
        raise TrajectoryError(f"Rendezvous outside the light cone (|beta| = {abs(beta):.4g})")
    return 2 * (artanh(beta) - velocity_to_rapidity(v0))


def calculate_required_acceleration(phi0: float, delta_phi: float, delta_t: float) -> float:
    return SPEED_OF_LIGHT * (math.sinh(phi0 + delta_phi) - math.sinh(phi0)) / delta_t


def solve_rendezvous_problem(x0: float, t0: float, v0: float, x1: float, t1: float) -> Rendezvous:
    """
    Constant proper acceleration taking a ship from (x0, t0) with velocity v0 to (x1, t1).

    Raises:
        TrajectoryError: if t1 <= t0 or the target lies outside the light cone.
        PhysicsValidationError: if |v0| >= c.
    """
    delta_x = x1 - x0
    delta_t = t1 - t0
    if delta_t <= 0:
        raise TrajectoryError("Rendezvous time must be in the future")
    if abs(v0) >= 1:
        raise PhysicsValidationError("Initial velocity must be below c")

    if abs(delta_x) < NUMERICAL_PRECISION and abs(v0) < NUMERICAL_PRECISION:
        return Rendezvous(alpha=0.0, tau_f=delta_t, phi_f=0.0, v_f=0.0, delta_phi=0.0, energy_consumed=0.0)

    phi0 = velocity_to_rapidity(v0)
    delta_phi = calculate_rendezvous_rapidity(v0, delta_x, delta_t)
    alpha = calculate_required_acceleration(phi0, delta_phi, delta_t)
    if abs(alpha) < NUMERICAL_PRECISION:
        # Already on an inertial course to the target
        tau_f = delta_t / math.cosh(phi0)
    else:
        tau_f = SPEED_OF_LIGHT * abs(delta_phi) / abs(alpha)
    phi_f = phi0 + delta_phi
    return Rendezvous(
        alpha=alpha,
        tau_f=tau_f,
        phi_f=phi_f,
        v_f=rapidity_to_velocity(phi_f),
        delta_phi=delta_phi,
        energy_consumed=abs(delta_phi),
    )


# ============================================================
# Trajectories in proper time
# ============================================================

@dataclass(frozen=True)
class TrajectoryPoint:
    x: float
    t: float
    v: float
    gamma: float
    phi: float
    tau: float


def calculate_trajectory_point(x0: float, t0: float, v0: float, alpha: float, tau: float) -> TrajectoryPoint:
    phi0 = velocity_to_rapidity(v0)
    c = SPEED_OF_LIGHT
    if abs(alpha) < NUMERICAL_PRECISION:
        gamma0 = math.cosh(phi0)
        return TrajectoryPoint(x0 + v0 * gamma0 * tau, t0 + gamma0 * tau, v0, gamma0, phi0, tau)

    phi = phi0 + alpha * tau / c
    x = x0 + (c * c / alpha) * (math.cosh(phi) - math.cosh(phi0))
    t = t0 + (c / alpha) * (math.sinh(phi) - math.sinh(phi0))
    return TrajectoryPoint(x, t, rapidity_to_velocity(phi), math.cosh(phi), phi, tau)


def generate_trajectory(x0: float, t0: float, v0: float, alpha: float, tau_f: float,
                        samples: int = TAU_SAMPLES) -> List[TrajectoryPoint]:
    """`samples` points evenly spaced in proper time over [0, tau_f]."""
    if samples < 2:
        raise PhysicsValidationError("At least two samples are required")
    return [calculate_trajectory_point(x0, t0, v0, alpha, tau_f * i / (samples - 1))
            for i in range(samples)]


def generate_rendezvous_trajectory(x0: float, t0: float, v0: float, x1: float, t1: float,
                                   samples: int = TAU_SAMPLES) -> Tuple[List[TrajectoryPoint], Rendezvous]:
    solution = solve_rendezvous_problem(x0, t0, v0, x1, t1)
    return generate_trajectory(x0, t0, v0, solution.alpha, solution.tau_f, samples), solution


def validate_trajectory(points: Sequence[TrajectoryPoint]) -> Tuple[bool, List[str]]:
    """Check sub-luminal speed, gamma >= 1 and strictly increasing t and tau."""
    if len(points) < 2:
        return False, ["Trajectory too short"]

    errors: List[str] = []
    for p in points:
        if abs(p.v) >= 1:
            errors.append(f"Superluminal velocity: v = {p.v}c")
        if p.gamma < 1:
            errors.append(f"Invalid Lorentz factor: gamma = {p.gamma}")
    if any(b.t <= a.t for a, b in zip(points, points[1:])):
        errors.append("Coordinate time is not monotonic")
    if any(b.tau <= a.tau for a, b in zip(points, points[1:])):
        errors.append("Proper time is not monotonic")
    return not errors, errors
