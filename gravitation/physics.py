#!/usr/bin/env python3
"""
Gravitational field helpers for the gravity sandbox.

Responsibilities
- Sum the Newtonian field of a set of point masses at a position.
- Gravitational potential, redshift and time-dilation estimates derived from it.
- Event-horizon (Schwarzschild) radius used for black-hole capture.

Units and conventions
- Normalized units: G = 1, c = 50 px/s by default (see constants.py).
- Masses passed in are any objects exposing .x, .y and .mass (live Mass or
  frozen MassSnapshot); callers decide which configuration is causally visible.
- Masses located exactly at the sample point are skipped to avoid singularities.

Threading
- Pure functions, no state. The simulation controller holds the lock.
"""
import math
from typing import Iterable, Tuple

from .constants import G, REDSHIFT_MAX, REDSHIFT_MIN, SPEED_OF_LIGHT, MIN_TIME_DILATION
from .vector_utils import clamp


def calculate_event_horizon(mass: float, G: float = G, c: float = SPEED_OF_LIGHT) -> float:
    """Schwarzschild radius 2GM/c^2."""
    return (2.0 * G * mass) / (c * c)


def normalize_vector(vx: float, vy: float, length: float = 1.0) -> Tuple[float, float]:
    """Rescale (vx, vy) to `length`; the zero vector stays zero."""
    norm = math.hypot(vx, vy)
    if norm == 0:
        return (0.0, 0.0)
    return (vx / norm * length, vy / norm * length)


def gravitational_field(x: float, y: float, masses: Iterable, G: float = 1.0) -> Tuple[float, float]:
    """
    Field strength sum(G * M / r^2) pointing towards each mass.

    Args:
        x, y: Sample position.
        masses: Objects with .x, .y and .mass.
        G: Gravitational constant; the sandbox uses 1 for forces.

    Returns:
        (fx, fy) field vector.
    """
    fx, fy = 0.0, 0.0
    for m in masses:
        dx = m.x - x
        dy = m.y - y
        dist = math.hypot(dx, dy)
        if dist > 0:
            strength = G * m.mass / (dist * dist)
            fx += (dx / dist) * strength
            fy += (dy / dist) * strength
    return (fx, fy)


def gravitational_potential(x: float, y: float, masses: Iterable, G: float = G) -> float:
    """Newtonian potential sum(-G * M / r)."""
    potential = 0.0
    for m in masses:
        dist = math.hypot(m.x - x, m.y - y)
        if dist > 0:
            potential -= G * m.mass / dist
    return potential


def calculate_gravitational_redshift(x: float, y: float, masses: Iterable,
                                     G: float = G, c: float = SPEED_OF_LIGHT) -> float:
    """
    Weak-field redshift estimate Phi / c^2, clamped to [REDSHIFT_MIN, REDSHIFT_MAX].

    Negative values mean the light sits deeper in a potential well.
    """
    redshift = gravitational_potential(x, y, masses, G) / (c * c)
    return clamp(redshift, REDSHIFT_MIN, REDSHIFT_MAX)


def redshift_to_color(redshift: float) -> Tuple[int, int, int]:
    """Map a clamped redshift to an RGB tuple: blue-ish below zero, red-ish above."""
    if redshift < 0:
        intensity = min(1.0, abs(redshift) / 2.0)
        return (0, round(255 * (1 - intensity)), round(255 * (0.5 + intensity * 0.5)))
    intensity = min(1.0, redshift / 2.0)
    return (round(255 * (0.5 + intensity * 0.5)), round(255 * (1 - intensity)), 0)


def time_dilation_factor(x: float, y: float, masses: Iterable,
                         G: float = G, c: float = SPEED_OF_LIGHT) -> float:
    """Clock rate 1 + Phi/c^2, never below MIN_TIME_DILATION."""
    factor = 1.0 + gravitational_potential(x, y, masses, G) / (c * c)
    return max(MIN_TIME_DILATION, factor)
