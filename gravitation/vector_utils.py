#!/usr/bin/env python3
"""
Vector helper functions for 2D operations and grid snapping.

These are small, fast functions used by the physics, managers and renderer.
"""
import math
from typing import Tuple


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_len(a: Tuple[float, float]) -> float:
    return math.hypot(a[0], a[1])


def vec_norm(a: Tuple[float, float]) -> Tuple[float, float]:
    l = vec_len(a)
    if l == 0:
        return (0.0, 0.0)
    return (a[0] / l, a[1] / l)


def vec_dot(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


def vec_cross(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return a[0] * b[1] - a[1] * b[0]


def snap_to_grid(x: float, y: float, spacing: float) -> Tuple[float, float]:
    """Snap a world position to the nearest grid point (halves round up)."""
    return (math.floor(x / spacing + 0.5) * spacing, math.floor(y / spacing + 0.5) * spacing)


def within_cell(ax: float, ay: float, bx: float, by: float, spacing: float) -> bool:
    """Box test used to match a click with an existing grid object."""
    half = spacing / 2
    return abs(ax - bx) < half and abs(ay - by) < half
