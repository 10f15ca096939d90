#!/usr/bin/env python3
"""
Spacecraft: test particles integrated in the causally visible field.

Each tick a spacecraft looks up the version recorded for its grid cell and
feels only the masses of that version. If it comes within the event horizon
of the nearest visible black hole it is captured and removed; otherwise its
velocity is integrated with explicit Euler and clamped to the speed limit.
Spacecraft leaving the canvas are dropped.
"""
import logging
import math
from typing import Iterable, List, Optional, Tuple

from .config import GravityConfig
from .constants import SPACECRAFT_LAUNCH_FACTOR
from .data_models import MassSnapshot, Spacecraft
from .physics import calculate_event_horizon
from .vector_utils import snap_to_grid
from .versioning import CausalGridProvider

logger = logging.getLogger(__name__)


def nearest_black_hole(x: float, y: float, masses: Iterable[MassSnapshot]) -> Tuple[Optional[MassSnapshot], float]:
    """Closest black hole among `masses` and its distance (inf if there is none)."""
    closest = None
    min_dist = math.inf
    for m in masses:
        if not m.is_black_hole:
            continue
        dist = math.hypot(m.x - x, m.y - y)
        if 0 < dist < min_dist:
            closest = m
            min_dist = dist
    return closest, min_dist


def is_captured(craft: Spacecraft, masses: Iterable[MassSnapshot], config: GravityConfig) -> bool:
    """True if the craft sits inside the horizon of the nearest visible black hole."""
    hole, dist = nearest_black_hole(craft.x, craft.y, masses)
    if hole is None:
        return False
    return dist <= calculate_event_horizon(hole.mass, config.G, config.c)


class SpacecraftManager:

    def __init__(self, grid: CausalGridProvider, live_masses: List, config: GravityConfig):
        self.grid = grid
        self.live_masses = live_masses
        self.config = config
        self.spacecrafts: List[Spacecraft] = []
        self.captured = 0

    def add_spacecraft(self, x: float, y: float, dir_x: float, dir_y: float,
                       now: float = 0.0) -> Optional[Spacecraft]:
        """
        Launch a spacecraft from the grid point nearest (x, y).

        The drag vector (dir_x, dir_y) gives the direction; its length sets
        the initial speed, capped at max_speed. A zero vector launches nothing.
        """
        length = math.hypot(dir_x, dir_y)
        if length == 0:
            logger.debug("Ignoring spacecraft launch with zero direction")
            return None
        gx, gy = snap_to_grid(x, y, self.config.spacing)
        speed = min(length * SPACECRAFT_LAUNCH_FACTOR, self.config.max_speed)
        craft = Spacecraft(gx, gy, dir_x / length * speed, dir_y / length * speed, creation_time=now)
        self.spacecrafts.append(craft)
        return craft

    def update(self, dt: float) -> None:
        survivors: List[Spacecraft] = []
        for craft in self.spacecrafts:
            if self._step(craft, dt):
                survivors.append(craft)
        self.spacecrafts = survivors

    def _step(self, craft: Spacecraft, dt: float) -> bool:
        """Advance one craft; returns False when it must be removed."""
        masses = self.grid.causal_masses_at(craft.x, craft.y, self.live_masses)

        if is_captured(craft, masses, self.config):
            self.captured += 1
            logger.info("Spacecraft captured by black hole at (%.1f, %.1f)", craft.x, craft.y)
            return False

        fx, fy = 0.0, 0.0
        for m in masses:
            dx = m.x - craft.x
            dy = m.y - craft.y
            dist = math.hypot(dx, dy)
            if dist > 0:
                force = (m.mass * craft.mass) / (dist * dist)
                fx += dx / dist * force
                fy += dy / dist * force

        craft.vx += fx / craft.mass * dt
        craft.vy += fy / craft.mass * dt
        speed = math.hypot(craft.vx, craft.vy)
        if speed > self.config.max_speed:
            scale = self.config.max_speed / speed
            craft.vx *= scale
            craft.vy *= scale

        craft.x += craft.vx * dt
        craft.y += craft.vy * dt
        craft.add_trail_point()
        return self.config.contains(craft.x, craft.y)

    def remove(self, craft: Spacecraft) -> None:
        if craft in self.spacecrafts:
            self.spacecrafts.remove(craft)

    def clear(self) -> None:
        self.spacecrafts.clear()
