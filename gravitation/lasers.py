#!/usr/bin/env python3
"""
Laser pulses: light-speed particles bent by the causally visible field.

A pulse always moves at c; the field only turns it. Its colour comes from the
gravitational redshift at its position, again using the masses recorded for
its grid cell.
"""
from typing import List, Optional, Tuple

from .config import GravityConfig
from .constants import LASER_DEVIATION_FACTOR
from .data_models import Laser
from .physics import calculate_gravitational_redshift, gravitational_field, normalize_vector, redshift_to_color
from .vector_utils import snap_to_grid
from .versioning import CausalGridProvider


class LaserManager:

    def __init__(self, grid: CausalGridProvider, live_masses: List, config: GravityConfig):
        self.grid = grid
        self.live_masses = live_masses
        self.config = config
        self.lasers: List[Laser] = []

    def add_laser(self, x: float, y: float, dir_x: float, dir_y: float, now: float = 0.0) -> Optional[Laser]:
        if dir_x == 0 and dir_y == 0:
            return None
        gx, gy = snap_to_grid(x, y, self.config.spacing)
        vx, vy = normalize_vector(dir_x, dir_y, self.config.c)
        laser = Laser(gx, gy, vx, vy, creation_time=now)
        self.lasers.append(laser)
        return laser

    def update(self, dt: float) -> None:
        survivors: List[Laser] = []
        c = self.config.c
        for laser in self.lasers:
            masses = self.grid.causal_masses_at(laser.x, laser.y, self.live_masses)
            fx, fy = gravitational_field(laser.x, laser.y, masses)
            laser.vx += fx * LASER_DEVIATION_FACTOR * dt
            laser.vy += fy * LASER_DEVIATION_FACTOR * dt
            laser.vx, laser.vy = normalize_vector(laser.vx, laser.vy, c)
            laser.x += laser.vx * dt
            laser.y += laser.vy * dt
            laser.add_trail_point()
            if self.config.contains(laser.x, laser.y):
                survivors.append(laser)
        self.lasers = survivors

    def redshift_of(self, laser: Laser) -> float:
        masses = self.grid.causal_masses_at(laser.x, laser.y, self.live_masses)
        return calculate_gravitational_redshift(laser.x, laser.y, masses, self.config.G, self.config.c)

    def color_of(self, laser: Laser) -> Tuple[int, int, int]:
        return redshift_to_color(self.redshift_of(laser))

    def remove(self, laser: Laser) -> None:
        if laser in self.lasers:
            self.lasers.remove(laser)

    def clear(self) -> None:
        self.lasers.clear()
