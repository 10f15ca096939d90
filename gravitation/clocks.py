#!/usr/bin/env python3
"""
Clocks showing gravitational time dilation.

A reference clock far from every mass advances by dt each tick. Placed clocks
advance by dt * max(0.1, 1 + Phi/c^2), where Phi is the potential of the
masses causally visible at the clock's grid cell.
"""
import logging
import math
from typing import List, Optional

from .config import GravityConfig
from .data_models import Clock
from .physics import time_dilation_factor
from .versioning import CausalGridProvider

logger = logging.getLogger(__name__)


class ClockManager:

    def __init__(self, grid: CausalGridProvider, live_masses: List, config: GravityConfig):
        self.grid = grid
        self.live_masses = live_masses
        self.config = config
        self.clocks: List[Clock] = []
        self.reference_time = 0.0
        self.selected: Optional[Clock] = None

    def add_clock(self, x: float, y: float) -> Clock:
        clock = Clock(x, y, reference_time=self.reference_time, local_time=self.reference_time)
        self.clocks.append(clock)
        logger.debug("Clock added at (%s, %s), reference time %.2fs", x, y, self.reference_time)
        return clock

    def dilation_at(self, x: float, y: float) -> float:
        masses = self.grid.causal_masses_at(x, y, self.live_masses)
        return time_dilation_factor(x, y, masses, self.config.G, self.config.c)

    def update(self, dt: float) -> None:
        self.reference_time += dt
        for clock in self.clocks:
            clock.local_time += dt * self.dilation_at(clock.x, clock.y)

    def clock_at(self, x: float, y: float, radius: float = 15.0) -> Optional[Clock]:
        for clock in self.clocks:
            if math.hypot(clock.x - x, clock.y - y) <= radius:
                return clock
        return None

    def select(self, clock: Optional[Clock]) -> None:
        if self.selected is not None:
            self.selected.selected = False
        self.selected = clock
        if clock is not None:
            clock.selected = True

    def remove(self, clock: Clock) -> None:
        if clock in self.clocks:
            self.clocks.remove(clock)
            if self.selected is clock:
                self.selected = None

    def clear(self) -> None:
        self.clocks.clear()
        self.selected = None
        self.reference_time = 0.0
