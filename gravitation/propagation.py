#!/usr/bin/env python3
"""
Propagation fronts: expanding circles that carry mass changes across the grid.

A front starts at the cell where a change happened and grows at a fixed rate
of `rate` grid units per second of simulation time, independent of the
renderer. Each tick it stamps the cells it has reached with its version; it is
retired once its radius exceeds the canvas diagonal.
"""
import logging
from typing import List

from .data_models import PropagationFront, VersionInfo
from .versioning import VersionManager

logger = logging.getLogger(__name__)


class PropagationManager:

    def __init__(self, versions: VersionManager, spacing: float, rate: float, max_radius: float):
        self.versions = versions
        self.spacing = spacing
        self.rate = rate
        self.max_radius = max_radius
        self.fronts: List[PropagationFront] = []

    def create_front(self, info: VersionInfo, now: float) -> PropagationFront:
        front = PropagationFront(
            x=info.x,
            y=info.y,
            start_time=now,
            spacing=self.spacing,
            version=info.version,
            type=info.type,
            mass_change=info.mass_change,
        )
        self.fronts.append(front)
        logger.debug("Propagation front created at (%s, %s), version %d (%s)",
                     info.x, info.y, info.version, info.type)
        return front

    def radius_of(self, front: PropagationFront, now: float) -> float:
        """Radius in px reached by `front` at simulation time `now`."""
        return max(0.0, now - front.start_time) * self.rate * front.spacing

    def is_front_visible(self, front: PropagationFront, now: float) -> bool:
        return self.radius_of(front, now) <= self.max_radius

    def update_fronts(self, now: float) -> None:
        """Stamp the grid for every active front. Must run before consumers read it."""
        for front in self.fronts:
            self.versions.update_grid_versions_for_front(front, self.radius_of(front, now))

    def cleanup_fronts(self, now: float) -> int:
        """Retire fronts that have crossed the whole canvas. Returns how many were removed."""
        before = len(self.fronts)
        self.fronts = [f for f in self.fronts if self.is_front_visible(f, now)]
        removed = before - len(self.fronts)
        if removed:
            logger.debug("Retired %d propagation fronts", removed)
        return removed

    def clear(self) -> None:
        self.fronts.clear()
