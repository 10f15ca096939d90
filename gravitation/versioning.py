#!/usr/bin/env python3
"""
Causal versioning of the mass distribution.

Every change to the masses produces a new "universe version": a frozen copy
of the whole configuration tagged with a strictly increasing integer. A grid
of cells records, per cell, the newest version whose propagation front has
reached it. Consumers sample physics through this grid so a change is only
felt once its front has travelled to the sampling point.

Bounded history
- At most max_versions entries are kept. When that is exceeded, the oldest
  entries are evicted until half remain. Cells that still point at an evicted
  version are re-pointed to the oldest surviving one so every cell references
  either 0 or a version present in the history.

Lookups
- get_masses_for_version is a floor lookup: the newest entry whose version is
  <= the requested one. With nothing that old (including version 0, "nothing
  has reached this cell yet") it falls back to a copy of the live masses.

Threading
- Not thread-safe on its own; SimulationController serializes access.
"""
import logging
import math
import time
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .constants import CANVAS_HEIGHT, CANVAS_WIDTH, GRID_SPACING, MAX_VERSIONS
from .data_models import MassSnapshot, PropagationFront, VersionEntry, VersionInfo

logger = logging.getLogger(__name__)


class CausalGridProvider:
    """
    Interface the consumers use to see the causally available masses.

    index_of -> version_at -> masses_at_version is the protocol every
    per-object update follows.
    """

    def index_of(self, x: float, y: float) -> Tuple[int, int]:
        raise NotImplementedError

    def version_at(self, grid_x: int, grid_y: int) -> int:
        raise NotImplementedError

    def masses_at_version(self, version: int, live_masses: Iterable) -> List[MassSnapshot]:
        raise NotImplementedError

    def causal_masses_at(self, x: float, y: float, live_masses: Iterable) -> List[MassSnapshot]:
        """Masses as they were when the newest change reached (x, y)."""
        gx, gy = self.index_of(x, y)
        return self.masses_at_version(self.version_at(gx, gy), live_masses)


def _copy_masses(masses: Iterable) -> Tuple[MassSnapshot, ...]:
    return tuple(MassSnapshot(m.x, m.y, m.mass, getattr(m, "type", "normal")) for m in masses)


class VersionManager(CausalGridProvider):
    """
    Owns the version counter, the mass history and the grid version table.
    """

    def __init__(self, spacing: float = GRID_SPACING, canvas_width: int = CANVAS_WIDTH,
                 canvas_height: int = CANVAS_HEIGHT, max_versions: int = MAX_VERSIONS):
        self.spacing = spacing
        self.max_versions = max(2, int(max_versions))
        self.grid_width = math.ceil(canvas_width / spacing)
        self.grid_height = math.ceil(canvas_height / spacing)
        self.current_version = 0
        self.history: List[VersionEntry] = []
        self._grid = np.zeros((self.grid_width, self.grid_height), dtype=np.int64)
        # World coordinates of every cell's corner, used for front distance tests
        self._cell_x, self._cell_y = np.meshgrid(
            np.arange(self.grid_width) * float(spacing),
            np.arange(self.grid_height) * float(spacing),
            indexing="ij",
        )

    @property
    def grid(self) -> np.ndarray:
        """Copy of the grid version table, indexed [grid_x, grid_y]."""
        return self._grid.copy()

    def reset(self) -> None:
        self.current_version = 0
        self.history.clear()
        self._grid.fill(0)
        logger.debug("Version state reset")

    # -----------------------
    # Versions
    # -----------------------

    def create_new_version(self, type: str, x: float, y: float, mass_change: float,
                           current_masses: Iterable) -> VersionInfo:
        """
        Record the current mass configuration as a new version.

        Args:
            type: Kind of change ("creation", "modification", "deletion").
            x, y: Where the change happened.
            mass_change: Signed mass delta of the change.
            current_masses: The live masses after the change; deep-copied.

        Returns:
            VersionInfo used by the caller to stamp the origin cell and start a front.
        """
        self.current_version += 1
        entry = VersionEntry(
            version=self.current_version,
            type=type,
            x=x,
            y=y,
            mass_change=mass_change,
            masses=_copy_masses(current_masses),
            timestamp=time.time(),
        )
        self.history.append(entry)
        if len(self.history) > self.max_versions:
            self.cleanup_old_versions()
        logger.debug("New version %d (%s at %s, %s)", self.current_version, type, x, y)
        return VersionInfo(self.current_version, x, y, type, mass_change)

    def cleanup_old_versions(self) -> List[int]:
        """Evict the oldest entries until half of max_versions remain."""
        removed: List[int] = []
        while len(self.history) > self.max_versions / 2:
            removed.append(self.history.pop(0).version)
        if removed:
            self._repoint_evicted_cells()
            logger.info("Version cleanup: evicted %d versions (%d-%d)", len(removed), removed[0], removed[-1])
        return removed

    def _repoint_evicted_cells(self) -> None:
        oldest = self.history[0].version if self.history else 0
        stale = (self._grid > 0) & (self._grid < oldest)
        self._grid[stale] = oldest

    def get_masses_for_version(self, version: int, live_masses: Iterable) -> List[MassSnapshot]:
        """Floor lookup of the configuration visible at `version`."""
        for entry in reversed(self.history):
            if entry.version <= version:
                return list(entry.masses)
        return list(_copy_masses(live_masses))

    # -----------------------
    # Grid
    # -----------------------

    def get_grid_version_index(self, x: float, y: float) -> Tuple[int, int]:
        return (math.floor(x / self.spacing), math.floor(y / self.spacing))

    def _in_grid(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.grid_width and 0 <= gy < self.grid_height

    def get_grid_version(self, gx: int, gy: int) -> int:
        if not self._in_grid(gx, gy):
            return 0
        return int(self._grid[gx, gy])

    def update_grid_point_version(self, x: float, y: float, version: int) -> None:
        gx, gy = self.get_grid_version_index(x, y)
        if self._in_grid(gx, gy):
            self._grid[gx, gy] = version

    def update_grid_versions_for_front(self, front: PropagationFront, radius: float) -> int:
        """
        Stamp every cell within `radius` of the front origin with the front's version.

        Cells already holding a newer version keep it. A front whose version
        has been evicted stamps the oldest surviving version instead. Returns
        the number of cells whose version changed.
        """
        if radius < 0:
            return 0
        version = max(front.version, self.oldest_version() or 0)
        dist = np.hypot(self._cell_x - front.x, self._cell_y - front.y)
        reached = (dist <= radius) & (self._grid < version)
        self._grid[reached] = version
        return int(np.count_nonzero(reached))

    def oldest_version(self) -> Optional[int]:
        return self.history[0].version if self.history else None

    # -----------------------
    # CausalGridProvider
    # -----------------------

    def index_of(self, x: float, y: float) -> Tuple[int, int]:
        return self.get_grid_version_index(x, y)

    def version_at(self, grid_x: int, grid_y: int) -> int:
        return self.get_grid_version(grid_x, grid_y)

    def masses_at_version(self, version: int, live_masses: Iterable) -> List[MassSnapshot]:
        return self.get_masses_for_version(version, live_masses)
