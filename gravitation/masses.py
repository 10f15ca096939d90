#!/usr/bin/env python3
"""
Mass and black-hole placement.

Clicks land on the nearest grid point. Left-click creates or grows the mass at
that point, right-click shrinks it and removes it once it falls below its
threshold. Every net change is published causally:

1. a new version is recorded with the configuration after the change,
2. the origin cell is stamped with it immediately,
3. a propagation front starts carrying it outwards,
4. geodesics are recalculated, since they are drawn from the live field.
"""
import logging
from typing import Callable, List, Optional

from .constants import (
    BLACK_HOLE_INITIAL_MASS,
    BLACK_HOLE_MIN_MASS,
    NORMAL_MASS_INITIAL,
    NORMAL_MASS_STEP,
)
from .data_models import BLACK_HOLE, NORMAL, Mass, VersionInfo
from .propagation import PropagationManager
from .vector_utils import snap_to_grid, within_cell
from .versioning import VersionManager

logger = logging.getLogger(__name__)


class MassManager:
    """
    Owns the live mass list and publishes every change through the version system.

    Args:
        versions: Version store and grid.
        propagation: Front manager that spreads new versions.
        spacing: Grid spacing used for snapping and hit tests.
        clock: Callable returning the current simulation time in seconds.
        on_field_changed: Called after any change, typically to recalculate geodesics.
        masses: Live list to manage; shared with the consumers.
    """

    def __init__(self, versions: VersionManager, propagation: PropagationManager, spacing: float,
                 clock: Callable[[], float], on_field_changed: Optional[Callable[[], None]] = None,
                 masses: Optional[List[Mass]] = None):
        self.versions = versions
        self.propagation = propagation
        self.spacing = spacing
        self.clock = clock
        self.on_field_changed = on_field_changed
        self.masses: List[Mass] = masses if masses is not None else []

    def _find(self, x: float, y: float, black_holes_only: bool = False) -> Optional[Mass]:
        for m in self.masses:
            if black_holes_only and not m.is_black_hole:
                continue
            if within_cell(m.x, m.y, x, y, self.spacing):
                return m
        return None

    def _publish(self, type: str, x: float, y: float, mass_change: float) -> VersionInfo:
        info = self.versions.create_new_version(type, x, y, mass_change, self.masses)
        self.versions.update_grid_point_version(x, y, info.version)
        self.propagation.create_front(info, self.clock())
        if self.on_field_changed is not None:
            self.on_field_changed()
        return info

    # -----------------------
    # Normal masses
    # -----------------------

    def add_mass(self, x: float, y: float, is_right_click: bool = False) -> Optional[Mass]:
        """
        Left-click adds NORMAL_MASS_STEP (creating the mass if needed),
        right-click removes it. Returns the affected mass, or None if nothing changed
        or the mass was removed.
        """
        gx, gy = snap_to_grid(x, y, self.spacing)
        existing = self._find(gx, gy)
        if existing is None:
            if is_right_click:
                return None
            mass = Mass(gx, gy, NORMAL_MASS_INITIAL, NORMAL)
            self.masses.append(mass)
            self._publish("creation", gx, gy, 0.0)
            logger.debug("Mass created at (%s, %s)", gx, gy)
            return mass

        old_mass = existing.mass
        if is_right_click:
            existing.mass = max(0.0, existing.mass - NORMAL_MASS_STEP)
        else:
            existing.mass += NORMAL_MASS_STEP
        if existing.mass == old_mass:
            return existing
        if existing.mass <= 0:
            self.masses.remove(existing)
            self._publish("deletion", gx, gy, existing.mass - old_mass)
            logger.debug("Mass removed at (%s, %s)", gx, gy)
            return None
        self._publish("modification", gx, gy, existing.mass - old_mass)
        return existing

    def remove_mass(self, mass: Mass) -> bool:
        """Remove a mass outright, publishing the change. Returns False if unknown."""
        if mass not in self.masses:
            return False
        self.masses.remove(mass)
        self._publish("deletion", mass.x, mass.y, -mass.mass)
        return True

    # -----------------------
    # Black holes
    # -----------------------

    def add_black_hole(self, x: float, y: float, is_right_click: bool = False) -> Optional[Mass]:
        """
        Left-click creates a black hole or doubles its mass, right-click halves it.
        A black hole halved below BLACK_HOLE_MIN_MASS is removed.
        """
        gx, gy = snap_to_grid(x, y, self.spacing)
        existing = self._find(gx, gy, black_holes_only=True)
        if existing is None:
            if is_right_click:
                return None
            hole = Mass(gx, gy, BLACK_HOLE_INITIAL_MASS, BLACK_HOLE)
            self.masses.append(hole)
            self._publish("creation", gx, gy, 0.0)
            logger.info("Black hole created at (%s, %s)", gx, gy)
            return hole

        old_mass = existing.mass
        if is_right_click:
            existing.mass = existing.mass / 2
            if existing.mass < BLACK_HOLE_MIN_MASS:
                self.masses.remove(existing)
                self._publish("deletion", gx, gy, -old_mass)
                logger.info("Black hole at (%s, %s) evaporated", gx, gy)
                return None
        else:
            existing.mass *= 2
        self._publish("modification", gx, gy, existing.mass - old_mass)
        return existing

    def find_black_hole_at(self, x: float, y: float) -> Optional[Mass]:
        gx, gy = snap_to_grid(x, y, self.spacing)
        return self._find(gx, gy, black_holes_only=True)

    def get_black_holes(self) -> List[Mass]:
        return [m for m in self.masses if m.is_black_hole]

    def clear(self) -> None:
        self.masses.clear()
