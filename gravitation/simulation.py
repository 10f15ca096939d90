#!/usr/bin/env python3
"""
Simulation controller: the single owner of all gravity-sandbox state.

The renderer thread calls tick() every frame and the UI thread calls the
add/toggle/settings methods; everything is guarded by one re-entrant lock.

Tick order (fixed)
1. advance simulation time (only while playing)
2. propagation fronts stamp the grid
3. fronts that crossed the canvas are retired
4. spacecraft, 5. lasers, 6. clocks read the grid
Grid writes therefore happen before any read in the same tick.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .clocks import ClockManager
from .config import GeodesicSettings, GravityConfig
from .data_models import Clock, Geodesic, Laser, Mass, PropagationFront, Spacecraft
from .geodesics import GeodesicManager
from .lasers import LaserManager
from .masses import MassManager
from .propagation import PropagationManager
from .spacecraft import SpacecraftManager
from .versioning import VersionManager

logger = logging.getLogger(__name__)


@dataclass
class SceneSnapshot:
    """Copies of the drawable state, taken under the lock for the renderer."""
    sim_time: float
    playing: bool
    masses: List[Mass]
    fronts: List[Tuple[PropagationFront, float]]  # (front, current radius)
    spacecrafts: List[Tuple[float, float, List[Tuple[float, float]]]]
    lasers: List[Tuple[float, float, List[Tuple[float, float]], Tuple[int, int, int]]]
    clocks: List[Clock]
    geodesics: List[List[Tuple[float, float]]]
    geodesic_widths: List[List[float]]  # one width per segment
    current_version: int


class SimulationController:
    """
    Shared state between the UI thread (Dear PyGui) and the renderer thread (pygame).
    """

    def __init__(self, config: Optional[GravityConfig] = None,
                 geodesic_settings: Optional[GeodesicSettings] = None):
        self.lock = threading.RLock()
        self.config = config or GravityConfig()
        self.running = True  # app running
        self.playing = True  # simulation time advancing
        self.sim_time = 0.0  # seconds

        cfg = self.config
        self.versions = VersionManager(cfg.spacing, cfg.canvas_width, cfg.canvas_height, cfg.max_versions)
        self.propagation = PropagationManager(self.versions, cfg.spacing, cfg.propagation_rate, cfg.diagonal)
        # One live mass list shared by every manager
        masses: List[Mass] = []
        self.geodesic_manager = GeodesicManager(masses, cfg, geodesic_settings)
        self.mass_manager = MassManager(self.versions, self.propagation, cfg.spacing,
                                        clock=lambda: self.sim_time,
                                        on_field_changed=self.geodesic_manager.recalculate_all,
                                        masses=masses)
        self.spacecraft_manager = SpacecraftManager(self.versions, masses, cfg)
        self.laser_manager = LaserManager(self.versions, masses, cfg)
        self.clock_manager = ClockManager(self.versions, masses, cfg)

    @property
    def masses(self) -> List[Mass]:
        return self.mass_manager.masses

    # -----------------------
    # Stepping
    # -----------------------

    def tick(self, dt: float) -> None:
        """Advance the simulation by dt seconds of simulation time (no-op while paused)."""
        with self.lock:
            if not self.playing or dt <= 0:
                return
            self.sim_time += dt
            self.propagation.update_fronts(self.sim_time)
            self.propagation.cleanup_fronts(self.sim_time)
            self.spacecraft_manager.update(dt)
            self.laser_manager.update(dt)
            self.clock_manager.update(dt)

    def step_once(self, dt: float = 1 / 60.0) -> None:
        """Advance one frame even while paused."""
        with self.lock:
            was_playing = self.playing
            self.playing = True
            try:
                self.tick(dt)
            finally:
                self.playing = was_playing

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    # -----------------------
    # User actions
    # -----------------------

    def add_mass(self, x: float, y: float, is_right_click: bool = False) -> Optional[Mass]:
        with self.lock:
            return self.mass_manager.add_mass(x, y, is_right_click)

    def add_black_hole(self, x: float, y: float, is_right_click: bool = False) -> Optional[Mass]:
        with self.lock:
            return self.mass_manager.add_black_hole(x, y, is_right_click)

    def add_spacecraft(self, x: float, y: float, dir_x: float, dir_y: float) -> Optional[Spacecraft]:
        with self.lock:
            return self.spacecraft_manager.add_spacecraft(x, y, dir_x, dir_y, self.sim_time)

    def add_laser(self, x: float, y: float, dir_x: float, dir_y: float) -> Optional[Laser]:
        with self.lock:
            return self.laser_manager.add_laser(x, y, dir_x, dir_y, self.sim_time)

    def add_clock(self, x: float, y: float) -> Clock:
        with self.lock:
            return self.clock_manager.add_clock(x, y)

    def add_geodesic(self, x: float, y: float) -> Optional[Geodesic]:
        with self.lock:
            return self.geodesic_manager.add_geodesic(x, y)

    def apply_geodesic_settings(self, **values: Any) -> None:
        with self.lock:
            self.geodesic_manager.settings.update(**values)
            self.geodesic_manager.recalculate_all()

    def set_max_speed(self, value: float) -> None:
        with self.lock:
            self.config.max_speed = max(0.0, float(value))

    def clear_objects(self) -> None:
        """Remove spacecraft, lasers, clocks and geodesics; keep masses."""
        with self.lock:
            self.spacecraft_manager.clear()
            self.laser_manager.clear()
            self.clock_manager.clear()
            self.geodesic_manager.clear()

    def reset(self) -> None:
        with self.lock:
            self.clear_objects()
            self.mass_manager.clear()
            self.propagation.clear()
            self.versions.reset()
            self.sim_time = 0.0
            logger.info("Simulation reset")

    # -----------------------
    # Read access
    # -----------------------

    def snapshot(self) -> SceneSnapshot:
        with self.lock:
            now = self.sim_time
            return SceneSnapshot(
                sim_time=now,
                playing=self.playing,
                masses=[Mass(m.x, m.y, m.mass, m.type) for m in self.masses],
                fronts=[(f, self.propagation.radius_of(f, now)) for f in self.propagation.fronts],
                spacecrafts=[(s.x, s.y, list(s.trail)) for s in self.spacecraft_manager.spacecrafts],
                lasers=[(l.x, l.y, list(l.trail), self.laser_manager.color_of(l))
                        for l in self.laser_manager.lasers],
                clocks=[Clock(c.x, c.y, c.reference_time, c.local_time, c.selected)
                        for c in self.clock_manager.clocks],
                geodesics=[list(g.points) for g in self.geodesic_manager.geodesics],
                geodesic_widths=self.geodesic_manager.line_widths(),
                current_version=self.versions.current_version,
            )

    def debug_info(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "masses": len(self.masses),
                "black_holes": len(self.mass_manager.get_black_holes()),
                "spacecrafts": len(self.spacecraft_manager.spacecrafts),
                "captured": self.spacecraft_manager.captured,
                "lasers": len(self.laser_manager.lasers),
                "clocks": len(self.clock_manager.clocks),
                "geodesics": len(self.geodesic_manager.geodesics),
                "fronts": len(self.propagation.fronts),
                "version": self.versions.current_version,
                "history": len(self.versions.history),
                "reference_time": self.clock_manager.reference_time,
            }
