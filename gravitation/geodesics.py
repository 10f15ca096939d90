#!/usr/bin/env python3
"""
Geodesic curves: level curves of the potential, traced perpendicular to the field.

Geodesics are static artifacts drawn from the live mass configuration. They
are not causally gated; instead they are all retraced whenever the field
changes.

Tracing stops, in this order of priority, when:
- the field is weaker than stop_gradient_threshold,
- the signed turning angle reaches max_angle,
- the curve has turned a full circle and is back within curve_step of its start,
- the point leaves the extended bounding region around the canvas centre,
- max_steps steps have been taken.
A new point closer than min_distance_between_points to the previous one is
discarded without stopping.
"""
import logging
import math
from typing import List, Optional

from .config import GeodesicSettings, GravityConfig
from .constants import GEODESIC_MAX_WIDTH, GEODESIC_MIN_WIDTH
from .data_models import Geodesic
from .physics import gravitational_field
from .vector_utils import clamp, vec_cross, vec_dot, vec_norm

logger = logging.getLogger(__name__)


class GeodesicManager:

    def __init__(self, live_masses: List, config: GravityConfig, settings: Optional[GeodesicSettings] = None):
        self.live_masses = live_masses
        self.config = config
        self.settings = settings or GeodesicSettings()
        self.geodesics: List[Geodesic] = []

    def add_geodesic(self, x: float, y: float) -> Optional[Geodesic]:
        """Trace a geodesic through (x, y); returns None if the field is too weak or the curve too short."""
        s = self.settings
        fx, fy = gravitational_field(x, y, self.live_masses)
        if math.hypot(fx, fy) < s.min_gradient_threshold:
            logger.debug("Field too weak for a geodesic at (%s, %s)", x, y)
            return None
        geodesic = Geodesic(start_x=x, start_y=y, max_length=int(s.max_steps))
        self.trace(geodesic)
        if len(geodesic.points) < s.min_points:
            logger.debug("Geodesic at (%s, %s) too short, ignored", x, y)
            return None
        self.geodesics.append(geodesic)
        return geodesic

    def trace(self, geodesic: Geodesic) -> None:
        s = self.settings
        cfg = self.config
        x, y = geodesic.start_x, geodesic.start_y
        center_x = cfg.canvas_width / 2
        center_y = cfg.canvas_height / 2
        max_distance = max(cfg.canvas_width, cfg.canvas_height) * s.bounding_box_multiplier / 2

        points = [(x, y)]
        total_angle = 0.0
        last_direction = None
        for _ in range(int(s.max_steps)):
            fx, fy = gravitational_field(x, y, self.live_masses)
            if math.hypot(fx, fy) < s.stop_gradient_threshold:
                break

            direction = vec_norm((-fy, fx))
            if last_direction is not None:
                turn = math.atan2(vec_cross(last_direction, direction), vec_dot(last_direction, direction))
                total_angle += math.degrees(turn)
            last_direction = direction

            if abs(total_angle) >= s.max_angle:
                break
            if abs(total_angle) >= 360 and math.hypot(x - geodesic.start_x, y - geodesic.start_y) <= s.curve_step:
                break
            if math.hypot(x - center_x, y - center_y) > max_distance:
                break

            x += direction[0] * s.curve_step
            y += direction[1] * s.curve_step
            last_x, last_y = points[-1]
            if math.hypot(x - last_x, y - last_y) >= s.min_distance_between_points:
                points.append((x, y))
        geodesic.points = points

    def recalculate_all(self) -> None:
        for geodesic in self.geodesics:
            self.trace(geodesic)

    def line_widths(self) -> List[List[float]]:
        """
        Per-segment drawing widths for every geodesic.

        Field strength at each segment midpoint is log-scaled and
        normalized over all geodesics, then scaled by thickness_amplification
        and clamped to [GEODESIC_MIN_WIDTH, GEODESIC_MAX_WIDTH].
        """
        intensities = []
        for geodesic in self.geodesics:
            row = []
            for (x0, y0), (x1, y1) in zip(geodesic.points, geodesic.points[1:]):
                fx, fy = gravitational_field((x0 + x1) / 2, (y0 + y1) / 2, self.live_masses)
                row.append(math.log1p(math.hypot(fx, fy)))
            intensities.append(row)

        flat = [v for row in intensities for v in row]
        if not flat:
            return [[] for _ in self.geodesics]
        lo, hi = min(flat), max(flat)
        if hi == lo:
            lo, hi = 0.0, 1.0
        amplification = self.settings.thickness_amplification
        return [[clamp((v - lo) / (hi - lo) * 10.0 * amplification, GEODESIC_MIN_WIDTH, GEODESIC_MAX_WIDTH)
                 for v in row] for row in intensities]

    def remove(self, geodesic: Geodesic) -> None:
        if geodesic in self.geodesics:
            self.geodesics.remove(geodesic)

    def clear(self) -> None:
        self.geodesics.clear()
