#!/usr/bin/env python3
"""
Spacetime view: maps (x, t) to screen pixels.

The origin event sits at the bottom centre of the viewport, VIEW_BOTTOM_MARGIN
pixels above the edge; t grows upwards and x to the right.
"""
import math
from typing import Optional, Sequence, Tuple

from .constants import FRAME_HIT_RADIUS, VIEW_BOTTOM_MARGIN, VIEW_HEIGHT, VIEW_SCALE, VIEW_WIDTH


class SpacetimeView:
    def __init__(self, width: int = VIEW_WIDTH, height: int = VIEW_HEIGHT, scale: float = VIEW_SCALE):
        self.scale = scale  # px per spacetime unit
        self.viewport_size = (width, height)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def origin_screen(self) -> Tuple[float, float]:
        w, h = self.viewport_size
        return (w / 2, h - VIEW_BOTTOM_MARGIN)

    def to_screen(self, x: float, t: float) -> Tuple[int, int]:
        cx, cy = self.origin_screen
        return (int(cx + x * self.scale), int(cy - t * self.scale))

    def to_spacetime(self, sx: float, sy: float) -> Tuple[float, float]:
        cx, cy = self.origin_screen
        return ((sx - cx) / self.scale, (cy - sy) / self.scale)

    def frame_at_screen(self, frames: Sequence, sx: float, sy: float,
                        radius: float = FRAME_HIT_RADIUS) -> Optional[int]:
        """Newest non-origin frame drawn within `radius` pixels of (sx, sy)."""
        cx, cy = self.origin_screen
        for i in range(len(frames) - 1, 0, -1):
            px = cx + frames[i].x * self.scale
            py = cy - frames[i].t * self.scale
            if math.hypot(px - sx, py - sy) <= radius:
                return i
        return None
