#!/usr/bin/env python3
"""
Pointer interaction for the frame diagram.

States
- IDLE: hovering; the cursor shows "grab" over a frame.
- DRAGGING_NEW_CONE: a press inside some future light cone created a frame that now follows the pointer.
- DRAGGING_EXISTING_CONE: a press on a frame moves it once the pointer has travelled DRAG_THRESHOLD px.
- DRAGGING_CARTOUCHE: a press on an info box moves its offset.

Every handler returns the cursor name the front-end should display. Moves
that would break causality leave the diagram unchanged and report "not-allowed".
"""
import logging
import math
from typing import List, Optional, Tuple

from .constants import DRAG_THRESHOLD
from .errors import LightConeError

logger = logging.getLogger(__name__)

IDLE = "idle"
DRAGGING_NEW_CONE = "dragging_new_cone"
DRAGGING_EXISTING_CONE = "dragging_existing_cone"
DRAGGING_CARTOUCHE = "dragging_cartouche"

CURSOR_DEFAULT = "default"
CURSOR_GRAB = "grab"
CURSOR_GRABBING = "grabbing"
CURSOR_NOT_ALLOWED = "not-allowed"


class DragController:
    def __init__(self, diagram, view):
        self.diagram = diagram
        self.view = view
        self.state = IDLE
        self.index: Optional[int] = None
        self.moved = False
        self._press_screen: Tuple[float, float] = (0.0, 0.0)
        self._press_value: Tuple[float, float] = (0.0, 0.0)  # frame (x, t) or cartouche offset

    @property
    def is_dragging(self) -> bool:
        return self.state != IDLE

    def press(self, sx: float, sy: float, cartouche_index: Optional[int] = None) -> str:
        """
        Start an interaction at screen position (sx, sy).

        `cartouche_index` is the frame whose info box lies under the pointer, as
        hit-tested by the renderer that laid the boxes out.
        """
        self._press_screen = (sx, sy)
        self.moved = False

        if cartouche_index is not None:
            self.state = DRAGGING_CARTOUCHE
            self.index = cartouche_index
            self._press_value = self.diagram.cartouche_offset(cartouche_index)
            return CURSOR_GRABBING

        hit = self.diagram.frame_at_screen(self.view, sx, sy)
        if hit is not None:
            frame = self.diagram.frames[hit]
            self.state = DRAGGING_EXISTING_CONE
            self.index = hit
            self._press_value = (frame.x, frame.t)
            self.diagram.select(hit)
            return CURSOR_GRABBING

        x, t = self.view.to_spacetime(sx, sy)
        try:
            created = self.diagram.create_frame_at(x, t)
        except LightConeError as e:
            logger.debug("Frame creation rejected: %s", e)
            created = None
        if created is None:
            self.state = IDLE
            self.index = None
            return CURSOR_NOT_ALLOWED
        self.state = DRAGGING_NEW_CONE
        self.index = created
        self._press_value = (x, t)
        self.moved = True
        self.diagram.select(created)
        return CURSOR_GRABBING

    def move(self, sx: float, sy: float) -> str:
        if self.state == IDLE:
            return CURSOR_GRAB if self.diagram.frame_at_screen(self.view, sx, sy) is not None else CURSOR_DEFAULT

        if not self.moved:
            px, py = self._press_screen
            if math.hypot(sx - px, sy - py) <= DRAG_THRESHOLD:
                return CURSOR_GRABBING
            self.moved = True

        if self.state == DRAGGING_CARTOUCHE:
            px, py = self._press_screen
            ox, oy = self._press_value
            self.diagram.set_cartouche_offset(self.index, ox + (sx - px), oy + (sy - py))
            return CURSOR_GRABBING

        x, t = self.view.to_spacetime(sx, sy)
        if self.diagram.move_frame(self.index, x, t):
            return CURSOR_GRABBING
        return CURSOR_NOT_ALLOWED

    def release(self, sx: float, sy: float) -> str:
        if self.state != IDLE:
            self.move(sx, sy)
        self._finish()
        return CURSOR_GRAB if self.diagram.frame_at_screen(self.view, sx, sy) is not None else CURSOR_DEFAULT

    def cancel(self) -> str:
        """Abort the drag and put the frame or info box back where the press found it."""
        if self.state == DRAGGING_CARTOUCHE:
            self.diagram.set_cartouche_offset(self.index, *self._press_value)
        elif self.state in (DRAGGING_NEW_CONE, DRAGGING_EXISTING_CONE):
            x, t = self._press_value
            self.diagram.move_frame(self.index, x, t)
        self._finish()
        return CURSOR_DEFAULT

    def delete_selected(self) -> List[int]:
        """Delete the selected frame and its descendants, ending any drag first."""
        self.cancel()
        return self.diagram.delete_frame(self.diagram.selected_index)

    def _finish(self) -> None:
        self.state = IDLE
        self.index = None
        self.moved = False
