#!/usr/bin/env python3
"""
Light-cone diagram editor entry point.

What this module does
- Runs a pygame rendering thread for the spacetime canvas and a Dear PyGui control
  window on the main thread, like the gravity sandbox.
- Both share one DiagramSession that owns the FrameDiagram, display config and
  notes; all access goes through its re-entrant lock.

Canvas controls
- Left press inside a future light cone creates a frame and drags it.
- Left drag on a frame moves it (only where it stays causally reachable).
- Left drag on an info box moves the box.
- Right-click or Escape cancels the current drag.
- Delete removes the selected frame and its descendants.
- T loads the twin paradox, R resets, S saves, L loads, P toggles past cones.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python lightcone_app.py`
"""

import argparse
import logging
import threading
from typing import Dict, Optional, Tuple

import pygame
import dearpygui.dearpygui as dpg

from lightcone.config import DiagramConfig
from lightcone.constants import (
    AXIS_COLOR,
    BACKGROUND_COLOR,
    CONE_COLOR,
    FRAME_COLOR,
    ISOCHRONE_COLOR,
    PAST_CONE_COLOR,
    RESOLUTION_PIXEL_SIZES,
    SAFE_COORD_LIMIT,
    SELECTED_COLOR,
    TEXT_COLOR,
    TRAJECTORY_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from lightcone.diagram_store import DiagramStore
from lightcone.errors import LightConeError
from lightcone.frames import FrameDiagram
from lightcone.heatmap import compute_heatmap
from lightcone.interaction import CURSOR_DEFAULT, DragController
from lightcone.trajectories import (
    calculate_cumulative_trajectory,
    calculate_isochrone_points,
    generate_twin_paradox_demo,
)
from lightcone.utils import try_float
from lightcone.viewport import SpacetimeView

logger = logging.getLogger(__name__)

CARTOUCHE_SIZE = (150, 58)
CARTOUCHE_GAP = (12, -70)

CURSORS = {
    "grab": pygame.SYSTEM_CURSOR_HAND,
    "grabbing": pygame.SYSTEM_CURSOR_SIZEALL,
    "not-allowed": pygame.SYSTEM_CURSOR_NO,
    CURSOR_DEFAULT: pygame.SYSTEM_CURSOR_CROSSHAIR,
}


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


# ============================================================
# Shared state
# ============================================================

class DiagramSession:
    """
    Shared state between the UI thread (Dear PyGui) and the renderer thread (pygame).
    """
    def __init__(self, store: DiagramStore, width: int, height: int):
        self.lock = threading.RLock()
        self.running = True
        self.store = store
        self.diagram = FrameDiagram()
        self.config = DiagramConfig()
        self.view = SpacetimeView(width, height)
        self.drag = DragController(self.diagram, self.view)
        self.comments = ""
        self.status = "Ready."

    def _rebind(self, diagram: FrameDiagram) -> None:
        self.diagram = diagram
        self.drag = DragController(diagram, self.view)

    def delete_selected(self) -> str:
        with self.lock:
            deleted = self.drag.delete_selected()
            if not deleted:
                return "The origin frame cannot be deleted."
            return f"Deleted {len(deleted)} frame(s)."

    def load_twin_paradox(self) -> str:
        with self.lock:
            self.drag.cancel()
            self.diagram.load_twin_paradox()
            home = self.diagram.physics_of(1).cumulative_proper_time
            traveller = self.diagram.physics_of(3).cumulative_proper_time
            return f"Twin paradox: home twin aged {home:.1f}, traveller {traveller:.1f}."

    def twin_demo_summary(self, distance: float = 100, total_time: float = 300, phase: float = 0.15) -> str:
        frames = generate_twin_paradox_demo(distance, total_time, phase)
        total = calculate_cumulative_trajectory(frames).total_physics
        return (f"Round trip {distance:g} / {total_time:g}: proper time {total.total_proper_time:.1f}, "
                f"dilation {total.time_dilation_percentage:.1f}%")

    def reset(self) -> str:
        with self.lock:
            self.drag.cancel()
            self.diagram.reset()
            return "Diagram reset."

    def save(self) -> str:
        with self.lock:
            ok = self.store.save_diagram(self.diagram, self.config, self.comments)
            self.store.save_app_state({"viewport": list(self.view.viewport_size),
                                       "selected": self.diagram.selected_index})
        return f"Saved to {self.store.storage_dir}." if ok else "Save failed (see log)."

    def load(self) -> str:
        loaded = self.store.load_diagram()
        if loaded is None:
            return "No stored diagram."
        diagram, config, comments = loaded
        with self.lock:
            self._rebind(diagram)
            self.config = config
            self.comments = comments
        return f"Loaded {len(diagram)} frame(s)."

    def selected_summary(self) -> str:
        with self.lock:
            index = self.diagram.selected_index
            frame = self.diagram.frames[index]
            physics = self.diagram.physics_of(index)
        return (f"Frame {index}: x={frame.x:.1f} t={frame.t:.1f}\n"
                f"velocity {physics.cumulative_velocity:+.3f}c\n"
                f"proper time {physics.cumulative_proper_time:.2f}\n"
                f"coordinate time {physics.total_coordinate_time:.2f}\n"
                f"segment a={physics.segment_acceleration:.4f} v={physics.segment_velocity:.3f}c")


# ============================================================
# Pygame Renderer Thread
# ============================================================

class DiagramRenderer(threading.Thread):
    """
    Pygame loop: translates pointer input into drag transitions and draws the diagram.
    """
    def __init__(self, session: DiagramSession):
        super().__init__(daemon=True)
        self.session = session
        self.surface = None
        self.clock = None
        self.cursor = CURSOR_DEFAULT
        self.cartouche_rects: Dict[int, pygame.Rect] = {}
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Light Cones - Canvas")
        w, h = self.session.view.viewport_size
        self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        while self.running and self.session.running:
            self.handle_events()
            self.draw()
            self.clock.tick(60)
        pygame.quit()

    def _set_cursor(self, cursor: str) -> None:
        if cursor != self.cursor:
            self.cursor = cursor
            pygame.mouse.set_system_cursor(CURSORS.get(cursor, pygame.SYSTEM_CURSOR_ARROW))

    def cartouche_at(self, pos: Tuple[int, int]) -> Optional[int]:
        for index in sorted(self.cartouche_rects, reverse=True):
            if self.cartouche_rects[index].collidepoint(pos):
                return index
        return None

    def handle_events(self):
        s = self.session
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                s.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                with s.lock:
                    s.view.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                self.on_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                with s.lock:
                    if event.button == 1:
                        cursor = s.drag.press(*event.pos, cartouche_index=self.cartouche_at(event.pos))
                    elif event.button == 3:
                        cursor = s.drag.cancel()
                    else:
                        continue
                self._set_cursor(cursor)

            elif event.type == pygame.MOUSEMOTION:
                with s.lock:
                    cursor = s.drag.move(*event.pos)
                self._set_cursor(cursor)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                with s.lock:
                    cursor = s.drag.release(*event.pos)
                self._set_cursor(cursor)

    def on_key(self, key: int):
        s = self.session
        if key == pygame.K_ESCAPE:
            with s.lock:
                self._set_cursor(s.drag.cancel())
        elif key in (pygame.K_DELETE, pygame.K_BACKSPACE):
            s.status = s.delete_selected()
        elif key == pygame.K_t:
            s.status = s.load_twin_paradox()
        elif key == pygame.K_r:
            s.status = s.reset()
        elif key == pygame.K_s:
            s.status = s.save()
        elif key == pygame.K_l:
            s.status = s.load()
        elif key == pygame.K_p:
            with s.lock:
                s.config.show_past_cone = not s.config.show_past_cone

    def draw_heatmap(self, surf):
        s = self.session
        pixels = compute_heatmap(s.diagram.frames, s.view, s.config)
        block = pygame.surfarray.make_surface(pixels)
        ps = s.config.pixel_size
        surf.blit(pygame.transform.scale(block, (pixels.shape[0] * ps, pixels.shape[1] * ps)), (0, 0))

    def draw_axes(self, surf):
        view = self.session.view
        w, h = view.viewport_size
        ox, oy = view.to_screen(0, 0)
        pygame.draw.line(surf, AXIS_COLOR, (0, oy), (w, oy), 1)
        pygame.draw.line(surf, AXIS_COLOR, (ox, 0), (ox, h), 1)

    def draw_cone_edges(self, surf, frame, color):
        view = self.session.view
        reach = view.viewport_size[1] / view.scale
        apex = _safe_point(view.to_screen(frame.x, frame.t))
        if apex is None:
            return
        for direction in (-1, 1):
            end = _safe_point(view.to_screen(frame.x + direction * reach, frame.t + reach))
            if end:
                pygame.draw.aaline(surf, color, apex, end)
            if self.session.config.show_past_cone:
                end = _safe_point(view.to_screen(frame.x + direction * reach, frame.t - reach))
                if end:
                    pygame.draw.aaline(surf, PAST_CONE_COLOR, apex, end)

    def draw_cartouche(self, surf, index, frame, selected):
        s = self.session
        p = s.view.to_screen(frame.x, frame.t)
        dx, dy = s.diagram.cartouche_offset(index)
        rect = pygame.Rect(int(p[0] + CARTOUCHE_GAP[0] + dx), int(p[1] + CARTOUCHE_GAP[1] + dy), *CARTOUCHE_SIZE)
        self.cartouche_rects[index] = rect
        pygame.draw.rect(surf, (20, 22, 30), rect)
        pygame.draw.rect(surf, SELECTED_COLOR if selected else FRAME_COLOR, rect, 1)
        draw_text(surf, f"#{index} v={frame.cumulative_velocity:+.3f}c", rect.x + 4, rect.y + 4, TEXT_COLOR)
        draw_text(surf, f"tau={frame.cumulative_proper_time:.1f}", rect.x + 4, rect.y + 21, TEXT_COLOR)
        draw_text(surf, f"t={frame.total_coordinate_time:.1f}", rect.x + 4, rect.y + 38, TEXT_COLOR)

    def draw(self):
        surf = self.surface
        s = self.session
        surf.fill(BACKGROUND_COLOR)
        with s.lock:
            self.draw_heatmap(surf)
            self.draw_axes(surf)
            frames = s.diagram.frames
            selected = s.diagram.selected_index

            for frame in frames:
                self.draw_cone_edges(surf, frame, CONE_COLOR)

            # Trajectories from each frame's source
            for index in range(1, len(frames)):
                pts = [p for p in (_safe_point(s.view.to_screen(q.x, q.t)) for q in s.diagram.trajectory_of(index)) if p]
                if len(pts) > 1:
                    pygame.draw.aalines(surf, TRAJECTORY_COLOR, False, pts)

            # Isochrone through the selected frame, centred on its chain's origin
            sel_frame = frames[selected]
            if selected > 0:
                iso = calculate_isochrone_points(sel_frame.cumulative_proper_time, frames[0], sel_frame,
                                                 s.view.viewport_size[0], s.view.scale)
                pts = [p for p in (_safe_point(s.view.to_screen(q.x, q.t)) for q in iso) if p]
                if len(pts) > 1:
                    pygame.draw.aalines(surf, ISOCHRONE_COLOR, False, pts)

            self.cartouche_rects = {}
            for index, frame in enumerate(frames):
                p = _safe_point(s.view.to_screen(frame.x, frame.t))
                if p is None:
                    continue
                color = SELECTED_COLOR if index == selected else FRAME_COLOR
                pygame.draw.circle(surf, color, p, 5)
                if index > 0:
                    self.draw_cartouche(surf, index, frame, index == selected)

            draw_text(surf, "Drag inside a cone: new frame | Del: delete | T: twins | R: reset | S/L: save/load",
                      10, 10, TEXT_COLOR)
            draw_text(surf, s.status, 10, 30, TEXT_COLOR)

            # Speed needed to reach the pointer from the frame whose cone holds it
            mouse = pygame.mouse.get_pos()
            reach = s.diagram.velocity_ratio_at(*s.view.to_spacetime(*mouse))
            if reach is not None:
                index, ratio = reach
                draw_text(surf, f"v={ratio:.2f}c from #{index}", mouse[0] + 12, mouse[1] - 18, TEXT_COLOR)
        pygame.display.flip()


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 14)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: scenarios, heat-map settings, persistence and frame read-outs.
    """
    def __init__(self, session: DiagramSession):
        self.session = session
        self.status_msg_id = None
        self.info_id = None
        self.comments_id = None
        self.green_id = None
        self.red_id = None
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic read-out refresh (every 6 frames)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_session)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Light Cones - Controls', width=420, height=660)
        cfg = self.session.config

        with dpg.window(label="Controls", width=400, height=640, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Twin paradox", callback=self._twin_paradox)
                dpg.add_button(label="Round-trip analysis", callback=self._twin_demo)
            with dpg.group(horizontal=True):
                dpg.add_button(label="Delete selected", callback=self._delete_selected)
                dpg.add_button(label="Reset", callback=self._reset)
            dpg.add_separator()

            dpg.add_text("Heat map")
            dpg.add_radio_button([str(r) for r in sorted(RESOLUTION_PIXEL_SIZES)], horizontal=True,
                                 default_value=str(cfg.resolution), callback=self._on_resolution)
            self.green_id = dpg.add_input_text(label="Green limit (c)", default_value=str(cfg.green_limit), width=120)
            self.red_id = dpg.add_input_text(label="Red limit (c)", default_value=str(cfg.red_limit), width=120)
            dpg.add_button(label="Apply limits", callback=self._apply_limits)
            dpg.add_checkbox(label="Show past cones", default_value=cfg.show_past_cone,
                             callback=self._on_past_cone)
            dpg.add_separator()

            dpg.add_text("Notes")
            self.comments_id = dpg.add_input_text(multiline=True, width=380, height=90,
                                                  callback=self._on_comments)
            with dpg.group(horizontal=True):
                dpg.add_button(label="Save", callback=self._save)
                dpg.add_button(label="Load", callback=self._load)
            dpg.add_separator()

            self.info_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("Ready.")

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _set_status(self, msg: str, color=(180, 220, 180)):
        self.session.status = msg
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _twin_paradox(self):
        try:
            self._set_status(self.session.load_twin_paradox())
        except LightConeError as e:
            logger.warning("Twin paradox scenario failed: %s", e)
            self._set_error(str(e))

    def _twin_demo(self):
        self._set_status(self.session.twin_demo_summary())

    def _delete_selected(self):
        self._set_status(self.session.delete_selected())

    def _reset(self):
        self._set_status(self.session.reset())

    def _on_resolution(self, sender, app_data, user_data=None):
        with self.session.lock:
            self.session.config.resolution = int(app_data)
        self._set_status(f"Heat-map resolution {app_data}.")

    def _apply_limits(self):
        green = try_float(dpg.get_value(self.green_id))
        red = try_float(dpg.get_value(self.red_id))
        if green is None or red is None or not 0 <= green < red <= 1:
            self._set_error("Limits must satisfy 0 <= green < red <= 1.")
            return
        with self.session.lock:
            self.session.config.green_limit = green
            self.session.config.red_limit = red
        self._set_status("Heat-map limits applied.")

    def _on_past_cone(self, sender, app_data, user_data=None):
        with self.session.lock:
            self.session.config.show_past_cone = bool(app_data)

    def _on_comments(self, sender, app_data, user_data=None):
        with self.session.lock:
            self.session.comments = app_data

    def _save(self):
        self._set_status(self.session.save())

    def _load(self):
        self._set_status(self.session.load())
        with self.session.lock:
            dpg.set_value(self.comments_id, self.session.comments)
            dpg.set_value(self.green_id, str(self.session.config.green_limit))
            dpg.set_value(self.red_id, str(self.session.config.red_limit))

    def _sync_ui_with_session(self):
        dpg.set_value(self.info_id, self.session.selected_summary())
        dpg.set_value(self.status_msg_id, self.session.status)
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def main():
    parser = argparse.ArgumentParser(description="Light-cone diagram editor")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--width", type=int, default=VIEW_WIDTH)
    parser.add_argument("--height", type=int, default=VIEW_HEIGHT)
    parser.add_argument("--storage-dir", default=None)
    args = parser.parse_args()
    setup_logging(args.log_level)

    session = DiagramSession(DiagramStore(args.storage_dir), args.width, args.height)
    session.comments = session.store.load_comments()
    renderer = DiagramRenderer(session)
    renderer.start()

    ui = UI(session)
    dpg.set_value(ui.comments_id, session.comments)

    try:
        dpg.start_dearpygui()
    finally:
        session.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()

if __name__ == "__main__":
    main()
