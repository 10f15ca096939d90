#!/usr/bin/env python3
"""
Gravity sandbox application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a pygame rendering thread (the canvas) and the Dear PyGui
  control window (running on the main thread).
- Both talk to one SimulationController that owns masses, versions, fronts and
  every simulated object; all access goes through its re-entrant lock.

Threading model
- PygameRenderer runs in a background thread: it handles canvas input, ticks the
  simulation and draws a snapshot of the scene.
- The UI class runs in the main thread via Dear PyGui. It changes the active tool and
  settings and refreshes its read-outs on a periodic frame callback.

Canvas controls
- Mass / Black hole tools: left-click adds or grows, right-click shrinks or removes.
- Spacecraft / Laser tools: press, drag to aim, release to launch; right-click or
  Escape cancels.
- Clock / Geodesic tools: left-click to place.
- Space toggles pause.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python gravitation_app.py`
"""

import argparse
import logging
import math
import time
import threading
from typing import Optional, Tuple

import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from gravitation.constants import (
    BACKGROUND_COLOR,
    BLACK_HOLE_COLOR,
    CLOCK_COLOR,
    FRONT_COLOR,
    GEODESIC_COLOR,
    GRID_COLOR,
    HORIZON_COLOR,
    MASS_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    SPACECRAFT_COLOR,
)
from gravitation.physics import calculate_event_horizon
from gravitation.simulation import SimulationController
from gravitation.utils import try_float

logger = logging.getLogger(__name__)

TOOLS = ["Mass", "Black hole", "Spacecraft", "Laser", "Clock", "Geodesic"]
DRAG_TOOLS = ("Spacecraft", "Laser")


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: handles canvas input, ticks the simulation, draws the scene.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.surface = None
        self.clock = None
        self.tool = "Mass"
        self.aim_start: Optional[Tuple[int, int]] = None
        self.show_grid_versions = False
        self.running = True

    def set_tool(self, tool: str) -> None:
        self.tool = tool
        self.aim_start = None

    def run(self):
        pygame.init()
        pygame.display.set_caption("Gravity Sandbox - Canvas")
        cfg = self.sim.config
        self.surface = pygame.display.set_mode((cfg.canvas_width, cfg.canvas_height))
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.sim.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events()
            self.sim.tick(real_dt)
            self.draw()
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.aim_start = None
                elif event.key == pygame.K_SPACE:
                    self.sim.toggle_play()

            elif event.type == pygame.MOUSEBUTTONDOWN:
                self.on_press(event.button, event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.on_release(event.pos)

    def on_press(self, button: int, pos: Tuple[int, int]):
        x, y = pos
        right = button == 3
        if self.tool in DRAG_TOOLS:
            if right:
                self.aim_start = None
            elif button == 1:
                self.aim_start = pos
            return
        if button not in (1, 3):
            return
        if self.tool == "Mass":
            self.sim.add_mass(x, y, is_right_click=right)
        elif self.tool == "Black hole":
            self.sim.add_black_hole(x, y, is_right_click=right)
        elif right:
            return
        elif self.tool == "Clock":
            self.sim.add_clock(x, y)
        elif self.tool == "Geodesic":
            if self.sim.add_geodesic(x, y) is None:
                logger.info("No geodesic at (%d, %d): field too weak or curve too short", x, y)

    def on_release(self, pos: Tuple[int, int]):
        if self.aim_start is None:
            return
        sx, sy = self.aim_start
        self.aim_start = None
        dx, dy = pos[0] - sx, pos[1] - sy
        if self.tool == "Spacecraft":
            self.sim.add_spacecraft(sx, sy, dx, dy)
        elif self.tool == "Laser":
            self.sim.add_laser(sx, sy, dx, dy)

    def draw_grid(self, surf):
        cfg = self.sim.config
        versions = self.sim.versions.grid if self.show_grid_versions else None
        top = max(1, self.sim.versions.current_version)
        for gx in range(0, cfg.canvas_width + 1, cfg.spacing):
            pygame.draw.line(surf, GRID_COLOR, (gx, 0), (gx, cfg.canvas_height), 1)
        for gy in range(0, cfg.canvas_height + 1, cfg.spacing):
            pygame.draw.line(surf, GRID_COLOR, (0, gy), (cfg.canvas_width, gy), 1)
        if versions is None:
            return
        # Shade each cell by how recent the version it has seen is
        for i in range(versions.shape[0]):
            for j in range(versions.shape[1]):
                v = int(versions[i, j])
                if v <= 0:
                    continue
                shade = int(20 + 60 * v / top)
                rect = pygame.Rect(i * cfg.spacing + 1, j * cfg.spacing + 1, cfg.spacing - 1, cfg.spacing - 1)
                pygame.draw.rect(surf, (shade // 3, shade // 2, shade), rect)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        self.draw_grid(surf)

        scene = self.sim.snapshot()
        cfg = self.sim.config

        # Propagation fronts
        for front, radius in scene.fronts:
            r = int(radius)
            if 0 < r < SAFE_COORD_LIMIT:
                color = FRONT_COLOR if front.mass_change >= 0 else (255, 110, 110)
                gfxdraw.aacircle(surf, int(front.x), int(front.y), r, color)

        # Geodesics
        for pts, widths in zip(scene.geodesics, scene.geodesic_widths):
            for a, b, width in zip(pts, pts[1:], widths):
                pa, pb = _safe_point(a), _safe_point(b)
                if pa and pb:
                    pygame.draw.line(surf, GEODESIC_COLOR, pa, pb, max(1, int(round(width))))

        # Masses and black holes
        for m in scene.masses:
            p = _safe_point((m.x, m.y))
            if p is None:
                continue
            if m.type == "blackhole":
                horizon = int(calculate_event_horizon(m.mass, cfg.G, cfg.c))
                gfxdraw.filled_circle(surf, p[0], p[1], max(4, min(horizon, 200)), BLACK_HOLE_COLOR)
                gfxdraw.aacircle(surf, p[0], p[1], max(4, min(horizon, 200)), HORIZON_COLOR)
            else:
                r = max(3, int(math.sqrt(m.mass) / 6))
                gfxdraw.filled_circle(surf, p[0], p[1], r, MASS_COLOR)
                gfxdraw.aacircle(surf, p[0], p[1], r, (0, 0, 0))

        # Spacecraft
        for x, y, trail in scene.spacecrafts:
            pts = [p for p in (_safe_point(q) for q in trail) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, SPACECRAFT_COLOR, False, pts)
            p = _safe_point((x, y))
            if p:
                gfxdraw.filled_circle(surf, p[0], p[1], 3, SPACECRAFT_COLOR)

        # Lasers
        for x, y, trail, color in scene.lasers:
            pts = [p for p in (_safe_point(q) for q in trail) if p]
            if len(pts) > 1:
                pygame.draw.lines(surf, color, False, pts, 2)

        # Clocks
        for c in scene.clocks:
            p = _safe_point((c.x, c.y))
            if p is None:
                continue
            ring = SELECTION_COLOR if c.selected else CLOCK_COLOR
            gfxdraw.aacircle(surf, p[0], p[1], 10, ring)
            hand = (c.local_time % 60.0) / 60.0 * 2 * math.pi
            tip = (p[0] + 8 * math.sin(hand), p[1] - 8 * math.cos(hand))
            pygame.draw.line(surf, ring, p, _safe_point(tip) or p, 1)
            draw_text(surf, f"{c.local_time:.1f}s", p[0] + 12, p[1] - 8, ring)

        # Aim preview
        if self.aim_start is not None:
            mouse = pygame.mouse.get_pos()
            pygame.draw.line(surf, SELECTION_COLOR, self.aim_start, mouse, 1)
            draw_arrow_head(surf, mouse, self.aim_start, SELECTION_COLOR)

        # HUD text
        draw_text(surf, f"Tool: {self.tool} | Space: Pause/Play | Esc: cancel", 10, 10, (200, 200, 200))
        draw_text(surf, f"t = {scene.sim_time:.1f}s  version {scene.current_version}  "
                        f"[{'Playing' if scene.playing else 'Paused'}]", 10, 30, (200, 200, 200))

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
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

def draw_arrow_head(surface, tip, tail, color):
    # Small triangle for arrow head
    tip_s = _safe_point(tip)
    tail_s = _safe_point(tail)
    if tip_s is None or tail_s is None or tip_s == tail_s:
        return
    ang = math.atan2(tip_s[1] - tail_s[1], tip_s[0] - tail_s[0])
    size = 8
    left = (tip_s[0] - size * math.cos(ang - math.pi / 6), tip_s[1] - size * math.sin(ang - math.pi / 6))
    right = (tip_s[0] - size * math.cos(ang + math.pi / 6), tip_s[1] - size * math.sin(ang + math.pi / 6))
    left_s = _safe_point(left)
    right_s = _safe_point(right)
    if left_s and right_s:
        pygame.draw.polygon(surface, color, [tip_s, left_s, right_s])

# ============================================================
# Dear PyGui UI
# ============================================================

GEODESIC_FIELDS = [
    ("curve_step", "Curve step (px)"),
    ("max_steps", "Max steps"),
    ("min_gradient_threshold", "Min gradient"),
    ("stop_gradient_threshold", "Stop gradient"),
    ("min_points", "Min points"),
    ("min_distance_between_points", "Min point spacing"),
    ("max_angle", "Max angle (deg)"),
    ("bounding_box_multiplier", "Bounding box x"),
    ("thickness_amplification", "Line thickness x"),
]


class UI:
    """
    Dear PyGui interface: tool selection, simulation controls, geodesic settings, read-outs.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.info_id = None
        self.geodesic_ids = {}
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic read-out refresh (every 6 frames)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Gravity Sandbox - Controls', width=420, height=640)

        with dpg.window(label="Controls", width=400, height=620, pos=(10, 10), tag="main_window"):
            dpg.add_text("Tool")
            dpg.add_radio_button(TOOLS, default_value=self.renderer.tool,
                                 callback=lambda s, a, u: self._set_tool(a))
            dpg.add_separator()

            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_button(label="Clear objects", callback=self._clear_objects)
                dpg.add_button(label="Reset", callback=self._reset)
            dpg.add_checkbox(label="Show grid versions",
                             callback=lambda s, a, u: setattr(self.renderer, "show_grid_versions", bool(a)))
            dpg.add_input_text(label="Max speed (px/s)", default_value=str(self.sim.config.max_speed),
                               width=120, on_enter=True, callback=self._on_max_speed)
            dpg.add_separator()

            dpg.add_text("Geodesic settings")
            settings = self.sim.geodesic_manager.settings.to_dict()
            for name, label in GEODESIC_FIELDS:
                self.geodesic_ids[name] = dpg.add_input_text(label=label, default_value=str(settings[name]),
                                                             width=120)
            dpg.add_button(label="Apply geodesic settings", callback=self._apply_geodesic_settings)
            dpg.add_separator()

            self.info_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("Ready.")

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _set_tool(self, tool: str):
        self.renderer.set_tool(tool)
        self._set_status(f"Tool: {tool}")

    def _toggle_play(self):
        state = "Playing" if self.sim.toggle_play() else "Paused"
        self._set_status(f"Simulation {state}.")

    def _step_once(self):
        self.sim.step_once()
        self._set_status("Stepped one frame.")

    def _clear_objects(self):
        self.sim.clear_objects()
        self._set_status("Cleared spacecraft, lasers, clocks and geodesics.")

    def _reset(self):
        self.sim.reset()
        self._set_status("Simulation reset.")

    def _on_max_speed(self, sender, app_data, user_data=None):
        val = try_float(app_data)
        if val is None or val <= 0:
            self._set_error("Max speed must be a positive number.")
            return
        self.sim.set_max_speed(val)
        self._set_status(f"Max speed set to {val:g} px/s.")

    def _apply_geodesic_settings(self):
        values = {name: dpg.get_value(item) for name, item in self.geodesic_ids.items()}
        bad = [name for name, v in values.items() if try_float(v) is None]
        if bad:
            self._set_error(f"Invalid value for: {', '.join(bad)}")
            return
        self.sim.apply_geodesic_settings(**values)
        self._set_status("Geodesic settings applied.")

    def _sync_ui_with_sim(self):
        info = self.sim.debug_info()
        dpg.set_value(self.info_id,
                      "Masses: {masses} (black holes: {black_holes})\n"
                      "Spacecraft: {spacecrafts} (captured: {captured})\n"
                      "Lasers: {lasers}  Clocks: {clocks}  Geodesics: {geodesics}\n"
                      "Fronts: {fronts}  Version: {version}  History: {history}\n"
                      "Reference clock: {reference_time:.1f}s".format(**info))
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def main():
    parser = argparse.ArgumentParser(description="Gravity sandbox with causal propagation")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    setup_logging(args.log_level)

    sim = SimulationController()
    renderer = PygameRenderer(sim)
    renderer.start()

    ui = UI(sim, renderer)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    try:
        dpg.start_dearpygui()
    finally:
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()

if __name__ == "__main__":
    main()
