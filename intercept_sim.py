#!/usr/bin/env python3
"""
Intercept Simulator application entry point and viewer/control-panel coordination.

What this module does
- Starts the SimulationRunner thread that ticks the SimulationClock at 30 Hz.
- Starts a Pygame rendering thread (tactical map) that draws the latest published snapshot.
- Runs the Dear PyGui control panel on the main thread: flight mode, arm switch,
  pause/resume, reset, emergency stop, tracking view, zoom, trail length, telemetry
  readouts and the event log. Arming and emergency stop open a confirmation dialog first.

Threading model
- SimulationClock owns all engine state. The renderer and the control panel never touch
  it directly: they read clock.get_snapshot() and send commands with
  clock.submit_command(), both safe to call while a tick is in flight.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python intercept_sim.py` (or the `intercept-sim` script)

Two windows will open: the tactical map (Pygame) and the controls (Dear PyGui). Closing
either will shut down the application cleanly.
"""

import argparse
import logging
import math
import threading

import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from intercept_core import constants as C
from intercept_core.camera import Camera2D
from intercept_core.clock import SimulationClock, SimulationRunner
from intercept_core.commands import (
    EmergencyStop,
    FlightMode,
    Pause,
    Reset,
    Resume,
    SetArmed,
    SetFlightMode,
    SetTrackingView,
    SetTrailLength,
    SetZoom,
    TrackingView,
)
from intercept_core.geometry import clamp, polar_to_cartesian
from intercept_core.readouts import format_log_entry, hud_lines, telemetry_lines
from intercept_core.settings import SimulationSettings

log = logging.getLogger("intercept_sim")

SAFE_COORD_LIMIT = 30000


# ============================================================
# Pygame Renderer Thread
# ============================================================

class MapRenderer(threading.Thread):
    """
    Pygame loop: draws grid, engagement rings, trails, agents and the HUD.
    Mouse wheel and +/- adjust zoom, space toggles pause, R resets.
    """
    def __init__(self, clock: SimulationClock):
        super().__init__(name="map-renderer", daemon=True)
        self.clock = clock
        self.camera = Camera2D()
        self.surface = None
        self.frame_clock = None
        self.font = None
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Intercept Simulator - Tactical Map")
        self.surface = pygame.display.set_mode((C.VIEW_WIDTH, C.VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(C.VIEW_WIDTH, C.VIEW_HEIGHT)
        self.frame_clock = pygame.time.Clock()
        try:
            self.font = pygame.font.SysFont("consolas", 16)
        except Exception:
            self.font = pygame.font.Font(None, 16)

        while self.running:
            snap = self.clock.get_snapshot()
            self.handle_events(snap)
            self.camera.follow(snap)
            self.draw(snap)
            self.frame_clock.tick(60)

        pygame.quit()

    def handle_events(self, snap):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)
            elif event.type == pygame.MOUSEWHEEL:
                self._zoom(snap, C.ZOOM_STEP if event.y > 0 else -C.ZOOM_STEP)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.clock.submit_command(Resume() if snap.paused else Pause())
                elif event.key == pygame.K_r:
                    self.clock.submit_command(Reset())
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._zoom(snap, C.ZOOM_STEP)
                elif event.key == pygame.K_MINUS:
                    self._zoom(snap, -C.ZOOM_STEP)

    def _zoom(self, snap, step):
        self.clock.submit_command(SetZoom(clamp(snap.zoom + step, C.MIN_ZOOM, C.MAX_ZOOM)))

    def draw_grid(self, surf):
        w, h = self.camera.viewport_size
        for spacing, color in ((50, C.GRID_COLOR), (200, C.GRID_MAJOR_COLOR)):
            top_left = self.camera.screen_to_world((0, 0))
            bottom_right = self.camera.screen_to_world((w, h))
            x = math.floor(top_left[0] / spacing) * spacing
            while x <= bottom_right[0]:
                sx, _ = self.camera.world_to_screen((x, 0))
                pygame.draw.line(surf, color, (sx, 0), (sx, h), 1)
                x += spacing
            y = math.floor(top_left[1] / spacing) * spacing
            while y <= bottom_right[1]:
                _, sy = self.camera.world_to_screen((0, y))
                pygame.draw.line(surf, color, (0, sy), (w, sy), 1)
                y += spacing

    def draw_agent(self, surf, agent, color):
        p = _safe_point(self.camera.world_to_screen(agent.position))
        if p is None:
            return
        size = self.camera.scale_length(12)
        # heading 0 points along +x; polar_to_cartesian measures from "up"
        nose = polar_to_cartesian(p, agent.heading + 90.0, size)
        left = polar_to_cartesian(p, agent.heading + 90.0 + 140.0, size * 0.7)
        right = polar_to_cartesian(p, agent.heading + 90.0 - 140.0, size * 0.7)
        pts = [_safe_point(q) for q in (nose, left, right)]
        if all(pts):
            gfxdraw.filled_polygon(surf, pts, color)
            gfxdraw.aapolygon(surf, pts, color)

    def draw_trail(self, surf, trail, color):
        pts = [sp for sp in (_safe_point(self.camera.world_to_screen(p)) for p in trail) if sp]
        if len(pts) > 1:
            pygame.draw.aalines(surf, color, False, pts)

    def draw(self, snap):
        surf = self.surface
        surf.fill(C.BACKGROUND_COLOR)
        self.draw_grid(surf)

        ip = _safe_point(self.camera.world_to_screen(snap.interceptor.position))
        tp = _safe_point(self.camera.world_to_screen(snap.target.position))

        # Engagement zones
        if ip:
            gfxdraw.aacircle(surf, ip[0], ip[1], self.camera.scale_length(150), C.INTERCEPTOR_COLOR)
            gfxdraw.aacircle(surf, ip[0], ip[1], self.camera.scale_length(300), C.GRID_MAJOR_COLOR)
        if tp:
            gfxdraw.aacircle(surf, tp[0], tp[1], self.camera.scale_length(C.INTERCEPT_RANGE), C.TARGET_COLOR)
        if ip and tp:
            pygame.draw.aaline(surf, C.STATUS_COLORS[snap.status.value], ip, tp)

        self.draw_trail(surf, snap.interceptor_trail, C.INTERCEPTOR_COLOR)
        self.draw_trail(surf, snap.target_trail, C.TARGET_COLOR)
        self.draw_agent(surf, snap.interceptor, C.INTERCEPTOR_COLOR)
        self.draw_agent(surf, snap.target, C.TARGET_COLOR)

        y = 10
        for i, line in enumerate(hud_lines(snap)):
            color = C.STATUS_COLORS[snap.status.value] if i == 0 else C.TEXT_COLOR
            surf.blit(self.font.render(line, True, color), (10, y))
            y += 20
        surf.blit(self.font.render("Wheel/+/-: zoom | Space: pause | R: reset", True, C.GRID_MAJOR_COLOR),
                  (10, self.camera.viewport_size[1] - 24))

        pygame.display.flip()


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


# ============================================================
# Dear PyGui Control Panel
# ============================================================

class ControlPanel:
    """
    Dear PyGui interface: flight controls, view controls, telemetry and event log.
    """
    def __init__(self, clock: SimulationClock, renderer: MapRenderer):
        self.clock = clock
        self.renderer = renderer
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (~10Hz)."""
        try:
            current = dpg.get_frame_count()
        except Exception:
            current = 0
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Intercept Simulator - Controls", width=560, height=720)

        with dpg.window(label="Controls", width=540, height=700, pos=(10, 10), tag="main_window"):
            dpg.add_text("", tag="status_text")
            dpg.add_separator()

            dpg.add_text("Flight Control")
            with dpg.group(horizontal=True):
                dpg.add_combo([m.value for m in FlightMode], default_value=C.DEFAULT_FLIGHT_MODE, width=140,
                              callback=lambda s, a, u: self.clock.submit_command(SetFlightMode(a)),
                              tag="mode_combo")
                dpg.add_checkbox(label="Armed", default_value=True, callback=self._on_armed,
                                 tag="armed_checkbox")
                dpg.add_button(label="EMERGENCY STOP",
                               callback=lambda: dpg.configure_item("estop_confirm", show=True))

            with dpg.group(horizontal=True):
                dpg.add_button(label="Pause/Resume", callback=self._toggle_pause)
                dpg.add_button(label="Reset", callback=lambda: self.clock.submit_command(Reset()))

            dpg.add_separator()
            dpg.add_text("Map View")
            with dpg.group(horizontal=True):
                dpg.add_radio_button([v.value for v in TrackingView], default_value=TrackingView.BOTH.value,
                                     horizontal=True,
                                     callback=lambda s, a, u: self.clock.submit_command(SetTrackingView(a)))
            dpg.add_slider_float(label="Zoom", min_value=C.MIN_ZOOM, max_value=C.MAX_ZOOM, default_value=1.0,
                                 width=300, tag="zoom_slider",
                                 callback=lambda s, a, u: self.clock.submit_command(SetZoom(a)))
            dpg.add_input_int(label="Trail length", default_value=C.TRAIL_CAPACITY, min_value=C.MIN_TRAIL_CAPACITY,
                              max_value=C.MAX_TRAIL_CAPACITY, min_clamped=True, max_clamped=True, width=100,
                              callback=lambda s, a, u: self.clock.submit_command(SetTrailLength(int(a))),
                              tag="trail_length_input")

            dpg.add_separator()
            dpg.add_text("Engagement")
            for i in range(3):
                dpg.add_text("", tag=f"hud_{i}")
            dpg.add_text("Telemetry")
            for i in range(5):
                dpg.add_text("", tag=f"telemetry_{i}")
            dpg.add_text("", tag="signal_text")

            dpg.add_separator()
            dpg.add_text("Event Log")
            dpg.add_listbox(items=[], width=520, num_items=C.LOG_CAPACITY, tag="log_list")

        # Arming and emergency stop ask before acting
        with dpg.window(label="Confirm", modal=True, show=False, no_resize=True, pos=(120, 200), tag="arm_confirm"):
            dpg.add_text("ARM SYSTEM - Are you sure you want to arm the system?")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Arm", width=90, callback=self._confirm_arm)
                dpg.add_button(label="Cancel", width=90, callback=lambda: dpg.configure_item("arm_confirm", show=False))

        with dpg.window(label="Confirm", modal=True, show=False, no_resize=True, pos=(120, 200), tag="estop_confirm"):
            dpg.add_text("EMERGENCY STOP - This will immediately halt all operations. Continue?")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Stop", width=90, callback=self._confirm_emergency_stop)
                dpg.add_button(label="Cancel", width=90,
                               callback=lambda: dpg.configure_item("estop_confirm", show=False))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _on_armed(self, sender, value, user_data=None):
        if not value:
            self.clock.submit_command(SetArmed(False))
            return
        # Stay unchecked until the operator confirms
        dpg.set_value("armed_checkbox", False)
        dpg.configure_item("arm_confirm", show=True)

    def _confirm_arm(self):
        dpg.configure_item("arm_confirm", show=False)
        self.clock.submit_command(SetArmed(True))

    def _confirm_emergency_stop(self):
        dpg.configure_item("estop_confirm", show=False)
        self.clock.submit_command(EmergencyStop())

    def _toggle_pause(self):
        snap = self.clock.get_snapshot()
        self.clock.submit_command(Resume() if snap.paused else Pause())

    def _sync_ui_with_sim(self):
        """Periodic UI update from the latest published snapshot."""
        if not self.renderer.is_alive():
            dpg.stop_dearpygui()
            return
        snap = self.clock.get_snapshot()
        dpg.set_value("status_text", f"Tick {snap.tick}  {'PAUSED' if snap.paused else 'RUNNING'}")
        dpg.set_value("mode_combo", snap.flight_mode)
        dpg.set_value("armed_checkbox", snap.armed)
        dpg.set_value("zoom_slider", snap.zoom)
        dpg.set_value("trail_length_input", snap.trail_length)
        for i, line in enumerate(hud_lines(snap)):
            dpg.set_value(f"hud_{i}", line)
        for i, line in enumerate(telemetry_lines(snap)):
            dpg.set_value(f"telemetry_{i}", line)
        if snap.signal_history:
            dpg.set_value("signal_text", f"SIGNAL {snap.signal_history[-1].value:.1f}%")
        dpg.configure_item("log_list", items=[format_log_entry(e) for e in snap.log])
        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================

def main(argv=None):
    ap = argparse.ArgumentParser(description="Interceptor/target engagement simulator.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for telemetry jitter")
    ap.add_argument("--trail", type=int, default=C.TRAIL_CAPACITY, help="Trail length (30-50)")
    ap.add_argument("--respawn-ticks", type=int, default=C.RESPAWN_AFTER_TICKS,
                    help="Respawn after this many INTERCEPTED ticks (0 disables)")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = SimulationSettings().with_overrides(
        seed=args.seed,
        trail_capacity=args.trail,
        respawn_after_ticks=args.respawn_ticks,
    )
    clock = SimulationClock(settings)
    runner = SimulationRunner(clock)
    renderer = MapRenderer(clock)

    runner.start()
    renderer.start()
    ControlPanel(clock, renderer)
    log.info("viewer started (%.0f Hz)", settings.tick_hz)

    try:
        dpg.start_dearpygui()
    finally:
        renderer.running = False
        renderer.join(timeout=2.0)
        runner.stop(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
