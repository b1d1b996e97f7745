#!/usr/bin/env python3
"""
Simulation clock: the single authority over engine state.

What this module does
- SimulationClock owns both agents, their trails, the lock-status state machine, the
  telemetry channels, the signal history and the event log. tick() advances all of it by
  one logical step and publishes a frozen SimulationSnapshot.
- Operator commands are queued with submit_command() and applied at a tick boundary.
- SimulationRunner is a background thread that calls tick() at the configured rate.

Threading model
- Every mutation happens under one re-entrant lock. A tick holds the lock from the first
  queued command it drains until the snapshot is published, so commands never interleave
  with a tick and no consumer can observe the target moved but the interceptor not.
- get_snapshot() returns the last published snapshot. Snapshots are immutable and are
  replaced wholesale, so readers do not need the lock.

Time
- tick(now) takes the current time from the caller or the injected time source. The
  elapsed time folded into a tick is clamped to [0, max_tick_dt]; the first tick after
  start, reset or resume uses the nominal period, so pausing never accumulates drift and
  resuming never catches up on missed ticks.
"""

import logging
import random
import threading
import time
from collections import deque
from types import MappingProxyType
from typing import Callable, Deque, Optional

from .commands import (
    Command,
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
    parse_flight_mode,
    parse_tracking_view,
    parse_trail_length,
    parse_zoom,
)
from .data_models import Agent, EngagementSnapshot, LockStatus, Position, Severity, SignalSample, SimulationSnapshot
from .engagement import LOGGED_EDGES, LockStateMachine, measure
from .errors import InvalidCommandError
from .event_log import EventLog
from .geometry import clamp, distance
from .history import HistoryBuffer
from .kinematics import PursuitGuidance, TargetPattern
from .settings import SimulationSettings
from .telemetry import TelemetryJitter

log = logging.getLogger(__name__)

EDGE_MESSAGES = {
    LockStatus.LOCKED: ("Target lock acquired", Severity.SUCCESS),
    LockStatus.INTERCEPTED: ("Target intercepted", Severity.SUCCESS),
}


class SimulationClock:
    """
    Owns and advances the whole engagement simulation.

    Args:
        settings: Engine configuration; validated on construction.
        time_source: Callable returning the current time in seconds. Used when tick()
            is called without an explicit time and to stamp command log entries.
        rng: Random source for telemetry jitter and signal samples. Defaults to
            random.Random(settings.seed).
        telemetry: Pre-built TelemetryJitter; defaults to the standard channel set
            sharing rng.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None,
                 time_source: Callable[[], float] = time.time,
                 rng: Optional[random.Random] = None,
                 telemetry: Optional[TelemetryJitter] = None):
        self.settings = (settings or SimulationSettings()).validate()
        self._time = time_source
        self.rng = rng if rng is not None else random.Random(self.settings.seed)
        self.lock = threading.RLock()
        self._pending: Deque[Command] = deque()

        s = self.settings
        self.pattern = TargetPattern.from_settings(s)
        self.guidance = PursuitGuidance.from_settings(s)
        self.machine = LockStateMachine.from_settings(s)
        self.telemetry = telemetry if telemetry is not None else TelemetryJitter(rng=self.rng)
        self.interceptor_trail: HistoryBuffer[Position] = HistoryBuffer(s.trail_capacity)
        self.target_trail: HistoryBuffer[Position] = HistoryBuffer(s.trail_capacity)
        self.signal_history: HistoryBuffer[SignalSample] = HistoryBuffer(s.signal_capacity)
        self.events = EventLog(s.log_capacity)

        self.flight_mode = parse_flight_mode(s.flight_mode).value
        self.armed = bool(s.armed)
        self.paused = False
        self.tracking_view = TrackingView.BOTH.value
        self.zoom = 1.0
        self.tick_count = 0

        now = self._time()
        self._spawn()
        self._log_startup(now)
        self._snapshot = self._publish(now)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> SimulationSnapshot:
        """
        Advance the simulation by exactly one step and return the published snapshot.

        Queued commands are applied first. While paused nothing moves and the previous
        snapshot (updated only by commands) is returned.
        """
        with self.lock:
            now = self._time() if now is None else float(now)
            if self._drain(now) and self.paused:
                self._snapshot = self._publish(now)
            if self.paused:
                return self._snapshot

            s = self.settings
            if self._last_now is None:
                dt = s.tick_period
            else:
                dt = clamp(now - self._last_now, 0.0, s.max_tick_dt)
            self._last_now = now
            self._pattern_time += dt

            # Trails hold the positions from before this tick's move
            self.interceptor_trail.push(self.interceptor.position)
            self.target_trail.push(self.target.position)
            self.pattern.advance(self.target, self._pattern_time)
            self.guidance.advance(self.interceptor, self.target.position)

            separation = distance(self.interceptor.position, self.target.position)
            edge = self.machine.evaluate(separation)
            self._measure(dt)
            if edge in LOGGED_EDGES:
                message, severity = EDGE_MESSAGES[edge]
                self.events.append(now, message, severity)

            self.signal_history.push(SignalSample(now, self.telemetry.sample_signal()))
            self.telemetry.tick()
            self.tick_count += 1

            respawn = s.respawn_after_ticks
            if respawn and self.machine.intercepted_ticks >= respawn:
                self._reset(now, "New target acquired - interceptor respawned")

            self._snapshot = self._publish(now)
            return self._snapshot

    def submit_command(self, cmd: Command) -> None:
        """
        Queue a command and apply it at the next tick boundary.

        Blocks only until an in-flight tick has published. Invalid commands are rejected
        with a warning log entry; they never raise.
        """
        self._pending.append(cmd)
        with self.lock:
            now = self._time()
            if self._drain(now):
                self._snapshot = self._publish(now)

    def get_snapshot(self) -> SimulationSnapshot:
        return self._snapshot

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _drain(self, now: float) -> bool:
        applied = False
        while self._pending:
            cmd = self._pending.popleft()
            try:
                self._apply(cmd, now)
            except InvalidCommandError as e:
                log.warning("Rejected command %r: %s", cmd, e)
                self.events.append(now, f"Command rejected: {e}", Severity.WARNING)
            applied = True
        return applied

    def _apply(self, cmd: Command, now: float) -> None:
        if isinstance(cmd, SetFlightMode):
            mode = parse_flight_mode(cmd.mode).value
            if mode != self.flight_mode:
                self.flight_mode = mode
                self.events.append(now, f"Flight mode changed to {mode}", Severity.INFO)
        elif isinstance(cmd, SetArmed):
            if not isinstance(cmd.armed, bool):
                raise InvalidCommandError(f"Armed flag must be a bool, got {cmd.armed!r}")
            if cmd.armed != self.armed:
                self.armed = cmd.armed
                if cmd.armed:
                    self.events.append(now, "System ARMED", Severity.WARNING)
                else:
                    self.events.append(now, "System DISARMED", Severity.INFO)
        elif isinstance(cmd, Pause):
            if not self.paused:
                self.paused = True
                self._last_now = None
                self.events.append(now, "Simulation paused", Severity.INFO)
        elif isinstance(cmd, Resume):
            if self.paused:
                self.paused = False
                self._last_now = None
                self.events.append(now, "Simulation resumed", Severity.INFO)
        elif isinstance(cmd, Reset):
            message = f"Simulation reset ({cmd.reason})" if cmd.reason else "Simulation reset"
            self._reset(now, message)
        elif isinstance(cmd, EmergencyStop):
            if self.paused and not self.armed and self.flight_mode == FlightMode.LAND.value:
                return
            self.paused = True
            self._last_now = None
            self.armed = False
            self.flight_mode = FlightMode.LAND.value
            self.events.append(now, "EMERGENCY STOP ACTIVATED", Severity.WARNING)
        elif isinstance(cmd, SetTrackingView):
            self.tracking_view = parse_tracking_view(cmd.view).value
        elif isinstance(cmd, SetZoom):
            self.zoom = parse_zoom(cmd.level)
        elif isinstance(cmd, SetTrailLength):
            length = parse_trail_length(cmd.length)
            self.interceptor_trail.resize(length)
            self.target_trail.resize(length)
        else:
            raise InvalidCommandError(f"Unrecognized command {cmd!r}")

    # ------------------------------------------------------------------
    # State helpers (call with the lock held)
    # ------------------------------------------------------------------

    def _spawn(self) -> None:
        s = self.settings
        self._pattern_time = 0.0
        self._last_now = None
        self._previous_range_m = None
        self.interceptor = Agent(
            "interceptor",
            Position(float(s.interceptor_start[0]), float(s.interceptor_start[1])),
            s.interceptor_start_heading % 360.0,
        )
        self.target = Agent("target", self.pattern.position_at(0.0), s.target_start_heading % 360.0)
        self.interceptor_trail.clear()
        self.target_trail.clear()
        self.machine.reset()
        self._measure(0.0)

    def _reset(self, now: float, message: str) -> None:
        self._spawn()
        self.events.append(now, message, Severity.INFO)

    def _measure(self, dt: float) -> EngagementSnapshot:
        self.engagement = measure(
            self.interceptor.position,
            self.target.position,
            self._previous_range_m,
            dt,
            self.settings.range_scale_m,
            self.machine.status,
        )
        self._previous_range_m = self.engagement.range_m
        return self.engagement

    def _log_startup(self, now: float) -> None:
        sats = int(self.telemetry.values().get("satellites", 0))
        self.events.append(now, "System initialized", Severity.INFO)
        self.events.append(now, f"GPS lock acquired ({sats} satellites)", Severity.SUCCESS)
        self.events.append(now, "Telemetry link established", Severity.SUCCESS)
        if self.armed:
            self.events.append(now, "Interceptor armed and ready", Severity.SUCCESS)

    def _publish(self, now: float) -> SimulationSnapshot:
        return SimulationSnapshot(
            tick=self.tick_count,
            timestamp=now,
            paused=self.paused,
            armed=self.armed,
            flight_mode=self.flight_mode,
            tracking_view=self.tracking_view,
            zoom=self.zoom,
            trail_length=self.interceptor_trail.capacity,
            interceptor=self.interceptor.freeze(),
            target=self.target.freeze(),
            interceptor_trail=self.interceptor_trail.snapshot(),
            target_trail=self.target_trail.snapshot(),
            engagement=self.engagement,
            telemetry=MappingProxyType(self.telemetry.values()),
            signal_history=self.signal_history.snapshot(),
            log=self.events.entries(),
        )


class SimulationRunner(threading.Thread):
    """
    Background thread that ticks a SimulationClock at a fixed rate.

    Ticks are skipped entirely while the clock is paused. When the thread falls behind it
    re-anchors its schedule instead of bursting through missed ticks.
    """

    def __init__(self, clock: SimulationClock, tick_hz: Optional[float] = None,
                 monotonic: Callable[[], float] = time.monotonic):
        super().__init__(name="simulation-clock", daemon=True)
        self.clock = clock
        self.period = 1.0 / (tick_hz or clock.settings.tick_hz)
        self._monotonic = monotonic
        self._stop_event = threading.Event()
        self.ticks_run = 0

    def run(self):
        next_t = self._monotonic()
        while not self._stop_event.is_set():
            if not self.clock.paused:
                try:
                    self.clock.tick()
                    self.ticks_run += 1
                except Exception:
                    log.exception("simulation tick failed")
            next_t += self.period
            delay = next_t - self._monotonic()
            if delay < 0:
                next_t = self._monotonic()
                delay = 0.0
            self._stop_event.wait(delay)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout)
