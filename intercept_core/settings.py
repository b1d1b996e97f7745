#!/usr/bin/env python3
"""
Configuration for the Intercept Simulator.

SimulationSettings collects every tunable the engine reads. Defaults come from
constants.py; callers override individual fields with with_overrides(), which returns
a validated copy.
"""
from dataclasses import dataclass, fields, replace
from typing import Optional, Tuple

from . import constants as C
from .errors import ConfigurationError


@dataclass(frozen=True)
class SimulationSettings:
    """Container for engine settings (plane units, ticks and seconds)."""
    tick_hz: float = C.TICK_HZ
    max_tick_dt: float = C.MAX_TICK_DT
    range_scale_m: float = C.RANGE_SCALE_M

    # Engagement thresholds
    acquire_range: float = C.ACQUIRE_RANGE
    lock_range: float = C.LOCK_RANGE
    intercept_range: float = C.INTERCEPT_RANGE

    # Pursuit
    arrival_threshold: float = C.ARRIVAL_THRESHOLD
    chase_range: float = C.CHASE_RANGE
    terminal_range: float = C.TERMINAL_RANGE
    cruise_speed: float = C.CRUISE_SPEED
    chase_speed: float = C.CHASE_SPEED
    terminal_speed: float = C.TERMINAL_SPEED

    # Target pattern
    target_center: Tuple[float, float] = C.TARGET_CENTER
    target_amplitude: Tuple[float, float] = C.TARGET_AMPLITUDE
    target_omega: Tuple[float, float] = C.TARGET_OMEGA
    target_phase: float = 0.0  # seconds added to the pattern clock
    target_yaw_step: float = C.TARGET_YAW_STEP

    # Start pose
    interceptor_start: Tuple[float, float] = C.INTERCEPTOR_START
    interceptor_start_heading: float = C.INTERCEPTOR_START_HEADING
    target_start_heading: float = C.TARGET_START_HEADING

    respawn_after_ticks: int = C.RESPAWN_AFTER_TICKS

    # History
    trail_capacity: int = C.TRAIL_CAPACITY
    signal_capacity: int = C.SIGNAL_CAPACITY
    log_capacity: int = C.LOG_CAPACITY

    # Operator state at start
    flight_mode: str = C.DEFAULT_FLIGHT_MODE
    armed: bool = True

    seed: Optional[int] = None

    @property
    def tick_period(self) -> float:
        return 1.0 / self.tick_hz

    def validate(self) -> "SimulationSettings":
        """Raise ConfigurationError on the first invalid field; return self otherwise."""
        if self.tick_hz <= 0:
            raise ConfigurationError(f"tick_hz must be positive, got {self.tick_hz}")
        if self.max_tick_dt <= 0:
            raise ConfigurationError(f"max_tick_dt must be positive, got {self.max_tick_dt}")
        if self.range_scale_m <= 0:
            raise ConfigurationError(f"range_scale_m must be positive, got {self.range_scale_m}")
        if not (0 <= self.intercept_range < self.lock_range < self.acquire_range):
            raise ConfigurationError(
                "thresholds must satisfy 0 <= intercept_range < lock_range < acquire_range, "
                f"got {self.intercept_range}/{self.lock_range}/{self.acquire_range}"
            )
        if not (0 <= self.terminal_range <= self.chase_range):
            raise ConfigurationError("speed tier ranges must satisfy 0 <= terminal_range <= chase_range")
        for name in ("cruise_speed", "chase_speed", "terminal_speed", "arrival_threshold"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("trail_capacity", "signal_capacity", "log_capacity", "respawn_after_ticks"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be a whole number, got {value!r}")
        if not (C.MIN_TRAIL_CAPACITY <= self.trail_capacity <= C.MAX_TRAIL_CAPACITY):
            raise ConfigurationError(
                f"trail_capacity must be within [{C.MIN_TRAIL_CAPACITY}, {C.MAX_TRAIL_CAPACITY}], "
                f"got {self.trail_capacity}"
            )
        if self.signal_capacity < 1 or self.log_capacity < 1:
            raise ConfigurationError("signal_capacity and log_capacity must be >= 1")
        if self.respawn_after_ticks < 0:
            raise ConfigurationError(f"respawn_after_ticks must be >= 0, got {self.respawn_after_ticks}")
        if self.flight_mode not in C.FLIGHT_MODES:
            raise ConfigurationError(f"unknown flight mode {self.flight_mode!r}")
        return self

    def with_overrides(self, **overrides) -> "SimulationSettings":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"unknown setting(s): {', '.join(unknown)}")
        return replace(self, **overrides).validate()
