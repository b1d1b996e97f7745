#!/usr/bin/env python3
"""
Agent kinematics for the Intercept Simulator.

Responsibilities
- Move the target along a closed, evasive-looking loop built from two sinusoids.
- Steer the interceptor straight at the target's current position with a speed that
  steps up as the range closes (cruise, chase, terminal).
- Derive headings: the interceptor's heading is its seeker bearing to the target, the
  target's heading is a slow yaw roll independent of its translation.

Units and conventions
- Positions are display-plane units; pursuit speeds are plane units per tick.
- The target pattern is a pure function of the pattern clock (seconds), so a run is
  replayable from any time source.

Threading
- This module is pure compute. SimulationClock calls it under its lock.
"""

import math
from typing import Tuple

from .data_models import Agent, Position
from .geometry import bearing, distance, heading_from_bearing, vec_add, vec_norm, vec_scale, vec_sub
from .settings import SimulationSettings


class TargetPattern:
    """
    Deterministic oscillatory motion for the target.

    The position at pattern time t is:

        x = cx + cos(t * w1) * Ax
        y = cy + sin(t * w2) * Ay

    Different angular frequencies on each axis trace a Lissajous loop around the center.
    Zero amplitudes pin the target at the center.
    """

    def __init__(self, center: Tuple[float, float], amplitude: Tuple[float, float],
                 omega: Tuple[float, float], phase: float = 0.0, yaw_step: float = 2.0):
        self.center = Position(float(center[0]), float(center[1]))
        self.amplitude = (float(amplitude[0]), float(amplitude[1]))
        self.omega = (float(omega[0]), float(omega[1]))
        self.phase = float(phase)
        self.yaw_step = float(yaw_step)

    @classmethod
    def from_settings(cls, settings: SimulationSettings) -> "TargetPattern":
        return cls(
            settings.target_center,
            settings.target_amplitude,
            settings.target_omega,
            phase=settings.target_phase,
            yaw_step=settings.target_yaw_step,
        )

    def position_at(self, t: float) -> Position:
        ts = t + self.phase
        return Position(
            self.center.x + math.cos(ts * self.omega[0]) * self.amplitude[0],
            self.center.y + math.sin(ts * self.omega[1]) * self.amplitude[1],
        )

    def advance(self, target: Agent, t: float) -> None:
        """Place the target at its pattern position for time t and roll its heading one step."""
        target.position = self.position_at(t)
        target.heading = heading_from_bearing(target.heading + self.yaw_step)


class PursuitGuidance:
    """
    Pure-pursuit steering for the interceptor.

    Each tick the interceptor moves toward the target's current position along the
    normalised line of sight. Speed is a step function of separation:

        separation >= chase_range         -> cruise_speed
        terminal_range <= sep < chase     -> chase_speed
        separation < terminal_range       -> terminal_speed

    Inside arrival_threshold the interceptor holds position. The step is capped at the
    remaining distance, so the interceptor never overshoots the target.
    """

    def __init__(self, arrival_threshold: float, chase_range: float, terminal_range: float,
                 cruise_speed: float, chase_speed: float, terminal_speed: float):
        self.arrival_threshold = float(arrival_threshold)
        self.chase_range = float(chase_range)
        self.terminal_range = float(terminal_range)
        self.cruise_speed = float(cruise_speed)
        self.chase_speed = float(chase_speed)
        self.terminal_speed = float(terminal_speed)

    @classmethod
    def from_settings(cls, settings: SimulationSettings) -> "PursuitGuidance":
        return cls(
            settings.arrival_threshold,
            settings.chase_range,
            settings.terminal_range,
            settings.cruise_speed,
            settings.chase_speed,
            settings.terminal_speed,
        )

    def speed_for(self, separation: float) -> float:
        if separation < self.terminal_range:
            return self.terminal_speed
        if separation < self.chase_range:
            return self.chase_speed
        return self.cruise_speed

    def step(self, interceptor: Position, target: Position) -> Position:
        """
        Return the interceptor's next position.

        The line-of-sight vector is only normalised when the separation exceeds the
        arrival threshold, so coincident agents never divide by a near-zero length.
        """
        sep = distance(interceptor, target)
        if sep <= self.arrival_threshold:
            return Position(interceptor[0], interceptor[1])
        move = min(self.speed_for(sep), sep)
        direction = vec_norm(vec_sub(target, interceptor))
        return vec_add(interceptor, vec_scale(direction, move))

    def advance(self, interceptor: Agent, target_position: Position) -> None:
        """Move the interceptor one tick and point its seeker at the target."""
        interceptor.position = self.step(interceptor.position, target_position)
        interceptor.heading = heading_from_bearing(bearing(interceptor.position, target_position))
