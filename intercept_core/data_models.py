#!/usr/bin/env python3
"""
Data models for the Intercept Simulator.

This module defines the value types shared between the engine, the clock and the viewer.

Units and usage
- Positions are in display-plane units; ranges reported to the operator are in meters
  (plane units scaled by RANGE_SCALE_M).
- Headings are in degrees, [0, 360). Bearings are in degrees, (-180, 180].
- Agent is the only mutable type here; it is mutated by SimulationClock under its lock.
  Everything published to consumers (EngagementSnapshot, SimulationSnapshot) is frozen
  and built from tuples so a consumer can never observe a half-applied tick.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, NamedTuple, Optional, Tuple


class Position(NamedTuple):
    """Immutable 2D point on the display plane."""
    x: float
    y: float


class LockStatus(str, Enum):
    SEARCHING = "SEARCHING"
    ACQUIRING = "ACQUIRING"
    LOCKED = "LOCKED"
    INTERCEPTED = "INTERCEPTED"


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass
class Agent:
    """
    A simulated moving entity.

    Fields:
    - name: "interceptor" or "target"
    - position: current plane position
    - heading: degrees in [0, 360)
    """
    name: str
    position: Position
    heading: float = 0.0

    def freeze(self) -> "AgentState":
        return AgentState(self.name, self.position, self.heading)


class AgentState(NamedTuple):
    """Read-only copy of an Agent as published in a snapshot."""
    name: str
    position: Position
    heading: float


class LogEntry(NamedTuple):
    time: float
    message: str
    severity: Severity


class SignalSample(NamedTuple):
    timestamp: float
    value: float


@dataclass(frozen=True)
class EngagementSnapshot:
    """
    Relative geometry between interceptor and target for one tick.

    Fields:
    - separation: plane distance between the agents
    - range_m: separation scaled to meters
    - closing_velocity: m/s, positive while the range shrinks
    - time_to_intercept: seconds at the current closing velocity; None when not closing
    - bearing: degrees from interceptor to target, (-180, 180]
    - status: lock status after evaluating this tick
    """
    separation: float
    range_m: float
    closing_velocity: float
    time_to_intercept: Optional[float]
    bearing: float
    status: LockStatus


@dataclass(frozen=True)
class SimulationSnapshot:
    """Everything the presentation layer reads, published once per tick."""
    tick: int
    timestamp: float
    paused: bool
    armed: bool
    flight_mode: str
    tracking_view: str
    zoom: float
    trail_length: int
    interceptor: AgentState
    target: AgentState
    interceptor_trail: Tuple[Position, ...]
    target_trail: Tuple[Position, ...]
    engagement: EngagementSnapshot
    telemetry: Mapping[str, float]
    signal_history: Tuple[SignalSample, ...]
    log: Tuple[LogEntry, ...]

    @property
    def status(self) -> LockStatus:
        return self.engagement.status
