#!/usr/bin/env python3
"""
Engagement state machine and relative geometry.

Lock status is derived from the plane separation between interceptor and target using
fixed thresholds (no hysteresis):

    r > acquire_range                  -> SEARCHING
    lock_range < r <= acquire_range    -> ACQUIRING
    intercept_range < r <= lock_range  -> LOCKED
    r <= intercept_range               -> INTERCEPTED

INTERCEPTED latches: once entered it is reported regardless of range until reset().
"""
from typing import Optional

from .data_models import EngagementSnapshot, LockStatus, Position
from .geometry import bearing, distance
from .settings import SimulationSettings

# Transitions that deserve an operator log entry
LOGGED_EDGES = (LockStatus.LOCKED, LockStatus.INTERCEPTED)


class LockStateMachine:
    """Threshold classifier with an INTERCEPTED latch and an intercept dwell counter."""

    def __init__(self, acquire_range: float, lock_range: float, intercept_range: float):
        self.acquire_range = float(acquire_range)
        self.lock_range = float(lock_range)
        self.intercept_range = float(intercept_range)
        self.status = LockStatus.SEARCHING
        self.intercepted_ticks = 0

    @classmethod
    def from_settings(cls, settings: SimulationSettings) -> "LockStateMachine":
        return cls(settings.acquire_range, settings.lock_range, settings.intercept_range)

    def classify(self, separation: float) -> LockStatus:
        """Status for a separation, ignoring the latch."""
        if separation > self.acquire_range:
            return LockStatus.SEARCHING
        if separation > self.lock_range:
            return LockStatus.ACQUIRING
        if separation > self.intercept_range:
            return LockStatus.LOCKED
        return LockStatus.INTERCEPTED

    def evaluate(self, separation: float) -> Optional[LockStatus]:
        """
        Update the status from the current separation.

        Returns the new status when this call changed it (a transition edge), None when
        the status held.
        """
        if self.status is LockStatus.INTERCEPTED:
            self.intercepted_ticks += 1
            return None
        new_status = self.classify(separation)
        if new_status is self.status:
            return None
        self.status = new_status
        if new_status is LockStatus.INTERCEPTED:
            self.intercepted_ticks = 1
        return new_status

    def reset(self) -> None:
        self.status = LockStatus.SEARCHING
        self.intercepted_ticks = 0


def measure(interceptor: Position, target: Position, previous_range_m: Optional[float],
            dt: float, range_scale_m: float, status: LockStatus) -> EngagementSnapshot:
    """
    Build the engagement snapshot for one tick.

    closing_velocity is the range rate (m/s) against the previous tick, positive while
    closing; it is 0 when there is no previous range (spawn and reset).
    time_to_intercept is None unless the agents are closing.
    """
    separation = distance(interceptor, target)
    range_m = separation * range_scale_m
    if previous_range_m is None or dt <= 0:
        closing = 0.0
    else:
        closing = (previous_range_m - range_m) / dt
    tti = range_m / closing if closing > 1e-9 else None
    return EngagementSnapshot(
        separation=separation,
        range_m=range_m,
        closing_velocity=closing,
        time_to_intercept=tti,
        bearing=bearing(interceptor, target),
        status=status,
    )
