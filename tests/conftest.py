import random

import pytest

from intercept_core.clock import SimulationClock
from intercept_core.settings import SimulationSettings

PERIOD = 1.0 / 30.0


class ManualTime:
    """Time source the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = PERIOD) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def manual_time():
    return ManualTime()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def frozen_target_settings():
    # Target pinned at (600, 200); no auto-respawn
    return SimulationSettings().with_overrides(target_amplitude=(0.0, 0.0), respawn_after_ticks=0, seed=7)


@pytest.fixture
def clock(manual_time):
    return SimulationClock(SimulationSettings(seed=42), time_source=manual_time)


@pytest.fixture
def frozen_clock(frozen_target_settings, manual_time):
    return SimulationClock(frozen_target_settings, time_source=manual_time)


def run_ticks(clock, manual_time, n):
    snaps = []
    for _ in range(n):
        snaps.append(clock.tick(manual_time.advance()))
    return snaps
