#!/usr/bin/env python3
"""
Telemetry jitter for ancillary channels (battery, GNSS, link, motors).

Each channel is a scalar with a valid range [minimum, maximum] that is perturbed once
per tick and clamped back into range. Channels are independent of one another and of
the engagement state machine; they exist to make the display look alive.

Modes
- SYMMETRIC: value + U(-delta, +delta)
- DECAY:     value - U(0, delta); never increases (battery drain)
- STEP:      value + one of {-1, 0, +1}; integer valued (satellite count)
- RESAMPLE:  fresh U(minimum, maximum) every tick (motor duty cycles)
- HOLD:      constant

The random source is injected so a fixed seed replays the same telemetry.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from . import constants as C
from .geometry import clamp


class JitterMode(str, Enum):
    SYMMETRIC = "symmetric"
    DECAY = "decay"
    STEP = "step"
    RESAMPLE = "resample"
    HOLD = "hold"


@dataclass
class TelemetryChannel:
    name: str
    value: float
    minimum: float
    maximum: float
    delta: float = 0.0
    mode: JitterMode = JitterMode.SYMMETRIC

    def __post_init__(self):
        if self.minimum > self.maximum:
            raise ValueError(f"{self.name}: minimum {self.minimum} exceeds maximum {self.maximum}")
        self.value = clamp(float(self.value), self.minimum, self.maximum)

    def perturb(self, rng: random.Random) -> float:
        """Apply one tick of jitter and return the new value."""
        if self.mode is JitterMode.SYMMETRIC:
            v = self.value + rng.uniform(-self.delta, self.delta)
        elif self.mode is JitterMode.DECAY:
            v = self.value - rng.uniform(0.0, self.delta)
        elif self.mode is JitterMode.STEP:
            v = int(round(self.value)) + rng.choice((-1, 0, 1))
        elif self.mode is JitterMode.RESAMPLE:
            v = rng.uniform(self.minimum, self.maximum)
        else:
            v = self.value
        self.value = clamp(v, self.minimum, self.maximum)
        return self.value


def default_channels() -> List[TelemetryChannel]:
    """Channel set shown on the operator dashboard, with its start values."""
    S, D, ST, R, H = (JitterMode.SYMMETRIC, JitterMode.DECAY, JitterMode.STEP,
                      JitterMode.RESAMPLE, JitterMode.HOLD)
    return [
        TelemetryChannel("altitude", 50.0, 0.0, 500.0, 2.5, S),
        TelemetryChannel("battery_voltage", 22.4, 18.0, 25.2, 0.01, D),
        TelemetryChannel("battery_percent", 85.0, 0.0, 100.0, 0.025, D),
        TelemetryChannel("satellites", 12, 8, 15, 1, ST),
        TelemetryChannel("latency_ms", 12.0, 5.0, 50.0, 1.5, S),
        TelemetryChannel("data_rate", 98.5, 90.0, 100.0, 0.5, S),
        TelemetryChannel("link_quality", 95.0, 80.0, 100.0, 1.0, S),
        TelemetryChannel("gps_lat", C.HOME_LAT, C.HOME_LAT - C.GPS_WANDER, C.HOME_LAT + C.GPS_WANDER, 5e-6, S),
        TelemetryChannel("gps_lon", C.HOME_LON, C.HOME_LON - C.GPS_WANDER, C.HOME_LON + C.GPS_WANDER, 5e-6, S),
        TelemetryChannel("motor_1", 75.0, 75.0, 85.0, mode=R),
        TelemetryChannel("motor_2", 78.0, 78.0, 88.0, mode=R),
        TelemetryChannel("motor_3", 72.0, 72.0, 82.0, mode=R),
        TelemetryChannel("motor_4", 76.0, 76.0, 86.0, mode=R),
        TelemetryChannel("altitude_delta", 15.0, 0.0, 15.0, mode=R),
        TelemetryChannel("message_integrity", 100.0, 0.0, 100.0, mode=H),
    ]


class TelemetryJitter:
    """Owns the telemetry channels and perturbs all of them once per tick."""

    def __init__(self, channels: Optional[Iterable[TelemetryChannel]] = None,
                 rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()
        self.channels: Dict[str, TelemetryChannel] = {}
        for ch in (default_channels() if channels is None else channels):
            if ch.name in self.channels:
                raise ValueError(f"duplicate telemetry channel {ch.name!r}")
            self.channels[ch.name] = ch

    def tick(self) -> Dict[str, float]:
        for ch in self.channels.values():
            ch.perturb(self.rng)
        return self.values()

    def values(self) -> Dict[str, float]:
        return {name: ch.value for name, ch in self.channels.items()}

    def sample_signal(self) -> float:
        """Draw one signal-strength reading (percent)."""
        return self.rng.uniform(C.SIGNAL_MIN, C.SIGNAL_MAX)
