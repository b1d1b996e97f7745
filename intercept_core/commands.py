#!/usr/bin/env python3
"""
Commands the presentation layer submits to SimulationClock.

Commands are plain frozen values. They carry raw operator input (for example a flight
mode string from a combo box); SimulationClock validates them when it applies them and
rejects bad ones with a warning log entry instead of raising.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Union

from . import constants as C
from .errors import InvalidCommandError


class FlightMode(str, Enum):
    GUIDED = "GUIDED"
    STABILIZE = "STABILIZE"
    LOITER = "LOITER"
    RTL = "RTL"
    LAND = "LAND"


class TrackingView(str, Enum):
    INTERCEPTOR = "interceptor"
    TARGET = "target"
    BOTH = "both"


@dataclass(frozen=True)
class SetFlightMode:
    mode: str


@dataclass(frozen=True)
class SetArmed:
    armed: bool


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Reset:
    reason: str = ""


@dataclass(frozen=True)
class EmergencyStop:
    pass


@dataclass(frozen=True)
class SetTrackingView:
    view: str


@dataclass(frozen=True)
class SetZoom:
    level: float


@dataclass(frozen=True)
class SetTrailLength:
    length: int


Command = Union[SetFlightMode, SetArmed, Pause, Resume, Reset, EmergencyStop, SetTrackingView, SetZoom,
                SetTrailLength]


def parse_flight_mode(value) -> FlightMode:
    try:
        return FlightMode(str(value).upper())
    except ValueError:
        raise InvalidCommandError(f"Unknown flight mode {value!r}") from None


def parse_tracking_view(value) -> TrackingView:
    try:
        return TrackingView(str(value).lower())
    except ValueError:
        raise InvalidCommandError(f"Unknown tracking view {value!r}") from None


def parse_zoom(value) -> float:
    if isinstance(value, bool):
        raise InvalidCommandError(f"Zoom level {value!r} is not a number")
    try:
        level = float(value)
    except (TypeError, ValueError):
        raise InvalidCommandError(f"Zoom level {value!r} is not a number") from None
    if not (C.MIN_ZOOM <= level <= C.MAX_ZOOM):
        raise InvalidCommandError(f"Zoom level {level} outside [{C.MIN_ZOOM}, {C.MAX_ZOOM}]")
    return level


def parse_trail_length(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCommandError(f"Trail length {value!r} is not a whole number")
    if not (C.MIN_TRAIL_CAPACITY <= value <= C.MAX_TRAIL_CAPACITY):
        raise InvalidCommandError(
            f"Trail length {value} outside [{C.MIN_TRAIL_CAPACITY}, {C.MAX_TRAIL_CAPACITY}]"
        )
    return value
