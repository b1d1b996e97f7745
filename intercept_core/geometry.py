#!/usr/bin/env python3
"""
Geometry helpers for the 2D display plane.

These are small, fast, stateless functions used throughout the engine and the viewer.

Conventions
- The plane follows screen orientation: x grows to the right, y grows downwards.
- bearing() reports the math angle of (to - from) as atan2(dy, dx) in degrees, (-180, 180].
- polar_to_cartesian() uses the radar convention: 0 degrees is "up", angles grow clockwise.
"""
import math
from typing import Tuple

from .data_models import Position


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Tuple[float, float], b: Tuple[float, float]) -> Position:
    return Position(a[0] + b[0], a[1] + b[1])


def vec_sub(a: Tuple[float, float], b: Tuple[float, float]) -> Position:
    return Position(a[0] - b[0], a[1] - b[1])


def vec_scale(a: Tuple[float, float], s: float) -> Position:
    return Position(a[0] * s, a[1] * s)


def vec_len(a: Tuple[float, float]) -> float:
    return math.hypot(a[0], a[1])


def vec_norm(a: Tuple[float, float]) -> Position:
    l = vec_len(a)
    if l == 0:
        return Position(0.0, 0.0)
    return Position(a[0] / l, a[1] / l)


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Euclidean distance between two points; zero iff a == b."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def bearing(frm: Tuple[float, float], to: Tuple[float, float]) -> float:
    """
    Angle of the vector (to - frm) in degrees, in (-180, 180].

    Coincident points have no direction; they report 0 instead of raising.
    """
    dx = to[0] - frm[0]
    dy = to[1] - frm[1]
    if dx == 0 and dy == 0:
        return 0.0
    deg = math.degrees(math.atan2(dy, dx))
    if deg <= -180.0:
        deg += 360.0
    return deg


def heading_from_bearing(deg: float) -> float:
    """Wrap an angle in degrees to [0, 360)."""
    h = deg % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if h >= 360.0 else h


def polar_to_cartesian(origin: Tuple[float, float], angle_deg: float, range_: float,
                       scale: float = 1.0) -> Position:
    """
    Convert a polar offset around origin into plane coordinates.

    Args:
        origin: Plane position the offset is measured from.
        angle_deg: Direction with 0 = up, increasing clockwise.
        range_: Length of the offset.
        scale: Multiplier applied to range_ (e.g. zoom or units conversion).
    """
    rad = math.radians(angle_deg - 90.0)
    r = range_ * scale
    return Position(origin[0] + math.cos(rad) * r, origin[1] + math.sin(rad) * r)
