#!/usr/bin/env python3
"""
Camera utilities for plane-to-screen transforms on the tactical map.
"""
from typing import Tuple

from . import constants as C
from .commands import TrackingView
from .data_models import SimulationSnapshot
from .geometry import clamp


class Camera2D:
    """
    Maps display-plane coordinates to screen pixels.

    The plane is drawn 1:1 at zoom 1.0. The camera follows the snapshot's tracking view:
    the interceptor, the target, or (for "both") the fixed center of the map.
    """

    def __init__(self, center=(C.VIEW_WIDTH / 2, C.VIEW_HEIGHT / 2), zoom: float = 1.0):
        self.center = [float(center[0]), float(center[1])]
        self.zoom = clamp(float(zoom), C.MIN_ZOOM, C.MAX_ZOOM)
        self.viewport_size = (C.VIEW_WIDTH, C.VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        cx, cy = self.center
        px = (pos[0] - cx) * self.zoom + self.viewport_size[0] / 2
        py = (pos[1] - cy) * self.zoom + self.viewport_size[1] / 2
        return (int(round(px)), int(round(py)))

    def screen_to_world(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        cx, cy = self.center
        wx = (screen[0] - self.viewport_size[0] / 2) / self.zoom + cx
        wy = (screen[1] - self.viewport_size[1] / 2) / self.zoom + cy
        return (wx, wy)

    def scale_length(self, length: float) -> int:
        return max(1, int(round(length * self.zoom)))

    def follow(self, snap: SimulationSnapshot) -> None:
        """Aim the camera according to the snapshot's tracking view and zoom."""
        self.zoom = clamp(snap.zoom, C.MIN_ZOOM, C.MAX_ZOOM)
        view = snap.tracking_view
        if view == TrackingView.INTERCEPTOR.value:
            self.center = [snap.interceptor.position.x, snap.interceptor.position.y]
        elif view == TrackingView.TARGET.value:
            self.center = [snap.target.position.x, snap.target.position.y]
        else:
            self.center = [C.VIEW_WIDTH / 2, C.VIEW_HEIGHT / 2]
