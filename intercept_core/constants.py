#!/usr/bin/env python3
"""
Shared constants for the Intercept Simulator (display-plane units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. SimulationSettings reads its defaults from here.
"""

# Tick scheduling
TICK_HZ = 30.0  # nominal ticks per second
MAX_TICK_DT = 0.25  # s; cap on elapsed time folded into a single tick

# Plane scale
RANGE_SCALE_M = 0.5  # meters per display-plane unit

# Engagement thresholds (plane units, upper bounds inclusive)
ACQUIRE_RANGE = 350.0
LOCK_RANGE = 200.0
INTERCEPT_RANGE = 80.0

# Interceptor pursuit
ARRIVAL_THRESHOLD = 10.0  # hold position inside this separation
CHASE_RANGE = 150.0
TERMINAL_RANGE = 50.0
CRUISE_SPEED = 3.0  # plane units per tick
CHASE_SPEED = 4.5
TERMINAL_SPEED = 6.0

# Target pattern
TARGET_CENTER = (600.0, 200.0)
TARGET_AMPLITUDE = (100.0, 80.0)
TARGET_OMEGA = (0.2, 0.3)  # rad/s on x and y
TARGET_YAW_STEP = 2.0  # degrees per tick

# Start pose
INTERCEPTOR_START = (200.0, 400.0)
INTERCEPTOR_START_HEADING = 45.0
TARGET_START_HEADING = 225.0

# Auto-respawn after this many consecutive INTERCEPTED ticks (0 disables)
RESPAWN_AFTER_TICKS = 90

# History capacities
TRAIL_CAPACITY = 30
MIN_TRAIL_CAPACITY = 30
MAX_TRAIL_CAPACITY = 50
SIGNAL_CAPACITY = 20
LOG_CAPACITY = 10

# Signal strength sample bounds (percent)
SIGNAL_MIN = 90.0
SIGNAL_MAX = 100.0

# Operator controls
FLIGHT_MODES = ("GUIDED", "STABILIZE", "LOITER", "RTL", "LAND")
DEFAULT_FLIGHT_MODE = "GUIDED"
MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 0.25

# GPS home (degrees)
HOME_LAT = 34.0522
HOME_LON = -118.2437
GPS_WANDER = 0.01

# Rendering (viewport)
VIEW_WIDTH = 1000
VIEW_HEIGHT = 700
BACKGROUND_COLOR = (5, 11, 20)
GRID_COLOR = (14, 40, 52)
GRID_MAJOR_COLOR = (20, 60, 76)
INTERCEPTOR_COLOR = (6, 182, 212)
TARGET_COLOR = (239, 68, 68)
TEXT_COLOR = (200, 220, 230)
STATUS_COLORS = {
    "SEARCHING": (148, 163, 184),
    "ACQUIRING": (250, 204, 21),
    "LOCKED": (249, 115, 22),
    "INTERCEPTED": (34, 197, 94),
}
