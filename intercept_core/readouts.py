#!/usr/bin/env python3
"""
Text formatting for operator readouts (HUD overlay, control panel, event log).

Kept apart from the viewer so formatting can be used without a display.
"""
import time
from typing import List

from .data_models import LogEntry, Severity, SimulationSnapshot

SEVERITY_TAGS = {
    Severity.INFO: "[INFO]",
    Severity.SUCCESS: "[OK]",
    Severity.WARNING: "[WARN]",
}


def format_clock(ts: float) -> str:
    """Local wall-clock time of a timestamp as HH:MM:SS."""
    return time.strftime("%H:%M:%S", time.localtime(ts))


def format_log_entry(entry: LogEntry) -> str:
    return f"{format_clock(entry.time)} {SEVERITY_TAGS[entry.severity]} {entry.message}"


def format_tti(seconds) -> str:
    return "--.-s" if seconds is None else f"{seconds:.1f}s"


def hud_lines(snap: SimulationSnapshot) -> List[str]:
    """Engagement readout shown over the tactical map."""
    e = snap.engagement
    state = "PAUSED" if snap.paused else "LIVE"
    return [
        f"STATUS {e.status.value}  [{state}]  MODE {snap.flight_mode}  {'ARMED' if snap.armed else 'SAFE'}",
        f"RANGE {e.range_m:.0f}m  CLOSING {e.closing_velocity:.1f} m/s  T-INTERCEPT {format_tti(e.time_to_intercept)}",
        f"BEARING {e.bearing:.1f}deg  HDG {snap.interceptor.heading:.0f}  TGT HDG {snap.target.heading:.0f}",
    ]


def telemetry_lines(snap: SimulationSnapshot) -> List[str]:
    t = snap.telemetry
    motors = " ".join(f"M{i}:{t.get(f'motor_{i}', 0.0):.0f}%" for i in range(1, 5))
    return [
        f"ALT {t.get('altitude', 0.0):.0f}m  ALT DELTA {t.get('altitude_delta', 0.0):.1f}m",
        f"BATT {t.get('battery_voltage', 0.0):.1f}V {t.get('battery_percent', 0.0):.0f}%",
        f"SATS {int(t.get('satellites', 0))}  LAT {t.get('gps_lat', 0.0):.6f}  LON {t.get('gps_lon', 0.0):.6f}",
        f"LINK {t.get('link_quality', 0.0):.0f}%  LATENCY {t.get('latency_ms', 0.0):.0f}ms  "
        f"RATE {t.get('data_rate', 0.0):.1f}kb/s  INTEGRITY {t.get('message_integrity', 0.0):.0f}%",
        motors,
    ]
