"""
Tests for SimulationClock: tick orchestration, commands, snapshots and the runner thread.
"""
import dataclasses
import time

import pytest

from conftest import PERIOD, run_ticks
from intercept_core.clock import SimulationClock, SimulationRunner
from intercept_core.commands import (
    EmergencyStop,
    Pause,
    Reset,
    Resume,
    SetArmed,
    SetFlightMode,
    SetTrackingView,
    SetTrailLength,
    SetZoom,
)
from intercept_core.data_models import LockStatus, Position, Severity
from intercept_core.geometry import distance
from intercept_core.kinematics import TargetPattern
from intercept_core.settings import SimulationSettings


def messages(snap):
    return [e.message for e in snap.log]


# ---------------------------------------------------------------------------
# Start-up
# ---------------------------------------------------------------------------

def test_initial_snapshot(clock):
    snap = clock.get_snapshot()
    assert snap.tick == 0
    assert snap.interceptor.position == Position(200.0, 400.0)
    assert snap.target.position == pytest.approx((700.0, 200.0))
    assert snap.status is LockStatus.SEARCHING
    assert snap.interceptor_trail == ()
    assert snap.target_trail == ()
    assert snap.armed is True
    assert snap.flight_mode == "GUIDED"
    assert "System initialized" in messages(snap)
    assert messages(snap)[0] == "Interceptor armed and ready"


# ---------------------------------------------------------------------------
# Tick
# ---------------------------------------------------------------------------

def test_trail_records_previous_position(clock, manual_time):
    start = clock.get_snapshot()
    snap = clock.tick(manual_time.advance())
    assert snap.interceptor_trail == (start.interceptor.position,)
    assert snap.target_trail == (start.target.position,)
    assert snap.interceptor.position != start.interceptor.position


def test_trails_are_capped(clock, manual_time):
    snaps = run_ticks(clock, manual_time, 45)
    last = snaps[-1]
    assert len(last.interceptor_trail) == 30
    assert len(last.target_trail) == 30
    assert last.interceptor_trail[-1] == snaps[-2].interceptor.position
    assert last.interceptor_trail[0] == snaps[-31].interceptor.position


def test_signal_history_is_capped(clock, manual_time):
    snap = run_ticks(clock, manual_time, 40)[-1]
    assert len(snap.signal_history) == 20
    assert snap.signal_history[-1].timestamp == manual_time.now
    assert all(90.0 <= s.value <= 100.0 for s in snap.signal_history)


def test_closing_velocity_at_cruise(frozen_clock, manual_time):
    snap = frozen_clock.tick(manual_time.advance())
    # 3 plane units per tick * 0.5 m/unit * 30 ticks/s
    assert snap.engagement.closing_velocity == pytest.approx(45.0)
    assert snap.engagement.time_to_intercept == pytest.approx(snap.engagement.range_m / 45.0)


def test_frozen_target_scenario(frozen_clock, manual_time):
    target = Position(600.0, 200.0)
    statuses = [frozen_clock.get_snapshot().status]
    separations = [frozen_clock.get_snapshot().engagement.separation]
    for snap in run_ticks(frozen_clock, manual_time, 400):
        assert snap.target.position == target
        separations.append(snap.engagement.separation)
        if snap.status is not statuses[-1]:
            statuses.append(snap.status)

    assert statuses == [LockStatus.SEARCHING, LockStatus.ACQUIRING, LockStatus.LOCKED, LockStatus.INTERCEPTED]
    assert all(b <= a for a, b in zip(separations, separations[1:]))
    final = frozen_clock.get_snapshot()
    assert distance(final.interceptor.position, target) <= 10.0


def test_state_edges_logged_once(frozen_clock, manual_time):
    run_ticks(frozen_clock, manual_time, 400)
    # Log holds the 10 newest entries; only the two edge entries arrive after start-up
    log = messages(frozen_clock.get_snapshot())
    assert log.count("Target lock acquired") == 1
    assert log.count("Target intercepted") == 1
    assert log[0] == "Target intercepted"


def test_intercept_latch_holds(frozen_clock, manual_time):
    snaps = run_ticks(frozen_clock, manual_time, 400)
    first = next(i for i, s in enumerate(snaps) if s.status is LockStatus.INTERCEPTED)
    assert all(s.status is LockStatus.INTERCEPTED for s in snaps[first:])


def test_respawn_after_consecutive_intercepted_ticks(frozen_target_settings, manual_time):
    clock = SimulationClock(frozen_target_settings.with_overrides(respawn_after_ticks=5), time_source=manual_time)
    snap = clock.get_snapshot()
    while snap.status is not LockStatus.INTERCEPTED:
        snap = clock.tick(manual_time.advance())
    for _ in range(3):
        assert clock.tick(manual_time.advance()).status is LockStatus.INTERCEPTED
    snap = clock.tick(manual_time.advance())
    assert snap.status is LockStatus.SEARCHING
    assert snap.interceptor.position == Position(200.0, 400.0)
    assert snap.interceptor_trail == () and snap.target_trail == ()
    assert messages(snap)[0].startswith("New target acquired")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def test_reset_clears_trails_and_status(frozen_clock, manual_time):
    run_ticks(frozen_clock, manual_time, 300)
    assert frozen_clock.get_snapshot().status is LockStatus.INTERCEPTED
    frozen_clock.submit_command(Reset())
    snap = frozen_clock.get_snapshot()
    assert snap.status is LockStatus.SEARCHING
    assert snap.interceptor_trail == ()
    assert snap.target_trail == ()
    assert snap.interceptor.position == Position(200.0, 400.0)
    assert messages(snap)[0] == "Simulation reset"


def test_reset_reason_is_logged(clock):
    clock.submit_command(Reset("respawn drill"))
    snap = clock.get_snapshot()
    assert messages(snap)[0] == "Simulation reset (respawn drill)"
    assert snap.log[0].severity is Severity.INFO


def test_reset_from_searching(clock, manual_time):
    run_ticks(clock, manual_time, 3)
    clock.submit_command(Reset())
    snap = clock.get_snapshot()
    assert snap.status is LockStatus.SEARCHING
    assert snap.interceptor_trail == ()


def test_pause_freezes_state(clock, manual_time):
    run_ticks(clock, manual_time, 5)
    clock.submit_command(Pause())
    before = clock.get_snapshot()
    assert before.paused

    for _ in range(20):
        manual_time.advance(0.5)
        snap = clock.tick()
        assert snap.interceptor == before.interceptor
        assert snap.target == before.target
        assert snap.interceptor_trail == before.interceptor_trail
        assert snap.signal_history == before.signal_history
        assert snap.engagement == before.engagement
        assert snap.tick == before.tick


def test_resume_does_not_catch_up(manual_time):
    settings = SimulationSettings(seed=1)
    clock = SimulationClock(settings, time_source=manual_time)
    run_ticks(clock, manual_time, 5)
    clock.submit_command(Pause())
    manual_time.advance(60.0)
    clock.submit_command(Resume())
    snap = clock.tick(manual_time.advance(30.0))
    expected = TargetPattern.from_settings(settings).position_at(6 * PERIOD)
    assert snap.target.position == pytest.approx(expected)
    assert snap.tick == 6
    assert not snap.paused


def test_emergency_stop_is_idempotent(clock, manual_time):
    run_ticks(clock, manual_time, 3)
    clock.submit_command(EmergencyStop())
    once = clock.get_snapshot()
    clock.submit_command(EmergencyStop())
    twice = clock.get_snapshot()
    for snap in (once, twice):
        assert snap.paused
        assert not snap.armed
        assert snap.flight_mode == "LAND"
    assert messages(twice).count("EMERGENCY STOP ACTIVATED") == 1
    assert twice.log == once.log
    assert twice.log[0].severity is Severity.WARNING


def test_flight_mode_change_logged(clock):
    clock.submit_command(SetFlightMode("loiter"))
    snap = clock.get_snapshot()
    assert snap.flight_mode == "LOITER"
    assert messages(snap)[0] == "Flight mode changed to LOITER"


def test_unknown_flight_mode_rejected(clock):
    clock.submit_command(SetFlightMode("HOVER"))
    snap = clock.get_snapshot()
    assert snap.flight_mode == "GUIDED"
    assert snap.log[0].severity is Severity.WARNING
    assert "HOVER" in snap.log[0].message


def test_arm_toggle_is_noop_when_unchanged(clock):
    before = clock.get_snapshot().log
    clock.submit_command(SetArmed(True))
    assert clock.get_snapshot().log == before
    clock.submit_command(SetArmed(False))
    snap = clock.get_snapshot()
    assert not snap.armed
    assert messages(snap)[0] == "System DISARMED"
    clock.submit_command(SetArmed(True))
    assert clock.get_snapshot().log[0].severity is Severity.WARNING


def test_display_only_commands(clock):
    clock.submit_command(SetTrackingView("target"))
    clock.submit_command(SetZoom(2.0))
    snap = clock.get_snapshot()
    assert snap.tracking_view == "target"
    assert snap.zoom == 2.0


@pytest.mark.parametrize("cmd", [
    SetZoom(10.0),
    SetZoom("close"),
    SetZoom(True),
    SetTrackingView("sideways"),
    SetArmed("yes"),
    SetTrailLength(20),
    SetTrailLength(40.5),
    "launch",
])
def test_invalid_commands_leave_state_unchanged(clock, cmd):
    before = clock.get_snapshot()
    clock.submit_command(cmd)
    snap = clock.get_snapshot()
    assert snap.zoom == before.zoom
    assert snap.tracking_view == before.tracking_view
    assert snap.armed == before.armed
    assert snap.trail_length == before.trail_length
    assert snap.log[0].severity is Severity.WARNING
    assert snap.log[0].message.startswith("Command rejected")


def test_trail_length_keeps_most_recent_positions(clock, manual_time):
    snaps = run_ticks(clock, manual_time, 45)
    assert len(snaps[-1].interceptor_trail) == 30
    clock.submit_command(SetTrailLength(50))
    snap = clock.get_snapshot()
    assert snap.trail_length == 50
    assert snap.interceptor_trail == snaps[-1].interceptor_trail
    snaps = run_ticks(clock, manual_time, 30)
    assert len(snaps[-1].interceptor_trail) == 50
    assert len(snaps[-1].target_trail) == 50

    recent = snaps[-1].target_trail[-30:]
    clock.submit_command(SetTrailLength(30))
    snap = clock.get_snapshot()
    assert snap.trail_length == 30
    assert snap.target_trail == recent


def test_commands_apply_while_paused(clock):
    clock.submit_command(Pause())
    clock.submit_command(Reset())
    clock.submit_command(SetFlightMode("RTL"))
    snap = clock.get_snapshot()
    assert snap.paused
    assert snap.flight_mode == "RTL"
    assert messages(snap)[:2] == ["Flight mode changed to RTL", "Simulation reset"]


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

def test_snapshot_is_immutable(clock, manual_time):
    snap = clock.tick(manual_time.advance())
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.paused = True
    with pytest.raises(TypeError):
        snap.telemetry["altitude"] = 0.0
    with pytest.raises(AttributeError):
        snap.interceptor.position.x = 0.0


def test_published_snapshot_is_not_mutated_by_later_ticks(clock, manual_time):
    old = clock.tick(manual_time.advance())
    old_pos = old.interceptor.position
    old_trail = old.interceptor_trail
    old_alt = old.telemetry["altitude"]
    run_ticks(clock, manual_time, 10)
    assert clock.get_snapshot() is not old
    assert old.interceptor.position == old_pos
    assert old.interceptor_trail == old_trail
    assert old.telemetry["altitude"] == old_alt


def test_same_seed_same_run(manual_time):
    a = SimulationClock(SimulationSettings(seed=5), time_source=lambda: 0.0)
    b = SimulationClock(SimulationSettings(seed=5), time_source=lambda: 0.0)
    for i in range(1, 60):
        sa, sb = a.tick(i * PERIOD), b.tick(i * PERIOD)
        assert sa.interceptor == sb.interceptor
        assert sa.target == sb.target
        assert dict(sa.telemetry) == dict(sb.telemetry)


def test_large_time_gap_is_clamped(frozen_target_settings):
    clock = SimulationClock(frozen_target_settings.with_overrides(target_amplitude=(100.0, 80.0)),
                            time_source=lambda: 0.0)
    clock.tick(0.0)
    snap = clock.tick(3600.0)
    expected = TargetPattern.from_settings(clock.settings).position_at(PERIOD + 0.25)
    assert snap.target.position == pytest.approx(expected)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_runner_ticks_and_stops():
    clock = SimulationClock(SimulationSettings(seed=3))
    runner = SimulationRunner(clock, tick_hz=200.0)
    runner.start()
    try:
        assert _wait_for(lambda: clock.get_snapshot().tick >= 3)
    finally:
        runner.stop(timeout=2.0)
    assert not runner.is_alive()
    assert runner.ticks_run >= 3


def test_runner_skips_ticks_while_paused():
    clock = SimulationClock(SimulationSettings(seed=3))
    clock.submit_command(Pause())
    runner = SimulationRunner(clock, tick_hz=200.0)
    runner.start()
    try:
        time.sleep(0.05)
    finally:
        runner.stop(timeout=2.0)
    assert runner.ticks_run == 0
    assert clock.get_snapshot().tick == 0
