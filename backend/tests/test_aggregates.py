from datetime import datetime, timedelta, timezone

import pytest

from run_tracker.tracking.aggregates import SessionAggregateStore
from run_tracker.tracking.geo import Accepted, NoPriorFix, Rejected
from run_tracker.tracking.types import PositionFix, StepReading, TrackingState

T = datetime(2025, 5, 1, 7, 0, tzinfo=timezone.utc)


def fix(lat, lon, speed=None, t=0):
    return PositionFix(latitude=lat, longitude=lon, timestamp=T + timedelta(seconds=t), speed=speed)


def test_fresh_store_is_zeroed():
    store = SessionAggregateStore()
    assert store.view(TrackingState.IDLE, None).steps == 0
    assert store.distance_km == 0.0
    assert store.last_fix is None
    assert store.step_baseline is None
    assert store.finalize() == (0, 0.0)


def test_accepted_then_rejected_fix():
    store = SessionAggregateStore()

    assert store.apply_position_fix(fix(1.0, 1.0, t=0)) == NoPriorFix()
    assert isinstance(store.apply_position_fix(fix(1.0005, 1.0, t=1)), Accepted)
    assert store.distance_km == pytest.approx(0.0556, abs=1e-3)
    after_first = store.distance_km

    jump = fix(2.0, 1.0, speed=3.0, t=2)
    assert isinstance(store.apply_position_fix(jump), Rejected)
    assert store.distance_km == after_first
    # rejected fix is still the new reference and still drives speed
    assert store.last_fix == jump
    assert store.speed_kmh == pytest.approx(10.8)


def test_distance_measured_from_rejected_reference():
    store = SessionAggregateStore()
    store.apply_position_fix(fix(1.0, 1.0))
    store.apply_position_fix(fix(2.0, 1.0))  # jump, rejected
    store.apply_position_fix(fix(2.0005, 1.0))  # small step from the jump point

    assert store.distance_km == pytest.approx(0.0556, abs=1e-3)


def test_distance_never_decreases():
    store = SessionAggregateStore()
    lats = [1.0, 1.0003, 1.0003, 1.5, 1.5004, 1.5001, 1.5006, 0.0, 0.0002]
    seen = []
    for i, lat in enumerate(lats):
        store.apply_position_fix(fix(lat, 1.0, t=i))
        seen.append(store.distance_km)

    assert seen == sorted(seen)


def test_step_readings_relative_to_first():
    store = SessionAggregateStore()
    assert store.apply_step_reading(StepReading(500, T)) == 0
    assert store.apply_step_reading(StepReading(515, T)) == 15
    assert store.step_baseline == 500


def test_tick_and_finalize():
    store = SessionAggregateStore()
    store.distance_km = 5.0
    for _ in range(1800):
        store.tick()

    assert store.finalize() == (1800, pytest.approx(10.0))


def test_tick_must_advance():
    store = SessionAggregateStore()
    with pytest.raises(ValueError):
        store.tick(0)


def test_snapshot_copies_current_totals():
    store = SessionAggregateStore()
    store.apply_step_reading(StepReading(100, T))
    store.apply_step_reading(StepReading(130, T))
    store.apply_position_fix(fix(1.0, 1.0, speed=2.0))
    store.tick()

    point = store.snapshot("abc", T)

    assert point.session_id == "abc"
    assert point.steps == 30
    assert point.speed_kmh == pytest.approx(7.2)
    assert point.distance_km == 0.0
    assert point.timestamp == T


def test_reset_clears_baseline_and_reference():
    store = SessionAggregateStore()
    store.apply_step_reading(StepReading(0, T))
    store.apply_position_fix(fix(1.0, 1.0))
    store.tick()

    store.reset()

    assert store.step_baseline is None
    assert store.last_fix is None
    assert store.elapsed_seconds == 0


def test_custom_noise_threshold():
    store = SessionAggregateStore(max_fix_delta_m=50.0)
    store.apply_position_fix(fix(1.0, 1.0))
    assert isinstance(store.apply_position_fix(fix(1.0005, 1.0)), Rejected)
