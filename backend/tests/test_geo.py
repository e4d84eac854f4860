from datetime import datetime, timezone

import pytest

from run_tracker.tracking.geo import (
    Accepted,
    NoPriorFix,
    Rejected,
    evaluate_fix,
    haversine_m,
    speed_kmh,
)
from run_tracker.tracking.types import PositionFix

T = datetime(2025, 5, 1, 7, 0, tzinfo=timezone.utc)


def fix(lat, lon, speed=None):
    return PositionFix(latitude=lat, longitude=lon, timestamp=T, speed=speed)


def test_haversine_one_degree_of_latitude():
    # 2 * pi * R / 360
    assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111194.9, abs=0.5)


def test_haversine_is_symmetric_and_zero_for_same_point():
    assert haversine_m(1.0, 1.0, 1.0, 1.0) == 0.0
    assert haversine_m(1.0, 1.0, 1.0005, 1.0) == pytest.approx(haversine_m(1.0005, 1.0, 1.0, 1.0))


def test_first_fix_has_no_prior():
    assert evaluate_fix(None, fix(1.0, 1.0)) == NoPriorFix()


def test_small_step_is_accepted_in_km():
    outcome = evaluate_fix(fix(1.0, 1.0), fix(1.0005, 1.0))
    assert isinstance(outcome, Accepted)
    # ~55.6 m
    assert outcome.delta_km == pytest.approx(0.0556, abs=1e-3)


def test_jump_is_rejected():
    outcome = evaluate_fix(fix(1.0005, 1.0), fix(2.0, 1.0))
    assert isinstance(outcome, Rejected)
    assert outcome.delta_m > 100_000


def test_no_movement_is_rejected():
    outcome = evaluate_fix(fix(1.0, 1.0), fix(1.0, 1.0))
    assert outcome == Rejected(delta_m=0.0)


def test_delta_equal_to_threshold_is_rejected():
    a, b = fix(1.0, 1.0), fix(1.0005, 1.0)
    d = haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)
    assert isinstance(evaluate_fix(a, b, max_delta_m=d), Rejected)
    assert isinstance(evaluate_fix(a, b, max_delta_m=d + 0.01), Accepted)


def test_speed_converts_mps_to_kmh():
    assert speed_kmh(fix(1.0, 1.0, speed=2.5)) == pytest.approx(9.0)


@pytest.mark.parametrize("reported", [None, -1.0])
def test_missing_or_invalid_speed_reads_as_zero(reported):
    assert speed_kmh(fix(1.0, 1.0, speed=reported)) == 0.0
