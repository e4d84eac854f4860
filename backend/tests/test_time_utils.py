import pytest

from run_tracker.core.time_utils import (
    average_speed_kmh,
    compute_pace,
    format_clock,
    format_duration,
    pace_min_per_km,
    seconds_to_hhmmss,
)


def test_seconds_to_hhmmss():
    assert seconds_to_hhmmss(2732) == "00:45:32"


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "00:00"), (65, "01:05"), (3599, "59:59"), (3725, "01:02:05")],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


@pytest.mark.parametrize(
    "seconds,expected",
    [(9, "9s"), (123, "2m 3s"), (3723, "1h 2m 3s")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_pace_per_km():
    assert compute_pace(1800, 5.0) == "6:00/km"
    assert pace_min_per_km(1800, 5.0) == pytest.approx(6.0)


def test_pace_without_distance():
    assert compute_pace(600, 0.0) == "0:00/km"
    assert pace_min_per_km(600, 0.0) == 0.0


def test_average_speed():
    assert average_speed_kmh(5.0, 1800) == pytest.approx(10.0)


@pytest.mark.parametrize("distance,duration", [(5.0, 0), (0.0, 1800), (0.0, 0)])
def test_average_speed_guards_division(distance, duration):
    assert average_speed_kmh(distance, duration) == 0.0
