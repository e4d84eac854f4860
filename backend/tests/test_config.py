import pytest
from pydantic import ValidationError

from run_tracker.core.config import Settings


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("LOCATION_PERMISSION_GRANTED", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = Settings()

    assert s.location_permission_granted is False
    assert s.log_level == "DEBUG"
    assert s.max_fix_delta_m == 100.0


def test_non_positive_threshold_is_rejected(monkeypatch):
    monkeypatch.setenv("MAX_FIX_DELTA_M", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_tick_period_is_not_configurable(monkeypatch):
    # each tick adds one second of elapsed time, so the period stays fixed
    monkeypatch.setenv("TICK_SECONDS", "0.05")

    s = Settings()

    assert not hasattr(s, "tick_seconds")
