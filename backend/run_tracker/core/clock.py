from datetime import datetime, timedelta, timezone


class Clock:
    """
    Base clock interface.
    """
    def now(self) -> datetime:
        raise NotImplementedError


class RealClock(Clock):
    """
    Wall clock, timezone-aware UTC.
    """
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock(Clock):
    """
    Clock for tests and simulations.
    Time advances only when explicitly set or advanced.
    """
    def __init__(self, start_time: datetime):
        self._current_time = start_time

    def now(self) -> datetime:
        return self._current_time

    def set(self, new_time: datetime) -> None:
        self._current_time = new_time

    def advance(self, seconds: float = 1.0) -> datetime:
        self._current_time += timedelta(seconds=seconds)
        return self._current_time
