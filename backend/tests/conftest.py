import asyncio
import os
from datetime import datetime, timezone

import pytest

# Use in-memory sqlite for tests; must be set before run_tracker.db is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from run_tracker.core.clock import ManualClock  # noqa: E402
from run_tracker.tracking.coordinator import SessionCoordinator  # noqa: E402
from run_tracker.tracking.sources import FeedSource  # noqa: E402


T0 = datetime(2025, 5, 1, 7, 0, 0, tzinfo=timezone.utc)


async def settle(rounds: int = 20) -> None:
    """Let pump and consumer tasks run until the mailbox is drained."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class RecordingSink:
    """
    In-memory PersistenceSink double.
    Operations named in `fail_on` raise instead of recording.
    """
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.created = []
        self.updated = []
        self.fixes = []
        self.snapshots = []
        self.deleted = []

    def _check(self, operation):
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} unavailable")

    def create_session(self, session):
        self._check("create_session")
        self.created.append(session)

    def update_session(self, session):
        self._check("update_session")
        self.updated.append(session)

    def append_position_fix(self, fix):
        self._check("append_position_fix")
        self.fixes.append(fix)

    def append_snapshot(self, point):
        self._check("append_snapshot")
        self.snapshots.append(point)

    def list_sessions(self):
        return list(self.created)

    def load_session(self, session_id):
        return next((s for s in self.created if s.id == session_id), None)

    def delete_session(self, session_id):
        self.deleted.append(session_id)
        return True


class Gate:
    def __init__(self, granted=True):
        self.granted = granted
        self.calls = 0

    async def check_and_request(self):
        self.calls += 1
        return self.granted


class CountingFeed(FeedSource):
    """FeedSource that counts how many times it was subscribed."""
    def __init__(self, name):
        super().__init__(name)
        self.subscriptions = 0

    def stream(self):
        self.subscriptions += 1
        return super().stream()


class Recorder:
    """Observer collecting every payload it is handed."""
    def __init__(self):
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def gate():
    return Gate()


@pytest.fixture
def feeds():
    """(steps, positions, ticks) feeds for a coordinator."""
    return CountingFeed("step"), CountingFeed("position"), CountingFeed("tick")



@pytest.fixture
def make_coordinator(gate, sink, feeds, clock):
    """Factory wiring a coordinator to the doubles above; kwargs override."""
    steps, positions, ticks = feeds

    def _make(**overrides):
        kwargs = dict(tick_source=ticks, clock=clock, id_factory=lambda: "session-1")
        kwargs.update(overrides)
        return SessionCoordinator(
            kwargs.pop("gate", gate),
            steps,
            positions,
            kwargs.pop("sink", sink),
            **kwargs,
        )

    return _make

