import asyncio
from typing import Any, Generic, Optional, TypeVar

from run_tracker.core.clock import Clock, RealClock
from run_tracker.core.constants import TICK_SECONDS
from run_tracker.tracking.errors import SourceNotSubscribed

T = TypeVar("T")


class StaticPermissionGate:
    """Answers the permission check from configuration."""

    def __init__(self, granted: bool = True):
        self.granted = granted

    async def check_and_request(self) -> bool:
        return self.granted


class _FeedSubscription(Generic[T]):
    """Async iterator over one attached queue; aclose() detaches it."""

    def __init__(self, feed: "FeedSource[T]", queue: asyncio.Queue):
        self._feed = feed
        self._queue = queue

    def __aiter__(self):
        return self

    async def __anext__(self) -> T:
        item = await self._queue.get()
        if isinstance(item, BaseException):
            self._feed._detach(self._queue)
            raise item
        return item

    async def aclose(self) -> None:
        self._feed._detach(self._queue)


class FeedSource(Generic[T]):
    """
    Push-based sensor source.

    Readings arrive from outside (the ingestion API) through `push()` and
    are handed out, in arrival order, to whoever holds the current
    `stream()`. Nothing is buffered while unsubscribed.
    """

    def __init__(self, name: str):
        self.name = name
        self._queue: Optional[asyncio.Queue] = None

    @property
    def subscribed(self) -> bool:
        return self._queue is not None

    def stream(self) -> _FeedSubscription[T]:
        # attach eagerly so pushes right after subscribing are not lost
        queue: asyncio.Queue = asyncio.Queue()
        self._queue = queue
        return _FeedSubscription(self, queue)

    def push(self, item: T) -> None:
        if self._queue is None:
            raise SourceNotSubscribed(f"{self.name} feed has no subscriber")
        self._queue.put_nowait(item)

    def fail(self, exc: Exception) -> None:
        """Make the current stream raise `exc`, ending it."""
        self.push(exc)  # type: ignore[arg-type]

    def _detach(self, queue: Any) -> None:
        if self._queue is queue:
            self._queue = None


class IntervalTicker:
    """Yields the current time once per period, forever."""

    def __init__(self, seconds: float = TICK_SECONDS, clock: Optional[Clock] = None):
        if seconds <= 0:
            raise ValueError("tick period must be > 0")
        self.seconds = seconds
        self.clock = clock or RealClock()

    async def stream(self):
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self.seconds
        while True:
            # schedule against the loop clock so ticks don't drift
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            next_at += self.seconds
            yield self.clock.now()
