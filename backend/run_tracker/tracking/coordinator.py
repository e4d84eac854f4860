import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, AsyncIterator, Callable, List, Optional, Tuple

from run_tracker.core.clock import Clock, RealClock
from run_tracker.core.constants import MAX_FIX_DELTA_M, TICK_SECONDS
from run_tracker.tracking.aggregates import SessionAggregateStore
from run_tracker.tracking.errors import (
    PermissionDenied,
    PersistenceError,
    SensorStreamError,
    TrackingError,
    TrackingStateError,
)
from run_tracker.tracking.geo import Rejected
from run_tracker.tracking.interfaces import (
    PermissionGate,
    PersistenceSink,
    PositionSource,
    StepSource,
    TickSource,
)
from run_tracker.tracking.observers import AGGREGATES_CHANGED, ERROR_OCCURRED, TrackingEventBus
from run_tracker.tracking.sources import IntervalTicker
from run_tracker.tracking.types import (
    Aggregates,
    PositionFix,
    Session,
    StepReading,
    TrackingState,
)

logger = logging.getLogger(__name__)

STEP = "step"
POSITION = "position"
TICK = "tick"
_ERROR = "error"


@dataclass
class _Subscriptions:
    tasks: List[asyncio.Task] = field(default_factory=list)
    streams: List[AsyncIterator] = field(default_factory=list)


async def _close_stream(stream: AsyncIterator) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


class SessionCoordinator:
    """
    Owns the lifecycle of one running session.

    State machine IDLE -> ACTIVE -> COMPLETED (reset() goes back to IDLE).
    While ACTIVE, the step, position and tick sources are each pumped by
    their own task into a single mailbox; one consumer task applies the
    events in order, so exactly one mutation of the aggregates is in
    flight at any time. Per-source order is kept, cross-source order is
    whatever the loop delivers.

    Everything runs on one asyncio event loop.
    """

    # ========================================================
    # SETUP & WIRING
    # ========================================================
    def __init__(
        self,
        permission_gate: PermissionGate,
        step_source: StepSource,
        position_source: PositionSource,
        sink: PersistenceSink,
        *,
        tick_source: Optional[TickSource] = None,
        clock: Optional[Clock] = None,
        events: Optional[TrackingEventBus] = None,
        max_fix_delta_m: float = MAX_FIX_DELTA_M,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._gate = permission_gate
        self._step_source = step_source
        self._position_source = position_source
        self._sink = sink
        self._clock = clock or RealClock()
        self._tick_source = tick_source or IntervalTicker(TICK_SECONDS, self._clock)
        self.events = events or TrackingEventBus()
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

        self._store = SessionAggregateStore(max_fix_delta_m)
        self._state = TrackingState.IDLE
        self._session: Optional[Session] = None
        self._starting = False
        self._closed = False

        # live only while ACTIVE
        self._mailbox: Optional[asyncio.Queue] = None
        self._subscriptions = _Subscriptions()

    # ========================================================
    # READ API
    # ========================================================
    @property
    def state(self) -> TrackingState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TrackingState.ACTIVE

    @property
    def aggregates(self) -> Aggregates:
        session_id = self._session.id if self._session else None
        return self._store.view(self._state, session_id)

    @property
    def current_session(self) -> Optional[Session]:
        """Immutable copy; while active it carries the live totals."""
        if self._session is None or not self.is_active:
            return self._session
        return replace(
            self._session,
            total_steps=self._store.steps,
            total_distance_km=self._store.distance_km,
            duration_seconds=self._store.elapsed_seconds,
        )

    # ========================================================
    # TRANSITIONS
    # ========================================================
    async def start(self) -> Optional[Session]:
        """
        Begin a new session.

        Re-entrant calls while active (or while a start is still waiting on
        the permission gate) are ignored. Raises PermissionDenied or
        PersistenceError with the coordinator left IDLE and nothing
        subscribed; raises TrackingStateError from COMPLETED or once the
        coordinator has been closed.
        """
        if self.is_active or self._starting:
            logger.debug("start() ignored, session already running")
            return self.current_session
        if self._closed:
            raise TrackingStateError("Coordinator is closed")
        if self._state is TrackingState.COMPLETED:
            raise TrackingStateError("Session already completed; reset before starting a new one")

        self._starting = True
        try:
            if not await self._gate.check_and_request():
                logger.warning("Start refused: location permission denied")
                raise PermissionDenied()
            if self._closed:
                # closed while the gate was pending
                raise TrackingStateError("Coordinator closed during start")

            session = Session(id=self._new_id(), start_time=self._clock.now())
            self._store.reset()
            try:
                self._sink.create_session(session)
            except Exception as exc:
                logger.error("Could not create session %s: %s", session.id, exc)
                if isinstance(exc, PersistenceError):
                    raise
                raise PersistenceError("create_session", exc) from exc

            try:
                await self._subscribe()
            except BaseException:
                logger.exception("Subscribing sources failed; rolling back session %s", session.id)
                self._discard_created(session.id)
                raise

            self._session = session
            self._state = TrackingState.ACTIVE
        finally:
            self._starting = False

        logger.info("Session %s started", session.id)
        self._notify()
        return session

    async def stop(self) -> Optional[Session]:
        """
        Close the active session and return the finalized record.

        No-op unless ACTIVE. Subscriptions are cancelled before the first
        suspension point, so nothing queued can land after finalize().
        A failed closing write is published on `events`; the transition
        to COMPLETED happens regardless.
        """
        if not self.is_active:
            return self._session

        subscriptions = self._cancel_subscriptions()

        duration_seconds, average_speed = self._store.finalize()
        closed = replace(
            self._session,
            end_time=self._clock.now(),
            total_steps=self._store.steps,
            total_distance_km=self._store.distance_km,
            average_speed_kmh=average_speed,
            duration_seconds=duration_seconds,
        )
        self._session = closed
        self._persist("update_session", self._sink.update_session, closed)
        self._state = TrackingState.COMPLETED

        logger.info(
            "Session %s completed: %ss, %.3f km, %d steps, %.2f km/h",
            closed.id,
            closed.duration_seconds,
            closed.total_distance_km,
            closed.total_steps,
            closed.average_speed_kmh,
        )
        self._notify()

        await self._release(subscriptions)
        return closed

    def reset(self) -> None:
        if self.is_active:
            raise TrackingStateError("Stop the active session before resetting")
        self._session = None
        self._store.reset()
        self._state = TrackingState.IDLE
        self._notify()

    async def close(self) -> None:
        """
        Dispose: stop an active session and make sure no task outlives us.
        A start() still waiting on the permission gate is refused once the
        gate answers.
        """
        self._closed = True
        if self.is_active:
            await self.stop()
        await self._release(self._cancel_subscriptions())

    async def __aenter__(self) -> "SessionCoordinator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ========================================================
    # SUBSCRIPTIONS
    # ========================================================
    async def _subscribe(self) -> None:
        mailbox: asyncio.Queue = asyncio.Queue()
        streams: List[Tuple[str, AsyncIterator]] = []
        try:
            for kind, source in (
                (STEP, self._step_source),
                (POSITION, self._position_source),
                (TICK, self._tick_source),
            ):
                streams.append((kind, source.stream()))
        except BaseException:
            for _, stream in streams:
                await _close_stream(stream)
            raise

        tasks = [
            asyncio.create_task(self._pump(kind, stream, mailbox), name=f"tracker-{kind}")
            for kind, stream in streams
        ]
        tasks.append(asyncio.create_task(self._consume(mailbox), name="tracker-consumer"))
        self._mailbox = mailbox
        self._subscriptions = _Subscriptions(tasks, [stream for _, stream in streams])

    def _cancel_subscriptions(self) -> _Subscriptions:
        """Synchronous half of teardown: nothing queued is applied after this."""
        subscriptions, self._subscriptions = self._subscriptions, _Subscriptions()
        self._mailbox = None
        for task in subscriptions.tasks:
            task.cancel()
        return subscriptions

    @staticmethod
    async def _release(subscriptions: _Subscriptions) -> None:
        current = asyncio.current_task()
        pending = [t for t in subscriptions.tasks if t is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        # a task cancelled before its first step never reaches its finally
        for stream in subscriptions.streams:
            await _close_stream(stream)

    def _discard_created(self, session_id: str) -> None:
        try:
            self._sink.delete_session(session_id)
        except Exception as exc:
            logger.error("Could not discard session %s: %s", session_id, exc)

    async def _pump(self, kind: str, stream: AsyncIterator, mailbox: asyncio.Queue) -> None:
        try:
            async for item in stream:
                mailbox.put_nowait((kind, item))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            mailbox.put_nowait((_ERROR, SensorStreamError(kind, exc)))
        else:
            logger.info("%s stream ended", kind)
        finally:
            await _close_stream(stream)

    async def _consume(self, mailbox: asyncio.Queue) -> None:
        while True:
            kind, payload = await mailbox.get()
            if mailbox is not self._mailbox:
                # stopped while this was queued
                return
            try:
                self._dispatch(kind, payload)
            except Exception as exc:
                logger.exception("Failed to apply %s event", kind)
                self._report(SensorStreamError(kind, exc))

    # ========================================================
    # EVENT HANDLERS
    # ========================================================
    def _dispatch(self, kind: str, payload: Any) -> None:
        if kind == STEP:
            self._on_step(payload)
        elif kind == POSITION:
            self._on_position(payload)
        elif kind == TICK:
            self._on_tick(payload)
        elif kind == _ERROR:
            self._report(payload)
        else:
            raise ValueError(f"unknown event kind {kind!r}")

    def _on_step(self, reading: StepReading) -> None:
        self._store.apply_step_reading(reading)
        self._notify()

    def _on_position(self, fix: PositionFix) -> None:
        outcome = self._store.apply_position_fix(fix)
        if isinstance(outcome, Rejected):
            logger.debug("Fix rejected as noise (%.1f m)", outcome.delta_m)
        self._persist(
            "append_position_fix",
            self._sink.append_position_fix,
            replace(fix, session_id=self._session.id),
        )
        self._notify()

    def _on_tick(self, timestamp: datetime) -> None:
        self._store.tick()
        point = self._store.snapshot(self._session.id, timestamp)
        self._persist("append_snapshot", self._sink.append_snapshot, point)
        self._notify()

    # ========================================================
    # INTERNAL HELPERS
    # ========================================================
    def _persist(self, operation: str, write: Callable[[Any], None], record: Any) -> None:
        try:
            write(record)
        except Exception as exc:
            error = exc if isinstance(exc, PersistenceError) else PersistenceError(operation, exc)
            self._report(error)

    def _report(self, error: TrackingError) -> None:
        logger.warning("Tracking error: %s", error)
        self.events.publish(ERROR_OCCURRED, error)

    def _notify(self) -> None:
        self.events.publish(AGGREGATES_CHANGED, self.aggregates)
