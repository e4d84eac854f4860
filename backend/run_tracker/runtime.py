import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session as DbSession

from run_tracker.core.clock import Clock, RealClock
from run_tracker.core.config import Settings
from run_tracker.services.sql_sink import SqlPersistenceSink
from run_tracker.tracking.coordinator import SessionCoordinator
from run_tracker.tracking.sources import FeedSource, StaticPermissionGate
from run_tracker.tracking.types import PositionFix, StepReading

logger = logging.getLogger(__name__)


@dataclass
class TrackerRuntime:
    """Everything the routers need, built once per application."""

    coordinator: SessionCoordinator
    gate: StaticPermissionGate
    step_feed: FeedSource[StepReading]
    position_feed: FeedSource[PositionFix]
    sink: SqlPersistenceSink
    clock: Clock


def build_runtime(
    settings: Settings,
    session_factory: Callable[[], DbSession],
    clock: Optional[Clock] = None,
) -> TrackerRuntime:
    clock = clock or RealClock()
    gate = StaticPermissionGate(settings.location_permission_granted)
    step_feed: FeedSource[StepReading] = FeedSource("step")
    position_feed: FeedSource[PositionFix] = FeedSource("position")
    sink = SqlPersistenceSink(session_factory)
    coordinator = SessionCoordinator(
        gate,
        step_feed,
        position_feed,
        sink,
        clock=clock,
        max_fix_delta_m=settings.max_fix_delta_m,
    )
    logger.info("Tracker ready (max fix delta=%sm)", settings.max_fix_delta_m)
    return TrackerRuntime(
        coordinator=coordinator,
        gate=gate,
        step_feed=step_feed,
        position_feed=position_feed,
        sink=sink,
        clock=clock,
    )
