from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from run_tracker.core.time_utils import pace_min_per_km


class TrackingState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StepReading:
    """Raw cumulative step counter value as reported by the device."""
    steps: int
    timestamp: datetime


@dataclass(frozen=True)
class PositionFix:
    """
    One reported geographic position.

    `speed` is metres/second as the source reports it (None when the
    source has no speed). `session_id` is stamped by the coordinator.
    """
    latitude: float
    longitude: float
    timestamp: datetime
    speed: Optional[float] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class SnapshotPoint:
    timestamp: datetime
    steps: int
    speed_kmh: float
    distance_km: float
    session_id: str


@dataclass(frozen=True)
class Session:
    id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    total_steps: int = 0
    total_distance_km: float = 0.0
    average_speed_kmh: float = 0.0
    duration_seconds: int = 0
    # Only populated when loaded with points
    route_points: Tuple[PositionFix, ...] = ()
    data_points: Tuple[SnapshotPoint, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class Aggregates:
    """Read-only view of the running totals handed to observers."""
    state: TrackingState
    session_id: Optional[str]
    elapsed_seconds: int
    steps: int
    distance_km: float
    speed_kmh: float

    @property
    def pace_min_per_km(self) -> float:
        return pace_min_per_km(self.elapsed_seconds, self.distance_km)
