from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from run_tracker.core.time_utils import (
    compute_pace,
    format_clock,
    format_duration,
    seconds_to_hhmmss,
)
from run_tracker.tracking.types import Aggregates, PositionFix, Session, SnapshotPoint, TrackingState


class StepIn(BaseModel):
    """Raw cumulative pedometer value pushed by the device."""
    steps: int = Field(..., ge=0)
    timestamp: Optional[datetime] = None


class PositionIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    speed: Optional[float] = None  # m/s as reported by the GPS
    timestamp: Optional[datetime] = None


class LiveStats(BaseModel):
    """What the tracking screen shows."""

    state: TrackingState
    session_id: Optional[str] = None
    elapsed_seconds: int
    elapsed: str  # 'MM:SS' or 'HH:MM:SS'
    steps: int
    distance_km: float
    speed_kmh: float
    pace: str  # e.g. "6:00/km"

    @classmethod
    def from_aggregates(cls, agg: Aggregates) -> "LiveStats":
        return cls(
            state=agg.state,
            session_id=agg.session_id,
            elapsed_seconds=agg.elapsed_seconds,
            elapsed=format_clock(agg.elapsed_seconds),
            steps=agg.steps,
            distance_km=round(agg.distance_km, 4),
            speed_kmh=round(agg.speed_kmh, 2),
            pace=compute_pace(agg.elapsed_seconds, agg.distance_km),
        )


class SessionRead(BaseModel):
    """Summary row for the history list."""

    id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    total_steps: int
    total_distance_km: float
    average_speed_kmh: float
    duration_seconds: int
    duration: str  # "HH:MM:SS"
    duration_text: str  # "1h 2m 3s"
    pace: str  # e.g. "6:00/km"

    @classmethod
    def from_session(cls, session: Session) -> "SessionRead":
        return cls(
            id=session.id,
            start_time=session.start_time,
            end_time=session.end_time,
            total_steps=session.total_steps,
            total_distance_km=session.total_distance_km,
            average_speed_kmh=session.average_speed_kmh,
            duration_seconds=session.duration_seconds,
            duration=seconds_to_hhmmss(session.duration_seconds),
            duration_text=format_duration(session.duration_seconds),
            pace=compute_pace(session.duration_seconds, session.total_distance_km),
        )


class RoutePointRead(BaseModel):
    latitude: float
    longitude: float
    timestamp: datetime
    speed: Optional[float] = None

    @classmethod
    def from_fix(cls, fix: PositionFix) -> "RoutePointRead":
        return cls(latitude=fix.latitude, longitude=fix.longitude, timestamp=fix.timestamp, speed=fix.speed)


class DataPointRead(BaseModel):
    timestamp: datetime
    steps: int
    speed_kmh: float
    distance_km: float

    @classmethod
    def from_point(cls, point: SnapshotPoint) -> "DataPointRead":
        return cls(
            timestamp=point.timestamp,
            steps=point.steps,
            speed_kmh=point.speed_kmh,
            distance_km=point.distance_km,
        )


class SessionDetail(SessionRead):
    route_points: list[RoutePointRead] = []
    data_points: list[DataPointRead] = []

    @classmethod
    def from_session(cls, session: Session) -> "SessionDetail":
        summary = SessionRead.from_session(session)
        return cls(
            **summary.model_dump(),
            route_points=[RoutePointRead.from_fix(p) for p in session.route_points],
            data_points=[DataPointRead.from_point(p) for p in session.data_points],
        )
