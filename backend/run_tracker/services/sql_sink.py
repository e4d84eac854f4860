import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from run_tracker.models.data_point import DataPoint
from run_tracker.models.location_point import LocationPoint
from run_tracker.models.run_session import RunSession
from run_tracker.tracking.errors import PersistenceError
from run_tracker.tracking.types import PositionFix, Session, SnapshotPoint

logger = logging.getLogger(__name__)


def _as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything we write is UTC
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _to_session(row: RunSession, with_points: bool = False) -> Session:
    route_points = ()
    data_points = ()
    if with_points:
        route_points = tuple(
            PositionFix(
                latitude=p.latitude,
                longitude=p.longitude,
                timestamp=_as_utc(p.timestamp),
                speed=p.speed_mps,
                session_id=p.session_id,
            )
            for p in row.location_points
        )
        data_points = tuple(
            SnapshotPoint(
                timestamp=_as_utc(p.timestamp),
                steps=p.steps,
                speed_kmh=p.speed_kmh,
                distance_km=p.distance_km,
                session_id=p.session_id,
            )
            for p in row.data_points
        )
    return Session(
        id=row.id,
        start_time=_as_utc(row.start_time),
        end_time=_as_utc(row.end_time),
        total_steps=row.total_steps,
        total_distance_km=row.total_distance_km,
        average_speed_kmh=row.average_speed_kmh,
        duration_seconds=row.duration_seconds,
        route_points=route_points,
        data_points=data_points,
    )


class SqlPersistenceSink:
    """
    Session store on top of the SQLAlchemy session factory.

    Each call runs in its own short DB session. Database failures are
    rolled back and re-raised as PersistenceError.
    """

    def __init__(self, session_factory: Callable[[], DbSession]):
        self._session_factory = session_factory

    @contextmanager
    def _db(self, operation: str) -> Iterator[DbSession]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("%s failed: %s", operation, exc)
            raise PersistenceError(operation, exc) from exc
        finally:
            db.close()

    # ========================================================
    # WRITES
    # ========================================================
    def create_session(self, session: Session) -> None:
        with self._db("create_session") as db:
            db.add(
                RunSession(
                    id=session.id,
                    start_time=session.start_time,
                    end_time=session.end_time,
                    total_steps=session.total_steps,
                    total_distance_km=session.total_distance_km,
                    average_speed_kmh=session.average_speed_kmh,
                    duration_seconds=session.duration_seconds,
                )
            )
            db.commit()

    def update_session(self, session: Session) -> None:
        with self._db("update_session") as db:
            row = db.get(RunSession, session.id)
            if row is None:
                raise PersistenceError("update_session", LookupError(f"session {session.id} not found"))
            row.end_time = session.end_time
            row.total_steps = session.total_steps
            row.total_distance_km = session.total_distance_km
            row.average_speed_kmh = session.average_speed_kmh
            row.duration_seconds = session.duration_seconds
            db.commit()

    def append_position_fix(self, fix: PositionFix) -> None:
        if fix.session_id is None:
            raise PersistenceError("append_position_fix", ValueError("fix has no session id"))
        with self._db("append_position_fix") as db:
            db.add(
                LocationPoint(
                    session_id=fix.session_id,
                    latitude=fix.latitude,
                    longitude=fix.longitude,
                    timestamp=fix.timestamp,
                    speed_mps=fix.speed,
                )
            )
            db.commit()

    def append_snapshot(self, point: SnapshotPoint) -> None:
        with self._db("append_snapshot") as db:
            db.add(
                DataPoint(
                    session_id=point.session_id,
                    timestamp=point.timestamp,
                    steps=point.steps,
                    speed_kmh=point.speed_kmh,
                    distance_km=point.distance_km,
                )
            )
            db.commit()

    def delete_session(self, session_id: str) -> bool:
        with self._db("delete_session") as db:
            row = db.get(RunSession, session_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    # ========================================================
    # READS
    # ========================================================
    def list_sessions(self) -> List[Session]:
        """Most recent first, without points."""
        with self._db("list_sessions") as db:
            rows = db.query(RunSession).order_by(RunSession.start_time.desc()).all()
            return [_to_session(row) for row in rows]

    def load_session(self, session_id: str) -> Optional[Session]:
        with self._db("load_session") as db:
            row = db.get(RunSession, session_id)
            if row is None:
                return None
            return _to_session(row, with_points=True)
