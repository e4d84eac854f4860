from datetime import datetime, timedelta, timezone
import math
import random
import uuid

from run_tracker.db import Base, SessionLocal, engine
from run_tracker.models.run_session import RunSession  # noqa: F401
from run_tracker.models.location_point import LocationPoint  # noqa: F401
from run_tracker.models.data_point import DataPoint  # noqa: F401
from run_tracker.services.sql_sink import SqlPersistenceSink
from run_tracker.tracking.aggregates import SessionAggregateStore
from run_tracker.tracking.types import PositionFix, Session, StepReading

# Loop start point (any park will do)
ORIGIN_LAT = 52.3600
ORIGIN_LON = 4.8850


def seed_session(sink: SqlPersistenceSink, start: datetime, minutes: int, speed_mps: float) -> Session:
    """Replay a synthetic loop through the aggregate store and persist it."""
    session = Session(id=str(uuid.uuid4()), start_time=start)
    sink.create_session(session)

    store = SessionAggregateStore()
    seconds = minutes * 60
    radius_deg = 0.004
    raw_steps = random.randint(1000, 50000)  # device counter doesn't start at 0

    for t in range(1, seconds + 1):
        now = start + timedelta(seconds=t)
        angle = 2 * math.pi * t / 600  # one lap every 10 minutes
        fix = PositionFix(
            latitude=ORIGIN_LAT + radius_deg * math.sin(angle),
            longitude=ORIGIN_LON + radius_deg * math.cos(angle),
            timestamp=now,
            speed=speed_mps + random.uniform(-0.3, 0.3),
            session_id=session.id,
        )
        store.apply_position_fix(fix)
        if t % 5 == 0:
            sink.append_position_fix(fix)

        raw_steps += random.choice([2, 3, 3, 3])
        store.apply_step_reading(StepReading(steps=raw_steps, timestamp=now))
        store.tick()
        sink.append_snapshot(store.snapshot(session.id, now))

    duration_seconds, average_speed = store.finalize()
    closed = Session(
        id=session.id,
        start_time=start,
        end_time=start + timedelta(seconds=duration_seconds),
        total_steps=store.steps,
        total_distance_km=store.distance_km,
        average_speed_kmh=average_speed,
        duration_seconds=duration_seconds,
    )
    sink.update_session(closed)
    return closed


def main():
    Base.metadata.create_all(bind=engine)
    sink = SqlPersistenceSink(SessionLocal)

    today = datetime.now(timezone.utc).replace(hour=7, minute=0, second=0, microsecond=0)
    seeded = []
    for days_ago, minutes, speed in [(6, 30, 2.8), (4, 20, 3.2), (2, 45, 2.6), (1, 15, 3.5)]:
        seeded.append(seed_session(sink, today - timedelta(days=days_ago), minutes, speed))

    for s in seeded:
        print(f"Seeded {s.id}: {s.total_distance_km:.2f} km in {s.duration_seconds}s")


if __name__ == "__main__":
    main()
