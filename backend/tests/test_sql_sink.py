from datetime import timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from conftest import T0
from run_tracker.db import Base, make_engine
from run_tracker.models.data_point import DataPoint
from run_tracker.models.location_point import LocationPoint
from run_tracker.services.sql_sink import SqlPersistenceSink
from run_tracker.tracking.errors import PersistenceError
from run_tracker.tracking.types import PositionFix, Session, SnapshotPoint


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return SqlPersistenceSink(session_factory)


def open_session(session_id="s1", start=T0):
    return Session(id=session_id, start_time=start)


def test_create_and_load_open_session(store):
    store.create_session(open_session())

    loaded = store.load_session("s1")

    assert loaded == open_session()
    assert loaded.is_open


def test_update_closes_session(store):
    store.create_session(open_session())
    closed = Session(
        id="s1",
        start_time=T0,
        end_time=T0 + timedelta(minutes=30),
        total_steps=5100,
        total_distance_km=5.0,
        average_speed_kmh=10.0,
        duration_seconds=1800,
    )

    store.update_session(closed)

    assert store.load_session("s1") == closed


def test_update_unknown_session_raises(store):
    with pytest.raises(PersistenceError):
        store.update_session(open_session("missing"))


def test_load_includes_points_in_time_order(store):
    store.create_session(open_session())
    for t in (2, 0, 1):
        ts = T0 + timedelta(seconds=t)
        store.append_position_fix(PositionFix(1.0 + t / 10000, 1.0, ts, speed=3.0, session_id="s1"))
        store.append_snapshot(SnapshotPoint(ts, steps=t * 3, speed_kmh=10.8, distance_km=t / 100, session_id="s1"))

    loaded = store.load_session("s1")

    assert [p.timestamp for p in loaded.route_points] == [T0 + timedelta(seconds=t) for t in range(3)]
    assert [p.steps for p in loaded.data_points] == [0, 3, 6]
    assert loaded.route_points[0].speed == 3.0
    assert loaded.route_points[0].session_id == "s1"


def test_list_is_newest_first_without_points(store):
    store.create_session(open_session("old", T0))
    store.create_session(open_session("new", T0 + timedelta(days=1)))
    store.append_snapshot(SnapshotPoint(T0, 1, 1.0, 0.1, "new"))

    sessions = store.list_sessions()

    assert [s.id for s in sessions] == ["new", "old"]
    assert sessions[0].data_points == ()


def test_delete_cascades_to_points(store, session_factory):
    store.create_session(open_session())
    store.append_position_fix(PositionFix(1.0, 1.0, T0, session_id="s1"))
    store.append_snapshot(SnapshotPoint(T0, 0, 0.0, 0.0, "s1"))

    assert store.delete_session("s1") is True
    assert store.delete_session("s1") is False
    assert store.load_session("s1") is None

    db = session_factory()
    try:
        assert db.query(LocationPoint).count() == 0
        assert db.query(DataPoint).count() == 0
    finally:
        db.close()


def test_fix_without_session_is_rejected(store):
    with pytest.raises(PersistenceError):
        store.append_position_fix(PositionFix(1.0, 1.0, T0))


def test_point_for_unknown_session_is_a_persistence_error(store):
    with pytest.raises(PersistenceError):
        store.append_snapshot(SnapshotPoint(T0, 0, 0.0, 0.0, "nope"))
