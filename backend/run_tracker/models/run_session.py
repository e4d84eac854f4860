from sqlalchemy import Column, Integer, String, DateTime, Float
from sqlalchemy.orm import relationship
from run_tracker.db import Base


class RunSession(Base):
    __tablename__ = "run_sessions"

    # uuid4 string allocated by the tracker at start
    id = Column(String(36), primary_key=True, index=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    # NULL while the session is open
    end_time = Column(DateTime(timezone=True), nullable=True)

    total_steps = Column(Integer, nullable=False, default=0)
    total_distance_km = Column(Float, nullable=False, default=0.0)
    average_speed_kmh = Column(Float, nullable=False, default=0.0)
    duration_seconds = Column(Integer, nullable=False, default=0)

    location_points = relationship(
        "LocationPoint",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LocationPoint.timestamp",
    )
    data_points = relationship(
        "DataPoint",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DataPoint.timestamp",
    )

    # Pace is NOT stored, it's computed on the fly from duration/distance
