from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from run_tracker.db import Base


class DataPoint(Base):
    """One per-second snapshot of the live totals."""
    __tablename__ = "data_points"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        String(36),
        ForeignKey("run_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    timestamp = Column(DateTime(timezone=True), nullable=False)
    steps = Column(Integer, nullable=False)
    speed_kmh = Column(Float, nullable=False)
    distance_km = Column(Float, nullable=False)
