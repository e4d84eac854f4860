from datetime import datetime

from run_tracker.tracking.types import Aggregates, SnapshotPoint


def build_snapshot(aggregates: Aggregates, timestamp: datetime) -> SnapshotPoint:
    """Per-tick data point from the current totals. No side effects."""
    if aggregates.session_id is None:
        raise ValueError("snapshot requires an active session id")
    return SnapshotPoint(
        timestamp=timestamp,
        steps=aggregates.steps,
        speed_kmh=aggregates.speed_kmh,
        distance_km=aggregates.distance_km,
        session_id=aggregates.session_id,
    )
