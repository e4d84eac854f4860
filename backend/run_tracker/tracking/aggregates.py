from datetime import datetime
from typing import Optional, Tuple

from run_tracker.core.constants import MAX_FIX_DELTA_M
from run_tracker.core.time_utils import average_speed_kmh
from run_tracker.tracking.geo import Accepted, FixOutcome, evaluate_fix, speed_kmh
from run_tracker.tracking.snapshots import build_snapshot
from run_tracker.tracking.steps import normalize_steps
from run_tracker.tracking.types import (
    Aggregates,
    PositionFix,
    SnapshotPoint,
    StepReading,
    TrackingState,
)


class SessionAggregateStore:
    """
    Running totals of the active session.

    Owned by the coordinator, which is the only caller of the mutators.
    Distance and elapsed seconds only ever grow between resets; steps only
    grow except when a counter reset clamps them back to 0.
    """

    def __init__(self, max_fix_delta_m: float = MAX_FIX_DELTA_M):
        self._max_fix_delta_m = max_fix_delta_m
        self.reset()

    def reset(self) -> None:
        self.elapsed_seconds: int = 0
        self.steps: int = 0
        self.distance_km: float = 0.0
        self.speed_kmh: float = 0.0
        self.last_fix: Optional[PositionFix] = None
        self.step_baseline: Optional[int] = None

    # ========================================================
    # MUTATORS
    # ========================================================

    def apply_position_fix(self, fix: PositionFix) -> FixOutcome:
        outcome = evaluate_fix(self.last_fix, fix, self._max_fix_delta_m)
        if isinstance(outcome, Accepted):
            self.distance_km += outcome.delta_km
        # rejected fixes still move the reference and the speed
        self.last_fix = fix
        self.speed_kmh = speed_kmh(fix)
        return outcome

    def apply_step_reading(self, reading: StepReading) -> int:
        self.steps, self.step_baseline = normalize_steps(self.step_baseline, reading.steps)
        return self.steps

    def tick(self, seconds: int = 1) -> int:
        if seconds <= 0:
            raise ValueError("tick must advance time")
        self.elapsed_seconds += seconds
        return self.elapsed_seconds

    # ========================================================
    # READ API
    # ========================================================

    def view(self, state: TrackingState, session_id: Optional[str]) -> Aggregates:
        return Aggregates(
            state=state,
            session_id=session_id,
            elapsed_seconds=self.elapsed_seconds,
            steps=self.steps,
            distance_km=self.distance_km,
            speed_kmh=self.speed_kmh,
        )

    def snapshot(self, session_id: str, timestamp: datetime) -> SnapshotPoint:
        return build_snapshot(self.view(TrackingState.ACTIVE, session_id), timestamp)

    def finalize(self) -> Tuple[int, float]:
        """Return (duration_seconds, average_speed_kmh) for the closing record."""
        return self.elapsed_seconds, average_speed_kmh(self.distance_km, self.elapsed_seconds)
