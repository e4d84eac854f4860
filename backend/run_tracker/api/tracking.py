from fastapi import APIRouter, Depends, HTTPException

from run_tracker.api.deps import get_runtime
from run_tracker.runtime import TrackerRuntime
from run_tracker.schemas.session import LiveStats, PositionIn, SessionRead, StepIn
from run_tracker.tracking.errors import (
    PermissionDenied,
    PersistenceError,
    SourceNotSubscribed,
    TrackingStateError,
)
from run_tracker.tracking.types import PositionFix, StepReading

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.get("", response_model=LiveStats)
async def get_live_stats(runtime: TrackerRuntime = Depends(get_runtime)):
    return LiveStats.from_aggregates(runtime.coordinator.aggregates)


@router.post("/start", response_model=LiveStats)
async def start_tracking(runtime: TrackerRuntime = Depends(get_runtime)):
    """
    Start a session. Calling it again while tracking is harmless and just
    returns the live stats.
    """
    try:
        await runtime.coordinator.start()
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
    except TrackingStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return LiveStats.from_aggregates(runtime.coordinator.aggregates)


@router.post("/stop", response_model=SessionRead)
async def stop_tracking(runtime: TrackerRuntime = Depends(get_runtime)):
    session = await runtime.coordinator.stop()
    if session is None:
        raise HTTPException(status_code=409, detail="No session to stop")
    return SessionRead.from_session(session)


@router.post("/reset", response_model=LiveStats)
async def reset_tracking(runtime: TrackerRuntime = Depends(get_runtime)):
    try:
        runtime.coordinator.reset()
    except TrackingStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return LiveStats.from_aggregates(runtime.coordinator.aggregates)


# --------- Sensor ingestion --------- #

@router.post("/steps", status_code=202)
async def push_steps(payload: StepIn, runtime: TrackerRuntime = Depends(get_runtime)):
    reading = StepReading(
        steps=payload.steps,
        timestamp=payload.timestamp or runtime.clock.now(),
    )
    try:
        runtime.step_feed.push(reading)
    except SourceNotSubscribed as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"message": "Accepted"}


@router.post("/positions", status_code=202)
async def push_position(payload: PositionIn, runtime: TrackerRuntime = Depends(get_runtime)):
    fix = PositionFix(
        latitude=payload.latitude,
        longitude=payload.longitude,
        timestamp=payload.timestamp or runtime.clock.now(),
        speed=payload.speed,
    )
    try:
        runtime.position_feed.push(fix)
    except SourceNotSubscribed as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"message": "Accepted"}
