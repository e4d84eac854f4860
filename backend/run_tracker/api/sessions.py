from fastapi import APIRouter, Depends, HTTPException

from run_tracker.api.deps import get_runtime
from run_tracker.runtime import TrackerRuntime
from run_tracker.schemas.session import SessionDetail, SessionRead
from run_tracker.services.route import build_route
from run_tracker.tracking.errors import PersistenceError
from run_tracker.tracking.types import Session

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _load(runtime: TrackerRuntime, session_id: str) -> Session:
    try:
        session = runtime.sink.load_session(session_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# Handlers are async so store access stays on the tracker's event loop thread.


@router.get("/", response_model=list[SessionRead])
async def list_sessions(runtime: TrackerRuntime = Depends(get_runtime)):
    """
    History list, most recent first. Points are not included; fetch a
    single session for those.
    """
    try:
        sessions = runtime.sink.list_sessions()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [SessionRead.from_session(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(session_id: str, runtime: TrackerRuntime = Depends(get_runtime)):
    session = _load(runtime, session_id)
    return SessionDetail.from_session(session)


@router.get("/{session_id}/route")
async def get_session_route(session_id: str, runtime: TrackerRuntime = Depends(get_runtime)):
    session = _load(runtime, session_id)
    return build_route(session.route_points)


@router.delete("/{session_id}")
async def delete_session(session_id: str, runtime: TrackerRuntime = Depends(get_runtime)):
    current = runtime.coordinator.current_session
    if runtime.coordinator.is_active and current is not None and current.id == session_id:
        raise HTTPException(status_code=409, detail="Cannot delete the session being tracked")

    try:
        deleted = runtime.sink.delete_session(session_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session deleted"}
