from datetime import datetime
from typing import AsyncIterator, List, Optional, Protocol

from run_tracker.tracking.types import PositionFix, Session, SnapshotPoint, StepReading


class PermissionGate(Protocol):
    async def check_and_request(self) -> bool:
        """Called once per start(); may suspend briefly."""
        ...


class StepSource(Protocol):
    def stream(self) -> AsyncIterator[StepReading]:
        ...


class PositionSource(Protocol):
    def stream(self) -> AsyncIterator[PositionFix]:
        ...


class TickSource(Protocol):
    def stream(self) -> AsyncIterator[datetime]:
        ...


class PersistenceSink(Protocol):
    """Session store. Write methods raise on failure; the coordinator decides what is fatal."""

    def create_session(self, session: Session) -> None: ...

    def update_session(self, session: Session) -> None: ...

    def append_position_fix(self, fix: PositionFix) -> None: ...

    def append_snapshot(self, point: SnapshotPoint) -> None: ...

    def list_sessions(self) -> List[Session]: ...

    def load_session(self, session_id: str) -> Optional[Session]: ...

    def delete_session(self, session_id: str) -> bool: ...
