from typing import Optional


class TrackingError(Exception):
    """Base class for everything the tracker reports."""


class PermissionDenied(TrackingError):
    """Location permission refused at start; the caller may retry."""

    def __init__(self, message: str = "Location permission required"):
        super().__init__(message)


class SensorStreamError(TrackingError):
    """A sensor stream failed. Non-fatal: other sources keep running."""

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{source} stream error{detail}")


class PersistenceError(TrackingError):
    """A write to the session store failed. In-memory totals stay authoritative."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} failed{detail}")


class TrackingStateError(TrackingError):
    """Operation not allowed in the coordinator's current state."""


class SourceNotSubscribed(TrackingError):
    """Data pushed into a feed nobody is listening to."""
