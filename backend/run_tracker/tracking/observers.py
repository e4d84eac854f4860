import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

AGGREGATES_CHANGED = "aggregates_changed"
ERROR_OCCURRED = "error_occurred"


class TrackingEventBus:
    """
    Fan-out of coordinator signals to observers.

    Payloads are immutable (`Aggregates` or a `TrackingError`), so handlers
    never get a handle on coordinator state.
    """

    def __init__(self):
        # event name -> handlers, in subscription order
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subscribers[event].append(handler)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        handlers = self._subscribers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: str, payload: Any) -> None:
        # copy: a handler may unsubscribe itself while we iterate
        for handler in list(self._subscribers.get(event, [])):
            try:
                handler(payload)
            except Exception:
                # a broken observer must not stall tracking
                logger.exception("Observer %r failed on %s", handler, event)
