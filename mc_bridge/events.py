"""Change-event broadcaster for local task mutations.

Listeners are called synchronously, in subscription order, on the thread
that performed the mutation. A listener that raises is logged and isolated
so one bad subscriber cannot break the write path or starve the others.
"""

from typing import Any, Callable, Dict, List, Optional, Union
import logging

from .core.models import ChangeEvent, EventType


Listener = Callable[[ChangeEvent], None]


class EventBroadcaster:
    """Fans local change events out to registered listeners."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def broadcast(self, event: ChangeEvent) -> None:
        """Deliver ``event`` to every listener."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                self.logger.error(f"Listener {listener!r} failed on {event.type}: {e}")

        self.logger.debug("Broadcast %s to %d listener(s)", event.type, len(self._listeners))

    def emit(self, event_type: Union[EventType, str], payload: Dict[str, Any]) -> None:
        """Build and broadcast an event in one call."""
        kind = event_type.value if isinstance(event_type, EventType) else event_type
        self.broadcast(ChangeEvent(type=kind, payload=payload))
