"""
Lifecycle events emitted by the ingestion service.

The service takes a single synchronous callback. EventBus is a
publish-subscribe fan-out that can be passed as that callback so several
consumers (a UI, a logger, telemetry) can listen without knowing about
each other.

Thread-safe for use across UI and background threads.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventType(Enum):
    """All lifecycle events the ingestion service emits."""
    DRAFT_NOTIFY = auto()
    BUSINESS = auto()
    MATCH_COMPLETED = auto()
    DRAFT_COMPLETED = auto()
    PARSE_ERROR = auto()
    LOG_ROTATED = auto()


@dataclass
class IngestionEvent:
    """
    One lifecycle event.

    Attributes:
        event_type: The type of event being emitted
        data: Payload for the event: a DraftNotify, TelemetryEvent,
            MatchReplay, DraftResult, the parse error text, or None
        source: Optional source identifier (e.g., the log path)
    """
    event_type: EventType
    data: Any = None
    source: str = ""


EventCallback = Callable[[IngestionEvent], None]


class EventBus:
    """
    Publish-subscribe fan-out for ingestion events.

    Handlers are executed synchronously in the order they were registered.
    A handler that raises is logged and does not stop the others.

    Example usage:
        >>> bus = EventBus()
        >>> bus.subscribe(EventType.MATCH_COMPLETED, lambda e: print(e.data.match_id))
        >>> service.with_event_callback(bus)
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[EventCallback]] = {}
        self._global_handlers: List[EventCallback] = []
        self._handler_lock = threading.Lock()

    def subscribe(self, event_type: EventType, handler: EventCallback):
        """Subscribe to a specific event type."""
        with self._handler_lock:
            if event_type not in self._handlers:
                self._handlers[event_type] = []
            self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed handler to {event_type.name}")

    def subscribe_all(self, handler: EventCallback):
        """Subscribe to all events (for logging/debugging)."""
        with self._handler_lock:
            self._global_handlers.append(handler)
        logger.debug("Subscribed global event handler")

    def unsubscribe(self, event_type: EventType, handler: EventCallback):
        with self._handler_lock:
            if event_type in self._handlers and handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type.name}")

    def emit(self, event: IngestionEvent):
        """
        Emit an event to all subscribed handlers.

        Handlers are called synchronously. If a handler raises an exception,
        it is logged but does not prevent other handlers from executing.
        """
        # Snapshot so handlers may change subscriptions
        with self._handler_lock:
            specific_handlers = list(self._handlers.get(event.event_type, []))
            global_handlers = list(self._global_handlers)

        for handler in specific_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type.name}: {e}", exc_info=True)

        for handler in global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}", exc_info=True)

    __call__ = emit

    def clear(self):
        """Clear all handlers (useful for testing)."""
        with self._handler_lock:
            self._handlers.clear()
            self._global_handlers.clear()
        logger.debug("Cleared all event handlers")
