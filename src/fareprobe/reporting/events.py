"""Event system for session and price notifications.

Listeners registered on an EventRegistry receive every session outcome
and price update. Delivery is synchronous, on the thread that emits, and
a failing listener never affects the emitter or other listeners.
"""

import logging
import threading
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events emitted by fareprobe."""

    # Session lifecycle
    SESSION_STARTED = "session.started"
    SESSION_STATE_CHANGED = "session.state_changed"
    SESSION_CANCELLED = "session.cancelled"
    INTERSTITIAL_HANDLED = "session.interstitial_handled"

    # Terminal outcomes
    PRICE_CAPTURED = "price.captured"
    SESSION_FAILED = "session.failed"

    # Passive monitoring
    PRICE_UPDATED = "price.updated"


@dataclass
class Event:
    """Event emitted to listeners."""

    type: EventType
    """Type of event."""

    data: dict[str, Any] = field(default_factory=dict)
    """Event payload (``PriceResult.to_payload()`` for price events)."""

    session_id: str | None = None
    """Session the event belongs to, if any."""

    timestamp: float = field(default_factory=time.time)
    """Event timestamp."""

    thread_id: int = field(default_factory=threading.get_ident)
    """Thread that emitted the event."""


EventCallback = Callable[[Event], None]


class EventRegistry:
    """Thread-safe registry of event callbacks.

    Supports per-type and wildcard (``event_type=None``) subscriptions.
    """

    def __init__(self) -> None:
        self._callbacks: dict[EventType, list[EventCallback]] = defaultdict(list)
        self._wildcard_callbacks: list[EventCallback] = []
        self._lock = RLock()

    @property
    def has_listeners(self) -> bool:
        return bool(self._wildcard_callbacks) or any(self._callbacks.values())

    def register(self, event_type: EventType | None, callback: EventCallback) -> None:
        """Register a callback.

        Args:
            event_type: Type to listen for (None for all events)
            callback: Function to call when the event occurs

        Example:
            >>> def on_price(event: Event):
            ...     print(f"{event.data['appName']}: {event.data['price']}")
            >>>
            >>> registry.register(EventType.PRICE_CAPTURED, on_price)
        """
        with self._lock:
            if event_type is None:
                if callback not in self._wildcard_callbacks:
                    self._wildcard_callbacks.append(callback)
            elif callback not in self._callbacks[event_type]:
                self._callbacks[event_type].append(callback)

    def unregister(self, event_type: EventType | None, callback: EventCallback) -> bool:
        """Unregister a callback.

        Returns:
            True if the callback was registered
        """
        with self._lock:
            callbacks = (
                self._wildcard_callbacks if event_type is None else self._callbacks[event_type]
            )
            if callback in callbacks:
                callbacks.remove(callback)
                return True
            return False

    def emit(self, event: Event) -> None:
        """Deliver an event to its callbacks, isolating callback failures."""
        if not self.has_listeners:
            return

        with self._lock:
            callbacks = list(self._callbacks.get(event.type, []))
            callbacks.extend(self._wildcard_callbacks)

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"Event callback failed for {event.type.value}: {e}",
                    exc_info=True,
                    extra={"event_type": event.type.value},
                )

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()
            self._wildcard_callbacks.clear()


class EventCollector:
    """Collects events from a registry within a ``with`` block.

    Example:
        >>> with EventCollector(orchestrator.events, [EventType.PRICE_CAPTURED]) as collector:
        ...     orchestrator.tick(session_id)
        >>> collector.count()
        1
    """

    def __init__(self, registry: EventRegistry, event_types: list[EventType] | None = None):
        self._registry = registry
        self._event_types = set(event_types) if event_types else None
        self._events: list[Event] = []
        self._lock = threading.Lock()

    def _collect(self, event: Event) -> None:
        if self._event_types is None or event.type in self._event_types:
            with self._lock:
                self._events.append(event)

    def __enter__(self) -> "EventCollector":
        self._events.clear()
        for event_type in self._event_types or [None]:
            self._registry.register(event_type, self._collect)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for event_type in self._event_types or [None]:
            self._registry.unregister(event_type, self._collect)

    def get_events(self, event_type: EventType | None = None) -> list[Event]:
        with self._lock:
            events = list(self._events)
        if event_type is None:
            return events
        return [e for e in events if e.type == event_type]

    def count(self, event_type: EventType | None = None) -> int:
        return len(self.get_events(event_type))
