"""
Session event bus.

A GestureSession reports what it did to each frame (label emitted, hand
lost, window dropped on an identity conflict, reset) through an EventBus.
Observers such as GestureLogger subscribe to it, so classification code
never logs or counts anything itself.

Usage:
    bus = EventBus()
    bus.subscribe(Events.GESTURE_DETECTED, lambda label, **_: print(label))
    session = GestureSession(profile, event_bus=bus)
"""

import time
import logging
import threading
from collections import defaultdict, deque
from typing import Callable, Dict, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class _Listener(NamedTuple):
    priority: int
    callback: Callable


class EventRecord(NamedTuple):
    """One published event as kept in the bus history."""
    name: str
    wall_time: float
    payload: dict


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class EventBus:
    """Synchronous publish/subscribe bus owned by one session.

    Listeners run in the publishing thread, highest priority first. The
    listener table is guarded by a lock so observers may subscribe from a
    UI thread while the session publishes from its worker thread.
    """

    def __init__(self, max_history: int = 100):
        self._listeners: Dict[str, List[_Listener]] = defaultdict(list)
        self._lock = threading.Lock()
        self._history = deque(maxlen=max_history)
        self._enabled = True

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0):
        """Register ``callback`` for ``event_name``.

        Args:
            event_name: One of the ``Events`` names
            callback: Called with the event payload as keyword arguments
            priority: Higher priority listeners run first (default 0)
        """
        with self._lock:
            listeners = self._listeners[event_name]
            listeners.append(_Listener(priority, callback))
            listeners.sort(key=lambda listener: -listener.priority)
        logger.debug("Listener %s subscribed to '%s' (priority=%d)",
                     _callback_name(callback), event_name, priority)

    def unsubscribe(self, event_name: str, callback: Callable):
        """Remove ``callback``; bound methods match by equality."""
        with self._lock:
            remaining = [l for l in self._listeners.get(event_name, []) if l.callback != callback]
            if remaining:
                self._listeners[event_name] = remaining
            else:
                self._listeners.pop(event_name, None)

    def emit(self, event_name: str, **payload):
        """Publish an event to its listeners.

        A listener that raises is logged and skipped; the error never
        reaches the publishing session.
        """
        if not self._enabled:
            return

        with self._lock:
            listeners = tuple(self._listeners.get(event_name, ()))

        self._history.append(EventRecord(event_name, time.time(), dict(payload)))

        for listener in listeners:
            try:
                listener.callback(**payload)
            except Exception as e:
                logger.error("Listener %s failed on '%s': %s",
                             _callback_name(listener.callback), event_name, e)

    def set_enabled(self, enabled: bool):
        """Mute or unmute the bus; muted events are neither dispatched nor recorded."""
        self._enabled = enabled

    def clear(self, event_name: str = None):
        """Drop all listeners, or only those of ``event_name``."""
        with self._lock:
            if event_name:
                self._listeners.pop(event_name, None)
            else:
                self._listeners.clear()

    @property
    def registered_events(self) -> list:
        with self._lock:
            return list(self._listeners)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return sum(len(listeners) for listeners in self._listeners.values())

    def get_history(self, last_n: int = 10, event_name: Optional[str] = None) -> List[EventRecord]:
        """Most recent events, oldest first, optionally of one kind only."""
        records = [r for r in self._history if event_name is None or r.name == event_name]
        return records[-last_n:]


# =============================================================================
# Session Event Names
# =============================================================================

class Events:
    """Event names published by GestureSession, with their payload keys."""

    GESTURE_DETECTED = "gesture_detected"    # label, hand_count, timestamp_ms
    HAND_LOST = "hand_lost"                  # frames_dropped, timestamp_ms
    IDENTITY_CONFLICT = "identity_conflict"  # handedness, frames_dropped, timestamp_ms
    SESSION_RESET = "session_reset"
