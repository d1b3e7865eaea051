"""
Logging setup and session event logging.
"""

import os
import logging
import logging.handlers
import time
from collections import Counter, deque
from functools import wraps

from gesturecore.core.events import Events

CONSOLE_FORMAT = "%(asctime)s  %(levelname)-5s  %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)-28s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure the root logger: compact console output plus an optional rotating file.

    The file handler always records DEBUG so replays can be inspected after
    the fact even when the console is kept at INFO.
    """
    level_no = logging.getLevelName(str(level).upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level_no)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level_no)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=int(max_size_mb * 1024 * 1024),
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger


class GestureLogger:
    """Session observer: logs every published event and tallies gestures.

    Attach it to the EventBus a GestureSession publishes on. It keeps a
    bounded history of emitted gestures and running counts per label.
    """

    def __init__(self, max_history: int = 1000):
        self.logger = logging.getLogger("gesturecore.events")
        self._history = deque(maxlen=max_history)
        self._label_counts = Counter()
        self._hand_losses = 0
        self._identity_conflicts = 0

    def _handlers(self):
        return (
            (Events.GESTURE_DETECTED, self.log_gesture),
            (Events.HAND_LOST, self.log_hand_lost),
            (Events.IDENTITY_CONFLICT, self.log_identity_conflict),
            (Events.SESSION_RESET, self.log_reset),
        )

    def attach(self, bus):
        for event_name, handler in self._handlers():
            bus.subscribe(event_name, handler)
        return self

    def detach(self, bus):
        for event_name, handler in self._handlers():
            bus.unsubscribe(event_name, handler)

    def log_gesture(self, label, hand_count=1, timestamp_ms=None):
        """Record an emitted gesture label."""
        self._label_counts[label] += 1
        self._history.append({
            "timestamp": time.time(),
            "frame_timestamp_ms": timestamp_ms,
            "gesture": label.name.lower(),
            "display_name": label.display_name,
            "hand_count": hand_count,
        })
        self.logger.info(
            "Gesture: %-15s | Hands: %d | Frame: %s",
            label.display_name,
            hand_count,
            f"{timestamp_ms}ms" if timestamp_ms is not None else "N/A",
        )

    def log_hand_lost(self, frames_dropped=0, timestamp_ms=None):
        self._hand_losses += 1
        self.logger.debug("Hand lost at %s, dropped %d buffered frames",
                          timestamp_ms if timestamp_ms is not None else "N/A", frames_dropped)

    def log_identity_conflict(self, handedness=None, frames_dropped=0, timestamp_ms=None):
        self._identity_conflicts += 1
        self.logger.warning(
            "Two hands reported as %s; second person suspected, dropped %d buffered frames",
            getattr(handedness, "value", handedness), frames_dropped,
        )

    def log_reset(self):
        self.logger.debug("Session reset")

    def get_history(self, last_n=None):
        """Recent gesture entries, oldest first."""
        history = list(self._history)
        if last_n:
            return history[-last_n:]
        return history

    def count(self, label) -> int:
        return self._label_counts[label]

    @property
    def total_gestures(self):
        """Gestures seen since creation, including those aged out of the history."""
        return sum(self._label_counts.values())

    @property
    def hand_losses(self):
        return self._hand_losses

    @property
    def identity_conflicts(self):
        return self._identity_conflicts


def log_timing(func):
    """Decorator logging how long ``func`` took, at DEBUG on the caller's module logger."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug("%s took %.2fms", func.__qualname__,
                         (time.perf_counter() - start) * 1000)

    return wrapper
