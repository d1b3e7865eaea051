"""
Shared domain types for the gesture recognition core.

Centralizes enums, landmark containers and the error type used across
modules to eliminate circular imports and ensure type consistency.
"""

from enum import Enum, IntEnum
from typing import Iterable, NamedTuple, Optional, Tuple

import numpy as np


NUM_LANDMARKS = 21


class InvalidFrame(ValueError):
    """Raised when detector output cannot be turned into a valid frame."""


# =============================================================================
# Gesture Labels
# =============================================================================

class GestureLabel(IntEnum):
    """All gesture categories emitted by a session."""
    NONE = 0
    THUMB_UP = 1
    PALM_OPEN = 2
    OK = 3
    TWO_HAND_MATCH = 4
    LEFT = 5
    RIGHT = 6
    DOWN = 7

    @classmethod
    def from_value(cls, value) -> "GestureLabel":
        """Convert an int or name to a GestureLabel, falling back to NONE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_static(self) -> bool:
        return self in (GestureLabel.THUMB_UP, GestureLabel.PALM_OPEN,
                        GestureLabel.OK, GestureLabel.TWO_HAND_MATCH)

    @property
    def is_dynamic(self) -> bool:
        return self in (GestureLabel.LEFT, GestureLabel.RIGHT, GestureLabel.DOWN)


_DISPLAY_NAMES = {
    GestureLabel.NONE: "No gesture",
    GestureLabel.THUMB_UP: "Thumb Up",
    GestureLabel.PALM_OPEN: "Palm Open",
    GestureLabel.OK: "OK",
    GestureLabel.TWO_HAND_MATCH: "Two Hand Match",
    GestureLabel.LEFT: "Go Left",
    GestureLabel.RIGHT: "Go Right",
    GestureLabel.DOWN: "Go Down",
}


class Handedness(Enum):
    """Which hand the detector believes it is looking at."""
    LEFT = "Left"
    RIGHT = "Right"
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value) -> "Handedness":
        """Parse a detector category name, safely."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return cls.UNKNOWN

    @property
    def opposite(self) -> "Handedness":
        if self is Handedness.LEFT:
            return Handedness.RIGHT
        if self is Handedness.RIGHT:
            return Handedness.LEFT
        return Handedness.UNKNOWN


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# =============================================================================
# Data Containers
# =============================================================================

class Landmark(NamedTuple):
    """A single landmark point."""
    x: float
    y: float
    z: float


class HandFrame:
    """Landmarks of one detected hand in one video frame.

    Holds a read-only (21, 3) float array plus the detector's handedness.
    Construction fails with InvalidFrame for anything that is not exactly
    21 finite 3D points.
    """

    __slots__ = ("landmarks", "handedness")

    def __init__(self, landmarks, handedness=Handedness.UNKNOWN):
        try:
            points = np.array(landmarks, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidFrame(f"Landmarks are not numeric points: {e}") from e

        if points.shape != (NUM_LANDMARKS, 3):
            raise InvalidFrame(
                f"Expected {NUM_LANDMARKS} landmarks of (x, y, z), got array of shape {points.shape}"
            )
        if not np.all(np.isfinite(points)):
            raise InvalidFrame("Landmarks contain NaN or infinite coordinates")

        points.setflags(write=False)
        self.landmarks = points
        self.handedness = Handedness.from_value(handedness)

    def __repr__(self):
        return f"HandFrame({self.handedness.value}, wrist=({self.wrist[0]:.3f}, {self.wrist[1]:.3f}))"

    def get(self, index: LandmarkIndex) -> Landmark:
        """Get landmark by index."""
        x, y, z = self.landmarks[index]
        return Landmark(float(x), float(y), float(z))

    def point(self, index: LandmarkIndex) -> np.ndarray:
        return self.landmarks[index]

    @property
    def wrist(self) -> np.ndarray:
        return self.landmarks[LandmarkIndex.WRIST]

    def scaled(self, factor: float) -> "HandFrame":
        """Return a copy with every coordinate multiplied by ``factor``.

        Raises:
            InvalidFrame: a coordinate overflows to infinity
        """
        with np.errstate(over="ignore"):
            points = self.landmarks * factor
        return HandFrame(points, self.handedness)

    def to_numpy(self) -> np.ndarray:
        """Convert landmarks to a writable numpy array of shape (21, 3)."""
        return self.landmarks.copy()


class DetectionFrame:
    """Everything the detector reported for one video frame."""

    __slots__ = ("hands", "timestamp_ms")

    def __init__(self, hands: Iterable[HandFrame] = (), timestamp_ms: Optional[int] = None):
        hands = tuple(hands)
        for hand in hands:
            if not isinstance(hand, HandFrame):
                raise InvalidFrame(f"Expected HandFrame, got {type(hand).__name__}")
        self.hands: Tuple[HandFrame, ...] = hands
        self.timestamp_ms = timestamp_ms

    def __repr__(self):
        return f"DetectionFrame(hands={self.hand_count}, timestamp_ms={self.timestamp_ms})"

    @property
    def hand_count(self) -> int:
        return len(self.hands)

    @property
    def is_empty(self) -> bool:
        return not self.hands
