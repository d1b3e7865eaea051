"""
Landmark Frame Buffer
======================

Fixed-capacity sliding window of hand snapshots for the tracked hand.
Index 0 is the oldest frame, the last index the newest.
"""

from collections import deque
from typing import Deque, Iterator

import numpy as np

from gesturecore.core.types import HandFrame, LandmarkIndex


class LandmarkWindow:
    """
    FIFO window of the most recent HandFrame snapshots.

    Pushing into a full window evicts the oldest snapshot first, so the
    length never exceeds the capacity. Gesture evaluation is only
    meaningful once the window is full.

    Example:
        >>> window = LandmarkWindow(capacity=4)
        >>> for hand in stream:
        ...     window.push(hand)
        ...     if window.is_full():
        ...         label = recognizer.classify(window)
    """

    def __init__(self, capacity: int):
        if capacity < 2:
            raise ValueError(f"Window capacity must be at least 2, got {capacity}")
        self._capacity = capacity
        self._frames: Deque[HandFrame] = deque(maxlen=capacity)

    def push(self, frame: HandFrame) -> None:
        """Append a snapshot, dropping the oldest one when at capacity."""
        self._frames.append(frame)

    def clear(self) -> None:
        """Drop every snapshot (hand lost or identity ambiguous)."""
        self._frames.clear()

    def is_full(self) -> bool:
        return len(self._frames) == self._capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def oldest(self) -> HandFrame:
        if not self._frames:
            raise IndexError("oldest frame of an empty window")
        return self._frames[0]

    @property
    def newest(self) -> HandFrame:
        if not self._frames:
            raise IndexError("newest frame of an empty window")
        return self._frames[-1]

    def wrist_track(self) -> np.ndarray:
        """Wrist positions oldest -> newest as an array of shape (n, 3)."""
        if not self._frames:
            return np.empty((0, 3))
        return np.stack([frame.point(LandmarkIndex.WRIST) for frame in self._frames])

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> HandFrame:
        return self._frames[index]

    def __iter__(self) -> Iterator[HandFrame]:
        return iter(self._frames)

    def __repr__(self):
        return f"LandmarkWindow({len(self._frames)}/{self._capacity})"
