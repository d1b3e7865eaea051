"""
Dynamic Gesture Recognizer
===========================

Directional motion recognition over a full landmark window.
Tracks the wrist between consecutive frames to detect Left, Right
and Down movements.
"""

from typing import Optional

import numpy as np

from gesturecore.core.types import GestureLabel
from gesturecore.recognition.frame_buffer import LandmarkWindow
from gesturecore.utils.config import DynamicGestureConfig, TiePolicy


class DynamicGestureRecognizer:
    """
    Motion-based recognizer using the wrist trajectory in the window.

    Every adjacent frame pair is classified independently as left / right
    (x decreasing / increasing) and down. A direction is reported only when
    all pairs agree on it. Left is checked before Right before Down, so
    when a tie policy lets a pair count both ways, Left wins.

    Example:
        >>> recognizer = DynamicGestureRecognizer(profile.dynamic)
        >>> if window.is_full():
        ...     label = recognizer.classify(window)
    """

    def __init__(self, config: Optional[DynamicGestureConfig] = None):
        self.config = config or DynamicGestureConfig()

    def classify(self, window: LandmarkWindow) -> GestureLabel:
        """
        Classify wrist motion across the window.

        Returns:
            LEFT, RIGHT, DOWN, or NONE (also for windows that are not full)
        """
        if not window.is_full():
            return GestureLabel.NONE

        wrists = window.wrist_track()
        dx = np.diff(wrists[:, 0])
        dy = np.diff(wrists[:, 1])

        tie = self.config.tie_policy
        left = dx < 0
        right = dx > 0
        if tie in (TiePolicy.LEFT, TiePolicy.BOTH):
            left |= dx == 0
        if tie in (TiePolicy.RIGHT, TiePolicy.BOTH):
            right |= dx == 0

        down = dy > 0 if self.config.down_is_positive_y else dy < 0

        if np.all(left):
            return GestureLabel.LEFT
        if np.all(right):
            return GestureLabel.RIGHT
        if np.all(down):
            return GestureLabel.DOWN
        return GestureLabel.NONE
