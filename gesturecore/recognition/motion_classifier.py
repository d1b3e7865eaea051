"""
Static / dynamic motion classification from wrist displacement.
"""

import numpy as np

from gesturecore.recognition.frame_buffer import LandmarkWindow
from gesturecore.utils.config import MotionMode


def is_static(window: LandmarkWindow, threshold: float,
              mode: MotionMode = MotionMode.ALL_PAIRS) -> bool:
    """Decide whether the hand held still across the window.

    The wrist x/y delta between the newest and oldest frame must be below
    ``threshold``, and so must the deltas between adjacent frames: every
    adjacent pair with ALL_PAIRS, only the most recent pair with LAST_PAIR.
    Windows with fewer than two frames are never static.
    """
    if len(window) < 2:
        return False

    wrists = window.wrist_track()[:, :2]

    endpoint = np.abs(wrists[-1] - wrists[0])
    if not np.all(endpoint < threshold):
        return False

    steps = np.abs(np.diff(wrists, axis=0))
    if mode is MotionMode.LAST_PAIR:
        steps = steps[-1:]
    return bool(np.all(steps < threshold))


class MotionClassifier:
    """Holds the static threshold and accumulation mode of a profile."""

    def __init__(self, threshold: float, mode: MotionMode = MotionMode.ALL_PAIRS):
        self.threshold = threshold
        self.mode = mode

    def is_static(self, window: LandmarkWindow) -> bool:
        return is_static(window, self.threshold, self.mode)

    def __repr__(self):
        return f"MotionClassifier(threshold={self.threshold}, mode={self.mode.value})"
