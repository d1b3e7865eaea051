"""
Two-hand pose recognition on the current frame.
"""

from typing import Optional

from gesturecore.core.types import GestureLabel, HandFrame, Handedness
from gesturecore.detection.landmarks import FINGER_MCPS, FINGER_TIPS
from gesturecore.utils.config import ProximityMetric, TwoHandConfig
from gesturecore.utils.vector_math import l1_distance, within_per_axis


class TwoHandGestureRecognizer:
    """Detects two opposite hands held mirror to each other (palms together).

    Both hands must be scaled into the same coordinate space. Corresponding
    fingertips, and optionally finger MCP joints, must lie within the
    configured proximity of each other.
    """

    def __init__(self, config: Optional[TwoHandConfig] = None):
        self.config = config or TwoHandConfig()
        self._indices = FINGER_TIPS + (FINGER_MCPS if self.config.include_mcp else ())

    @staticmethod
    def has_identity_conflict(first: HandFrame, second: HandFrame) -> bool:
        """Both hands claim the same side, so a second person has entered the frame."""
        return (first.handedness is second.handedness
                and first.handedness is not Handedness.UNKNOWN)

    @staticmethod
    def are_opposite(first: HandFrame, second: HandFrame) -> bool:
        return (first.handedness is not Handedness.UNKNOWN
                and second.handedness is first.handedness.opposite)

    def classify(self, first: HandFrame, second: HandFrame) -> GestureLabel:
        """Return TWO_HAND_MATCH for a matching opposite-handed pair, else NONE."""
        if not self.are_opposite(first, second):
            return GestureLabel.NONE

        for index in self._indices:
            if not self._close(first.point(index), second.point(index)):
                return GestureLabel.NONE
        return GestureLabel.TWO_HAND_MATCH

    def _close(self, a, b) -> bool:
        if self.config.metric is ProximityMetric.AXIS:
            return within_per_axis(a, b, self.config.threshold)
        return l1_distance(a, b) < self.config.threshold
