"""
Static Gesture Recognizer
==========================

Rule-based pose recognition on a single scaled hand snapshot.
Analyzes fingertip distances and joint-vector angles to tell OK,
Thumb Up and Palm Open apart.
"""

from typing import Optional

from gesturecore.core.types import GestureLabel, HandFrame, Handedness, LandmarkIndex
from gesturecore.detection.landmarks import FINGER_JOINTS, THUMB_JOINTS
from gesturecore.utils.config import StaticGestureConfig
from gesturecore.utils.vector_math import cosine_similarity, l1_distance, subtract

# Fingertips that must stay away from the index tip in an OK sign
_OK_FAR_TIPS = (LandmarkIndex.MIDDLE_TIP, LandmarkIndex.RING_TIP, LandmarkIndex.PINKY_TIP)


class StaticGestureRecognizer:
    """
    Ordered rule chain over one hand snapshot.

    Rules are tried in order and the first match wins:
    1. OK: index tip touches thumb tip, away from the other fingertips
    2. Thumb Up: thumb points up out of a curled fist
    3. Palm Open: all five digits extended and roughly straight

    Coordinates are expected already multiplied by the profile scale, so
    distance thresholds are in scaled units.

    Example:
        >>> recognizer = StaticGestureRecognizer(profile.static)
        >>> label = recognizer.classify(window.newest)
    """

    def __init__(self, config: Optional[StaticGestureConfig] = None):
        self.config = config or StaticGestureConfig()

    def classify(self, hand: HandFrame, handedness: Handedness = None) -> GestureLabel:
        """
        Classify the pose of a single hand.

        Args:
            hand: scaled hand snapshot
            handedness: overrides ``hand.handedness`` when given

        Returns:
            OK, THUMB_UP, PALM_OPEN or NONE
        """
        handedness = hand.handedness if handedness is None else Handedness.from_value(handedness)

        if self._is_ok(hand):
            return GestureLabel.OK
        if self._is_thumb_up(hand, handedness):
            return GestureLabel.THUMB_UP
        if self._is_palm_open(hand):
            return GestureLabel.PALM_OPEN
        return GestureLabel.NONE

    def _is_ok(self, hand: HandFrame) -> bool:
        """Index tip close to thumb tip but far from the remaining tips."""
        threshold = self.config.ok_threshold
        index_tip = hand.point(LandmarkIndex.INDEX_TIP)

        if l1_distance(index_tip, hand.point(LandmarkIndex.THUMB_TIP)) >= threshold:
            return False
        if any(l1_distance(hand.point(tip), index_tip) <= threshold for tip in _OK_FAR_TIPS):
            return False

        straightness = self.config.ok_min_straightness
        if straightness is None:
            return True
        # The three raised fingers (and the index base) must not be bent
        return all(
            cosine_similarity(subtract(hand.point(mcp), hand.point(pip)),
                              subtract(hand.point(mcp), hand.point(dip))) > straightness
            for mcp, pip, dip, _ in FINGER_JOINTS.values()
        )

    def _is_thumb_up(self, hand: HandFrame, handedness: Handedness) -> bool:
        """Thumb raised above a closed fist."""
        thumb_mcp = hand.point(LandmarkIndex.THUMB_MCP)
        thumb_ip = hand.point(LandmarkIndex.THUMB_IP)
        thumb_tip = hand.point(LandmarkIndex.THUMB_TIP)

        # Lower y = higher in image
        if not (thumb_tip[1] < thumb_ip[1] < thumb_mcp[1]):
            return False

        curl_threshold = self.config.thumb_curl_threshold
        if curl_threshold is not None:
            for mcp, _, dip, _ in FINGER_JOINTS.values():
                if l1_distance(hand.point(dip), hand.point(mcp)) >= curl_threshold:
                    return False

        if self.config.thumb_fist_bounds and not self._fingers_folded(hand, handedness):
            return False

        return True

    def _fingers_folded(self, hand: HandFrame, handedness: Handedness) -> bool:
        """
        Check that every fingertip curls back past its PIP and DIP joints
        while staying on the far side of the wrist.

        A sideways right hand folds its tips towards +x and keeps them left
        of the wrist; a left hand is the mirror image.
        """
        if handedness is Handedness.UNKNOWN:
            return False

        wrist_x = hand.point(LandmarkIndex.WRIST)[0]
        sign = 1.0 if handedness is Handedness.RIGHT else -1.0

        for _, pip, dip, tip in FINGER_JOINTS.values():
            tip_x = hand.point(tip)[0] * sign
            if not (tip_x > hand.point(dip)[0] * sign
                    and tip_x > hand.point(pip)[0] * sign
                    and tip_x < wrist_x * sign):
                return False
        return True

    def _is_palm_open(self, hand: HandFrame) -> bool:
        """All five digits straight: joint vectors along each digit point the same way."""
        threshold = self.config.palm_open_threshold

        for mcp, pip, dip, tip in FINGER_JOINTS.values():
            base = subtract(hand.point(mcp), hand.point(pip))
            if cosine_similarity(base, subtract(hand.point(mcp), hand.point(dip))) < threshold:
                return False
            if cosine_similarity(base, subtract(hand.point(mcp), hand.point(tip))) < threshold:
                return False

        reference, *others = self.config.thumb_vectors
        base = self._thumb_vector(hand, reference)
        for pair in others:
            if cosine_similarity(base, self._thumb_vector(hand, pair)) < threshold:
                return False
        return True

    @staticmethod
    def _thumb_vector(hand: HandFrame, pair):
        start, end = pair
        return subtract(hand.point(THUMB_JOINTS[start]), hand.point(THUMB_JOINTS[end]))
