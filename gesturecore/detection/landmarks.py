"""
Hand topology constants and detector-output adapters.

Converts MediaPipe HandLandmarker results and recorded JSON-style records
into DetectionFrame objects the session can ingest.
"""

from typing import Optional

from gesturecore.core.types import (
    DetectionFrame, HandFrame, Handedness, InvalidFrame, LandmarkIndex,
)


WRIST = LandmarkIndex.WRIST
THUMB_TIP = LandmarkIndex.THUMB_TIP
INDEX_TIP = LandmarkIndex.INDEX_TIP
MIDDLE_TIP = LandmarkIndex.MIDDLE_TIP
RING_TIP = LandmarkIndex.RING_TIP
PINKY_TIP = LandmarkIndex.PINKY_TIP

FINGER_TIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)
FINGER_MCPS = (
    LandmarkIndex.INDEX_MCP, LandmarkIndex.MIDDLE_MCP,
    LandmarkIndex.RING_MCP, LandmarkIndex.PINKY_MCP,
)

# Joint chains (MCP, PIP, DIP, TIP) for the four non-thumb fingers
FINGER_JOINTS = {
    "index":  (LandmarkIndex.INDEX_MCP, LandmarkIndex.INDEX_PIP, LandmarkIndex.INDEX_DIP, LandmarkIndex.INDEX_TIP),
    "middle": (LandmarkIndex.MIDDLE_MCP, LandmarkIndex.MIDDLE_PIP, LandmarkIndex.MIDDLE_DIP, LandmarkIndex.MIDDLE_TIP),
    "ring":   (LandmarkIndex.RING_MCP, LandmarkIndex.RING_PIP, LandmarkIndex.RING_DIP, LandmarkIndex.RING_TIP),
    "pinky":  (LandmarkIndex.PINKY_MCP, LandmarkIndex.PINKY_PIP, LandmarkIndex.PINKY_DIP, LandmarkIndex.PINKY_TIP),
}

# Thumb chain from the wrist; position in the tuple is the joint number
THUMB_JOINTS = (
    LandmarkIndex.WRIST, LandmarkIndex.THUMB_CMC, LandmarkIndex.THUMB_MCP,
    LandmarkIndex.THUMB_IP, LandmarkIndex.THUMB_TIP,
)


def frame_from_landmarker_result(result, world: bool = False,
                                 timestamp_ms: Optional[int] = None) -> DetectionFrame:
    """Convert a MediaPipe Tasks HandLandmarkerResult to a DetectionFrame.

    Args:
        result: object exposing ``hand_landmarks``, ``hand_world_landmarks``
            and ``handedness`` the way mediapipe.tasks.vision does
        world: use world landmarks (metric, hand-centred) instead of
            normalized image landmarks
        timestamp_ms: frame timestamp to attach

    Returns:
        DetectionFrame with one HandFrame per detected hand
    """
    hands_landmarks = result.hand_world_landmarks if world else result.hand_landmarks
    handedness_lists = getattr(result, "handedness", None) or []

    hands = []
    for i, hand_lm in enumerate(hands_landmarks or []):
        label = Handedness.UNKNOWN
        if i < len(handedness_lists) and handedness_lists[i]:
            label = Handedness.from_value(handedness_lists[i][0].category_name)
        try:
            points = [(lm.x, lm.y, lm.z) for lm in hand_lm]
        except AttributeError as e:
            raise InvalidFrame(f"Hand {i} has malformed landmarks: {e}") from e
        hands.append(HandFrame(points, label))

    return DetectionFrame(hands, timestamp_ms=timestamp_ms)


def frame_from_record(record: dict) -> DetectionFrame:
    """Build a DetectionFrame from a JSON-style record.

    Expected shape::

        {"timestamp_ms": 33,
         "hands": [{"handedness": "Left", "landmarks": [[x, y, z], ...]}]}
    """
    if not isinstance(record, dict):
        raise InvalidFrame(f"Record must be a mapping, got {type(record).__name__}")

    hands = []
    for i, hand in enumerate(record.get("hands") or []):
        if not isinstance(hand, dict) or "landmarks" not in hand:
            raise InvalidFrame(f"Hand {i} is missing its landmarks")
        hands.append(HandFrame(hand["landmarks"], hand.get("handedness")))

    return DetectionFrame(hands, timestamp_ms=record.get("timestamp_ms"))


def frame_to_record(frame: DetectionFrame) -> dict:
    """Inverse of frame_from_record, for writing recordings."""
    return {
        "timestamp_ms": frame.timestamp_ms,
        "hands": [
            {
                "handedness": hand.handedness.value,
                "landmarks": hand.landmarks.tolist(),
            }
            for hand in frame.hands
        ],
    }
