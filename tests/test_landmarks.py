"""
Tests for Landmark Types and Detector Adapters
===============================================
"""

from types import SimpleNamespace

import numpy as np
import pytest

from gesturecore.core.types import (
    DetectionFrame, GestureLabel, HandFrame, Handedness, InvalidFrame, Landmark, LandmarkIndex,
)
from gesturecore.detection.landmarks import (
    FINGER_JOINTS, FINGER_TIPS, frame_from_landmarker_result, frame_from_record, frame_to_record,
)
from mock_hands import OPEN_PALM, record


def fake_landmarks(points):
    return [SimpleNamespace(x=x, y=y, z=z) for x, y, z in points]


def fake_result(*hands, world_offset=0.0):
    """Object shaped like a MediaPipe HandLandmarkerResult."""
    normalized = [np.asarray(points, dtype=float) / 512 for points, _ in hands]
    return SimpleNamespace(
        hand_landmarks=[fake_landmarks(p) for p in normalized],
        hand_world_landmarks=[fake_landmarks(p + world_offset) for p in normalized],
        handedness=[[SimpleNamespace(category_name=label, score=0.97)] if label else []
                    for _, label in hands],
    )


class TestHandFrame:
    """Test suite for validated hand snapshots."""

    def test_landmark_access(self):
        hand = HandFrame(OPEN_PALM, "Right")

        assert hand.handedness is Handedness.RIGHT
        assert hand.get(LandmarkIndex.INDEX_TIP) == Landmark(230.0, 200.0, 0.0)
        assert np.allclose(hand.wrist, [256, 400, 0])

    def test_landmarks_read_only(self):
        hand = HandFrame(OPEN_PALM)
        with pytest.raises(ValueError):
            hand.landmarks[0, 0] = 1.0

        copy = hand.to_numpy()
        copy[0, 0] = 1.0
        assert hand.wrist[0] == 256

    def test_scaled(self):
        hand = HandFrame(np.asarray(OPEN_PALM) / 512, Handedness.LEFT).scaled(512)

        assert hand.handedness is Handedness.LEFT
        assert np.allclose(hand.landmarks, OPEN_PALM)

    def test_scaled_overflow(self):
        hand = HandFrame(np.full((21, 3), 1e306))
        with pytest.raises(InvalidFrame, match="infinite"):
            hand.scaled(512)

    @pytest.mark.parametrize("landmarks", [
        OPEN_PALM[:20],
        [(1, 2)] * 21,
        [("a", "b", "c")] * 21,
        [(0.0, float("nan"), 0.0)] * 21,
        [(float("inf"), 0.0, 0.0)] * 21,
    ])
    def test_rejects_malformed_landmarks(self, landmarks):
        with pytest.raises(InvalidFrame):
            HandFrame(landmarks)

    def test_unrecognized_handedness_is_unknown(self):
        assert HandFrame(OPEN_PALM, "ambidextrous").handedness is Handedness.UNKNOWN
        assert HandFrame(OPEN_PALM, None).handedness is Handedness.UNKNOWN
        assert HandFrame(OPEN_PALM, " left ").handedness is Handedness.LEFT


class TestTypes:
    """Test suite for enums and the detection frame."""

    def test_gesture_label_values(self):
        assert GestureLabel.NONE == 0
        assert GestureLabel.from_value(4) is GestureLabel.TWO_HAND_MATCH
        assert GestureLabel.from_value("thumb_up") is GestureLabel.THUMB_UP

    def test_gesture_label_groups(self):
        assert GestureLabel.OK.is_static
        assert GestureLabel.DOWN.is_dynamic
        assert not GestureLabel.NONE.is_static
        assert not GestureLabel.TWO_HAND_MATCH.is_dynamic
        assert GestureLabel.LEFT.display_name == "Go Left"

    def test_opposite_handedness(self):
        assert Handedness.LEFT.opposite is Handedness.RIGHT
        assert Handedness.RIGHT.opposite is Handedness.LEFT
        assert Handedness.UNKNOWN.opposite is Handedness.UNKNOWN

    def test_detection_frame(self):
        frame = DetectionFrame([HandFrame(OPEN_PALM)], timestamp_ms=10)

        assert frame.hand_count == 1
        assert not frame.is_empty
        assert DetectionFrame().is_empty

    def test_joint_tables(self):
        assert FINGER_TIPS == (4, 8, 12, 16, 20)
        assert FINGER_JOINTS["index"] == (5, 6, 7, 8)
        assert FINGER_JOINTS["pinky"] == (17, 18, 19, 20)


class TestLandmarkerAdapter:
    """Test suite for HandLandmarkerResult conversion."""

    def test_two_hands(self):
        result = fake_result((OPEN_PALM, "Left"), (OPEN_PALM, "Right"))
        frame = frame_from_landmarker_result(result, timestamp_ms=42)

        assert frame.hand_count == 2
        assert frame.timestamp_ms == 42
        assert [h.handedness for h in frame.hands] == [Handedness.LEFT, Handedness.RIGHT]
        assert np.allclose(frame.hands[0].scaled(512).landmarks, OPEN_PALM)

    def test_world_landmarks(self):
        result = fake_result((OPEN_PALM, "Right"), world_offset=1.0)
        frame = frame_from_landmarker_result(result, world=True)

        assert frame.hands[0].wrist[0] == pytest.approx(256 / 512 + 1.0)

    def test_missing_handedness(self):
        result = fake_result((OPEN_PALM, None))
        frame = frame_from_landmarker_result(result)

        assert frame.hands[0].handedness is Handedness.UNKNOWN

    def test_no_hands(self):
        result = SimpleNamespace(hand_landmarks=[], hand_world_landmarks=[], handedness=[])
        assert frame_from_landmarker_result(result).is_empty

    def test_malformed_landmarks(self):
        result = SimpleNamespace(hand_landmarks=[[object()] * 21], handedness=[])
        with pytest.raises(InvalidFrame):
            frame_from_landmarker_result(result)


class TestRecordAdapter:
    """Test suite for JSON-style recording records."""

    def test_from_record(self):
        frame = frame_from_record(record(OPEN_PALM, handedness="Left", timestamp_ms=66))

        assert frame.timestamp_ms == 66
        assert frame.hands[0].handedness is Handedness.LEFT
        assert frame.hands[0].wrist[0] == pytest.approx(0.5)

    def test_record_round_trip(self):
        frame = frame_from_record(record(OPEN_PALM))
        again = frame_from_record(frame_to_record(frame))

        assert again.timestamp_ms == frame.timestamp_ms
        assert np.array_equal(again.hands[0].landmarks, frame.hands[0].landmarks)
        assert again.hands[0].handedness is frame.hands[0].handedness

    def test_empty_record(self):
        assert frame_from_record({"timestamp_ms": 5}).is_empty

    @pytest.mark.parametrize("bad", [
        [1, 2, 3],
        {"hands": [{"handedness": "Left"}]},
        {"hands": ["nope"]},
        {"hands": [{"landmarks": [[0, 0, 0]] * 3}]},
    ])
    def test_rejects_bad_records(self, bad):
        with pytest.raises(InvalidFrame):
            frame_from_record(bad)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
