"""
Mock hand landmarks for tests.

Poses are laid out in scaled (x512) image units, y growing downward, and
converted to normalized coordinates where a session needs raw detector
output.
"""

import numpy as np

from gesturecore.core.types import DetectionFrame, HandFrame, Handedness

SCALE = 512.0

# Right hand, palm facing camera, every digit straight
OPEN_PALM = [
    (256, 400, 0),                                              # wrist
    (220, 380, 0), (190, 350, 0), (160, 320, 0), (130, 290, 0),  # thumb
    (230, 300, 0), (230, 260, 0), (230, 230, 0), (230, 200, 0),  # index
    (256, 295, 0), (256, 250, 0), (256, 215, 0), (256, 180, 0),  # middle
    (282, 300, 0), (282, 260, 0), (282, 230, 0), (282, 200, 0),  # ring
    (305, 310, 0), (305, 280, 0), (305, 255, 0), (305, 230, 0),  # pinky
]

# Index tip meets thumb tip; middle, ring and pinky stay raised
OK_SIGN = [
    (256, 400, 0),
    (220, 380, 0), (205, 340, 0), (200, 290, 0), (200, 250, 0),
    (230, 300, 0), (225, 270, 0), (215, 255, 0), (200, 250, 0),
    (256, 295, 0), (256, 250, 0), (256, 215, 0), (256, 180, 0),
    (282, 300, 0), (282, 260, 0), (282, 230, 0), (282, 200, 0),
    (305, 310, 0), (305, 280, 0), (305, 255, 0), (305, 230, 0),
]

# Right hand seen sideways: fingers curled back towards +x, thumb raised
THUMB_UP_RIGHT = [
    (300, 300, 0),
    (260, 240, 0), (250, 220, 0), (248, 190, 0), (246, 160, 0),
    (240, 250, 0), (210, 255, 0), (215, 270, 0), (230, 270, 0),
    (240, 270, 0), (210, 275, 0), (215, 290, 0), (230, 290, 0),
    (240, 290, 0), (212, 295, 0), (217, 308, 0), (230, 308, 0),
    (245, 308, 0), (220, 312, 0), (224, 322, 0), (234, 322, 0),
]


def mirror_x(points, width=SCALE):
    """Mirror a pose left-to-right."""
    return [(width - x, y, z) for x, y, z in points]


def shifted(points, dx=0.0, dy=0.0):
    return [(x + dx, y + dy, z) for x, y, z in points]


def scaled_hand(points, handedness=Handedness.RIGHT) -> HandFrame:
    """HandFrame already in scaled units, for recognizer-level tests."""
    return HandFrame(points, handedness)


def raw_hand(points, handedness=Handedness.RIGHT, scale=SCALE) -> HandFrame:
    """HandFrame in normalized detector units, for session-level tests."""
    return HandFrame(np.asarray(points, dtype=np.float64) / scale, handedness)


def detection(*hands, timestamp_ms=None) -> DetectionFrame:
    return DetectionFrame(hands, timestamp_ms=timestamp_ms)


def record(points, handedness="Right", timestamp_ms=0, scale=SCALE) -> dict:
    """JSON-style record holding a single normalized hand."""
    return {
        "timestamp_ms": timestamp_ms,
        "hands": [{
            "handedness": handedness,
            "landmarks": (np.asarray(points, dtype=np.float64) / scale).tolist(),
        }],
    }
