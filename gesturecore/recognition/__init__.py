"""Gesture recognition module."""
from .frame_buffer import LandmarkWindow
from .motion_classifier import MotionClassifier, is_static
from .static_gestures import StaticGestureRecognizer
from .dynamic_gestures import DynamicGestureRecognizer
from .two_hand_gestures import TwoHandGestureRecognizer

__all__ = [
    "LandmarkWindow",
    "MotionClassifier",
    "is_static",
    "StaticGestureRecognizer",
    "DynamicGestureRecognizer",
    "TwoHandGestureRecognizer",
]
