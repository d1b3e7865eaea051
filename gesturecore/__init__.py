"""
gesturecore
===========

Real-time hand gesture classification from streamed hand landmarks.

Modules:
    - core: domain types, event bus, GestureSession
    - detection: landmark topology and detector-output adapters
    - recognition: frame window, motion check, static / dynamic / two-hand recognizers
    - utils: vector math, configuration profiles, logging
"""

from gesturecore.core.session import GestureSession
from gesturecore.core.types import (
    DetectionFrame, GestureLabel, HandFrame, Handedness, InvalidFrame, Landmark,
)
from gesturecore.utils.config import GestureProfile

__version__ = "1.0.0"

__all__ = [
    "GestureSession",
    "GestureProfile",
    "GestureLabel",
    "DetectionFrame",
    "HandFrame",
    "Handedness",
    "Landmark",
    "InvalidFrame",
]
