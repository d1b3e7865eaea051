"""Landmark topology and detector adapters."""
from .landmarks import frame_from_landmarker_result, frame_from_record, frame_to_record

__all__ = [
    "frame_from_landmarker_result",
    "frame_from_record",
    "frame_to_record",
]
