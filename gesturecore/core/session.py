"""
Gesture session orchestrator.

Encapsulates the buffer -> motion check -> recognize cycle for one
tracking stream:

    DetectionFrame -> LandmarkWindow -> MotionClassifier
        -> StaticGestureRecognizer | DynamicGestureRecognizer
    DetectionFrame (two hands) -> TwoHandGestureRecognizer

A session is owned by a single worker thread and must not be mutated
concurrently. Handing labels to a UI thread is the caller's job.
"""

from typing import Iterable, List, Optional, Tuple

from gesturecore.core.events import EventBus, Events
from gesturecore.core.types import DetectionFrame, GestureLabel, HandFrame, Handedness, InvalidFrame
from gesturecore.recognition.dynamic_gestures import DynamicGestureRecognizer
from gesturecore.recognition.frame_buffer import LandmarkWindow
from gesturecore.recognition.motion_classifier import MotionClassifier
from gesturecore.recognition.static_gestures import StaticGestureRecognizer
from gesturecore.recognition.two_hand_gestures import TwoHandGestureRecognizer
from gesturecore.utils.config import GestureProfile


class GestureSession:
    """Per-stream gesture state machine.

    Owns exactly one LandmarkWindow for single-hand tracking plus the
    latest two-hand snapshot pair. Two-hand poses are judged on the
    current frame only and never touch the window.

    Example:
        >>> session = GestureSession(GestureProfile.live_stream())
        >>> for frame in detector_frames:
        ...     label = session.ingest(frame)
        ...     if label is not GestureLabel.NONE:
        ...         ui_queue.put(label)
    """

    def __init__(self, profile: Optional[GestureProfile] = None,
                 event_bus: Optional[EventBus] = None):
        self._profile = profile or GestureProfile.live_stream()
        self._bus = event_bus

        self._window = LandmarkWindow(self._profile.frame_buffer_size)
        self._motion = MotionClassifier(self._profile.static_threshold, self._profile.motion_mode)
        self._static = StaticGestureRecognizer(self._profile.static)
        self._dynamic = DynamicGestureRecognizer(self._profile.dynamic)
        self._two_hand = TwoHandGestureRecognizer(self._profile.two_hand)

        self._two_hand_pair: Optional[Tuple[HandFrame, HandFrame]] = None
        self._handedness = Handedness.UNKNOWN
        self._last_label = GestureLabel.NONE
        self._frames_ingested = 0

    def ingest(self, frame: DetectionFrame) -> GestureLabel:
        """Consume one detector output and return the current classification.

        Raises:
            InvalidFrame: input is not a DetectionFrame, or a hand does not
                survive scaling; session state is unchanged either way
        """
        if not isinstance(frame, DetectionFrame):
            raise InvalidFrame(f"Expected DetectionFrame, got {type(frame).__name__}")

        # Scale up front so a bad frame is rejected before any state changes
        if frame.hand_count == 1:
            scaled = (frame.hands[0].scaled(self._profile.scale),)
        elif frame.hand_count == 2:
            scale = self._profile.two_hand.scale
            scaled = tuple(hand.scaled(scale) for hand in frame.hands)
        else:
            scaled = ()

        self._frames_ingested += 1

        if frame.hand_count == 0:
            label = self._on_hand_lost(frame)
        elif frame.hand_count == 1:
            label = self._on_single_hand(scaled[0])
        elif frame.hand_count == 2:
            label = self._on_two_hands(frame, scaled)
        else:
            label = GestureLabel.NONE

        self._last_label = label
        if label is not GestureLabel.NONE:
            self._emit(Events.GESTURE_DETECTED, label=label,
                       hand_count=frame.hand_count, timestamp_ms=frame.timestamp_ms)
        return label

    def ingest_many(self, frames: Iterable[DetectionFrame]) -> List[GestureLabel]:
        """Replay an ordered sequence of frames, one label per frame."""
        return [self.ingest(frame) for frame in frames]

    def reset(self) -> None:
        """Clear all session state, as if freshly constructed."""
        self._window.clear()
        self._two_hand_pair = None
        self._handedness = Handedness.UNKNOWN
        self._last_label = GestureLabel.NONE
        self._frames_ingested = 0
        self._emit(Events.SESSION_RESET)

    def _on_hand_lost(self, frame: DetectionFrame) -> GestureLabel:
        dropped = len(self._window)
        self._window.clear()
        self._two_hand_pair = None
        if dropped:
            self._emit(Events.HAND_LOST, frames_dropped=dropped, timestamp_ms=frame.timestamp_ms)
        return GestureLabel.NONE

    def _on_single_hand(self, hand: HandFrame) -> GestureLabel:
        self._handedness = hand.handedness
        self._window.push(hand)

        if not self._window.is_full():
            return GestureLabel.NONE

        if self._motion.is_static(self._window):
            return self._static.classify(self._window.newest, self._handedness)
        return self._dynamic.classify(self._window)

    def _on_two_hands(self, frame: DetectionFrame, scaled: Tuple[HandFrame, HandFrame]) -> GestureLabel:
        first, second = frame.hands

        if TwoHandGestureRecognizer.has_identity_conflict(first, second):
            dropped = len(self._window)
            self._window.clear()
            self._two_hand_pair = None
            self._emit(Events.IDENTITY_CONFLICT, handedness=first.handedness,
                       frames_dropped=dropped, timestamp_ms=frame.timestamp_ms)
            return GestureLabel.NONE

        self._two_hand_pair = scaled
        return self._two_hand.classify(*self._two_hand_pair)

    def _emit(self, event_name: str, **kwargs) -> None:
        if self._bus is not None:
            self._bus.emit(event_name, **kwargs)

    @property
    def profile(self) -> GestureProfile:
        return self._profile

    @property
    def window(self) -> LandmarkWindow:
        return self._window

    @property
    def two_hand_pair(self) -> Optional[Tuple[HandFrame, HandFrame]]:
        return self._two_hand_pair

    @property
    def handedness(self) -> Handedness:
        """Handedness of the most recent single-hand frame."""
        return self._handedness

    @property
    def last_label(self) -> GestureLabel:
        return self._last_label

    @property
    def frames_ingested(self) -> int:
        return self._frames_ingested
