"""MediaPipe Hands wrapped as a per-frame landmark source."""

import logging

import mediapipe as mp
import numpy as np

from robohand import config
from robohand.gesture_utils import landmarks_from_result

logger = logging.getLogger(__name__)


class HandLandmarkSource:
    """Turns BGR video frames into zero-or-one hand of 21 normalized landmarks."""

    def __init__(
        self,
        model_complexity=config.MODEL_COMPLEXITY,
        min_detection_confidence=config.MIN_DETECTION_CONFIDENCE,
        min_tracking_confidence=config.MIN_TRACKING_CONFIDENCE,
    ):
        self.hands = mp.solutions.hands.Hands(
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            max_num_hands=config.MAX_NUM_HANDS,
        )
        logger.info("MediaPipe Hands loaded (complexity=%s)", model_complexity)

    def process(self, frame_bgr: np.ndarray):
        """Detect on one frame; returns the raw landmark list or None."""
        frame_rgb = np.ascontiguousarray(frame_bgr[:, :, ::-1])
        return landmarks_from_result(self.hands.process(frame_rgb))

    def close(self) -> None:
        if self.hands is not None:
            self.hands.close()
            self.hands = None


def draw_hand(frame_bgr: np.ndarray, hand_landmarks) -> None:
    """Overlay the skeleton on the frame in place."""
    if hand_landmarks is None:
        return
    mp.solutions.drawing_utils.draw_landmarks(
        frame_bgr, hand_landmarks, mp.solutions.hands.HAND_CONNECTIONS
    )


__all__ = ["HandLandmarkSource", "draw_hand"]
