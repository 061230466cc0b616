# ----------------- gesture_utils.py -----------------
"""Gesture detection utilities (single source of truth).

Classifies ROCK/PAPER/SCISSORS from one hand's 21 landmarks based on finger
state. Every frame is judged on its own: there is no smoothing between frames.
LiveMoveTracker holds whatever the classifier said last.
"""

import numbers
import threading
from enum import Enum
from typing import Optional

import numpy as np

NUM_LANDMARKS = 21

# Fingertip and PIP joint indexes for index, middle, ring, pinky.
# The thumb is left out: tip-above-joint is not meaningful for it.
FINGERTIPS = (8, 12, 16, 20)
FINGER_PIPS = (6, 10, 14, 18)


class RPSMove(str, Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"
    NONE = "none"  # indeterminate / no hand


PLAYABLE_MOVES = (RPSMove.ROCK, RPSMove.PAPER, RPSMove.SCISSORS)


def landmarks_to_array(landmarks) -> Optional[np.ndarray]:
    """Return a (21, 3) float array, or None when the input is not a usable hand.

    Accepts a MediaPipe ``NormalizedLandmarkList`` (anything with a
    ``.landmark`` sequence), a sequence of objects with ``x``/``y``/``z``
    attributes, a sequence of ``(x, y, z)`` tuples or an array.
    """
    if landmarks is None:
        return None
    points = getattr(landmarks, "landmark", landmarks)
    try:
        if len(points) != NUM_LANDMARKS:
            return None
        rows = []
        for p in points:
            if hasattr(p, "x"):
                rows.append((p.x, p.y, getattr(p, "z", 0.0)))
            else:
                rows.append(tuple(p))
        if not all(_is_coordinate(v) for row in rows for v in row):
            return None
        arr = np.asarray(rows, dtype=float)
    except (TypeError, ValueError, AttributeError):
        return None
    if arr.shape != (NUM_LANDMARKS, 3) or not np.isfinite(arr).all():
        return None
    return arr


def _is_coordinate(value) -> bool:
    return isinstance(value, (numbers.Real, np.number)) and not isinstance(value, (bool, np.bool_))


def landmarks_from_result(result):
    """Pick the first hand out of a MediaPipe Hands result, if any."""
    hands = getattr(result, "multi_hand_landmarks", None) if result is not None else None
    if not hands:
        return None
    return hands[0]


def finger_states(points: np.ndarray) -> np.ndarray:
    """Open flags for index, middle, ring, pinky (image y grows downward)."""
    tips_y = points[list(FINGERTIPS), 1]
    pips_y = points[list(FINGER_PIPS), 1]
    return tips_y < pips_y


def classify_landmarks(landmarks) -> RPSMove:
    """Return move based on landmarks geometry (simple heuristic)."""
    points = landmarks_to_array(landmarks)
    if points is None:
        return RPSMove.NONE

    index_open, middle_open, ring_open, pinky_open = (bool(v) for v in finger_states(points))
    extended = index_open + middle_open + ring_open + pinky_open

    if extended <= 1:
        return RPSMove.ROCK
    if extended >= 4:
        return RPSMove.PAPER
    if index_open and middle_open and not ring_open and not pinky_open:
        return RPSMove.SCISSORS
    return RPSMove.NONE


class LiveMoveTracker:
    """Latest classified move, overwritten every frame. No debouncing."""

    def __init__(self):
        self._lock = threading.Lock()
        self._move = RPSMove.NONE

    def update(self, move: RPSMove) -> RPSMove:
        with self._lock:
            self._move = move
        return move

    def observe(self, landmarks) -> RPSMove:
        """Classify one frame's landmarks and record the result."""
        return self.update(classify_landmarks(landmarks))

    @property
    def current(self) -> RPSMove:
        with self._lock:
            return self._move

    def reset(self) -> None:
        self.update(RPSMove.NONE)


__all__ = [
    "RPSMove",
    "PLAYABLE_MOVES",
    "LiveMoveTracker",
    "classify_landmarks",
    "landmarks_from_result",
    "landmarks_to_array",
]
