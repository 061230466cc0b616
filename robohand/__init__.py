"""Rock-paper-scissors against the computer, played with hand gestures."""

from robohand.config import ConfigError, GameConfig
from robohand.game_logic import MatchSession, OpponentStrategy, RoundOutcome, RoundState, resolve
from robohand.gesture_utils import LiveMoveTracker, RPSMove, classify_landmarks
from robohand.orchestrator import GameState, MatchOrchestrator

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "GameConfig",
    "GameState",
    "LiveMoveTracker",
    "MatchOrchestrator",
    "MatchSession",
    "OpponentStrategy",
    "RPSMove",
    "RoundOutcome",
    "RoundState",
    "classify_landmarks",
    "resolve",
]
