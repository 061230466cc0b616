# game_logic.py
"""Round rules, the computer opponent and session bookkeeping."""

import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional

from robohand.config import BATTLE_LOG_SIZE, MAX_ROUNDS, PERFECT_COUNTER_PROBABILITY
from robohand.gesture_utils import PLAYABLE_MOVES, RPSMove


class RoundOutcome(str, Enum):
    PLAYER_WINS = "player"
    AI_WINS = "ai"
    DRAW = "draw"


# move -> the move it defeats
BEATS = {
    RPSMove.ROCK: RPSMove.SCISSORS,
    RPSMove.PAPER: RPSMove.ROCK,
    RPSMove.SCISSORS: RPSMove.PAPER,
}
# move -> the move that defeats it
COUNTER = {loser: winner for winner, loser in BEATS.items()}


def resolve(player: RPSMove, ai: RPSMove) -> RoundOutcome:
    """Determine the outcome of a round."""
    if player not in BEATS or ai not in BEATS:
        raise ValueError(f"cannot resolve a round with {player!r} vs {ai!r}")
    if player == ai:
        return RoundOutcome.DRAW
    if BEATS[player] == ai:
        return RoundOutcome.PLAYER_WINS
    return RoundOutcome.AI_WINS


def random_move(rng: random.Random) -> RPSMove:
    return rng.choice(PLAYABLE_MOVES)


class OpponentStrategy:
    """Plays the perfect counter most of the time and the losing move otherwise.

    One ``rng.random()`` draw per round: below ``perfect_probability`` the AI
    counters the player's move, at or above it the AI throws the move that
    loses to it.
    """

    def __init__(self, perfect_probability: float = PERFECT_COUNTER_PROBABILITY,
                 rng: Optional[random.Random] = None):
        if not 0.0 <= perfect_probability <= 1.0:
            raise ValueError(f"perfect_probability must be within [0, 1], got {perfect_probability}")
        self.perfect_probability = perfect_probability
        self.rng = rng or random.Random()

    def choose(self, player_move: RPSMove) -> RPSMove:
        if player_move not in BEATS:
            raise ValueError(f"opponent needs a concrete player move, got {player_move!r}")
        if self.rng.random() < self.perfect_probability:
            return COUNTER[player_move]
        return BEATS[player_move]


@dataclass
class Scoreboard:
    player: int = 0
    ai: int = 0

    def record(self, outcome: RoundOutcome) -> None:
        if outcome == RoundOutcome.PLAYER_WINS:
            self.player += 1
        elif outcome == RoundOutcome.AI_WINS:
            self.ai += 1

    def reset(self) -> None:
        self.player = 0
        self.ai = 0

    def to_dict(self):
        return {"player": self.player, "ai": self.ai}


@dataclass
class RoundState:
    """One round: moves stay NONE until the capture instant fills them in."""

    round_index: int
    player_move: RPSMove = RPSMove.NONE
    ai_move: RPSMove = RPSMove.NONE
    outcome: Optional[RoundOutcome] = None
    substituted: bool = False

    @property
    def resolved(self) -> bool:
        return self.outcome is not None

    def describe(self) -> str:
        if self.outcome is None:
            return f"Round {self.round_index}: pending"
        label = {
            RoundOutcome.PLAYER_WINS: "PLAYER WINS",
            RoundOutcome.AI_WINS: "AI WINS",
            RoundOutcome.DRAW: "DRAW",
        }[self.outcome]
        guessed = " [no hand, random pick]" if self.substituted else ""
        return (f"Round {self.round_index}: {label} "
                f"(P: {self.player_move.value} / AI: {self.ai_move.value}){guessed}")

    def to_dict(self):
        return {
            "round": self.round_index,
            "player_move": self.player_move.value,
            "ai_move": self.ai_move.value,
            "outcome": self.outcome.value if self.outcome else None,
            "substituted": self.substituted,
        }


@dataclass
class MatchSession:
    """Score, round counter and battle log for one player."""

    player: Optional[str] = None
    max_rounds: int = MAX_ROUNDS
    log_size: int = BATTLE_LOG_SIZE
    round_number: int = 1
    score: Scoreboard = field(default_factory=Scoreboard)
    last_round: Optional[RoundState] = None
    log: Deque[str] = field(init=False)

    def __post_init__(self):
        self.log = deque(maxlen=self.log_size)

    @property
    def is_final_round(self) -> bool:
        return self.round_number >= self.max_rounds

    @property
    def is_complete(self) -> bool:
        return self.is_final_round and self.last_round is not None and self.last_round.resolved

    def next_round(self) -> int:
        if self.is_final_round:
            raise ValueError(f"session already at its last round ({self.max_rounds})")
        self.round_number += 1
        return self.round_number

    def record(self, state: RoundState) -> None:
        self.score.record(state.outcome)
        self.last_round = state
        self.add_log(state.describe())

    def add_log(self, entry: str) -> None:
        self.log.append(entry)

    def reset(self, player: Optional[str] = None) -> None:
        self.player = player
        self.round_number = 1
        self.score.reset()
        self.last_round = None
        self.log.clear()

    def log_entries(self) -> List[str]:
        return list(self.log)


__all__ = [
    "BEATS",
    "COUNTER",
    "MatchSession",
    "OpponentStrategy",
    "RoundOutcome",
    "RoundState",
    "Scoreboard",
    "random_move",
    "resolve",
]
