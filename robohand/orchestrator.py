# orchestrator.py
"""Round lifecycle: Loading -> Idle -> Countdown(n) -> Result -> ...

The orchestrator is the only thing that mutates the match session. Frames
arrive on the video worker thread and countdown ticks on timer threads, so
every mutation happens under one re-entrant lock. Each armed timer carries
the generation number current when it was armed; ticks from an older
generation are dropped, which keeps two countdowns from ever resolving the
same round.
"""

import logging
import random
import threading
from enum import Enum
from typing import Callable, List, Optional

from robohand.config import GameConfig
from robohand.game_logic import MatchSession, OpponentStrategy, RoundState, random_move, resolve
from robohand.gesture_utils import LiveMoveTracker, RPSMove
from robohand.scheduler import TimerScheduler

logger = logging.getLogger(__name__)

READY_MESSAGE = "System ready. Awaiting user input."


class GameState(str, Enum):
    LOADING = "Loading"
    IDLE = "Idle"
    COUNTDOWN = "Countdown"
    RESULT = "Result"


StateListener = Callable[[str], None]
RoundListener = Callable[[RoundState], None]


class MatchOrchestrator:
    def __init__(
        self,
        tracker: LiveMoveTracker,
        config: Optional[GameConfig] = None,
        opponent: Optional[OpponentStrategy] = None,
        rng: Optional[random.Random] = None,
        scheduler=None,
        detector_ready: bool = False,
    ):
        self.tracker = tracker
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.opponent = opponent or OpponentStrategy(self.config.perfect_probability, rng=self.rng)
        self.scheduler = scheduler or TimerScheduler()

        self.session = MatchSession(max_rounds=self.config.max_rounds,
                                    log_size=self.config.battle_log_size)
        self.state = GameState.LOADING
        self.countdown = self.config.countdown_start
        self.current_round: Optional[RoundState] = None
        self.last_error: Optional[str] = None

        self._lock = threading.RLock()
        self._timer = None
        self._generation = 0
        self._state_listeners: List[StateListener] = []
        self._round_listeners: List[RoundListener] = []

        if detector_ready:
            self.mark_detector_ready()

    # ── Observers ────────────────────────────────────────
    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def add_round_listener(self, listener: RoundListener) -> None:
        self._round_listeners.append(listener)

    @property
    def state_tag(self) -> str:
        if self.state == GameState.COUNTDOWN:
            return f"Countdown:{self.countdown}"
        return self.state.value

    def _emit_state(self, *tags: str) -> None:
        tags = tags or (self.state_tag,)
        for tag in tags:
            for listener in list(self._state_listeners):
                listener(tag)

    def _emit_round(self, state: RoundState) -> None:
        for listener in list(self._round_listeners):
            listener(state)

    # ── Commands ─────────────────────────────────────────
    def mark_detector_ready(self) -> bool:
        """The landmark detector is up; leave Loading."""
        with self._lock:
            if self.state != GameState.LOADING:
                return False
            self.state = GameState.IDLE
            self.session.add_log(READY_MESSAGE)
            logger.info("Hand detector ready")
            self._emit_state()
            return True

    def register_player(self, name) -> bool:
        """Start a fresh session for ``name``. Refused mid-countdown."""
        with self._lock:
            if not isinstance(name, str) or not name.strip():
                return self._reject("player name is required")
            name = name.strip()
            if len(name) > self.config.max_name_length:
                return self._reject(
                    f"player name longer than {self.config.max_name_length} characters"
                )
            if self.state == GameState.COUNTDOWN:
                return self._reject("cannot register a player during a countdown")

            self.last_error = None
            self._cancel_timer()
            self.session.reset(player=name)
            self.current_round = None
            self.countdown = self.config.countdown_start
            self.session.add_log(f"Welcome, {name}! Press START to battle.")
            logger.info("Registered player %r", name)
            if self.state == GameState.RESULT:
                self.state = GameState.IDLE
                self._emit_state()
            return True

    def start_round(self) -> bool:
        with self._lock:
            if self.state == GameState.LOADING:
                return self._reject("hand detector is not ready")
            if self.state == GameState.COUNTDOWN:
                return self._reject("a round is already counting down")
            if self.state == GameState.RESULT:
                return self._reject("round finished; advance to continue")
            if self.config.require_registration and not self.session.player:
                return self._reject("register a player first")
            self.last_error = None
            self._begin_countdown()
            return True

    def advance(self) -> bool:
        """Next round, or, after the final round, a clean slate for the next challenger."""
        with self._lock:
            if self.state != GameState.RESULT:
                return self._reject(f"nothing to advance from {self.state_tag}")
            self.last_error = None
            if self.session.is_final_round:
                self._finish_session()
            else:
                self.session.next_round()
                self._begin_countdown()
            return True

    def shutdown(self) -> None:
        """Drop any pending countdown; an unfinished round is discarded."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            if self.state == GameState.COUNTDOWN:
                logger.info("Round %d abandoned", self.session.round_number)
                self.current_round = None
                self.countdown = self.config.countdown_start
                self.state = GameState.IDLE
                self._emit_state()

    # ── Internals ────────────────────────────────────────
    def _reject(self, reason: str) -> bool:
        self.last_error = reason
        logger.warning("Command rejected: %s", reason)
        return False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _begin_countdown(self) -> None:
        self._cancel_timer()
        self._generation += 1
        self.current_round = RoundState(round_index=self.session.round_number)
        self.countdown = self.config.countdown_start
        self.state = GameState.COUNTDOWN
        logger.info("Round %d/%d started", self.session.round_number, self.session.max_rounds)
        self._arm_timer()
        self._emit_state()

    def _arm_timer(self) -> None:
        self._timer = self.scheduler.call_later(
            self.config.tick_seconds, self._on_tick, self._generation
        )

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.state != GameState.COUNTDOWN:
                logger.debug("Ignoring stale countdown tick (generation %d)", generation)
                return
            self._timer = None
            self.countdown -= 1
            logger.debug("Countdown %d", self.countdown)
            if self.countdown > 0:
                self._arm_timer()
                self._emit_state()
            else:
                self._capture()

    def _capture(self) -> None:
        round_state = self.current_round
        observed = self.tracker.current
        if observed == RPSMove.NONE:
            round_state.player_move = random_move(self.rng)
            round_state.substituted = True
            logger.debug("No gesture at capture, picked %s", round_state.player_move.value)
        else:
            round_state.player_move = observed
        round_state.ai_move = self.opponent.choose(round_state.player_move)
        round_state.outcome = resolve(round_state.player_move, round_state.ai_move)

        self.session.record(round_state)
        self.state = GameState.RESULT
        logger.info(
            "Round %d: player=%s ai=%s -> %s (score %d:%d)",
            round_state.round_index,
            round_state.player_move.value,
            round_state.ai_move.value,
            round_state.outcome.value,
            self.session.score.player,
            self.session.score.ai,
        )
        self._emit_state("Countdown:0", self.state_tag)
        self._emit_round(round_state)

    def _finish_session(self) -> None:
        logger.info(
            "Session complete for %s: %d:%d",
            self.session.player or "anonymous",
            self.session.score.player,
            self.session.score.ai,
        )
        self._cancel_timer()
        self.session.reset(player=None)
        self.current_round = None
        self.countdown = self.config.countdown_start
        self.state = GameState.IDLE
        self._emit_state()

    # ── Views ────────────────────────────────────────────
    @property
    def session_complete(self) -> bool:
        with self._lock:
            return self.state == GameState.RESULT and self.session.is_complete

    def snapshot(self) -> dict:
        """JSON-friendly view of everything the UI renders."""
        with self._lock:
            last = self.session.last_round
            return {
                "state": self.state_tag,
                "countdown": self.countdown,
                "player": self.session.player,
                "round": self.session.round_number,
                "max_rounds": self.session.max_rounds,
                "score": self.session.score.to_dict(),
                "last_round": last.to_dict() if last else None,
                "log": self.session.log_entries(),
                "session_complete": self.state == GameState.RESULT and self.session.is_complete,
                "error": self.last_error,
            }


__all__ = ["GameState", "MatchOrchestrator", "READY_MESSAGE"]
