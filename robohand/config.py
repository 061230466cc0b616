"""Tunables for the gesture game.

Module constants are the defaults; ``GameConfig.from_env`` lets a deployment
override the game settings through ``ROBOHAND_*`` environment variables.
"""

import logging
import math
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


# =============================================================================
# ROUND TIMING
# =============================================================================
COUNTDOWN_START = 3
TICK_SECONDS = 1.0


# =============================================================================
# SESSION
# =============================================================================
MAX_ROUNDS = 3
REQUIRE_REGISTRATION = True
MAX_NAME_LENGTH = 20
BATTLE_LOG_SIZE = 20


# =============================================================================
# OPPONENT
# =============================================================================
PERFECT_COUNTER_PROBABILITY = 0.96


# =============================================================================
# HAND DETECTOR / CAMERA
# =============================================================================
MAX_NUM_HANDS = 1
MODEL_COMPLEXITY = 1
MIN_DETECTION_CONFIDENCE = 0.5
MIN_TRACKING_CONFIDENCE = 0.5

ICE_SERVERS = [{"urls": ["stun:stun.l.google.com:19302"]}]

ENV_PREFIX = "ROBOHAND_"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class GameConfig:
    countdown_start: int = COUNTDOWN_START
    tick_seconds: float = TICK_SECONDS
    max_rounds: int = MAX_ROUNDS
    perfect_probability: float = PERFECT_COUNTER_PROBABILITY
    battle_log_size: int = BATTLE_LOG_SIZE
    max_name_length: int = MAX_NAME_LENGTH
    require_registration: bool = REQUIRE_REGISTRATION

    def __post_init__(self):
        if self.countdown_start < 1:
            raise ConfigError(f"countdown_start must be >= 1, got {self.countdown_start}")
        if not (math.isfinite(self.tick_seconds) and self.tick_seconds > 0):
            raise ConfigError(f"tick_seconds must be a finite number > 0, got {self.tick_seconds}")
        if self.max_rounds < 1:
            raise ConfigError(f"max_rounds must be >= 1, got {self.max_rounds}")
        if not 0.0 <= self.perfect_probability <= 1.0:
            raise ConfigError(
                f"perfect_probability must be within [0, 1], got {self.perfect_probability}"
            )
        if self.battle_log_size < 1:
            raise ConfigError(f"battle_log_size must be >= 1, got {self.battle_log_size}")
        if self.max_name_length < 1:
            raise ConfigError(f"max_name_length must be >= 1, got {self.max_name_length}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GameConfig":
        """Build a config, overriding defaults with ``ROBOHAND_<FIELD>`` variables.

        ``ROBOHAND_MAX_ROUNDS=5`` sets ``max_rounds``; booleans accept
        1/0, true/false, yes/no, on/off.
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            overrides[f.name] = _parse(f.name, raw.strip(), type(getattr(cls, f.name)))
        return cls(**overrides)


def _parse(name, raw, kind):
    if kind is bool:
        lowered = raw.lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigError(f"{name}: expected a boolean, got {raw!r}")
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"{name}: cannot parse {raw!r} as {kind.__name__}") from e


def configure_logging(level: Optional[str] = None) -> None:
    level = level or os.environ.get(ENV_PREFIX + "LOG_LEVEL", "INFO")
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"unknown log level {level!r}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


__all__ = ["ConfigError", "GameConfig", "configure_logging"]
