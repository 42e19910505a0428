"""Match configuration.

Everything the player picks on the setup screens lives here. Values are
validated when set; anything unrecognized or out of range silently falls
back to its default so a bad selection can never stop a match from
starting.

Usage:
    setup = MatchSetup()
    setup.set_mode("timed_score")
    setup.set_difficulty("hard")
    setup.set_match_duration(90)
    sim = setup.start_match()
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .core.events import EventBus
    from .orchestrator import Simulation

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================

class GameMode(str, Enum):
    """How a match is won."""
    SURVIVAL = "survival"        # Lives-based elimination
    TIMED_SCORE = "timed_score"  # Most points before the countdown ends


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Theme(str, Enum):
    """Background palette handed through to renderers."""
    CLASSIC = "classic"
    CHARCOAL = "charcoal"
    NEON = "neon"


# =============================================================================
# Presets
# =============================================================================

@dataclass(frozen=True)
class DifficultyPreset:
    """Tuning for one difficulty level.

    Attributes:
        ball_base: Serve speed in units/second
        cpu_agility: Tracking coefficient for the CPU paddle, in (0, 1]
    """
    ball_base: float
    cpu_agility: float


DIFFICULTY_PRESETS: dict[Difficulty, DifficultyPreset] = {
    Difficulty.EASY: DifficultyPreset(ball_base=180.0, cpu_agility=0.45),
    Difficulty.NORMAL: DifficultyPreset(ball_base=260.0, cpu_agility=0.65),
    Difficulty.HARD: DifficultyPreset(ball_base=340.0, cpu_agility=0.9),
}


THEMES: dict[Theme, tuple[str, str]] = {
    Theme.CLASSIC: ("#001f3f", "#071a2b"),
    Theme.CHARCOAL: ("#222222", "#0b0b0b"),
    Theme.NEON: ("#071827", "#001018"),
}


# =============================================================================
# Defaults and limits
# =============================================================================

DEFAULT_MODE = GameMode.SURVIVAL
DEFAULT_DIFFICULTY = Difficulty.NORMAL
DEFAULT_LIVES = 3
DEFAULT_DURATION = 60.0
DEFAULT_THEME = Theme.CLASSIC
DEFAULT_PLAYER_NAME = "Player"

MIN_LIVES, MAX_LIVES = 1, 10
MIN_DURATION, MAX_DURATION = 10.0, 600.0
MAX_NAME_LENGTH = 24


@dataclass(frozen=True)
class MatchConfig:
    """Validated settings for one match."""
    mode: GameMode = DEFAULT_MODE
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    lives: int = DEFAULT_LIVES
    multi_ball: bool = False
    match_duration: float = DEFAULT_DURATION
    theme: Theme = DEFAULT_THEME
    player_name: str = DEFAULT_PLAYER_NAME
    high_score: int = 0
    seed: Optional[int] = None  # For reproducible serves and CPU power shots

    @property
    def preset(self) -> DifficultyPreset:
        return DIFFICULTY_PRESETS[self.difficulty]

    @property
    def ball_count(self) -> int:
        return 3 if self.multi_ball else 1

    @property
    def theme_colors(self) -> tuple[str, str]:
        return THEMES[self.theme]


# =============================================================================
# Validation
# =============================================================================

def _coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace("-", "_")
        # Accept the short names the setup screens use
        if enum_cls is GameMode and key in ("scores", "timed", "timedscore"):
            return GameMode.TIMED_SCORE
        try:
            return enum_cls(key)
        except ValueError:
            pass
    logger.debug("Unrecognized %s %r, using %s", enum_cls.__name__, value, default.value)
    return default


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_mode(value: Any) -> GameMode:
    return _coerce_enum(GameMode, value, DEFAULT_MODE)


def validate_difficulty(value: Any) -> Difficulty:
    return _coerce_enum(Difficulty, value, DEFAULT_DIFFICULTY)


def validate_theme(value: Any) -> Theme:
    return _coerce_enum(Theme, value, DEFAULT_THEME)


def validate_lives(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if _is_number(value) and MIN_LIVES <= value <= MAX_LIVES and float(value).is_integer():
        return int(value)
    logger.debug("Invalid lives %r, using %d", value, DEFAULT_LIVES)
    return DEFAULT_LIVES


def validate_duration(value: Any) -> float:
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            pass
    if _is_number(value) and MIN_DURATION <= value <= MAX_DURATION:
        return float(value)
    logger.debug("Invalid match duration %r, using %.0fs", value, DEFAULT_DURATION)
    return DEFAULT_DURATION


def validate_multi_ball(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    logger.debug("Invalid multi-ball flag %r, using False", value)
    return False


def validate_player_name(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()[:MAX_NAME_LENGTH]
    return DEFAULT_PLAYER_NAME


def validate_high_score(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    # Ints are exact at any size; floats must be finite to convert
    if _is_number(value) and value >= 0 and (isinstance(value, int) or math.isfinite(value)):
        return int(value)
    logger.debug("Invalid stored high score %r, using 0", value)
    return 0


# =============================================================================
# Builder
# =============================================================================

class MatchSetup:
    """Pre-match configuration builder.

    Each setter validates independently and returns the builder so calls
    can be chained. A started match never sees later changes: the config
    is frozen and copied into the Simulation by start_match().
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        self._config = config or MatchConfig()

    @property
    def config(self) -> MatchConfig:
        return self._config

    def _set(self, **changes: Any) -> MatchSetup:
        self._config = replace(self._config, **changes)
        return self

    def set_mode(self, mode: Any) -> MatchSetup:
        return self._set(mode=validate_mode(mode))

    def set_difficulty(self, difficulty: Any) -> MatchSetup:
        return self._set(difficulty=validate_difficulty(difficulty))

    def set_lives(self, lives: Any) -> MatchSetup:
        return self._set(lives=validate_lives(lives))

    def set_multi_ball(self, enabled: Any) -> MatchSetup:
        return self._set(multi_ball=validate_multi_ball(enabled))

    def set_match_duration(self, seconds: Any) -> MatchSetup:
        return self._set(match_duration=validate_duration(seconds))

    def set_theme(self, theme: Any) -> MatchSetup:
        return self._set(theme=validate_theme(theme))

    def set_player_name(self, name: Any) -> MatchSetup:
        return self._set(player_name=validate_player_name(name))

    def set_high_score(self, score: Any) -> MatchSetup:
        """Prior best supplied by the persistence collaborator."""
        return self._set(high_score=validate_high_score(score))

    def set_seed(self, seed: Optional[int]) -> MatchSetup:
        return self._set(seed=seed)

    def build(self) -> MatchConfig:
        return self._config

    def start_match(self, event_bus: Optional[EventBus] = None) -> Simulation:
        """Create a fresh Simulation from the current settings and start it."""
        from .orchestrator import Simulation

        sim = Simulation(self._config, event_bus=event_bus)
        sim.start()
        return sim
