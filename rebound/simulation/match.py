"""Match state and scoring rules.

The state machine owns everything that happens between a ball leaving the
court and the next serve: awarding the point, the survival-mode sacrifice
offer, life deduction, the deferred round reset, and the end of the match.
Mode-specific rules are isolated here; the driver only reports exits and
advances the countdown.

Point flow (survival):
    exit → POINT_RESOLVING
        player scored            → CPU loses a life
        CPU scored, offer open   → SACRIFICE_OFFERED, 3.5s to choose
        CPU scored, no offer     → player loses a life
    → 0.9s later ROUND_RESET → RALLYING
    → or 1.1s later MATCH_OVER when a side has no lives left

Point flow (timed score):
    exit → POINT_RESOLVING → winner's score +1 → 0.9s later serve again
    countdown reaching zero ends the match at any phase
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from .config import GameMode, MatchConfig
from .core.clock import Clock, ScheduledTask
from .core.entities import Arena, Ball, Side
from .core.events import EventBus, EventType
from .core.phases import MatchPhase, PhaseStateMachine

logger = logging.getLogger(__name__)


# =============================================================================
# Timing
# =============================================================================

ROUND_RESET_DELAY = 0.9     # seconds between a point and the next serve
MATCH_END_DELAY = 1.1       # seconds between the last life lost and match end
SACRIFICE_TIMEOUT = 3.5     # seconds the player has to pick a sacrifice
PAD_SACRIFICE_FACTOR = 0.5


class SacrificeOption(str, Enum):
    """What the player can give up instead of (or as) a lost life."""
    BLOCKS = "blocks"   # Deactivate the player's blocks for the rest of the match
    PAD = "pad"         # Halve the player's paddle
    LIFE = "life"       # Simply lose the life


class MatchOutcome(str, Enum):
    """Result from the human player's point of view."""
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


# =============================================================================
# State
# =============================================================================

@dataclass
class MatchState:
    """Mutable scoring and telemetry state for one match.

    Attributes:
        mode: Survival or timed score
        lives: Remaining lives per side (survival)
        scores: Points per side (timed score)
        time_remaining: Countdown in seconds (timed score)
        scoring_locked: True from a ball exit until the next serve
        player_sacrificed_blocks: Blocks sacrifice used this match
        player_sacrificed_pad: Paddle sacrifice used this match
        pending_sacrifice: Options currently offered, None when no offer is open
        current_rally_time: Seconds since the current serve
        longest_rally: Longest rally seen this match
        fastest_ball: Highest ball speed seen this match
        current_speed: Fastest live ball on the latest frame
        points_played: Exits that were scored
        high_score: Prior best supplied at match start
        new_high_score: Set when a timed-score match beats high_score
        outcome: Final result, None until the match ends
    """
    mode: GameMode = GameMode.SURVIVAL
    lives: dict[Side, int] = field(default_factory=dict)
    scores: dict[Side, int] = field(default_factory=dict)
    time_remaining: float = 0.0
    scoring_locked: bool = False
    player_sacrificed_blocks: bool = False
    player_sacrificed_pad: bool = False
    pending_sacrifice: Optional[list[SacrificeOption]] = None
    current_rally_time: float = 0.0
    longest_rally: float = 0.0
    fastest_ball: float = 0.0
    current_speed: float = 0.0
    points_played: int = 0
    high_score: int = 0
    new_high_score: bool = False
    outcome: Optional[MatchOutcome] = None

    @classmethod
    def from_config(cls, config: MatchConfig) -> MatchState:
        return cls(
            mode=config.mode,
            lives={Side.PLAYER: config.lives, Side.CPU: config.lives},
            scores={Side.PLAYER: 0, Side.CPU: 0},
            time_remaining=config.match_duration if config.mode == GameMode.TIMED_SCORE else 0.0,
            high_score=config.high_score,
        )

    @property
    def sacrifices_available(self) -> list[SacrificeOption]:
        options = []
        if not self.player_sacrificed_blocks:
            options.append(SacrificeOption.BLOCKS)
        if not self.player_sacrificed_pad:
            options.append(SacrificeOption.PAD)
        return options

    @property
    def eliminated(self) -> Optional[Side]:
        """First side with no lives left (survival only)."""
        if self.mode != GameMode.SURVIVAL:
            return None
        for side in (Side.PLAYER, Side.CPU):
            if self.lives.get(side, 0) <= 0:
                return side
        return None

    def record_frame(self, balls: Sequence[Ball], dt: float) -> None:
        """Update rally and speed telemetry after a frame."""
        if not self.scoring_locked:
            self.current_rally_time += dt
            self.longest_rally = max(self.longest_rally, self.current_rally_time)

        self.current_speed = max((b.speed for b in balls), default=0.0)
        self.fastest_ball = max(self.fastest_ball, self.current_speed)


# =============================================================================
# State machine
# =============================================================================

class MatchStateMachine:
    """Applies scoring rules and owns the match's deferred actions.

    Usage:
        machine = MatchStateMachine(config, arena, clock, bus, serve=driver.serve)
        machine.start()
        machine.on_exit(Side.CPU)        # from collision resolution
        machine.choose_sacrifice("pad")  # from the presentation layer
    """

    def __init__(
        self,
        config: MatchConfig,
        arena: Arena,
        clock: Clock,
        event_bus: EventBus,
        serve: Callable[[], None],
    ):
        self.config = config
        self.arena = arena
        self.clock = clock
        self.event_bus = event_bus
        self.state = MatchState.from_config(config)
        self.phases = PhaseStateMachine()
        self._serve = serve
        self._sacrifice_timeout: Optional[ScheduledTask] = None

        self.phases.on_transition(
            lambda t: self._emit(
                EventType.PHASE_CHANGE,
                description=f"{t.from_phase.value} -> {t.to_phase.value} ({t.reason})",
                from_phase=t.from_phase.value,
                to_phase=t.to_phase.value,
            )
        )

    @property
    def phase(self) -> MatchPhase:
        return self.phases.phase

    @property
    def is_over(self) -> bool:
        return self.phases.is_terminal

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Reset the arena and serve the first round."""
        self.arena.reset_for_match()
        self._emit(
            EventType.MATCH_STARTED,
            description=f"{self.config.mode.value} on {self.config.difficulty.value}",
            mode=self.config.mode.value,
            difficulty=self.config.difficulty.value,
            lives=self.config.lives,
            duration=self.config.match_duration,
            multi_ball=self.config.multi_ball,
        )
        logger.info(
            "Match started: mode=%s difficulty=%s lives=%d duration=%.0fs multi_ball=%s",
            self.config.mode.value, self.config.difficulty.value,
            self.config.lives, self.config.match_duration, self.config.multi_ball,
        )
        self.reset_round(reason="match start")

    def reset_round(self, reason: str = "point settled") -> None:
        """Serve fresh balls and unlock scoring."""
        if self.is_over:
            return

        self.phases.transition_to(
            MatchPhase.ROUND_RESET, reason=reason,
            tick=self.clock.tick_count, time=self.clock.current_time,
        )
        self._serve()
        self.clock.mark_event("serve")
        self.state.scoring_locked = False
        self.state.current_rally_time = 0.0
        self.phases.transition_to(
            MatchPhase.RALLYING, reason="served",
            tick=self.clock.tick_count, time=self.clock.current_time,
        )
        self._emit(EventType.ROUND_SERVED, balls=len(self.arena.balls))

    def advance_countdown(self, dt: float) -> bool:
        """Run the timed-score countdown. Returns True if the match ended."""
        if self.state.mode != GameMode.TIMED_SCORE or self.is_over:
            return False

        self.state.time_remaining -= dt
        if self.state.time_remaining <= 0:
            self.state.time_remaining = 0.0
            self.end_match(reason="time expired")
            return True
        return False

    def end_match(self, reason: str = "") -> None:
        """Freeze the match and announce the outcome."""
        if self.is_over:
            return

        self.clock.cancel_all()
        self._sacrifice_timeout = None
        self.state.pending_sacrifice = None
        self.state.outcome = self._decide_outcome()

        if self.state.mode == GameMode.TIMED_SCORE:
            score = self.state.scores[Side.PLAYER]
            self.state.new_high_score = (
                self.state.outcome == MatchOutcome.WIN and score > self.state.high_score
            )
            self._emit(
                EventType.HIGH_SCORE_CANDIDATE,
                side=Side.PLAYER,
                description=f"score {score} (best {self.state.high_score})",
                score=score,
                previous=self.state.high_score,
                is_new=self.state.new_high_score,
            )

        self.phases.transition_to(
            MatchPhase.MATCH_OVER, reason=reason,
            tick=self.clock.tick_count, time=self.clock.current_time,
        )
        self._emit(
            EventType.MATCH_ENDED,
            description=f"{self.state.outcome.value} ({reason})",
            outcome=self.state.outcome.value,
            lives=self._by_side(self.state.lives),
            scores=self._by_side(self.state.scores),
            longest_rally=self.state.longest_rally,
            fastest_ball=self.state.fastest_ball,
        )
        logger.info("Match over: %s (%s)", self.state.outcome.value, reason)

    def _decide_outcome(self) -> MatchOutcome:
        if self.state.mode == GameMode.TIMED_SCORE:
            mine = self.state.scores[Side.PLAYER]
            theirs = self.state.scores[Side.CPU]
            if mine > theirs:
                return MatchOutcome.WIN
            if theirs > mine:
                return MatchOutcome.LOSS
            return MatchOutcome.DRAW
        if self.state.lives[Side.PLAYER] > 0:
            return MatchOutcome.WIN
        return MatchOutcome.LOSS

    # =========================================================================
    # Scoring
    # =========================================================================

    def on_exit(self, winner: Side) -> bool:
        """A ball left the court. Returns False if scoring is locked."""
        if self.state.scoring_locked or self.phase != MatchPhase.RALLYING:
            return False

        self.state.scoring_locked = True
        self.state.points_played += 1
        self.phases.transition_to(
            MatchPhase.POINT_RESOLVING, reason=f"{winner.value} scored",
            tick=self.clock.tick_count, time=self.clock.current_time,
        )
        self._emit(EventType.POINT_SCORED, side=winner, description=f"{winner.value} scores")
        logger.debug(
            "Point to %s at %.2fs after %.2fs of play",
            winner.value, self.clock.current_time, self.clock.time_since("serve") or 0.0,
        )

        if self.state.mode == GameMode.TIMED_SCORE:
            self.state.scores[winner] += 1
            self._schedule_reset()
            return True

        if winner is Side.PLAYER:
            self.commit_loss(winner.opponent, SacrificeOption.LIFE)
        elif self.state.lives[Side.PLAYER] > 1 and self.state.sacrifices_available:
            self._offer_sacrifice()
        else:
            self.commit_loss(Side.PLAYER, SacrificeOption.LIFE)
        return True

    def commit_loss(self, side: Side, option: SacrificeOption) -> None:
        """Apply what `side` gives up for the point, then schedule what's next."""
        if option is SacrificeOption.LIFE:
            self.state.lives[side] -= 1
            self._emit(
                EventType.LIFE_LOST, side=side,
                description=f"{side.value} has {self.state.lives[side]} left",
                lives_remaining=self.state.lives[side],
            )
        elif option is SacrificeOption.BLOCKS:
            for block in self.arena.blocks_for(Side.PLAYER):
                block.active = False
            self.state.player_sacrificed_blocks = True
        elif option is SacrificeOption.PAD:
            paddle = self.arena.player
            paddle.height *= PAD_SACRIFICE_FACTOR
            paddle.clamp(self.arena.court)
            self.state.player_sacrificed_pad = True

        if option is not SacrificeOption.LIFE:
            self._emit(
                EventType.SACRIFICE_MADE, side=side,
                description=f"sacrificed {option.value}",
                option=option.value,
            )

        if self.state.eliminated is not None:
            self.clock.schedule(
                MATCH_END_DELAY,
                lambda: self.end_match(reason=f"{self.state.eliminated.value} out of lives"),
                name="match_end",
            )
        else:
            self._schedule_reset()

    def _schedule_reset(self) -> None:
        self.clock.schedule(ROUND_RESET_DELAY, self.reset_round, name="round_reset")

    # =========================================================================
    # Sacrifice
    # =========================================================================

    def _offer_sacrifice(self) -> None:
        options = self.state.sacrifices_available + [SacrificeOption.LIFE]
        self.state.pending_sacrifice = options
        self._sacrifice_timeout = self.clock.schedule(
            SACRIFICE_TIMEOUT, self._on_sacrifice_timeout, name="sacrifice_timeout",
        )
        self._emit(
            EventType.SACRIFICE_OFFERED, side=Side.PLAYER,
            description=", ".join(o.value for o in options),
            options=[o.value for o in options],
            timeout=SACRIFICE_TIMEOUT,
        )

    def _on_sacrifice_timeout(self) -> None:
        logger.debug("Sacrifice timed out, taking the life")
        self._sacrifice_timeout = None
        self.state.pending_sacrifice = None
        self.commit_loss(Side.PLAYER, SacrificeOption.LIFE)

    def choose_sacrifice(self, option: Any) -> bool:
        """Resolve an open sacrifice offer.

        Returns False (and changes nothing) when no offer is open or the
        option was not offered.
        """
        offered = self.state.pending_sacrifice
        if not offered:
            return False
        try:
            choice = SacrificeOption(option)
        except ValueError:
            logger.debug("Ignoring unknown sacrifice option %r", option)
            return False
        if choice not in offered:
            logger.debug("Ignoring sacrifice %s, not offered", choice.value)
            return False

        if self._sacrifice_timeout is not None:
            self._sacrifice_timeout.cancel()
            self._sacrifice_timeout = None
        self.state.pending_sacrifice = None
        self.commit_loss(Side.PLAYER, choice)
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _by_side(values: dict[Side, int]) -> dict[str, int]:
        return {side.value: value for side, value in values.items()}

    def _emit(self, event_type: EventType, side: Optional[Side] = None, description: str = "", **data) -> None:
        self.event_bus.emit_simple(
            event_type,
            tick=self.clock.tick_count,
            time=self.clock.current_time,
            side=side,
            description=description,
            **data,
        )
