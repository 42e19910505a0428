"""Phase State Machine - Explicit match phase transitions.

All phase changes go through this state machine to ensure valid
transitions and enable testing.

Match Lifecycle:
    SETUP → ROUND_RESET → RALLYING

    From RALLYING:
        → POINT_RESOLVING (a ball left the court)
        → MATCH_OVER (timed-score countdown expired)

    From POINT_RESOLVING:
        → ROUND_RESET (point settled, serve again)
        → MATCH_OVER (lives exhausted, or countdown expired meanwhile)

    ROUND_RESET → RALLYING happens in the same call; serving has no
    waiting state of its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Set


class MatchPhase(str, Enum):
    """Current phase of the match."""
    SETUP = "setup"                      # Configured, not started
    ROUND_RESET = "round_reset"          # Serving fresh balls
    RALLYING = "rallying"                # Normal simulation
    POINT_RESOLVING = "point_resolving"  # Ball exited; scoring locked
    MATCH_OVER = "match_over"            # Terminal


VALID_TRANSITIONS: Dict[MatchPhase, Set[MatchPhase]] = {
    MatchPhase.SETUP: {MatchPhase.ROUND_RESET},
    MatchPhase.ROUND_RESET: {MatchPhase.RALLYING},
    MatchPhase.RALLYING: {
        MatchPhase.POINT_RESOLVING,
        MatchPhase.MATCH_OVER,
    },
    MatchPhase.POINT_RESOLVING: {
        MatchPhase.ROUND_RESET,
        MatchPhase.MATCH_OVER,
    },
    MatchPhase.MATCH_OVER: set(),
}


@dataclass
class PhaseTransition:
    """Record of a phase transition."""
    from_phase: MatchPhase
    to_phase: MatchPhase
    reason: str
    tick: int
    time: float


TransitionCallback = Callable[[PhaseTransition], None]


class PhaseStateMachine:
    """Manages match phase transitions with validation.

    Usage:
        fsm = PhaseStateMachine()
        fsm.transition_to(MatchPhase.ROUND_RESET, reason="match start")
        fsm.transition_to(MatchPhase.RALLYING, reason="served")
    """

    def __init__(self, initial_phase: MatchPhase = MatchPhase.SETUP):
        self._phase = initial_phase
        self._history: list[PhaseTransition] = []
        self._callbacks: list[TransitionCallback] = []

    @property
    def phase(self) -> MatchPhase:
        """Current phase."""
        return self._phase

    @property
    def history(self) -> list[PhaseTransition]:
        """History of phase transitions."""
        return self._history.copy()

    def can_transition_to(self, target: MatchPhase) -> bool:
        """Check if transition to target phase is valid."""
        return target in VALID_TRANSITIONS.get(self._phase, set())

    def transition_to(
        self,
        target: MatchPhase,
        reason: str = "",
        tick: int = 0,
        time: float = 0.0,
    ) -> None:
        """Transition to a new phase.

        Raises:
            InvalidPhaseTransition: If transition is not valid
        """
        if not self.can_transition_to(target):
            raise InvalidPhaseTransition(
                f"Cannot transition from {self._phase.value} to {target.value}. "
                f"Valid targets: {[p.value for p in VALID_TRANSITIONS.get(self._phase, set())]}"
            )

        transition = PhaseTransition(
            from_phase=self._phase,
            to_phase=target,
            reason=reason,
            tick=tick,
            time=time,
        )

        self._phase = target
        self._history.append(transition)

        for callback in self._callbacks:
            callback(transition)

    def on_transition(self, callback: TransitionCallback) -> None:
        """Register a callback for phase transitions."""
        self._callbacks.append(callback)

    @property
    def is_terminal(self) -> bool:
        return self._phase == MatchPhase.MATCH_OVER


class InvalidPhaseTransition(Exception):
    """Raised when an invalid phase transition is attempted."""
    pass
