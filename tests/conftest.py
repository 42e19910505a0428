"""Shared pytest fixtures for Rebound tests."""

import pytest

from rebound.simulation.config import GameMode, MatchConfig, MatchSetup
from rebound.simulation.core.clock import Clock
from rebound.simulation.core.entities import Arena, Ball, Side
from rebound.simulation.core.events import EventBus
from rebound.simulation.core.vec2 import Vec2
from rebound.simulation.orchestrator import Simulation


FRAME = 1 / 60


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def arena() -> Arena:
    """Default 700x400 arena with recentered paddles and no balls."""
    return Arena()


# =============================================================================
# Simulation Fixtures
# =============================================================================


@pytest.fixture
def survival_sim() -> Simulation:
    """Started survival match, 3 lives, seeded."""
    return MatchSetup(MatchConfig(seed=7)).start_match()


@pytest.fixture
def timed_sim() -> Simulation:
    """Started 60-second timed-score match, seeded."""
    setup = MatchSetup(MatchConfig(seed=7)).set_mode(GameMode.TIMED_SCORE).set_match_duration(60)
    return setup.start_match()


@pytest.fixture
def force_exit():
    """Put a single ball just past `loser`'s edge and run one frame.

    The ball is placed high on the court, clear of the paddle and the
    blocks, so the only thing that can happen to it is leaving.
    """
    def _force_exit(sim: Simulation, loser: Side) -> None:
        width = sim.arena.court.width
        if loser is Side.PLAYER:
            ball = Ball(pos=Vec2(-20, 30), velocity=Vec2(-300, 0))
        else:
            ball = Ball(pos=Vec2(width + 20, 30), velocity=Vec2(300, 0))
        sim.arena.balls = [ball]
        sim.update(FRAME)

    return _force_exit
