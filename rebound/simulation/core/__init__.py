"""Core layer - foundational types and utilities."""

from .vec2 import Vec2
from .court import (
    COURT_WIDTH,
    COURT_HEIGHT,
    PADDLE_WIDTH,
    PADDLE_HEIGHT,
    BALL_RADIUS,
    Court,
)
from .entities import Arena, Ball, Block, Direction, Paddle, Side
from .clock import Clock, ScheduledTask
from .events import Event, EventType, EventBus
from .phases import InvalidPhaseTransition, MatchPhase, PhaseStateMachine

__all__ = [
    "Vec2",
    "COURT_WIDTH",
    "COURT_HEIGHT",
    "PADDLE_WIDTH",
    "PADDLE_HEIGHT",
    "BALL_RADIUS",
    "Court",
    "Arena",
    "Ball",
    "Block",
    "Direction",
    "Paddle",
    "Side",
    "Clock",
    "ScheduledTask",
    "Event",
    "EventType",
    "EventBus",
    "InvalidPhaseTransition",
    "MatchPhase",
    "PhaseStateMachine",
]
