"""Pydantic schemas for the read-only frame snapshot.

The presentation layer renders from these after each frame. Nothing in a
snapshot aliases simulation state, so it can be held, serialized or
diffed freely.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class Position2DSchema(BaseModel):
    """2D point on the court."""

    x: float = 0.0
    y: float = 0.0


class PaddleSchema(BaseModel):
    """One side's paddle."""

    side: Literal["player", "cpu"]
    x: float
    y: float
    width: float
    height: float


class BallSchema(BaseModel):
    """A live ball."""

    position: Position2DSchema
    velocity: Position2DSchema
    spin: float = 0.0
    speed: float = 0.0
    radius: float
    trail: list[Position2DSchema] = Field(default_factory=list)


class BlockSchema(BaseModel):
    """A stationary one-way block."""

    side: Literal["player", "cpu"]
    x: float
    y: float
    w: float
    h: float
    active: bool


class EventSchema(BaseModel):
    """An entry of the frame's event feed."""

    type: str
    tick: int
    time: float
    side: Optional[str] = None
    description: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class TelemetrySchema(BaseModel):
    """Rally and speed statistics."""

    current_rally: float = 0.0
    longest_rally: float = 0.0
    current_speed: float = 0.0
    fastest_ball: float = 0.0
    points_played: int = 0


class MatchSnapshot(BaseModel):
    """Everything a renderer needs for one frame."""

    mode: Literal["survival", "timed_score"]
    difficulty: str
    theme: str
    theme_colors: list[str] = Field(default_factory=list)
    player_name: str
    phase: str
    running: bool
    paused: bool
    over: bool
    scoring_locked: bool
    court_width: float
    court_height: float
    player_paddle: PaddleSchema
    cpu_paddle: PaddleSchema
    balls: list[BallSchema] = Field(default_factory=list)
    blocks: list[BlockSchema] = Field(default_factory=list)
    lives: dict[str, int] = Field(default_factory=dict)
    scores: dict[str, int] = Field(default_factory=dict)
    time_remaining: Optional[float] = None
    high_score: int = 0
    sacrifice_options: Optional[list[str]] = None
    outcome: Optional[str] = None
    new_high_score: bool = False
    telemetry: TelemetrySchema = Field(default_factory=TelemetrySchema)
    events: list[EventSchema] = Field(default_factory=list)
