"""Core entities - Ball, Paddle, Block, and the Arena that holds them.

Entities are pure data containers. Behavior is implemented in systems.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .court import (
    BALL_RADIUS,
    BLOCK_HEIGHT,
    BLOCK_WIDTH,
    PADDLE_HEIGHT,
    PADDLE_WIDTH,
    Court,
)
from .vec2 import Vec2


# =============================================================================
# Enums
# =============================================================================

class Side(str, Enum):
    """Which side of the court an entity belongs to."""
    PLAYER = "player"   # Human, defends the left edge
    CPU = "cpu"         # Computer, defends the right edge

    @property
    def opponent(self) -> Side:
        return Side.CPU if self is Side.PLAYER else Side.PLAYER


class Direction(str, Enum):
    """Vertical move intent for the player paddle."""
    UP = "up"
    DOWN = "down"


# =============================================================================
# Ball
# =============================================================================

TRAIL_WINDOW = 0.2  # seconds of position history kept for renderers


@dataclass
class Ball:
    """A live ball.

    Attributes:
        pos: Center position
        velocity: Units per second
        spin: Decaying scalar fed into vertical velocity each tick
        radius: Collision radius
        trail: Recent (x, y, time) samples, newest last
    """
    pos: Vec2
    velocity: Vec2 = field(default_factory=Vec2.zero)
    spin: float = 0.0
    radius: float = BALL_RADIUS
    trail: deque = field(default_factory=deque)

    @property
    def x(self) -> float:
        return self.pos.x

    @property
    def y(self) -> float:
        return self.pos.y

    @property
    def vx(self) -> float:
        return self.velocity.x

    @property
    def vy(self) -> float:
        return self.velocity.y

    @property
    def speed(self) -> float:
        return self.velocity.length()

    def record_trail(self, now: float) -> None:
        """Append current position and drop samples older than the window."""
        self.trail.append((self.pos.x, self.pos.y, now))
        while self.trail and now - self.trail[0][2] >= TRAIL_WINDOW:
            self.trail.popleft()

    def __repr__(self) -> str:
        return f"Ball(pos={self.pos}, vel={self.velocity}, spin={self.spin:.3f})"


# =============================================================================
# Paddle
# =============================================================================

@dataclass
class Paddle:
    """A side's paddle.

    `y` is the top edge. `prev_y` is where the paddle was at the start of
    the current frame and is used to measure swing speed.
    """
    side: Side
    x: float
    y: float = 0.0
    height: float = PADDLE_HEIGHT
    width: float = PADDLE_WIDTH
    prev_y: float = 0.0

    @property
    def center(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def face_x(self) -> float:
        """X coordinate of the face the ball bounces off."""
        if self.side is Side.PLAYER:
            return self.x + self.width
        return self.x

    def clamp(self, court: Court) -> None:
        self.y = court.clamp_y(self.y, self.height)

    def recenter(self, court: Court) -> None:
        self.y = (court.height - self.height) / 2
        self.prev_y = self.y

    def velocity(self, dt: float) -> float:
        """Vertical speed over the current frame."""
        if dt <= 0:
            return 0.0
        return (self.y - self.prev_y) / dt

    def covers(self, y: float) -> bool:
        """True if `y` is strictly inside the paddle's vertical extent."""
        return self.y < y < self.bottom

    @classmethod
    def for_side(cls, side: Side, court: Court) -> Paddle:
        x = 0.0 if side is Side.PLAYER else court.width - PADDLE_WIDTH
        paddle = cls(side=side, x=x)
        paddle.recenter(court)
        return paddle


# =============================================================================
# Block
# =============================================================================

@dataclass
class Block:
    """Stationary one-way obstacle.

    A player block only reflects balls travelling left into it
    (`bounce_on_vx_neg`); a CPU block only reflects balls travelling right
    (`bounce_on_vx_pos`). Balls moving the other way pass through.
    """
    side: Side
    x: float
    y: float
    w: float = BLOCK_WIDTH
    h: float = BLOCK_HEIGHT
    active: bool = True

    @property
    def bounce_on_vx_neg(self) -> bool:
        return self.side is Side.PLAYER

    @property
    def bounce_on_vx_pos(self) -> bool:
        return self.side is Side.CPU

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def overlaps(self, ball: Ball) -> bool:
        """Axis-aligned overlap between the ball's bounding box and the block."""
        r = ball.radius
        hit_x = ball.x + r > self.x and ball.x - r < self.right
        hit_y = ball.y + r > self.y and ball.y - r < self.bottom
        return hit_x and hit_y


def default_blocks(court: Court) -> list[Block]:
    """The four fixed blocks: upper and lower lane on each side."""
    top, bottom = court.block_lanes()
    return [
        Block(side=Side.PLAYER, x=court.player_block_x(), y=top),
        Block(side=Side.PLAYER, x=court.player_block_x(), y=bottom),
        Block(side=Side.CPU, x=court.cpu_block_x(), y=top),
        Block(side=Side.CPU, x=court.cpu_block_x(), y=bottom),
    ]


# =============================================================================
# Arena
# =============================================================================

@dataclass
class Arena:
    """Everything on the court: paddles, blocks and live balls."""
    court: Court = field(default_factory=Court)
    player: Optional[Paddle] = None
    cpu: Optional[Paddle] = None
    blocks: list[Block] = field(default_factory=list)
    balls: list[Ball] = field(default_factory=list)

    def __post_init__(self):
        if self.player is None:
            self.player = Paddle.for_side(Side.PLAYER, self.court)
        if self.cpu is None:
            self.cpu = Paddle.for_side(Side.CPU, self.court)
        if not self.blocks:
            self.blocks = default_blocks(self.court)

    def paddle(self, side: Side) -> Paddle:
        return self.player if side is Side.PLAYER else self.cpu

    def blocks_for(self, side: Side) -> list[Block]:
        return [b for b in self.blocks if b.side is side]

    def reset_for_match(self) -> None:
        """Restore full-size paddles and all blocks."""
        for paddle in (self.player, self.cpu):
            paddle.height = PADDLE_HEIGHT
            paddle.recenter(self.court)
        for block in self.blocks:
            block.active = True
        self.balls.clear()
