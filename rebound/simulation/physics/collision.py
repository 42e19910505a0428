"""Collision detection and response.

Resolution runs in a fixed order every frame:

    1. Walls    - top/bottom reflection
    2. Paddles  - only when the ball moves toward the paddle
    3. Blocks   - active blocks, one-way per side
    4. Exits    - ball fully past the left or right edge

Each step sees the ball as left by the previous steps, so a wall bounce
and a paddle return can compound within a single frame.
"""

from __future__ import annotations

import random
from typing import Iterable, Optional

from ..core.clock import Clock
from ..core.entities import Arena, Ball, Block, Paddle, Side
from ..core.events import EventBus, EventType


# =============================================================================
# Tuning
# =============================================================================

PLAYER_POWER_THRESHOLD = 300.0   # paddle units/s needed for a power shot
PLAYER_POWER_MULT = 1.4
CPU_POWER_CHANCE = 0.08
CPU_POWER_MULT = 1.15
HIT_OFFSET_VY_FACTOR = 0.25      # vy gained per unit of normalized offset * |vx|
HIT_OFFSET_SPIN = 0.05           # spin gained per unit of normalized offset
SEPARATION = 0.5                 # gap left between ball and surface after a bounce


class CollisionResolver:
    """Resolves ball contacts against the court, paddles and blocks.

    Usage:
        resolver = CollisionResolver(bus, clock, rng)
        winner = resolver.resolve(arena, dt)
    """

    def __init__(self, event_bus: EventBus, clock: Clock, rng: Optional[random.Random] = None):
        self.event_bus = event_bus
        self.clock = clock
        self.rng = rng or random.Random()

    def resolve(self, arena: Arena, dt: float, check_exits: bool = True) -> Optional[Side]:
        """Run every collision step over all live balls.

        Returns:
            The side that won a point if a ball left the court, else None
        """
        for ball in arena.balls:
            self.resolve_walls(ball, arena)

        for ball in arena.balls:
            self.resolve_player_paddle(ball, arena.player, dt)
            self.resolve_cpu_paddle(ball, arena.cpu)

        for ball in arena.balls:
            self.resolve_blocks(ball, arena.blocks)

        if not check_exits:
            return None
        return detect_exit(arena.balls, arena.court.width)

    # =========================================================================
    # Walls
    # =========================================================================

    def resolve_walls(self, ball: Ball, arena: Arena) -> bool:
        """Reflect off the top or bottom wall. Returns True on contact."""
        r = ball.radius
        height = arena.court.height

        if ball.y - r <= 0:
            ball.pos = ball.pos.with_y(r)
            ball.velocity = ball.velocity.with_y(abs(ball.vy))
        elif ball.y + r >= height:
            ball.pos = ball.pos.with_y(height - r)
            ball.velocity = ball.velocity.with_y(-abs(ball.vy))
        else:
            return False

        self._emit(EventType.WALL_HIT, None, x=ball.x, y=ball.y)
        return True

    # =========================================================================
    # Paddles
    # =========================================================================

    def resolve_player_paddle(self, ball: Ball, paddle: Paddle, dt: float) -> bool:
        """Return a leftward ball off the player paddle."""
        if ball.vx >= 0 or ball.x - ball.radius > paddle.face_x:
            return False
        if not paddle.covers(ball.y):
            return False

        power = 1.0
        if abs(paddle.velocity(dt)) > PLAYER_POWER_THRESHOLD:
            power = PLAYER_POWER_MULT

        new_vx = abs(ball.vx) * power
        self._apply_paddle_hit(ball, paddle, new_vx, paddle.face_x + ball.radius + SEPARATION)
        self._emit(
            EventType.PADDLE_HIT, Side.PLAYER,
            power=power, x=ball.x, y=ball.y,
        )
        return True

    def resolve_cpu_paddle(self, ball: Ball, paddle: Paddle) -> bool:
        """Return a rightward ball off the CPU paddle."""
        if ball.vx <= 0 or ball.x + ball.radius < paddle.face_x:
            return False
        if not paddle.covers(ball.y):
            return False

        power = 1.0
        if self.rng.random() < CPU_POWER_CHANCE:
            power = CPU_POWER_MULT

        new_vx = -abs(ball.vx) * power
        self._apply_paddle_hit(ball, paddle, new_vx, paddle.face_x - ball.radius - SEPARATION)
        self._emit(
            EventType.PADDLE_HIT, Side.CPU,
            power=power, x=ball.x, y=ball.y,
        )
        return True

    @staticmethod
    def _apply_paddle_hit(ball: Ball, paddle: Paddle, new_vx: float, new_x: float) -> None:
        """Set outgoing velocity, add english from the hit offset, and
        move the ball flush against the paddle face."""
        hit = hit_offset(ball, paddle)
        vy = ball.vy + hit * abs(new_vx) * HIT_OFFSET_VY_FACTOR
        ball.velocity = ball.velocity.with_x(new_vx).with_y(vy)
        ball.spin += hit * HIT_OFFSET_SPIN
        ball.pos = ball.pos.with_x(new_x)

    # =========================================================================
    # Blocks
    # =========================================================================

    def resolve_blocks(self, ball: Ball, blocks: Iterable[Block]) -> bool:
        """Bounce off any active block whose direction rule matches."""
        bounced = False
        for block in blocks:
            if not block.active or not block.overlaps(ball):
                continue

            if block.bounce_on_vx_neg and ball.vx < 0:
                ball.velocity = ball.velocity.with_x(abs(ball.vx))
                ball.pos = ball.pos.with_x(block.right + ball.radius + SEPARATION)
            elif block.bounce_on_vx_pos and ball.vx > 0:
                ball.velocity = ball.velocity.with_x(-abs(ball.vx))
                ball.pos = ball.pos.with_x(block.x - ball.radius - SEPARATION)
            else:
                continue

            bounced = True
            self._emit(EventType.BLOCK_HIT, block.side, x=ball.x, y=ball.y)
        return bounced

    def _emit(self, event_type: EventType, side: Optional[Side], **data) -> None:
        self.event_bus.emit_simple(
            event_type,
            tick=self.clock.tick_count,
            time=self.clock.current_time,
            side=side,
            **data,
        )


# =============================================================================
# Helpers
# =============================================================================

def hit_offset(ball: Ball, paddle: Paddle) -> float:
    """Normalized distance of the ball from the paddle center.

    -1 at the top edge, 0 dead center, +1 at the bottom edge.
    """
    half = paddle.height / 2
    return (ball.y - paddle.center) / half


def detect_exit(balls: Iterable[Ball], width: float) -> Optional[Side]:
    """Side that wins the point if any ball has fully left the court.

    A ball past the left edge scores for the CPU and is checked first;
    a ball past the right edge scores for the player.
    """
    balls = list(balls)
    if any(b.x + b.radius < 0 for b in balls):
        return Side.CPU
    if any(b.x - b.radius > width for b in balls):
        return Side.PLAYER
    return None
