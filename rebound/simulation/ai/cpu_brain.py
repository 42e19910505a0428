"""CPU paddle brain.

Proportional tracking: each frame the paddle closes a fraction of the gap
between its center and the most advanced ball. The fraction grows with
agility, so lower difficulties lag behind fast or curving balls. This is
deliberately not an intercept solver.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..core.court import Court
from ..core.entities import Ball, Paddle


TRACKING_GAIN = 6.0


def select_target(balls: Sequence[Ball]) -> Optional[Ball]:
    """The ball furthest toward the CPU side (largest x)."""
    if not balls:
        return None
    return max(balls, key=lambda b: b.x)


def cpu_brain(paddle: Paddle, balls: Sequence[Ball], court: Court, agility: float, dt: float) -> float:
    """Compute the CPU paddle's new top edge for this frame.

    Args:
        paddle: CPU paddle (not modified)
        balls: Live balls
        court: Court bounds used for clamping
        agility: Difficulty coefficient in (0, 1]
        dt: Frame delta in seconds

    Returns:
        New clamped `y` for the paddle
    """
    target = select_target(balls)
    target_y = target.y if target is not None else court.center_y

    move = (target_y - paddle.center) * agility * dt * TRACKING_GAIN
    return court.clamp_y(paddle.y + move, paddle.height)
