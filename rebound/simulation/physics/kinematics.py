"""Ball kinematics.

Integration is time-scaled so a ball covers the same path whether the
presentation layer runs at 30, 60 or 144 frames per second.
"""

from __future__ import annotations

from ..core.entities import Ball


# Spin keeps this fraction of itself every 1/60 s
SPIN_DAMPING = 0.9
SPIN_REFERENCE_FPS = 60.0


def spin_decay(dt: float) -> float:
    """Multiplier applied to spin over `dt` seconds."""
    return SPIN_DAMPING ** (dt * SPIN_REFERENCE_FPS)


def integrate_ball(ball: Ball, dt: float, now: float) -> None:
    """Advance a ball by `dt` seconds.

    Spin bends the trajectory by feeding vertical velocity, then decays.
    The trail sample is stamped with `now`, the simulation time after
    the step.
    """
    ball.velocity = ball.velocity.with_y(ball.velocity.y + ball.spin * dt)
    ball.spin *= spin_decay(dt)
    ball.pos = ball.pos + ball.velocity * dt
    ball.record_trail(now)
