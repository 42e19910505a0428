"""Physics layer - ball integration and collision resolution."""

from .kinematics import integrate_ball, spin_decay
from .collision import CollisionResolver, detect_exit, hit_offset

__all__ = [
    "integrate_ball",
    "spin_decay",
    "CollisionResolver",
    "detect_exit",
    "hit_offset",
]
