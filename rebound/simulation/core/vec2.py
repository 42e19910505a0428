"""2D Vector implementation for simulation.

All ball positions and velocities use Vec2.
Units are court units (pixels of the reference 700x400 court).
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D vector.

    Coordinate system:
        Origin (0, 0) = Top-left corner of the court
        +X = Right (toward the CPU side)
        +Y = Down (toward the bottom wall)
    """
    x: float = 0.0
    y: float = 0.0

    # =========================================================================
    # Arithmetic Operations
    # =========================================================================

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    # =========================================================================
    # Vector Operations
    # =========================================================================

    def length(self) -> float:
        """Magnitude of vector."""
        return math.hypot(self.x, self.y)

    # =========================================================================
    # Utility
    # =========================================================================

    def with_x(self, x: float) -> Vec2:
        """Return new vector with different x."""
        return Vec2(x, self.y)

    def with_y(self, y: float) -> Vec2:
        """Return new vector with different y."""
        return Vec2(self.x, y)

    def __repr__(self) -> str:
        return f"Vec2({self.x:.2f}, {self.y:.2f})"

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f})"

    @classmethod
    def zero(cls) -> Vec2:
        """Zero vector."""
        return cls(0.0, 0.0)
