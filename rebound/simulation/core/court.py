"""Court geometry and coordinate system.

Single coordinate system used throughout the simulation.
All measurements in court units.
"""

from __future__ import annotations

from dataclasses import dataclass


# =============================================================================
# Court Dimensions
# =============================================================================

COURT_WIDTH = 700.0
COURT_HEIGHT = 400.0

# Paddles
PADDLE_WIDTH = 10.0
PADDLE_BASE_HEIGHT = 70.0
PADDLE_HEIGHT_MULT = 1.5
PADDLE_HEIGHT = PADDLE_BASE_HEIGHT * PADDLE_HEIGHT_MULT   # 105
PLAYER_PADDLE_SPEED = 320.0   # units/second while a move key is held

# Ball
BALL_RADIUS = 7.0

# Blocks (two per side, guarding the top and bottom lanes)
BLOCK_WIDTH = 10.0
BLOCK_HEIGHT = (((100 * 2) / 3) * 3) / 4   # 50
BLOCK_OFFSET = 80.0       # Distance from the paddle face
BLOCK_EDGE_GAP = 60.0     # Distance from the top/bottom wall

# Coordinate system:
#   Origin (0, 0) = Top-left corner
#   +X = Right, player defends x=0, CPU defends x=COURT_WIDTH
#   +Y = Down


@dataclass(frozen=True)
class Court:
    """Fixed rectangular playfield.

    Attributes:
        width: Horizontal extent; balls leaving past either edge score
        height: Vertical extent; balls bounce off the top and bottom walls
    """
    width: float = COURT_WIDTH
    height: float = COURT_HEIGHT

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def center_y(self) -> float:
        return self.height / 2

    def clamp_y(self, y: float, extent: float = 0.0) -> float:
        """Clamp a top edge so an object of `extent` height stays on court."""
        return max(0.0, min(self.height - extent, y))

    def player_block_x(self) -> float:
        """Left edge of the player-side blocks."""
        return PADDLE_WIDTH + BLOCK_OFFSET

    def cpu_block_x(self) -> float:
        """Left edge of the CPU-side blocks."""
        return self.width - PADDLE_WIDTH - BLOCK_OFFSET - BLOCK_WIDTH

    def block_lanes(self) -> tuple[float, float]:
        """Top edges of the upper and lower block lanes."""
        return (BLOCK_EDGE_GAP, self.height - BLOCK_EDGE_GAP - BLOCK_HEIGHT)
