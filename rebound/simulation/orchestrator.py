"""Orchestrator - Per-frame simulation driver.

The driver owns the arena, the clock and the match state machine, and is
called by the presentation layer once per animation frame.

Frame order:
    1. Timed-score countdown
    2. Player paddle input
    3. CPU paddle brain
    4. Ball integration
    5. Collision resolution (walls, paddles, blocks, exits)
    6. Telemetry
    7. Deferred actions that came due (round reset, sacrifice timeout,
       match end)

Usage:
    sim = MatchSetup().set_difficulty("hard").start_match()
    while not sim.is_over:
        sim.move(Direction.UP, pressed)
        sim.update(frame_dt)
        render(sim.snapshot())
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from .ai.cpu_brain import cpu_brain
from .config import GameMode, MatchConfig
from .core.clock import Clock
from .core.court import PLAYER_PADDLE_SPEED
from .core.entities import Arena, Ball, Direction, Side
from .core.events import Event, EventBus, EventType
from .core.phases import MatchPhase
from .core.vec2 import Vec2
from .match import MatchState, MatchStateMachine
from .physics.collision import CollisionResolver
from .physics.kinematics import integrate_ball
from .snapshot import (
    BallSchema,
    BlockSchema,
    EventSchema,
    MatchSnapshot,
    PaddleSchema,
    Position2DSchema,
    TelemetrySchema,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Serve tuning
# =============================================================================

SERVE_SPEED_JITTER = 15.0       # +/- units/s added to the base speed
SERVE_ANGLE_FACTOR = 0.2        # max |vy| as a fraction of the base speed
MULTI_BALL_SPACING = 50.0       # vertical gap between served balls


class Simulation:
    """A single match, from serve to final outcome.

    A fresh Simulation is built for every match; nothing is shared between
    matches except an optional caller-supplied EventBus.
    """

    def __init__(self, config: Optional[MatchConfig] = None, event_bus: Optional[EventBus] = None):
        self.config = config or MatchConfig()
        self.clock = Clock()
        self.event_bus = event_bus or EventBus()
        self.arena = Arena()
        self.rng = random.Random(self.config.seed)

        self.collisions = CollisionResolver(self.event_bus, self.clock, self.rng)
        self.match = MatchStateMachine(
            self.config, self.arena, self.clock, self.event_bus, serve=self.serve,
        )

        self.running = False
        self.paused = False

        # Input intents, applied on the next frame
        self._held: set[Direction] = set()
        self._pointer_y: Optional[float] = None

        # Events since the start of the last frame that advanced the match
        self._feed: list[Event] = []
        self.event_bus.subscribe_all(self._collect)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> MatchState:
        return self.match.state

    @property
    def phase(self) -> MatchPhase:
        return self.match.phase

    @property
    def is_over(self) -> bool:
        return self.match.is_over

    @property
    def is_running(self) -> bool:
        return self.running and not self.is_over

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Begin the match. Calling it twice has no effect."""
        if self.running or self.is_over:
            return
        self.running = True
        self.paused = False
        self.match.start()

    def serve(self) -> None:
        """Recenter paddles and put fresh balls in play."""
        court = self.arena.court
        self.arena.player.recenter(court)
        self.arena.cpu.recenter(court)

        base = self.config.preset.ball_base
        count = self.config.ball_count
        balls = []
        for i in range(count):
            direction = -1 if self.rng.random() < 0.5 else 1
            vx = direction * (base + self.rng.uniform(-SERVE_SPEED_JITTER, SERVE_SPEED_JITTER))
            vy = self.rng.uniform(-1.0, 1.0) * base * SERVE_ANGLE_FACTOR
            y_offset = (i - (count - 1) / 2) * MULTI_BALL_SPACING
            balls.append(Ball(pos=Vec2(court.center_x, court.center_y + y_offset), velocity=Vec2(vx, vy)))

        self.arena.balls = balls
        logger.debug("Served %d ball(s) at %.2fs", count, self.clock.current_time)

    # =========================================================================
    # Frame update
    # =========================================================================

    def update(self, dt: float) -> None:
        """Advance the match by `dt` seconds.

        Does nothing when the match is not running, is paused or over, or
        when `dt` is not positive.
        """
        if not self.running or self.paused or self.is_over:
            return
        if dt <= 0:
            return

        self._feed.clear()
        self.clock.advance(dt)

        if self.match.advance_countdown(dt):
            return

        self._update_player(dt)
        self._update_cpu(dt)

        for ball in self.arena.balls:
            integrate_ball(ball, dt, self.clock.current_time)

        check_exits = not self.state.scoring_locked
        winner = self.collisions.resolve(self.arena, dt, check_exits=check_exits)
        if winner is not None:
            self.match.on_exit(winner)

        self.state.record_frame(self.arena.balls, dt)
        self.clock.run_due()

    def _update_player(self, dt: float) -> None:
        paddle = self.arena.player
        court = self.arena.court

        # Pointer drags are positional and do not count toward swing speed
        if self._pointer_y is not None:
            paddle.y = court.clamp_y(self._pointer_y - paddle.height / 2, paddle.height)
            self._pointer_y = None

        paddle.prev_y = paddle.y
        step = PLAYER_PADDLE_SPEED * dt
        if Direction.UP in self._held:
            paddle.y -= step
        if Direction.DOWN in self._held:
            paddle.y += step
        paddle.clamp(court)

    def _update_cpu(self, dt: float) -> None:
        paddle = self.arena.cpu
        paddle.prev_y = paddle.y
        paddle.y = cpu_brain(
            paddle, self.arena.balls, self.arena.court, self.config.preset.cpu_agility, dt,
        )

    # =========================================================================
    # Input channels
    # =========================================================================

    def move(self, direction: Direction, active: bool) -> None:
        """Press or release a paddle move key. Unknown directions are ignored."""
        try:
            direction = Direction(direction)
        except ValueError:
            logger.debug("Ignoring unknown move direction %r", direction)
            return
        if active:
            self._held.add(direction)
        else:
            self._held.discard(direction)

    def point_at(self, y: float) -> None:
        """Center the player paddle on an absolute pointer position next frame."""
        self._pointer_y = float(y)

    def toggle_pause(self) -> bool:
        """Pause or resume. Returns the new paused flag."""
        if not self.running or self.is_over:
            return self.paused
        self.paused = not self.paused
        self.event_bus.emit_simple(
            EventType.PAUSED if self.paused else EventType.RESUMED,
            tick=self.clock.tick_count,
            time=self.clock.current_time,
        )
        return self.paused

    def choose_sacrifice(self, option: Any) -> bool:
        """Answer an open sacrifice offer. See MatchStateMachine.choose_sacrifice."""
        if self.is_over:
            return False
        return self.match.choose_sacrifice(option)

    # =========================================================================
    # Queries
    # =========================================================================

    def _collect(self, event: Event) -> None:
        self._feed.append(event)
        if event.type == EventType.MATCH_ENDED:
            # A caller-supplied bus may outlive this match
            self.event_bus.unsubscribe_all(self._collect)

    def drain_events(self) -> list[Event]:
        """Return and clear the event feed."""
        events = list(self._feed)
        self._feed.clear()
        return events

    def snapshot(self) -> MatchSnapshot:
        """Read-only view of the current frame."""
        state = self.state
        arena = self.arena
        return MatchSnapshot(
            mode=self.config.mode.value,
            difficulty=self.config.difficulty.value,
            theme=self.config.theme.value,
            theme_colors=list(self.config.theme_colors),
            player_name=self.config.player_name,
            phase=self.phase.value,
            running=self.is_running,
            paused=self.paused,
            over=self.is_over,
            scoring_locked=state.scoring_locked,
            court_width=arena.court.width,
            court_height=arena.court.height,
            player_paddle=_paddle_schema(arena, Side.PLAYER),
            cpu_paddle=_paddle_schema(arena, Side.CPU),
            balls=[_ball_schema(b) for b in arena.balls],
            blocks=[
                BlockSchema(side=b.side.value, x=b.x, y=b.y, w=b.w, h=b.h, active=b.active)
                for b in arena.blocks
            ],
            lives={s.value: n for s, n in state.lives.items()} if state.mode == GameMode.SURVIVAL else {},
            scores={s.value: n for s, n in state.scores.items()} if state.mode == GameMode.TIMED_SCORE else {},
            time_remaining=state.time_remaining if state.mode == GameMode.TIMED_SCORE else None,
            high_score=state.high_score,
            sacrifice_options=[o.value for o in state.pending_sacrifice] if state.pending_sacrifice else None,
            outcome=state.outcome.value if state.outcome else None,
            new_high_score=state.new_high_score,
            telemetry=TelemetrySchema(
                current_rally=state.current_rally_time,
                longest_rally=state.longest_rally,
                current_speed=state.current_speed,
                fastest_ball=state.fastest_ball,
                points_played=state.points_played,
            ),
            events=[_event_schema(e) for e in self._feed],
        )

    def __repr__(self) -> str:
        return f"Simulation(phase={self.phase.value}, {self.clock!r})"


# =============================================================================
# Schema helpers
# =============================================================================

def _paddle_schema(arena: Arena, side: Side) -> PaddleSchema:
    paddle = arena.paddle(side)
    return PaddleSchema(side=side.value, x=paddle.x, y=paddle.y, width=paddle.width, height=paddle.height)


def _ball_schema(ball: Ball) -> BallSchema:
    return BallSchema(
        position=Position2DSchema(x=ball.x, y=ball.y),
        velocity=Position2DSchema(x=ball.vx, y=ball.vy),
        spin=ball.spin,
        speed=ball.speed,
        radius=ball.radius,
        trail=[Position2DSchema(x=x, y=y) for x, y, _ in ball.trail],
    )


def _event_schema(event: Event) -> EventSchema:
    return EventSchema(
        type=event.type.value,
        tick=event.tick,
        time=event.time,
        side=event.side.value if event.side else None,
        description=event.description,
        data=event.data,
    )
