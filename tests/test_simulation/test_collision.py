"""Tests for collision resolution."""

import pytest

from rebound.simulation.core.entities import Ball, Side
from rebound.simulation.core.events import EventType
from rebound.simulation.core.vec2 import Vec2
from rebound.simulation.physics.collision import (
    CollisionResolver,
    detect_exit,
    hit_offset,
)

FRAME = 1 / 60


class FixedRng:
    """Stands in for random.Random with a constant draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def resolver(bus, clock):
    return CollisionResolver(bus, clock, FixedRng(0.99))


class TestWalls:
    """Tests for top and bottom wall reflection."""

    def test_top_wall(self, resolver, arena):
        ball = Ball(pos=Vec2(350, 3), velocity=Vec2(200, -50))
        assert resolver.resolve_walls(ball, arena)
        assert ball.y == 7
        assert ball.vy == 50

    def test_bottom_wall(self, resolver, arena):
        ball = Ball(pos=Vec2(350, 397), velocity=Vec2(200, 50))
        assert resolver.resolve_walls(ball, arena)
        assert ball.y == 393
        assert ball.vy == -50

    def test_no_contact(self, resolver, arena, bus):
        ball = Ball(pos=Vec2(350, 200), velocity=Vec2(200, 50))
        assert not resolver.resolve_walls(ball, arena)
        assert bus.get_events_by_type(EventType.WALL_HIT) == []


class TestPlayerPaddle:
    """Tests for returns off the player paddle."""

    def test_center_hit(self, resolver, arena, bus):
        ball = Ball(pos=Vec2(12, 200), velocity=Vec2(-260, 0))
        assert resolver.resolve_player_paddle(ball, arena.player, FRAME)

        assert ball.vx == 260
        assert ball.vy == 0
        assert ball.x == pytest.approx(17.5)
        hits = bus.get_events_by_type(EventType.PADDLE_HIT)
        assert hits[0].side is Side.PLAYER
        assert hits[0].data["power"] == 1.0

    def test_power_shot(self, resolver, arena, bus):
        arena.player.prev_y = arena.player.y - 10  # 600 units/s swing
        ball = Ball(pos=Vec2(12, 200), velocity=Vec2(-260, 0))
        resolver.resolve_player_paddle(ball, arena.player, FRAME)

        assert ball.vx == pytest.approx(364)
        assert bus.history[-1].data["power"] == 1.4

    def test_slow_swing_is_not_power(self, resolver, arena):
        arena.player.prev_y = arena.player.y - 4  # 240 units/s
        ball = Ball(pos=Vec2(12, 200), velocity=Vec2(-260, 0))
        resolver.resolve_player_paddle(ball, arena.player, FRAME)
        assert ball.vx == pytest.approx(260)

    def test_offset_adds_english(self, resolver, arena):
        ball = Ball(pos=Vec2(12, 226.25), velocity=Vec2(-260, 0))
        assert hit_offset(ball, arena.player) == pytest.approx(0.5)

        resolver.resolve_player_paddle(ball, arena.player, FRAME)
        assert ball.vy == pytest.approx(32.5)
        assert ball.spin == pytest.approx(0.025)

    def test_ball_moving_away_is_ignored(self, resolver, arena):
        ball = Ball(pos=Vec2(12, 200), velocity=Vec2(260, 0))
        assert not resolver.resolve_player_paddle(ball, arena.player, FRAME)
        assert ball.vx == 260

    def test_miss_outside_extent(self, resolver, arena):
        ball = Ball(pos=Vec2(12, 30), velocity=Vec2(-260, 0))
        assert not resolver.resolve_player_paddle(ball, arena.player, FRAME)
        assert ball.vx == -260


class TestCpuPaddle:
    """Tests for returns off the CPU paddle."""

    def test_center_hit(self, resolver, arena):
        ball = Ball(pos=Vec2(688, 200), velocity=Vec2(260, 0))
        assert resolver.resolve_cpu_paddle(ball, arena.cpu)
        assert ball.vx == -260
        assert ball.x == pytest.approx(682.5)

    def test_random_power_shot(self, bus, clock, arena):
        resolver = CollisionResolver(bus, clock, FixedRng(0.0))
        ball = Ball(pos=Vec2(688, 200), velocity=Vec2(260, 0))
        resolver.resolve_cpu_paddle(ball, arena.cpu)
        assert ball.vx == pytest.approx(-299)
        assert bus.history[-1].data["power"] == 1.15

    def test_ball_moving_away_is_ignored(self, resolver, arena):
        ball = Ball(pos=Vec2(688, 200), velocity=Vec2(-260, 0))
        assert not resolver.resolve_cpu_paddle(ball, arena.cpu)


class TestBlocks:
    """Tests for one-way blocks."""

    def test_player_block_reflects_leftward_ball(self, resolver, arena, bus):
        ball = Ball(pos=Vec2(103, 80), velocity=Vec2(-200, 0))
        assert resolver.resolve_blocks(ball, arena.blocks)
        assert ball.vx == 200
        assert ball.x == pytest.approx(107.5)
        assert bus.history[-1].side is Side.PLAYER

    def test_player_block_passes_rightward_ball(self, resolver, arena):
        ball = Ball(pos=Vec2(103, 80), velocity=Vec2(200, 0))
        assert not resolver.resolve_blocks(ball, arena.blocks)
        assert ball.vx == 200
        assert ball.x == 103

    def test_cpu_block_reflects_rightward_ball(self, resolver, arena):
        ball = Ball(pos=Vec2(597, 80), velocity=Vec2(200, 0))
        assert resolver.resolve_blocks(ball, arena.blocks)
        assert ball.vx == -200
        assert ball.x == pytest.approx(592.5)

    def test_inactive_block_is_ignored(self, resolver, arena):
        for block in arena.blocks_for(Side.PLAYER):
            block.active = False
        ball = Ball(pos=Vec2(103, 80), velocity=Vec2(-200, 0))
        assert not resolver.resolve_blocks(ball, arena.blocks)
        assert ball.vx == -200


class TestResolveOrder:
    """Tests for the full per-frame resolution pass."""

    def test_wall_then_paddle_compound(self, resolver, arena, bus):
        arena.player.y = 0
        arena.player.prev_y = 0
        ball = Ball(pos=Vec2(12, 5), velocity=Vec2(-260, -40))
        arena.balls = [ball]

        assert resolver.resolve(arena, FRAME) is None

        assert ball.vx == 260
        assert ball.vy == pytest.approx(-16.333, abs=1e-3)
        types = [e.type for e in bus.history]
        assert types == [EventType.WALL_HIT, EventType.PADDLE_HIT]

    def test_exit_suppressed_when_locked(self, resolver, arena):
        arena.balls = [Ball(pos=Vec2(-20, 30), velocity=Vec2(-200, 0))]
        assert resolver.resolve(arena, FRAME, check_exits=False) is None
        assert resolver.resolve(arena, FRAME) is Side.CPU


class TestDetectExit:
    """Tests for out-of-bounds detection."""

    def test_left_exit_scores_for_cpu(self):
        assert detect_exit([Ball(pos=Vec2(-8, 200))], 700) is Side.CPU

    def test_right_exit_scores_for_player(self):
        assert detect_exit([Ball(pos=Vec2(708, 200))], 700) is Side.PLAYER

    def test_touching_edge_is_still_in(self):
        assert detect_exit([Ball(pos=Vec2(-7, 200)), Ball(pos=Vec2(707, 200))], 700) is None

    def test_left_checked_first(self):
        balls = [Ball(pos=Vec2(708, 100)), Ball(pos=Vec2(-8, 200))]
        assert detect_exit(balls, 700) is Side.CPU
