"""Tests for the per-frame Simulation driver."""

import pytest

from rebound.simulation import Direction, EventBus, GameMode, MatchConfig, MatchSetup, Simulation
from rebound.simulation.core.entities import Ball, Side
from rebound.simulation.core.events import EventType
from rebound.simulation.core.phases import MatchPhase
from rebound.simulation.core.vec2 import Vec2

FRAME = 1 / 60


class TestLifecycle:
    """Tests for starting and serving."""

    def test_start_serves_one_ball(self, survival_sim):
        assert survival_sim.phase == MatchPhase.RALLYING
        assert survival_sim.is_running
        ball, = survival_sim.arena.balls
        assert (ball.x, ball.y) == (350, 200)

        speed = abs(ball.vx)
        assert 245 <= speed <= 275
        assert abs(ball.vy) <= 260 * 0.2

    def test_start_twice_is_noop(self, survival_sim):
        served = len(survival_sim.event_bus.get_events_by_type(EventType.ROUND_SERVED))
        survival_sim.start()
        assert len(survival_sim.event_bus.get_events_by_type(EventType.ROUND_SERVED)) == served

    def test_multi_ball_serve(self):
        sim = MatchSetup(MatchConfig(seed=1)).set_multi_ball(True).start_match()
        assert [b.y for b in sim.arena.balls] == [150, 200, 250]
        assert all(b.x == 350 for b in sim.arena.balls)

    def test_same_seed_same_serve(self):
        a = MatchSetup(MatchConfig(seed=42)).start_match()
        b = MatchSetup(MatchConfig(seed=42)).start_match()
        assert a.arena.balls[0].velocity == b.arena.balls[0].velocity

    def test_serve_recenters_paddles(self, survival_sim, force_exit):
        survival_sim.point_at(0)
        survival_sim.update(FRAME)
        force_exit(survival_sim, Side.CPU)
        survival_sim.update(1.0)
        assert survival_sim.arena.player.center == pytest.approx(200)


class TestIdentityUpdates:
    """Updates that must leave the match untouched."""

    def test_not_started(self):
        sim = Simulation(MatchConfig(seed=1))
        before = sim.snapshot()
        sim.update(1.0)
        assert sim.snapshot() == before
        assert sim.phase == MatchPhase.SETUP

    def test_paused(self, survival_sim):
        assert survival_sim.toggle_pause() is True
        before = survival_sim.snapshot()
        survival_sim.update(1.0)
        assert survival_sim.snapshot() == before
        assert survival_sim.clock.current_time == 0

    def test_non_positive_dt(self, survival_sim):
        before = survival_sim.snapshot()
        survival_sim.update(0)
        survival_sim.update(-0.5)
        assert survival_sim.snapshot() == before

    def test_resume(self, survival_sim):
        survival_sim.toggle_pause()
        assert survival_sim.toggle_pause() is False
        types = [e.type for e in survival_sim.drain_events()]
        assert types[-2:] == [EventType.PAUSED, EventType.RESUMED]

        survival_sim.update(FRAME)
        assert survival_sim.clock.current_time == pytest.approx(FRAME)


class TestFrame:
    """Tests for a single frame of simulation."""

    def test_ball_integration(self, survival_sim):
        survival_sim.arena.balls = [Ball(pos=Vec2(350, 200), velocity=Vec2(260, 0))]
        survival_sim.update(1.0)

        ball = survival_sim.arena.balls[0]
        assert ball.x == pytest.approx(610)
        assert survival_sim.state.current_speed == pytest.approx(260)
        assert survival_sim.state.current_rally_time == pytest.approx(1.0)

    def test_keyboard_movement(self, survival_sim):
        survival_sim.arena.balls = []
        survival_sim.move(Direction.UP, True)
        survival_sim.update(0.1)
        assert survival_sim.arena.player.y == pytest.approx(147.5 - 32)

        survival_sim.move(Direction.UP, False)
        survival_sim.update(0.1)
        assert survival_sim.arena.player.y == pytest.approx(147.5 - 32)

    def test_keyboard_clamped(self, survival_sim):
        survival_sim.arena.balls = []
        survival_sim.move("down", True)
        survival_sim.update(2.0)
        assert survival_sim.arena.player.bottom == 400

    def test_unknown_direction_ignored(self, survival_sim):
        survival_sim.arena.balls = []
        survival_sim.move("sideways", True)
        survival_sim.update(0.1)
        assert survival_sim.arena.player.y == pytest.approx(147.5)

    def test_pointer_positions_paddle(self, survival_sim):
        survival_sim.arena.balls = []
        survival_sim.point_at(300)
        survival_sim.update(FRAME)
        paddle = survival_sim.arena.player
        assert paddle.center == pytest.approx(300)
        assert paddle.velocity(FRAME) == 0

    def test_pointer_clamped(self, survival_sim):
        survival_sim.arena.balls = []
        survival_sim.point_at(1000)
        survival_sim.update(FRAME)
        assert survival_sim.arena.player.y == pytest.approx(295)

    def test_moving_paddle_power_shot(self, survival_sim):
        survival_sim.arena.balls = [Ball(pos=Vec2(20, 200), velocity=Vec2(-260, 0))]
        survival_sim.move(Direction.DOWN, True)
        survival_sim.update(FRAME)

        assert survival_sim.arena.balls[0].vx == pytest.approx(364)

    def test_cpu_follows_ball(self, survival_sim):
        survival_sim.arena.balls = [Ball(pos=Vec2(500, 300), velocity=Vec2(0, 0))]
        survival_sim.update(FRAME)
        assert survival_sim.arena.cpu.y == pytest.approx(154.0)


class TestEventFeed:
    """Tests for the per-frame event feed."""

    def test_start_events_in_feed(self, survival_sim):
        types = [e.type for e in survival_sim.snapshot().events]
        assert "match_started" in types
        assert "round_served" in types

    def test_feed_cleared_each_frame(self, survival_sim):
        survival_sim.update(FRAME)
        types = [e.type for e in survival_sim.snapshot().events]
        assert "match_started" not in types

    def test_drain_events(self, survival_sim):
        events = survival_sim.drain_events()
        assert events[0].type == EventType.MATCH_STARTED
        assert survival_sim.drain_events() == []

    def test_shared_bus_across_matches(self):
        bus = EventBus()
        first = MatchSetup(MatchConfig(seed=1, mode=GameMode.TIMED_SCORE)).start_match(event_bus=bus)
        first.arena.balls = []
        first.update(61)
        assert first.is_over
        assert EventType.MATCH_ENDED in [e.type for e in first.drain_events()]

        second = MatchSetup(MatchConfig(seed=2)).start_match(event_bus=bus)
        second.update(FRAME)

        assert first.drain_events() == []
        assert second.drain_events() != []


class TestSnapshot:
    """Tests for the read-only frame view."""

    def test_survival_fields(self, survival_sim):
        snap = survival_sim.snapshot()
        assert snap.mode == "survival"
        assert snap.lives == {"player": 3, "cpu": 3}
        assert snap.scores == {}
        assert snap.time_remaining is None
        assert len(snap.blocks) == 4

    def test_timed_fields(self, timed_sim):
        timed_sim.update(1.0)
        snap = timed_sim.snapshot()
        assert snap.scores == {"player": 0, "cpu": 0}
        assert snap.lives == {}
        assert snap.time_remaining == pytest.approx(59.0)

    def test_sacrifice_options_exposed(self, survival_sim, force_exit):
        force_exit(survival_sim, Side.PLAYER)
        assert survival_sim.snapshot().sacrifice_options == ["blocks", "pad", "life"]

    def test_snapshot_does_not_alias(self, survival_sim):
        snap = survival_sim.snapshot()
        snap.balls[0].position.x = -999
        snap.player_paddle.y = -999
        assert survival_sim.arena.balls[0].x == 350
        assert survival_sim.arena.player.y == 147.5

    def test_outcome_after_match(self, timed_sim):
        timed_sim.arena.balls = []
        timed_sim.update(61)
        snap = timed_sim.snapshot()
        assert snap.over
        assert not snap.running
        assert snap.outcome == "draw"
        assert timed_sim.choose_sacrifice("life") is False

    def test_theme_colors_passed_through(self):
        sim = MatchSetup(MatchConfig(seed=1)).set_theme("neon").start_match()
        snap = sim.snapshot()
        assert snap.theme == "neon"
        assert snap.theme_colors == ["#071827", "#001018"]
