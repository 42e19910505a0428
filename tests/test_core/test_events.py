"""Tests for the EventBus."""

from rebound.simulation.core.entities import Side
from rebound.simulation.core.events import Event, EventBus, EventType


class TestEventBus:
    """Tests for pub/sub and history."""

    def test_subscribe_specific_type(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.PADDLE_HIT, seen.append)

        bus.emit_simple(EventType.WALL_HIT, tick=1, time=0.1)
        bus.emit_simple(EventType.PADDLE_HIT, tick=2, time=0.2, side=Side.CPU, power=1.15)

        assert len(seen) == 1
        assert seen[0].side is Side.CPU
        assert seen[0].data == {"power": 1.15}

    def test_subscribe_all(self):
        bus = EventBus()
        seen = []
        bus.subscribe_all(seen.append)
        bus.emit_simple(EventType.WALL_HIT, tick=1, time=0.1)
        bus.emit_simple(EventType.BLOCK_HIT, tick=1, time=0.1, side=Side.PLAYER)
        assert [e.type for e in seen] == [EventType.WALL_HIT, EventType.BLOCK_HIT]

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.WALL_HIT, seen.append)
        bus.unsubscribe(EventType.WALL_HIT, seen.append)
        bus.emit_simple(EventType.WALL_HIT, tick=1, time=0.1)
        assert seen == []

    def test_history_and_filter(self):
        bus = EventBus()
        bus.emit_simple(EventType.POINT_SCORED, tick=5, time=1.0, side=Side.PLAYER)
        bus.emit_simple(EventType.WALL_HIT, tick=6, time=1.1)
        assert len(bus) == 2
        assert len(bus.get_events_by_type(EventType.POINT_SCORED)) == 1

    def test_recording_disabled(self):
        bus = EventBus()
        bus.set_recording(False)
        bus.emit_simple(EventType.WALL_HIT, tick=1, time=0.1)
        assert len(bus) == 0
        assert bus  # still truthy

    def test_event_str(self):
        event = Event(EventType.POINT_SCORED, tick=3, time=1.5, side=Side.CPU, description="cpu scores")
        assert str(event) == "[1.50s] point_scored (cpu) - cpu scores"

    def test_unsubscribe_all(self):
        bus = EventBus()
        seen = []
        bus.subscribe_all(seen.append)
        bus.unsubscribe_all(seen.append)
        bus.unsubscribe_all(seen.append)  # unknown handler is ignored
        bus.emit_simple(EventType.WALL_HIT, tick=1, time=0.1)
        assert seen == []
