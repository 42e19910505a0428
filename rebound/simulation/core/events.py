"""Event system for simulation state changes.

Events are emitted by systems and can be subscribed to by other systems,
logging infrastructure, or the presentation layer (audio, particles,
banners).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .entities import Side


class EventType(str, Enum):
    """Types of events that can occur during a match."""

    # =========================================================================
    # Match Lifecycle
    # =========================================================================
    MATCH_STARTED = "match_started"
    ROUND_SERVED = "round_served"
    POINT_SCORED = "point_scored"
    LIFE_LOST = "life_lost"
    MATCH_ENDED = "match_ended"
    HIGH_SCORE_CANDIDATE = "high_score_candidate"

    # =========================================================================
    # Contacts
    # =========================================================================
    WALL_HIT = "wall_hit"
    PADDLE_HIT = "paddle_hit"
    BLOCK_HIT = "block_hit"

    # =========================================================================
    # Sacrifice
    # =========================================================================
    SACRIFICE_OFFERED = "sacrifice_offered"
    SACRIFICE_MADE = "sacrifice_made"

    # =========================================================================
    # Phase / System
    # =========================================================================
    PAUSED = "paused"
    RESUMED = "resumed"
    PHASE_CHANGE = "phase_change"


@dataclass
class Event:
    """An event that occurred during simulation.

    Attributes:
        type: The type of event
        tick: Frame on which the event occurred
        time: Simulation time in seconds
        side: Side the event concerns (hitter, scorer, loser...), if any
        data: Additional event-specific data
        description: Human-readable description
    """
    type: EventType
    tick: int
    time: float
    side: Optional[Side] = None
    data: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def __str__(self) -> str:
        text = f"[{self.time:.2f}s] {self.type.value}"
        if self.side is not None:
            text += f" ({self.side.value})"
        if self.description:
            text += f" - {self.description}"
        return text


EventHandler = Callable[[Event], None]


class EventBus:
    """Pub/sub event bus shared by the simulation and its observers.

    Typed handlers run before catch-all handlers, in subscription order.
    Every emitted event is also kept in `history` while recording is on.

    Usage:
        bus = EventBus()
        bus.subscribe(EventType.PADDLE_HIT, play_hit_sound)
        bus.subscribe_all(match_log.on_event)
        bus.emit_simple(EventType.WALL_HIT, tick=3, time=0.05)
    """

    def __init__(self) -> None:
        self._by_type: dict[EventType, list[EventHandler]] = defaultdict(list)
        self._catch_all: list[EventHandler] = []
        self._history: list[Event] = []
        self._recording = True

    # =========================================================================
    # Subscription
    # =========================================================================

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._by_type[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        self._catch_all.append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Remove a typed handler. Unknown handlers are ignored."""
        handlers = self._by_type.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a catch-all handler. Unknown handlers are ignored."""
        if handler in self._catch_all:
            self._catch_all.remove(handler)

    # =========================================================================
    # Emission
    # =========================================================================

    def emit(self, event: Event) -> None:
        if self._recording:
            self._history.append(event)

        # Copy so a handler may unsubscribe itself mid-dispatch
        for handler in list(self._by_type.get(event.type, ())) + list(self._catch_all):
            handler(event)

    def emit_simple(
        self,
        event_type: EventType,
        tick: int,
        time: float,
        side: Optional[Side] = None,
        description: str = "",
        **data: Any,
    ) -> Event:
        """Build an Event from keyword data, emit it and return it."""
        event = Event(event_type, tick, time, side=side, data=data, description=description)
        self.emit(event)
        return event

    # =========================================================================
    # History
    # =========================================================================

    @property
    def history(self) -> list[Event]:
        return self._history

    def set_recording(self, enabled: bool) -> None:
        """Turn history recording on or off. Handlers still run either way."""
        self._recording = enabled

    def get_events_by_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self._history if e.type == event_type]

    def __len__(self) -> int:
        return len(self._history)

    def __bool__(self) -> bool:
        # Always truthy, even with an empty history
        return True
