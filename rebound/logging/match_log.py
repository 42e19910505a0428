"""In-memory match log for accumulating events."""

from dataclasses import dataclass, field
from typing import Optional

from rebound.simulation.core.events import Event, EventBus, EventType
from rebound.simulation.core.entities import Side


# Contact events are frequent and only counted, not listed
_COUNTED_ONLY = {EventType.WALL_HIT, EventType.PADDLE_HIT, EventType.BLOCK_HIT, EventType.PHASE_CHANGE}


@dataclass
class LogEntry:
    """Single entry in the match log."""

    time: float
    event_type: str   # EventType value
    side: Optional[str]
    description: str


@dataclass
class SideStats:
    """Accumulated statistics for one side."""

    paddle_hits: int = 0
    power_hits: int = 0
    block_hits: int = 0
    points_won: int = 0
    lives_lost: int = 0
    sacrifices: list[str] = field(default_factory=list)

    @property
    def power_hit_rate(self) -> float:
        if self.paddle_hits == 0:
            return 0.0
        return self.power_hits / self.paddle_hits


class MatchLog:
    """
    In-memory accumulator for match events.

    Subscribes to an EventBus and keeps the notable events as entries,
    plus per-side counters for contacts and points.
    """

    def __init__(self, player_name: str = "Player", cpu_name: str = "CPU") -> None:
        self.player_name = player_name
        self.cpu_name = cpu_name
        self.entries: list[LogEntry] = []
        self.stats: dict[Side, SideStats] = {Side.PLAYER: SideStats(), Side.CPU: SideStats()}
        self.wall_hits = 0
        self.outcome: Optional[str] = None
        self.longest_rally = 0.0
        self.fastest_ball = 0.0
        self.final_lives: dict[str, int] = {}
        self.final_scores: dict[str, int] = {}

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe_all(self.on_event)

    def name_for(self, side: Optional[Side]) -> str:
        if side is Side.PLAYER:
            return self.player_name
        if side is Side.CPU:
            return self.cpu_name
        return ""

    def on_event(self, event: Event) -> None:
        """Record one event."""
        if event.type == EventType.WALL_HIT:
            self.wall_hits += 1
        elif event.type == EventType.PADDLE_HIT:
            stats = self.stats[event.side]
            stats.paddle_hits += 1
            if event.data.get("power", 1.0) > 1.0:
                stats.power_hits += 1
        elif event.type == EventType.BLOCK_HIT:
            self.stats[event.side].block_hits += 1
        elif event.type == EventType.POINT_SCORED:
            self.stats[event.side].points_won += 1
        elif event.type == EventType.LIFE_LOST:
            self.stats[event.side].lives_lost += 1
        elif event.type == EventType.SACRIFICE_MADE:
            self.stats[event.side].sacrifices.append(event.data.get("option", ""))
        elif event.type == EventType.MATCH_ENDED:
            self.outcome = event.data.get("outcome")
            self.longest_rally = event.data.get("longest_rally", 0.0)
            self.fastest_ball = event.data.get("fastest_ball", 0.0)
            self.final_lives = dict(event.data.get("lives", {}))
            self.final_scores = dict(event.data.get("scores", {}))

        if event.type in _COUNTED_ONLY:
            return

        self.entries.append(LogEntry(
            time=event.time,
            event_type=event.type.value,
            side=event.side.value if event.side else None,
            description=self._describe(event),
        ))

    def _describe(self, event: Event) -> str:
        name = self.name_for(event.side)
        if event.type == EventType.POINT_SCORED:
            return f"{name} scores!"
        if event.type == EventType.LIFE_LOST:
            return f"{name} lost a life ({event.data.get('lives_remaining')} left)"
        if event.type == EventType.SACRIFICE_MADE:
            option = event.data.get("option")
            if option == "blocks":
                return f"{name} sacrificed blocks"
            return f"{name} sacrificed paddle length"
        return event.description

    @property
    def points(self) -> list[LogEntry]:
        return [e for e in self.entries if e.event_type == EventType.POINT_SCORED.value]

    def format(self, last_n: Optional[int] = None) -> str:
        """Readable log, one line per entry."""
        entries = self.entries[-last_n:] if last_n else self.entries
        return "\n".join(f"[{e.time:6.2f}s] {e.description or e.event_type}" for e in entries)
