"""Simulation clock, time management and deferred actions.

The clock is advanced by whatever frame delta the presentation layer
measures, so frames are not a fixed size. Deferred actions (round reset,
sacrifice timeout, match end) are scheduled against simulation time and
only fire when the clock is advanced, which means pausing freezes them too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class ScheduledTask:
    """Single-shot action due at a simulation time.

    Attributes:
        name: Label for logging and lookup
        due: Simulation time (seconds) at which the action fires
        action: Zero-argument callable
        cancelled: Set by cancel(); a cancelled task never fires
        fired: Set once the action has run
    """
    name: str
    due: float
    action: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Cancel the task. Returns False if it already fired."""
        if self.fired:
            return False
        self.cancelled = True
        return True


@dataclass
class Clock:
    """Manages simulation time.

    Attributes:
        current_time: Elapsed simulation time in seconds
        tick_count: Number of frames advanced
        last_dt: Delta of the most recent frame
    """
    current_time: float = 0.0
    tick_count: int = 0
    last_dt: float = 0.0

    # Event tracking
    _events: dict[str, float] = field(default_factory=dict)
    _tasks: list[ScheduledTask] = field(default_factory=list)

    def advance(self, dt: float) -> float:
        """Advance time by one frame of `dt` seconds.

        Returns:
            The delta applied
        """
        self.current_time += dt
        self.tick_count += 1
        self.last_dt = dt
        return dt

    # =========================================================================
    # Scheduling
    # =========================================================================

    def schedule(self, delay: float, action: Callable[[], None], name: str = "") -> ScheduledTask:
        """Schedule `action` to fire `delay` seconds from now."""
        task = ScheduledTask(name=name, due=self.current_time + delay, action=action)
        self._tasks.append(task)
        return task

    def run_due(self) -> list[ScheduledTask]:
        """Fire every pending task whose due time has passed, in due order.

        Tasks scheduled by a firing action are only considered on the next
        call.
        """
        due = sorted(
            (t for t in self._tasks if t.pending and t.due <= self.current_time),
            key=lambda t: t.due,
        )
        fired = []
        for task in due:
            if not task.pending:
                # Cancelled by an earlier action in this batch
                continue
            task.fired = True
            task.action()
            fired.append(task)
        self._tasks = [t for t in self._tasks if t.pending]
        return fired

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()

    @property
    def pending_tasks(self) -> list[ScheduledTask]:
        return [t for t in self._tasks if t.pending]

    # =========================================================================
    # Event Timing
    # =========================================================================

    def mark_event(self, name: str) -> None:
        """Mark the current time for a named event."""
        self._events[name] = self.current_time

    def time_since(self, event_name: str) -> Optional[float]:
        """Seconds since a marked event, or None if event not marked."""
        if event_name not in self._events:
            return None
        return self.current_time - self._events[event_name]

    def __repr__(self) -> str:
        return f"Clock(time={self.current_time:.3f}s, tick={self.tick_count})"
