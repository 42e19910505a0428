"""Simulation - real-time paddle-and-block match engine.

Built around:
- A single court coordinate system (origin top-left, +Y down)
- A fixed collision order resolved once per frame
- An explicit phase state machine for the match lifecycle
- Events for everything a renderer or sound layer reacts to
"""

from .config import (
    DIFFICULTY_PRESETS,
    THEMES,
    Difficulty,
    DifficultyPreset,
    GameMode,
    MatchConfig,
    MatchSetup,
    Theme,
)
from .core import Direction, EventBus, EventType, MatchPhase, Side
from .match import MatchOutcome, MatchState, MatchStateMachine, SacrificeOption
from .orchestrator import Simulation
from .snapshot import MatchSnapshot

__all__ = [
    "DIFFICULTY_PRESETS",
    "THEMES",
    "Difficulty",
    "DifficultyPreset",
    "GameMode",
    "MatchConfig",
    "MatchSetup",
    "Theme",
    "Direction",
    "EventBus",
    "EventType",
    "MatchPhase",
    "Side",
    "MatchOutcome",
    "MatchState",
    "MatchStateMachine",
    "SacrificeOption",
    "Simulation",
    "MatchSnapshot",
]
