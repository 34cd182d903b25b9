"""
Bow Range Game
Level catalog, session state machine, autoplay and agent environment.
"""

from archery_game.clock import ManualClock, SystemClock
from archery_game.levels import LevelConfig, load_levels
from archery_game.session import (
    GameSession,
    LevelState,
    SessionSnapshot,
    format_accuracy,
)

__all__ = [
    "ManualClock",
    "SystemClock",
    "LevelConfig",
    "load_levels",
    "GameSession",
    "LevelState",
    "SessionSnapshot",
    "format_accuracy",
]
