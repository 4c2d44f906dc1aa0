"""
Engine module for the combat engine.

Contains the virtual-clock scheduler, the session context and the game state
machine exposed to the presentation layer.
"""

from .context import EngineContext, EngineSnapshot
from .game_engine import EncounterActions, GameEngine
from .scheduler import Scheduler, TimerHandle

__all__ = [
    "EngineContext",
    "EngineSnapshot",
    "EncounterActions",
    "GameEngine",
    "Scheduler",
    "TimerHandle",
]
