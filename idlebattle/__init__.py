"""
Idle battle engine.

A turn-paced incremental combat engine: a player character fights generated
monsters stage after stage, earning upgrade points and coins, learning skills
and facing periodic boss and treasure encounters. The package is an in-process
library driven by a presentation layer through `GameEngine`.
"""

from .core.config import GameConfig
from .core.constants import GameState, UpgradeStat
from .engine.game_engine import GameEngine

__all__ = [
    "GameConfig",
    "GameEngine",
    "GameState",
    "UpgradeStat",
]
