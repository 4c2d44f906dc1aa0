"""
Core system module for the combat engine.

This module contains the game constants and enumerations, the session
configuration, logging setup and console display utilities.
"""

from .config import GameConfig
from .constants import (
    MAX_SKILLS,
    ULTIMATE_SKILL_COOLDOWN,
    AnimationState,
    CueTarget,
    GachaTier,
    GameState,
    TimerGroup,
    UpgradeStat,
)
from .logging import get_logger, setup_logging
from .utils import cprint, crule, make_bar

__all__ = [
    # Import from config.py
    "GameConfig",
    # Import from constants.py
    "MAX_SKILLS",
    "ULTIMATE_SKILL_COOLDOWN",
    "AnimationState",
    "CueTarget",
    "GachaTier",
    "GameState",
    "TimerGroup",
    "UpgradeStat",
    # Import from logging.py
    "get_logger",
    "setup_logging",
    # Import from utils.py
    "cprint",
    "crule",
    "make_bar",
]
