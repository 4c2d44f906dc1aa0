"""
Character module for the combat engine.

Contains the stat records and the effective stat projections.
"""

from .stats import (
    INITIAL_PLAYER_STATS,
    NEUTRAL_BUFFS,
    NEUTRAL_DEBUFFS,
    Buffs,
    CharacterStats,
    MonsterDebuffs,
    effective_monster,
    effective_player,
)

__all__ = [
    "INITIAL_PLAYER_STATS",
    "NEUTRAL_BUFFS",
    "NEUTRAL_DEBUFFS",
    "Buffs",
    "CharacterStats",
    "MonsterDebuffs",
    "effective_monster",
    "effective_player",
]
