"""
Combat rules module for the combat engine.

Contains the damage formula, encounter generation and reward rules.
"""

from .damage import DamageInfo, compute_damage
from .generation import (
    NextEncounter,
    choose_next_encounter,
    generate_monster,
    generate_treasure_encounter,
    is_boss_stage,
)
from .rewards import (
    GachaOutcome,
    StageReward,
    apply_stat_upgrade,
    pull_gacha,
    stage_clear_reward,
)

__all__ = [
    "DamageInfo",
    "compute_damage",
    "NextEncounter",
    "choose_next_encounter",
    "generate_monster",
    "generate_treasure_encounter",
    "is_boss_stage",
    "GachaOutcome",
    "StageReward",
    "apply_stat_upgrade",
    "pull_gacha",
    "stage_clear_reward",
]
