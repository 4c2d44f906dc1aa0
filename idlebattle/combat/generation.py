"""
Encounter generation module for the engine.

Generates the monsters faced on each stage and decides which kind of
encounter comes next: normal, boss or treasure.
"""

import math
import random

from pydantic import BaseModel, ConfigDict, Field

from ..character.stats import CharacterStats
from ..core.constants import (
    BOSS_ATTACK_MULTIPLIER,
    BOSS_DEFENSE_MULTIPLIER,
    BOSS_HP_MULTIPLIER,
    BOSS_STAGE_PERIOD,
    DEFENSE_RAMP_STAGE,
    EMPOWERED_MULTIPLIER,
    MAX_SKILLS,
    MONSTER_ATTACK_INTERVAL,
    MONSTER_BASE_ATTACK,
    MONSTER_BASE_DEFENSE,
    MONSTER_BASE_HP,
    SPECIAL_STAGE_CHANCE,
    STAGE_SCALING,
    TREASURE_DEFENSE,
    TREASURE_ESCAPE_MS,
    TREASURE_HP,
)


class NextEncounter(BaseModel):
    """Outcome of the next-encounter roll."""

    model_config = ConfigDict(frozen=True)

    stage: int = Field(
        description="Stage number of the next encounter.",
    )
    is_boss: bool = Field(
        default=False,
        description="Whether the next encounter is a boss.",
    )
    is_special: bool = Field(
        default=False,
        description="Whether the next encounter is a treasure encounter.",
    )


def is_boss_stage(stage: int) -> bool:
    """Every fifth stage is a boss stage."""
    return stage > 0 and stage % BOSS_STAGE_PERIOD == 0


def stage_multiplier(stage: int) -> float:
    return 1 + (stage - 1) * STAGE_SCALING


def late_defense_bonus(stage: int) -> int:
    """
    Returns the extra defense monsters receive in the late game.

    Args:
        stage (int):
            The stage number.

    Returns:
        int:
            floor((stage - 9) ^ 1.5) from stage 10 on, 0 before.

    """
    if stage < DEFENSE_RAMP_STAGE:
        return 0
    return math.floor(math.pow(stage - (DEFENSE_RAMP_STAGE - 1), 1.5))


def generate_monster(
    stage: int,
    player_skill_count: int,
    max_skills: int = MAX_SKILLS,
) -> CharacterStats:
    """
    Generates the monster for a stage.

    Args:
        stage (int):
            The stage number.
        player_skill_count (int):
            Number of skills the player has learned. A player with a full skill
            list faces empowered monsters.
        max_skills (int):
            The skill cap.

    Returns:
        CharacterStats:
            The freshly spawned monster, at full health.

    """
    is_boss = is_boss_stage(stage)
    multiplier = stage_multiplier(stage)
    is_empowered = player_skill_count == max_skills
    empowered = EMPOWERED_MULTIPLIER if is_empowered else 1

    hp = math.floor(
        MONSTER_BASE_HP
        * multiplier
        * (BOSS_HP_MULTIPLIER if is_boss else 1)
        * empowered
    )
    attack = math.floor(
        MONSTER_BASE_ATTACK
        * multiplier
        * (BOSS_ATTACK_MULTIPLIER if is_boss else 1)
        * empowered
    )
    defense = math.floor(
        MONSTER_BASE_DEFENSE
        * multiplier
        * (BOSS_DEFENSE_MULTIPLIER if is_boss else 1)
        * empowered
    )
    defense += late_defense_bonus(stage)

    return CharacterStats(
        hp=hp,
        max_hp=hp,
        attack=attack,
        defense=defense,
        attack_interval=MONSTER_ATTACK_INTERVAL,
        is_empowered=is_empowered,
    )


def generate_treasure_encounter() -> CharacterStats:
    """
    Generates the treasure goblin.

    The goblin never attacks; its attack interval is the time before it
    escapes.
    """
    return CharacterStats(
        hp=TREASURE_HP,
        max_hp=TREASURE_HP,
        attack=0,
        defense=TREASURE_DEFENSE,
        attack_interval=TREASURE_ESCAPE_MS,
    )


def choose_next_encounter(
    cleared_stage: int,
    cleared_was_treasure: bool,
    rng: random.Random,
    special_chance: float = SPECIAL_STAGE_CHANCE,
) -> NextEncounter:
    """
    Decides the encounter that follows a cleared one.

    A treasure encounter is a detour: clearing it does not consume a stage
    number. Boss stages are never replaced by treasure encounters.

    Args:
        cleared_stage (int):
            The stage number of the encounter just cleared.
        cleared_was_treasure (bool):
            Whether the cleared encounter was a treasure encounter.
        rng (random.Random):
            Random generator used for the treasure roll.
        special_chance (float):
            Probability of a treasure encounter on a non-boss stage.

    Returns:
        NextEncounter:
            The next stage number and encounter kind.

    """
    next_stage = cleared_stage if cleared_was_treasure else cleared_stage + 1
    is_boss = is_boss_stage(next_stage)
    is_special = not is_boss and rng.random() < special_chance
    return NextEncounter(stage=next_stage, is_boss=is_boss, is_special=is_special)
