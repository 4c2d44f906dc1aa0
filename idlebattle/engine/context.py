"""
Engine context module.

The explicit, engine-owned record of everything a game session mutates, and
the frozen snapshot handed to the presentation layer.
"""

import math
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from ..character.stats import (
    INITIAL_PLAYER_STATS,
    NEUTRAL_BUFFS,
    NEUTRAL_DEBUFFS,
    Buffs,
    CharacterStats,
    MonsterDebuffs,
)
from ..combat.generation import generate_monster
from ..core.constants import GameState
from ..effects.display import DisplayState
from ..skills.base_skill import BaseSkill


@dataclass
class EngineContext:
    """
    Mutable state of a game session.

    Every field holding a record (stats, buffs, debuffs, display) is replaced
    wholesale on change; the records themselves are immutable.
    """

    player: CharacterStats = INITIAL_PLAYER_STATS
    monster: CharacterStats = field(default_factory=lambda: generate_monster(1, 0))
    buffs: Buffs = NEUTRAL_BUFFS
    monster_debuffs: MonsterDebuffs = NEUTRAL_DEBUFFS

    # Stage progression.
    stage: int = 1
    is_boss_stage: bool = False
    is_special_stage: bool = False
    # Whether the last cleared encounter was a treasure detour.
    cleared_was_treasure: bool = False
    # Seconds left before the treasure goblin escapes.
    special_stage_timer: float = 0.0

    # Skills.
    player_skills: list[BaseSkill] = field(default_factory=list)
    skill_cooldowns: dict[str, float] = field(default_factory=dict)
    ultimate_cooldown: float = 0.0
    skill_choices: list[BaseSkill] = field(default_factory=list)
    show_skill_choice: bool = False
    is_replacing_skill: bool = False
    skill_to_learn: BaseSkill | None = None

    # Economy.
    coins: int = 0
    upgrade_points: int = 0
    last_reward: int = 0
    last_coin_reward: int = 0
    gacha_result: str | None = None

    # Attacks.
    is_auto_attack: bool = True
    last_attack_time: float = -math.inf

    # Bumped on every new encounter, invalidates stale skill surfaces.
    encounter_id: int = 0

    display: DisplayState = field(default_factory=DisplayState)


class EngineSnapshot(BaseModel):
    """Read-only view of the engine state at one instant."""

    model_config = ConfigDict(frozen=True)

    state: GameState = Field(description="The current game state.")
    time_ms: float = Field(description="Engine clock time.")
    player: CharacterStats = Field(description="Effective player stats.")
    monster: CharacterStats = Field(description="Effective monster stats.")
    buffs: Buffs = Field(description="Active player buffs.")
    monster_debuffs: MonsterDebuffs = Field(description="Active monster debuffs.")
    stage: int = Field(description="Current stage number.")
    is_boss_stage: bool = Field(description="Whether the encounter is a boss.")
    is_special_stage: bool = Field(description="Whether the encounter is a treasure.")
    special_stage_timer: float = Field(description="Seconds before the goblin escapes.")
    coins: int = Field(description="Coin balance.")
    upgrade_points: int = Field(description="Unspent upgrade points.")
    skill_cooldowns: dict[str, float] = Field(description="Remaining cooldowns.")
    ultimate_cooldown: float = Field(description="Remaining ultimate cooldown.")
    player_skills: list[str] = Field(description="Ids of the learned skills.")
    skill_choices: list[str] = Field(description="Ids of the offered skills.")
    show_skill_choice: bool = Field(description="Whether a skill offer is open.")
    is_replacing_skill: bool = Field(description="Whether a replacement is pending.")
    last_reward: int = Field(description="Upgrade points of the last clear.")
    last_coin_reward: int = Field(description="Coins of the last clear.")
    gacha_result: str | None = Field(description="Text of the last gacha pull.")
    is_auto_attack: bool = Field(description="Whether auto attack is enabled.")
    display: DisplayState = Field(description="Transient presentation cues.")
