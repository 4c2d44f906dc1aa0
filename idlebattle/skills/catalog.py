"""
Skill catalog for the engine.

Lists every learnable skill plus the always-available ultimate, and provides
lookup helpers.
"""

import random
from typing import Iterable

from catchery import log_warning

from ..core.constants import ULTIMATE_SCREEN_SHAKE_MS, ULTIMATE_SKILL_COOLDOWN
from .base_skill import BaseSkill
from .skill_buff import BuffSkill
from .skill_debuff import DebuffSkill
from .skill_heal import HealingSkill
from .skill_offensive import MultiHitSkill, OffensiveSkill

SMITE = OffensiveSkill(
    id="smite",
    name="Smite",
    description="Deals a heavy blow worth 5 times your attack.",
    cooldown=8,
    multiplier=5,
)

HEALING_TOUCH = HealingSkill(
    id="healing_touch",
    name="Healing Touch",
    description="Instantly restores 25% of your maximum hp.",
    cooldown=20,
    fraction=0.25,
)

STONE_SKIN = BuffSkill(
    id="stone_skin",
    name="Stone Skin",
    description="Raises your defense by 10 for 5 seconds.",
    cooldown=18,
    buff_field="defense_bonus",
    value=10,
    duration_ms=5000,
)

FRENZY = BuffSkill(
    id="frenzy",
    name="Frenzy",
    description="Doubles your attack speed for 5 seconds.",
    cooldown=18,
    buff_field="attack_interval_multiplier",
    value=0.5,
    duration_ms=5000,
)

CHAIN_LIGHTNING = MultiHitSkill(
    id="chain_lightning",
    name="Chain Lightning",
    description="Strikes the enemy with 3 weak lightning bolts.",
    cooldown=12,
    hits=3,
    spacing_ms=200,
)

ARMOR_BREAK = DebuffSkill(
    id="armor_break",
    name="Armor Break",
    description="Halves the enemy defense for 10 seconds.",
    cooldown=20,
    debuff_field="defense_reduction_fraction",
    value=0.5,
    duration_ms=10000,
)

ALL_SKILLS: list[BaseSkill] = [
    SMITE,
    HEALING_TOUCH,
    STONE_SKIN,
    FRENZY,
    CHAIN_LIGHTNING,
    ARMOR_BREAK,
]

ULTIMATE_SKILL = OffensiveSkill(
    id="ultimate",
    name="Cataclysm",
    description="Unleashes a devastating strike worth 15 times your attack.",
    cooldown=ULTIMATE_SKILL_COOLDOWN,
    multiplier=15,
    is_ultimate=True,
    shake_ms=ULTIMATE_SCREEN_SHAKE_MS,
)

_SKILLS_BY_ID: dict[str, BaseSkill] = {skill.id: skill for skill in ALL_SKILLS}


def get_skill(skill_id: str) -> BaseSkill | None:
    """
    Looks up a learnable skill by id.

    Args:
        skill_id (str):
            The skill identifier.

    Returns:
        BaseSkill | None:
            The catalog entry, or None if no skill has that id.

    """
    skill = _SKILLS_BY_ID.get(skill_id)
    if skill is None:
        log_warning(f"Unknown skill '{skill_id}'", {"skill_id": skill_id})
    return skill


def available_skills(learned: Iterable[BaseSkill]) -> list[BaseSkill]:
    """Returns the catalog skills not yet learned, in catalog order."""
    learned_ids = {skill.id for skill in learned}
    return [skill for skill in ALL_SKILLS if skill.id not in learned_ids]


def sample_skill_offer(
    learned: Iterable[BaseSkill],
    rng: random.Random,
    size: int,
) -> list[BaseSkill]:
    """
    Samples up to `size` distinct skills the player has not learned.

    Args:
        learned (Iterable[BaseSkill]):
            The player's learned skills.
        rng (random.Random):
            Random generator used for the draw.
        size (int):
            Maximum number of skills offered.

    Returns:
        list[BaseSkill]:
            The offered skills, empty when every skill is already learned.

    """
    candidates = available_skills(learned)
    return rng.sample(candidates, min(size, len(candidates)))
