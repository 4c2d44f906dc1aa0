"""
Skills module for the combat engine.

This module contains the skill descriptors, the concrete skill effects and the
skill catalog, including the ultimate skill.
"""

from .actions import SkillActions
from .base_skill import BaseSkill
from .catalog import (
    ALL_SKILLS,
    ULTIMATE_SKILL,
    available_skills,
    get_skill,
    sample_skill_offer,
)
from .skill_buff import BuffSkill
from .skill_debuff import DebuffSkill
from .skill_heal import HealingSkill
from .skill_offensive import MultiHitSkill, OffensiveSkill

__all__ = [
    "SkillActions",
    "BaseSkill",
    "ALL_SKILLS",
    "ULTIMATE_SKILL",
    "available_skills",
    "get_skill",
    "sample_skill_offer",
    "BuffSkill",
    "DebuffSkill",
    "HealingSkill",
    "MultiHitSkill",
    "OffensiveSkill",
]
