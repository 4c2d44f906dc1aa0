"""
Debuff skill module for the engine.

Defines skills that temporarily weaken the monster.
"""

from typing import Literal

from pydantic import Field

from ..character.stats import MonsterDebuffs
from .actions import SkillActions
from .base_skill import BaseSkill


class DebuffSkill(BaseSkill):
    """
    Sets a monster debuff field to an active value, then reverts it to neutral
    after `duration_ms`.
    """

    skill_type: Literal["DebuffSkill"] = "DebuffSkill"

    debuff_field: Literal["defense_reduction_fraction"] = Field(
        description="The debuff field set by the skill.",
    )
    value: float = Field(
        ge=0,
        le=1,
        description="Value of the debuff field while active.",
    )
    duration_ms: float = Field(
        gt=0,
        description="How long the debuff lasts.",
    )

    def effect(self, actions: SkillActions) -> None:
        actions.update_monster_debuffs(
            lambda debuffs: debuffs.model_copy(update={self.debuff_field: self.value})
        )
        neutral = MonsterDebuffs.model_fields[self.debuff_field].default
        actions.schedule(
            self.duration_ms,
            lambda: actions.update_monster_debuffs(
                lambda debuffs: debuffs.model_copy(update={self.debuff_field: neutral})
            ),
        )
