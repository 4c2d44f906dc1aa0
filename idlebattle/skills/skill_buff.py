"""
Buff skill module for the engine.

Defines skills that temporarily set one of the player's buff fields.
"""

from typing import Literal

from pydantic import Field

from ..character.stats import Buffs
from .actions import SkillActions
from .base_skill import BaseSkill


class BuffSkill(BaseSkill):
    """
    Sets a buff field to an active value, then reverts it to neutral after
    `duration_ms`.

    Every cast schedules its own unconditional revert. A second cast made while
    the first is still active is therefore cut short by the first revert.
    """

    skill_type: Literal["BuffSkill"] = "BuffSkill"

    buff_field: Literal["defense_bonus", "attack_interval_multiplier"] = Field(
        description="The buff field set by the skill.",
    )
    value: int | float = Field(
        description="Value of the buff field while active.",
    )
    duration_ms: float = Field(
        gt=0,
        description="How long the buff lasts.",
    )

    def effect(self, actions: SkillActions) -> None:
        actions.update_buffs(
            lambda buffs: buffs.model_copy(update={self.buff_field: self.value})
        )
        neutral = Buffs.model_fields[self.buff_field].default
        actions.schedule(
            self.duration_ms,
            lambda: actions.update_buffs(
                lambda buffs: buffs.model_copy(update={self.buff_field: neutral})
            ),
        )
