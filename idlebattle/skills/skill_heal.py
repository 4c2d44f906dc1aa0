"""
Healing skill module for the engine.
"""

import math
from typing import Literal

from pydantic import Field

from .actions import SkillActions
from .base_skill import BaseSkill


class HealingSkill(BaseSkill):
    """
    Restores a fraction of the player's maximum hit points, capped at the
    maximum.
    """

    skill_type: Literal["HealingSkill"] = "HealingSkill"

    fraction: float = Field(
        gt=0,
        le=1,
        description="Fraction of the maximum hit points restored.",
    )

    def effect(self, actions: SkillActions) -> None:
        actions.update_player_stats(
            lambda player: player.healed(math.floor(player.max_hp * self.fraction))
        )
