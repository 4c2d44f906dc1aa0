"""
Offensive skill module for the engine.

Defines skills that deal damage: single heavy strikes and multi-hit skills
whose hits land over time.
"""

from typing import Literal

from pydantic import Field

from ..combat.damage import DamageInfo, compute_damage
from ..core.constants import SCREEN_SHAKE_MS
from .actions import SkillActions
from .base_skill import BaseSkill


class OffensiveSkill(BaseSkill):
    """
    Deals one instant hit of `multiplier` times the player attack.
    """

    skill_type: Literal["OffensiveSkill"] = "OffensiveSkill"

    multiplier: float = Field(
        gt=0,
        description="Multiplier applied to the player attack.",
    )
    is_ultimate: bool = Field(
        default=False,
        description="Whether the damage is displayed as an ultimate.",
    )
    shake_ms: int = Field(
        default=SCREEN_SHAKE_MS,
        ge=0,
        description="Duration of the screen shake triggered by the hit.",
    )

    def effect(self, actions: SkillActions) -> None:
        damage = compute_damage(
            actions.player.attack * self.multiplier,
            actions.monster.defense,
        )
        actions.update_monster_stats(lambda monster: monster.damaged(damage))
        actions.show_damage_dealt(
            DamageInfo(value=damage, is_skill=True, is_ultimate=self.is_ultimate)
        )
        actions.shake_screen(self.shake_ms)


class MultiHitSkill(BaseSkill):
    """
    Deals several hits spaced in time.

    Each hit reads the stats current when it lands, so buffs or debuffs that
    change between hits are taken into account. Hits landing on a dead monster
    do nothing.
    """

    skill_type: Literal["MultiHitSkill"] = "MultiHitSkill"

    hits: int = Field(
        gt=0,
        description="Number of hits.",
    )
    spacing_ms: float = Field(
        ge=0,
        description="Delay between two consecutive hits.",
    )
    multiplier: float = Field(
        default=1.0,
        gt=0,
        description="Multiplier applied to the player attack on each hit.",
    )

    def effect(self, actions: SkillActions) -> None:
        for i in range(self.hits):
            actions.schedule(i * self.spacing_ms, lambda: self._land_hit(actions))

    def _land_hit(self, actions: SkillActions) -> None:
        if actions.monster.is_dead():
            return
        damage = compute_damage(
            actions.player.attack * self.multiplier,
            actions.monster.defense,
        )
        actions.update_monster_stats(lambda monster: monster.damaged(damage))
        actions.show_damage_dealt(DamageInfo(value=damage, is_skill=True))
