"""
Character stats module for the engine.

Defines the immutable stat records shared by the player and the monsters, the
buff and debuff records set by skills, and the pure projections that derive
effective stats from a base record and its modifiers.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import MIN_ATTACK_INTERVAL


class CharacterStats(BaseModel):
    """
    Stats of a combatant. Player and monster share this shape.

    Records are frozen: every change produces a new record through the helper
    methods or `model_copy`, so a reader never observes a half-updated value.
    """

    model_config = ConfigDict(frozen=True)

    hp: int = Field(
        description="Current hit points.",
    )
    max_hp: int = Field(
        gt=0,
        description="Maximum hit points.",
    )
    attack: int = Field(
        ge=0,
        description="Attack power used by the damage formula.",
    )
    defense: int = Field(
        ge=0,
        description="Flat damage reduction.",
    )
    attack_interval: float = Field(
        description="Milliseconds between automatic attacks.",
    )
    is_empowered: bool = Field(
        default=False,
        description="Whether the monster was generated empowered.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.hp < 0:
            raise ValueError("hp must be non-negative.")
        if self.hp > self.max_hp:
            raise ValueError("hp cannot exceed max_hp.")
        if self.attack_interval < MIN_ATTACK_INTERVAL:
            raise ValueError(
                f"attack_interval must be at least {MIN_ATTACK_INTERVAL} ms."
            )

    def is_alive(self) -> bool:
        return self.hp > 0

    def is_dead(self) -> bool:
        return self.hp <= 0

    def with_hp(self, hp: int) -> "CharacterStats":
        """
        Returns a copy with the hit points clamped to [0, max_hp].

        Args:
            hp (int):
                The requested hit points.

        Returns:
            CharacterStats:
                The updated record.

        """
        return self.model_copy(update={"hp": max(0, min(self.max_hp, int(hp)))})

    def damaged(self, amount: int) -> "CharacterStats":
        """Returns a copy with `amount` damage applied, floored at 0 hp."""
        return self.with_hp(self.hp - amount)

    def healed(self, amount: int) -> "CharacterStats":
        """Returns a copy with `amount` healing applied, capped at max hp."""
        return self.with_hp(self.hp + amount)


class Buffs(BaseModel):
    """Temporary modifiers applied to the player by skills."""

    model_config = ConfigDict(frozen=True)

    defense_bonus: int = Field(
        default=0,
        description="Flat defense added to the player.",
    )
    attack_interval_multiplier: float = Field(
        default=1.0,
        gt=0.0,
        description="Multiplier on the attack interval, below 1 speeds up.",
    )

    def is_neutral(self) -> bool:
        return self.defense_bonus == 0 and self.attack_interval_multiplier == 1.0


class MonsterDebuffs(BaseModel):
    """Temporary modifiers applied to the monster by skills."""

    model_config = ConfigDict(frozen=True)

    defense_reduction_fraction: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Fraction of the monster defense removed.",
    )

    def is_neutral(self) -> bool:
        return self.defense_reduction_fraction == 0.0


NEUTRAL_BUFFS = Buffs()
NEUTRAL_DEBUFFS = MonsterDebuffs()

INITIAL_PLAYER_STATS = CharacterStats(
    hp=100,
    max_hp=100,
    attack=5,
    defense=1,
    attack_interval=500,
)


def effective_player(base: CharacterStats, buffs: Buffs) -> CharacterStats:
    """
    Computes the effective player stats.

    Args:
        base (CharacterStats):
            The persistent player stats.
        buffs (Buffs):
            The currently active buffs.

    Returns:
        CharacterStats:
            The stats after buffs, with the interval kept above the floor.

    """
    return base.model_copy(
        update={
            "defense": max(0, base.defense + buffs.defense_bonus),
            "attack_interval": max(
                float(MIN_ATTACK_INTERVAL),
                base.attack_interval * buffs.attack_interval_multiplier,
            ),
        }
    )


def effective_monster(base: CharacterStats, debuffs: MonsterDebuffs) -> CharacterStats:
    """
    Computes the effective monster stats.

    Args:
        base (CharacterStats):
            The monster stats.
        debuffs (MonsterDebuffs):
            The currently active debuffs.

    Returns:
        CharacterStats:
            The stats after debuffs.

    """
    reduced = math.floor(base.defense * (1 - debuffs.defense_reduction_fraction))
    return base.model_copy(update={"defense": max(0, reduced)})
