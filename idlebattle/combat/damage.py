"""
Damage module for the engine.

Holds the damage formula used by every attack and skill, and the transient
damage record shown to the presentation layer.
"""

from pydantic import BaseModel, ConfigDict, Field


class DamageInfo(BaseModel):
    """Damage value displayed after a hit."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(
        description="Amount of damage dealt.",
    )
    is_skill: bool = Field(
        default=False,
        description="Whether the damage came from a skill.",
    )
    is_ultimate: bool = Field(
        default=False,
        description="Whether the damage came from the ultimate skill.",
    )


def compute_damage(attack: float, defense: float) -> int:
    """
    Computes the damage of a hit.

    Args:
        attack (float):
            The attacker's (possibly multiplied) attack.
        defense (float):
            The defender's effective defense.

    Returns:
        int:
            The damage dealt, never below 1.

    """
    return int(max(1, attack - defense))
