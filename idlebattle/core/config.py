"""
Configuration module for the combat engine.

Holds the tunables a host application may override when creating an engine.
"""

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    COOLDOWN_TICK_MS,
    GACHA_COST,
    MAX_SKILLS,
    SKILL_OFFER_SIZE,
    SPECIAL_STAGE_CHANCE,
)


class GameConfig(BaseModel):
    """
    Tunable parameters of a game session.

    The defaults reproduce the standard game balance; tests usually pin
    `special_stage_chance` and `seed` to get deterministic encounters.
    """

    model_config = ConfigDict(frozen=True)

    special_stage_chance: float = Field(
        default=SPECIAL_STAGE_CHANCE,
        ge=0.0,
        le=1.0,
        description="Chance that a non-boss stage becomes a treasure encounter.",
    )
    gacha_cost: int = Field(
        default=GACHA_COST,
        gt=0,
        description="Coins spent on a single gacha pull.",
    )
    max_skills: int = Field(
        default=MAX_SKILLS,
        gt=0,
        description="Maximum number of learned skills.",
    )
    skill_offer_size: int = Field(
        default=SKILL_OFFER_SIZE,
        gt=0,
        description="Number of skills offered after a kill.",
    )
    cooldown_tick_ms: int = Field(
        default=COOLDOWN_TICK_MS,
        gt=0,
        description="Period of the cooldown decay and escape countdown timers.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the engine's random generator, None for entropy.",
    )
