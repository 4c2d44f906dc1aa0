"""
Display cue module for the engine.

Transient presentation state (damage numbers, animation pulses, screen shake)
that the engine exposes to the presentation layer. These values carry no
gameplay effect and clear themselves shortly after being set.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..combat.damage import DamageInfo
from ..core.constants import AnimationState


class DisplayState(BaseModel):
    """Snapshot of the transient presentation cues."""

    model_config = ConfigDict(frozen=True)

    damage_dealt: DamageInfo | None = Field(
        default=None,
        description="Damage last dealt to the monster, while it is shown.",
    )
    damage_taken: int | None = Field(
        default=None,
        description="Damage last taken by the player, while it is shown.",
    )
    screen_shake: bool = Field(
        default=False,
        description="Whether the screen is shaking.",
    )
    player_animation: AnimationState | None = Field(
        default=None,
        description="Animation currently played by the player.",
    )
    monster_animation: AnimationState | None = Field(
        default=None,
        description="Animation currently played by the monster.",
    )


# Value each cue falls back to once its duration elapses.
CUE_RESET_VALUES: dict[str, object] = {
    "damage_dealt": None,
    "damage_taken": None,
    "screen_shake": False,
    "player_animation": None,
    "monster_animation": None,
}
