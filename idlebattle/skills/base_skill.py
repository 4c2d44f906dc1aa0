"""
Base skill module for the engine.

Defines the immutable skill descriptor shared by every entry of the skill
catalog. Concrete skills implement `effect`, which acts on the engine only
through the bounded `SkillActions` surface.
"""

from pydantic import BaseModel, ConfigDict, Field

from .actions import SkillActions


class BaseSkill(BaseModel):
    """
    Abstract base class for all skills.

    Skill instances live in the catalog and are shared by reference: the
    player's learned skill list holds the catalog objects themselves.
    """

    model_config = ConfigDict(frozen=True)

    skill_type: str = Field(
        default="BaseSkill",
        description="Discriminator naming the concrete skill class.",
    )
    id: str = Field(
        description="Unique identifier of the skill.",
    )
    name: str = Field(
        description="Display name of the skill.",
    )
    description: str = Field(
        "",
        description="A brief description of the skill.",
    )
    cooldown: float = Field(
        ge=0,
        description="Cooldown in seconds after the skill is used.",
    )

    @property
    def colored_name(self) -> str:
        return f"[bold magenta]{self.name}[/]"

    def effect(self, actions: SkillActions) -> None:
        """
        Applies the skill.

        Args:
            actions (SkillActions):
                The action surface bound to the current encounter.

        """
        raise NotImplementedError("Subclasses must implement this method.")

    def __str__(self) -> str:
        return f"{self.name} ({self.cooldown:g}s)"
