"""
Event system module for the engine.

Defines the events the engine publishes to its presentation layer and the
synchronous bus used to deliver them.
"""

from enum import Enum
from typing import Callable

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from ..combat.damage import DamageInfo
from ..core.constants import AnimationState, CueTarget, GachaTier, GameState


class EventType(Enum):
    """Enumeration of available event types."""

    DAMAGE_DEALT = "damage_dealt"  # The player damaged the monster
    DAMAGE_TAKEN = "damage_taken"  # The monster damaged the player
    ANIMATION = "animation"  # A combatant starts an animation pulse
    SCREEN_SHAKE = "screen_shake"  # A heavy hit shakes the screen
    STATE_CHANGED = "state_changed"  # The game state changed
    STAGE_CLEARED = "stage_cleared"  # The monster was killed
    ESCAPE = "escape"  # The treasure goblin escaped
    GACHA = "gacha"  # A gacha pull was resolved
    SKILL_USED = "skill_used"  # A skill or the ultimate was activated


class EngineEvent(BaseModel):
    """Base class for all engine events."""

    model_config = ConfigDict(frozen=True)

    event_type: EventType = Field(
        description="The type of the event.",
    )
    time_ms: float = Field(
        default=0.0,
        description="Engine clock time at which the event happened.",
    )


class DamageDealtEvent(EngineEvent):
    """Event data for damage dealt to the monster."""

    event_type: EventType = Field(default=EventType.DAMAGE_DEALT)
    damage: DamageInfo = Field(description="The damage dealt.")

    def __str__(self) -> str:
        kind = "ultimate" if self.damage.is_ultimate else "skill" if self.damage.is_skill else "attack"
        return f"DamageDealtEvent({self.damage.value}, {kind})"


class DamageTakenEvent(EngineEvent):
    """Event data for damage taken by the player."""

    event_type: EventType = Field(default=EventType.DAMAGE_TAKEN)
    value: int = Field(description="Amount of damage taken.")

    def __str__(self) -> str:
        return f"DamageTakenEvent({self.value})"


class AnimationEvent(EngineEvent):
    """Event data for an animation pulse."""

    event_type: EventType = Field(default=EventType.ANIMATION)
    target: CueTarget = Field(description="The animated combatant.")
    animation: AnimationState = Field(description="The animation played.")
    duration_ms: int = Field(description="How long the pulse lasts.")

    def __str__(self) -> str:
        return f"AnimationEvent({self.target}, {self.animation})"


class ScreenShakeEvent(EngineEvent):
    """Event data for a screen shake pulse."""

    event_type: EventType = Field(default=EventType.SCREEN_SHAKE)
    duration_ms: int = Field(description="How long the shake lasts.")


class StateChangedEvent(EngineEvent):
    """Event data for a game state transition."""

    event_type: EventType = Field(default=EventType.STATE_CHANGED)
    previous: GameState = Field(description="The state that was left.")
    current: GameState = Field(description="The state that was entered.")

    def __str__(self) -> str:
        return f"StateChangedEvent({self.previous} -> {self.current})"


class StageClearedEvent(EngineEvent):
    """Event data for a killed monster."""

    event_type: EventType = Field(default=EventType.STAGE_CLEARED)
    stage: int = Field(description="The stage number that was cleared.")
    points: int = Field(description="Upgrade points granted.")
    coins: int = Field(description="Coins granted.")
    offers_skill: bool = Field(description="Whether a skill offer was opened.")

    def __str__(self) -> str:
        return (
            f"StageClearedEvent(stage={self.stage}, points={self.points}, "
            f"coins={self.coins})"
        )


class EscapeEvent(EngineEvent):
    """Event data for an escaped treasure goblin."""

    event_type: EventType = Field(default=EventType.ESCAPE)
    stage: int = Field(description="The stage number of the encounter.")


class GachaEvent(EngineEvent):
    """Event data for a resolved gacha pull."""

    event_type: EventType = Field(default=EventType.GACHA)
    tier: GachaTier = Field(description="The reward band drawn.")
    message: str = Field(description="Description of the reward.")


class SkillUsedEvent(EngineEvent):
    """Event data for an activated skill."""

    event_type: EventType = Field(default=EventType.SKILL_USED)
    skill_id: str = Field(description="Id of the skill used.")
    is_ultimate: bool = Field(default=False, description="Whether it was the ultimate.")


EventCallback = Callable[[EngineEvent], None]


class EventBus:
    """
    Delivers engine events to subscribers, synchronously and in subscription
    order.
    """

    def __init__(self) -> None:
        self._subscribers: list[EventCallback] = []

    def subscribe(self, callback: EventCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: EventCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, event: EngineEvent) -> None:
        """
        Delivers an event to every subscriber.

        A failing subscriber is logged and skipped, it never interrupts the
        engine tick that produced the event.

        Args:
            event (EngineEvent):
                The event to deliver.

        """
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                log_warning(
                    f"Event subscriber failed on {event.event_type.value}",
                    {"event": str(event), "error": str(e)},
                )
