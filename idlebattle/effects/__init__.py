"""
Effects module for the combat engine.

Contains the events published to the presentation layer and the transient
display cues mirrored by the engine.
"""

from .display import CUE_RESET_VALUES, DisplayState
from .event_system import (
    AnimationEvent,
    DamageDealtEvent,
    DamageTakenEvent,
    EngineEvent,
    EscapeEvent,
    EventBus,
    EventType,
    GachaEvent,
    ScreenShakeEvent,
    SkillUsedEvent,
    StageClearedEvent,
    StateChangedEvent,
)

__all__ = [
    # Display cues
    "CUE_RESET_VALUES",
    "DisplayState",
    # Event system
    "AnimationEvent",
    "DamageDealtEvent",
    "DamageTakenEvent",
    "EngineEvent",
    "EscapeEvent",
    "EventBus",
    "EventType",
    "GachaEvent",
    "ScreenShakeEvent",
    "SkillUsedEvent",
    "StageClearedEvent",
    "StateChangedEvent",
]
