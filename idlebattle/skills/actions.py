"""
Skill action surface.

The bounded set of operations a skill effect may perform on the engine. The
engine hands each effect an implementation bound to the current encounter;
once that encounter is over, every mutator becomes a no-op.
"""

from typing import Callable, Protocol

from ..character.stats import Buffs, CharacterStats, MonsterDebuffs
from ..combat.damage import DamageInfo


class SkillActions(Protocol):
    """Operations available to skill effects."""

    @property
    def player(self) -> CharacterStats:
        """Effective player stats, read at call time."""
        ...

    @property
    def monster(self) -> CharacterStats:
        """Effective monster stats, read at call time."""
        ...

    def update_player_stats(
        self, update: Callable[[CharacterStats], CharacterStats]
    ) -> None: ...

    def update_monster_stats(
        self, update: Callable[[CharacterStats], CharacterStats]
    ) -> None: ...

    def update_buffs(self, update: Callable[[Buffs], Buffs]) -> None: ...

    def update_monster_debuffs(
        self, update: Callable[[MonsterDebuffs], MonsterDebuffs]
    ) -> None: ...

    def show_damage_dealt(self, damage: DamageInfo) -> None: ...

    def shake_screen(self, duration_ms: int) -> None: ...

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        """Runs `callback` after `delay_ms`, unless the encounter ends first."""
        ...
