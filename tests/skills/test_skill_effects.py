"""
Tests for skill effects, run against a recording action surface.
"""

import pytest
from idlebattle.character.stats import (
    INITIAL_PLAYER_STATS,
    Buffs,
    MonsterDebuffs,
    effective_monster,
    effective_player,
)
from idlebattle.combat.generation import generate_monster
from idlebattle.skills.catalog import (
    ARMOR_BREAK,
    CHAIN_LIGHTNING,
    FRENZY,
    HEALING_TOUCH,
    SMITE,
    STONE_SKIN,
    ULTIMATE_SKILL,
)


class RecordingActions:
    """Action surface keeping everything in memory."""

    def __init__(self, player, monster):
        self.base_player = player
        self.base_monster = monster
        self.buffs = Buffs()
        self.debuffs = MonsterDebuffs()
        self.damage = []
        self.shakes = []
        self.scheduled = []

    @property
    def player(self):
        return effective_player(self.base_player, self.buffs)

    @property
    def monster(self):
        return effective_monster(self.base_monster, self.debuffs)

    def update_player_stats(self, update):
        self.base_player = update(self.base_player)

    def update_monster_stats(self, update):
        self.base_monster = update(self.base_monster)

    def update_buffs(self, update):
        self.buffs = update(self.buffs)

    def update_monster_debuffs(self, update):
        self.debuffs = update(self.debuffs)

    def show_damage_dealt(self, damage):
        self.damage.append(damage)

    def shake_screen(self, duration_ms):
        self.shakes.append(duration_ms)

    def schedule(self, delay_ms, callback):
        self.scheduled.append((delay_ms, callback))

    def run_scheduled(self):
        pending, self.scheduled = self.scheduled, []
        for _, callback in sorted(pending, key=lambda item: item[0]):
            callback()


@pytest.fixture
def actions():
    return RecordingActions(INITIAL_PLAYER_STATS, generate_monster(1, 0))


def test_smite_hits_hard(actions):
    SMITE.effect(actions)
    # 5 * 5 attack against 3 defense.
    assert actions.base_monster.hp == 80 - 22
    assert actions.damage[0].value == 22
    assert actions.damage[0].is_skill
    assert not actions.damage[0].is_ultimate
    assert actions.shakes == [400]


def test_smite_never_leaves_negative_hp(actions):
    actions.base_monster = actions.base_monster.with_hp(5)
    SMITE.effect(actions)
    assert actions.base_monster.hp == 0


def test_ultimate(actions):
    ULTIMATE_SKILL.effect(actions)
    assert actions.base_monster.hp == 80 - 72
    assert actions.damage[0].is_ultimate
    assert actions.shakes == [500]


def test_healing_touch(actions):
    actions.base_player = INITIAL_PLAYER_STATS.with_hp(50)
    HEALING_TOUCH.effect(actions)
    assert actions.base_player.hp == 75


def test_healing_touch_is_capped(actions):
    actions.base_player = INITIAL_PLAYER_STATS.with_hp(90)
    HEALING_TOUCH.effect(actions)
    assert actions.base_player.hp == 100


def test_healing_touch_rounds_down(actions):
    actions.base_player = INITIAL_PLAYER_STATS.model_copy(update={"hp": 10, "max_hp": 110})
    HEALING_TOUCH.effect(actions)
    assert actions.base_player.hp == 37


def test_stone_skin_reverts(actions):
    STONE_SKIN.effect(actions)
    assert actions.player.defense == 11
    assert [delay for delay, _ in actions.scheduled] == [5000]

    actions.run_scheduled()
    assert actions.buffs.defense_bonus == 0
    assert actions.player.defense == 1


def test_frenzy_halves_interval(actions):
    FRENZY.effect(actions)
    assert actions.player.attack_interval == 250
    actions.run_scheduled()
    assert actions.buffs.attack_interval_multiplier == 1.0


def test_armor_break(actions):
    ARMOR_BREAK.effect(actions)
    assert actions.monster.defense == 1
    assert [delay for delay, _ in actions.scheduled] == [10000]
    actions.run_scheduled()
    assert actions.monster.defense == 3


def test_chain_lightning_schedules_hits(actions):
    CHAIN_LIGHTNING.effect(actions)
    assert [delay for delay, _ in actions.scheduled] == [0, 200, 400]
    assert actions.damage == []

    actions.run_scheduled()
    assert actions.base_monster.hp == 80 - 3 * 2
    assert len(actions.damage) == 3


def test_chain_lightning_stops_on_dead_monster(actions):
    actions.base_monster = actions.base_monster.with_hp(3)
    CHAIN_LIGHTNING.effect(actions)
    actions.run_scheduled()
    assert actions.base_monster.hp == 0
    assert len(actions.damage) == 2


def test_chain_lightning_reads_current_defense(actions):
    """A debuff applied between hits affects the later hits."""
    CHAIN_LIGHTNING.effect(actions)
    first, *rest = sorted(actions.scheduled, key=lambda item: item[0])
    first[1]()
    actions.debuffs = MonsterDebuffs(defense_reduction_fraction=1.0)
    for _, callback in rest:
        callback()
    assert [damage.value for damage in actions.damage] == [2, 5, 5]
