"""
Tests for monster generation and next-encounter selection.
"""

import math
import random

import pytest
from idlebattle.combat.generation import (
    choose_next_encounter,
    generate_monster,
    generate_treasure_encounter,
    is_boss_stage,
    late_defense_bonus,
)


@pytest.mark.parametrize(
    "stage, expected",
    [(0, False), (1, False), (4, False), (5, True), (6, False), (10, True), (15, True)],
)
def test_is_boss_stage(stage, expected):
    assert is_boss_stage(stage) is expected


def test_first_stage_monster():
    monster = generate_monster(1, 0)
    assert monster.hp == 80
    assert monster.max_hp == 80
    assert monster.attack == 6
    assert monster.defense == 3
    assert monster.attack_interval == 2500
    assert not monster.is_empowered


def test_stage_five_boss():
    """Stage multiplier 2.2 and boss multipliers 2.2 / 1.5 / 1.2."""
    monster = generate_monster(5, 0)
    assert monster.hp == math.floor(80 * 2.2 * 2.2) == 387
    assert monster.max_hp == 387
    assert monster.attack == 19
    assert monster.defense == 7


def test_empowered_monster():
    monster = generate_monster(1, 4)
    assert monster.is_empowered
    assert monster.hp == 120
    assert monster.attack == 9
    assert monster.defense == 4


def test_empowerment_follows_skill_cap():
    assert not generate_monster(1, 3).is_empowered
    assert generate_monster(1, 2, max_skills=2).is_empowered


def test_generation_is_deterministic():
    for stage in range(1, 30):
        assert generate_monster(stage, 2) == generate_monster(stage, 2)


def test_late_defense_ramp():
    assert late_defense_bonus(9) == 0
    assert late_defense_bonus(10) == 1
    assert late_defense_bonus(13) == 8
    bonuses = [late_defense_bonus(stage) for stage in range(1, 60)]
    assert bonuses == sorted(bonuses)


def test_late_defense_is_added():
    stage_nine = generate_monster(9, 0)
    stage_eleven = generate_monster(11, 0)
    base = math.floor(3 * (1 + 10 * 0.3))
    assert stage_eleven.defense == base + math.floor(2**1.5)
    assert stage_eleven.defense > stage_nine.defense


def test_treasure_encounter():
    goblin = generate_treasure_encounter()
    assert goblin.hp == goblin.max_hp == 50
    assert goblin.attack == 0
    assert goblin.defense == 50
    assert goblin.attack_interval == 10000


def test_next_encounter_is_normal_without_treasure_chance():
    upcoming = choose_next_encounter(1, False, random.Random(1), special_chance=0.0)
    assert upcoming.stage == 2
    assert not upcoming.is_boss
    assert not upcoming.is_special


def test_next_encounter_can_be_treasure():
    upcoming = choose_next_encounter(3, False, random.Random(1), special_chance=1.0)
    assert upcoming.stage == 4
    assert upcoming.is_special


def test_boss_stage_is_never_treasure():
    upcoming = choose_next_encounter(4, False, random.Random(1), special_chance=1.0)
    assert upcoming.stage == 5
    assert upcoming.is_boss
    assert not upcoming.is_special


def test_treasure_detour_keeps_stage_number():
    upcoming = choose_next_encounter(4, True, random.Random(1), special_chance=0.0)
    assert upcoming.stage == 4
    assert not upcoming.is_boss
