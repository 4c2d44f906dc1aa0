"""
Tests for the engine lifecycle and combat timing.
"""

import math
import threading

import pytest
from idlebattle import GameConfig, GameEngine, GameState
from idlebattle.combat.generation import generate_monster
from idlebattle.core.constants import AnimationState, TimerGroup
from idlebattle.effects.event_system import (
    DamageTakenEvent,
    EventType,
    StageClearedEvent,
    StateChangedEvent,
)
from idlebattle.skills.catalog import CHAIN_LIGHTNING, FRENZY, SMITE, STONE_SKIN


@pytest.fixture
def engine():
    return GameEngine(GameConfig(special_stage_chance=0.0, seed=7))


@pytest.fixture
def events(engine):
    received = []
    engine.events.subscribe(received.append)
    return received


def manual_only(engine):
    """Turns auto attack off and starts the game."""
    engine.toggle_auto_attack()
    assert engine.start()


def test_initial_state(engine):
    assert engine.state == GameState.START_SCREEN
    assert engine.stage == 1
    assert engine.ctx.monster == generate_monster(1, 0)
    assert engine.player_skills == []
    assert engine.coins == 0
    assert engine.is_auto_attack


def test_commands_rejected_before_start(engine):
    assert not engine.manual_attack()
    assert not engine.use_ultimate()
    assert not engine.advance_stage()
    assert not engine.pull_gacha()
    assert not engine.pause()
    assert not engine.restart()
    engine.tick(10000)
    assert engine.ctx.monster.hp == 80


def test_start(engine, events):
    assert engine.start()
    assert engine.state == GameState.PLAYING
    assert not engine.start()
    assert isinstance(events[0], StateChangedEvent)
    assert events[0].previous == GameState.START_SCREEN
    assert events[0].current == GameState.PLAYING


def test_manual_attack_is_rate_limited(engine):
    manual_only(engine)
    assert engine.manual_attack()
    assert engine.ctx.monster.hp == 78

    assert not engine.manual_attack()
    engine.tick(499)
    assert not engine.manual_attack()
    engine.tick(1)
    assert engine.manual_attack()
    assert engine.ctx.monster.hp == 76


def test_auto_attack_and_monster_attack(engine, events):
    engine.start()
    engine.tick(500)
    assert engine.ctx.monster.hp == 78
    engine.tick(1500)
    assert engine.ctx.monster.hp == 72
    assert engine.ctx.player.hp == 100

    engine.tick(500)
    # Monster attack 6 against defense 1.
    assert engine.ctx.player.hp == 95
    assert engine.ctx.monster.hp == 70
    assert [e.value for e in events if isinstance(e, DamageTakenEvent)] == [5]
    assert engine.display.damage_taken == 5


def test_auto_attack_shares_the_rate_limit(engine):
    engine.start()
    assert engine.manual_attack()
    engine.tick(500)
    # The auto attack at 500 ms is allowed exactly one interval later.
    assert engine.ctx.monster.hp == 76
    assert not engine.manual_attack()


def test_toggle_auto_attack_stops_loop(engine):
    engine.start()
    assert engine.toggle_auto_attack()
    assert not engine.is_auto_attack
    engine.tick(2000)
    assert engine.ctx.monster.hp == 80
    engine.toggle_auto_attack()
    engine.tick(500)
    assert engine.ctx.monster.hp == 78


def test_pause_freezes_every_timer(engine):
    engine.start()
    engine.tick(300)
    assert engine.pause()
    assert engine.state == GameState.PAUSED
    assert not engine.manual_attack()

    engine.tick(10000)
    assert engine.ctx.monster.hp == 80
    assert engine.ctx.player.hp == 100

    assert engine.resume()
    engine.tick(199)
    assert engine.ctx.monster.hp == 80
    engine.tick(1)
    assert engine.ctx.monster.hp == 78


def test_pause_resume_toggles(engine):
    engine.start()
    assert engine.pause_resume()
    assert engine.state == GameState.PAUSED
    assert engine.pause_resume()
    assert engine.state == GameState.PLAYING


def test_pause_keeps_buff_time(engine):
    engine.ctx.player_skills = [STONE_SKIN]
    manual_only(engine)
    engine.use_skill("stone_skin")
    engine.tick(2000)
    engine.pause()
    engine.tick(60000)
    engine.resume()
    engine.tick(2999)
    assert engine.effective_player.defense == 11
    engine.tick(1)
    assert engine.effective_player.defense == 1


def test_skill_rejected_when_not_learned(engine):
    engine.start()
    assert not engine.use_skill("smite")
    assert not engine.use_skill("not_a_skill")


def test_stone_skin_expires(engine):
    engine.ctx.player_skills = [STONE_SKIN]
    engine.start()
    assert engine.use_skill("stone_skin")
    assert engine.effective_player.defense == 11
    assert engine.skill_cooldowns == {"stone_skin": 18.0}
    assert not engine.use_skill("stone_skin")

    engine.tick(4999)
    assert engine.effective_player.defense == 11
    engine.tick(1)
    assert engine.effective_player.defense == 1
    assert engine.skill_cooldowns == {"stone_skin": 13.0}


def test_cooldown_reaches_zero_and_is_removed(engine):
    engine.ctx.player_skills = [SMITE]
    engine.start()
    assert engine.use_skill("smite")
    assert engine.ctx.monster.hp == 58

    engine.tick(7900)
    assert engine.skill_cooldowns == {"smite": 0.1}
    engine.tick(100)
    assert engine.skill_cooldowns == {}
    assert engine.use_skill("smite")


def test_frenzy_rearms_attack_loop(engine):
    engine.ctx.player_skills = [FRENZY]
    engine.start()
    assert engine.use_skill("frenzy")
    assert engine.effective_player.attack_interval == 250

    engine.tick(250)
    assert engine.ctx.monster.hp == 78
    engine.tick(4750)
    # Twenty attacks at 250 ms, the last one just as the buff expires.
    assert engine.ctx.monster.hp == 40
    assert engine.effective_player.attack_interval == 500

    engine.tick(499)
    assert engine.ctx.monster.hp == 40
    engine.tick(1)
    assert engine.ctx.monster.hp == 38


def test_chain_lightning_kill_rewards_once(engine, events):
    engine.ctx.player_skills = [CHAIN_LIGHTNING]
    manual_only(engine)
    engine.ctx.monster = engine.ctx.monster.with_hp(3)

    assert engine.use_skill("chain_lightning")
    engine.tick(0)
    assert engine.ctx.monster.hp == 1
    engine.tick(200)
    assert engine.ctx.monster.hp == 0
    assert engine.state == GameState.UPGRADE

    engine.tick(1000)
    assert engine.ctx.monster.hp == 0
    assert engine.upgrade_points == 1
    assert engine.coins == 20
    assert len([e for e in events if isinstance(e, StageClearedEvent)]) == 1


def test_ultimate(engine):
    engine.ctx.player = engine.ctx.player.model_copy(update={"defense": 10})
    manual_only(engine)
    assert engine.use_ultimate()
    assert engine.ctx.monster.hp == 8
    assert engine.ultimate_cooldown == 50.0
    assert not engine.use_ultimate()

    engine.tick(49900)
    assert engine.ultimate_cooldown == 0.1
    engine.tick(100)
    assert engine.ultimate_cooldown == 0.0
    assert engine.use_ultimate()
    assert engine.state == GameState.UPGRADE


def test_display_cues_clear_themselves(engine):
    manual_only(engine)
    engine.use_ultimate()
    display = engine.display
    assert display.damage_dealt.value == 72
    assert display.damage_dealt.is_ultimate
    assert display.screen_shake
    assert display.player_animation == AnimationState.ATTACKING

    engine.tick(300)
    assert engine.display.player_animation is None
    engine.tick(200)
    assert not engine.display.screen_shake
    assert engine.display.damage_dealt is not None
    engine.tick(300)
    assert engine.display.damage_dealt is None


def test_newer_cue_outlives_older_clear(engine):
    manual_only(engine)
    engine.manual_attack()
    engine.tick(400)
    engine.ctx.last_attack_time = -math.inf
    engine.manual_attack()
    engine.tick(100)
    # The first clear (due at 500 ms) must not erase the second number.
    assert engine.display.damage_dealt is not None
    engine.tick(400)
    assert engine.display.damage_dealt is None


def test_game_over_and_restart(engine):
    engine.ctx.player = engine.ctx.player.with_hp(1)
    engine.start()
    engine.tick(2500)
    assert engine.state == GameState.GAME_OVER
    assert engine.ctx.player.hp == 0
    assert engine.scheduler.pending(TimerGroup.PLAYING) == []
    assert not engine.manual_attack()
    assert not engine.advance_stage()

    assert engine.restart()
    assert engine.state == GameState.START_SCREEN
    assert engine.stage == 1
    assert engine.ctx.player.hp == 100
    assert engine.ctx.monster == generate_monster(1, 0)
    assert engine.coins == 0
    assert engine.player_skills == []
    assert engine.ctx.buffs.is_neutral()
    assert engine.scheduler.pending() == []
    assert engine.start()


def test_snapshot(engine):
    engine.ctx.player_skills = [SMITE]
    engine.start()
    snapshot = engine.snapshot()
    assert snapshot.state == GameState.PLAYING
    assert snapshot.player_skills == ["smite"]
    assert snapshot.monster.hp == 80
    assert snapshot.is_auto_attack


def test_events_are_stamped_with_clock(engine, events):
    engine.start()
    engine.tick(2500)
    taken = [e for e in events if e.event_type == EventType.DAMAGE_TAKEN]
    assert taken[0].time_ms == 2500


def test_effective_stats_wait_for_engine_lock(engine):
    """Stat queries from another thread block while a command holds the lock."""
    engine.ctx.player_skills = [STONE_SKIN]
    engine.start()
    results = []
    reader = threading.Thread(target=lambda: results.append(engine.effective_player))

    with engine._lock:
        engine.use_skill("stone_skin")
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert results == []
    reader.join(timeout=5)

    assert results[0].defense == 11


def test_effective_stats_readable_from_subscriber(engine):
    """Subscribers run under the engine lock and may still query stats."""
    seen = []
    engine.events.subscribe(lambda event: seen.append(engine.effective_monster.hp))
    engine.start()
    assert engine.manual_attack()
    # Damage events are published before the hit is applied.
    assert seen
    assert set(seen) == {80}
