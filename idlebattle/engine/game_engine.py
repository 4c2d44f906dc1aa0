"""
Game engine module.

Owns the session state and the scheduler, implements the lifecycle state
machine (start screen, playing, paused, upgrade, game over) and exposes the
command and query surface used by the presentation layer.

All commands are synchronous and guarded: a command that is not allowed in the
current situation changes nothing and returns False.
"""

import functools
import random
import threading
from typing import Any, Callable, TypeVar

from catchery import log_debug, log_warning

from ..character.stats import (
    NEUTRAL_BUFFS,
    NEUTRAL_DEBUFFS,
    Buffs,
    CharacterStats,
    MonsterDebuffs,
    effective_monster,
    effective_player,
)
from ..combat.damage import DamageInfo, compute_damage
from ..combat.generation import (
    choose_next_encounter,
    generate_monster,
    generate_treasure_encounter,
    is_boss_stage,
)
from ..combat.rewards import apply_stat_upgrade, pull_gacha, stage_clear_reward
from ..core.config import GameConfig
from ..core.constants import (
    DAMAGE_TAKEN_TEXT_MS,
    DAMAGE_TEXT_MS,
    MONSTER_ATTACK_ANIMATION_MS,
    PLAYER_ATTACK_ANIMATION_MS,
    SKILL_DAMAGE_TEXT_MS,
    AnimationState,
    CueTarget,
    GameState,
    TimerGroup,
    UpgradeStat,
)
from ..core.logging import get_logger
from ..effects.display import CUE_RESET_VALUES, DisplayState
from ..effects.event_system import (
    AnimationEvent,
    DamageDealtEvent,
    DamageTakenEvent,
    EngineEvent,
    EscapeEvent,
    EventBus,
    GachaEvent,
    ScreenShakeEvent,
    SkillUsedEvent,
    StageClearedEvent,
    StateChangedEvent,
)
from ..skills.base_skill import BaseSkill
from ..skills.catalog import ULTIMATE_SKILL, sample_skill_offer
from .context import EngineContext, EngineSnapshot
from .scheduler import Scheduler, TimerHandle

logger = get_logger(__name__)

# Tolerance used when comparing clock times.
_EPS = 1e-6

_F = TypeVar("_F", bound=Callable[..., Any])


def _serialized(method: _F) -> _F:
    """Runs the decorated engine method under the engine lock."""

    @functools.wraps(method)
    def wrapper(self: "GameEngine", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class EncounterActions:
    """
    Skill action surface bound to one encounter.

    Reads always return the current effective stats. Once the engine has moved
    on to another encounter, every mutator and scheduled follow-up is inert.
    """

    def __init__(self, engine: "GameEngine", encounter_id: int) -> None:
        self._engine = engine
        self._encounter_id = encounter_id

    def is_active(self) -> bool:
        return self._engine.ctx.encounter_id == self._encounter_id

    @property
    def player(self) -> CharacterStats:
        return self._engine.effective_player

    @property
    def monster(self) -> CharacterStats:
        return self._engine.effective_monster

    def update_player_stats(
        self, update: Callable[[CharacterStats], CharacterStats]
    ) -> None:
        if self.is_active():
            self._engine._set_player(update(self._engine.ctx.player))

    def update_monster_stats(
        self, update: Callable[[CharacterStats], CharacterStats]
    ) -> None:
        if self.is_active():
            self._engine._set_monster(update(self._engine.ctx.monster))

    def update_buffs(self, update: Callable[[Buffs], Buffs]) -> None:
        if self.is_active():
            self._engine._set_buffs(update(self._engine.ctx.buffs))

    def update_monster_debuffs(
        self, update: Callable[[MonsterDebuffs], MonsterDebuffs]
    ) -> None:
        if self.is_active():
            self._engine.ctx.monster_debuffs = update(self._engine.ctx.monster_debuffs)

    def show_damage_dealt(self, damage: DamageInfo) -> None:
        if self.is_active():
            duration = SKILL_DAMAGE_TEXT_MS if damage.is_skill else DAMAGE_TEXT_MS
            self._engine._show_damage_dealt(damage, duration)

    def shake_screen(self, duration_ms: int) -> None:
        if self.is_active():
            self._engine._shake_screen(duration_ms)

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        if not self.is_active():
            return

        def guarded() -> None:
            if self.is_active():
                callback()

        self._engine.scheduler.call_later(delay_ms, guarded, TimerGroup.ENCOUNTER)


class GameEngine:
    """
    The combat and progression engine.

    The host drives time through `tick`; every timer (auto attacks, cooldown
    decay, buff expiry, escape countdown) runs inside `tick` on the engine's
    virtual clock.

    Attributes:
        config (GameConfig):
            The session tunables.
        rng (random.Random):
            Random generator used for encounters, offers and gacha pulls.
        scheduler (Scheduler):
            The timer queue.
        events (EventBus):
            Bus publishing the engine events.
        ctx (EngineContext):
            The session state.

    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config: GameConfig = config or GameConfig()
        self.rng: random.Random = rng or random.Random(self.config.seed)
        self.scheduler: Scheduler = Scheduler()
        self.events: EventBus = EventBus()
        self.ctx: EngineContext = EngineContext()
        self._state: GameState = GameState.START_SCREEN
        self._lock = threading.RLock()
        # Handle and period of the running player auto-attack loop.
        self._player_attack_timer: TimerHandle | None = None
        self._player_attack_interval: float | None = None
        # Latest generation of each display cue, older clears are ignored.
        self._cue_generation: dict[str, int] = {}

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def now(self) -> float:
        return self.scheduler.now

    @property
    @_serialized
    def effective_player(self) -> CharacterStats:
        return effective_player(self.ctx.player, self.ctx.buffs)

    @property
    @_serialized
    def effective_monster(self) -> CharacterStats:
        return effective_monster(self.ctx.monster, self.ctx.monster_debuffs)

    @property
    def stage(self) -> int:
        return self.ctx.stage

    @property
    def is_boss_stage(self) -> bool:
        return self.ctx.is_boss_stage

    @property
    def is_special_stage(self) -> bool:
        return self.ctx.is_special_stage

    @property
    def special_stage_timer(self) -> float:
        return self.ctx.special_stage_timer

    @property
    def coins(self) -> int:
        return self.ctx.coins

    @property
    def upgrade_points(self) -> int:
        return self.ctx.upgrade_points

    @property
    def skill_cooldowns(self) -> dict[str, float]:
        return dict(self.ctx.skill_cooldowns)

    @property
    def ultimate_cooldown(self) -> float:
        return self.ctx.ultimate_cooldown

    @property
    def player_skills(self) -> list[BaseSkill]:
        return list(self.ctx.player_skills)

    @property
    def skill_choices(self) -> list[BaseSkill]:
        return list(self.ctx.skill_choices)

    @property
    def show_skill_choice(self) -> bool:
        return self.ctx.show_skill_choice

    @property
    def is_replacing_skill(self) -> bool:
        return self.ctx.is_replacing_skill

    @property
    def last_reward(self) -> int:
        return self.ctx.last_reward

    @property
    def last_coin_reward(self) -> int:
        return self.ctx.last_coin_reward

    @property
    def gacha_result(self) -> str | None:
        return self.ctx.gacha_result

    @property
    def is_auto_attack(self) -> bool:
        return self.ctx.is_auto_attack

    @property
    def display(self) -> DisplayState:
        return self.ctx.display

    @_serialized
    def snapshot(self) -> EngineSnapshot:
        """
        Captures a consistent view of the whole engine state.

        Returns:
            EngineSnapshot:
                The frozen snapshot.

        """
        ctx = self.ctx
        return EngineSnapshot(
            state=self._state,
            time_ms=self.scheduler.now,
            player=self.effective_player,
            monster=self.effective_monster,
            buffs=ctx.buffs,
            monster_debuffs=ctx.monster_debuffs,
            stage=ctx.stage,
            is_boss_stage=ctx.is_boss_stage,
            is_special_stage=ctx.is_special_stage,
            special_stage_timer=ctx.special_stage_timer,
            coins=ctx.coins,
            upgrade_points=ctx.upgrade_points,
            skill_cooldowns=dict(ctx.skill_cooldowns),
            ultimate_cooldown=ctx.ultimate_cooldown,
            player_skills=[skill.id for skill in ctx.player_skills],
            skill_choices=[skill.id for skill in ctx.skill_choices],
            show_skill_choice=ctx.show_skill_choice,
            is_replacing_skill=ctx.is_replacing_skill,
            last_reward=ctx.last_reward,
            last_coin_reward=ctx.last_coin_reward,
            gacha_result=ctx.gacha_result,
            is_auto_attack=ctx.is_auto_attack,
            display=ctx.display,
        )

    # =========================================================================
    # TIME
    # =========================================================================

    @_serialized
    def tick(self, elapsed_ms: float) -> int:
        """
        Advances the engine clock, firing every timer that falls due.

        Args:
            elapsed_ms (float):
                Milliseconds of wall-clock time to simulate.

        Returns:
            int:
                The number of timer callbacks run.

        """
        return self.scheduler.advance(elapsed_ms)

    # =========================================================================
    # LIFECYCLE COMMANDS
    # =========================================================================

    @_serialized
    def start(self) -> bool:
        if self._state != GameState.START_SCREEN:
            return self._reject("start", "not on the start screen")
        self._set_state(GameState.PLAYING)
        self._arm_playing_timers()
        return True

    @_serialized
    def pause(self) -> bool:
        if self._state != GameState.PLAYING:
            return self._reject("pause", "not playing")
        for group in TimerGroup:
            self.scheduler.suspend_group(group)
        self._set_state(GameState.PAUSED)
        return True

    @_serialized
    def resume(self) -> bool:
        if self._state != GameState.PAUSED:
            return self._reject("resume", "not paused")
        self._set_state(GameState.PLAYING)
        for group in TimerGroup:
            self.scheduler.resume_group(group)
        self._sync_player_attack_loop()
        return True

    @_serialized
    def pause_resume(self) -> bool:
        """Toggles between playing and paused."""
        if self._state == GameState.PLAYING:
            return self.pause()
        if self._state == GameState.PAUSED:
            return self.resume()
        return self._reject("pause_resume", "neither playing nor paused")

    @_serialized
    def advance_stage(self) -> bool:
        """
        Leaves the upgrade screen and starts the next encounter.

        Rejected while a skill offer or a skill replacement is pending.
        """
        ctx = self.ctx
        if self._state != GameState.UPGRADE:
            return self._reject("advance_stage", "not in the upgrade screen")
        if ctx.show_skill_choice or ctx.is_replacing_skill:
            return self._reject("advance_stage", "skill choice pending")

        upcoming = choose_next_encounter(
            ctx.stage,
            ctx.cleared_was_treasure,
            self.rng,
            self.config.special_stage_chance,
        )
        ctx.stage = upcoming.stage
        ctx.is_boss_stage = upcoming.is_boss
        ctx.is_special_stage = upcoming.is_special
        if upcoming.is_special:
            ctx.monster = generate_treasure_encounter()
        else:
            ctx.monster = generate_monster(
                upcoming.stage, len(ctx.player_skills), self.config.max_skills
            )
        ctx.cleared_was_treasure = False

        ctx.player = ctx.player.with_hp(ctx.player.max_hp)
        ctx.skill_cooldowns = {}
        ctx.buffs = NEUTRAL_BUFFS
        ctx.monster_debuffs = NEUTRAL_DEBUFFS
        ctx.skill_choices = []
        ctx.skill_to_learn = None
        ctx.show_skill_choice = False
        ctx.gacha_result = None
        ctx.last_attack_time = -float("inf")
        ctx.encounter_id += 1

        logger.debug(
            "Stage %d begins (boss=%s, treasure=%s)",
            ctx.stage,
            ctx.is_boss_stage,
            ctx.is_special_stage,
        )
        self._set_state(GameState.PLAYING)
        self._arm_playing_timers()
        return True

    @_serialized
    def restart(self) -> bool:
        """Resets the whole session after a game over."""
        if self._state != GameState.GAME_OVER:
            return self._reject("restart", "game is not over")
        self.scheduler.clear()
        self._player_attack_timer = None
        self._player_attack_interval = None
        self._cue_generation = {}
        encounter_id = self.ctx.encounter_id + 1
        self.ctx = EngineContext(encounter_id=encounter_id)
        self._set_state(GameState.START_SCREEN)
        return True

    # =========================================================================
    # COMBAT COMMANDS
    # =========================================================================

    @_serialized
    def manual_attack(self) -> bool:
        """
        Attacks the monster once, no faster than the player's attack interval.
        """
        return self._perform_attack()

    @_serialized
    def toggle_auto_attack(self) -> bool:
        self.ctx.is_auto_attack = not self.ctx.is_auto_attack
        self._sync_player_attack_loop()
        return True

    @_serialized
    def use_skill(self, skill_id: str) -> bool:
        """
        Activates one of the learned skills.

        Args:
            skill_id (str):
                Id of the learned skill.

        Returns:
            bool:
                True if the skill was used, False if the command was rejected.

        """
        ctx = self.ctx
        if self._state != GameState.PLAYING:
            return self._reject("use_skill", "not playing", skill=skill_id)
        skill = next((s for s in ctx.player_skills if s.id == skill_id), None)
        if skill is None:
            return self._reject("use_skill", "skill not learned", skill=skill_id)
        if ctx.skill_cooldowns.get(skill.id, 0) > 0:
            return self._reject("use_skill", "on cooldown", skill=skill_id)
        if not self._both_alive():
            return self._reject("use_skill", "combatant down", skill=skill_id)

        encounter_id = ctx.encounter_id
        ctx.skill_cooldowns = {**ctx.skill_cooldowns, skill.id: float(skill.cooldown)}
        self._emit(SkillUsedEvent(skill_id=skill.id))
        skill.effect(EncounterActions(self, encounter_id))
        if self.ctx.encounter_id == encounter_id:
            self._animate(CueTarget.PLAYER, AnimationState.ATTACKING, PLAYER_ATTACK_ANIMATION_MS)
        return True

    @_serialized
    def use_ultimate(self) -> bool:
        """Activates the ultimate skill."""
        ctx = self.ctx
        if self._state != GameState.PLAYING:
            return self._reject("use_ultimate", "not playing")
        if ctx.ultimate_cooldown > 0:
            return self._reject("use_ultimate", "on cooldown")
        if not self._both_alive():
            return self._reject("use_ultimate", "combatant down")

        encounter_id = ctx.encounter_id
        ctx.ultimate_cooldown = float(ULTIMATE_SKILL.cooldown)
        self._emit(SkillUsedEvent(skill_id=ULTIMATE_SKILL.id, is_ultimate=True))
        ULTIMATE_SKILL.effect(EncounterActions(self, encounter_id))
        if self.ctx.encounter_id == encounter_id:
            self._animate(CueTarget.PLAYER, AnimationState.ATTACKING, PLAYER_ATTACK_ANIMATION_MS)
        return True

    # =========================================================================
    # UPGRADE SCREEN COMMANDS
    # =========================================================================

    @_serialized
    def select_upgrade_stat(self, kind: UpgradeStat | str) -> bool:
        """
        Spends one upgrade point on a stat.

        Args:
            kind (UpgradeStat | str):
                The stat to raise, as an enum member or its value.

        Returns:
            bool:
                True if the point was spent.

        """
        if self._state != GameState.UPGRADE:
            return self._reject("select_upgrade_stat", "not in the upgrade screen")
        if self.ctx.upgrade_points <= 0:
            return self._reject("select_upgrade_stat", "no upgrade points")
        try:
            stat = UpgradeStat(kind)
        except ValueError:
            log_warning(f"Unknown upgrade stat '{kind}'", {"kind": str(kind)})
            return False
        upgraded = apply_stat_upgrade(self.ctx.player, stat)
        if upgraded is None:
            return self._reject("select_upgrade_stat", "stat at its limit", stat=str(stat))
        self.ctx.player = upgraded
        self.ctx.upgrade_points -= 1
        return True

    @_serialized
    def select_skill(self, skill_id: str) -> bool:
        """
        Picks one of the offered skills.

        The skill is learned immediately when there is room; otherwise the
        engine waits for `replace_skill` or `cancel_replace`.
        """
        ctx = self.ctx
        if self._state != GameState.UPGRADE or not ctx.show_skill_choice:
            return self._reject("select_skill", "no skill offer", skill=skill_id)
        if ctx.is_replacing_skill:
            return self._reject("select_skill", "replacement pending", skill=skill_id)
        skill = next((s for s in ctx.skill_choices if s.id == skill_id), None)
        if skill is None:
            return self._reject("select_skill", "skill not offered", skill=skill_id)

        if len(ctx.player_skills) < self.config.max_skills:
            ctx.player_skills = [*ctx.player_skills, skill]
            ctx.show_skill_choice = False
        else:
            ctx.skill_to_learn = skill
            ctx.is_replacing_skill = True
        ctx.skill_choices = []
        return True

    @_serialized
    def replace_skill(self, slot_index: int) -> bool:
        """
        Replaces the learned skill in `slot_index` with the pending skill.
        """
        ctx = self.ctx
        if self._state != GameState.UPGRADE:
            return self._reject("replace_skill", "not in the upgrade screen")
        if not ctx.is_replacing_skill or ctx.skill_to_learn is None:
            return self._reject("replace_skill", "no replacement pending")
        if not 0 <= slot_index < len(ctx.player_skills):
            log_warning(
                f"Invalid skill slot {slot_index}",
                {"slot": slot_index, "skills": len(ctx.player_skills)},
            )
            return False

        skills = list(ctx.player_skills)
        skills[slot_index] = ctx.skill_to_learn
        ctx.player_skills = skills
        ctx.skill_to_learn = None
        ctx.is_replacing_skill = False
        ctx.show_skill_choice = False
        return True

    @_serialized
    def cancel_replace(self) -> bool:
        """Abandons the pending replacement and offers a fresh set of skills."""
        ctx = self.ctx
        if self._state != GameState.UPGRADE or not ctx.is_replacing_skill:
            return self._reject("cancel_replace", "no replacement pending")
        ctx.skill_to_learn = None
        ctx.is_replacing_skill = False
        self._open_skill_offer()
        return True

    @_serialized
    def pull_gacha(self) -> bool:
        """Spends coins on one random reward."""
        ctx = self.ctx
        if self._state != GameState.UPGRADE:
            return self._reject("pull_gacha", "not in the upgrade screen")
        if ctx.coins < self.config.gacha_cost:
            return self._reject("pull_gacha", "not enough coins", coins=ctx.coins)

        ctx.coins -= self.config.gacha_cost
        outcome = pull_gacha(ctx.player, self.rng)
        ctx.player = outcome.stats
        ctx.coins += outcome.coin_bonus
        ctx.gacha_result = outcome.message
        self._emit(GachaEvent(tier=outcome.tier, message=outcome.message))
        return True

    # =========================================================================
    # TIMERS
    # =========================================================================

    def _arm_playing_timers(self) -> None:
        ctx = self.ctx
        tick = self.config.cooldown_tick_ms
        self.scheduler.call_every(tick, self._decay_cooldowns, TimerGroup.PLAYING)
        if ctx.is_special_stage:
            ctx.special_stage_timer = ctx.monster.attack_interval / 1000
            self.scheduler.call_every(tick, self._escape_tick, TimerGroup.PLAYING)
        else:
            self.scheduler.call_every(
                ctx.monster.attack_interval, self._monster_attack, TimerGroup.PLAYING
            )
        self._sync_player_attack_loop()

    def _sync_player_attack_loop(self) -> None:
        """
        Starts, stops or re-arms the player auto-attack loop so that it runs
        exactly when auto attack is on, both combatants are alive and the game
        is playing, at the current effective attack interval.
        """
        should_run = (
            self._state == GameState.PLAYING
            and self.ctx.is_auto_attack
            and self._both_alive()
        )
        timer = self._player_attack_timer
        if not should_run:
            if timer is not None:
                self.scheduler.cancel(timer)
                self._player_attack_timer = None
                self._player_attack_interval = None
            return

        interval = self.effective_player.attack_interval
        if (
            timer is not None
            and not timer.cancelled
            and self._player_attack_interval == interval
        ):
            return
        self.scheduler.cancel(timer)
        self._player_attack_timer = self.scheduler.call_every(
            interval, self._perform_attack, TimerGroup.PLAYING
        )
        self._player_attack_interval = interval
        logger.debug("Player attack loop armed every %.1f ms", interval)

    def _decay_cooldowns(self) -> None:
        ctx = self.ctx
        step = self.config.cooldown_tick_ms / 1000
        remaining: dict[str, float] = {}
        for skill_id, left in ctx.skill_cooldowns.items():
            left = max(0.0, round(left - step, 3))
            if left > 0:
                remaining[skill_id] = left
        ctx.skill_cooldowns = remaining
        if ctx.ultimate_cooldown > 0:
            ctx.ultimate_cooldown = max(0.0, round(ctx.ultimate_cooldown - step, 3))

    def _escape_tick(self) -> None:
        ctx = self.ctx
        step = self.config.cooldown_tick_ms / 1000
        if ctx.special_stage_timer <= step + _EPS:
            self._on_escape()
            return
        ctx.special_stage_timer = round(ctx.special_stage_timer - step, 3)

    def _perform_attack(self) -> bool:
        """
        Player attack shared by manual clicks and the auto-attack loop,
        rate limited by the effective attack interval.
        """
        if self._state != GameState.PLAYING:
            return self._reject("attack", "not playing")
        player = self.effective_player
        monster = self.effective_monster
        if player.is_dead() or monster.is_dead():
            return self._reject("attack", "combatant down")
        now = self.scheduler.now
        if now - self.ctx.last_attack_time < player.attack_interval - _EPS:
            return self._reject("attack", "too soon")

        self.ctx.last_attack_time = now
        damage = compute_damage(player.attack, monster.defense)
        self._animate(CueTarget.PLAYER, AnimationState.ATTACKING, PLAYER_ATTACK_ANIMATION_MS)
        self._animate(CueTarget.MONSTER, AnimationState.HIT, PLAYER_ATTACK_ANIMATION_MS)
        self._show_damage_dealt(DamageInfo(value=damage), DAMAGE_TEXT_MS)
        self._set_monster(self.ctx.monster.damaged(damage))
        return True

    def _monster_attack(self) -> None:
        if self._state != GameState.PLAYING or not self._both_alive():
            return
        damage = compute_damage(self.ctx.monster.attack, self.effective_player.defense)
        self._animate(CueTarget.MONSTER, AnimationState.ATTACKING, MONSTER_ATTACK_ANIMATION_MS)
        self._animate(CueTarget.PLAYER, AnimationState.HIT, MONSTER_ATTACK_ANIMATION_MS)
        self._show_cue("damage_taken", damage, DAMAGE_TAKEN_TEXT_MS)
        self._emit(DamageTakenEvent(value=damage))
        self._set_player(self.ctx.player.damaged(damage))

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def _set_state(self, state: GameState) -> None:
        previous = self._state
        self._state = state
        logger.debug("State %s -> %s", previous, state)
        self._emit(StateChangedEvent(previous=previous, current=state))

    def _set_player(self, player: CharacterStats) -> None:
        self.ctx.player = player
        if self._state == GameState.PLAYING and player.is_dead():
            self._leave_encounter()
            self._set_state(GameState.GAME_OVER)

    def _set_monster(self, monster: CharacterStats) -> None:
        self.ctx.monster = monster
        if self._state == GameState.PLAYING and monster.is_dead():
            self._on_monster_killed()

    def _set_buffs(self, buffs: Buffs) -> None:
        self.ctx.buffs = buffs
        self._sync_player_attack_loop()

    def _on_monster_killed(self) -> None:
        ctx = self.ctx
        reward = stage_clear_reward(
            ctx.stage, is_boss_stage(ctx.stage), ctx.is_special_stage
        )
        ctx.last_reward = reward.points
        ctx.last_coin_reward = reward.coins
        ctx.upgrade_points += reward.points
        ctx.coins += reward.coins

        offers_skill = not ctx.is_special_stage
        ctx.cleared_was_treasure = ctx.is_special_stage
        ctx.is_special_stage = False
        ctx.is_boss_stage = False
        if offers_skill:
            self._open_skill_offer()

        cleared = StageClearedEvent(
            stage=ctx.stage,
            points=reward.points,
            coins=reward.coins,
            offers_skill=ctx.show_skill_choice,
        )
        self._leave_encounter()
        self._set_state(GameState.UPGRADE)
        self._emit(cleared)

    def _on_escape(self) -> None:
        ctx = self.ctx
        ctx.special_stage_timer = 0.0
        ctx.is_special_stage = False
        ctx.cleared_was_treasure = True
        ctx.last_reward = 0
        ctx.last_coin_reward = 0
        escaped = EscapeEvent(stage=ctx.stage)
        self._leave_encounter()
        self._set_state(GameState.UPGRADE)
        self._emit(escaped)

    def _leave_encounter(self) -> None:
        """Cancels every timer owned by the encounter being left."""
        self.scheduler.cancel_group(TimerGroup.PLAYING)
        self.scheduler.cancel_group(TimerGroup.ENCOUNTER)
        self._player_attack_timer = None
        self._player_attack_interval = None

    def _open_skill_offer(self) -> None:
        ctx = self.ctx
        ctx.skill_choices = sample_skill_offer(
            ctx.player_skills, self.rng, self.config.skill_offer_size
        )
        ctx.show_skill_choice = bool(ctx.skill_choices)
        if not ctx.skill_choices:
            log_debug("No new skills left to offer", {"learned": len(ctx.player_skills)})

    # =========================================================================
    # DISPLAY CUES
    # =========================================================================

    def _show_cue(self, name: str, value: Any, duration_ms: float) -> None:
        """Sets a display cue and schedules its reset."""
        generation = self._cue_generation.get(name, 0) + 1
        self._cue_generation[name] = generation
        self.ctx.display = self.ctx.display.model_copy(update={name: value})

        def clear() -> None:
            if self._cue_generation.get(name) == generation:
                self.ctx.display = self.ctx.display.model_copy(
                    update={name: CUE_RESET_VALUES[name]}
                )

        self.scheduler.call_later(duration_ms, clear, TimerGroup.DISPLAY)

    def _show_damage_dealt(self, damage: DamageInfo, duration_ms: float) -> None:
        self._show_cue("damage_dealt", damage, duration_ms)
        self._emit(DamageDealtEvent(damage=damage))

    def _shake_screen(self, duration_ms: int) -> None:
        self._show_cue("screen_shake", True, duration_ms)
        self._emit(ScreenShakeEvent(duration_ms=duration_ms))

    def _animate(self, target: CueTarget, animation: AnimationState, duration_ms: int) -> None:
        name = "player_animation" if target == CueTarget.PLAYER else "monster_animation"
        self._show_cue(name, animation, duration_ms)
        self._emit(
            AnimationEvent(target=target, animation=animation, duration_ms=duration_ms)
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _both_alive(self) -> bool:
        return self.ctx.player.is_alive() and self.ctx.monster.is_alive()

    def _emit(self, event: EngineEvent) -> None:
        self.events.emit(event.model_copy(update={"time_ms": self.scheduler.now}))

    def _reject(self, command: str, reason: str, **context: Any) -> bool:
        log_debug(
            f"Rejected {command}: {reason}",
            {"state": str(self._state), **context},
        )
        return False
