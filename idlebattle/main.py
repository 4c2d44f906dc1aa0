"""
Headless demo of the combat engine.

Plays a session automatically: the engine is driven in 100 ms ticks, every
ready skill is cast, upgrade points go to attack and health, coins go to the
gacha, and the first offered skill is always taken. A status line is printed
after every cleared encounter.
"""

import logging

from .core.config import GameConfig
from .core.constants import GameState, UpgradeStat
from .core.logging import get_logger, setup_logging
from .core.utils import cprint, crule, make_bar
from .effects.event_system import EngineEvent, EventType
from .engine.game_engine import GameEngine

logger = get_logger("idlebattle.demo")

TICK_MS = 100

# Upgrade points are spent cycling through these stats.
UPGRADE_ROTATION = [UpgradeStat.ATTACK, UpgradeStat.ATTACK, UpgradeStat.MAX_HP]


def status_line(engine: GameEngine) -> str:
    """
    Builds a one-line summary of the current encounter.

    Args:
        engine (GameEngine):
            The engine to describe.

    Returns:
        str:
            A rich-formatted status line.

    """
    player = engine.effective_player
    monster = engine.effective_monster
    kind = "👑 boss" if engine.is_boss_stage else "💰 treasure" if engine.is_special_stage else "👹 monster"
    return (
        f"Stage {engine.stage:3} {engine.state.colored_name:28} "
        f"👤 {make_bar(player.hp, player.max_hp, color='blue')} {player.hp:4}/{player.max_hp:<4} "
        f"{kind} {make_bar(monster.hp, monster.max_hp, color='red')} {monster.hp:4}/{monster.max_hp:<4} "
        f"🪙 {engine.coins}"
    )


def _log_event(event: EngineEvent) -> None:
    if event.event_type in (
        EventType.STAGE_CLEARED,
        EventType.ESCAPE,
        EventType.GACHA,
        EventType.STATE_CHANGED,
    ):
        logger.info(str(event))


def spend_rewards(engine: GameEngine, upgrades_done: int) -> int:
    """
    Resolves the upgrade screen: picks a skill, spends points and coins.

    Returns:
        int:
            The updated number of upgrades bought so far.

    """
    while engine.show_skill_choice or engine.is_replacing_skill:
        if engine.is_replacing_skill:
            engine.replace_skill(0)
        else:
            engine.select_skill(engine.skill_choices[0].id)

    while engine.upgrade_points > 0:
        stat = UPGRADE_ROTATION[upgrades_done % len(UPGRADE_ROTATION)]
        if not engine.select_upgrade_stat(stat):
            break
        upgrades_done += 1

    while engine.coins >= engine.config.gacha_cost:
        engine.pull_gacha()
        cprint(f"    🎰 {engine.gacha_result}")
    return upgrades_done


def run_demo(max_stages: int = 15, seed: int | None = None, max_minutes: int = 30) -> GameEngine:
    """
    Plays a session until the player dies, `max_stages` is passed or the
    simulated time budget runs out.

    Args:
        max_stages (int):
            Stage at which the demo stops.
        seed (int | None):
            Seed of the engine random generator.
        max_minutes (int):
            Budget of simulated time.

    Returns:
        GameEngine:
            The engine in its final state.

    """
    engine = GameEngine(GameConfig(seed=seed))
    engine.events.subscribe(_log_event)

    crule("Idle Battle", style="bold green")
    engine.start()

    upgrades_done = 0
    budget_ms = max_minutes * 60 * 1000
    while engine.now < budget_ms and engine.stage <= max_stages:
        if engine.state == GameState.PLAYING:
            for skill in engine.player_skills:
                engine.use_skill(skill.id)
            engine.use_ultimate()
            engine.tick(TICK_MS)
        elif engine.state == GameState.UPGRADE:
            cprint(status_line(engine))
            upgrades_done = spend_rewards(engine, upgrades_done)
            if not engine.advance_stage():
                break
        else:
            break

    crule("Final state", style="bold green")
    cprint(status_line(engine))
    cprint(f"Skills: {', '.join(skill.name for skill in engine.player_skills) or '-'}")
    return engine


if __name__ == "__main__":
    setup_logging(logging.INFO)
    run_demo()
