"""
Rewards module for the engine.

Computes stage-clear rewards, applies stat upgrades bought with upgrade points
and resolves gacha pulls bought with coins.
"""

import random

from pydantic import BaseModel, ConfigDict, Field

from ..character.stats import CharacterStats
from ..core.constants import (
    BASE_COIN_REWARD,
    BOSS_COIN_MULTIPLIER,
    BOSS_REWARD_POINTS,
    COIN_REWARD_PER_STAGE,
    GACHA_JACKPOT_COINS,
    MIN_ATTACK_INTERVAL,
    NORMAL_REWARD_POINTS,
    TREASURE_COIN_MULTIPLIER,
    TREASURE_REWARD_POINTS,
    GachaTier,
    UpgradeStat,
)

# Upper bounds (exclusive) of the cumulative gacha bands on a 0-100 roll.
GACHA_BANDS: list[tuple[float, GachaTier]] = [
    (30, GachaTier.SMALL_BOOST),
    (60, GachaTier.MEDIUM_BOOST),
    (80, GachaTier.ATTACK_SPEED),
    (95, GachaTier.LARGE_BOOST),
    (100, GachaTier.JACKPOT),
]

# Flat boosts per tier, as (attack, defense, max hp).
_BOOSTS: dict[GachaTier, tuple[int, int, int]] = {
    GachaTier.SMALL_BOOST: (1, 1, 5),
    GachaTier.MEDIUM_BOOST: (2, 2, 10),
    GachaTier.LARGE_BOOST: (5, 5, 25),
}

_TIER_TITLES: dict[GachaTier, str] = {
    GachaTier.SMALL_BOOST: "Minor",
    GachaTier.MEDIUM_BOOST: "Solid",
    GachaTier.LARGE_BOOST: "Mighty",
}


class StageReward(BaseModel):
    """Rewards granted when an encounter is cleared."""

    model_config = ConfigDict(frozen=True)

    points: int = Field(
        description="Upgrade points granted.",
    )
    coins: int = Field(
        description="Coins granted.",
    )


class GachaOutcome(BaseModel):
    """Result of a single gacha pull."""

    model_config = ConfigDict(frozen=True)

    stats: CharacterStats = Field(
        description="The player stats after the reward was applied.",
    )
    coin_bonus: int = Field(
        default=0,
        description="Coins won by the pull.",
    )
    tier: GachaTier = Field(
        description="The reward band that was drawn.",
    )
    message: str = Field(
        description="Human readable description of the reward.",
    )


def stage_clear_reward(stage: int, is_boss: bool, is_special: bool) -> StageReward:
    """
    Computes the rewards for killing the monster of a stage.

    Args:
        stage (int):
            The stage number of the cleared encounter.
        is_boss (bool):
            Whether the encounter was a boss.
        is_special (bool):
            Whether the encounter was a treasure encounter.

    Returns:
        StageReward:
            The upgrade points and coins granted.

    """
    base_coins = BASE_COIN_REWARD + (stage - 1) * COIN_REWARD_PER_STAGE
    if is_special:
        return StageReward(
            points=TREASURE_REWARD_POINTS,
            coins=base_coins * TREASURE_COIN_MULTIPLIER,
        )
    if is_boss:
        return StageReward(
            points=BOSS_REWARD_POINTS,
            coins=base_coins * BOSS_COIN_MULTIPLIER,
        )
    return StageReward(points=NORMAL_REWARD_POINTS, coins=base_coins)


def apply_stat_upgrade(stats: CharacterStats, kind: UpgradeStat) -> CharacterStats | None:
    """
    Applies one upgrade point to the player stats.

    Args:
        stats (CharacterStats):
            The current player stats.
        kind (UpgradeStat):
            The stat to raise.

    Returns:
        CharacterStats | None:
            The upgraded stats, or None when the stat cannot be raised further.

    """
    if kind == UpgradeStat.MAX_HP:
        max_hp = stats.max_hp + 10
        return stats.model_copy(update={"max_hp": max_hp, "hp": max_hp})
    if kind == UpgradeStat.ATTACK:
        return stats.model_copy(update={"attack": stats.attack + 2})
    if kind == UpgradeStat.DEFENSE:
        return stats.model_copy(update={"defense": stats.defense + 1})
    if kind == UpgradeStat.ATTACK_INTERVAL:
        if stats.attack_interval <= MIN_ATTACK_INTERVAL:
            return None
        interval = max(float(MIN_ATTACK_INTERVAL), stats.attack_interval - 50)
        return stats.model_copy(update={"attack_interval": interval})
    return None


def roll_gacha_tier(roll: float) -> GachaTier:
    """
    Maps a roll in [0, 100) to its gacha band.

    Args:
        roll (float):
            The roll value.

    Returns:
        GachaTier:
            The first band whose upper bound exceeds the roll.

    """
    for upper, tier in GACHA_BANDS:
        if roll < upper:
            return tier
    return GachaTier.JACKPOT


def _apply_boost(
    stats: CharacterStats, tier: GachaTier, stat_roll: int
) -> tuple[CharacterStats, str]:
    attack, defense, max_hp = _BOOSTS[tier]
    title = _TIER_TITLES[tier]
    if stat_roll == 0:
        return (
            stats.model_copy(update={"attack": stats.attack + attack}),
            f"{title} strength: attack +{attack}",
        )
    if stat_roll == 1:
        return (
            stats.model_copy(update={"defense": stats.defense + defense}),
            f"{title} toughness: defense +{defense}",
        )
    new_max = stats.max_hp + max_hp
    if tier == GachaTier.LARGE_BOOST:
        hp = new_max
    else:
        hp = min(new_max, stats.hp + max_hp)
    return (
        stats.model_copy(update={"max_hp": new_max, "hp": hp}),
        f"{title} vitality: max hp +{max_hp}",
    )


def pull_gacha(stats: CharacterStats, rng: random.Random) -> GachaOutcome:
    """
    Draws a gacha reward and applies it to the player stats.

    Args:
        stats (CharacterStats):
            The current player stats.
        rng (random.Random):
            Random generator used for the draws.

    Returns:
        GachaOutcome:
            The new stats, the coin bonus and the reward description.

    """
    tier = roll_gacha_tier(rng.random() * 100)

    if tier == GachaTier.JACKPOT:
        return GachaOutcome(
            stats=stats,
            coin_bonus=GACHA_JACKPOT_COINS,
            tier=tier,
            message=f"{tier.emoji} Jackpot! Won {GACHA_JACKPOT_COINS} coins!",
        )

    if tier == GachaTier.ATTACK_SPEED:
        interval = max(float(MIN_ATTACK_INTERVAL), stats.attack_interval - 25)
        return GachaOutcome(
            stats=stats.model_copy(update={"attack_interval": interval}),
            tier=tier,
            message=f"{tier.emoji} Sharp senses: attack speed up!",
        )

    new_stats, message = _apply_boost(stats, tier, rng.randrange(3))
    return GachaOutcome(stats=new_stats, tier=tier, message=f"{tier.emoji} {message}")
