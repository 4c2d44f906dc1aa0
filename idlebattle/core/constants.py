"""
Constants and enumerations for the combat engine.

Defines the fixed game tuning values (initial stats, reward tables, cooldown
units, display cue durations) and the enumerations used throughout the engine.
"""

from enum import Enum

# The player can hold at most this many learned skills.
MAX_SKILLS = 4

# Ultimate skill cooldown, in seconds.
ULTIMATE_SKILL_COOLDOWN = 50

# Chance that a non-boss stage is replaced by a treasure encounter.
SPECIAL_STAGE_CHANCE = 0.2

# Lowest attack interval (ms) any combatant may have.
MIN_ATTACK_INTERVAL = 100

# Period of the cooldown decay and escape countdown, in ms.
COOLDOWN_TICK_MS = 100

GACHA_COST = 50
GACHA_JACKPOT_COINS = 150

# Number of skills offered after a kill.
SKILL_OFFER_SIZE = 3

# ---- Monster generation ----
MONSTER_BASE_HP = 80
MONSTER_BASE_ATTACK = 6
MONSTER_BASE_DEFENSE = 3
MONSTER_ATTACK_INTERVAL = 2500
STAGE_SCALING = 0.3
BOSS_STAGE_PERIOD = 5
BOSS_HP_MULTIPLIER = 2.2
BOSS_ATTACK_MULTIPLIER = 1.5
BOSS_DEFENSE_MULTIPLIER = 1.2
EMPOWERED_MULTIPLIER = 1.5
# From this stage on monsters get an extra defense ramp.
DEFENSE_RAMP_STAGE = 10

TREASURE_HP = 50
TREASURE_DEFENSE = 50
TREASURE_ESCAPE_MS = 10000

# ---- Rewards ----
NORMAL_REWARD_POINTS = 1
BOSS_REWARD_POINTS = 5
TREASURE_REWARD_POINTS = 3
BASE_COIN_REWARD = 20
COIN_REWARD_PER_STAGE = 2
BOSS_COIN_MULTIPLIER = 5
TREASURE_COIN_MULTIPLIER = 3

# ---- Transient display cue durations (ms) ----
DAMAGE_TEXT_MS = 500
SKILL_DAMAGE_TEXT_MS = 800
DAMAGE_TAKEN_TEXT_MS = 500
SCREEN_SHAKE_MS = 400
ULTIMATE_SCREEN_SHAKE_MS = 500
PLAYER_ATTACK_ANIMATION_MS = 300
MONSTER_ATTACK_ANIMATION_MS = 400


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class GameState(NiceEnum):
    """Lifecycle state of the engine. Exactly one is active at a time."""

    START_SCREEN = "startScreen"
    PLAYING = "playing"
    PAUSED = "paused"
    UPGRADE = "upgrade"
    GAME_OVER = "gameOver"

    @property
    def color(self) -> str:
        """Returns the color string associated with this state."""
        return {
            GameState.START_SCREEN: "bold white",
            GameState.PLAYING: "bold green",
            GameState.PAUSED: "bold yellow",
            GameState.UPGRADE: "bold cyan",
            GameState.GAME_OVER: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class UpgradeStat(NiceEnum):
    """Player stats that can be raised with upgrade points."""

    MAX_HP = "max_hp"
    ATTACK = "attack"
    DEFENSE = "defense"
    ATTACK_INTERVAL = "attack_interval"


class AnimationState(NiceEnum):
    """Animation pulses a combatant can show."""

    ATTACKING = "attacking"
    HIT = "hit"


class CueTarget(NiceEnum):
    """Which combatant a display cue belongs to."""

    PLAYER = "player"
    MONSTER = "monster"


class GachaTier(NiceEnum):
    """Reward bands of the gacha pull."""

    SMALL_BOOST = "small_boost"
    MEDIUM_BOOST = "medium_boost"
    ATTACK_SPEED = "attack_speed"
    LARGE_BOOST = "large_boost"
    JACKPOT = "jackpot"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this tier."""
        return {
            GachaTier.SMALL_BOOST: "🔹",
            GachaTier.MEDIUM_BOOST: "🔷",
            GachaTier.ATTACK_SPEED: "⚡",
            GachaTier.LARGE_BOOST: "✨",
            GachaTier.JACKPOT: "💰",
        }.get(self, "❔")


class TimerGroup(NiceEnum):
    """Groups used to suspend and cancel related timers together."""

    # Loops that only run while playing.
    PLAYING = "playing"
    # One-shot follow-ups owned by the current encounter.
    ENCOUNTER = "encounter"
    # Clearing of transient presentation cues.
    DISPLAY = "display"
