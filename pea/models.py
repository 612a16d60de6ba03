from enum import Enum
from dataclasses import dataclass, field
from typing import Optional

from pea.constants import (
    STAT_MIN, STAT_MAX,
    INITIAL_WATER, INITIAL_SUN, INITIAL_SOIL, INITIAL_FUN, INITIAL_ENERGY,
    THIRSTY_BELOW, NEEDS_SUN_BELOW, NEEDS_SOIL_BELOW, SLEEPY_BELOW, BORED_BELOW,
    DECAY_PER_TICK,
)


class Mood(str, Enum):
    """Discrete emotional state shown to the player."""
    HAPPY = 'happy'
    THIRSTY = 'thirsty'
    NEEDS_SUN = 'needsSun'
    NEEDS_SOIL = 'needsSoil'
    SLEEPY = 'sleepy'
    PLAYING = 'playing'
    BORED = 'bored'


class SleepReason(str, Enum):
    NONE = 'none'
    MANUAL = 'manual'
    TIRED_FROM_PLAY = 'tiredFromPlay'
    LONG_AWAY = 'longAway'


def clamp(value: float) -> float:
    return max(STAT_MIN, min(STAT_MAX, value))


def calculate_mood(water: float, sun: float, soil: float, fun: float, energy: float) -> Mood:
    """Thirst dominates every other need; the first failing check wins."""
    if water < THIRSTY_BELOW:
        return Mood.THIRSTY
    if sun < NEEDS_SUN_BELOW:
        return Mood.NEEDS_SUN
    if soil < NEEDS_SOIL_BELOW:
        return Mood.NEEDS_SOIL
    if energy < SLEEPY_BELOW:
        return Mood.SLEEPY
    if fun < BORED_BELOW:
        return Mood.BORED
    return Mood.HAPPY


@dataclass
class PeaStats:
    """The five needs, always kept inside 0-100."""
    water: float = INITIAL_WATER
    sun: float = INITIAL_SUN
    soil: float = INITIAL_SOIL
    fun: float = INITIAL_FUN
    energy: float = INITIAL_ENERGY

    NAMES = ('water', 'sun', 'soil', 'fun', 'energy')

    def __post_init__(self):
        for name in self.NAMES:
            setattr(self, name, clamp(getattr(self, name)))

    def clamp(self, value):
        return clamp(value)

    def adjust(self, **deltas):
        """Adds each delta to its stat and clamps the result."""
        for name, delta in deltas.items():
            if name not in self.NAMES:
                raise KeyError(name)
            setattr(self, name, clamp(getattr(self, name) + delta))

    def set(self, **values):
        for name, value in values.items():
            if name not in self.NAMES:
                raise KeyError(name)
            setattr(self, name, clamp(value))

    def tick(self):
        """One decay step."""
        self.adjust(**{name: -amount for name, amount in DECAY_PER_TICK.items()})

    def mood(self) -> Mood:
        return calculate_mood(self.water, self.sun, self.soil, self.fun, self.energy)

    def snapshot(self):
        return tuple(getattr(self, name) for name in self.NAMES)

    def to_dict(self):
        return {name: getattr(self, name) for name in self.NAMES}


@dataclass
class MoodState:
    """Mood with its source: derived from stats, or an override set by a lifecycle event.

    An override lasts until the next recompute (decay tick or explicit call).
    """
    value: Mood
    overridden: bool = False

    @classmethod
    def derived(cls, stats: PeaStats) -> 'MoodState':
        return cls(stats.mood(), overridden=False)

    @classmethod
    def override(cls, mood: Mood) -> 'MoodState':
        return cls(mood, overridden=True)


@dataclass
class SleepState:
    """Sleeping iff a reason is set iff a start time is set."""
    reason: SleepReason = SleepReason.NONE
    started_at: Optional[float] = None

    @property
    def is_sleeping(self) -> bool:
        return self.reason is not SleepReason.NONE

    def enter(self, reason: SleepReason, now: float):
        if reason is SleepReason.NONE:
            raise ValueError("cannot enter sleep without a reason")
        self.reason = reason
        self.started_at = now

    def clear(self):
        self.reason = SleepReason.NONE
        self.started_at = None


@dataclass
class PeaState:
    """Everything the engine owns in memory."""
    stats: PeaStats = field(default_factory=PeaStats)
    mood: MoodState = None
    sleep: SleepState = field(default_factory=SleepState)
    coins: int = 0
    flappy_high_score: int = 0
    message: Optional[str] = None
    is_game_open: bool = False

    def __post_init__(self):
        if self.mood is None:
            self.mood = MoodState.derived(self.stats)

    def recompute_mood(self):
        """Re-derives mood from stats and drops any custom message."""
        self.mood = MoodState.derived(self.stats)
        self.message = None

    def override_mood(self, mood: Mood, message: Optional[str] = None):
        self.mood = MoodState.override(mood)
        if message is not None:
            self.message = message

    def add_coins(self, amount: int):
        if amount < 0:
            raise ValueError("coins can only be awarded, not taken")
        self.coins += amount
