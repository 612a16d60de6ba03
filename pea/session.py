"""Session resume: turning stored strings back into a pea, and punishing long absences."""

import logging
import math

from pea.constants import (
    INITIAL_WATER, INITIAL_SUN, INITIAL_SOIL, INITIAL_FUN, INITIAL_ENERGY,
    STAT_KEYS, KEY_LAST_VISIT, KEY_COINS, KEY_FLAPPY_HIGHSCORE,
    LONG_AWAY_MINUTES, LONG_AWAY_ENERGY, LONG_AWAY_PENALTY,
)
from pea.models import Mood, SleepReason

logger = logging.getLogger(__name__)

STAT_DEFAULTS = {
    'water': INITIAL_WATER,
    'sun': INITIAL_SUN,
    'soil': INITIAL_SOIL,
    'fun': INITIAL_FUN,
    'energy': INITIAL_ENERGY,
}


def parse_number(raw, default):
    """Missing, empty or unparsable values fall back to the default."""
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def parse_count(raw, default=0):
    value = parse_number(raw, None)
    if value is None:
        return default
    return max(0, int(value))


def format_number(value):
    """Base-10 string: integral values lose the '.0'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_epoch_ms(seconds):
    return str(int(seconds * 1000))


def absence_minutes(raw_last_visit, now):
    """Minutes since the stored visit, or None when there is no usable visit."""
    last_visit_ms = parse_number(raw_last_visit, None)
    if last_visit_ms is None:
        return None
    last_visit = last_visit_ms / 1000.0
    # Clock skew: a visit "in the future" counts as now.
    if last_visit > now:
        last_visit = now
    return (now - last_visit) / 60.0


def resume(state, stored, now):
    """Seeds the state from stored values and applies the absence penalty.

    Returns True if the pea was away long enough to be put to sleep.
    """
    stats = state.stats
    stats.set(**{
        name: parse_number(stored.get(key), STAT_DEFAULTS[name])
        for name, key in STAT_KEYS.items()
    })
    state.coins = parse_count(stored.get(KEY_COINS))
    state.flappy_high_score = parse_count(stored.get(KEY_FLAPPY_HIGHSCORE))

    minutes = absence_minutes(stored.get(KEY_LAST_VISIT), now)
    long_away = minutes is not None and minutes > LONG_AWAY_MINUTES

    if long_away:
        stats.set(energy=LONG_AWAY_ENERGY)
        stats.adjust(**{name: -amount for name, amount in LONG_AWAY_PENALTY.items()})
        state.sleep.enter(SleepReason.LONG_AWAY, now)
        state.override_mood(Mood.SLEEPY)
        logger.info("Pea was away for %.1f minutes, fell asleep waiting", minutes)
    else:
        state.recompute_mood()
    return long_away
