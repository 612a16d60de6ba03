import logging
import math

from pea.constants import (
    TAP_FUN_PER_POINT, TAP_ENERGY_BASE, TAP_ENERGY_PER_POINT, TAP_POINTS_PER_COIN,
    TIRED_ENERGY_THRESHOLD,
    REFLEX_FUN_PER_POINT, REFLEX_ENERGY_PER_POINT,
    FLAPPY_FUN_PER_POINT, FLAPPY_ENERGY_PER_POINT, FLAPPY_MAX_ENERGY_COST,
    MSG_TAP_EMPTY, MSG_TAP_TIRED, MSG_TAP_DONE,
    MSG_REFLEX_EMPTY, MSG_REFLEX_DONE,
    MSG_FLAPPY_EMPTY, MSG_FLAPPY_RECORD, MSG_FLAPPY_DONE,
)
from pea.models import Mood, SleepReason

logger = logging.getLogger(__name__)


class EconomyIntegrator:
    """Turns a finished mini-game's score into fun, energy and coins.

    The games themselves are black boxes; only their integer score matters here.
    Each handler returns the number of coins earned.
    """

    def __init__(self, state, sleep_machine):
        self.state = state
        self.sleep_machine = sleep_machine

    def start_playing(self, message):
        self.state.override_mood(Mood.PLAYING, message)

    def _play(self, fun_gain, energy_cost, coins):
        self.state.stats.adjust(fun=fun_gain, energy=-energy_cost)
        self.state.add_coins(coins)

    def on_tap_finished(self, score: int, now: float) -> int:
        if score <= 0:
            self.state.message = MSG_TAP_EMPTY
            return 0
        coins = max(1, math.floor(score / TAP_POINTS_PER_COIN))
        self._play(score * TAP_FUN_PER_POINT, TAP_ENERGY_BASE + score * TAP_ENERGY_PER_POINT, coins)

        if self.state.stats.energy < TIRED_ENERGY_THRESHOLD:
            self.sleep_machine.fall_asleep(
                SleepReason.TIRED_FROM_PLAY, now, MSG_TAP_TIRED.format(coins=coins)
            )
            return coins

        self.state.recompute_mood()
        self.state.message = MSG_TAP_DONE.format(score=score, coins=coins)
        return coins

    def on_reflex_finished(self, score: int) -> int:
        if score <= 0:
            self.state.message = MSG_REFLEX_EMPTY
            return 0
        coins = score
        self._play(score * REFLEX_FUN_PER_POINT, score * REFLEX_ENERGY_PER_POINT, coins)
        self.state.recompute_mood()
        self.state.message = MSG_REFLEX_DONE.format(score=score, coins=coins)
        return coins

    def on_flappy_finished(self, score: int) -> int:
        """Also tracks the high score; the caller persists it when it changes."""
        if score <= 0:
            self.state.message = MSG_FLAPPY_EMPTY
            return 0

        previous = self.state.flappy_high_score
        is_record = score > previous
        if is_record:
            self.state.flappy_high_score = score
            logger.info("New flappy record: %d (was %d)", score, previous)

        coins = score
        energy_cost = min(FLAPPY_MAX_ENERGY_COST, score * FLAPPY_ENERGY_PER_POINT)
        self._play(score * FLAPPY_FUN_PER_POINT, energy_cost, coins)
        self.state.recompute_mood()
        if is_record:
            self.state.message = MSG_FLAPPY_RECORD.format(score=score, previous=previous, coins=coins)
        else:
            self.state.message = MSG_FLAPPY_DONE.format(score=score, coins=coins)
        return coins
