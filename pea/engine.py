import asyncio
import logging
import time

from pea.constants import (
    ALL_KEYS, STAT_KEYS, KEY_LAST_VISIT, KEY_COINS, KEY_FLAPPY_HIGHSCORE,
    DECAY_INTERVAL, SLEEP_TICK_INTERVAL, CARE_AMOUNT, CARE_FUN_BONUS,
    MSG_PLAY_MENU, MSG_PLAY_LONG_AWAY, MSG_PLAY_TIRED, MSG_PLAY_SLEEPING,
    MOOD_HINTS, HINT_LONG_AWAY,
)
from pea.minigames import EconomyIntegrator
from pea.models import PeaState, SleepReason
from pea import session
from pea.session import format_number, to_epoch_ms
from pea.sleep import SleepStateMachine
from pea.timers import RepeatingTimer

logger = logging.getLogger(__name__)


class PeaEngine:
    """Owns the pea: stats, mood, sleep, coins and their persistence.

    Build it with `await PeaEngine.create(db)` and release it with `await engine.dispose()`.
    All methods run on one event loop; persistence writes are fire-and-forget tasks.
    """

    def __init__(self, db, clock=time.time):
        self.db = db
        self.clock = clock
        self.state = PeaState()
        self.sleep_machine = SleepStateMachine(self.state)
        self.economy = EconomyIntegrator(self.state, self.sleep_machine)

        self._decay_timer = RepeatingTimer(DECAY_INTERVAL, self.decay_tick, name="pea-decay")
        self._sleep_timer = RepeatingTimer(SLEEP_TICK_INTERVAL, self.sleep_tick, name="pea-sleep")
        self._loop = None
        self._loaded = False
        self._resumed = False
        self._disposed = False
        self._pending = set()
        self._write_lock = None
        self._saved_stats = None
        self._saved_coins = None

    @classmethod
    async def create(cls, db, clock=time.time):
        engine = cls(db, clock)
        await engine.resume()
        return engine

    async def resume(self):
        """Loads the previous session once. Persistence problems only cost us the saved data."""
        if self._resumed:
            return
        self._resumed = True
        self._loop = asyncio.get_running_loop()
        self._write_lock = asyncio.Lock()
        now = self.clock()

        try:
            await self.db.initialize()
            stored = await self.db.multi_get(ALL_KEYS)
        except Exception as e:
            logger.warning("Loading failed, starting fresh (Error: %s)", e)
            stored = {}

        session.resume(self.state, stored, now)

        try:
            await self.db.set_item(KEY_LAST_VISIT, to_epoch_ms(now))
        except Exception as e:
            logger.warning("Could not record visit time (Error: %s)", e)

        self._saved_coins = self.state.coins
        self._loaded = True
        self._persist()
        self._sync_timers()

    async def dispose(self):
        if self._disposed:
            return
        self._persist()
        self._disposed = True
        self._decay_timer.cancel()
        self._sleep_timer.cancel()
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        logger.info("Pea engine disposed")

    # --- Read access ---

    @property
    def stats(self):
        return self.state.stats

    @property
    def water(self):
        return self.state.stats.water

    @property
    def sun(self):
        return self.state.stats.sun

    @property
    def soil(self):
        return self.state.stats.soil

    @property
    def fun(self):
        return self.state.stats.fun

    @property
    def energy(self):
        return self.state.stats.energy

    @property
    def mood(self):
        return self.state.mood.value

    @property
    def is_sleeping(self):
        return self.state.sleep.is_sleeping

    @property
    def sleep_reason(self):
        return self.state.sleep.reason

    @property
    def sleep_started_at(self):
        return self.state.sleep.started_at

    @property
    def coins(self):
        return self.state.coins

    @property
    def flappy_high_score(self):
        return self.state.flappy_high_score

    @property
    def is_game_open(self):
        return self.state.is_game_open

    @property
    def message(self):
        return self.state.message

    @property
    def status_message(self):
        """What the pea 'says': the custom message, else a hint for the mood."""
        if self.state.message:
            return self.state.message
        if self.is_sleeping and self.sleep_reason is SleepReason.LONG_AWAY:
            return HINT_LONG_AWAY
        return MOOD_HINTS[self.mood.value]

    def sleep_remaining(self):
        return self.sleep_machine.remaining(self.clock())

    def countdown_text(self):
        return self.sleep_machine.countdown_text(self.clock())

    def to_dict(self):
        return {
            **self.state.stats.to_dict(),
            'mood': self.mood.value,
            'is_sleeping': self.is_sleeping,
            'sleep_reason': self.sleep_reason.value,
            'sleep_started_at': self.sleep_started_at,
            'coins': self.coins,
            'flappy_high_score': self.flappy_high_score,
            'message': self.status_message,
            'is_game_open': self.is_game_open,
        }

    # --- Care actions ---

    def _care(self, stat):
        if self.is_sleeping:
            return False
        self.state.stats.adjust(**{stat: CARE_AMOUNT, 'fun': CARE_FUN_BONUS})
        self.state.recompute_mood()
        self._changed()
        return True

    def give_water(self):
        return self._care('water')

    def give_sun(self):
        return self._care('sun')

    def give_soil(self):
        return self._care('soil')

    def recompute_mood(self):
        self.state.recompute_mood()

    # --- Sleep ---

    def toggle_sleep(self):
        changed = self.sleep_machine.toggle(self.clock())
        self._changed()
        return changed

    def wake(self, early=True):
        woke = self.sleep_machine.wake(early, self.clock())
        self._changed()
        return woke

    # --- Mini-games ---

    def request_play(self):
        """Returns True if the game menu may open."""
        if not self.is_sleeping:
            self.state.is_game_open = True
            self.state.message = MSG_PLAY_MENU
            self._changed()
            return True
        reason = self.sleep_reason
        if reason is SleepReason.LONG_AWAY:
            self.state.message = MSG_PLAY_LONG_AWAY
        elif reason is SleepReason.TIRED_FROM_PLAY:
            self.state.message = MSG_PLAY_TIRED
        else:
            self.state.message = MSG_PLAY_SLEEPING
        return False

    def close_game(self):
        self.state.is_game_open = False
        self._changed()

    def start_playing(self, message):
        self.economy.start_playing(message)

    def on_tap_finished(self, score):
        coins = self.economy.on_tap_finished(score, self.clock())
        self._changed()
        return coins

    def on_reflex_finished(self, score):
        coins = self.economy.on_reflex_finished(score)
        self._changed()
        return coins

    async def on_flappy_finished(self, score):
        """Applies the result, waits for a new high score to be written, then leaves the game."""
        previous = self.state.flappy_high_score
        coins = self.economy.on_flappy_finished(score)
        if self.state.flappy_high_score != previous:
            try:
                await self.db.set_item(KEY_FLAPPY_HIGHSCORE, str(self.state.flappy_high_score))
            except Exception as e:
                logger.warning("Flappy high score could not be saved (Error: %s)", e)
        self.close_game()
        return coins

    # --- Timers ---

    def decay_tick(self):
        state = self.state
        if state.sleep.is_sleeping or state.is_game_open:
            logger.debug("Decay skipped (sleeping=%s, game open=%s)",
                         state.sleep.is_sleeping, state.is_game_open)
            return False
        state.stats.tick()
        state.recompute_mood()
        logger.debug("Decay tick: %s", state.stats.to_dict())
        self._changed()
        return True

    def sleep_tick(self):
        woke = self.sleep_machine.tick(self.clock())
        if woke:
            self._changed()
        return woke

    def _sync_timers(self):
        if self._disposed or self._loop is None:
            return
        if self.is_sleeping or self.is_game_open:
            self._decay_timer.cancel()
        else:
            self._decay_timer.start(self._loop)
        if self.is_sleeping:
            self._sleep_timer.start(self._loop)
        else:
            self._sleep_timer.cancel()

    # --- Persistence ---

    def _changed(self):
        self._persist()
        self._sync_timers()

    def _persist(self):
        """Schedules writes for whatever differs from the last save."""
        if not self._loaded or self._disposed:
            return
        snapshot = self.state.stats.snapshot()
        if snapshot != self._saved_stats:
            self._saved_stats = snapshot
            pairs = [(KEY_LAST_VISIT, to_epoch_ms(self.clock()))]
            pairs += [(key, format_number(getattr(self.state.stats, name)))
                      for name, key in STAT_KEYS.items()]
            self._schedule(self._write(pairs, "Pea state"))
        if self.state.coins != self._saved_coins:
            self._saved_coins = self.state.coins
            self._schedule(self._write([(KEY_COINS, str(self.state.coins))], "Pea coins"))

    async def _write(self, pairs, what):
        # Writes land in the order they were scheduled.
        async with self._write_lock:
            try:
                await self.db.multi_set(pairs)
            except Exception as e:
                logger.warning("%s could not be saved (Error: %s)", what, e)

    def _schedule(self, coro):
        task = self._loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
