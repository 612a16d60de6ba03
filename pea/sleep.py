import logging
import math

from pea.constants import (
    SHORT_SLEEP_SECONDS, TIRED_SLEEP_SECONDS, MANUAL_SLEEP_MAX_ENERGY,
    WAKE_ENERGY_EARLY_MANUAL, WAKE_ENERGY_MANUAL, WAKE_ENERGY_TIRED,
    WAKE_ENERGY_LONG_AWAY, WAKE_ENERGY_DEFAULT, LONG_AWAY_WAKE_FUN,
    MSG_NOT_SLEEPY, MSG_FALLING_ASLEEP, MSG_NOT_RESTED, MSG_WOKE_EARLY,
    MSG_FEEL_BETTER, MSG_LONG_AWAY_WAKE, COUNTDOWN_TEXT,
)
from pea.models import Mood, SleepReason

logger = logging.getLogger(__name__)

# longAway has no entry: only the player can end it.
SLEEP_DURATIONS = {
    SleepReason.MANUAL: SHORT_SLEEP_SECONDS,
    SleepReason.TIRED_FROM_PLAY: TIRED_SLEEP_SECONDS,
}


class SleepStateMachine:
    """Awake <-> Sleeping(reason). Every method takes the current time explicitly."""

    def __init__(self, state):
        self.state = state

    @property
    def sleep(self):
        return self.state.sleep

    def fall_asleep(self, reason: SleepReason, now: float, message=None):
        self.sleep.enter(reason, now)
        self.state.override_mood(Mood.SLEEPY, message)
        logger.info("Pea fell asleep (%s)", reason.value)

    def toggle(self, now: float) -> bool:
        """Sleep button. Returns True if the sleep state changed."""
        if self.sleep.is_sleeping:
            return self.wake(early=True, now=now)
        if self.state.stats.energy >= MANUAL_SLEEP_MAX_ENERGY:
            self.state.override_mood(Mood.BORED, MSG_NOT_SLEEPY)
            return False
        self.fall_asleep(SleepReason.MANUAL, now, MSG_FALLING_ASLEEP)
        return True

    def wake(self, early: bool, now: float) -> bool:
        """Ends the current sleep according to its reason. Returns True if woken."""
        if not self.sleep.is_sleeping:
            return False

        state = self.state
        stats = state.stats
        reason = self.sleep.reason
        elapsed = now - self.sleep.started_at

        if reason is SleepReason.TIRED_FROM_PLAY:
            # Forced rest must complete.
            if early and elapsed < TIRED_SLEEP_SECONDS:
                state.override_mood(Mood.SLEEPY, MSG_NOT_RESTED)
                return False
            gain = WAKE_ENERGY_TIRED
            stats.adjust(energy=gain)
            self.sleep.clear()
            state.recompute_mood()
        elif reason is SleepReason.MANUAL:
            if early and elapsed < SHORT_SLEEP_SECONDS:
                gain, message = WAKE_ENERGY_EARLY_MANUAL, MSG_WOKE_EARLY
            else:
                gain, message = WAKE_ENERGY_MANUAL, MSG_FEEL_BETTER
            stats.adjust(energy=gain)
            self.sleep.clear()
            state.recompute_mood()
            state.message = message
        elif reason is SleepReason.LONG_AWAY:
            gain = WAKE_ENERGY_LONG_AWAY
            stats.adjust(energy=gain)
            stats.set(fun=LONG_AWAY_WAKE_FUN)
            self.sleep.clear()
            state.override_mood(Mood.BORED, MSG_LONG_AWAY_WAKE)
        else:
            gain = WAKE_ENERGY_DEFAULT
            stats.adjust(energy=gain)
            self.sleep.clear()
            state.recompute_mood()

        logger.info("Pea woke up (%s, +%g energy)", reason.value, gain)
        return True

    def duration(self):
        return SLEEP_DURATIONS.get(self.sleep.reason)

    def remaining(self, now: float):
        """Seconds left before auto-wake, or None when this sleep never ends on its own."""
        if not self.sleep.is_sleeping:
            return None
        duration = self.duration()
        if duration is None:
            return None
        return max(0.0, duration - (now - self.sleep.started_at))

    def countdown_text(self, now: float):
        remaining = self.remaining(now)
        if remaining is None:
            return None
        seconds = math.ceil(remaining)
        if seconds <= 0:
            return None
        return COUNTDOWN_TEXT.format(seconds=seconds)

    def tick(self, now: float) -> bool:
        """Auto-wake check, run every second while sleeping."""
        if not self.sleep.is_sleeping:
            return False
        duration = self.duration()
        if duration is None:
            return False
        if now - self.sleep.started_at >= duration:
            return self.wake(early=False, now=now)
        return False
