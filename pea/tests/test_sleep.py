import random

import pytest

from pea.constants import (
    SHORT_SLEEP_SECONDS, TIRED_SLEEP_SECONDS,
    MSG_NOT_SLEEPY, MSG_FALLING_ASLEEP, MSG_NOT_RESTED, MSG_WOKE_EARLY,
    MSG_FEEL_BETTER, MSG_LONG_AWAY_WAKE,
)
from pea.models import Mood, SleepReason, PeaState, PeaStats
from pea.sleep import SleepStateMachine


def _machine(**stats):
    state = PeaState(stats=PeaStats(**stats))
    return state, SleepStateMachine(state)


def _assert_invariant(state):
    sleep = state.sleep
    assert sleep.is_sleeping == (sleep.reason is not SleepReason.NONE) == (sleep.started_at is not None)


def test_toggle_refused_when_rested():
    state, machine = _machine(energy=50)
    assert machine.toggle(now=0.0) is False
    assert not state.sleep.is_sleeping
    assert state.mood.value == Mood.BORED
    assert state.message == MSG_NOT_SLEEPY
    assert state.stats.energy == 50


def test_manual_sleep_then_early_wake():
    state, machine = _machine(energy=30)
    assert machine.toggle(now=100.0) is True
    assert state.sleep.reason is SleepReason.MANUAL
    assert state.sleep.started_at == 100.0
    assert state.mood.value == Mood.SLEEPY
    assert state.message == MSG_FALLING_ASLEEP

    # Pressing the button again is an early wake.
    assert machine.toggle(now=101.0) is True
    assert state.stats.energy == 40
    assert state.message == MSG_WOKE_EARLY
    assert not state.sleep.is_sleeping
    _assert_invariant(state)


def test_manual_sleep_full_rest():
    state, machine = _machine(energy=30)
    machine.toggle(now=0.0)
    assert machine.wake(early=True, now=SHORT_SLEEP_SECONDS) is True
    assert state.stats.energy == 50
    assert state.message == MSG_FEEL_BETTER
    assert state.mood.value == Mood.HAPPY


def test_manual_auto_wake_after_short_sleep():
    state, machine = _machine(energy=30)
    machine.toggle(now=0.0)
    assert machine.tick(now=SHORT_SLEEP_SECONDS - 1) is False
    assert state.sleep.is_sleeping
    assert machine.tick(now=SHORT_SLEEP_SECONDS) is True
    assert state.stats.energy == 50
    assert not state.sleep.is_sleeping


def test_tired_early_wake_is_refused():
    state, machine = _machine(energy=5)
    machine.fall_asleep(SleepReason.TIRED_FROM_PLAY, now=0.0)
    assert machine.wake(early=True, now=TIRED_SLEEP_SECONDS - 1) is False
    assert state.sleep.is_sleeping
    assert state.sleep.reason is SleepReason.TIRED_FROM_PLAY
    assert state.sleep.started_at == 0.0
    assert state.stats.energy == 5
    assert state.mood.value == Mood.SLEEPY
    assert state.message == MSG_NOT_RESTED


def test_tired_auto_wake():
    state, machine = _machine(energy=5)
    machine.fall_asleep(SleepReason.TIRED_FROM_PLAY, now=0.0)
    assert machine.tick(now=TIRED_SLEEP_SECONDS - 0.5) is False
    assert machine.tick(now=TIRED_SLEEP_SECONDS) is True
    assert state.stats.energy == 35
    assert state.message is None
    assert state.mood.value == Mood.HAPPY
    _assert_invariant(state)


def test_long_away_never_wakes_by_itself():
    state, machine = _machine(energy=15, fun=60)
    machine.fall_asleep(SleepReason.LONG_AWAY, now=0.0)
    assert machine.tick(now=10 ** 6) is False
    assert machine.remaining(now=10.0) is None
    assert machine.countdown_text(now=10.0) is None

    assert machine.wake(early=True, now=1.0) is True
    assert state.stats.energy == 45
    assert state.stats.fun == 10
    assert state.mood.value == Mood.BORED
    assert state.mood.overridden
    assert state.message == MSG_LONG_AWAY_WAKE


def test_wake_while_awake_is_noop():
    state, machine = _machine(energy=30)
    assert machine.wake(early=False, now=0.0) is False
    assert state.stats.energy == 30


def test_countdown():
    state, machine = _machine(energy=30)
    machine.toggle(now=0.0)
    assert machine.remaining(now=1.2) == pytest.approx(SHORT_SLEEP_SECONDS - 1.2)
    assert machine.countdown_text(now=1.2) == "Resting: 4 s"
    assert machine.remaining(now=SHORT_SLEEP_SECONDS + 3) == 0.0
    assert machine.countdown_text(now=SHORT_SLEEP_SECONDS + 3) is None


def test_invariant_holds_across_random_transitions():
    rng = random.Random(3)
    state, machine = _machine(energy=20)
    now = 0.0
    for _ in range(300):
        now += rng.uniform(0, 8)
        action = rng.choice(['toggle', 'wake_early', 'wake', 'tick', 'tired', 'drain'])
        if action == 'toggle':
            machine.toggle(now)
        elif action == 'wake_early':
            machine.wake(True, now)
        elif action == 'wake':
            machine.wake(False, now)
        elif action == 'tick':
            machine.tick(now)
        elif action == 'tired' and not state.sleep.is_sleeping:
            machine.fall_asleep(SleepReason.TIRED_FROM_PLAY, now)
        else:
            state.stats.adjust(energy=-rng.uniform(0, 30))
        _assert_invariant(state)
        assert 0 <= state.stats.energy <= 100
