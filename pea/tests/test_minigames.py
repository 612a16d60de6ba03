import random

import pytest

from pea.constants import MSG_TAP_EMPTY, MSG_REFLEX_EMPTY, MSG_FLAPPY_EMPTY
from pea.minigames import EconomyIntegrator
from pea.models import Mood, SleepReason, PeaState, PeaStats
from pea.sleep import SleepStateMachine


def _economy(**stats):
    state = PeaState(stats=PeaStats(**stats))
    return state, EconomyIntegrator(state, SleepStateMachine(state))


def test_start_playing_sets_mood_and_message():
    state, economy = _economy()
    economy.start_playing("Tap as fast as you can!")
    assert state.mood.value == Mood.PLAYING
    assert state.message == "Tap as fast as you can!"


def test_tap_game_normal_result():
    state, economy = _economy(fun=50, energy=80)
    coins = economy.on_tap_finished(10, now=0.0)
    assert coins == 3
    assert state.coins == 3
    assert state.stats.fun == pytest.approx(65.0)
    assert state.stats.energy == pytest.approx(74.0)
    assert state.mood.value == Mood.HAPPY
    assert "10" in state.message and "+3" in state.message
    assert not state.sleep.is_sleeping


def test_tap_game_small_score_still_pays_one_coin():
    state, economy = _economy()
    assert economy.on_tap_finished(1, now=0.0) == 1
    assert state.coins == 1


def test_tap_game_exhaustion_forces_sleep():
    state, economy = _economy(fun=50, energy=10)
    coins = economy.on_tap_finished(5, now=42.0)
    assert coins == 1
    assert state.stats.energy == pytest.approx(5.0)
    assert state.stats.fun == pytest.approx(57.5)
    assert state.sleep.reason is SleepReason.TIRED_FROM_PLAY
    assert state.sleep.started_at == 42.0
    assert state.mood.value == Mood.SLEEPY
    assert "+1" in state.message


@pytest.mark.parametrize("score", [0, -3])
def test_empty_scores_change_nothing(score):
    state, economy = _economy()
    before = state.stats.snapshot()
    assert economy.on_tap_finished(score, now=0.0) == 0
    assert state.message == MSG_TAP_EMPTY
    assert economy.on_reflex_finished(score) == 0
    assert state.message == MSG_REFLEX_EMPTY
    assert economy.on_flappy_finished(score) == 0
    assert state.message == MSG_FLAPPY_EMPTY
    assert state.stats.snapshot() == before
    assert state.coins == 0
    assert state.flappy_high_score == 0


def test_reflex_game():
    state, economy = _economy(fun=50, energy=80)
    assert economy.on_reflex_finished(5) == 5
    assert state.stats.fun == pytest.approx(56.0)
    assert state.stats.energy == pytest.approx(77.0)
    assert state.coins == 5
    assert "5" in state.message


def test_flappy_new_record():
    state, economy = _economy(fun=50, energy=80)
    state.flappy_high_score = 3
    assert economy.on_flappy_finished(7) == 7
    assert state.flappy_high_score == 7
    assert state.coins == 7
    assert state.stats.fun == pytest.approx(64.0)
    assert state.stats.energy == pytest.approx(80 - 8.4)
    assert state.message.startswith("New record!")
    assert "Previous: 3" in state.message


def test_flappy_without_record_keeps_high_score():
    state, economy = _economy(energy=80)
    state.flappy_high_score = 20
    economy.on_flappy_finished(4)
    assert state.flappy_high_score == 20
    assert not state.message.startswith("New record!")


def test_flappy_energy_cost_is_capped():
    state, economy = _economy(fun=0, energy=80)
    economy.on_flappy_finished(50)
    assert state.stats.energy == pytest.approx(65.0)
    assert state.stats.fun == 100.0


def test_coins_never_decrease():
    rng = random.Random(11)
    state, economy = _economy()
    previous = 0
    for i in range(200):
        score = rng.randint(-2, 25)
        game = rng.choice(['tap', 'reflex', 'flappy'])
        if game == 'tap':
            economy.on_tap_finished(score, now=float(i))
        elif game == 'reflex':
            economy.on_reflex_finished(score)
        else:
            economy.on_flappy_finished(score)
        assert state.coins >= previous
        previous = state.coins
        if state.sleep.is_sleeping:
            state.sleep.clear()
