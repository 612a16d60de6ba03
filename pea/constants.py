import os


def _time_scale():
    try:
        scale = float(os.getenv("PEA_TIME_SCALE", "1.0"))
    except ValueError:
        return 1.0
    return scale if scale > 0 else 1.0


# --- GLOBAL CONFIGURATION ---
DB_FILE = os.getenv("PEA_DB_FILE", "pea_life.db")
TIME_SCALE_FACTOR = _time_scale()  # 1 = real time, 10 = 10x faster!

# --- STATS (0 - 100) ---
STAT_MIN = 0.0
STAT_MAX = 100.0

INITIAL_WATER = 60.0
INITIAL_SUN = 60.0
INITIAL_SOIL = 60.0
INITIAL_FUN = 50.0
INITIAL_ENERGY = 80.0

# Mood thresholds, checked in this order
THIRSTY_BELOW = 30.0
NEEDS_SUN_BELOW = 30.0
NEEDS_SOIL_BELOW = 30.0
SLEEPY_BELOW = 15.0
BORED_BELOW = 20.0

# --- DECAY (per tick) ---
DECAY_INTERVAL = 5.0 / TIME_SCALE_FACTOR
DECAY_PER_TICK = {
    'water': 2.0,
    'sun': 1.0,
    'soil': 0.5,
    'fun': 0.3,
    'energy': 0.2,
}

# --- CARE ACTIONS ---
CARE_AMOUNT = 25.0
CARE_FUN_BONUS = 3.0

# --- SLEEP ---
SLEEP_TICK_INTERVAL = 1.0 / TIME_SCALE_FACTOR
SHORT_SLEEP_SECONDS = 5.0 / TIME_SCALE_FACTOR
TIRED_SLEEP_SECONDS = 20.0 / TIME_SCALE_FACTOR
MANUAL_SLEEP_MAX_ENERGY = 50.0  # toggle is refused at or above this
TIRED_ENERGY_THRESHOLD = 8.0

WAKE_ENERGY_EARLY_MANUAL = 10.0
WAKE_ENERGY_MANUAL = 20.0
WAKE_ENERGY_TIRED = 30.0
WAKE_ENERGY_LONG_AWAY = 30.0
WAKE_ENERGY_DEFAULT = 15.0
LONG_AWAY_WAKE_FUN = 10.0

# --- ABSENCE ---
LONG_AWAY_MINUTES = 30.0
LONG_AWAY_ENERGY = 15.0
LONG_AWAY_PENALTY = {
    'water': 10.0,
    'sun': 10.0,
    'soil': 5.0,
}

# --- MINI-GAMES ---
TAP_FUN_PER_POINT = 1.5
TAP_ENERGY_BASE = 4.0
TAP_ENERGY_PER_POINT = 0.2
TAP_POINTS_PER_COIN = 3

REFLEX_FUN_PER_POINT = 1.2
REFLEX_ENERGY_PER_POINT = 0.6

FLAPPY_FUN_PER_POINT = 2.0
FLAPPY_ENERGY_PER_POINT = 1.2
FLAPPY_MAX_ENERGY_COST = 15.0

# --- STORAGE KEYS ---
KEY_WATER = 'PEA_WATER'
KEY_SUN = 'PEA_SUN'
KEY_SOIL = 'PEA_SOIL'
KEY_FUN = 'PEA_FUN'
KEY_ENERGY = 'PEA_ENERGY'
KEY_LAST_VISIT = 'PEA_LAST_VISIT'  # epoch milliseconds
KEY_COINS = 'PEA_COINS'
KEY_FLAPPY_HIGHSCORE = 'PEA_FLAPPY_HIGHSCORE'

STAT_KEYS = {
    'water': KEY_WATER,
    'sun': KEY_SUN,
    'soil': KEY_SOIL,
    'fun': KEY_FUN,
    'energy': KEY_ENERGY,
}
ALL_KEYS = list(STAT_KEYS.values()) + [KEY_LAST_VISIT, KEY_COINS, KEY_FLAPPY_HIGHSCORE]

# --- MESSAGES ---
MSG_NOT_SLEEPY = "I'm not sleepy yet, I don't want to sleep now 😤"
MSG_FALLING_ASLEEP = "So tired, taking a little nap 😴"
MSG_NOT_RESTED = "I haven't rested enough yet, I need a bit more sleep… 😴"
MSG_WOKE_EARLY = "I had only just fallen asleep, but fine… 😌"
MSG_FEEL_BETTER = "Seems to feel a little better 😊"
MSG_LONG_AWAY_WAKE = "I waited so long while you were gone… I got a bit bored. Shall we play? 🎮"

MSG_PLAY_MENU = "Pea is looking for a game to play 🎮"
MSG_PLAY_LONG_AWAY = "Pea is asleep… You need to wake it up first 😴"
MSG_PLAY_TIRED = "Got very tired while playing, let it rest and play again later 😴"
MSG_PLAY_SLEEPING = "Pea is asleep and doesn't want to play right now 😴"

MSG_TAP_EMPTY = "You didn't tap at all, let's try again next time 😌"
MSG_TAP_TIRED = "Got so tired playing that it fell asleep 😴 (+{coins} 🍃)"
MSG_TAP_DONE = "Game over! You scored {score} points 🎮 (+{coins} 🍃)"
MSG_REFLEX_EMPTY = "That reflex round was just a warm-up 😌"
MSG_REFLEX_DONE = "You got {score} right in the reflex game ⚡ (+{coins} 🍃)"
MSG_FLAPPY_EMPTY = "The Flappy Pea attempt is over 🪽"
MSG_FLAPPY_RECORD = "New record! You passed {score} pipes 🪽 (Previous: {previous})  +{coins} 🍃"
MSG_FLAPPY_DONE = "You passed {score} pipes in Flappy Pea! 🪽 (+{coins} 🍃)"

HINT_LONG_AWAY = "Pea seems to have fallen asleep waiting for you 😴"
MOOD_HINTS = {
    'happy': "Pea looks happy right now 🥰",
    'thirsty': "Pea looks thirsty 💧",
    'needsSun': "It needs a little sunshine ☀️",
    'needsSoil': "Let's enrich the soil 🌱",
    'sleepy': "Very tired, getting sleepy 😴",
    'playing': "Having so much fun right now! 😆",
    'bored': "Looks like it wants to play a game 🎮",
}
COUNTDOWN_TEXT = "Resting: {seconds} s"
