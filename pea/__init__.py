"""Pocket Pea: a virtual pea plant that needs water, sun, soil, fun and sleep."""

from pea.models import Mood, SleepReason, PeaStats, PeaState, clamp, calculate_mood
from pea.database import DatabaseManager
from pea.engine import PeaEngine

__version__ = "0.1.0"
__all__ = [
    "PeaEngine", "DatabaseManager",
    "Mood", "SleepReason", "PeaStats", "PeaState", "clamp", "calculate_mood",
]
