"""Scoreboard persistence and state helpers."""

from repositories.persistence import InMemoryPersistence, ScoreboardPersistence, SqlPersistence
from repositories.store import ScoreboardStore

__all__ = [
    "InMemoryPersistence",
    "ScoreboardPersistence",
    "ScoreboardStore",
    "SqlPersistence",
]
