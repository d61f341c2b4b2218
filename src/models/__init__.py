"""ORM models."""

from models.base import Base
from models.player import StoredPlayer
from models.scoreboard import StoredScoreboard

__all__ = [
    "Base",
    "StoredPlayer",
    "StoredScoreboard",
]
