"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    EloParameters,
    PlayerEloCalculator,
    PlayerEloEvent,
    calculate_elo_change,
    calculate_expected_score,
)

__all__ = [
    "EloParameters",
    "PlayerEloCalculator",
    "PlayerEloEvent",
    "calculate_elo_change",
    "calculate_expected_score",
]
