"""Pairwise Elo logic for elo-style scoreboards."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor

WIN = 1.0
DRAW = 0.5
LOSS = 0.0


@dataclass(frozen=True)
class EloParameters:
    initial_elo: int = 1500
    k_factor: float = 32.0
    scale_factor: float = 400.0


@dataclass(frozen=True)
class PlayerEloEvent:
    player: str
    opponent: str
    actual_score: float
    expected_score: float
    pre_elo: int
    elo_delta: int
    post_elo: int


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def _round_half_up(value: float) -> int:
    return int(floor(value + 0.5))


def calculate_elo_change(
    rating: float,
    opponent_rating: float,
    actual_score: float,
    *,
    k_factor: float = 32.0,
    scale_factor: float = 400.0,
) -> int:
    """Whole-point rating change for the side scoring ``actual_score``.

    The opponent's change is the negation. A non-zero surprise never rounds
    away to nothing: it moves the rating by at least one point. When the
    result matches the expectation exactly, as in a draw between equal
    ratings, the change is 0 since neither side has a direction to move in.
    """
    if actual_score not in (WIN, DRAW, LOSS):
        raise ValueError(f"actual_score must be one of 0, 0.5 or 1, got {actual_score}")

    expected = calculate_expected_score(rating, opponent_rating, scale_factor)
    surprise = actual_score - expected
    change = _round_half_up(k_factor * surprise)
    if change == 0 and surprise != 0:
        change = -1 if surprise < 0 else 1
    return change


class PlayerEloCalculator:
    """Stateless two-player Elo update against ratings held on a scoreboard."""

    def __init__(self, params: EloParameters) -> None:
        self.params = params

    def process_outcome(
        self,
        *,
        player: str,
        player_elo: int,
        opponent: str,
        opponent_elo: int,
        actual_score: float,
    ) -> tuple[PlayerEloEvent, PlayerEloEvent]:
        if player == opponent:
            raise ValueError(f"player={player!r} cannot play against themselves")

        expected = calculate_expected_score(player_elo, opponent_elo, self.params.scale_factor)
        delta = calculate_elo_change(
            player_elo,
            opponent_elo,
            actual_score,
            k_factor=self.params.k_factor,
            scale_factor=self.params.scale_factor,
        )

        player_event = PlayerEloEvent(
            player=player,
            opponent=opponent,
            actual_score=actual_score,
            expected_score=expected,
            pre_elo=player_elo,
            elo_delta=delta,
            post_elo=player_elo + delta,
        )
        opponent_event = PlayerEloEvent(
            player=opponent,
            opponent=player,
            actual_score=1.0 - actual_score,
            expected_score=1.0 - expected,
            pre_elo=opponent_elo,
            elo_delta=-delta,
            post_elo=opponent_elo - delta,
        )
        return player_event, opponent_event
