"""Scoring engine: validates score events, applies them and ranks players."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.ratings.elo.calculator import (
    DRAW,
    LOSS,
    WIN,
    EloParameters,
    PlayerEloCalculator,
    PlayerEloEvent,
)
from domain.scoreboards.common import GameType, ScoreDelta, Scoreboard
from domain.scoreboards.errors import ArchivedBoard, ScoreboardError
from domain.scoreboards.ranking import RankedView, build_ranked_view
from domain.scoreboards.tokens import ScoreExpression, ScoreToken
from domain.scoreboards.validation import (
    bundle_score_data,
    is_valid_score_string,
    validate_score_expression,
)
from repositories.store import ScoreboardStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of one accepted score event."""

    scoreboard: Scoreboard
    expression: ScoreExpression
    deltas: dict[str, ScoreDelta]
    view: RankedView
    elo_events: tuple[PlayerEloEvent, ...] = field(default_factory=tuple)


def _actual_score(token: ScoreToken) -> float:
    if token.is_draw:
        return DRAW
    return WIN if token.number > 0 else LOSS


class ScoringEngine:
    """Caller-facing operations over a ScoreboardStore."""

    def __init__(
        self,
        store: ScoreboardStore,
        *,
        elo: EloParameters | None = None,
        top_n: int = 5,
    ) -> None:
        if top_n <= 0:
            raise ValueError("top_n must be greater than 0")
        self.store = store
        self.elo_params = elo or EloParameters(initial_elo=store.initial_elo)
        self.top_n = top_n
        self._elo_calculator = PlayerEloCalculator(self.elo_params)

    # Scoreboard lifecycle -------------------------------------------------

    def create(self, scoreboard_name: str, game_type: GameType | str, owner: str) -> Scoreboard:
        return self.store.create(scoreboard_name, game_type, owner)

    def delete(self, scoreboard_name: str, requester: str) -> None:
        self.store.delete(scoreboard_name, requester)

    def archive(self, scoreboard_name: str, requester: str) -> Scoreboard:
        return self.store.archive(scoreboard_name, requester)

    def unarchive(self, scoreboard_name: str, requester: str) -> Scoreboard:
        return self.store.unarchive(scoreboard_name, requester)

    def get(self, scoreboard_name: str) -> Scoreboard:
        return self.store.get(scoreboard_name)

    def list(self) -> list[Scoreboard]:
        return self.store.list()

    # Players --------------------------------------------------------------

    def add_player(self, scoreboard_name: str, player_name: str) -> Scoreboard:
        return self.store.add_player(scoreboard_name, player_name)

    def add_players(self, scoreboard_name: str, player_names: Iterable[str]) -> list[str]:
        return self.store.add_players(scoreboard_name, player_names)

    def rename_player(self, scoreboard_name: str, old_name: str, new_name: str) -> Scoreboard:
        return self.store.rename_player(scoreboard_name, old_name, new_name)

    def remove_player(self, scoreboard_name: str, player_name: str) -> Scoreboard:
        return self.store.remove_player(scoreboard_name, player_name)

    def remove_players(self, scoreboard_name: str, player_names: Iterable[str]) -> Scoreboard:
        return self.store.remove_players(scoreboard_name, player_names)

    # Scores ---------------------------------------------------------------

    def is_valid_score_string(self, scoreboard_name: str, expression: str) -> bool:
        return is_valid_score_string(self.store.get(scoreboard_name), expression)

    def mark_score(self, scoreboard_name: str, expression: str) -> ScoreResult:
        """Validate ``expression`` against the board, then apply it in one save."""
        with self.store.locked(scoreboard_name):
            scoreboard = self.store.get(scoreboard_name)
            if scoreboard.archived:
                raise ArchivedBoard(scoreboard_name)

            try:
                parsed = validate_score_expression(scoreboard, expression)
            except ScoreboardError as exc:
                logger.warning("rejected score scoreboard=%s expression=%r: %s", scoreboard_name, expression, exc)
                raise

            deltas = bundle_score_data(scoreboard, parsed)
            elo_events: tuple[PlayerEloEvent, ...] = ()
            if scoreboard.type is GameType.ELO:
                elo_events = self._elo_events(scoreboard, parsed)
                for event in elo_events:
                    deltas[event.player] = deltas[event.player] + ScoreDelta(elo=event.elo_delta)

            updated = self.store.apply_deltas(scoreboard_name, deltas)
            view = self.standings(scoreboard_name, highlight=parsed.players)
        logger.info("marked score scoreboard=%s expression=%r", scoreboard_name, expression)
        return ScoreResult(
            scoreboard=updated,
            expression=parsed,
            deltas=deltas,
            view=view,
            elo_events=elo_events,
        )

    def _elo_events(self, scoreboard: Scoreboard, expression: ScoreExpression) -> tuple[PlayerEloEvent, ...]:
        first, second = expression.entries
        return self._elo_calculator.process_outcome(
            player=first.player,
            player_elo=scoreboard.players[first.player].elo,
            opponent=second.player,
            opponent_elo=scoreboard.players[second.player].elo,
            actual_score=_actual_score(first.token),
        )

    # Views ----------------------------------------------------------------

    def standings(
        self,
        scoreboard_name: str,
        *,
        highlight: Iterable[str] = (),
        full: bool = False,
        top_n: int | None = None,
    ) -> RankedView:
        return build_ranked_view(
            self.store.get(scoreboard_name),
            top_n=top_n or self.top_n,
            highlight=highlight,
            full=full,
        )


__all__ = ["ScoreResult", "ScoringEngine"]
