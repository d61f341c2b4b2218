"""Scoreboard domain: game styles, score parsing, validation and ranking."""

from domain.scoreboards.common import GameType, PlayerRecord, ScoreDelta, Scoreboard
from domain.scoreboards.errors import (
    AlreadyExists,
    AlreadyOnBoard,
    ArchivedBoard,
    InvalidPlayerName,
    InvalidScoreExpression,
    NotFound,
    NotOwner,
    PlayerNotFound,
    ScoreboardError,
)
from domain.scoreboards.ranking import (
    RankedView,
    build_ranked_view,
    format_ranked_view,
    sort_players,
    win_ratio,
)
from domain.scoreboards.validation import bundle_score_data, is_valid_score_string

__all__ = [
    "AlreadyExists",
    "AlreadyOnBoard",
    "ArchivedBoard",
    "GameType",
    "InvalidPlayerName",
    "InvalidScoreExpression",
    "NotFound",
    "NotOwner",
    "PlayerNotFound",
    "PlayerRecord",
    "RankedView",
    "ScoreDelta",
    "Scoreboard",
    "ScoreboardError",
    "build_ranked_view",
    "bundle_score_data",
    "format_ranked_view",
    "is_valid_score_string",
    "sort_players",
    "win_ratio",
]
