"""Recoverable failures raised by the scoreboard store and scoring engine."""

from __future__ import annotations


class ScoreboardError(Exception):
    """Base class for scoreboard failures returned to the caller."""

    code = "scoreboard_error"

    def __init__(self, detail: str, *, scoreboard_name: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.scoreboard_name = scoreboard_name


class NotFound(ScoreboardError):
    code = "not_found"

    def __init__(self, scoreboard_name: str) -> None:
        super().__init__(
            f"scoreboard '{scoreboard_name}' not found",
            scoreboard_name=scoreboard_name,
        )


class AlreadyExists(ScoreboardError):
    code = "already_exists"

    def __init__(self, scoreboard_name: str) -> None:
        super().__init__(
            f"scoreboard '{scoreboard_name}' already exists",
            scoreboard_name=scoreboard_name,
        )


class NotOwner(ScoreboardError):
    code = "not_owner"

    def __init__(self, scoreboard_name: str, *, owner: str, requester: str) -> None:
        super().__init__(
            f"only {owner} can change scoreboard '{scoreboard_name}' (requested by {requester})",
            scoreboard_name=scoreboard_name,
        )
        self.owner = owner
        self.requester = requester


class PlayerNotFound(ScoreboardError):
    code = "player_not_found"

    def __init__(self, scoreboard_name: str, player_name: str) -> None:
        super().__init__(
            f"player '{player_name}' is not on scoreboard '{scoreboard_name}'",
            scoreboard_name=scoreboard_name,
        )
        self.player_name = player_name


class AlreadyOnBoard(ScoreboardError):
    code = "already_on_board"

    def __init__(self, scoreboard_name: str, player_name: str) -> None:
        super().__init__(
            f"player '{player_name}' is already on scoreboard '{scoreboard_name}'",
            scoreboard_name=scoreboard_name,
        )
        self.player_name = player_name


class InvalidScoreExpression(ScoreboardError):
    code = "invalid_score_expression"

    def __init__(self, expression: str, reason: str, *, scoreboard_name: str | None = None) -> None:
        super().__init__(f"invalid score '{expression}': {reason}", scoreboard_name=scoreboard_name)
        self.expression = expression
        self.reason = reason


class ArchivedBoard(ScoreboardError):
    code = "archived_board"

    def __init__(self, scoreboard_name: str) -> None:
        super().__init__(
            f"scoreboard '{scoreboard_name}' is archived",
            scoreboard_name=scoreboard_name,
        )


class InvalidPlayerName(ScoreboardError):
    code = "invalid_player_name"

    def __init__(self, scoreboard_name: str, player_name: str) -> None:
        super().__init__(
            f"'{player_name}' cannot be used as a player name on scoreboard '{scoreboard_name}'",
            scoreboard_name=scoreboard_name,
        )
        self.player_name = player_name
