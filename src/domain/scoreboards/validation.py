"""Game-style validation of score expressions and per-player delta bundling."""

from __future__ import annotations

from domain.scoreboards.common import GameType, ScoreDelta, Scoreboard
from domain.scoreboards.errors import InvalidScoreExpression, PlayerNotFound
from domain.scoreboards.tokens import ScoreExpression, ScoreToken, parse_score_expression


def net_score(tokens: tuple[ScoreToken, ...]) -> float:
    """Sum of numberified tokens with draws counted as zero net."""
    return sum(0 if token.is_draw else token.number for token in tokens)


def validate_score_expression(scoreboard: Scoreboard, raw: str) -> ScoreExpression:
    """Parse ``raw`` and check it against the scoreboard's game style."""
    expression = parse_score_expression(raw)
    game_type = scoreboard.type

    def reject(reason: str) -> InvalidScoreExpression:
        return InvalidScoreExpression(raw, reason, scoreboard_name=scoreboard.name)

    if expression.is_blanket:
        if game_type.is_zero_sum:
            raise reject(f"{game_type.value} scoreboards need every side of the score marked")
        if expression.blanket is not None and expression.blanket.is_draw:
            raise reject("a draw needs exactly two players")
        return expression

    for player in expression.players:
        if not scoreboard.has_player(player):
            raise PlayerNotFound(scoreboard.name, player)

    tokens = expression.tokens()
    if any(token.is_draw for token in tokens):
        if game_type.tracks_points:
            raise reject("points scoreboards do not record draws")
        if not all(token.is_draw for token in tokens) or len(expression.entries) != 2:
            raise reject("a draw needs exactly two players, both marked draw")
        if len(expression.players) != 2:
            raise reject("a player cannot draw against themselves")

    if not game_type.tracks_points:
        winners = {entry.player for entry in expression.entries if entry.token.number > 0}
        losers = {entry.player for entry in expression.entries if entry.token.number < 0}
        for player in expression.players:
            if player in winners and player in losers:
                raise reject(f"'{player}' cannot play against themselves")

    if game_type.is_zero_sum and net_score(tokens) != 0:
        raise reject(f"{game_type.value} scores must add up to 0")

    if game_type is GameType.ELO:
        if len(expression.entries) != 2 or len(expression.players) != 2:
            raise reject("elo scores need exactly two players")
        if all(token.number == 0 for token in tokens):
            raise reject("elo scores need a winner or a draw")

    return expression


def is_valid_score_string(scoreboard: Scoreboard, raw: str) -> bool:
    """Return True when ``raw`` would be accepted on ``scoreboard``."""
    try:
        validate_score_expression(scoreboard, raw)
    except InvalidScoreExpression:
        return False
    except PlayerNotFound:
        return False
    return True


def token_delta(game_type: GameType, token: ScoreToken) -> ScoreDelta:
    """Tally delta for a single token on a board of ``game_type``."""
    if game_type.tracks_points:
        return ScoreDelta(points=int(token.number))
    if token.is_draw:
        return ScoreDelta(draws=1)
    score = int(token.number)
    if score >= 0:
        return ScoreDelta(wins=score)
    return ScoreDelta(losses=-score)


def bundle_score_data(scoreboard: Scoreboard, expression: ScoreExpression) -> dict[str, ScoreDelta]:
    """Accumulate per-player deltas; a blanket token applies to every player."""
    if expression.blanket is not None:
        delta = token_delta(scoreboard.type, expression.blanket)
        return {player: delta for player in scoreboard.players}

    bundle: dict[str, ScoreDelta] = {}
    for entry in expression.entries:
        delta = token_delta(scoreboard.type, entry.token)
        bundle[entry.player] = bundle.get(entry.player, ScoreDelta()) + delta
    return bundle
