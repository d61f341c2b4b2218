"""Parse raw score expressions into tagged score tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from domain.scoreboards.errors import InvalidScoreExpression

WIN_WORDS = frozenset({"win", "won", "winner", "w"})
LOSS_WORDS = frozenset({"loss", "lose", "lost", "loser", "l"})
DRAW_WORDS = frozenset({"draw"})

_NUMERIC_PATTERN = re.compile(r"^[+-]\d+$")


class TokenKind(str, Enum):
    NUMERIC = "numeric"
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True)
class ScoreToken:
    """One parsed score word; ``value`` is only meaningful for NUMERIC."""

    kind: TokenKind
    value: int = 0

    @property
    def number(self) -> float:
        """Numeric value of the token: +1 for a win, -1 for a loss, 0.5 for a draw."""
        if self.kind is TokenKind.WIN:
            return 1
        if self.kind is TokenKind.LOSS:
            return -1
        if self.kind is TokenKind.DRAW:
            return 0.5
        return self.value

    @property
    def is_draw(self) -> bool:
        return self.kind is TokenKind.DRAW

    @property
    def is_outcome(self) -> bool:
        return self.kind is not TokenKind.NUMERIC


@dataclass(frozen=True)
class ScoreEntry:
    token: ScoreToken
    player: str


@dataclass(frozen=True)
class ScoreExpression:
    """A parsed expression: either one blanket token or (token, player) entries."""

    raw: str
    entries: tuple[ScoreEntry, ...] = ()
    blanket: ScoreToken | None = None

    @property
    def is_blanket(self) -> bool:
        return self.blanket is not None

    @property
    def players(self) -> tuple[str, ...]:
        """Named players in first-mention order."""
        seen: dict[str, None] = {}
        for entry in self.entries:
            seen.setdefault(entry.player, None)
        return tuple(seen)

    def tokens(self) -> tuple[ScoreToken, ...]:
        if self.blanket is not None:
            return (self.blanket,)
        return tuple(entry.token for entry in self.entries)


def parse_token(word: str) -> ScoreToken | None:
    """Return the token for ``word`` or None when it is not a score word."""
    normalized = word.strip().lower()
    if normalized in WIN_WORDS:
        return ScoreToken(TokenKind.WIN)
    if normalized in LOSS_WORDS:
        return ScoreToken(TokenKind.LOSS)
    if normalized in DRAW_WORDS:
        return ScoreToken(TokenKind.DRAW)
    if _NUMERIC_PATTERN.match(normalized):
        return ScoreToken(TokenKind.NUMERIC, int(normalized))
    return None


def normalize_player_name(name: str) -> str:
    """Strip whitespace and a leading mention marker from a player name."""
    name = name.strip()
    return name[1:] if name.startswith("@") else name


def is_player_name(name: str) -> bool:
    """True when a normalized ``name`` can be referred to in a score expression."""
    return bool(name) and len(name.split()) == 1 and parse_token(name) is None


def _opposite(token: ScoreToken) -> ScoreToken:
    if token.kind is TokenKind.WIN:
        return ScoreToken(TokenKind.LOSS)
    if token.kind is TokenKind.LOSS:
        return ScoreToken(TokenKind.WIN)
    return token


def parse_score_expression(raw: str) -> ScoreExpression:
    """Parse ``raw`` into a ScoreExpression.

    Accepted shapes:
    - ``+7``: one blanket token for every player on the board
    - ``win ann loss bob`` / ``+5 ann -5 bob``: score and player pairs
    - ``ann win bob``: shorthand for ``win ann loss bob`` (also ``loss``/``draw``)

    Raises InvalidScoreExpression when the shape or a token is malformed.
    """
    words = raw.split()
    if not words:
        raise InvalidScoreExpression(raw, "no score given")

    if len(words) == 1:
        token = parse_token(words[0])
        if token is None:
            raise InvalidScoreExpression(raw, f"'{words[0]}' is not a score")
        return ScoreExpression(raw=raw, blanket=token)

    if len(words) == 3:
        first, middle, last = words
        middle_token = parse_token(middle)
        if (
            middle_token is not None
            and middle_token.is_outcome
            and parse_token(first) is None
            and parse_token(last) is None
        ):
            return ScoreExpression(
                raw=raw,
                entries=(
                    ScoreEntry(middle_token, normalize_player_name(first)),
                    ScoreEntry(_opposite(middle_token), normalize_player_name(last)),
                ),
            )

    if len(words) % 2 != 0:
        raise InvalidScoreExpression(raw, "every score needs exactly one player")

    entries: list[ScoreEntry] = []
    for score_word, player_word in zip(words[::2], words[1::2]):
        token = parse_token(score_word)
        if token is None:
            raise InvalidScoreExpression(raw, f"'{score_word}' is not a score")
        player = normalize_player_name(player_word)
        if not is_player_name(player):
            raise InvalidScoreExpression(raw, f"'{player_word}' is not a player name")
        entries.append(ScoreEntry(token, player))

    return ScoreExpression(raw=raw, entries=tuple(entries))
