"""Shared types for scoreboards and their players."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

DEFAULT_INITIAL_ELO = 1500


class GameType(str, Enum):
    """Game style of a scoreboard; fixed at creation."""

    POINTS = "points"
    WINLOSS = "winloss"
    ZEROSUM = "zerosum"
    ELO = "elo"

    @property
    def is_zero_sum(self) -> bool:
        return self in (GameType.ZEROSUM, GameType.ELO)

    @property
    def tracks_points(self) -> bool:
        return self is GameType.POINTS


@dataclass(frozen=True)
class ScoreDelta:
    """Additive change to one player's tallies."""

    wins: int = 0
    losses: int = 0
    draws: int = 0
    points: int = 0
    elo: int = 0

    def __add__(self, other: ScoreDelta) -> ScoreDelta:
        if not isinstance(other, ScoreDelta):
            return NotImplemented
        return ScoreDelta(
            wins=self.wins + other.wins,
            losses=self.losses + other.losses,
            draws=self.draws + other.draws,
            points=self.points + other.points,
            elo=self.elo + other.elo,
        )


@dataclass(frozen=True)
class PlayerRecord:
    """Cumulative tallies for one player on one scoreboard."""

    wins: int = 0
    losses: int = 0
    draws: int = 0
    points: int = 0
    elo: int = DEFAULT_INITIAL_ELO

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    def apply(self, delta: ScoreDelta) -> PlayerRecord:
        return PlayerRecord(
            wins=self.wins + delta.wins,
            losses=self.losses + delta.losses,
            draws=self.draws + delta.draws,
            points=self.points + delta.points,
            elo=self.elo + delta.elo,
        )


@dataclass(frozen=True)
class Scoreboard:
    """A named, typed collection of player tallies."""

    name: str
    type: GameType
    owner: str
    archived: bool = False
    players: dict[str, PlayerRecord] = field(default_factory=dict)

    def has_player(self, player_name: str) -> bool:
        return player_name in self.players

    def with_players(self, players: dict[str, PlayerRecord]) -> Scoreboard:
        """Return a copy with a replaced player mapping."""
        return replace(self, players=dict(players))

    def with_archived(self, archived: bool) -> Scoreboard:
        return replace(self, archived=archived, players=dict(self.players))

    def copy(self) -> Scoreboard:
        return replace(self, players=dict(self.players))


def parse_game_type(value: str | GameType) -> GameType:
    """Coerce user input to a GameType, case-insensitively."""
    if isinstance(value, GameType):
        return value
    normalized = str(value).strip().lower()
    try:
        return GameType(normalized)
    except ValueError as exc:
        available = ", ".join(game_type.value for game_type in GameType)
        raise ValueError(f"Unknown scoreboard type {value!r}; expected one of: {available}") from exc
