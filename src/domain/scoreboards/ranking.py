"""Rank scoreboard players and build paged, printable standings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from domain.scoreboards.common import GameType, PlayerRecord, Scoreboard

NOT_AVAILABLE = "N/A"
GAP_MARKER = "..."
_MIN_PLAYER_COLUMN_WIDTH = 10
_COLUMN_WIDTH = 8


@dataclass(frozen=True)
class RankedRow:
    rank: int
    player: str
    record: PlayerRecord
    win_ratio: float | None
    highlighted: bool = False


@dataclass(frozen=True)
class GapRow:
    """Collapsed run of players hidden from a top-N view."""

    hidden: int


@dataclass(frozen=True)
class RankedView:
    scoreboard_name: str
    game_type: GameType
    archived: bool
    total_players: int
    rows: tuple[RankedRow | GapRow, ...]

    def ranked_rows(self) -> list[RankedRow]:
        return [row for row in self.rows if isinstance(row, RankedRow)]


def win_ratio(record: PlayerRecord) -> float | None:
    """wins / (wins + losses), or None before the first decided game."""
    if record.games_played == 0:
        return None
    return record.wins / record.games_played


def format_win_ratio(ratio: float | None) -> str:
    if ratio is None:
        return NOT_AVAILABLE
    return f"{ratio:.3f}"


def _sort_key(game_type: GameType, player: str, record: PlayerRecord) -> tuple[int, int, str]:
    if game_type is GameType.ELO:
        return (-record.elo, 0, player)
    if game_type is GameType.POINTS:
        return (-record.points, 0, player)
    return (-record.wins, record.losses, player)


def sort_players(scoreboard: Scoreboard) -> list[tuple[str, PlayerRecord]]:
    """Players in ranking order for the board's game style; ties by name."""
    return sorted(
        scoreboard.players.items(),
        key=lambda item: _sort_key(scoreboard.type, item[0], item[1]),
    )


def build_ranked_view(
    scoreboard: Scoreboard,
    *,
    top_n: int = 5,
    highlight: Iterable[str] = (),
    full: bool = False,
) -> RankedView:
    """Build standings showing the top ``top_n`` plus every highlighted player.

    Hidden runs of players collapse into a single GapRow. With ``full`` every
    player is listed.
    """
    if top_n <= 0:
        raise ValueError("top_n must be greater than 0")

    ordered = sort_players(scoreboard)
    highlighted = set(highlight)
    visible = {
        index
        for index, (player, _) in enumerate(ordered)
        if full or index < top_n or player in highlighted
    }

    rows: list[RankedRow | GapRow] = []
    hidden = 0
    for index, (player, record) in enumerate(ordered):
        if index not in visible:
            hidden += 1
            continue
        if hidden:
            rows.append(GapRow(hidden=hidden))
            hidden = 0
        rows.append(
            RankedRow(
                rank=index + 1,
                player=player,
                record=record,
                win_ratio=win_ratio(record),
                highlighted=player in highlighted,
            )
        )
    if hidden:
        rows.append(GapRow(hidden=hidden))

    return RankedView(
        scoreboard_name=scoreboard.name,
        game_type=scoreboard.type,
        archived=scoreboard.archived,
        total_players=len(ordered),
        rows=tuple(rows),
    )


def _headers(game_type: GameType) -> list[str]:
    if game_type is GameType.POINTS:
        return ["Points"]
    headers = ["Wins", "Losses", "Draws", "Ratio"]
    if game_type is GameType.ELO:
        headers.insert(0, "Elo")
    return headers


def _values(game_type: GameType, row: RankedRow) -> list[str]:
    record = row.record
    if game_type is GameType.POINTS:
        return [str(record.points)]
    values = [str(record.wins), str(record.losses), str(record.draws), format_win_ratio(row.win_ratio)]
    if game_type is GameType.ELO:
        values.insert(0, str(record.elo))
    return values


def format_ranked_view(view: RankedView) -> str:
    """Render standings as a fixed-width text table."""
    title = view.scoreboard_name + (" (archived)" if view.archived else "")
    if not view.rows:
        return f"{title}\n(no players)"

    ranked = view.ranked_rows()
    player_width = max([_MIN_PLAYER_COLUMN_WIDTH, *(len(row.player) + 1 for row in ranked)])
    headers = _headers(view.game_type)
    header_line = f"{'#':>4}  {'Player':<{player_width}}" + "".join(
        f" | {header:>{_COLUMN_WIDTH}}" for header in headers
    )

    lines = [title, header_line, "=" * len(header_line)]
    for row in view.rows:
        if isinstance(row, GapRow):
            lines.append(f"{GAP_MARKER:>4}  ({row.hidden} more)")
            continue
        marker = "*" if row.highlighted else " "
        lines.append(
            f"{row.rank:>3}{marker}  {row.player:<{player_width}}"
            + "".join(f" | {value:>{_COLUMN_WIDTH}}" for value in _values(view.game_type, row))
        )
    return "\n".join(lines)
