#!/usr/bin/env python3
"""Manage scoreboards and mark scores from the command line."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine
from domain.scoreboards.common import GameType
from domain.scoreboards.config import DEFAULT_DB_URL, ScorekeeperConfig, load_scorekeeper_config
from domain.scoreboards.engine import ScoringEngine
from domain.scoreboards.errors import ScoreboardError
from domain.scoreboards.ranking import format_ranked_view
from repositories.persistence import SqlPersistence
from repositories.store import ScoreboardStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Scoreboard jobs.",
)


def _engine(ctx: typer.Context) -> ScoringEngine:
    engine = ctx.obj.get("engine")
    if engine is None:
        config: ScorekeeperConfig = ctx.obj["config"]
        persistence = SqlPersistence(create_db_engine(ctx.obj["db_url"]))
        persistence.ensure_schema()
        store = ScoreboardStore(persistence, initial_elo=config.elo.initial_elo)
        engine = ScoringEngine(store, elo=config.elo, top_n=config.top_n)
        ctx.obj["engine"] = engine
    return engine


def _fail(exc: ScoreboardError) -> typer.Exit:
    typer.echo(f"error[{exc.code}]: {exc.detail}", err=True)
    return typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="TOML file with [engine] and [store] settings."),
    ] = None,
    db_url: Annotated[
        Optional[str],
        typer.Option("--db-url", help=f"Database URL. Defaults to {DEFAULT_DB_URL}."),
    ] = None,
    user: Annotated[
        str,
        typer.Option("--user", envvar="SCOREKEEPER_USER", help="Identity used for ownership checks."),
    ] = "anonymous",
    log_level: Annotated[str, typer.Option("--log-level")] = "WARNING",
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    config = load_scorekeeper_config(config_path) if config_path is not None else ScorekeeperConfig()
    ctx.obj = {
        "config": config,
        "db_url": db_url or config.db_url,
        "user": user,
    }


@app.command("create")
def create_scoreboard(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Scoreboard name.")],
    game_type: Annotated[GameType, typer.Argument(help="Game style.")] = GameType.WINLOSS,
) -> None:
    """Create a scoreboard owned by --user."""
    try:
        _engine(ctx).create(name, game_type, ctx.obj["user"])
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"created {name} ({game_type.value})")


@app.command("delete")
def delete_scoreboard(ctx: typer.Context, name: str) -> None:
    """Delete a scoreboard. Only its owner can do this."""
    try:
        _engine(ctx).delete(name, ctx.obj["user"])
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"deleted {name}")


@app.command("archive")
def archive_scoreboard(ctx: typer.Context, name: str) -> None:
    """Freeze a scoreboard; it stays readable."""
    try:
        _engine(ctx).archive(name, ctx.obj["user"])
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"archived {name}")


@app.command("unarchive")
def unarchive_scoreboard(ctx: typer.Context, name: str) -> None:
    try:
        _engine(ctx).unarchive(name, ctx.obj["user"])
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"unarchived {name}")


@app.command("list")
def list_scoreboards(ctx: typer.Context) -> None:
    scoreboards = _engine(ctx).list()
    if not scoreboards:
        typer.echo("No scoreboards.")
        return
    for scoreboard in scoreboards:
        status = " archived" if scoreboard.archived else ""
        typer.echo(
            f"{scoreboard.name:<20} type={scoreboard.type.value:<8} "
            f"owner={scoreboard.owner} players={len(scoreboard.players)}{status}"
        )


@app.command("show")
def show_scoreboard(
    ctx: typer.Context,
    name: str,
    full: Annotated[bool, typer.Option("--full", help="List every player.")] = False,
    top_n: Annotated[
        Optional[int],
        typer.Option("--top-n", help="Number of leading players to show."),
    ] = None,
) -> None:
    """Print the standings of a scoreboard."""
    if top_n is not None and top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    try:
        view = _engine(ctx).standings(name, full=full, top_n=top_n)
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(format_ranked_view(view))


@app.command("add-players")
def add_players(ctx: typer.Context, name: str, players: list[str]) -> None:
    try:
        added = _engine(ctx).add_players(name, players)
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    if added:
        typer.echo(f"added {', '.join(added)} to {name}")
    else:
        typer.echo(f"no new players added to {name}")


@app.command("remove-players")
def remove_players(ctx: typer.Context, name: str, players: list[str]) -> None:
    try:
        _engine(ctx).remove_players(name, players)
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"removed {', '.join(players)} from {name}")


@app.command("rename-player")
def rename_player(ctx: typer.Context, name: str, old_name: str, new_name: str) -> None:
    try:
        _engine(ctx).rename_player(name, old_name, new_name)
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    typer.echo(f"renamed {old_name} to {new_name} on {name}")


@app.command("mark-score", context_settings={"ignore_unknown_options": True})
def mark_score(
    ctx: typer.Context,
    name: str,
    expression: Annotated[
        list[str],
        typer.Argument(help="Score expression, e.g. 'win ann loss bob', 'ann win bob' or '+3'."),
    ],
) -> None:
    """Record a score event and print the updated standings."""
    try:
        result = _engine(ctx).mark_score(name, " ".join(expression))
    except ScoreboardError as exc:
        raise _fail(exc) from exc
    for event in result.elo_events:
        typer.echo(f"{event.player}: elo {event.pre_elo} -> {event.post_elo} ({event.elo_delta:+d})")
    typer.echo(format_ranked_view(result.view))


if __name__ == "__main__":
    app()
