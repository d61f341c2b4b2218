"""Persistence hooks that load and save the full scoreboard state."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, selectinload, sessionmaker

from db import create_session_factory
from domain.scoreboards.common import GameType, PlayerRecord, Scoreboard
from models import Base, StoredPlayer, StoredScoreboard

logger = logging.getLogger(__name__)


@runtime_checkable
class ScoreboardPersistence(Protocol):
    """Backing store contract: whole-state load and save."""

    def load(self) -> dict[str, Scoreboard]: ...

    def save(self, scoreboards: Mapping[str, Scoreboard]) -> None: ...


class InMemoryPersistence:
    """Keeps the last saved state in process memory."""

    def __init__(self, initial: Mapping[str, Scoreboard] | None = None) -> None:
        self._scoreboards = _copy_state(initial or {})
        self.save_count = 0

    def load(self) -> dict[str, Scoreboard]:
        return _copy_state(self._scoreboards)

    def save(self, scoreboards: Mapping[str, Scoreboard]) -> None:
        self._scoreboards = _copy_state(scoreboards)
        self.save_count += 1


class SqlPersistence:
    """Stores scoreboards in the scoreboards / scoreboard_players tables."""

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session] | None = None) -> None:
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)

    def ensure_schema(self) -> None:
        """Create scoreboard tables when missing."""
        Base.metadata.create_all(
            bind=self.engine,
            tables=[StoredScoreboard.__table__, StoredPlayer.__table__],
            checkfirst=True,
        )

    def load(self) -> dict[str, Scoreboard]:
        with self.session_factory() as session:
            rows = session.execute(
                select(StoredScoreboard).options(selectinload(StoredScoreboard.players))
            ).scalars().all()
            return {row.name: _row_to_scoreboard(row) for row in rows}

    def save(self, scoreboards: Mapping[str, Scoreboard]) -> None:
        """Replace the stored state with ``scoreboards`` in one transaction."""
        with self.session_factory() as session:
            try:
                session.execute(delete(StoredPlayer))
                session.execute(delete(StoredScoreboard))
                session.add_all(_scoreboard_to_row(scoreboard) for scoreboard in scoreboards.values())
                session.commit()
            except Exception:
                session.rollback()
                raise
        logger.debug("saved %d scoreboards", len(scoreboards))


def _copy_state(scoreboards: Mapping[str, Scoreboard]) -> dict[str, Scoreboard]:
    return {name: scoreboard.copy() for name, scoreboard in scoreboards.items()}


def _row_to_scoreboard(row: StoredScoreboard) -> Scoreboard:
    return Scoreboard(
        name=row.name,
        type=GameType(row.game_type),
        owner=row.owner,
        archived=bool(row.archived),
        players={
            player.name: PlayerRecord(
                wins=player.wins,
                losses=player.losses,
                draws=player.draws,
                points=player.points,
                elo=player.elo,
            )
            for player in row.players
        },
    )


def _scoreboard_to_row(scoreboard: Scoreboard) -> StoredScoreboard:
    return StoredScoreboard(
        name=scoreboard.name,
        game_type=scoreboard.type.value,
        owner=scoreboard.owner,
        archived=scoreboard.archived,
        players=[
            StoredPlayer(
                name=name,
                wins=record.wins,
                losses=record.losses,
                draws=record.draws,
                points=record.points,
                elo=record.elo,
            )
            for name, record in scoreboard.players.items()
        ],
    )


__all__ = ["InMemoryPersistence", "ScoreboardPersistence", "SqlPersistence"]
