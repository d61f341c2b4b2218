"""Authoritative scoreboard state with whole-state persistence on every mutation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager

from domain.scoreboards.common import (
    DEFAULT_INITIAL_ELO,
    GameType,
    PlayerRecord,
    ScoreDelta,
    Scoreboard,
    parse_game_type,
)
from domain.scoreboards.errors import (
    AlreadyExists,
    AlreadyOnBoard,
    ArchivedBoard,
    InvalidPlayerName,
    NotFound,
    NotOwner,
    PlayerNotFound,
)
from domain.scoreboards.tokens import is_player_name, normalize_player_name
from repositories.persistence import ScoreboardPersistence

logger = logging.getLogger(__name__)


class ScoreboardStore:
    """Create, read, update and delete scoreboards and their players.

    Each mutation computes the next full state, hands it to
    ``persistence.save`` and only then makes it current, so a failed save
    leaves the previous state in place. Mutations on the same scoreboard are
    serialized; reads never block on them.
    """

    def __init__(
        self,
        persistence: ScoreboardPersistence,
        *,
        initial_elo: int = DEFAULT_INITIAL_ELO,
    ) -> None:
        self.persistence = persistence
        self.initial_elo = initial_elo
        self._scoreboards: dict[str, Scoreboard] = persistence.load()
        self._state_lock = threading.Lock()
        self._key_locks: dict[str, threading.RLock] = {}
        self._key_lock_users: dict[str, int] = {}
        self._key_locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def locked(self, scoreboard_name: str) -> Iterator[None]:
        """Hold the per-scoreboard mutation lock; re-entrant for the same thread."""
        with self._key_locks_guard:
            lock = self._key_locks.setdefault(scoreboard_name, threading.RLock())
            self._key_lock_users[scoreboard_name] = self._key_lock_users.get(scoreboard_name, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._key_locks_guard:
                users = self._key_lock_users[scoreboard_name] - 1
                if users or scoreboard_name in self._scoreboards:
                    self._key_lock_users[scoreboard_name] = users
                else:
                    # Unused lock for a board that does not exist.
                    del self._key_lock_users[scoreboard_name]
                    del self._key_locks[scoreboard_name]

    def _commit(self, scoreboard_name: str, scoreboard: Scoreboard | None) -> None:
        """Persist the state with ``scoreboard`` replaced (or removed when None)."""
        with self._state_lock:
            next_state = dict(self._scoreboards)
            if scoreboard is None:
                next_state.pop(scoreboard_name, None)
            else:
                next_state[scoreboard_name] = scoreboard
            self.persistence.save(next_state)
            self._scoreboards = next_state

    def _require(self, scoreboard_name: str) -> Scoreboard:
        scoreboard = self._scoreboards.get(scoreboard_name)
        if scoreboard is None:
            raise NotFound(scoreboard_name)
        return scoreboard

    def _require_active(self, scoreboard_name: str) -> Scoreboard:
        scoreboard = self._require(scoreboard_name)
        if scoreboard.archived:
            raise ArchivedBoard(scoreboard_name)
        return scoreboard

    def _require_owner(self, scoreboard_name: str, requester: str) -> Scoreboard:
        scoreboard = self._require(scoreboard_name)
        if requester != scoreboard.owner:
            raise NotOwner(scoreboard_name, owner=scoreboard.owner, requester=requester)
        return scoreboard

    def _mutate_players(
        self,
        scoreboard_name: str,
        mutate: Callable[[Scoreboard, dict[str, PlayerRecord]], None],
    ) -> Scoreboard:
        with self.locked(scoreboard_name):
            scoreboard = self._require_active(scoreboard_name)
            players = dict(scoreboard.players)
            mutate(scoreboard, players)
            updated = scoreboard.with_players(players)
            self._commit(scoreboard_name, updated)
        return updated.copy()

    # ------------------------------------------------------------------
    # Scoreboards
    # ------------------------------------------------------------------

    def create(self, scoreboard_name: str, game_type: GameType | str, owner: str) -> Scoreboard:
        game_type = parse_game_type(game_type)
        with self.locked(scoreboard_name):
            if scoreboard_name in self._scoreboards:
                raise AlreadyExists(scoreboard_name)
            scoreboard = Scoreboard(name=scoreboard_name, type=game_type, owner=owner)
            self._commit(scoreboard_name, scoreboard)
        logger.info("created scoreboard=%s type=%s owner=%s", scoreboard_name, game_type.value, owner)
        return scoreboard.copy()

    def delete(self, scoreboard_name: str, requester: str) -> None:
        with self.locked(scoreboard_name):
            self._require_owner(scoreboard_name, requester)
            self._commit(scoreboard_name, None)
        logger.info("deleted scoreboard=%s by=%s", scoreboard_name, requester)

    def archive(self, scoreboard_name: str, requester: str) -> Scoreboard:
        return self._set_archived(scoreboard_name, requester, archived=True)

    def unarchive(self, scoreboard_name: str, requester: str) -> Scoreboard:
        return self._set_archived(scoreboard_name, requester, archived=False)

    def _set_archived(self, scoreboard_name: str, requester: str, *, archived: bool) -> Scoreboard:
        with self.locked(scoreboard_name):
            scoreboard = self._require_owner(scoreboard_name, requester)
            updated = scoreboard.with_archived(archived)
            self._commit(scoreboard_name, updated)
        logger.info("scoreboard=%s archived=%s by=%s", scoreboard_name, archived, requester)
        return updated.copy()

    def get(self, scoreboard_name: str) -> Scoreboard:
        return self._require(scoreboard_name).copy()

    def get_owner(self, scoreboard_name: str) -> str:
        return self._require(scoreboard_name).owner

    def list(self) -> list[Scoreboard]:
        """All scoreboards ordered by name."""
        return [self._scoreboards[name].copy() for name in sorted(self._scoreboards)]

    def get_all(self) -> dict[str, Scoreboard]:
        return {name: scoreboard.copy() for name, scoreboard in self._scoreboards.items()}

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def is_player_on_scoreboard(self, scoreboard_name: str, player_name: str) -> bool:
        return self._require(scoreboard_name).has_player(player_name)

    def add_player(self, scoreboard_name: str, player_name: str) -> Scoreboard:
        player_name = normalize_player_name(player_name)

        def mutate(scoreboard: Scoreboard, players: dict[str, PlayerRecord]) -> None:
            if not is_player_name(player_name):
                raise InvalidPlayerName(scoreboard.name, player_name)
            if player_name in players:
                raise AlreadyOnBoard(scoreboard.name, player_name)
            players[player_name] = PlayerRecord(elo=self.initial_elo)

        updated = self._mutate_players(scoreboard_name, mutate)
        logger.info("scoreboard=%s added player=%s", scoreboard_name, player_name)
        return updated

    def add_players(self, scoreboard_name: str, player_names: Iterable[str]) -> list[str]:
        """Add every new, scoreable name in one save; returns the names actually added."""
        added: list[str] = []

        def mutate(scoreboard: Scoreboard, players: dict[str, PlayerRecord]) -> None:
            for raw_name in player_names:
                player_name = normalize_player_name(raw_name)
                if not is_player_name(player_name) or player_name in players:
                    continue
                players[player_name] = PlayerRecord(elo=self.initial_elo)
                added.append(player_name)

        self._mutate_players(scoreboard_name, mutate)
        if added:
            logger.info("scoreboard=%s added players=%s", scoreboard_name, added)
        return added

    def rename_player(self, scoreboard_name: str, old_name: str, new_name: str) -> Scoreboard:
        old_name = normalize_player_name(old_name)
        new_name = normalize_player_name(new_name)

        def mutate(scoreboard: Scoreboard, players: dict[str, PlayerRecord]) -> None:
            if old_name not in players:
                raise PlayerNotFound(scoreboard.name, old_name)
            if new_name == old_name:
                return
            if not is_player_name(new_name):
                raise InvalidPlayerName(scoreboard.name, new_name)
            if new_name in players:
                raise AlreadyOnBoard(scoreboard.name, new_name)
            players[new_name] = players.pop(old_name)

        updated = self._mutate_players(scoreboard_name, mutate)
        logger.info("scoreboard=%s renamed player=%s to=%s", scoreboard_name, old_name, new_name)
        return updated

    def remove_player(self, scoreboard_name: str, player_name: str) -> Scoreboard:
        """Remove a player; removing an absent player is a no-op."""
        return self.remove_players(scoreboard_name, [player_name])

    def remove_players(self, scoreboard_name: str, player_names: Iterable[str]) -> Scoreboard:
        names = [normalize_player_name(name) for name in player_names]

        def mutate(scoreboard: Scoreboard, players: dict[str, PlayerRecord]) -> None:
            for player_name in names:
                players.pop(player_name, None)

        updated = self._mutate_players(scoreboard_name, mutate)
        logger.info("scoreboard=%s removed players=%s", scoreboard_name, names)
        return updated

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def adjust_score(
        self,
        scoreboard_name: str,
        player_name: str,
        wins: int = 0,
        losses: int = 0,
        draws: int = 0,
        points: int = 0,
        elo: int = 0,
    ) -> Scoreboard:
        """Add the given deltas to one player's tallies."""
        delta = ScoreDelta(wins=wins, losses=losses, draws=draws, points=points, elo=elo)
        return self.apply_deltas(scoreboard_name, {player_name: delta})

    def apply_deltas(self, scoreboard_name: str, deltas: Mapping[str, ScoreDelta]) -> Scoreboard:
        """Apply a bundle of per-player deltas with a single save."""
        with self.locked(scoreboard_name):
            scoreboard = self._require_active(scoreboard_name)
            players = dict(scoreboard.players)
            for player_name, delta in deltas.items():
                record = players.get(player_name)
                if record is None:
                    raise PlayerNotFound(scoreboard_name, player_name)
                players[player_name] = record.apply(delta)
            updated = scoreboard.with_players(players)
            self._commit(scoreboard_name, updated)
        logger.info("scoreboard=%s adjusted players=%s", scoreboard_name, sorted(deltas))
        return updated.copy()
