"""Tests for the scoreboard store over the in-memory persistence hook."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from domain.scoreboards.common import GameType, PlayerRecord, ScoreDelta, Scoreboard
from domain.scoreboards.errors import (
    AlreadyExists,
    AlreadyOnBoard,
    ArchivedBoard,
    InvalidPlayerName,
    NotFound,
    NotOwner,
    PlayerNotFound,
)
from repositories.persistence import InMemoryPersistence, ScoreboardPersistence
from repositories.store import ScoreboardStore


class _FailingPersistence(InMemoryPersistence):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, scoreboards: Mapping[str, Scoreboard]) -> None:
        if self.fail:
            raise RuntimeError("disk full")
        super().save(scoreboards)


def _store() -> tuple[ScoreboardStore, InMemoryPersistence]:
    persistence = InMemoryPersistence()
    return ScoreboardStore(persistence), persistence


def test_in_memory_persistence_satisfies_protocol() -> None:
    assert isinstance(InMemoryPersistence(), ScoreboardPersistence)


def test_create_persists_and_returns_board() -> None:
    store, persistence = _store()
    board = store.create("chess", "ELO", "ann")

    assert board == Scoreboard(name="chess", type=GameType.ELO, owner="ann")
    assert persistence.save_count == 1
    assert persistence.load()["chess"].owner == "ann"


def test_create_duplicate_raises() -> None:
    store, persistence = _store()
    store.create("chess", GameType.ELO, "ann")
    with pytest.raises(AlreadyExists, match="already exists"):
        store.create("chess", GameType.POINTS, "bob")
    assert persistence.save_count == 1
    assert store.get("chess").type is GameType.ELO


def test_create_unknown_type_raises() -> None:
    store, _ = _store()
    with pytest.raises(ValueError, match="Unknown scoreboard type"):
        store.create("chess", "bingo", "ann")


def test_get_is_read_only_and_repeatable() -> None:
    store, persistence = _store()
    store.create("darts", GameType.POINTS, "ann")
    store.add_player("darts", "cid")
    saves = persistence.save_count

    first = store.get("darts")
    first.players["intruder"] = PlayerRecord()
    second = store.get("darts")

    assert second == store.get("darts")
    assert "intruder" not in second.players
    assert persistence.save_count == saves


def test_get_missing_board_raises() -> None:
    store, _ = _store()
    with pytest.raises(NotFound, match="'nope' not found"):
        store.get("nope")


def test_list_is_sorted_by_name() -> None:
    store, _ = _store()
    for name in ("pool", "chess", "darts"):
        store.create(name, GameType.WINLOSS, "ann")
    assert [board.name for board in store.list()] == ["chess", "darts", "pool"]


def test_only_owner_can_delete_archive_and_unarchive() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")

    for operation in (store.delete, store.archive, store.unarchive):
        with pytest.raises(NotOwner) as exc_info:
            operation("chess", "bob")
        assert exc_info.value.owner == "ann"

    store.delete("chess", "ann")
    with pytest.raises(NotFound):
        store.get("chess")


def test_archived_board_rejects_player_mutations_but_stays_readable() -> None:
    store, _ = _store()
    store.create("chess", GameType.WINLOSS, "ann")
    store.add_player("chess", "ann")
    store.archive("chess", "ann")

    with pytest.raises(ArchivedBoard):
        store.add_player("chess", "bob")
    with pytest.raises(ArchivedBoard):
        store.rename_player("chess", "ann", "anne")
    with pytest.raises(ArchivedBoard):
        store.remove_player("chess", "ann")
    with pytest.raises(ArchivedBoard):
        store.adjust_score("chess", "ann", wins=1)
    assert store.get("chess").archived
    assert store.get("chess").players == {"ann": PlayerRecord()}

    store.unarchive("chess", "ann")
    store.adjust_score("chess", "ann", wins=1)
    assert store.get("chess").players["ann"].wins == 1


def test_add_player_initializes_record() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")
    board = store.add_player("chess", "@bob")

    assert board.players == {"bob": PlayerRecord(wins=0, losses=0, draws=0, points=0, elo=1500)}
    with pytest.raises(AlreadyOnBoard):
        store.add_player("chess", "bob")


def test_add_player_uses_configured_initial_elo() -> None:
    store = ScoreboardStore(InMemoryPersistence(), initial_elo=1200)
    store.create("chess", GameType.ELO, "ann")
    assert store.add_player("chess", "bob").players["bob"].elo == 1200


def test_add_players_skips_existing_in_one_save() -> None:
    store, persistence = _store()
    store.create("pool", GameType.WINLOSS, "ann")
    store.add_player("pool", "ann")
    saves = persistence.save_count

    added = store.add_players("pool", ["ann", "@bob", "cid", "bob"])

    assert added == ["bob", "cid"]
    assert persistence.save_count == saves + 1
    assert store.is_player_on_scoreboard("pool", "cid")


def test_add_player_to_missing_board_raises() -> None:
    store, _ = _store()
    with pytest.raises(NotFound):
        store.add_player("nope", "ann")


def test_rename_preserves_record() -> None:
    store, _ = _store()
    store.create("B", GameType.WINLOSS, "ann")
    store.add_player("B", "alice")
    store.adjust_score("B", "alice", wins=3, losses=1, draws=2)
    before = store.get("B").players["alice"]

    store.rename_player("B", "alice", "bob")
    board = store.get("B")

    assert board.players["bob"] == before
    assert "alice" not in board.players


def test_rename_rejects_missing_and_colliding_names() -> None:
    store, _ = _store()
    store.create("B", GameType.WINLOSS, "ann")
    store.add_players("B", ["alice", "bob"])
    store.adjust_score("B", "bob", wins=4)

    with pytest.raises(PlayerNotFound):
        store.rename_player("B", "zed", "zoe")
    with pytest.raises(AlreadyOnBoard):
        store.rename_player("B", "alice", "bob")
    assert store.get("B").players["bob"].wins == 4


def test_remove_player_and_absent_player_is_noop() -> None:
    store, _ = _store()
    store.create("B", GameType.WINLOSS, "ann")
    store.add_players("B", ["alice", "bob"])

    store.remove_player("B", "alice")
    store.remove_player("B", "ghost")

    assert list(store.get("B").players) == ["bob"]
    with pytest.raises(NotFound):
        store.remove_player("nope", "bob")


def test_adjust_score_is_additive() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")
    store.add_player("chess", "ann")
    store.adjust_score("chess", "ann", wins=1, elo=16)
    board = store.adjust_score("chess", "ann", losses=1, elo=-10)

    assert board.players["ann"] == PlayerRecord(wins=1, losses=1, elo=1506)
    with pytest.raises(PlayerNotFound):
        store.adjust_score("chess", "ghost", wins=1)
    with pytest.raises(NotFound):
        store.adjust_score("nope", "ann", wins=1)


def test_apply_deltas_is_all_or_nothing() -> None:
    store, persistence = _store()
    store.create("pool", GameType.WINLOSS, "ann")
    store.add_player("pool", "ann")
    saves = persistence.save_count

    with pytest.raises(PlayerNotFound):
        store.apply_deltas("pool", {"ann": ScoreDelta(wins=1), "ghost": ScoreDelta(losses=1)})

    assert store.get("pool").players["ann"].wins == 0
    assert persistence.save_count == saves


def test_failed_save_keeps_previous_state() -> None:
    persistence = _FailingPersistence()
    store = ScoreboardStore(persistence)
    store.create("pool", GameType.WINLOSS, "ann")
    persistence.fail = True

    with pytest.raises(RuntimeError, match="disk full"):
        store.add_player("pool", "bob")

    assert store.get("pool").players == {}


def test_store_loads_existing_state() -> None:
    persistence = InMemoryPersistence(
        {"pool": Scoreboard(name="pool", type=GameType.WINLOSS, owner="ann", players={"bob": PlayerRecord(wins=2)})}
    )
    store = ScoreboardStore(persistence)
    assert store.get("pool").players["bob"].wins == 2
    assert store.get_owner("pool") == "ann"


def test_get_owner_returns_creator() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")
    assert store.get_owner("chess") == "ann"
    with pytest.raises(NotFound):
        store.get_owner("nope")


def test_get_all_returns_independent_copies() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")
    store.create("pool", GameType.WINLOSS, "bob")
    store.add_player("pool", "cid")

    everything = store.get_all()
    everything["pool"].players["intruder"] = PlayerRecord()
    del everything["chess"]

    assert sorted(store.get_all()) == ["chess", "pool"]
    assert store.get("pool").players == {"cid": PlayerRecord()}


@pytest.mark.parametrize("name", ["w", "loss", "draw", "+5", "@", "  ", "ann bob"])
def test_add_player_rejects_names_scores_cannot_refer_to(name: str) -> None:
    store, persistence = _store()
    store.create("pool", GameType.ZEROSUM, "ann")
    saves = persistence.save_count

    with pytest.raises(InvalidPlayerName):
        store.add_player("pool", name)

    assert store.get("pool").players == {}
    assert persistence.save_count == saves


def test_add_players_skips_unusable_names() -> None:
    store, _ = _store()
    store.create("pool", GameType.ZEROSUM, "ann")

    added = store.add_players("pool", ["ann", "w", "@", "+3", "bob"])

    assert added == ["ann", "bob"]
    assert list(store.get("pool").players) == ["ann", "bob"]


def test_rename_rejects_unusable_names() -> None:
    store, _ = _store()
    store.create("pool", GameType.WINLOSS, "ann")
    store.add_player("pool", "alice")

    with pytest.raises(InvalidPlayerName):
        store.rename_player("pool", "alice", "win")

    assert list(store.get("pool").players) == ["alice"]


def test_locks_are_not_kept_for_missing_or_deleted_boards() -> None:
    store, _ = _store()
    store.create("chess", GameType.ELO, "ann")

    for name in ("ghost-1", "ghost-2"):
        with pytest.raises(NotFound):
            store.add_player(name, "bob")
    store.delete("chess", "ann")

    assert store._key_locks == {}
    assert store._key_lock_users == {}


def test_nested_lock_on_new_board_is_kept_once_created() -> None:
    store, _ = _store()
    with store.locked("chess"):
        store.create("chess", GameType.ELO, "ann")
    assert list(store._key_locks) == ["chess"]
    assert store._key_lock_users == {"chess": 0}
