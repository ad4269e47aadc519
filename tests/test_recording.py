"""Unit tests for the result recording flow."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from domain.common import Game, GameRules, Player
from domain.recording import InvalidResultError, ResultRecorder, UnknownGameError
from domain.results import Result

_NOW = datetime(2026, 2, 1, 9, 30, 0)


class _MemoryGames:
    def __init__(self, *games: Game) -> None:
        self.games = {game.id: game for game in games}

    def get_game(self, game_id: int) -> Game | None:
        return self.games.get(game_id)


class _MemoryResultStore:
    def __init__(self) -> None:
        self.results: list[Result] = []
        self.touched: list[tuple[int, datetime]] = []

    def add(self, result: Result) -> Result:
        stored = replace(result, id=len(self.results) + 1)
        self.results.append(stored)
        return stored

    def touch_game(self, game_id: int, at: datetime) -> None:
        self.touched.append((game_id, at))

    def results_for_game(self, player_id: int, game_id: int) -> list[Result]:
        return [
            result
            for result in self.results
            if result.game.id == game_id and any(player.id == player_id for player in result.players())
        ]


def _recorder(store: _MemoryResultStore, *games: Game, echo=None) -> ResultRecorder:
    return ResultRecorder(
        games=_MemoryGames(*games),
        store=store,
        clock=lambda: _NOW,
        echo=echo,
    )


def test_record_valid_result_stamps_and_stores_it() -> None:
    game = Game(id=3, name="chess", rules=GameRules(min_teams=2, max_teams=2))
    store = _MemoryResultStore()
    recorder = _recorder(store, game)

    result = recorder.new_result(3)
    result.build_team(rank=1, players=[Player(id=1, name="alice")])
    result.build_team(rank=2, players=[Player(id=2, name="bob")])
    stored = recorder.record(result)

    assert stored.id == 1
    assert stored.created_at == _NOW
    assert stored.is_persisted
    assert stored.as_json() == {"winner": "alice", "loser": "bob", "created_at": "2026-02-01 09:30:00 UTC"}
    assert result.created_at is None
    assert store.results == [stored]


def test_record_touches_the_owning_game() -> None:
    game = Game(id=3, name="chess")
    store = _MemoryResultStore()
    recorder = _recorder(store, game)

    result = recorder.new_result(3)
    result.build_team(rank=1, players=[Player(id=1)])
    result.build_team(rank=2, players=[Player(id=2)])
    recorder.record(result)

    assert store.touched == [(3, _NOW)]


def test_record_invalid_result_raises_with_messages_and_stores_nothing() -> None:
    game = Game(id=3, name="chess", rules=GameRules(min_teams=4, max_teams=5))
    store = _MemoryResultStore()
    lines: list[str] = []
    recorder = _recorder(store, game, echo=lines.append)

    result = recorder.new_result(3)
    result.build_team(rank=1, players=[Player(id=1)])
    result.build_team(rank=2, players=[Player(id=2)])
    result.build_team(rank=3, players=[Player(id=3)])

    with pytest.raises(InvalidResultError) as excinfo:
        recorder.record(result)

    assert excinfo.value.messages == ["must have at least 4 teams"]
    assert "must have at least 4 teams" in str(excinfo.value)
    assert store.results == []
    assert store.touched == []
    assert lines == ["rejected game=chess failures=['must have at least 4 teams']"]


def test_record_echoes_summary_line() -> None:
    game = Game(id=3, name="chess")
    lines: list[str] = []
    recorder = _recorder(_MemoryResultStore(), game, echo=lines.append)

    result = recorder.new_result(3)
    result.build_team(rank=1, players=[Player(id=1, name="alice")])
    result.build_team(rank=2, players=[Player(id=2, name="bob")])
    recorder.record(result)

    assert lines == [
        "recorded result_id=1 game=chess teams=2 winner=alice loser=bob created_at=2026-02-01 09:30:00 UTC"
    ]


def test_new_result_for_unknown_game_raises() -> None:
    recorder = _recorder(_MemoryResultStore())

    with pytest.raises(UnknownGameError, match="game_id=99"):
        recorder.new_result(99)


def test_recording_twice_is_rejected() -> None:
    game = Game(id=3, name="chess")
    recorder = _recorder(_MemoryResultStore(), game)

    result = recorder.new_result(3)
    result.build_team(rank=1, players=[Player(id=1)])
    stored = recorder.record(result)

    with pytest.raises(ValueError, match="already recorded"):
        recorder.record(stored)
