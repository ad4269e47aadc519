"""Unit tests for the append-only rating history ledger."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from itertools import count

import pytest

from domain.common import Game, Player, Rating, RatingHistoryEvent
from domain.ledger import RatingHistoryLedger, UnknownSubjectError, event_order_key


class _MemoryHistoryStore:
    def __init__(self) -> None:
        self.ratings: dict[tuple[int, int], Rating] = {}
        self.events: list[RatingHistoryEvent] = []
        self._ids = count(1)
        self._lock = threading.Lock()

    def add_rating(self, player_id: int, game_id: int, value: float = 1000.0) -> Rating:
        rating = Rating(id=len(self.ratings) + 1, player_id=player_id, game_id=game_id, value=value)
        self.ratings[(player_id, game_id)] = rating
        return rating

    def find_rating(self, player_id: int, game_id: int) -> Rating | None:
        return self.ratings.get((player_id, game_id))

    def add_event(self, rating: Rating, value: float, recorded_at: datetime) -> RatingHistoryEvent:
        with self._lock:
            event = RatingHistoryEvent(
                id=next(self._ids),
                rating_id=rating.id,
                player_id=rating.player_id,
                game_id=rating.game_id,
                value=value,
                recorded_at=recorded_at,
            )
            self.events.append(event)
            return event

    def list_events(self, player_id: int, game_id: int) -> list[RatingHistoryEvent]:
        with self._lock:
            matching = [
                event
                for event in self.events
                if event.player_id == player_id and event.game_id == game_id
            ]
        return sorted(matching, key=event_order_key, reverse=True)

    def latest_event(self, player_id: int, game_id: int) -> RatingHistoryEvent | None:
        events = self.list_events(player_id, game_id)
        return events[0] if events else None


def _ticking_clock(start: datetime = datetime(2026, 1, 1, 12, 0, 0)):
    ticks = count()

    def clock() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return clock


def _frozen_clock() -> datetime:
    return datetime(2026, 1, 1, 12, 0, 0)


def test_events_are_returned_most_recent_first() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10, value=1002.0)
    ledger = RatingHistoryLedger(store, clock=_ticking_clock())
    player = Player(id=1, name="alice")
    game = Game(id=10, name="chess")

    ledger.append(player, game, 1000.0)
    ledger.append(player, game, 1001.0)

    assert [event.value for event in ledger.events_for(player, game)] == [1001.0, 1000.0]


def test_most_recent_append_is_always_first_even_with_equal_timestamps() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_frozen_clock)
    player = Player(id=1)
    game = Game(id=10, name="chess")

    for value in (1000.0, 1010.0, 995.0):
        appended = ledger.append(player, game, value)
        assert ledger.events_for(player, game)[0] == appended
        assert ledger.latest(player, game) == appended

    events = ledger.events_for(player, game)
    assert [event.value for event in events] == [995.0, 1010.0, 1000.0]
    keys = [event_order_key(event) for event in events]
    assert keys == sorted(keys, reverse=True)


def test_events_are_scoped_to_player_and_game() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    store.add_rating(player_id=1, game_id=20)
    store.add_rating(player_id=2, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_ticking_clock())
    alice = Player(id=1, name="alice")
    bob = Player(id=2, name="bob")
    chess = Game(id=10, name="chess")
    go = Game(id=20, name="go")

    ledger.append(alice, chess, 1010.0)
    ledger.append(alice, go, 990.0)
    ledger.append(bob, chess, 1005.0)

    assert [event.value for event in ledger.events_for(alice, chess)] == [1010.0]
    assert [event.value for event in ledger.events_for(alice, go)] == [990.0]
    assert [event.value for event in ledger.events_for(bob, chess)] == [1005.0]
    assert ledger.events_for(bob, go) == ()
    assert ledger.latest(bob, go) is None


def test_append_without_rating_raises_unknown_subject() -> None:
    ledger = RatingHistoryLedger(_MemoryHistoryStore())

    with pytest.raises(UnknownSubjectError, match="player_id=1 game_id=10") as excinfo:
        ledger.append(Player(id=1), Game(id=10, name="chess"), 1000.0)

    assert excinfo.value.player_id == 1
    assert excinfo.value.game_id == 10


def test_append_for_unsaved_game_raises_unknown_subject() -> None:
    ledger = RatingHistoryLedger(_MemoryHistoryStore())

    with pytest.raises(UnknownSubjectError):
        ledger.append(Player(id=1), Game(id=None, name="draft"), 1000.0)


def test_append_echoes_recorded_event() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    lines: list[str] = []
    ledger = RatingHistoryLedger(store, clock=_frozen_clock, echo=lines.append)

    event = ledger.append(Player(id=1), Game(id=10, name="chess"), 1012.5)

    assert event.recorded_at == _frozen_clock()
    assert lines == [f"rating_event player_id=1 game_id=10 event_id={event.id} value=1012.5"]


def test_concurrent_appends_for_one_pair_are_all_recorded_in_order() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_frozen_clock)
    player = Player(id=1)
    game = Game(id=10, name="chess")

    threads = [
        threading.Thread(target=ledger.append, args=(player, game, float(value)))
        for value in range(50)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    events = ledger.events_for(player, game)
    assert len(events) == 50
    assert [event.id for event in events] == sorted((event.id for event in events), reverse=True)


def test_appends_for_different_pairs_do_not_wait_on_each_other(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    store.add_rating(player_id=2, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_frozen_clock)
    chess = Game(id=10, name="chess")

    alice_writing = threading.Event()
    release_alice = threading.Event()
    add_event = store.add_event

    def slow_add_event(rating: Rating, value: float, recorded_at: datetime) -> RatingHistoryEvent:
        if rating.player_id == 1:
            alice_writing.set()
            release_alice.wait(timeout=5)
        return add_event(rating, value, recorded_at)

    monkeypatch.setattr(store, "add_event", slow_add_event)

    alice = threading.Thread(target=ledger.append, args=(Player(id=1), chess, 1000.0))
    bob = threading.Thread(target=ledger.append, args=(Player(id=2), chess, 1010.0))
    alice.start()
    try:
        assert alice_writing.wait(timeout=5)
        bob.start()
        bob.join(timeout=2)
        bob_finished_first = not bob.is_alive()
    finally:
        release_alice.set()
    alice.join(timeout=5)
    bob.join(timeout=5)

    assert bob_finished_first
    assert [event.value for event in ledger.events_for(Player(id=2), chess)] == [1010.0]
    assert [event.value for event in ledger.events_for(Player(id=1), chess)] == [1000.0]


def test_concurrent_appends_across_pairs_keep_each_history_complete() -> None:
    store = _MemoryHistoryStore()
    players = [Player(id=player_id) for player_id in range(1, 11)]
    for player in players:
        store.add_rating(player_id=player.id, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_frozen_clock)
    game = Game(id=10, name="chess")

    def append_all(player: Player) -> None:
        for value in range(20):
            ledger.append(player, game, float(value))

    threads = [threading.Thread(target=append_all, args=(player,)) for player in players]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for player in players:
        events = ledger.events_for(player, game)
        assert [event.value for event in events] == [float(value) for value in reversed(range(20))]


def test_reads_during_appends_see_a_consistent_history() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    ledger = RatingHistoryLedger(store, clock=_ticking_clock())
    player = Player(id=1)
    game = Game(id=10, name="chess")
    snapshots: list[tuple[RatingHistoryEvent, ...]] = []
    writing = threading.Event()

    def write() -> None:
        for value in range(100):
            ledger.append(player, game, float(value))
        writing.clear()

    def read() -> None:
        while writing.is_set():
            snapshots.append(ledger.events_for(player, game))

    writing.set()
    threads = [threading.Thread(target=write), threading.Thread(target=read), threading.Thread(target=read)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for snapshot in snapshots:
        assert [event.value for event in snapshot] == [float(value) for value in reversed(range(len(snapshot)))]
    assert len(ledger.events_for(player, game)) == 100


def test_clock_moving_backwards_keeps_newest_append_first() -> None:
    store = _MemoryHistoryStore()
    store.add_rating(player_id=1, game_id=10)
    readings = iter([datetime(2026, 1, 1, 12, 0, 10), datetime(2026, 1, 1, 12, 0, 5)])
    ledger = RatingHistoryLedger(store, clock=lambda: next(readings))
    player = Player(id=1)
    game = Game(id=10, name="chess")

    first = ledger.append(player, game, 1000.0)
    second = ledger.append(player, game, 1004.0)

    assert second.recorded_at == first.recorded_at
    assert ledger.events_for(player, game) == (second, first)
    assert ledger.latest(player, game) == second


def test_pair_locks_are_released_after_appends() -> None:
    store = _MemoryHistoryStore()
    game = Game(id=10, name="chess")
    ledger = RatingHistoryLedger(store, clock=_frozen_clock)

    for player_id in range(1, 6):
        store.add_rating(player_id=player_id, game_id=10)
        ledger.append(Player(id=player_id), game, 1000.0)

    assert len(ledger._locks) == 0
