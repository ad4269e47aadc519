"""Append-only rating history per (player, game), most recent first."""

from __future__ import annotations

import threading
import weakref
from collections.abc import Callable
from datetime import datetime

from domain.common import Game, Player, RatingHistoryEvent, utc_now
from domain.protocol import RatingHistoryStore


class UnknownSubjectError(LookupError):
    """Raised when appending history for a (player, game) pair with no rating."""

    def __init__(self, player_id: int | None, game_id: int | None) -> None:
        super().__init__(f"No rating for player_id={player_id} game_id={game_id}")
        self.player_id = player_id
        self.game_id = game_id


def event_order_key(event: RatingHistoryEvent) -> tuple[datetime, int]:
    return (event.recorded_at, event.id)


class RatingHistoryLedger:
    """Records rating values supplied by the external rating process.

    Appends for the same (player, game) pair are serialized; appends for
    different pairs proceed independently. A pair's lock lives only while
    some append holds it, so the lock table does not grow with the number of
    pairs ever seen.

    ``recorded_at`` never moves backwards within a pair: if the clock reads
    earlier than the newest stored event, the new event reuses that event's
    timestamp and sorts ahead of it by insertion.
    """

    def __init__(
        self,
        store: RatingHistoryStore,
        *,
        clock: Callable[[], datetime] = utc_now,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.echo = echo
        self._locks: weakref.WeakValueDictionary[tuple[int, int], threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def append(self, player: Player, game: Game, value: float) -> RatingHistoryEvent:
        """Record ``value`` as the newest rating event for the pair."""
        if game.id is None:
            raise UnknownSubjectError(player.id, None)

        with self._lock_for(player.id, game.id):
            rating = self.store.find_rating(player.id, game.id)
            if rating is None:
                raise UnknownSubjectError(player.id, game.id)
            recorded_at = self.clock()
            previous = self.store.latest_event(player.id, game.id)
            if previous is not None and previous.recorded_at > recorded_at:
                recorded_at = previous.recorded_at
            event = self.store.add_event(rating, float(value), recorded_at)

        if self.echo is not None:
            self.echo(
                f"rating_event player_id={player.id} game_id={game.id} "
                f"event_id={event.id} value={event.value}"
            )
        return event

    def events_for(self, player: Player, game: Game) -> tuple[RatingHistoryEvent, ...]:
        """All events for the pair, most recent first."""
        if game.id is None:
            return ()
        return tuple(self.store.list_events(player.id, game.id))

    def latest(self, player: Player, game: Game) -> RatingHistoryEvent | None:
        if game.id is None:
            return None
        return self.store.latest_event(player.id, game.id)

    def _lock_for(self, player_id: int, game_id: int) -> threading.Lock:
        key = (player_id, game_id)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


__all__ = ["RatingHistoryLedger", "UnknownSubjectError", "event_order_key"]
