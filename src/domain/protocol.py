"""Ports the domain services consume; the SQL repositories implement them."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from domain.common import Game, Rating, RatingHistoryEvent
from domain.results import Result


@runtime_checkable
class GameLookup(Protocol):
    """Games (and their rules) by identifier."""

    def get_game(self, game_id: int) -> Game | None: ...


@runtime_checkable
class ResultQuery(Protocol):
    """Read side of the result store."""

    def results_for_game(self, player_id: int, game_id: int) -> Sequence[Result]:
        """All results involving the player for one game, oldest first."""
        ...


@runtime_checkable
class ResultStore(ResultQuery, Protocol):
    """Write side of the result store."""

    def add(self, result: Result) -> Result: ...

    def touch_game(self, game_id: int, at: datetime) -> None: ...


@runtime_checkable
class RatingHistoryStore(Protocol):
    """Append-only storage for rating history events."""

    def find_rating(self, player_id: int, game_id: int) -> Rating | None: ...

    def add_event(self, rating: Rating, value: float, recorded_at: datetime) -> RatingHistoryEvent: ...

    def latest_event(self, player_id: int, game_id: int) -> RatingHistoryEvent | None:
        """The event that ``list_events`` would return first, if any."""
        ...

    def list_events(self, player_id: int, game_id: int) -> Sequence[RatingHistoryEvent]:
        """Events for the pair, most recent first."""
        ...


__all__ = [
    "GameLookup",
    "RatingHistoryStore",
    "ResultQuery",
    "ResultStore",
]
