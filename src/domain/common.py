"""Shared value types for games, players, and ratings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Default timestamp source (naive UTC, matching the database columns)."""
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class Player:
    """A player identity; equality is by id only."""

    id: int
    name: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class GameRules:
    """Legal shapes of a result for one game. ``None`` bounds are unbounded."""

    min_teams: int | None = None
    max_teams: int | None = None
    min_players_per_team: int | None = None
    max_players_per_team: int | None = None
    allow_ties: bool = True


@dataclass(frozen=True)
class Game:
    """Configuration context under which results are reported."""

    id: int | None
    name: str
    rules: GameRules = field(default_factory=GameRules)


@dataclass(frozen=True)
class Rating:
    """Current rating value for one (player, game) pair, owned by the rating process."""

    id: int
    player_id: int
    game_id: int
    value: float


@dataclass(frozen=True)
class RatingHistoryEvent:
    """One recorded rating value for a (player, game) pair."""

    id: int
    rating_id: int
    player_id: int
    game_id: int
    value: float
    recorded_at: datetime


__all__ = [
    "Game",
    "GameRules",
    "Player",
    "Rating",
    "RatingHistoryEvent",
    "utc_now",
]
