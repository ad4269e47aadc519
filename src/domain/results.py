"""Result aggregate: ranked teams of players and winner/loser derivation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from domain.common import Game, Player

CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


@dataclass(frozen=True)
class Team:
    """A ranked group of players within one result. Lower rank is better."""

    rank: int | None
    players: tuple[Player, ...] = ()

    @property
    def is_ranked(self) -> bool:
        return isinstance(self.rank, int) and not isinstance(self.rank, bool)


@dataclass(frozen=True)
class ResultSummary:
    """Minimal rendered form of a result."""

    winner: str | None
    loser: str | None
    created_at: str | None


@dataclass
class Result:
    """One reported outcome for a game, composed of teams in construction order."""

    game: Game
    teams: list[Team] = field(default_factory=list)
    created_at: datetime | None = None
    id: int | None = None

    def build_team(self, *, rank: int | None, players: Iterable[Player] = ()) -> Team:
        """Attach a new team to this result and return it."""
        team = Team(rank=rank, players=tuple(players))
        self.teams.append(team)
        return team

    @property
    def is_persisted(self) -> bool:
        return self.id is not None and self.created_at is not None

    def first_place_rank(self) -> int | None:
        """Lowest rank among ranked teams; None when no team carries a rank."""
        ranks = [team.rank for team in self.teams if team.is_ranked]
        return min(ranks) if ranks else None

    def winners(self) -> list[Player]:
        """Players of every team sharing the minimum rank present."""
        best = self.first_place_rank()
        if best is None:
            return []
        return [
            player for team in self.teams if team.is_ranked and team.rank == best for player in team.players
        ]

    def losers(self) -> list[Player]:
        """Players of every team ranked strictly below first place."""
        best = self.first_place_rank()
        if best is None:
            return []
        return [
            player for team in self.teams if team.is_ranked and team.rank > best for player in team.players
        ]

    def players(self) -> list[Player]:
        return self.winners() + self.losers()

    @property
    def winner(self) -> Player | None:
        winners = self.winners()
        return winners[0] if winners else None

    @property
    def loser(self) -> Player | None:
        losers = self.losers()
        return losers[0] if losers else None

    def summary(self) -> ResultSummary:
        winner = self.winner
        loser = self.loser
        return ResultSummary(
            winner=None if winner is None else winner.name,
            loser=None if loser is None else loser.name,
            created_at=None if self.created_at is None else format_created_at(self.created_at),
        )

    def as_json(self) -> dict[str, Any]:
        summary = self.summary()
        return {
            "winner": summary.winner,
            "loser": summary.loser,
            "created_at": summary.created_at,
        }


def format_created_at(value: datetime) -> str:
    """Render a timestamp in UTC. Naive values are taken to already be UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime(CREATED_AT_FORMAT)


__all__ = [
    "CREATED_AT_FORMAT",
    "Result",
    "ResultSummary",
    "Team",
    "format_created_at",
]
