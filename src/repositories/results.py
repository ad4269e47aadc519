"""Persistence for results, their teams, and team membership."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from domain.common import Game, Player
from domain.results import Result, Team
from models import GameRow, PlayerRow, ResultRow, ResultTeamPlayerRow, ResultTeamRow
from repositories.games import game_from_row, touch_game


class SqlResultStore:
    """``ResultStore`` backed by SQLAlchemy. Callers own the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, result: Result) -> Result:
        """Insert a validated, timestamped result and return it with its id."""
        if result.game.id is None:
            raise ValueError(f"Game {result.game.name!r} has no id")
        if result.created_at is None:
            raise ValueError("Result created_at must be set before it is stored")

        row = ResultRow(game_id=result.game.id, created_at=result.created_at)
        self.session.add(row)
        self.session.flush()

        for position, team in enumerate(result.teams):
            team_row = ResultTeamRow(result_id=row.id, position=position, rank=team.rank)
            self.session.add(team_row)
            self.session.flush()
            if team.players:
                self.session.execute(
                    insert(ResultTeamPlayerRow),
                    [
                        {"team_id": team_row.id, "position": index, "player_id": player.id}
                        for index, player in enumerate(team.players)
                    ],
                )

        return replace(result, id=row.id, teams=list(result.teams))

    def touch_game(self, game_id: int, at: datetime) -> None:
        touch_game(self.session, game_id, at)

    def get(self, result_id: int) -> Result | None:
        results = self._load_results([result_id])
        return results[0] if results else None

    def results_for_game(self, player_id: int, game_id: int) -> list[Result]:
        """All results involving the player for one game, oldest first."""
        statement = (
            select(ResultRow.id)
            .join(ResultTeamRow, ResultTeamRow.result_id == ResultRow.id)
            .join(ResultTeamPlayerRow, ResultTeamPlayerRow.team_id == ResultTeamRow.id)
            .where(
                ResultRow.game_id == game_id,
                ResultTeamPlayerRow.player_id == player_id,
            )
            .group_by(ResultRow.id, ResultRow.created_at)
            .order_by(ResultRow.created_at, ResultRow.id)
        )
        result_ids = list(self.session.execute(statement).scalars())
        return self._load_results(result_ids)

    def _load_results(self, result_ids: Sequence[int]) -> list[Result]:
        if not result_ids:
            return []

        result_rows = self.session.execute(
            select(ResultRow).where(ResultRow.id.in_(result_ids))
        ).scalars()
        rows_by_id = {row.id: row for row in result_rows}

        team_rows = list(
            self.session.execute(
                select(ResultTeamRow)
                .where(ResultTeamRow.result_id.in_(rows_by_id.keys()))
                .order_by(ResultTeamRow.result_id, ResultTeamRow.position)
            ).scalars()
        )

        members: dict[int, list[Player]] = {team_row.id: [] for team_row in team_rows}
        if team_rows:
            member_rows = self.session.execute(
                select(ResultTeamPlayerRow.team_id, PlayerRow.id, PlayerRow.name)
                .join(PlayerRow, PlayerRow.id == ResultTeamPlayerRow.player_id)
                .where(ResultTeamPlayerRow.team_id.in_(members.keys()))
                .order_by(ResultTeamPlayerRow.team_id, ResultTeamPlayerRow.position)
            )
            for team_id, player_id, player_name in member_rows:
                members[team_id].append(Player(id=player_id, name=player_name))

        teams: dict[int, list[Team]] = {result_id: [] for result_id in rows_by_id}
        for team_row in team_rows:
            teams[team_row.result_id].append(
                Team(rank=team_row.rank, players=tuple(members[team_row.id]))
            )

        games = self._load_games({row.game_id for row in rows_by_id.values()})
        return [
            Result(
                game=games[rows_by_id[result_id].game_id],
                teams=teams[result_id],
                created_at=rows_by_id[result_id].created_at,
                id=result_id,
            )
            for result_id in result_ids
            if result_id in rows_by_id
        ]

    def _load_games(self, game_ids: set[int]) -> dict[int, Game]:
        rows = self.session.execute(select(GameRow).where(GameRow.id.in_(game_ids))).scalars()
        return {row.id: game_from_row(row) for row in rows}


__all__ = ["SqlResultStore"]
