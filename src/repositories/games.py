"""Persistence helpers for games and their result rules."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from domain.common import Game, GameRules, utc_now
from domain.game_config import GameConfig
from models import GameRow


def game_from_row(row: GameRow) -> Game:
    return Game(
        id=row.id,
        name=row.name,
        rules=GameRules(
            min_teams=row.min_teams,
            max_teams=row.max_teams,
            min_players_per_team=row.min_players_per_team,
            max_players_per_team=row.max_players_per_team,
            allow_ties=row.allow_ties,
        ),
    )


def upsert_game(session: Session, config: GameConfig) -> GameRow:
    """Create or update one game definition from its config."""
    row = session.execute(select(GameRow).where(GameRow.name == config.name)).scalar_one_or_none()
    if row is None:
        row = GameRow(name=config.name)
        session.add(row)
    else:
        row.updated_at = utc_now()

    row.description = config.description
    row.min_teams = config.rules.min_teams
    row.max_teams = config.rules.max_teams
    row.min_players_per_team = config.rules.min_players_per_team
    row.max_players_per_team = config.rules.max_players_per_team
    row.allow_ties = config.rules.allow_ties
    session.flush()
    return row


def touch_game(session: Session, game_id: int, at: datetime) -> None:
    """Mark a game as modified at ``at``."""
    session.execute(update(GameRow).where(GameRow.id == game_id).values(updated_at=at))


def list_games(session: Session) -> list[GameRow]:
    return list(session.execute(select(GameRow).order_by(GameRow.name)).scalars())


class SqlGameLookup:
    """``GameLookup`` backed by the games table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_game(self, game_id: int) -> Game | None:
        row = self.session.get(GameRow, game_id)
        return None if row is None else game_from_row(row)

    def get_game_by_name(self, name: str) -> Game | None:
        row = self.session.execute(select(GameRow).where(GameRow.name == name)).scalar_one_or_none()
        return None if row is None else game_from_row(row)


__all__ = ["SqlGameLookup", "game_from_row", "list_games", "touch_game", "upsert_game"]
