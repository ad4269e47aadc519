"""results, result_teams, and result_team_players table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class ResultRow(Base):
    """One reported outcome for a game."""

    __tablename__ = "results"
    __table_args__ = (Index("idx_results_game_created", "game_id", "created_at", "id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class ResultTeamRow(Base):
    """A ranked team within one result; ``position`` keeps construction order."""

    __tablename__ = "result_teams"
    __table_args__ = (
        UniqueConstraint("result_id", "position", name="uq_result_teams_result_position"),
        Index("idx_result_teams_result", "result_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    result_id: Mapped[int] = mapped_column(ForeignKey("results.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)


class ResultTeamPlayerRow(Base):
    """Player membership of a team; ``position`` keeps insertion order."""

    __tablename__ = "result_team_players"
    __table_args__ = (Index("idx_result_team_players_player", "player_id", "team_id"),)

    team_id: Mapped[int] = mapped_column(ForeignKey("result_teams.id"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
