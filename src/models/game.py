"""games table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class GameRow(Base):
    """One game and the rules its results are validated against."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(
            "min_teams IS NULL OR max_teams IS NULL OR min_teams <= max_teams",
            name="ck_games_team_bounds",
        ),
        CheckConstraint(
            "min_players_per_team IS NULL OR max_players_per_team IS NULL "
            "OR min_players_per_team <= max_players_per_team",
            name="ck_games_player_bounds",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    min_teams: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_teams: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_players_per_team: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_players_per_team: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allow_ties: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
