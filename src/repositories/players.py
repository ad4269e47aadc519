"""Persistence helpers for players."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import Player
from models import PlayerRow


def get_player(session: Session, player_id: int) -> Player | None:
    row = session.get(PlayerRow, player_id)
    return None if row is None else Player(id=row.id, name=row.name)


def get_player_by_name(session: Session, name: str) -> Player | None:
    row = session.execute(select(PlayerRow).where(PlayerRow.name == name)).scalar_one_or_none()
    return None if row is None else Player(id=row.id, name=row.name)


def get_or_create_player(session: Session, name: str) -> Player:
    """Return the player with ``name``, creating it when missing."""
    player = get_player_by_name(session, name)
    if player is not None:
        return player
    row = PlayerRow(name=name)
    session.add(row)
    session.flush()
    return Player(id=row.id, name=row.name)


__all__ = ["get_or_create_player", "get_player", "get_player_by_name"]
