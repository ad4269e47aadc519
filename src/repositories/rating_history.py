"""Persistence for current ratings and their append-only history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Rating, RatingHistoryEvent, utc_now
from models import RatingHistoryEventRow, RatingRow


def _rating_from_row(row: RatingRow) -> Rating:
    return Rating(id=row.id, player_id=row.player_id, game_id=row.game_id, value=row.value)


def upsert_rating(session: Session, *, player_id: int, game_id: int, value: float) -> Rating:
    """Create or update the current rating for one (player, game) pair."""
    row = session.execute(
        select(RatingRow).where(RatingRow.player_id == player_id, RatingRow.game_id == game_id)
    ).scalar_one_or_none()
    if row is None:
        row = RatingRow(player_id=player_id, game_id=game_id, value=float(value))
        session.add(row)
    else:
        row.value = float(value)
        row.updated_at = utc_now()
    session.flush()
    return _rating_from_row(row)


def _events_statement(player_id: int, game_id: int) -> Select:
    return (
        select(RatingHistoryEventRow, RatingRow.player_id, RatingRow.game_id)
        .join(RatingRow, RatingRow.id == RatingHistoryEventRow.rating_id)
        .where(RatingRow.player_id == player_id, RatingRow.game_id == game_id)
        .order_by(RatingHistoryEventRow.recorded_at.desc(), RatingHistoryEventRow.id.desc())
    )


def _event_from_row(row: RatingHistoryEventRow, player_id: int, game_id: int) -> RatingHistoryEvent:
    return RatingHistoryEvent(
        id=row.id,
        rating_id=row.rating_id,
        player_id=player_id,
        game_id=game_id,
        value=row.value,
        recorded_at=row.recorded_at,
    )


class SqlRatingHistoryStore:
    """``RatingHistoryStore`` backed by SQLAlchemy.

    Every call opens its own session from ``session_factory``, so one store can
    serve appends from several threads. ``add_event`` commits before it returns,
    which means the rating it refers to must already be committed.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def find_rating(self, player_id: int, game_id: int) -> Rating | None:
        with self.session_factory() as session:
            row = session.execute(
                select(RatingRow).where(RatingRow.player_id == player_id, RatingRow.game_id == game_id)
            ).scalar_one_or_none()
            return None if row is None else _rating_from_row(row)

    def add_event(self, rating: Rating, value: float, recorded_at: datetime) -> RatingHistoryEvent:
        with self.session_factory.begin() as session:
            row = RatingHistoryEventRow(rating_id=rating.id, value=float(value), recorded_at=recorded_at)
            session.add(row)
            session.flush()
            return _event_from_row(row, rating.player_id, rating.game_id)

    def latest_event(self, player_id: int, game_id: int) -> RatingHistoryEvent | None:
        with self.session_factory() as session:
            first = session.execute(_events_statement(player_id, game_id).limit(1)).first()
            return None if first is None else _event_from_row(*first)

    def list_events(self, player_id: int, game_id: int) -> list[RatingHistoryEvent]:
        """Events for the pair, most recent first (ties broken by later insertion)."""
        with self.session_factory() as session:
            rows = session.execute(_events_statement(player_id, game_id)).all()
            return [_event_from_row(*row) for row in rows]


__all__ = ["SqlRatingHistoryStore", "upsert_rating"]
