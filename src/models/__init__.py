"""ORM models."""

from models.base import Base
from models.game import GameRow
from models.player import PlayerRow
from models.rating import RatingHistoryEventRow, RatingRow
from models.result import ResultRow, ResultTeamPlayerRow, ResultTeamRow

__all__ = [
    "Base",
    "GameRow",
    "PlayerRow",
    "RatingHistoryEventRow",
    "RatingRow",
    "ResultRow",
    "ResultTeamPlayerRow",
    "ResultTeamRow",
]
