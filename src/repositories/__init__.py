"""Database repository helpers."""

from repositories.games import SqlGameLookup, list_games, touch_game, upsert_game
from repositories.players import get_or_create_player, get_player, get_player_by_name
from repositories.rating_history import SqlRatingHistoryStore, upsert_rating
from repositories.results import SqlResultStore
from repositories.schema import ensure_schema

__all__ = [
    "SqlGameLookup",
    "SqlRatingHistoryStore",
    "SqlResultStore",
    "ensure_schema",
    "get_or_create_player",
    "get_player",
    "get_player_by_name",
    "list_games",
    "touch_game",
    "upsert_game",
    "upsert_rating",
]
