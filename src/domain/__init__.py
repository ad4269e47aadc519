"""Result validation, outcome derivation, and rating history."""

from domain.common import Game, GameRules, Player, Rating, RatingHistoryEvent
from domain.ledger import RatingHistoryLedger, UnknownSubjectError
from domain.recency import MostRecentResolver
from domain.recording import InvalidResultError, ResultRecorder, UnknownGameError
from domain.results import Result, ResultSummary, Team
from domain.validation import ResultValidator, validate

__all__ = [
    "Game",
    "GameRules",
    "InvalidResultError",
    "MostRecentResolver",
    "Player",
    "Rating",
    "RatingHistoryEvent",
    "RatingHistoryLedger",
    "Result",
    "ResultRecorder",
    "ResultSummary",
    "ResultValidator",
    "Team",
    "UnknownGameError",
    "UnknownSubjectError",
    "validate",
]
