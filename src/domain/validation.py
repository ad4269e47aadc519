"""Structural validation of a candidate result against its game's rules."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence

from domain.common import GameRules
from domain.results import Result

WINNING_RANK = 1

MUST_HAVE_WINNER = "must have a winner"
MUST_HAVE_UNIQUE_PLAYERS = "must have unique players"
TIES_NOT_ALLOWED = "game does not allow ties"
MUST_HAVE_POSITIVE_RANKS = "must have positive ranks"
WINNER_IS_LOSER = "Winner and loser can't be the same player"

ResultCheck = Callable[[Result, GameRules], str | None]


def check_winner(result: Result, rules: GameRules) -> str | None:
    # First place is always numbered 1, independent of the lowest rank present.
    if not any(team.is_ranked and team.rank == WINNING_RANK for team in result.teams):
        return MUST_HAVE_WINNER
    return None


def check_unique_players(result: Result, rules: GameRules) -> str | None:
    team_counts: Counter[object] = Counter()
    for team in result.teams:
        team_counts.update(set(team.players))
    if any(count > 1 for count in team_counts.values()):
        return MUST_HAVE_UNIQUE_PLAYERS
    return None


def check_min_teams(result: Result, rules: GameRules) -> str | None:
    if rules.min_teams is not None and len(result.teams) < rules.min_teams:
        return f"must have at least {rules.min_teams} teams"
    return None


def check_max_teams(result: Result, rules: GameRules) -> str | None:
    if rules.max_teams is not None and len(result.teams) > rules.max_teams:
        return f"must have at most {rules.max_teams} teams"
    return None


def check_min_players_per_team(result: Result, rules: GameRules) -> str | None:
    minimum = rules.min_players_per_team
    if minimum is not None and any(len(team.players) < minimum for team in result.teams):
        return f"must have at least {minimum} players per team"
    return None


def check_max_players_per_team(result: Result, rules: GameRules) -> str | None:
    maximum = rules.max_players_per_team
    if maximum is not None and any(len(team.players) > maximum for team in result.teams):
        return f"must have at most {maximum} players per team"
    return None


def check_ties(result: Result, rules: GameRules) -> str | None:
    if rules.allow_ties:
        return None
    ranks = [team.rank for team in result.teams]
    if len(ranks) != len(set(ranks)):
        return TIES_NOT_ALLOWED
    return None


def check_positive_ranks(result: Result, rules: GameRules) -> str | None:
    if any(not team.is_ranked or team.rank < 1 for team in result.teams):
        return MUST_HAVE_POSITIVE_RANKS
    return None


def check_winner_is_not_loser(result: Result, rules: GameRules) -> str | None:
    winner = result.winner
    loser = result.loser
    if winner is None and loser is None:
        return None
    if winner == loser:
        return WINNER_IS_LOSER
    return None


DEFAULT_CHECKS: tuple[ResultCheck, ...] = (
    check_winner,
    check_unique_players,
    check_min_teams,
    check_max_teams,
    check_min_players_per_team,
    check_max_players_per_team,
    check_ties,
    check_positive_ranks,
    check_winner_is_not_loser,
)


class ResultValidator:
    """Runs every check over one result and collects the failure messages in order."""

    def __init__(self, checks: Sequence[ResultCheck] = DEFAULT_CHECKS) -> None:
        self.checks = tuple(checks)

    def validate(self, result: Result) -> list[str]:
        """Return the ordered, de-duplicated failure messages. Empty means valid."""
        rules = result.game.rules
        messages: list[str] = []
        for check in self.checks:
            message = check(result, rules)
            if message is not None and message not in messages:
                messages.append(message)
        return messages

    def is_valid(self, result: Result) -> bool:
        return not self.validate(result)


def validate(result: Result) -> list[str]:
    """Validate with the default check pipeline."""
    return ResultValidator().validate(result)


__all__ = [
    "DEFAULT_CHECKS",
    "MUST_HAVE_POSITIVE_RANKS",
    "MUST_HAVE_UNIQUE_PLAYERS",
    "MUST_HAVE_WINNER",
    "ResultCheck",
    "ResultValidator",
    "TIES_NOT_ALLOWED",
    "WINNER_IS_LOSER",
    "WINNING_RANK",
    "validate",
]
