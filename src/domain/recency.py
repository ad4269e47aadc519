"""Answer whether a result is the latest one for every player it involves."""

from __future__ import annotations

from datetime import datetime

from domain.common import Game, Player
from domain.protocol import ResultQuery
from domain.results import Result


def result_order_key(result: Result) -> tuple[datetime, int]:
    if result.created_at is None:
        raise ValueError("Result has not been recorded yet")
    return (result.created_at, result.id or 0)


class MostRecentResolver:
    """Recency checks over results already materialized by a ``ResultQuery``."""

    def __init__(self, results: ResultQuery) -> None:
        self.results = results

    def results_for_game(self, player: Player, game: Game) -> list[Result]:
        """A player's results restricted to one game, oldest first."""
        if game.id is None:
            return []
        return list(self.results.results_for_game(player.id, game.id))

    def is_most_recent(self, result: Result) -> bool:
        """True when no player in ``result`` has a strictly later result in the same game."""
        if result.created_at is None:
            return False

        key = result_order_key(result)
        seen: set[Player] = set()
        for player in result.players():
            if player in seen:
                continue
            seen.add(player)
            for other in self.results_for_game(player, result.game):
                if other.id is not None and other.id == result.id:
                    continue
                if other.created_at is not None and result_order_key(other) > key:
                    return False
        return True


__all__ = ["MostRecentResolver", "result_order_key"]
