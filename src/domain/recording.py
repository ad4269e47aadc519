"""Application-side flow for reporting a result: build, validate, persist."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from domain.common import utc_now
from domain.protocol import GameLookup, ResultStore
from domain.results import Result
from domain.validation import ResultValidator


class UnknownGameError(LookupError):
    """Raised when a result references a game that does not exist."""

    def __init__(self, game_id: int) -> None:
        super().__init__(f"Unknown game_id={game_id}")
        self.game_id = game_id


class InvalidResultError(ValueError):
    """Raised when a caller tries to record a result that fails validation."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("Invalid result: " + "; ".join(messages))
        self.messages = list(messages)


class ResultRecorder:
    """Validates candidate results and hands valid ones to the result store.

    Recording also touches the owning game's ``updated_at``; the store does
    not cascade that write on its own.
    """

    def __init__(
        self,
        *,
        games: GameLookup,
        store: ResultStore,
        validator: ResultValidator | None = None,
        clock: Callable[[], datetime] = utc_now,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self.games = games
        self.store = store
        self.validator = validator or ResultValidator()
        self.clock = clock
        self.echo = echo

    def new_result(self, game_id: int) -> Result:
        """Start a transient result for a known game; attach teams with ``build_team``."""
        game = self.games.get_game(game_id)
        if game is None:
            raise UnknownGameError(game_id)
        return Result(game=game)

    def record(self, result: Result) -> Result:
        if result.is_persisted:
            raise ValueError(f"Result id={result.id} is already recorded")
        if result.game.id is None:
            raise ValueError(f"Game {result.game.name!r} has no id")

        messages = self.validator.validate(result)
        if messages:
            if self.echo is not None:
                self.echo(f"rejected game={result.game.name} failures={messages}")
            raise InvalidResultError(messages)

        created_at = self.clock()
        stored = self.store.add(replace(result, teams=list(result.teams), created_at=created_at))
        self.store.touch_game(result.game.id, created_at)

        if self.echo is not None:
            summary = stored.summary()
            self.echo(
                f"recorded result_id={stored.id} game={result.game.name} "
                f"teams={len(stored.teams)} winner={summary.winner} "
                f"loser={summary.loser} created_at={summary.created_at}"
            )
        return stored


__all__ = ["InvalidResultError", "ResultRecorder", "UnknownGameError"]
