#!/usr/bin/env python3
"""Show a player's results and rating history for one game."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.orm import Session

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.common import Game, Player
from domain.ledger import RatingHistoryLedger
from domain.recency import MostRecentResolver
from repositories import SqlGameLookup, SqlRatingHistoryStore, SqlResultStore, get_player_by_name

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query player results and rating history.",
)

PlayerOption = Annotated[str, typer.Option("--player", help="Player name.")]
GameOption = Annotated[str, typer.Option("--game", help="Game name.")]
DbUrlOption = Annotated[str, typer.Option("--db-url", help="Database URL.")]


def _resolve(session: Session, player_name: str, game_name: str) -> tuple[Player, Game]:
    player = get_player_by_name(session, player_name)
    if player is None:
        raise typer.BadParameter(f"Unknown player '{player_name}'", param_hint="--player")
    game = SqlGameLookup(session).get_game_by_name(game_name)
    if game is None:
        raise typer.BadParameter(f"Unknown game '{game_name}'", param_hint="--game")
    return player, game


@app.command()
def results(
    player_name: PlayerOption,
    game_name: GameOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Print the player's results in one game, newest last."""
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        player, game = _resolve(session, player_name, game_name)
        resolver = MostRecentResolver(SqlResultStore(session))
        player_results = resolver.results_for_game(player, game)
        if not player_results:
            typer.echo("no results")
            return

        for result in player_results:
            summary = result.summary()
            typer.echo(
                f"result_id={result.id} created_at={summary.created_at} "
                f"winner={summary.winner} loser={summary.loser} "
                f"won={player in result.winners()} "
                f"most_recent={resolver.is_most_recent(result)}"
            )


@app.command()
def history(
    player_name: PlayerOption,
    game_name: GameOption,
    limit: Annotated[
        int,
        typer.Option("--limit", help="Maximum number of events to print."),
    ] = 20,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Print rating history events for the player in one game, most recent first."""
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")

    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        player, game = _resolve(session, player_name, game_name)

    events = RatingHistoryLedger(SqlRatingHistoryStore(session_factory)).events_for(player, game)
    if not events:
        typer.echo("no rating history")
        return

    for event in events[:limit]:
        typer.echo(f"{event.recorded_at.isoformat(sep=' ')}\t{event.value:.1f}")


if __name__ == "__main__":
    app()
