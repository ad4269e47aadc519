#!/usr/bin/env python3
"""Record one game result from the command line."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ledger import RatingHistoryLedger
from domain.recording import InvalidResultError, ResultRecorder
from repositories import (
    SqlGameLookup,
    SqlRatingHistoryStore,
    SqlResultStore,
    ensure_schema,
    get_or_create_player,
    upsert_rating,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Report game results.",
)


def parse_team(value: str) -> tuple[int, list[str]]:
    """Parse ``RANK:name,name`` into a rank and player names."""
    rank_text, separator, names_text = value.partition(":")
    if not separator:
        raise typer.BadParameter(f"Expected RANK:player[,player...], got '{value}'", param_hint="--team")
    try:
        rank = int(rank_text.strip())
    except ValueError as exc:
        raise typer.BadParameter(f"Rank must be an integer in '{value}'", param_hint="--team") from exc
    names = [name.strip() for name in names_text.split(",") if name.strip()]
    return rank, names


@app.command()
def record(
    game_name: Annotated[
        str,
        typer.Option("--game", help="Game name as synced from configs/games."),
    ],
    teams: Annotated[
        list[str],
        typer.Option(
            "--team",
            help="Team as RANK:player[,player...]; repeat once per team in placement order.",
        ),
    ],
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Validate and store one result; exits with status 1 when it is invalid."""
    parsed_teams = [parse_team(value) for value in teams]

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        games = SqlGameLookup(session)
        game = games.get_game_by_name(game_name)
        if game is None or game.id is None:
            raise typer.BadParameter(f"Unknown game '{game_name}'", param_hint="--game")

        recorder = ResultRecorder(games=games, store=SqlResultStore(session), echo=typer.echo)
        result = recorder.new_result(game.id)
        for rank, names in parsed_teams:
            result.build_team(
                rank=rank,
                players=[get_or_create_player(session, name) for name in names],
            )

        try:
            recorder.record(result)
        except InvalidResultError as exc:
            session.rollback()
            for message in exc.messages:
                typer.echo(f"invalid: {message}", err=True)
            raise typer.Exit(code=1) from exc
        except Exception:
            session.rollback()
            raise
        session.commit()


@app.command()
def rating(
    player_name: Annotated[str, typer.Option("--player", help="Player name.")],
    game_name: Annotated[str, typer.Option("--game", help="Game name.")],
    value: Annotated[float, typer.Option("--value", help="Rating value computed for the player.")],
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Store a new current rating and append it to the player's rating history."""
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        game = SqlGameLookup(session).get_game_by_name(game_name)
        if game is None or game.id is None:
            raise typer.BadParameter(f"Unknown game '{game_name}'", param_hint="--game")
        player = get_or_create_player(session, player_name)

        try:
            upsert_rating(session, player_id=player.id, game_id=game.id, value=value)
            session.commit()
        except Exception:
            session.rollback()
            raise

    ledger = RatingHistoryLedger(SqlRatingHistoryStore(session_factory), echo=typer.echo)
    ledger.append(player, game, value)


if __name__ == "__main__":
    app()
