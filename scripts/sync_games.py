#!/usr/bin/env python3
"""Sync game definitions from TOML configs into the database."""

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
from domain.game_config import load_game_configs
from repositories import ensure_schema, list_games, upsert_game

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "games"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Game catalog commands.",
)


@app.command()
def sync(
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            help="Database URL. Defaults to the local result_ladder postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of game TOML files."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str | None,
        typer.Option(
            "--config-name",
            help="Optional single config filename (for example: chess.toml).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Validate configs without writing games."),
    ] = False,
) -> None:
    """Create or update every configured game."""
    try:
        configs = load_game_configs(config_dir)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-dir") from exc

    if config_name is not None:
        configs = [config for config in configs if config.file_path.name == config_name]
        if not configs:
            raise typer.BadParameter(
                f"No config named '{config_name}' found in {config_dir}",
                param_hint="--config-name",
            )

    typer.echo(f"loaded_configs={len(configs)} config_dir={config_dir}")
    if dry_run:
        for config in configs:
            typer.echo(f"[dry-run] config={config.file_path.name} game={config.name} rules={config.as_config_json()}")
        return

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            for config in configs:
                row = upsert_game(session, config)
                typer.echo(f"synced config={config.file_path.name} game={config.name} game_id={row.id}")
            session.commit()
        except Exception:
            session.rollback()
            raise


@app.command("list-games")
def list_games_command(
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print every stored game and its rules."""
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        games = list_games(session)
        if not games:
            typer.echo("no games")
            return
        for game in games:
            typer.echo(
                f"{game.id}\t{game.name}\t"
                f"teams={_bounds(game.min_teams, game.max_teams)}\t"
                f"players_per_team={_bounds(game.min_players_per_team, game.max_players_per_team)}\t"
                f"allow_ties={game.allow_ties}\t"
                f"updated_at={game.updated_at}"
            )


def _bounds(minimum: int | None, maximum: int | None) -> str:
    low = "*" if minimum is None else str(minimum)
    high = "*" if maximum is None else str(maximum)
    return f"{low}..{high}"


if __name__ == "__main__":
    app()
