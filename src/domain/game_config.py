"""Load game definitions (and their result rules) from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.common import GameRules


@dataclass(frozen=True)
class GameConfig:
    """Configuration for one game, as read from its TOML file."""

    name: str
    description: str | None
    file_path: Path
    rules: GameRules

    def as_config_json(self) -> dict[str, Any]:
        return {
            "min_teams": self.rules.min_teams,
            "max_teams": self.rules.max_teams,
            "min_players_per_team": self.rules.min_players_per_team,
            "max_players_per_team": self.rules.max_players_per_team,
            "allow_ties": self.rules.allow_ties,
        }


def load_game_configs(config_dir: Path) -> list[GameConfig]:
    """Load every game file in a directory, sorted by file name.

    Raises when the directory is missing, holds no ``*.toml`` files, or two
    files declare the same game name.
    """
    if not config_dir.is_dir():
        if config_dir.exists():
            raise NotADirectoryError(f"Game config path is not a directory: {config_dir}")
        raise FileNotFoundError(f"Game config directory not found: {config_dir}")

    games: list[GameConfig] = []
    seen: dict[str, Path] = {}
    for file_path in sorted(config_dir.glob("*.toml")):
        with file_path.open("rb") as file:
            game = _parse_game_config(tomllib.load(file), file_path)
        if game.name in seen:
            raise ValueError(
                f"Duplicate game names found in {config_dir}: "
                f"'{game.name}' in {seen[game.name].name} and {file_path.name}"
            )
        seen[game.name] = file_path
        games.append(game)

    if not games:
        raise ValueError(f"No .toml config files found in: {config_dir}")
    return games


def _parse_game_config(raw: dict[str, Any], file_path: Path) -> GameConfig:
    game_raw = raw.get("game", {})
    rules_raw = raw.get("rules", {})

    name = str(game_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [game].name is required")

    description_value = game_raw.get("description")
    description = None if description_value is None else str(description_value)

    allow_ties = rules_raw.get("allow_ties", True)
    if not isinstance(allow_ties, bool):
        raise ValueError(f"{file_path}: [rules].allow_ties must be true or false")

    rules = GameRules(
        min_teams=_optional_int(rules_raw, "min_teams", file_path),
        max_teams=_optional_int(rules_raw, "max_teams", file_path),
        min_players_per_team=_optional_int(rules_raw, "min_players_per_team", file_path),
        max_players_per_team=_optional_int(rules_raw, "max_players_per_team", file_path),
        allow_ties=allow_ties,
    )
    _validate_rules(file_path=file_path, rules=rules)

    return GameConfig(
        name=name,
        description=description,
        file_path=file_path,
        rules=rules,
    )


def _optional_int(raw: dict[str, Any], key: str, file_path: Path) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [rules].{key} must be an integer")
    return value


def _validate_rules(*, file_path: Path, rules: GameRules) -> None:
    if rules.min_teams is not None and rules.min_teams < 1:
        raise ValueError(f"{file_path}: [rules].min_teams must be >= 1")
    if rules.max_teams is not None and rules.max_teams < 1:
        raise ValueError(f"{file_path}: [rules].max_teams must be >= 1")
    if rules.min_players_per_team is not None and rules.min_players_per_team < 0:
        raise ValueError(f"{file_path}: [rules].min_players_per_team must be >= 0")
    if rules.max_players_per_team is not None and rules.max_players_per_team < 1:
        raise ValueError(f"{file_path}: [rules].max_players_per_team must be >= 1")
    if (
        rules.min_teams is not None
        and rules.max_teams is not None
        and rules.min_teams > rules.max_teams
    ):
        raise ValueError(f"{file_path}: [rules].min_teams must be <= max_teams")
    if (
        rules.min_players_per_team is not None
        and rules.max_players_per_team is not None
        and rules.min_players_per_team > rules.max_players_per_team
    ):
        raise ValueError(f"{file_path}: [rules].min_players_per_team must be <= max_players_per_team")


__all__ = ["GameConfig", "load_game_configs"]
