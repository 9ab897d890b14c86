"""
Module: loading.loader

Purpose:
    Load a game definition from the games directory and validate it.

Key Functions:
    - load_game(): Read <games_dir>/<name>.json into a GameSpec
    - game_path(): Resolve the file for a game name

Key Classes:
    - LoaderError: Exception for loading failures

Dependencies:
    - core.models: GameSpec
    - core.schemas.validator: validate_game

Used By:
    - controller: First pipeline step
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from b18_render.core.models import GameSpec
from b18_render.core.schemas import validate_game, ValidationError

logger = logging.getLogger(__name__)


class LoaderError(Exception):
    """Error loading a game definition."""
    pass


def game_path(games_dir: Path, name: str) -> Path:
    return games_dir / f"{name}.json"


def load_game(games_dir: Path, name: str, version: str) -> GameSpec:
    """
    Load and validate a game definition.

    Args:
        games_dir: Directory holding <name>.json game files
        name: Game name (e.g. "1830")
        version: Package version to stamp on the GameSpec

    Returns:
        Frozen GameSpec

    Raises:
        LoaderError: If the file is missing or not valid JSON
        ValidationError: If the JSON is not a usable game definition
    """
    path = game_path(games_dir, name)
    if not path.exists():
        raise LoaderError(f"Game file does not exist: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LoaderError(f"Game file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise LoaderError(f"Failed to read game file {path}: {e}") from e

    validate_game(data)

    logger.debug(f"Loaded game {name} from {path}")
    return GameSpec.from_dict(name, version, data)


__all__ = ["load_game", "game_path", "LoaderError", "ValidationError"]
