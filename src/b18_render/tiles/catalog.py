"""
Module: tiles.catalog

Purpose:
    Game-independent tile registry. The renderer only needs a lookup by id;
    where the definitions come from is up to the catalog implementation.

Key Classes:
    - TileCatalog: Abstract lookup interface
    - DictTileCatalog: In-memory catalog over a mapping
    - CatalogError: Catalog file could not be loaded

Key Functions:
    - load_tile_catalog(): Load a JSON catalog file

Dependencies:
    - json (std)

Used By:
    - tiles.aggregator: Tile resolution
    - controller: Catalog loaded once per run
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from b18_render.core.schemas.validator import tile_field_errors

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Tile catalog could not be loaded."""
    pass


def base_id(tile_id: str) -> str:
    """
    Strip a variant suffix from a tile id.

    Examples:
        >>> base_id("57|1")
        '57'
        >>> base_id("X3")
        'X3'
    """
    return tile_id.split("|", 1)[0]


class TileCatalog(ABC):
    """
    Abstract tile lookup.

    Variant ids ("57|1") fall back to their base id when the catalog has
    no entry for the full id.
    """

    @abstractmethod
    def get(self, tile_id: str) -> Optional[Mapping[str, Any]]:
        """Exact lookup; None when the id is unknown."""

    def find(self, tile_id: str) -> tuple[Optional[str], Optional[Mapping[str, Any]]]:
        """
        Return (catalog key used, entry), or (None, None) when unknown.
        """
        entry = self.get(tile_id)
        if entry is not None:
            return tile_id, entry
        if "|" in tile_id:
            key = base_id(tile_id)
            entry = self.get(key)
            if entry is not None:
                return key, entry
        return None, None

    def lookup(self, tile_id: str) -> Optional[Mapping[str, Any]]:
        return self.find(tile_id)[1]


class DictTileCatalog(TileCatalog):
    """Catalog backed by an in-memory mapping of id -> definition."""

    def __init__(self, tiles: Mapping[str, Mapping[str, Any]]) -> None:
        self._tiles = MappingProxyType({str(k): v for k, v in tiles.items()})

    def get(self, tile_id: str) -> Optional[Mapping[str, Any]]:
        return self._tiles.get(tile_id)

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._tiles


def load_tile_catalog(path: Path) -> DictTileCatalog:
    """
    Load a catalog from a JSON object keyed by tile id.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed
    """
    if not path.exists():
        raise CatalogError(f"Tile catalog does not exist: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Failed to read tile catalog {path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Tile catalog {path} must be a JSON object keyed by tile id")

    errors = []
    for tile_id, entry in data.items():
        if not isinstance(entry, dict):
            errors.append(f"{tile_id!r} must be an object")
        else:
            errors.extend(tile_field_errors(entry, repr(tile_id)))
    if errors:
        raise CatalogError(f"Invalid tile catalog {path}: {errors[0]} ({len(errors)} problem(s))")

    logger.debug(f"Loaded {len(data)} tiles from {path}")
    return DictTileCatalog(data)
