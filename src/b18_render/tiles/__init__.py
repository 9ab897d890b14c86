"""
Module: tiles

Purpose:
    Tile catalog lookup, color bucketing and Board18 tray construction for
    tiles and tokens.

Key Functions:
    - bucket_tiles(): Ordered color buckets for a game
    - build_tile_trays(): Tile trays for the manifest
    - build_token_trays(): Token trays for the manifest

Dependencies:
    - core.models: GameSpec, TileDefinition

Used By:
    - controller, render.jobs, output.manifest
"""

from .catalog import TileCatalog, DictTileCatalog, CatalogError, load_tile_catalog, base_id
from .aggregator import (
    resolve_tile,
    sort_colors,
    bucket_tiles,
    color_counts,
    tray_entries,
    build_tile_trays,
)
from .tokens import (
    company_token_count,
    kept_extra_tokens,
    build_token_trays,
    token_sheet_height,
)

__all__ = [
    # Catalog
    "TileCatalog",
    "DictTileCatalog",
    "CatalogError",
    "load_tile_catalog",
    "base_id",
    # Tiles
    "resolve_tile",
    "sort_colors",
    "bucket_tiles",
    "color_counts",
    "tray_entries",
    "build_tile_trays",
    # Tokens
    "company_token_count",
    "kept_extra_tokens",
    "build_token_trays",
    "token_sheet_height",
]
