"""
Module: tiles.aggregator

Purpose:
    Resolve the tiles a game uses, group them into color buckets in the
    canonical palette order, and build the Board18 tile trays.

Key Functions:
    - resolve_tile(): Catalog entry + game override -> TileDefinition
    - sort_colors(): Canonical palette order
    - bucket_tiles(): Ordered ColorBuckets for a game
    - color_counts(): Tiles per color (tile sheet widths)
    - build_tile_trays(): Manifest tray dicts, one per color

Dependencies:
    - core.models: GameSpec, TileDefinition, ColorBucket
    - tiles.catalog: TileCatalog

Used By:
    - render.jobs: Tile sheet viewports
    - output.manifest: Tile trays
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from b18_render.common.path_utils import capitalize, color_filename
from b18_render.core.models import (
    ColorBucket,
    GameSpec,
    TileDefinition,
    color_rank,
    merge_tile_override,
)

from .catalog import TileCatalog

logger = logging.getLogger(__name__)


TRAY_ORIGIN = 24
TRAY_STEP = 150
HEX_LONG = 116
HEX_SHORT = 100


def resolve_tile(
    tile_id: str,
    game: GameSpec,
    catalog: TileCatalog,
) -> Optional[TileDefinition]:
    """
    Resolve one tile id for a game.

    The catalog entry (variant ids fall back to their base id) is merged
    with the game's override. Tiles without a color after merging cannot
    be placed on any sheet and resolve to None.

    Example:
        >>> resolve_tile("57", game, catalog).color
        'yellow'
    """
    source_id, entry = catalog.find(tile_id)
    merged = merge_tile_override(entry or {}, game.tile_override(tile_id))

    if not merged.get("color"):
        logger.debug(f"Skipping tile {tile_id}: not in catalog and no usable override")
        return None
    return TileDefinition.from_dict(tile_id, merged, source_id=source_id or tile_id)


def sort_colors(colors: Iterable[str]) -> list[str]:
    """
    De-duplicate and order colors by the canonical palette.

    Example:
        >>> sort_colors(["green", "yellow", "offboard"])
        ['yellow', 'green', 'offboard']
    """
    unique = list(dict.fromkeys(colors))
    return sorted(unique, key=color_rank)


def _dedupe(tiles: Iterable[TileDefinition]) -> list[TileDefinition]:
    unique: list[TileDefinition] = []
    for tile in tiles:
        if not any(tile.same_tile(seen) for seen in unique):
            unique.append(tile)
    return unique


def bucket_tiles(game: GameSpec, catalog: TileCatalog) -> tuple[ColorBucket, ...]:
    """
    Group a game's tiles by color.

    Steps:
    1. Resolve every tile id in game order, dropping unresolvable ones
    2. Drop variant ids that resolve to the same catalog entry with the
       same merged data as an earlier tile
    3. Stable-sort by palette rank, then split into buckets

    Returns:
        Buckets in palette order; tiles in each bucket keep game order
    """
    resolved = [
        tile
        for tile in (resolve_tile(tile_id, game, catalog) for tile_id in game.tiles)
        if tile is not None
    ]
    ordered = sorted(_dedupe(resolved), key=lambda t: color_rank(t.color))

    buckets: dict[str, list[TileDefinition]] = {}
    for tile in ordered:
        buckets.setdefault(tile.color, []).append(tile)

    return tuple(ColorBucket(color, tuple(tiles)) for color, tiles in buckets.items())


def color_counts(buckets: Iterable[ColorBucket]) -> dict[str, int]:
    """Tiles per color, in bucket order."""
    return {bucket.color: bucket.count for bucket in buckets}


def tray_entries(bucket: ColorBucket) -> list[dict[str, int]]:
    """Board18 `{rots, dups}` entries for a bucket, in bucket order."""
    return [
        {"rots": tile.rotation_count, "dups": tile.duplicates}
        for tile in bucket.tiles
    ]


def build_tile_trays(
    game: GameSpec,
    buckets: Iterable[ColorBucket],
    tile_cell: int = TRAY_STEP,
) -> list[dict]:
    """
    Build one Board18 tile tray per color bucket.

    Horizontal tile orientation swaps the hex cell size (116x100 vs 100x116).
    """
    x_size, y_size = (HEX_LONG, HEX_SHORT) if game.horizontal_tiles else (HEX_SHORT, HEX_LONG)

    trays = []
    for bucket in buckets:
        trays.append({
            "type": "tile",
            "tName": f"{capitalize(bucket.color)} Tiles",
            "imgLoc": f"images/{game.id}/{color_filename(bucket.color)}",
            "xStart": TRAY_ORIGIN,
            "yStart": TRAY_ORIGIN,
            "xStep": tile_cell,
            "yStep": tile_cell,
            "xSize": x_size,
            "ySize": y_size,
            "tile": tray_entries(bucket),
        })
    return trays
