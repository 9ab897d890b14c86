"""
Module: output.manifest

Purpose:
    Build and write the Board18 manifest JSON describing where each image
    is and how to step across its cells.

Key Functions:
    - board_section(): Map image origin, orientation and steps
    - market_section(): Market image origin and steps (print scaled)
    - link_section(): External links
    - build_manifest(): Complete manifest dict
    - write_manifest(): Serialize once, formatted

Dependencies:
    - layout: MapLayout, MarketLayout, LayoutConfig
    - tiles: Tile and token trays

Used By:
    - controller: Packaging step
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from b18_render.core.models import ColorBucket, GameSpec
from b18_render.layout import LayoutConfig, MapLayout, MarketLayout, MarketType
from b18_render.tiles import build_tile_trays, build_token_trays

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Manifest could not be written."""
    pass


MARKET_ORIGIN = 25
MARKET_TITLE_ORIGIN = 75


def _number(value: float) -> float | int:
    """Round float noise away and emit whole numbers as ints."""
    value = round(value, 4)
    if float(value).is_integer():
        return int(value)
    return value


def board_section(game: GameSpec, layout: MapLayout, config: LayoutConfig) -> dict[str, Any]:
    """
    Board (map) placement.

    Board18 reads the origin of the first hex: 50px in, except on vertical
    maps whose A1 is invalid, where the first column starts at 0.
    """
    half_step = config.map.half_step
    first_column_flush = not layout.horizontal and layout.a1_valid is False
    x_start = 0 if first_column_flush else half_step

    return {
        "imgLoc": f"images/{game.id}/Map.png",
        "xStart": _number(x_start),
        "orientation": "F" if layout.horizontal else "P",
        "xStep": _number(layout.step_x),
        "yStart": _number(half_step),
        "yStep": _number(layout.step_y),
    }


def market_section(game: GameSpec, layout: MarketLayout, config: LayoutConfig) -> dict[str, Any]:
    """
    Market placement, in print-scaled pixels.

    yStep is one market row: a cell for 2D, half a diagonal cell pair for
    1Diag, the full column for 1D.
    """
    scale = config.b18.print_scale
    cell = config.stock.cell

    if layout.type is MarketType.TWO_D:
        y_step = cell.height
    elif layout.type is MarketType.ONE_DIAG:
        y_step = cell.height * config.stock.column / 2
    else:
        y_step = cell.height * config.stock.column

    y_start = MARKET_ORIGIN if game.stock.get("title") is False else MARKET_TITLE_ORIGIN

    return {
        "imgLoc": f"images/{game.id}/Market.png",
        "xStart": _number(MARKET_ORIGIN * scale),
        "xStep": _number(cell.width * scale),
        "yStart": _number(y_start * scale),
        "yStep": _number(y_step * scale),
    }


def link_section(game: GameSpec) -> list[dict[str, str]]:
    links = []
    if game.links.get("bgg"):
        links.append({"link_name": f"{game.name} on BGG", "link_url": game.links["bgg"]})
    if game.links.get("rules"):
        links.append({"link_name": "Rules", "link_url": game.links["rules"]})
    return links


def build_manifest(
    game: GameSpec,
    author: Optional[str],
    map_layout: MapLayout,
    market_layout: MarketLayout,
    buckets: Iterable[ColorBucket],
    config: LayoutConfig,
) -> dict[str, Any]:
    """
    Build the complete Board18 manifest.

    Trays are ordered: one tile tray per color (palette order), then the
    station token tray, then the market token tray. Nothing time- or
    environment-dependent is included, so identical inputs give identical
    output.
    """
    btok, mtok = build_token_trays(game, config.b18.token_cell)
    trays = build_tile_trays(game, buckets, config.b18.tile_cell) + [btok, mtok]

    manifest = {
        "bname": game.name,
        "version": game.version,
        "author": author,
        "board": board_section(game, map_layout, config),
        "market": market_section(game, market_layout, config),
        "tray": trays,
        "links": link_section(game),
    }
    if author is None:
        del manifest["author"]
    return manifest


def dumps_manifest(manifest: dict[str, Any]) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False)


def write_manifest(manifest: dict[str, Any], path: Path) -> Path:
    """
    Write the manifest as formatted JSON.

    Raises:
        ManifestError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dumps_manifest(manifest), encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to write manifest {path}: {e}") from e

    logger.debug(f"Wrote manifest to {path}")
    return path
