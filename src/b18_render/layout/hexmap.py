"""
Module: layout.hexmap

Purpose:
    Hex map geometry: origin, steps and full sheet size for Board18.

Coordinates are 18xx style ("A1", "K24", "AA3"): letters index rows,
numbers index columns. Grids are stored doubled, so only every other
position along one axis is a real hex:

- vertical maps (pointy-topped hexes): columns are doubled, a row's
  neighbours are two numbers apart
- horizontal maps (flat-topped hexes): rows are doubled, a column's
  neighbours are two letters apart

Key Functions:
    - parse_coordinate(): "B12" -> (row 2, column 12)
    - map_extent(): Largest row / column used by a map
    - compute_map_layout(): MapLayout for a game's map section

Dependencies:
    - layout.config: LayoutConfig
    - layout.models: MapLayout

Used By:
    - render.jobs: Map viewport
    - output.manifest: Board origin and steps
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from b18_render.core.schemas.validator import HEX_COORDINATE_RE

from .config import LayoutConfig
from .models import MapLayout


def parse_coordinate(coord: str) -> tuple[int, int]:
    """
    Parse an 18xx hex coordinate into 1-based (row, column).

    Letters count like spreadsheet columns: A=1 ... Z=26, AA=27.

    Examples:
        >>> parse_coordinate("A1")
        (1, 1)
        >>> parse_coordinate("K24")
        (11, 24)
        >>> parse_coordinate("AB3")
        (28, 3)

    Raises:
        ValueError: If the coordinate is not letters followed by digits
    """
    match = HEX_COORDINATE_RE.match(coord.strip()) if isinstance(coord, str) else None
    if not match:
        raise ValueError(f"Invalid hex coordinate: {coord!r}")

    letters, digits = match.groups()
    row = 0
    for ch in letters.upper():
        row = row * 26 + (ord(ch) - ord("A") + 1)
    return row, int(digits)


def _iter_coordinates(game_map: Mapping[str, Any]) -> Iterable[str]:
    for group in game_map.get("hexes") or ():
        for coord in group.get("hexes") or ():
            yield coord


def map_extent(game_map: Mapping[str, Any]) -> tuple[int, int]:
    """
    Largest (row, column) used by any hex in the map; (0, 0) for no hexes.
    """
    max_row = 0
    max_col = 0
    for coord in _iter_coordinates(game_map):
        row, col = parse_coordinate(coord)
        max_row = max(max_row, row)
        max_col = max(max_col, col)
    return max_row, max_col


def compute_map_layout(game_map: Mapping[str, Any], config: LayoutConfig) -> MapLayout:
    """
    Compute hex map geometry in pixels.

    With S the flat-to-flat hex width and e = S/√3 the edge length:

    horizontal: columns step 1.5e (≈87 at S=100), rows step S/2;
        width  = 1.5e·(cols-1) + 2e, height = S/2·(rows+1)
    vertical:   columns step S/2, rows step 1.5e;
        width  = S/2·(cols+1),       height = 1.5e·(rows-1) + 2e

    The x origin is half a step in, except on horizontal maps whose A1 is
    explicitly invalid: there it is 0 and the capture is widened by one
    column step instead (see MapLayout.page_offset).

    Args:
        game_map: One map variant (see GameSpec.map_variant)
        config: Layout constants

    Returns:
        MapLayout
    """
    horizontal = bool(game_map.get("horizontal", False))
    a1_valid = game_map.get("a1Valid")
    if a1_valid is not None:
        a1_valid = bool(a1_valid)

    hex_width = config.map.hex_width
    half_step = config.map.half_step
    edge = hex_width / math.sqrt(3)
    pitch = 1.5 * edge

    max_row, max_col = map_extent(game_map)

    if horizontal:
        step_x = round(pitch)
        step_y = half_step
        start_x = 0 if a1_valid is False else half_step
        total_width = pitch * (max_col - 1) + 2 * edge if max_col else 0
        total_height = half_step * (max_row + 1) if max_row else 0
    else:
        step_x = half_step
        step_y = round(pitch)
        start_x = half_step
        total_width = half_step * (max_col + 1) if max_col else 0
        total_height = pitch * (max_row - 1) + 2 * edge if max_row else 0

    return MapLayout(
        horizontal=horizontal,
        a1_valid=a1_valid,
        start_x=start_x,
        start_y=half_step,
        step_x=step_x,
        step_y=step_y,
        total_width=total_width,
        total_height=total_height,
    )
