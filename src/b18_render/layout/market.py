"""
Module: layout.market

Purpose:
    Stock market, par and revenue track geometry. Pure functions of a
    game's `stock` / `revenue` section and the frozen LayoutConfig.

Key Functions:
    - get_max_length(): Longest row of a ragged grid
    - compute_market_layout(): MarketLayout for any topology
    - compute_par_layout(): Par value grid
    - compute_revenue_layout(): Revenue track

Dependencies:
    - layout.config: LayoutConfig
    - layout.models: Result dataclasses

Used By:
    - render.jobs: Market viewport
    - output.manifest: Market steps
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Optional, Sequence

from .config import LayoutConfig
from .models import (
    CssSizes,
    MarketLayout,
    MarketType,
    ParLayout,
    RevenueLayout,
    human_units,
)


TITLE_BAND = 50
LEGEND_BAND = 50
MARKET_MARGIN = 10


def get_max_length(rows: Sequence[Sequence[Any]]) -> int:
    """
    Length of the longest row; 0 for no rows.

    Example:
        >>> get_max_length([[1, 2, 3], [1, 2, 3, 4, 5], [1, 2]])
        5
    """
    return max((len(row) for row in rows), default=0)


def _cell_size(stock: Mapping[str, Any], config: LayoutConfig) -> tuple[float, float]:
    """Cell size after applying the game's optional stock.cell multipliers."""
    cell = stock.get("cell") or {}
    width = (cell.get("width") or 1) * config.stock.cell.width
    height = (cell.get("height") or 1) * config.stock.cell.height
    return width, height


# Each topology returns (width, height, rows, columns) for one cell.
TopologyFn = Callable[[Sequence[Any], float, float, LayoutConfig], tuple[float, float, int, int]]


def _diagonal(market: Sequence[Any], cell_w: float, cell_h: float, config: LayoutConfig):
    # Single track folded into two physical rows
    return cell_w, config.stock.diag * cell_h, 2, math.ceil(len(market) / 2)


def _linear(market: Sequence[Any], cell_w: float, cell_h: float, config: LayoutConfig):
    return cell_w, config.stock.column * cell_h, 1, len(market)


def _grid(market: Sequence[Any], cell_w: float, cell_h: float, config: LayoutConfig):
    return cell_w, cell_h, len(market), get_max_length(market)


TOPOLOGIES: dict[MarketType, TopologyFn] = {
    MarketType.ONE_DIAG: _diagonal,
    MarketType.ONE_D: _linear,
    MarketType.TWO_D: _grid,
}


def _title_band(stock: Mapping[str, Any]) -> int:
    return 0 if stock.get("title") is False else TITLE_BAND


def compute_par_layout(stock: Mapping[str, Any], config: LayoutConfig) -> ParLayout:
    """
    Geometry of the par value grid.

    Par cells are `par.width` (default: config.stock.par) base cells wide
    and `par.height` (default 1) base cells tall. A par section without
    values still reports one column.
    """
    par = stock.get("par") or {}
    values = par.get("values") or []

    width = (par.get("width") or config.stock.par) * config.stock.cell.width
    height = (par.get("height") or 1) * config.stock.cell.height
    rows = len(values)
    columns = get_max_length(values) or 1
    total_width = width * columns
    total_height = height * rows + _title_band(stock)

    return ParLayout(
        rows=rows,
        columns=columns,
        width=width,
        height=height,
        total_width=total_width,
        total_height=total_height,
        css=CssSizes.of(width, height, total_width, total_height),
    )


def compute_market_layout(stock: Mapping[str, Any], config: LayoutConfig) -> MarketLayout:
    """
    Compute stock market geometry.

    Steps:
    1. Topology gives per-cell size and the grid shape
    2. Totals: cells plus a 10 unit margin and the title band
    3. Par overlay, if displayed, can only grow the bounding box
    4. Human (inch) sizes are taken here, before legend and extras
    5. Legend band for 1D/1Diag markets with a legend
    6. Per-game extraTotalWidth / extraTotalHeight

    Args:
        stock: Game's stock section
        config: Layout constants

    Returns:
        MarketLayout

    Raises:
        ValueError: If stock.type is not a known topology
    """
    market_type = MarketType.parse(stock.get("type"))
    market = stock.get("market") or []
    cell_w, cell_h = _cell_size(stock, config)

    width, height, rows, columns = TOPOLOGIES[market_type](market, cell_w, cell_h, config)

    total_width = width * columns + MARKET_MARGIN
    total_height = height * rows + _title_band(stock)

    display = stock.get("display") or {}
    par_layout: Optional[ParLayout] = None
    par_position = display.get("par")
    if par_position:
        par_layout = compute_par_layout(stock, config)
        row_height = height / 2 if market_type is MarketType.ONE_DIAG else height
        par_total_width = par_layout.total_width + width * par_position.get("x", 0)
        par_total_height = (
            par_layout.total_height + row_height * par_position.get("y", 0) + TITLE_BAND
        )
        total_width = max(total_width, par_total_width)
        total_height = max(total_height, par_total_height)

    human_width = human_units(total_width)
    human_height = human_units(total_height)

    if market_type.is_linear and config.stock.show_legend and stock.get("legend"):
        total_height += LEGEND_BAND

    total_height += display.get("extraTotalHeight") or 0
    total_width += display.get("extraTotalWidth") or 0

    return MarketLayout(
        type=market_type,
        rows=rows,
        columns=columns,
        width=width,
        height=height,
        total_width=total_width,
        total_height=total_height,
        human_width=human_width,
        human_height=human_height,
        css=CssSizes.of(width, height, total_width, total_height),
        par=par_layout,
    )


def compute_revenue_layout(
    revenue: Optional[Mapping[str, Any]],
    config: LayoutConfig,
) -> RevenueLayout:
    """
    Compute revenue track geometry.

    Defaults: min 1, max 100, 20 cells per row.

    Example:
        >>> compute_revenue_layout({"max": 150}, LayoutConfig()).rows
        8
    """
    revenue = revenue or {}
    low = revenue.get("min") or 1
    high = revenue.get("max") or 100
    per_row = revenue.get("perRow") or 20

    width = config.stock.cell.width
    height = config.stock.cell.height
    rows = math.ceil(high / per_row)
    columns = per_row
    total_width = width * columns
    total_height = height * rows + TITLE_BAND

    return RevenueLayout(
        min=low,
        max=high,
        per_row=per_row,
        rows=rows,
        columns=columns,
        width=width,
        height=height,
        total_width=total_width,
        total_height=total_height,
        css=CssSizes.of(width, height, total_width, total_height),
    )
