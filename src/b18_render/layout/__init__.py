"""
Module: layout

Purpose:
    Geometry engine. Converts a game's map and stock sections plus the
    frozen layout constants into exact pixel sizes for every surface.

Key Functions:
    - compute_map_layout(): Hex map origin, steps, sheet size
    - compute_market_layout(): Stock market bounding box for 1D/1Diag/2D
    - compute_par_layout(): Par value grid
    - compute_revenue_layout(): Revenue track
    - load_layout_config(): Defaults + optional user file, frozen

Key Classes:
    - LayoutConfig: Layout constants
    - MarketType, MarketLayout, ParLayout, RevenueLayout, MapLayout

Dependencies:
    - none outside the standard library

Used By:
    - render.jobs: Viewport sizes
    - output.manifest: Board and market steps
"""

from .config import LayoutConfig, ConfigError, load_layout_config
from .models import (
    MarketType,
    MarketLayout,
    ParLayout,
    RevenueLayout,
    MapLayout,
    CssSizes,
    units_to_css,
    human_units,
)
from .market import (
    get_max_length,
    compute_market_layout,
    compute_par_layout,
    compute_revenue_layout,
)
from .hexmap import parse_coordinate, map_extent, compute_map_layout

__all__ = [
    # Config
    "LayoutConfig",
    "ConfigError",
    "load_layout_config",
    # Models
    "MarketType",
    "MarketLayout",
    "ParLayout",
    "RevenueLayout",
    "MapLayout",
    "CssSizes",
    "units_to_css",
    "human_units",
    # Functions
    "get_max_length",
    "compute_market_layout",
    "compute_par_layout",
    "compute_revenue_layout",
    "parse_coordinate",
    "map_extent",
    "compute_map_layout",
]
