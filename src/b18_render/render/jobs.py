"""
Module: render.jobs

Purpose:
    Turn computed geometry into the fixed, ordered list of captures:
    Map, Market, Tokens, then one sheet per tile color in palette order.

Key Functions:
    - map_viewport(), market_viewport(), tile_viewport(): Viewport sizes
    - plan_render_jobs(): Ordered RenderJob tuple for a game

Key Classes:
    - RenderJob: One navigate / size / capture unit

Dependencies:
    - layout: MapLayout, MarketLayout, LayoutConfig
    - tiles: ColorBucket, token_sheet_height
    - common.path_utils: Output file names

Used By:
    - render.orchestrator: Executes the jobs
    - controller: Plans the jobs
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from b18_render.common.path_utils import RenderPaths, color_filename
from b18_render.core.models import ColorBucket, GameSpec
from b18_render.layout import LayoutConfig, MapLayout, MarketLayout
from b18_render.tiles import token_sheet_height


# Space the market page adds around the market itself, in layout units.
MARKET_PAGE_MARGIN = 50


@dataclass(frozen=True)
class RenderJob:
    """
    One capture (immutable).

    Attributes:
        name: Surface name for progress messages ("Map", "Market", ...)
        path: Site path including the print query
        width: Viewport width in pixels
        height: Viewport height in pixels
        destination: PNG file to write
        omit_background: Capture with a transparent background

    Example:
        >>> job.viewport
        (300, 900)
    """
    name: str
    path: str
    width: int
    height: int
    destination: Path
    omit_background: bool = False

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"{self.name}: viewport must be non-negative: {self.width}x{self.height}")

    @property
    def viewport(self) -> tuple[int, int]:
        return self.width, self.height


def page_path(game: GameSpec, page: str) -> str:
    return f"/games/{game.name}/{page}?print=true"


def map_viewport(layout: MapLayout) -> tuple[int, int]:
    """
    Map capture size: the sheet rounded up, widened by the page offset on
    horizontal maps whose A1 is invalid.
    """
    width = math.ceil(layout.total_width) + math.ceil(layout.page_offset)
    height = math.ceil(layout.total_height)
    return width, height


def market_viewport(layout: MarketLayout, config: LayoutConfig) -> tuple[int, int]:
    """Market capture size: page margin added, print-scaled, rounded up, plus 1px."""
    scale = config.b18.print_scale
    width = math.ceil((layout.total_width + MARKET_PAGE_MARGIN) * scale) + 1
    height = math.ceil((layout.total_height + MARKET_PAGE_MARGIN) * scale) + 1
    return width, height


def tile_viewport(bucket: ColorBucket, config: LayoutConfig) -> tuple[int, int]:
    """One tile cell per tile of the color, fixed sheet height."""
    return bucket.count * config.b18.tile_cell, config.b18.tile_sheet_height


def plan_render_jobs(
    game: GameSpec,
    paths: RenderPaths,
    map_layout: MapLayout,
    market_layout: MarketLayout,
    buckets: Iterable[ColorBucket],
    config: LayoutConfig,
) -> tuple[RenderJob, ...]:
    """
    Plan every capture for a game, in capture order.

    Token and tile sheets are captured with a transparent background.
    """
    jobs = [
        RenderJob(
            "Map",
            page_path(game, "b18/map"),
            *map_viewport(map_layout),
            destination=paths.image("Map.png"),
        ),
        RenderJob(
            "Market",
            page_path(game, "market"),
            *market_viewport(market_layout, config),
            destination=paths.image("Market.png"),
        ),
        RenderJob(
            "Tokens",
            page_path(game, "b18/tokens"),
            config.b18.token_sheet_width,
            # Chromium cannot capture a zero-height page; keep one empty row.
            max(token_sheet_height(game, config.b18.token_cell), config.b18.token_cell),
            destination=paths.image("Tokens.png"),
            omit_background=True,
        ),
    ]

    for bucket in buckets:
        jobs.append(RenderJob(
            bucket.color,
            page_path(game, f"b18/tiles/{bucket.color}"),
            *tile_viewport(bucket, config),
            destination=paths.image(color_filename(bucket.color)),
            omit_background=True,
        ))

    return tuple(jobs)
