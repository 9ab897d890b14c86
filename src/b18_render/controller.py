"""
Module: controller

Purpose:
    Orchestrate the complete print-asset pipeline for one game.
    Load → Layout → Bucket → Plan → Capture → Manifest → Archive

Key Functions:
    - render_game(): Main entry point for rendering a game

Key Classes:
    - RenderResult: Complete render result
    - RenderError: Exception for render failures

Dependencies:
    - loading: Game loading
    - layout: Geometry
    - tiles: Catalog, color buckets, trays
    - render: Server, surface, orchestrator
    - output: Manifest and archive
    - common.file_locking: One run per game at a time

Used By:
    - cli: Command-line entry point
"""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from b18_render.common.file_locking import LockHeldError, exclusive_lock
from b18_render.common.path_utils import RenderPaths
from b18_render.core.schemas import ValidationError

from .config import RenderConfig
from .layout import ConfigError, LayoutConfig, compute_map_layout, compute_market_layout, load_layout_config
from .loading import LoaderError, load_game
from .output import ArchiveError, ManifestError, build_manifest, write_archive, write_manifest
from .render import (
    CaptureError,
    ContentServer,
    PlaywrightSurface,
    RenderJob,
    RenderOrchestrator,
    RenderSurface,
    ServerError,
    SurfaceError,
    plan_render_jobs,
)
from .tiles import CatalogError, TileCatalog, bucket_tiles, color_counts, load_tile_catalog

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Error during render pipeline."""
    pass


@dataclass(frozen=True)
class RenderResult:
    """
    Complete render result (immutable).

    Attributes:
        manifest_path: Manifest JSON beside the archive
        archive_path: Board18 zip archive
        images: Captured PNGs, in capture order
        manifest: The manifest that was written
        tile_counts: Tiles per color sheet

    Example:
        >>> result = render_game(RenderConfig(bname="1830", version="1.0"))
        >>> result.archive_path.name
        'board18-1830-1.0.zip'
    """
    manifest_path: Path
    archive_path: Path
    images: tuple[Path, ...]
    manifest: dict[str, Any]
    tile_counts: dict[str, int]


def _clear_previous_output(paths: RenderPaths) -> None:
    """Remove the images, manifest and archive of an earlier run."""
    if paths.package_dir.exists():
        logger.debug(f"Removing previous output {paths.display(paths.package_dir)}")
        shutil.rmtree(paths.package_dir)
    paths.manifest_path.unlink(missing_ok=True)
    paths.archive_path.unlink(missing_ok=True)


def render_game(
    config: RenderConfig,
    *,
    layout_config: Optional[LayoutConfig] = None,
    catalog: Optional[TileCatalog] = None,
    surface: Optional[RenderSurface] = None,
    server: Optional[ContentServer] = None,
) -> RenderResult:
    """
    Render every print asset for one game and package it for Board18.

    Pipeline:
    1. Load layout constants and the game definition
    2. Compute map and market geometry
    3. Bucket the game's tiles by color
    4. Plan the captures (Map, Market, Tokens, one sheet per color)
    5. Clear the previous run's output, then capture each page through
       the local server
    6. Write the manifest
    7. Zip the package directory with the manifest inside

    Args:
        config: Run configuration
        layout_config: Layout constants; loaded from config.user_config if omitted
        catalog: Tile catalog; loaded from config.tiles_path if omitted
        surface: Rendering surface; headless Chromium if omitted
        server: Content server; serves config.site_dir if omitted

    Returns:
        RenderResult with paths and the manifest

    Raises:
        RenderError: If any step fails, or another run holds this game
    """
    start_time = time.perf_counter()
    paths = config.paths

    logger.info(f"Starting render for {paths.id}")

    # 1. Load
    try:
        if layout_config is None:
            layout_config = load_layout_config(config.user_config)
        game = load_game(config.games_dir, config.bname, config.version)
        if catalog is None:
            catalog = load_tile_catalog(config.tiles_path)
    except (ConfigError, LoaderError, ValidationError, CatalogError) as e:
        raise RenderError(f"Failed to load {config.bname}: {e}") from e

    logger.info(f"Loaded {game.title} ({game.id})")

    # 2. Geometry
    try:
        map_layout = compute_map_layout(game.map_variant(config.variation), layout_config)
        market_layout = compute_market_layout(game.stock, layout_config)
    except ValueError as e:
        raise RenderError(f"Failed to lay out {config.bname}: {e}") from e

    logger.info(
        f"Map {map_layout.total_width:g}x{map_layout.total_height:g}, "
        f"market {market_layout.type.value} {market_layout.total_width:g}x{market_layout.total_height:g}"
    )

    # 3. Tiles
    buckets = bucket_tiles(game, catalog)
    counts = color_counts(buckets)
    if counts:
        logger.info(f"Tile sheets: {', '.join(f'{c}={n}' for c, n in counts.items())}")
    else:
        logger.warning(f"{config.bname} has no tiles with a color, no tile sheets will be printed")

    # 4. Plan
    jobs = plan_render_jobs(game, paths, map_layout, market_layout, buckets, layout_config)
    manifest = build_manifest(game, config.author, map_layout, market_layout, buckets, layout_config)

    if server is None:
        server = ContentServer(config.site_dir, port=config.port)
    if surface is None:
        surface = PlaywrightSurface()

    def _progress(job: RenderJob) -> None:
        logger.info(f"Printing {paths.display(job.destination)}")

    # 5-7. Capture and package, one run per game at a time
    try:
        with exclusive_lock(paths.lock_path):
            try:
                _clear_previous_output(paths)
            except OSError as e:
                raise RenderError(f"Failed to clear previous output of {paths.id}: {e}") from e

            orchestrator = RenderOrchestrator(
                server,
                surface,
                timeout_ms=config.timeout_ms,
                progress=_progress,
            )
            try:
                images = orchestrator.run(jobs)
            except (ServerError, SurfaceError, CaptureError) as e:
                raise RenderError(f"Failed to capture {paths.id}: {e}") from e

            try:
                write_manifest(manifest, paths.manifest_path)
                write_archive(
                    paths.package_dir,
                    paths.archive_path,
                    extra_files={paths.archive_manifest_name: paths.manifest_path},
                )
            except (ManifestError, ArchiveError) as e:
                raise RenderError(f"Failed to package {paths.id}: {e}") from e
    except LockHeldError as e:
        raise RenderError(f"Another render of {config.bname} is running: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Rendered {len(images)} images to {paths.archive_path} in {elapsed:.2f}s")

    return RenderResult(
        manifest_path=paths.manifest_path,
        archive_path=paths.archive_path,
        images=images,
        manifest=manifest,
        tile_counts=counts,
    )
