"""
Module: config

Purpose:
    Per-run options for the render pipeline. Immutable, validated on
    construction. Layout constants live separately in layout.config.

Key Classes:
    - RenderConfig: What to render and where

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - controller: render_game()
    - cli: Built from command-line arguments
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from b18_render.common.path_utils import RenderPaths
from b18_render.render.server import DEFAULT_PORT
from b18_render.render.surface import DEFAULT_NAVIGATION_TIMEOUT_MS


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for one render run (immutable).

    Attributes:
        bname: Game name, also the game file stem ("1830")
        version: Package version stamped on every output name
        author: Optional author recorded in the manifest
        games_dir: Directory holding <bname>.json game files
        tiles_path: Tile catalog JSON file
        site_dir: Built site served to the rendering surface
        output_root: Base directory for render output
        user_config: Optional layout config layered over the defaults
        port: Local content server port
        timeout_ms: Per-page network idle deadline
        variation: Map variant for games with alternative maps

    Example:
        >>> config = RenderConfig(bname="1830", version="1.0")
        >>> config.paths.archive_path
        PosixPath('render/1830/board18-1830-1.0.zip')
    """

    # Required
    bname: str
    version: str
    author: Optional[str] = None

    # Inputs
    games_dir: Path = Path("src/data/games")
    tiles_path: Path = Path("src/data/tiles.json")
    site_dir: Path = Path("dist/site")
    user_config: Optional[Path] = Path("src/config.json")

    # Output
    output_root: Path = Path("render")

    # Rendering
    port: int = DEFAULT_PORT
    timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    variation: int = 0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name, value in (("bname", self.bname), ("version", self.version)):
            if not value or not value.strip():
                raise ValueError(f"{name} must not be empty")
            if "/" in value or "\\" in value:
                raise ValueError(f"{name} must not contain path separators: {value!r}")
        if not (0 < self.port < 65536):
            raise ValueError(f"port out of range: {self.port}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive: {self.timeout_ms}")
        if self.variation < 0:
            raise ValueError(f"variation must be non-negative: {self.variation}")

    @property
    def paths(self) -> RenderPaths:
        return RenderPaths(self.output_root, self.bname, self.version)
