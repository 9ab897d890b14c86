"""
Module: layout.config

Purpose:
    Layout constants shared by every geometry calculation. Library defaults
    ship in data/defaults.json and may be overridden by a user JSON file;
    the merged result is frozen before any layout is computed.

Key Classes:
    - LayoutConfig: Immutable layout configuration
    - CellSize, MapConfig, StockConfig, PrintConfig: Sections

Key Functions:
    - load_layout_config(): Build a LayoutConfig from defaults + user file

Dependencies:
    - dataclasses (std)
    - core.utils.merge: deep_merge for file layering

Used By:
    - layout.market, layout.hexmap: Geometry
    - render.jobs: Viewport sizes
    - controller: Loaded once per invocation
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from b18_render.core.utils.merge import deep_merge

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "data" / "defaults.json"


class ConfigError(Exception):
    """Layout configuration could not be loaded or is invalid."""
    pass


@dataclass(frozen=True)
class CellSize:
    """Stock market cell size in layout units (1/100 inch)."""
    width: float = 50
    height: float = 50

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"stock.cell must be positive: {self.width}x{self.height}")


@dataclass(frozen=True)
class MapConfig:
    """
    Hex map constants.

    Attributes:
        hex_width: Flat-to-flat hex width in pixels
        half_step: Half-hex offset used for the doubled coordinate axis
    """
    hex_width: float = 100
    half_step: float = 50

    def __post_init__(self) -> None:
        if self.hex_width <= 0:
            raise ConfigError(f"map.hexWidth must be positive: {self.hex_width}")


@dataclass(frozen=True)
class StockConfig:
    """
    Stock market constants.

    Attributes:
        cell: Base cell size
        column: Cell height multiplier for 1D markets
        diag: Cell height multiplier for 1Diag markets
        par: Default par cell width multiplier
        show_legend: Whether 1D/1Diag legends are displayed (adds a band)
    """
    cell: CellSize = field(default_factory=CellSize)
    column: int = 5
    diag: int = 5
    par: float = 2
    show_legend: bool = True


@dataclass(frozen=True)
class PrintConfig:
    """Board18 capture constants (pixels)."""
    print_scale: float = 0.96
    tile_cell: int = 150
    tile_sheet_height: int = 900
    token_cell: int = 30
    token_sheet_width: int = 60


@dataclass(frozen=True)
class LayoutConfig:
    """
    Layout configuration (immutable).

    Constructed once at startup and passed explicitly into every geometry
    function; nothing reads configuration from module state.

    Example:
        >>> config = LayoutConfig()
        >>> config.stock.cell.width
        50
    """
    map: MapConfig = field(default_factory=MapConfig)
    stock: StockConfig = field(default_factory=StockConfig)
    b18: PrintConfig = field(default_factory=PrintConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        """Build from the camelCase JSON layout used by defaults.json."""
        try:
            map_data = data.get("map", {})
            stock_data = data.get("stock", {})
            cell_data = stock_data.get("cell", {})
            display = stock_data.get("display", {})
            b18_data = data.get("b18", {})

            return cls(
                map=MapConfig(
                    hex_width=map_data.get("hexWidth", 100),
                    half_step=map_data.get("halfStep", 50),
                ),
                stock=StockConfig(
                    cell=CellSize(
                        width=cell_data.get("width", 50),
                        height=cell_data.get("height", 50),
                    ),
                    column=stock_data.get("column", 5),
                    diag=stock_data.get("diag", 5),
                    par=stock_data.get("par", 2),
                    show_legend=bool(display.get("legend", True)),
                ),
                b18=PrintConfig(
                    print_scale=b18_data.get("printScale", 0.96),
                    tile_cell=b18_data.get("tileCell", 150),
                    tile_sheet_height=b18_data.get("tileSheetHeight", 900),
                    token_cell=b18_data.get("tokenCell", 30),
                    token_sheet_width=b18_data.get("tokenSheetWidth", 60),
                ),
            )
        except AttributeError as e:
            raise ConfigError(f"Malformed layout configuration: {e}") from e


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    return data


def load_layout_config(user_path: Optional[Path] = None) -> LayoutConfig:
    """
    Load library defaults, layer an optional user file on top, and freeze.

    Args:
        user_path: Optional JSON file with overrides. A path that does not
            exist is ignored (the user file is optional).

    Returns:
        Frozen LayoutConfig

    Raises:
        ConfigError: If either file is unreadable or values are invalid
    """
    data = _read_json(DEFAULTS_PATH)

    if user_path is not None:
        if user_path.exists():
            logger.debug(f"Layering user config from {user_path}")
            data = deep_merge(data, _read_json(user_path))
        else:
            logger.debug(f"No user config at {user_path}, using defaults")

    return LayoutConfig.from_dict(data)
