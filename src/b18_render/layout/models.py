"""
Module: layout.models

Purpose:
    Immutable results of the geometry engine. Every value is in layout
    units (1/100 inch for markets, pixels for maps) before print scaling.

Key Classes:
    - MarketType: Stock market topology tag
    - CssSizes: CSS string equivalents of a layout's dimensions
    - ParLayout: Par value grid
    - MarketLayout: Stock market, including par overlay and legend band
    - RevenueLayout: Revenue track
    - MapLayout: Hex map origin, steps and sheet size

Dependencies:
    - dataclasses (std)

Used By:
    - layout.market, layout.hexmap: Construct these
    - render.jobs, output.manifest: Consume them
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MarketType(str, Enum):
    """Stock market topology."""
    ONE_D = "1D"
    ONE_DIAG = "1Diag"
    TWO_D = "2D"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MarketType":
        """Parse a game's stock.type; a missing type means 2D."""
        if value is None:
            return cls.TWO_D
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown market type: {value!r}") from None

    @property
    def is_linear(self) -> bool:
        """1D and 1Diag markets are single tracks and may carry a legend."""
        return self in (MarketType.ONE_D, MarketType.ONE_DIAG)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(round(value, 4))


def units_to_css(units: float) -> str:
    """
    Convert layout units (1/100 inch) to a CSS length.

    Example:
        >>> units_to_css(50)
        '0.5in'
    """
    return f"{_format_number(units / 100)}in"


def human_units(units: float) -> str:
    """Whole inches, rounded up. Display only."""
    return f"{math.ceil(units / 100.0)}in"


@dataclass(frozen=True)
class CssSizes:
    width: str
    height: str
    total_width: str
    total_height: str

    @classmethod
    def of(cls, width: float, height: float, total_width: float, total_height: float) -> "CssSizes":
        return cls(
            width=units_to_css(width),
            height=units_to_css(height),
            total_width=units_to_css(total_width),
            total_height=units_to_css(total_height),
        )


@dataclass(frozen=True)
class ParLayout:
    """
    Par value grid.

    Attributes:
        rows: Number of par rows
        columns: Longest par row (at least 1)
        width: Cell width
        height: Cell height
        total_width: width * columns
        total_height: height * rows plus title band
    """
    rows: int
    columns: int
    width: float
    height: float
    total_width: float
    total_height: float
    css: CssSizes


@dataclass(frozen=True)
class MarketLayout:
    """
    Stock market geometry (immutable).

    Attributes:
        type: Market topology
        rows: Grid rows
        columns: Grid columns
        width: Cell width
        height: Cell height (1D/1Diag cells are column/diag multiples)
        total_width: Bounding width, including margin, par overlay, extras
        total_height: Bounding height, including title, par, legend, extras
        human_width: Rounded-up inches for display
        human_height: Rounded-up inches for display
        css: CSS length strings
        par: Par overlay layout, when displayed

    Example:
        >>> layout.total_width >= layout.width * layout.columns
        True
    """
    type: MarketType
    rows: int
    columns: int
    width: float
    height: float
    total_width: float
    total_height: float
    human_width: str
    human_height: str
    css: CssSizes
    par: Optional[ParLayout] = None


@dataclass(frozen=True)
class RevenueLayout:
    min: int
    max: int
    per_row: int
    rows: int
    columns: int
    width: float
    height: float
    total_width: float
    total_height: float
    css: CssSizes


@dataclass(frozen=True)
class MapLayout:
    """
    Hex map geometry in pixels (immutable).

    Attributes:
        horizontal: True for flat-topped hexes (columns step by ~0.87 hex)
        a1_valid: Whether A1 is a real grid position; None when unspecified
        start_x: X of the first hex center
        start_y: Y of the first hex center
        step_x: X distance between neighbouring columns
        step_y: Y distance between neighbouring rows
        total_width: Full sheet width
        total_height: Full sheet height
    """
    horizontal: bool
    a1_valid: Optional[bool]
    start_x: float
    start_y: float
    step_x: float
    step_y: float
    total_width: float
    total_height: float

    @property
    def page_offset(self) -> float:
        """
        Extra capture width so the first column is not clipped.

        Only horizontal maps whose A1 is explicitly invalid need it.
        """
        if self.horizontal and self.a1_valid is False:
            return self.step_x
        return 0
