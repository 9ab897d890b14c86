"""
Tile Model

Canonical tile definitions and the rules that turn a catalog entry plus a
per-game override into the numbers the Board18 manifest needs.

Rules:
- Overrides are merged field-by-field, override wins (`merge_tile_override`)
- Rotations: explicit number, else length of an explicit list, else 6
- Duplicates: the infinite sentinel becomes 0, Board18's "unlimited"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Union


# Canonical palette order; sheets and trays are emitted in this order.
TILE_COLORS: tuple[str, ...] = (
    "yellow",
    "yellow/green",
    "green",
    "green/brown",
    "brown",
    "brown/gray",
    "gray",
    "offboard",
    "water",
    "mountain",
    "tunnel",
    "other",
    "none",
)

INFINITE = "∞"
INFINITE_ALIASES = frozenset({INFINITE, "infinite"})

DEFAULT_ROTATIONS = 6

# Fields with dedicated precedence handling; everything else is copied as-is.
TILE_FIELDS = ("color", "quantity", "rotations")

Quantity = Union[int, str, None]
Rotations = Union[int, Sequence[Any], None]


def merge_tile_override(
    catalog_entry: Mapping[str, Any],
    override: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """
    Merge a per-game tile override over a catalog entry.

    Precedence, per field: a key present in `override` replaces the catalog
    value wholesale (no nested merge); a key absent from `override` keeps the
    catalog value. A `None` override (the game lists the tile as `true`)
    returns a copy of the catalog entry.

    Example:
        >>> merge_tile_override({"color": "yellow", "quantity": 2}, {"quantity": 4})
        {'color': 'yellow', 'quantity': 4}
    """
    merged: dict[str, Any] = {}
    override = override or {}

    for name in TILE_FIELDS:
        if name in override:
            merged[name] = override[name]
        elif name in catalog_entry:
            merged[name] = catalog_entry[name]

    for key, value in catalog_entry.items():
        if key not in TILE_FIELDS:
            merged[key] = value
    for key, value in override.items():
        if key not in TILE_FIELDS:
            merged[key] = value

    return merged


def is_infinite(quantity: Quantity) -> bool:
    return isinstance(quantity, str) and quantity in INFINITE_ALIASES


def rotation_count(rotations: Rotations) -> int:
    """
    Number of rotations printed for a tile.

    Booleans are not counts even though Python treats them as ints.
    """
    if isinstance(rotations, (int, float)) and not isinstance(rotations, bool):
        return int(rotations)
    if isinstance(rotations, (list, tuple)):
        return len(rotations)
    return DEFAULT_ROTATIONS


def duplicate_count(quantity: Quantity) -> int:
    """
    Board18 duplicate count for a tile or token quantity.

    The infinite sentinel maps to 0, which downstream readers interpret as
    "unlimited". A missing quantity is 1.
    """
    if is_infinite(quantity):
        return 0
    if quantity is None:
        return 1
    return int(quantity)


def color_rank(color: Optional[str]) -> int:
    """Sort key for a color; unknown colors rank as "other"."""
    if color in TILE_COLORS:
        return TILE_COLORS.index(color)
    return TILE_COLORS.index("other")


@dataclass(frozen=True)
class TileDefinition:
    """
    Resolved tile (immutable).

    Attributes:
        tile_id: Id as written in the game file (e.g. "57" or "57|1")
        color: Palette color
        quantity: Integer count or the infinite sentinel
        rotations: Count, explicit list, or None for the default
        source_id: Catalog key the definition came from ("57" for "57|1")
        attributes: Full merged mapping, read-only
    """
    tile_id: str
    color: str
    quantity: Quantity = None
    rotations: Rotations = None
    source_id: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(
        cls,
        tile_id: str,
        data: Mapping[str, Any],
        *,
        source_id: Optional[str] = None,
    ) -> "TileDefinition":
        rotations = data.get("rotations")
        if isinstance(rotations, list):
            rotations = tuple(rotations)
        return cls(
            tile_id=tile_id,
            color=data["color"],
            quantity=data.get("quantity"),
            rotations=rotations,
            source_id=source_id or tile_id,
            attributes=MappingProxyType(dict(data)),
        )

    @property
    def rotation_count(self) -> int:
        return rotation_count(self.rotations)

    @property
    def duplicates(self) -> int:
        return duplicate_count(self.quantity)

    @property
    def color_filename(self) -> str:
        return self.color.replace("/", "_")

    def same_tile(self, other: "TileDefinition") -> bool:
        """True when both come from the same catalog entry with identical merged data."""
        return self.source_id == other.source_id and dict(self.attributes) == dict(other.attributes)


@dataclass(frozen=True)
class ColorBucket:
    """
    Tiles of one color in catalog order.

    Example:
        >>> bucket.color, bucket.count
        ('yellow', 2)
    """
    color: str
    tiles: tuple[TileDefinition, ...]

    @property
    def count(self) -> int:
        return len(self.tiles)
