"""Core data models for game definitions and tiles."""

from .game import GameSpec
from .tiles import (
    TILE_COLORS,
    INFINITE,
    DEFAULT_ROTATIONS,
    TileDefinition,
    ColorBucket,
    merge_tile_override,
    rotation_count,
    duplicate_count,
    color_rank,
    is_infinite,
)

__all__ = [
    "GameSpec",
    "TILE_COLORS",
    "INFINITE",
    "DEFAULT_ROTATIONS",
    "TileDefinition",
    "ColorBucket",
    "merge_tile_override",
    "rotation_count",
    "duplicate_count",
    "color_rank",
    "is_infinite",
]
