"""
Game Model

Read-only view over one game definition file. The renderer never mutates
the parsed JSON: sections are exposed as `MappingProxyType` views or tuples
and every layout is derived from them fresh.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union


def _freeze(value: Any) -> Any:
    """Recursively wrap dicts/lists so nested sections are read-only too."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class GameSpec:
    """
    One game edition (immutable).

    Attributes:
        name: Game name as passed on the command line (e.g. "1830")
        version: Package version string
        data: Frozen copy of the raw game JSON

    Example:
        >>> game = GameSpec.from_dict("1830", "1.0", {"tiles": {"57": True}})
        >>> list(game.tiles)
        ['57']
    """
    name: str
    version: str
    data: Mapping[str, Any] = field(repr=False)

    @classmethod
    def from_dict(cls, name: str, version: str, data: Mapping[str, Any]) -> "GameSpec":
        return cls(name=name, version=version, data=_freeze(data))

    @property
    def id(self) -> str:
        """Identifier used in file names: "<name>-<version>"."""
        return f"{self.name}-{self.version}"

    @property
    def info(self) -> Mapping[str, Any]:
        return self.data.get("info") or MappingProxyType({})

    @property
    def title(self) -> str:
        return self.info.get("title") or self.name

    @property
    def horizontal_tiles(self) -> bool:
        return self.info.get("orientation") == "horizontal"

    @property
    def extra_station_tokens(self) -> int:
        return self.info.get("extraStationTokens") or 0

    @property
    def tiles(self) -> Mapping[str, Union[bool, Mapping[str, Any]]]:
        return self.data.get("tiles") or MappingProxyType({})

    @property
    def companies(self) -> tuple[Mapping[str, Any], ...]:
        return tuple(self.data.get("companies") or ())

    @property
    def tokens(self) -> tuple[Any, ...]:
        return tuple(self.data.get("tokens") or ())

    @property
    def stock(self) -> Mapping[str, Any]:
        return self.data.get("stock") or MappingProxyType({})

    @property
    def links(self) -> Mapping[str, Any]:
        return self.data.get("links") or MappingProxyType({})

    def map_variant(self, variation: int = 0) -> Mapping[str, Any]:
        """
        Return the hex map section. Games with alternative maps store a list;
        `variation` picks one (clamped to the last).
        """
        game_map = self.data.get("map") or MappingProxyType({})
        if isinstance(game_map, tuple):
            if not game_map:
                return MappingProxyType({})
            return game_map[min(variation, len(game_map) - 1)]
        return game_map

    def tile_override(self, tile_id: str) -> Optional[Mapping[str, Any]]:
        """The game's override mapping for a tile, or None when listed as `true`."""
        value = self.tiles.get(tile_id)
        if isinstance(value, Mapping):
            return value
        return None
