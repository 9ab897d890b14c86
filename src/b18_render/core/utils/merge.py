"""
Merge Utilities

Two merge flavours are used across the renderer and they must not be
confused:

- `deep_merge()` layers configuration files. Nested mappings merge
  recursively, anything else on the right replaces the left.
- Tile overrides are a shallow, field-by-field merge and live in
  `core.models.tiles.merge_tile_override()`.
"""

from __future__ import annotations

from typing import Any, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge `override` on top of `base`.

    Neither input is modified. Lists are replaced, not concatenated.

    Example:
        >>> deep_merge({"stock": {"column": 5, "diag": 5}}, {"stock": {"diag": 3}})
        {'stock': {'column': 5, 'diag': 3}}
    """
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged
