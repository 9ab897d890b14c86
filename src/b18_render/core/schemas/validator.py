"""
Schema Validation Utilities

Validates a parsed game definition before any layout is computed.

Checks are structural only: the sections the renderer reads must have the
types the geometry and aggregation code expect. Anything else in the file
(revenue tracks, phases, privates...) is ignored.

Fail fast: the first section with problems raises `ValidationError` with
every problem found in that section listed in `errors`.
"""

from __future__ import annotations

import re
from numbers import Number
from typing import Any, Mapping

from b18_render.core.models.tiles import INFINITE_ALIASES


MARKET_TYPES = ("1D", "1Diag", "2D")

# 18xx hex coordinate: row letters then column digits ("A1", "AB12")
HEX_COORDINATE_RE = re.compile(r"^([A-Za-z]+)(\d+)$")


class ValidationError(Exception):
    """Raised when a game definition fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_game(data: Any) -> None:
    """
    Validate a game definition dictionary.

    Args:
        data: Parsed JSON of a game file

    Raises:
        ValidationError: If data is malformed
    """
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"Game definition must be a JSON object, got {type(data).__name__}",
            path="",
        )

    _validate_stock(data.get("stock"))
    _validate_tiles(data.get("tiles"))
    _validate_companies(data.get("companies"))
    _validate_tokens(data.get("tokens"))
    _validate_map(data.get("map"))

    info = data.get("info")
    if info is not None and not isinstance(info, Mapping):
        raise ValidationError("info must be an object", path="info")


def _validate_stock(stock: Any) -> None:
    if stock is None:
        raise ValidationError("Missing required section: stock", path="stock")
    if not isinstance(stock, Mapping):
        raise ValidationError("stock must be an object", path="stock")

    errors = []
    market_type = stock.get("type", "2D")
    if market_type not in MARKET_TYPES:
        errors.append(f"Unknown market type: {market_type!r} (expected one of {MARKET_TYPES})")

    market = stock.get("market", [])
    if not isinstance(market, (list, tuple)):
        errors.append("stock.market must be a list")
    elif market_type == "2D" and not all(isinstance(row, (list, tuple)) for row in market):
        errors.append("stock.market rows must be lists for 2D markets")

    display = stock.get("display")
    if display is not None:
        if not isinstance(display, Mapping):
            errors.append("stock.display must be an object")
        elif display.get("par") is not None:
            par = display["par"]
            if not isinstance(par, Mapping) or not all(
                isinstance(par.get(axis, 0), Number) for axis in ("x", "y")
            ):
                errors.append("stock.display.par must be an object with numeric x/y")

    par = stock.get("par")
    if par is not None and not isinstance(par, Mapping):
        errors.append("stock.par must be an object")

    if errors:
        raise ValidationError(
            f"Invalid stock section: {errors[0]}",
            path="stock",
            errors=errors,
        )


def tile_field_errors(entry: Mapping[str, Any], where: str) -> list[str]:
    """
    Problems with the count fields of one tile definition or override.

    `quantity` must be an integer or the infinite sentinel; `rotations`
    must be an integer or a list of rotations. Missing fields are fine.
    """
    errors = []
    if "quantity" in entry and not _is_quantity(entry["quantity"]):
        errors.append(f"{where}.quantity must be an integer or \"∞\", got {entry['quantity']!r}")
    rotations = entry.get("rotations")
    if rotations is not None and not (
        _is_int(rotations) or isinstance(rotations, (list, tuple))
    ):
        errors.append(f"{where}.rotations must be an integer or a list, got {rotations!r}")
    return errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_quantity(value: Any) -> bool:
    return value is None or _is_int(value) or (isinstance(value, str) and value in INFINITE_ALIASES)


def _validate_tiles(tiles: Any) -> None:
    if tiles is None:
        return
    if not isinstance(tiles, Mapping):
        raise ValidationError("tiles must be an object keyed by tile id", path="tiles")

    errors = []
    for tile_id, value in tiles.items():
        if value is True:
            continue
        if not isinstance(value, Mapping):
            errors.append(f"Tile {tile_id!r} must be true or an object")
            continue
        errors.extend(tile_field_errors(value, f"tiles[{tile_id!r}]"))
    if errors:
        raise ValidationError(f"Invalid tiles section: {errors[0]}", path="tiles", errors=errors)


def _validate_companies(companies: Any) -> None:
    if companies is None:
        return
    if not isinstance(companies, (list, tuple)):
        raise ValidationError("companies must be a list", path="companies")

    errors = []
    for i, company in enumerate(companies):
        if not isinstance(company, Mapping):
            errors.append(f"companies[{i}] must be an object")
            continue
        tokens = company.get("tokens", [])
        if not isinstance(tokens, (list, tuple, int)) or isinstance(tokens, bool):
            errors.append(f"companies[{i}].tokens must be a list or a count")
    if errors:
        raise ValidationError(f"Invalid companies section: {errors[0]}", path="companies", errors=errors)


def _validate_tokens(tokens: Any) -> None:
    if tokens is None:
        return
    if not isinstance(tokens, (list, tuple)):
        raise ValidationError("tokens must be a list", path="tokens")

    errors = [
        f"tokens[{i}].quantity must be an integer or \"∞\", got {token['quantity']!r}"
        for i, token in enumerate(tokens)
        if isinstance(token, Mapping) and not _is_quantity(token.get("quantity"))
    ]
    if errors:
        raise ValidationError(f"Invalid tokens section: {errors[0]}", path="tokens", errors=errors)


def _validate_map(game_map: Any) -> None:
    if game_map is None:
        return
    variants = game_map if isinstance(game_map, (list, tuple)) else [game_map]

    errors = []
    for i, variant in enumerate(variants):
        if not isinstance(variant, Mapping):
            errors.append(f"map variant {i} must be an object")
            continue
        groups = variant.get("hexes") or []
        if not isinstance(groups, (list, tuple)):
            errors.append(f"map variant {i}: hexes must be a list")
            continue
        for j, group in enumerate(groups):
            errors.extend(_hex_group_errors(group, f"map variant {i}: hexes[{j}]"))
    if errors:
        raise ValidationError(f"Invalid map section: {errors[0]}", path="map", errors=errors)


def _hex_group_errors(group: Any, where: str) -> list[str]:
    if not isinstance(group, Mapping):
        return [f"{where} must be an object"]
    coords = group.get("hexes") or []
    if not isinstance(coords, (list, tuple)):
        return [f"{where}.hexes must be a list of coordinates"]
    return [
        f"{where}: invalid hex coordinate {coord!r}"
        for coord in coords
        if not isinstance(coord, str) or not HEX_COORDINATE_RE.match(coord.strip())
    ]
