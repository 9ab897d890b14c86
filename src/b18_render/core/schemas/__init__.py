from .validator import validate_game, tile_field_errors, ValidationError, MARKET_TYPES, HEX_COORDINATE_RE

__all__ = ["validate_game", "tile_field_errors", "ValidationError", "MARKET_TYPES", "HEX_COORDINATE_RE"]
