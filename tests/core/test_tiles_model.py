"""
Unit tests for the tile and game models.
"""

import pytest

from b18_render.core.models import (
    INFINITE,
    TILE_COLORS,
    ColorBucket,
    GameSpec,
    TileDefinition,
    color_rank,
    duplicate_count,
    merge_tile_override,
    rotation_count,
)


class TestMergeTileOverride:
    """Tests for field-by-field override precedence."""

    def test_override_wins(self):
        merged = merge_tile_override({"color": "yellow", "quantity": 2}, {"quantity": 4})
        assert merged == {"color": "yellow", "quantity": 4}

    def test_absent_fields_keep_catalog_value(self):
        merged = merge_tile_override(
            {"color": "green", "quantity": 2, "rotations": [0, 1]},
            {"color": "green/brown"},
        )
        assert merged["quantity"] == 2
        assert merged["rotations"] == [0, 1]
        assert merged["color"] == "green/brown"

    def test_none_override_copies_catalog(self):
        entry = {"color": "yellow", "quantity": 1}

        merged = merge_tile_override(entry, None)

        assert merged == entry
        assert merged is not entry

    def test_nested_values_replaced_wholesale(self):
        merged = merge_tile_override(
            {"color": "yellow", "values": {"a": 1, "b": 2}},
            {"values": {"a": 5}},
        )
        assert merged["values"] == {"a": 5}

    def test_catalog_entry_not_mutated(self):
        entry = {"color": "yellow", "quantity": 2}
        merge_tile_override(entry, {"quantity": 9, "extra": True})
        assert entry == {"color": "yellow", "quantity": 2}


class TestRotationCount:
    def test_default_is_six(self):
        assert rotation_count(None) == 6

    def test_explicit_list(self):
        assert rotation_count(["a", "b", "c"]) == 3

    def test_explicit_number(self):
        assert rotation_count(2) == 2

    def test_boolean_is_not_a_count(self):
        assert rotation_count(True) == 6


class TestDuplicateCount:
    def test_infinite_is_zero(self):
        assert duplicate_count(INFINITE) == 0

    def test_infinite_alias(self):
        assert duplicate_count("infinite") == 0

    def test_missing_is_one(self):
        assert duplicate_count(None) == 1

    def test_counts(self):
        assert duplicate_count(3) == 3
        assert duplicate_count("2") == 2


class TestColorRank:
    def test_palette_order(self):
        ranks = [color_rank(color) for color in TILE_COLORS]
        assert ranks == sorted(ranks)

    def test_unknown_ranks_as_other(self):
        assert color_rank("purple") == color_rank("other")
        assert color_rank(None) == color_rank("other")


class TestTileDefinition:
    def test_from_dict(self):
        tile = TileDefinition.from_dict("57", {"color": "yellow", "quantity": INFINITE, "rotations": [0, 1, 2]})

        assert tile.color == "yellow"
        assert tile.rotations == (0, 1, 2)
        assert tile.rotation_count == 3
        assert tile.duplicates == 0
        assert tile.source_id == "57"

    def test_attributes_read_only(self):
        tile = TileDefinition.from_dict("57", {"color": "yellow"})
        with pytest.raises(TypeError):
            tile.attributes["color"] = "green"

    def test_color_filename(self):
        assert TileDefinition.from_dict("x", {"color": "green/brown"}).color_filename == "green_brown"

    def test_same_tile_needs_same_source(self):
        a = TileDefinition.from_dict("57", {"color": "yellow", "quantity": 2}, source_id="57")
        b = TileDefinition.from_dict("58", {"color": "yellow", "quantity": 2}, source_id="58")
        c = TileDefinition.from_dict("57|1", {"color": "yellow", "quantity": 2}, source_id="57")

        assert not a.same_tile(b)
        assert a.same_tile(c)

    def test_same_tile_needs_same_data(self):
        a = TileDefinition.from_dict("57", {"color": "yellow", "quantity": 2}, source_id="57")
        b = TileDefinition.from_dict("57|1", {"color": "yellow", "quantity": 1}, source_id="57")

        assert not a.same_tile(b)

    def test_bucket_count(self):
        tiles = tuple(TileDefinition.from_dict(str(i), {"color": "yellow"}) for i in range(3))
        assert ColorBucket("yellow", tiles).count == 3


class TestGameSpec:
    """Tests for the read-only game view."""

    def test_id(self, game):
        assert game.id == "1830-1.0"

    def test_sections_are_read_only(self, game):
        with pytest.raises(TypeError):
            game.stock["type"] = "1D"
        with pytest.raises(AttributeError):
            game.name = "1846"

    def test_source_data_not_shared(self, game_data):
        game = GameSpec.from_dict("1830", "1.0", game_data)

        game_data["stock"]["type"] = "1D"

        assert game.stock["type"] == "2D"

    def test_title_falls_back_to_name(self):
        assert GameSpec.from_dict("1846", "1", {}).title == "1846"

    def test_optional_sections_default_empty(self):
        game = GameSpec.from_dict("g", "1", {})

        assert game.companies == ()
        assert game.tokens == ()
        assert dict(game.tiles) == {}
        assert game.extra_station_tokens == 0
        assert game.horizontal_tiles is False

    def test_tile_override(self, game):
        assert game.tile_override("1") is None
        assert game.tile_override("15")["quantity"] == 3
        assert game.tile_override("missing") is None
