"""
Unit tests for market, par and revenue geometry.
"""

import pytest

from b18_render.layout import (
    LayoutConfig,
    MarketType,
    compute_market_layout,
    compute_par_layout,
    compute_revenue_layout,
    get_max_length,
    human_units,
    units_to_css,
)
from b18_render.layout.config import StockConfig


def make_stock(market_type, market, **extra):
    stock = {"type": market_type, "market": market}
    stock.update(extra)
    return stock


class TestGetMaxLength:
    """Tests for ragged row width."""

    def test_empty_is_zero(self):
        assert get_max_length([]) == 0

    def test_longest_row_wins(self):
        rows = [[1, 2, 3], [1, 2, 3, 4, 5], [1, 2]]
        assert get_max_length(rows) == 5


class TestMarketType:
    def test_missing_type_is_2d(self):
        assert MarketType.parse(None) is MarketType.TWO_D

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown market type"):
            MarketType.parse("3D")

    def test_linear_types(self):
        assert MarketType.ONE_D.is_linear
        assert MarketType.ONE_DIAG.is_linear
        assert not MarketType.TWO_D.is_linear


class TestComputeMarketLayout:
    """Tests for compute_market_layout across topologies."""

    def test_2d_grid(self, layout_config):
        # Arrange
        stock = make_stock("2D", [["a"] * 3, ["a"] * 5, ["a"] * 2])

        # Act
        layout = compute_market_layout(stock, layout_config)

        # Assert
        assert layout.type is MarketType.TWO_D
        assert (layout.rows, layout.columns) == (3, 5)
        assert (layout.width, layout.height) == (50, 50)
        assert layout.total_width == 50 * 5 + 10
        assert layout.total_height == 50 * 3 + 50

    def test_1diag_folds_into_two_rows(self, layout_config):
        stock = make_stock("1Diag", list(range(7)))

        layout = compute_market_layout(stock, layout_config)

        assert layout.rows == 2
        assert layout.columns == 4
        assert layout.height == layout_config.stock.diag * 50
        assert layout.total_width == 50 * 4 + 10
        assert layout.total_height == 250 * 2 + 50

    def test_1d_single_row(self, layout_config):
        stock = make_stock("1D", list(range(10)))

        layout = compute_market_layout(stock, layout_config)

        assert (layout.rows, layout.columns) == (1, 10)
        assert layout.height == layout_config.stock.column * 50
        assert layout.total_width == 510
        assert layout.total_height == 300

    def test_missing_type_defaults_to_2d(self, layout_config):
        layout = compute_market_layout({"market": [["a", "b"]]}, layout_config)

        assert layout.type is MarketType.TWO_D
        assert layout.columns == 2

    def test_unknown_type_raises(self, layout_config):
        with pytest.raises(ValueError):
            compute_market_layout(make_stock("Spiral", []), layout_config)

    def test_empty_market_is_valid(self, layout_config):
        layout = compute_market_layout({"market": []}, layout_config)

        assert (layout.rows, layout.columns) == (0, 0)
        assert layout.total_width == 10
        assert layout.total_height == 50

    def test_title_false_drops_title_band(self, layout_config):
        with_title = compute_market_layout(make_stock("2D", [["a"]]), layout_config)
        without_title = compute_market_layout(make_stock("2D", [["a"]], title=False), layout_config)

        assert with_title.total_height - without_title.total_height == 50

    def test_cell_multipliers(self, layout_config):
        stock = make_stock("2D", [["a", "b"]], cell={"width": 2, "height": 1.5})

        layout = compute_market_layout(stock, layout_config)

        assert layout.width == 100
        assert layout.height == 75
        assert layout.total_width == 210

    def test_legend_adds_band_on_linear_markets(self, layout_config):
        plain = compute_market_layout(make_stock("1D", list(range(4))), layout_config)
        legend = compute_market_layout(
            make_stock("1D", list(range(4)), legend=[{"color": "yellow"}]),
            layout_config,
        )

        assert legend.total_height == plain.total_height + 50

    def test_legend_ignored_on_2d(self, layout_config):
        plain = compute_market_layout(make_stock("2D", [["a"]]), layout_config)
        legend = compute_market_layout(make_stock("2D", [["a"]], legend=[{"color": "yellow"}]), layout_config)

        assert legend.total_height == plain.total_height

    def test_legend_hidden_by_config(self):
        config = LayoutConfig(stock=StockConfig(show_legend=False))
        stock = make_stock("1Diag", list(range(4)), legend=[{"color": "yellow"}])

        layout = compute_market_layout(stock, config)

        assert layout.total_height == 250 * 2 + 50

    def test_human_size_excludes_legend(self, layout_config):
        stock = make_stock("1D", list(range(10)), legend=[{"color": "yellow"}])

        layout = compute_market_layout(stock, layout_config)

        assert layout.total_height == 350
        assert layout.human_height == "3in"
        assert layout.human_width == "6in"

    def test_extra_totals(self, layout_config):
        stock = make_stock(
            "2D",
            [["a", "b"]],
            display={"extraTotalWidth": 20, "extraTotalHeight": 30},
        )

        layout = compute_market_layout(stock, layout_config)

        assert layout.total_width == 110 + 20
        assert layout.total_height == 100 + 30

    def test_par_overlay_grows_bounding_box(self, layout_config):
        # Arrange: 2x3 market is 160x150 on its own
        stock = make_stock(
            "2D",
            [["a"] * 3, ["a"] * 3],
            par={"values": [["100", "90"], ["80"]]},
            display={"par": {"x": 1, "y": 2}},
        )

        # Act
        layout = compute_market_layout(stock, layout_config)

        # Assert: par grid is 200x150, offset one cell right and two down
        assert layout.par is not None
        assert layout.par.total_width == 200
        assert layout.total_width == 200 + 50 * 1
        assert layout.total_height == 150 + 50 * 2 + 50

    def test_par_overlay_on_1diag_uses_half_rows(self, layout_config):
        stock = make_stock(
            "1Diag",
            list(range(4)),
            par={"values": [["100"]]},
            display={"par": {"x": 0, "y": 4}},
        )

        layout = compute_market_layout(stock, layout_config)

        # par: 100 + 125 * 4 + 50 exceeds the 550 market height
        assert layout.total_height == 100 + 125 * 4 + 50

    def test_par_smaller_than_market_changes_nothing(self, layout_config):
        market = [["a"] * 10] * 5
        plain = compute_market_layout(make_stock("2D", market), layout_config)
        with_par = compute_market_layout(
            make_stock("2D", market, par={"values": [["100"]]}, display={"par": {"x": 0, "y": 0}}),
            layout_config,
        )

        assert (with_par.total_width, with_par.total_height) == (plain.total_width, plain.total_height)

    @pytest.mark.parametrize("market_type,market", [
        ("1D", list(range(12))),
        ("1Diag", list(range(9))),
        ("2D", [["a"] * 4, ["a"] * 7]),
        ("2D", []),
    ])
    def test_totals_cover_every_cell(self, layout_config, market_type, market):
        layout = compute_market_layout(make_stock(market_type, market), layout_config)

        assert layout.total_width >= layout.width * layout.columns
        assert layout.total_height >= layout.height * layout.rows

    def test_css_sizes(self, layout_config):
        layout = compute_market_layout(make_stock("2D", [["a"]]), layout_config)

        assert layout.css.width == "0.5in"
        assert layout.css.total_width == "0.6in"


class TestParLayout:
    def test_no_values_still_one_column(self, layout_config):
        par = compute_par_layout({"par": {}}, layout_config)

        assert par.rows == 0
        assert par.columns == 1
        assert par.width == layout_config.stock.par * 50

    def test_custom_par_cell(self, layout_config):
        par = compute_par_layout({"par": {"width": 3, "height": 2, "values": [["1", "2"]]}}, layout_config)

        assert (par.width, par.height) == (150, 100)
        assert par.total_width == 300
        assert par.total_height == 100 + 50


class TestRevenueLayout:
    def test_defaults(self, layout_config):
        revenue = compute_revenue_layout(None, layout_config)

        assert (revenue.min, revenue.max, revenue.per_row) == (1, 100, 20)
        assert revenue.rows == 5
        assert revenue.total_height == 5 * 50 + 50

    def test_partial_row_rounds_up(self, layout_config):
        assert compute_revenue_layout({"max": 150}, layout_config).rows == 8


class TestUnits:
    def test_units_to_css(self):
        assert units_to_css(50) == "0.5in"
        assert units_to_css(200) == "2in"

    def test_human_units_round_up(self):
        assert human_units(210) == "3in"
        assert human_units(200) == "2in"
