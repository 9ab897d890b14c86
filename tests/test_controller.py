"""
Pipeline tests for render_game, with a fake surface and a stubbed server.
"""

import json
import logging
import zipfile
from unittest.mock import patch

import portalocker
import pytest
from PIL import Image

from b18_render.config import RenderConfig
from b18_render.controller import RenderError, render_game
from b18_render.loading import LoaderError
from b18_render.render import NavigationTimeout
from b18_render.tiles import CatalogError


@pytest.fixture
def config(tmp_path, games_dir, tiles_file):
    return RenderConfig(
        bname="1830",
        version="1.0",
        author="Jane Doe",
        games_dir=games_dir,
        tiles_path=tiles_file,
        site_dir=tmp_path / "site",
        user_config=None,
        output_root=tmp_path / "render",
    )


class TestRenderGame:
    """End-to-end pipeline behaviour."""

    def test_renders_every_image(self, config, fake_surface, fake_server):
        # Act
        result = render_game(config, surface=fake_surface, server=fake_server)

        # Assert
        assert [p.name for p in result.images] == [
            "Map.png", "Market.png", "Tokens.png", "Yellow.png", "Green.png", "Gray.png",
        ]
        assert all(p.parent == config.paths.image_dir for p in result.images)
        with Image.open(config.paths.image("Yellow.png")) as image:
            assert image.size == (450, 900)
        assert result.tile_counts == {"yellow": 3, "green": 1, "gray": 1}

    def test_writes_manifest(self, config, fake_surface, fake_server):
        result = render_game(config, surface=fake_surface, server=fake_server)

        written = json.loads(result.manifest_path.read_text(encoding="utf-8"))
        assert result.manifest_path == config.paths.manifest_path
        assert written == result.manifest
        assert written["author"] == "Jane Doe"
        assert [tray["type"] for tray in written["tray"]] == ["tile", "tile", "tile", "btok", "mtok"]

    def test_writes_archive(self, config, fake_surface, fake_server):
        result = render_game(config, surface=fake_surface, server=fake_server)

        with zipfile.ZipFile(result.archive_path) as zf:
            names = set(zf.namelist())

        assert "board18-1830-1.0/1830-1.0.json" in names
        for image in result.images:
            assert f"board18-1830-1.0/1830-1.0/{image.name}" in names
        assert not any(".render.lock" in name for name in names)

    def test_manifest_is_deterministic(self, config, surface_factory, fake_server):
        render_game(config, surface=surface_factory(), server=fake_server)
        first = config.paths.manifest_path.read_bytes()

        render_game(config, surface=surface_factory(), server=fake_server)
        second = config.paths.manifest_path.read_bytes()

        assert first == second

    def test_progress_logged(self, config, fake_surface, fake_server, caplog):
        caplog.set_level(logging.INFO)

        render_game(config, surface=fake_surface, server=fake_server)

        assert "Printing 1830/board18-1830-1.0/1830-1.0/Map.png" in caplog.text
        assert "Printing 1830/board18-1830-1.0/1830-1.0/Gray.png" in caplog.text

    def test_missing_game(self, config, fake_surface, fake_server):
        config.games_dir.joinpath("1830.json").unlink()

        with pytest.raises(RenderError, match="Failed to load 1830") as exc_info:
            render_game(config, surface=fake_surface, server=fake_server)

        assert isinstance(exc_info.value.__cause__, LoaderError)
        fake_server.start.assert_not_called()

    def test_missing_catalog(self, config, fake_surface, fake_server):
        config.tiles_path.unlink()

        with pytest.raises(RenderError) as exc_info:
            render_game(config, surface=fake_surface, server=fake_server)

        assert isinstance(exc_info.value.__cause__, CatalogError)

    @pytest.mark.parametrize("bad_hex", ["??", 5])
    def test_bad_map_coordinate(self, config, game_data, fake_surface, fake_server, bad_hex):
        game_data["map"]["hexes"][0]["hexes"].append(bad_hex)
        config.games_dir.joinpath("1830.json").write_text(json.dumps(game_data), encoding="utf-8")

        with pytest.raises(RenderError, match="Failed to load 1830"):
            render_game(config, surface=fake_surface, server=fake_server)

        fake_server.start.assert_not_called()

    def test_bad_tile_quantity(self, config, game_data, fake_surface, fake_server):
        game_data["tiles"]["7"] = {"quantity": "lots"}
        config.games_dir.joinpath("1830.json").write_text(json.dumps(game_data), encoding="utf-8")

        with pytest.raises(RenderError, match="Failed to load 1830"):
            render_game(config, surface=fake_surface, server=fake_server)

        fake_server.start.assert_not_called()

    def test_rerender_drops_stale_images(self, config, game_data, surface_factory, fake_server):
        # Arrange
        render_game(config, surface=surface_factory(), server=fake_server)
        del game_data["tiles"]["X1"]
        config.games_dir.joinpath("1830.json").write_text(json.dumps(game_data), encoding="utf-8")

        # Act
        result = render_game(config, surface=surface_factory(), server=fake_server)

        # Assert
        assert not config.paths.image("Gray.png").exists()
        with zipfile.ZipFile(result.archive_path) as zf:
            names = set(zf.namelist())
        assert "board18-1830-1.0/1830-1.0/Gray.png" not in names
        assert "board18-1830-1.0/1830-1.0/Green.png" in names
        assert result.tile_counts == {"yellow": 3, "green": 1}

    def test_failed_rerender_leaves_no_stale_package(self, config, surface_factory, fake_server):
        render_game(config, surface=surface_factory(), server=fake_server)

        with pytest.raises(RenderError, match="Failed to capture"):
            render_game(config, surface=surface_factory(fail_on="/market"), server=fake_server)

        assert not config.paths.archive_path.exists()
        assert not config.paths.manifest_path.exists()
        assert not config.paths.image("Gray.png").exists()

    def test_title_logged(self, config, game_data, fake_surface, fake_server, caplog):
        caplog.set_level(logging.INFO)
        game_data["info"]["title"] = "1830: Railways & Robber Barons"
        config.games_dir.joinpath("1830.json").write_text(json.dumps(game_data), encoding="utf-8")

        render_game(config, surface=fake_surface, server=fake_server)

        assert "Loaded 1830: Railways & Robber Barons (1830-1.0)" in caplog.text

    def test_capture_failure(self, config, surface_factory, fake_server):
        # Arrange
        surface = surface_factory(fail_on="/market")

        # Act
        with pytest.raises(RenderError, match="Failed to capture") as exc_info:
            render_game(config, surface=surface, server=fake_server)

        # Assert
        assert isinstance(exc_info.value.__cause__, NavigationTimeout)
        fake_server.stop.assert_called_once()
        assert surface.is_open is False
        assert not config.paths.archive_path.exists()
        assert not config.paths.manifest_path.exists()

    def test_concurrent_run_rejected(self, config, fake_surface, fake_server):
        with patch("portalocker.lock", side_effect=portalocker.exceptions.LockException("held")):
            with pytest.raises(RenderError, match="Another render of 1830"):
                render_game(config, surface=fake_surface, server=fake_server)

        fake_server.start.assert_not_called()
