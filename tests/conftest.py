import copy
import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image

# Add src to sys.path so we can import b18_render
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from b18_render.core.models import GameSpec  # noqa: E402
from b18_render.layout import LayoutConfig  # noqa: E402
from b18_render.render import ContentServer, NavigationTimeout, RenderSurface  # noqa: E402
from b18_render.tiles import DictTileCatalog  # noqa: E402


SAMPLE_CATALOG = {
    "1": {"color": "yellow", "quantity": 1},
    "7": {"color": "yellow", "quantity": 4},
    "9": {"color": "yellow", "quantity": 7},
    "15": {"color": "green", "quantity": 2},
    "57": {"color": "yellow", "quantity": 4, "rotations": [0, 1, 2]},
    "63": {"color": "brown", "quantity": 3},
}

SAMPLE_GAME = {
    "info": {"title": "1830", "orientation": "vertical", "extraStationTokens": 0},
    "links": {
        "bgg": "https://example.com/bgg/1830",
        "rules": "https://example.com/rules/1830.pdf",
    },
    "tiles": {
        "1": True,
        "7": True,
        "57": True,
        "15": {"quantity": 3},
        "X1": {"color": "gray", "quantity": "∞"},
    },
    "companies": [
        {"abbrev": "PRR", "tokens": ["40", "100", "100", "100"]},
        {"abbrev": "NYC", "tokens": ["40", "100"]},
    ],
    "tokens": [
        {"label": "Port", "quantity": 1},
        {"label": "Unused", "quantity": 0},
    ],
    "stock": {
        "type": "2D",
        "market": [
            ["60", "67", "71"],
            ["53", "60", "66", "70"],
            ["46", "55"],
        ],
    },
    "map": {
        "hexes": [
            {"color": "plain", "hexes": ["A1", "A3", "B2", "C1", "C3"]},
        ],
    },
}


class FakeSurface(RenderSurface):
    """
    In-memory rendering surface.

    Writes a blank PNG at the current viewport size (or `size_override`)
    and records every call. Navigation to a URL containing `fail_on`
    times out.
    """

    def __init__(self, *, size_override=None, fail_on=None):
        self.size_override = size_override
        self.fail_on = fail_on
        self.calls = []
        self.viewport = (0, 0)
        self.is_open = False

    def open(self):
        self.is_open = True
        self.calls.append(("open",))

    def navigate(self, url, timeout_ms=30_000):
        self.calls.append(("navigate", url))
        if self.fail_on and self.fail_on in url:
            raise NavigationTimeout(url, timeout_ms)

    def set_viewport(self, width, height):
        self.viewport = (width, height)
        self.calls.append(("set_viewport", width, height))

    def capture(self, path, *, omit_background=False):
        size = self.size_override or self.viewport
        mode = "RGBA" if omit_background else "RGB"
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size).save(path)
        self.calls.append(("capture", path, omit_background))

    def close(self):
        self.is_open = False
        self.calls.append(("close",))


# Common test fixtures
@pytest.fixture
def layout_config():
    """Layout constants matching the packaged defaults."""
    return LayoutConfig()


@pytest.fixture
def catalog():
    return DictTileCatalog(SAMPLE_CATALOG)


@pytest.fixture
def game_data():
    """Fresh, mutable copy of the sample game definition."""
    return copy.deepcopy(SAMPLE_GAME)


@pytest.fixture
def game(game_data):
    return GameSpec.from_dict("1830", "1.0", game_data)


@pytest.fixture
def games_dir(tmp_path: Path, game_data):
    """Games directory holding 1830.json."""
    directory = tmp_path / "games"
    directory.mkdir()
    (directory / "1830.json").write_text(json.dumps(game_data), encoding="utf-8")
    return directory


@pytest.fixture
def tiles_file(tmp_path: Path):
    path = tmp_path / "tiles.json"
    path.write_text(json.dumps(SAMPLE_CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def fake_surface():
    return FakeSurface()


@pytest.fixture
def fake_server():
    """Content server stand-in that never binds a socket."""
    server = MagicMock(spec=ContentServer)
    server.url.side_effect = lambda path: f"http://127.0.0.1:9000{path}"
    return server


@pytest.fixture
def surface_factory():
    """FakeSurface class, for tests that need a misbehaving surface."""
    return FakeSurface
