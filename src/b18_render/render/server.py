"""
Module: render.server

Purpose:
    Local content server for the rendering surface. Serves the built site
    directory and falls back to index.html for any unknown path so the
    single-page app can route /games/<name>/... itself.

Key Functions:
    - create_site_app(): FastAPI app for a site directory

Key Classes:
    - ContentServer: uvicorn in a background thread (context manager)
    - ServerError: Server failed to start

Dependencies:
    - fastapi: Routing and FileResponse
    - uvicorn: ASGI server

Used By:
    - controller: Scoped around the capture loop
    - cli: Preview ("debug") mode
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

logger = logging.getLogger(__name__)


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9000
STARTUP_TIMEOUT_S = 10.0


class ServerError(Exception):
    """Content server failed to start or stop."""
    pass


def create_site_app(site_dir: Path) -> FastAPI:
    """
    Build the FastAPI app serving `site_dir`.

    Existing files are served as-is; everything else gets index.html.
    Paths that escape the site directory are never served.
    """
    root = site_dir.resolve()
    index = root / "index.html"
    app = FastAPI(title="b18-render site", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/{path:path}")
    async def serve(path: str):
        candidate = (root / path).resolve()
        if path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        if not index.is_file():
            raise HTTPException(status_code=404, detail=f"No index.html in {root}")
        return FileResponse(index)

    return app


class ContentServer:
    """
    Serve a site directory on a local port.

    Runs uvicorn in a daemon thread. `start()` blocks until the socket is
    listening; `stop()` asks uvicorn to exit and joins the thread.

    Example:
        >>> with ContentServer(Path("dist/site")) as server:
        ...     server.url("/games/1830/market?print=true")
        'http://127.0.0.1:9000/games/1830/market?print=true'
    """

    def __init__(
        self,
        site_dir: Path,
        *,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.site_dir = site_dir
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _make_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            create_site_app(self.site_dir),
            host=self.host,
            port=self.port,
            log_level="warning",
        )
        return uvicorn.Server(config)

    def start(self, timeout: float = STARTUP_TIMEOUT_S) -> None:
        if self._thread is not None:
            return
        if not self.site_dir.is_dir():
            raise ServerError(f"Site directory does not exist: {self.site_dir}")

        self._server = self._make_server()
        self._thread = threading.Thread(
            target=self._server.run,
            name="b18-content-server",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                self._thread = None
                raise ServerError(f"Content server exited during startup on {self.base_url}")
            if time.monotonic() > deadline:
                self.stop()
                raise ServerError(f"Content server did not start within {timeout}s")
            time.sleep(0.05)

        logger.info(f"Serving {self.site_dir} at {self.base_url}")

    def stop(self, timeout: float = STARTUP_TIMEOUT_S) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Content server thread did not exit in time")
            else:
                logger.debug("Content server stopped")
        self._thread = None
        self._server = None

    def serve_forever(self) -> None:
        """Run in the foreground until interrupted (preview mode)."""
        if not self.site_dir.is_dir():
            raise ServerError(f"Site directory does not exist: {self.site_dir}")
        logger.info(f"Serving {self.site_dir} at {self.base_url} (Ctrl+C to stop)")
        self._make_server().run()

    def __enter__(self) -> "ContentServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
