"""
Module: render.surface

Purpose:
    The rendering surface contract and its Playwright implementation.
    A surface can navigate to a URL and wait for network quiescence, set
    an exact viewport, and capture the viewport to a PNG.

Key Classes:
    - RenderSurface: Abstract surface (context manager)
    - PlaywrightSurface: Headless Chromium through Playwright's sync API
    - SurfaceError: Launch, navigation or capture failure
    - NavigationTimeout: Page never reached network idle in time

Dependencies:
    - playwright: Headless browser automation

Used By:
    - render.orchestrator: Capture loop
    - controller: Default surface factory
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from playwright.sync_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
    sync_playwright,
)

logger = logging.getLogger(__name__)


DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000
CHROMIUM_ARGS = ("--force-color-profile=srgb",)


class SurfaceError(Exception):
    """Rendering surface failed to launch, navigate or capture."""
    pass


class NavigationTimeout(SurfaceError):
    """Page did not reach network idle before the deadline."""

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {url} to go idle")
        self.url = url
        self.timeout_ms = timeout_ms


class RenderSurface(ABC):
    """
    Abstract rendering surface.

    Implementations must be usable as context managers so they are
    released on every exit path.

    Example:
        >>> with PlaywrightSurface() as surface:
        ...     surface.navigate("http://localhost:9000/games/1830/market?print=true")
        ...     surface.set_viewport(800, 600)
        ...     surface.capture(Path("Market.png"))
    """

    @abstractmethod
    def open(self) -> None:
        """Launch the surface."""

    @abstractmethod
    def navigate(self, url: str, timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS) -> None:
        """
        Load a URL and block until the page has no network activity.

        Raises:
            NavigationTimeout: If the page is still busy at the deadline
            SurfaceError: For any other navigation failure
        """

    @abstractmethod
    def set_viewport(self, width: int, height: int) -> None:
        """Resize the capture area to exactly width x height pixels."""

    @abstractmethod
    def capture(self, path: Path, *, omit_background: bool = False) -> None:
        """Write a PNG of the current viewport to `path`."""

    @abstractmethod
    def close(self) -> None:
        """Release the surface. Safe to call more than once."""

    def __enter__(self) -> "RenderSurface":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PlaywrightSurface(RenderSurface):
    """Headless Chromium driven through Playwright's synchronous API."""

    def __init__(self, *, headless: bool = True) -> None:
        self.headless = headless
        self._playwright = None
        self._browser = None
        self._page = None

    def open(self) -> None:
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless,
                args=list(CHROMIUM_ARGS),
            )
            self._page = self._browser.new_page()
        except PlaywrightError as e:
            self.close()
            raise SurfaceError(f"Failed to launch Chromium: {e}") from e

        logger.debug("Chromium launched")

    @property
    def page(self):
        if self._page is None:
            raise SurfaceError("Surface is not open")
        return self._page

    def navigate(self, url: str, timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS) -> None:
        try:
            self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeout as e:
            raise NavigationTimeout(url, timeout_ms) from e
        except PlaywrightError as e:
            raise SurfaceError(f"Failed to load {url}: {e}") from e

    def set_viewport(self, width: int, height: int) -> None:
        self.page.set_viewport_size({"width": width, "height": height})

    def capture(self, path: Path, *, omit_background: bool = False) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.page.screenshot(path=str(path), omit_background=omit_background)
        except PlaywrightError as e:
            raise SurfaceError(f"Failed to capture {path}: {e}") from e

    def close(self) -> None:
        """Release Chromium; a failing browser close is logged, not raised."""
        browser, playwright = self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None

        try:
            if browser is not None:
                browser.close()
        except PlaywrightError as e:
            logger.warning(f"Failed to close Chromium cleanly: {e}")
        finally:
            if playwright is not None:
                playwright.stop()
                logger.debug("Chromium stopped")

