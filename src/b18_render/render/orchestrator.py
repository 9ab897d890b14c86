"""
Module: render.orchestrator

Purpose:
    Drive the content server and rendering surface through a planned job
    list: start server, then for each job navigate (wait for network idle),
    size the viewport, capture and verify; finally stop everything.

    IDLE → SERVER_STARTED → (NAVIGATING → SIZING → CAPTURING)* →
    SERVER_STOPPED → DONE, with FAILED reachable from any step.

Key Classes:
    - RenderOrchestrator: Single-use capture runner
    - RenderState: State machine states
    - CaptureError: Captured image missing or the wrong size

Dependencies:
    - PIL: Verify captured PNG dimensions
    - render.surface: RenderSurface
    - render.server: ContentServer

Used By:
    - controller: Capture step of the pipeline

Notes:
    Not re-entrant. Two runs writing the same output directory at once are
    not supported; the controller guards against that with a file lock.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from .jobs import RenderJob
from .server import ContentServer
from .surface import DEFAULT_NAVIGATION_TIMEOUT_MS, RenderSurface

logger = logging.getLogger(__name__)


class RenderState(Enum):
    IDLE = "idle"
    SERVER_STARTED = "server_started"
    NAVIGATING = "navigating"
    SIZING = "sizing"
    CAPTURING = "capturing"
    SERVER_STOPPED = "server_stopped"
    DONE = "done"
    FAILED = "failed"


class CaptureError(Exception):
    """Captured image is missing, unreadable or the wrong size."""
    pass


def verify_capture(job: RenderJob) -> None:
    """
    Check the PNG written for a job matches its viewport exactly.

    Raises:
        CaptureError: If the file is missing, unreadable or mis-sized
    """
    if not job.destination.exists():
        raise CaptureError(f"{job.name}: nothing written to {job.destination}")
    try:
        with Image.open(job.destination) as image:
            size = image.size
    except (UnidentifiedImageError, OSError) as e:
        raise CaptureError(f"{job.name}: unreadable capture {job.destination}: {e}") from e

    if size != job.viewport:
        raise CaptureError(
            f"{job.name}: captured {size[0]}x{size[1]}, expected {job.width}x{job.height}"
        )


class RenderOrchestrator:
    """
    Run a capture job list against one server and one surface.

    The orchestrator owns both resources for the duration of `run()` and
    releases them on every exit path.

    Example:
        >>> orchestrator = RenderOrchestrator(server, PlaywrightSurface())
        >>> captured = orchestrator.run(jobs)
    """

    def __init__(
        self,
        server: ContentServer,
        surface: RenderSurface,
        *,
        timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        progress: Optional[Callable[[RenderJob], None]] = None,
    ) -> None:
        self.server = server
        self.surface = surface
        self.timeout_ms = timeout_ms
        self.progress = progress
        self.state = RenderState.IDLE
        self.history: List[RenderState] = [RenderState.IDLE]
        self.captured: List[Path] = []

    def _enter(self, state: RenderState) -> None:
        self.state = state
        self.history.append(state)

    def run(self, jobs: Iterable[RenderJob]) -> tuple[Path, ...]:
        """
        Execute every job once, in order.

        Returns:
            Captured file paths, in job order

        Raises:
            ValueError: If two jobs write the same file
            RuntimeError: If this orchestrator has already run
            SurfaceError, NavigationTimeout, CaptureError, ServerError:
                First failure; resources are released before it propagates
        """
        if self.state is not RenderState.IDLE:
            raise RuntimeError(f"Orchestrator already used (state: {self.state.value})")

        jobs = tuple(jobs)
        destinations = [job.destination for job in jobs]
        if len(set(destinations)) != len(destinations):
            raise ValueError("Render jobs must write distinct files")

        try:
            self.server.start()
            self._enter(RenderState.SERVER_STARTED)
            try:
                with self.surface:
                    for job in jobs:
                        self._run_job(job)
            finally:
                self.server.stop()
                self._enter(RenderState.SERVER_STOPPED)
        except Exception:
            self._enter(RenderState.FAILED)
            raise

        self._enter(RenderState.DONE)
        logger.info(f"Captured {len(self.captured)} images")
        return tuple(self.captured)

    def _run_job(self, job: RenderJob) -> None:
        self._enter(RenderState.NAVIGATING)
        self.surface.navigate(self.server.url(job.path), timeout_ms=self.timeout_ms)

        self._enter(RenderState.SIZING)
        self.surface.set_viewport(job.width, job.height)

        self._enter(RenderState.CAPTURING)
        if self.progress is not None:
            self.progress(job)
        job.destination.parent.mkdir(parents=True, exist_ok=True)
        self.surface.capture(job.destination, omit_background=job.omit_background)
        verify_capture(job)

        self.captured.append(job.destination)
