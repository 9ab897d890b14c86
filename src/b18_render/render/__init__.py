"""
Module: render

Purpose:
    Capture side of the pipeline: a local content server, a headless
    rendering surface, the planned capture jobs and the orchestrator
    that runs them.

Key Classes:
    - ContentServer: Local site server
    - RenderSurface, PlaywrightSurface: Rendering surface
    - RenderJob: One capture
    - RenderOrchestrator: Capture runner

Dependencies:
    - fastapi, uvicorn: Content server
    - playwright: Headless Chromium
    - PIL: Capture verification

Used By:
    - controller
"""

from .surface import (
    RenderSurface,
    PlaywrightSurface,
    SurfaceError,
    NavigationTimeout,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
)
from .server import ContentServer, ServerError, create_site_app, DEFAULT_PORT
from .jobs import (
    RenderJob,
    plan_render_jobs,
    map_viewport,
    market_viewport,
    tile_viewport,
)
from .orchestrator import RenderOrchestrator, RenderState, CaptureError, verify_capture

__all__ = [
    # Surface
    "RenderSurface",
    "PlaywrightSurface",
    "SurfaceError",
    "NavigationTimeout",
    "DEFAULT_NAVIGATION_TIMEOUT_MS",
    # Server
    "ContentServer",
    "ServerError",
    "create_site_app",
    "DEFAULT_PORT",
    # Jobs
    "RenderJob",
    "plan_render_jobs",
    "map_viewport",
    "market_viewport",
    "tile_viewport",
    # Orchestrator
    "RenderOrchestrator",
    "RenderState",
    "CaptureError",
    "verify_capture",
]
