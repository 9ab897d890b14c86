"""Common utilities shared across the renderer."""

from __future__ import annotations

from .path_utils import RenderPaths, capitalize, color_filename

__all__ = [
    "RenderPaths",
    "capitalize",
    "color_filename",
]
