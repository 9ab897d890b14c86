"""
Module: output

Purpose:
    Packaging for the render pipeline: the Board18 manifest JSON and the
    final zip archive.

Key Functions:
    - build_manifest(): Manifest dict from layouts and trays
    - write_manifest(): Write manifest JSON once
    - write_archive(): Zip the package directory atomically

Dependencies:
    - json, zipfile (std)

Used By:
    - controller: Packaging step
"""

from .manifest import (
    build_manifest,
    write_manifest,
    dumps_manifest,
    board_section,
    market_section,
    link_section,
    ManifestError,
)
from .zip_writer import write_archive, ArchiveError

__all__ = [
    "build_manifest",
    "write_manifest",
    "dumps_manifest",
    "board_section",
    "market_section",
    "link_section",
    "ManifestError",
    "write_archive",
    "ArchiveError",
]
