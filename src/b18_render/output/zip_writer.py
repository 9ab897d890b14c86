"""
Module: output.zip_writer

Purpose:
    Package a rendered game directory into a single Board18 zip archive.

Key Functions:
    - write_archive(): Main entry point

Dependencies:
    - zipfile (std)

Used By:
    - controller: Final packaging step
"""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Archive could not be written."""
    pass


def write_archive(
    source_dir: Path,
    archive_path: Path,
    *,
    extra_files: Optional[Mapping[str, Path]] = None,
) -> Path:
    """
    Zip a directory, keeping its name as the archive's root folder.

    Creates a ZIP file with structure:
        board18-1830-1.0.zip
        └── board18-1830-1.0/         # source_dir name
            ├── 1830-1.0/
            │   ├── Map.png
            │   ├── Market.png
            │   ├── Tokens.png
            │   └── Yellow.png
            └── 1830-1.0.json         # from extra_files

    The archive is written to a temporary file next to `archive_path` and
    moved into place only when complete, so a failure never leaves a
    truncated archive at the final path.

    Args:
        source_dir: Directory to package
        archive_path: Destination .zip
        extra_files: Archive name -> file on disk, added after the directory

    Returns:
        Path to the written archive

    Raises:
        ArchiveError: If the source is missing or writing fails
    """
    if not source_dir.is_dir():
        raise ArchiveError(f"Nothing to archive, {source_dir} is not a directory")

    archive_path.parent.mkdir(parents=True, exist_ok=True)
    root = source_dir.name

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{archive_path.name}.",
        suffix=".tmp",
        dir=archive_path.parent,
    )
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        with zipfile.ZipFile(tmp_path, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            for path in sorted(source_dir.rglob("*")):
                arcname = f"{root}/{path.relative_to(source_dir).as_posix()}"
                if path.is_dir():
                    zf.write(path, arcname + "/")
                else:
                    zf.write(path, arcname)

            for arcname, path in (extra_files or {}).items():
                zf.write(path, arcname)

        os.replace(tmp_path, archive_path)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"Failed to write archive {archive_path}: {e}") from e
    finally:
        # Gone after a successful replace; a leftover partial file otherwise
        tmp_path.unlink(missing_ok=True)

    logger.debug(f"Wrote archive {archive_path}")
    return archive_path
