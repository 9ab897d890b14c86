"""
Module: common.file_locking

Purpose:
    Cross-platform exclusive lock guarding a game's render directory so two
    runs for the same game cannot interleave writes.

Key Functions:
    - exclusive_lock: Context manager, fails fast when already held

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - controller: Held for the whole render of one game
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import portalocker

logger = logging.getLogger(__name__)


class LockHeldError(Exception):
    """Another process holds the lock."""
    pass


@contextmanager
def exclusive_lock(path: Path) -> Generator[Path, None, None]:
    """
    Hold an exclusive, non-blocking lock on `path` for the block's duration.

    The lock file is created if needed and left in place afterwards.

    Raises:
        LockHeldError: If another process already holds the lock

    Example:
        >>> with exclusive_lock(Path("render/1830/.render.lock")):
        ...     render()
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "a", encoding="utf-8") as f:
        try:
            portalocker.lock(f, portalocker.LOCK_EX | portalocker.LOCK_NB)
        except portalocker.exceptions.LockException as e:
            raise LockHeldError(f"{path} is locked by another run") from e
        logger.debug(f"Acquired {path.name}")
        try:
            yield path
        finally:
            portalocker.unlock(f)
