"""Filesystem helpers for transient pipeline files."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger(__name__)


def unique_token() -> str:
    """Millisecond timestamp plus a short random suffix."""
    return f"{int(time.time() * 1000)}-{uuid4().hex[:6]}"


def remove_path(path: str | Path) -> None:
    """Remove a file or directory tree; missing paths are ignored."""
    p = Path(path)
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink(missing_ok=True)


def remove_quietly(path: str | Path | None) -> OSError | None:
    """Best-effort removal. Failures are logged and returned, never raised."""
    if path is None:
        return None
    try:
        remove_path(path)
    except OSError as exc:
        logger.warning("cleanup failed (path=%s): %s", path, exc)
        return exc
    return None


def is_non_empty_file(path: str | Path) -> bool:
    p = Path(path)
    try:
        return p.is_file() and p.stat().st_size > 0
    except OSError:
        return False
