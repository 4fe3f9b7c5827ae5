"""FFmpeg binary resolution and filter-expression helpers.

Prefer system `ffmpeg`, fallback to `imageio-ffmpeg` bundled binary.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve_ffmpeg_bin(ffmpeg_bin: str = "ffmpeg") -> str:
    ffmpeg_bin = (ffmpeg_bin or "ffmpeg").strip()

    if Path(ffmpeg_bin).exists():
        return ffmpeg_bin

    found = shutil.which(ffmpeg_bin)
    if found:
        return found

    try:
        import imageio_ffmpeg

        return str(imageio_ffmpeg.get_ffmpeg_exe())
    except Exception as exc:
        logger.warning("failed to resolve bundled ffmpeg (%s); fallback to %r", exc, ffmpeg_bin)
        return ffmpeg_bin


def resolve_executable(name: str) -> str:
    """Resolve an executable via PATH, keeping the bare name when not found.

    A missing binary then surfaces as a spawn failure at first use.
    """
    name = (name or "").strip()
    if Path(name).exists():
        return name
    return shutil.which(name) or name


def escape_filter_path(path: str | Path) -> str:
    """Escape a filesystem path for use inside a quoted filter option value.

    Separators are normalized to `/`; `:` and `'` are backslash-escaped so the
    filter parser does not read them as option separators or quote ends.
    """
    normalized = str(path).replace("\\", "/")
    return normalized.replace(":", "\\:").replace("'", "\\'")


def subtitles_filter(subtitle_path: str | Path, force_style: str | None = None) -> str:
    """Build the `subtitles` video filter expression for a burn-in pass."""
    inner = escape_filter_path(subtitle_path)
    if force_style:
        inner = f"{inner}:force_style={force_style}"
    return f"subtitles='{inner}'"
