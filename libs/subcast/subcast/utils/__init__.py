"""Utility helpers."""

from subcast.utils.ffmpeg import escape_filter_path, resolve_ffmpeg_bin, subtitles_filter
from subcast.utils.fs import remove_quietly, unique_token
from subcast.utils.subprocess import RunResult, run_subprocess

__all__ = [
    "RunResult",
    "escape_filter_path",
    "remove_quietly",
    "resolve_ffmpeg_bin",
    "run_subprocess",
    "subtitles_filter",
    "unique_token",
]
