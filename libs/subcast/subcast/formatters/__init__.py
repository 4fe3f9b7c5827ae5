"""Subtitle formatters."""

from subcast.formatters.srt import (
    format_srt,
    format_srt_timestamp,
    parse_srt,
    parse_srt_timestamp,
    strip_inline_timestamps,
)

__all__ = [
    "format_srt",
    "format_srt_timestamp",
    "parse_srt",
    "parse_srt_timestamp",
    "strip_inline_timestamps",
]
