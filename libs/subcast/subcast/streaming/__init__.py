"""Byte-range streaming."""

from subcast.streaming.range import (
    ByteRange,
    RangeStreamer,
    StreamRequest,
    StreamResponse,
    iter_file,
    parse_range_header,
)

__all__ = [
    "ByteRange",
    "RangeStreamer",
    "StreamRequest",
    "StreamResponse",
    "iter_file",
    "parse_range_header",
]
