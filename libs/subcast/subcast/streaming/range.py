"""HTTP byte-range serving for finished videos."""

from __future__ import annotations

import logging
import mimetypes
import re
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path

import anyio

from subcast.exceptions import ArtifactNotFoundError, RangeNotSatisfiableError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_CONTENT_TYPE = "video/mp4"

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte span `[start, end]`."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, size: int) -> str:
        return f"bytes {self.start}-{self.end}/{size}"


def parse_range_header(header: str, size: int) -> ByteRange:
    """Parse a single `bytes=` range against a resource of `size` bytes.

    Accepts `bytes=start-end`, `bytes=start-` and the suffix form `bytes=-N`.
    Anything else, including multiple ranges, raises `RangeNotSatisfiableError`.
    """
    m = _RANGE_RE.match(str(header or ""))
    if m is None:
        raise RangeNotSatisfiableError(header, size)
    raw_start, raw_end = m.group(1), m.group(2)

    if not raw_start:
        if not raw_end:
            raise RangeNotSatisfiableError(header, size)
        suffix = int(raw_end)
        if suffix <= 0 or size <= 0:
            raise RangeNotSatisfiableError(header, size)
        return ByteRange(start=max(0, size - suffix), end=size - 1)

    start = int(raw_start)
    end = int(raw_end) if raw_end else size - 1
    if start < 0 or start > end or end >= size:
        raise RangeNotSatisfiableError(header, size)
    return ByteRange(start=start, end=end)


@dataclass(frozen=True)
class StreamRequest:
    path: Path
    range_header: str | None = None


@dataclass
class StreamResponse:
    status_code: int
    headers: dict[str, str]
    size: int
    byte_range: ByteRange | None
    body: AsyncIterator[bytes] = field(repr=False)

    @property
    def media_type(self) -> str:
        return self.headers.get("Content-Type", DEFAULT_CONTENT_TYPE)


async def iter_file(
    path: Path, *, offset: int, length: int, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """Yield `length` bytes of `path` starting at `offset`, one bounded chunk at a time."""
    remaining = int(length)
    async with await anyio.open_file(path, "rb") as f:
        if offset:
            await f.seek(offset)
        while remaining > 0:
            chunk = await f.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk


def guess_content_type(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or DEFAULT_CONTENT_TYPE


class RangeStreamer:
    """Builds 200/206 responses over a file on disk.

    Each response gets its own file handle, so concurrent streams of the same
    artifact never share a read cursor.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = int(chunk_size)

    def open(self, request: StreamRequest) -> StreamResponse:
        path = Path(request.path)
        try:
            if not path.is_file():
                raise ArtifactNotFoundError(f"video not found: {path.name}")
            size = int(path.stat().st_size)
        except OSError as exc:
            raise ArtifactNotFoundError(f"video not found: {path.name}") from exc

        headers = {
            "Content-Type": guess_content_type(path),
            "Accept-Ranges": "bytes",
        }

        if not request.range_header:
            headers["Content-Length"] = str(size)
            return StreamResponse(
                status_code=200,
                headers=headers,
                size=size,
                byte_range=None,
                body=iter_file(path, offset=0, length=size, chunk_size=self.chunk_size),
            )

        byte_range = parse_range_header(request.range_header, size)
        headers["Content-Range"] = byte_range.content_range(size)
        headers["Content-Length"] = str(byte_range.length)
        logger.debug(
            "stream range (path=%s, range=%s-%s, size=%s)",
            path.name,
            byte_range.start,
            byte_range.end,
            size,
        )
        return StreamResponse(
            status_code=206,
            headers=headers,
            size=size,
            byte_range=byte_range,
            body=iter_file(
                path,
                offset=byte_range.start,
                length=byte_range.length,
                chunk_size=self.chunk_size,
            ),
        )
