"""SubRip (SRT) serialization and parsing."""

from __future__ import annotations

import re

from subcast.exceptions import SubtitleFormatError
from subcast.models.subtitle import SubtitleCue, SubtitleDocument

_TIMESTAMP_RE = re.compile(r"^(\d{1,3}):([0-5]\d):([0-5]\d)[,.](\d{1,3})$")
_TIMING_RE = re.compile(r"^\s*(\S+)\s*-->\s*(\S+)")
_BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n")
_INLINE_TIMESTAMP_RE = re.compile(r"\[\d+:\d+(?::\d+)?\.\d+ --> \d+:\d+(?::\d+)?\.\d+\]")


def format_srt_timestamp(seconds: float) -> str:
    if seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    ms = total_ms % 1000
    total_s = total_ms // 1000
    s = total_s % 60
    total_m = total_s // 60
    m = total_m % 60
    h = total_m // 60
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def parse_srt_timestamp(value: str) -> float:
    m = _TIMESTAMP_RE.match(value.strip())
    if m is None:
        raise SubtitleFormatError(f"invalid SRT timestamp: {value!r}")
    h, mi, s, frac = m.groups()
    ms = int(frac.ljust(3, "0"))
    return int(h) * 3600 + int(mi) * 60 + int(s) + ms / 1000.0


def format_srt(document: SubtitleDocument) -> str:
    blocks: list[str] = []
    for cue in document.cues:
        blocks.append(
            f"{cue.index}\n"
            f"{format_srt_timestamp(cue.start)} --> {format_srt_timestamp(cue.end)}\n"
            f"{cue.text.strip()}\n\n"
        )
    return "".join(blocks)


def parse_srt(text: str) -> SubtitleDocument:
    """Parse SubRip text into a validated SubtitleDocument."""
    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n").strip()
    if not normalized:
        return SubtitleDocument()

    cues: list[SubtitleCue] = []
    for block in _BLOCK_SPLIT_RE.split(normalized):
        lines = block.strip("\n").split("\n")
        if len(lines) < 2:
            raise SubtitleFormatError(f"incomplete SRT block: {block!r}")
        try:
            index = int(lines[0].strip())
        except ValueError as exc:
            raise SubtitleFormatError(f"invalid SRT index: {lines[0]!r}") from exc
        timing = _TIMING_RE.match(lines[1])
        if timing is None:
            raise SubtitleFormatError(f"invalid SRT timing line: {lines[1]!r}")
        cues.append(
            SubtitleCue(
                index=index,
                start=parse_srt_timestamp(timing.group(1)),
                end=parse_srt_timestamp(timing.group(2)),
                text="\n".join(lines[2:]).strip(),
            )
        )
    return SubtitleDocument(cues=cues)


def strip_inline_timestamps(text: str) -> str:
    """Remove `[mm:ss.mmm --> mm:ss.mmm]` markers printed by whisper's verbose output."""
    cleaned = _INLINE_TIMESTAMP_RE.sub("", text)
    lines = [line.strip() for line in cleaned.splitlines()]
    return "\n".join(line for line in lines if line)
