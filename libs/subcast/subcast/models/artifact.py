"""Media artifact model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path


class ArtifactKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class MediaArtifact:
    """A file produced by one stage and consumed by a later one (or the streamer)."""

    path: Path
    kind: ArtifactKind
    container: str | None = None  # e.g. "wav", "srt", "mp4"
    codec: str | None = None  # e.g. "pcm_s16le", "h264"
    created_at: datetime = field(default_factory=_utcnow)

    def exists(self) -> bool:
        return self.path.exists()

    def size_bytes(self) -> int:
        return int(self.path.stat().st_size)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "path": str(self.path),
            "kind": self.kind.value,
            "container": self.container,
            "codec": self.codec,
            "created_at": self.created_at.isoformat(),
        }
