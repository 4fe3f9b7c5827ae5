"""Pipeline job model (one upload's run through the pipeline)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from subcast.models.artifact import ArtifactKind, MediaArtifact


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class StageName(str, Enum):
    EXTRACT_AUDIO = "extract_audio"
    TRANSCRIBE = "transcribe"
    BURN_SUBTITLES = "burn_subtitles"


class TranscriptQuality(str, Enum):
    FULL = "full"
    DEGRADED = "degraded"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class PipelineJob:
    id: str
    input_video: Path
    work_dir: Path
    artifacts: list[MediaArtifact] = field(default_factory=list)
    status: JobStatus = JobStatus.PENDING
    current_stage: StageName | None = None
    failed_stage: StageName | None = None
    error: str | None = None
    transcript_quality: TranscriptQuality | None = None
    cleanup_errors: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None

    def track(self, artifact: MediaArtifact) -> MediaArtifact:
        """Record an artifact produced by this job. The list is append-only."""
        self.artifacts.append(artifact)
        return artifact

    def latest(self, kind: ArtifactKind) -> MediaArtifact | None:
        for artifact in reversed(self.artifacts):
            if artifact.kind == kind:
                return artifact
        return None

    def transient_artifacts(self, keep: MediaArtifact | None = None) -> list[MediaArtifact]:
        return [a for a in self.artifacts if keep is None or a.path != keep.path]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "input_video": str(self.input_video),
            "work_dir": str(self.work_dir),
            "artifacts": [a.to_dict() for a in self.artifacts],
            "status": self.status.value,
            "current_stage": self.current_stage.value if self.current_stage else None,
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "error": self.error,
            "transcript_quality": (
                self.transcript_quality.value if self.transcript_quality else None
            ),
            "cleanup_errors": list(self.cleanup_errors),
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
