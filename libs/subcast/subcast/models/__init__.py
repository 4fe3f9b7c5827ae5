"""Core data models for SubCast."""

from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.models.job import JobStatus, PipelineJob, StageName, TranscriptQuality
from subcast.models.subtitle import SubtitleCue, SubtitleDocument

__all__ = [
    "ArtifactKind",
    "JobStatus",
    "MediaArtifact",
    "PipelineJob",
    "StageName",
    "SubtitleCue",
    "SubtitleDocument",
    "TranscriptQuality",
]
