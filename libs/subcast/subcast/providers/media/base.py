"""Media tool abstractions (one method per pipeline stage)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from subcast.models.artifact import MediaArtifact
from subcast.models.job import TranscriptQuality
from subcast.utils.subprocess import RunResult


class ProcessRunner(Protocol):
    def __call__(
        self,
        args: Sequence[str],
        *,
        timeout_s: float | None = None,
        check: bool = True,
    ) -> Awaitable[RunResult]: ...


class TranscriptSource(str, Enum):
    CANDIDATE_FILE = "candidate_file"
    SYNTHESIZED_FROM_STDOUT = "synthesized_from_stdout"


@dataclass(frozen=True)
class TranscriptResult:
    """Outcome of a transcription.

    `quality` is DEGRADED when the subtitle was synthesized from the
    recognizer's stdout instead of read from its output file.
    """

    artifact: MediaArtifact
    source: TranscriptSource
    candidate: Path | None = None

    @property
    def quality(self) -> TranscriptQuality:
        if self.source == TranscriptSource.SYNTHESIZED_FROM_STDOUT:
            return TranscriptQuality.DEGRADED
        return TranscriptQuality.FULL


class MediaTool(ABC):
    @abstractmethod
    async def extract_audio(self, video_path: str, output_dir: str) -> MediaArtifact:
        """Extract the audio track as mono 16 kHz 16-bit PCM WAV."""

    @abstractmethod
    async def transcribe(self, audio_path: str, output_dir: str) -> TranscriptResult:
        """Transcribe canonical WAV audio to a SubRip file."""

    @abstractmethod
    async def burn_subtitles(
        self,
        video_path: str,
        subtitle_path: str,
        output_dir: str,
        *,
        temp_root: str | None = None,
    ) -> MediaArtifact:
        """Re-encode the video with the subtitles composited into the frame."""

    async def close(self) -> None:  # pragma: no cover
        return None
