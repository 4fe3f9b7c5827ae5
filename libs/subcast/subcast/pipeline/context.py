"""Pipeline context typing.

The pipeline passes a context dict between stages. This module defines the
stable, known keys.
"""

from __future__ import annotations

from typing import Protocol, TypedDict


class ProgressReporter(Protocol):
    async def report(self, progress: int, message: str) -> None: ...


class PipelineContext(TypedDict, total=False):
    job_id: str
    video_path: str
    work_dir: str

    audio_path: str
    subtitle_path: str
    transcript_quality: str

    result_path: str
