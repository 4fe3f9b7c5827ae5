"""Job orchestrator (extract audio, transcribe, burn subtitles)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import anyio

from subcast.config import Settings
from subcast.error_codes import ErrorCode
from subcast.exceptions import ConfigurationError, StageExecutionError, SubCastError
from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.models.job import JobStatus, PipelineJob, StageName, TranscriptQuality
from subcast.pipeline.context import PipelineContext, ProgressReporter
from subcast.providers.media.base import MediaTool
from subcast.stages import BurnSubtitlesStage, ExtractAudioStage, Stage, TranscribeStage
from subcast.storage.layout import StorageLayout
from subcast.utils.fs import remove_quietly

logger = logging.getLogger(__name__)


_STAGE_ORDER: list[StageName] = [
    StageName.EXTRACT_AUDIO,
    StageName.TRANSCRIBE,
    StageName.BURN_SUBTITLES,
]

_STAGE_ERROR_CODES: dict[StageName, ErrorCode] = {
    StageName.EXTRACT_AUDIO: ErrorCode.EXTRACTION_FAILED,
    StageName.TRANSCRIBE: ErrorCode.TRANSCRIPTION_FAILED,
    StageName.BURN_SUBTITLES: ErrorCode.BURN_FAILED,
}


@dataclass(frozen=True)
class PipelineResult:
    job_id: str
    video_path: Path
    subtitle_text: str
    transcript_quality: TranscriptQuality


class PipelineOrchestrator:
    """Runs one job through every stage and owns the cleanup of its artifacts."""

    def __init__(
        self,
        settings: Settings,
        media_tool: MediaTool,
        *,
        layout: StorageLayout | None = None,
    ) -> None:
        self.settings = settings
        self.media_tool = media_tool
        self.layout = layout or StorageLayout(settings.storage_root).ensure()
        self.stages: list[Stage] = [
            ExtractAudioStage(media_tool, self.layout),
            TranscribeStage(media_tool, self.layout),
            BurnSubtitlesStage(media_tool, self.layout),
        ]

    @staticmethod
    def _infer_error_code(stage: StageName, exc: BaseException) -> ErrorCode:
        if isinstance(exc, SubCastError) and exc.error_code != ErrorCode.UNKNOWN:
            return exc.error_code
        return _STAGE_ERROR_CODES.get(stage, ErrorCode.UNKNOWN)

    def create_job(self, input_video: str | Path) -> PipelineJob:
        job_id = uuid4().hex
        work_dir = self.layout.job_work_dir(job_id)
        work_dir.mkdir(parents=True, exist_ok=True)
        return PipelineJob(id=job_id, input_video=Path(input_video), work_dir=work_dir)

    def _cleanup(self, job: PipelineJob, *, keep: MediaArtifact | None = None) -> None:
        for artifact in job.transient_artifacts(keep=keep):
            err = remove_quietly(artifact.path)
            if err is not None:
                job.cleanup_errors.append(f"{artifact.path}: {err}")
        err = remove_quietly(job.work_dir)
        if err is not None:
            job.cleanup_errors.append(f"{job.work_dir}: {err}")

    async def _report(
        self, progress_reporter: ProgressReporter | None, progress: int, message: str
    ) -> None:
        if progress_reporter is None:
            return
        try:
            await progress_reporter.report(progress, message)
        except Exception:
            logger.warning("progress report failed (message=%s)", message, exc_info=True)

    async def run(
        self,
        job: PipelineJob,
        progress_reporter: ProgressReporter | None = None,
    ) -> PipelineResult:
        ctx: PipelineContext = {
            "job_id": job.id,
            "video_path": str(job.input_video),
            "work_dir": str(job.work_dir),
        }
        job.status = JobStatus.RUNNING
        total = len(self.stages)

        for i, stage in enumerate(self.stages):
            job.current_stage = stage.name
            await self._report(
                progress_reporter, int(i * 100 / total), f"{stage.name.value} running"
            )
            try:
                if not stage.validate_input(ctx):
                    raise ConfigurationError(f"missing inputs for stage {stage.name.value}")
                logger.info("stage start (job_id=%s, stage=%s)", job.id, stage.name.value)
                ctx = await stage.execute(ctx, job)
                logger.info("stage done (job_id=%s, stage=%s)", job.id, stage.name.value)
            except asyncio.CancelledError:
                logger.warning("job cancelled (job_id=%s, stage=%s)", job.id, stage.name.value)
                job.status = JobStatus.CANCELLED
                self._cleanup(job)
                raise
            except Exception as exc:
                logger.exception("stage failed (job_id=%s, stage=%s)", job.id, stage.name.value)
                error_code = self._infer_error_code(stage.name, exc)
                job.status = JobStatus.FAILED
                job.failed_stage = stage.name
                job.error = str(exc)
                job.completed_at = datetime.now(tz=timezone.utc)
                self._cleanup(job)
                raise StageExecutionError(
                    stage.name.value,
                    str(exc),
                    job_id=job.id,
                    error_code=error_code,
                ) from exc

        return await self._finish(job, progress_reporter)

    async def _finish(
        self, job: PipelineJob, progress_reporter: ProgressReporter | None
    ) -> PipelineResult:
        final_video = job.latest(ArtifactKind.VIDEO)
        subtitle = job.latest(ArtifactKind.SUBTITLE)
        if final_video is None or subtitle is None:  # pragma: no cover
            self._cleanup(job)
            raise StageExecutionError(
                StageName.BURN_SUBTITLES.value,
                "pipeline finished without a video and subtitle",
                job_id=job.id,
                error_code=ErrorCode.OUTPUT_MISSING,
            )

        try:
            subtitle_text = await anyio.Path(subtitle.path).read_text(
                encoding="utf-8-sig", errors="replace"
            )
        except asyncio.CancelledError:
            job.status = JobStatus.CANCELLED
            self._cleanup(job)
            raise
        except OSError as exc:
            job.status = JobStatus.FAILED
            job.failed_stage = StageName.TRANSCRIBE
            job.error = str(exc)
            self._cleanup(job)
            raise StageExecutionError(
                StageName.TRANSCRIBE.value,
                f"failed to read subtitle: {exc}",
                job_id=job.id,
                error_code=ErrorCode.TRANSCRIPTION_FAILED,
            ) from exc

        self._cleanup(job, keep=final_video)
        if self.settings.pipeline.delete_input_on_success:
            err = remove_quietly(job.input_video)
            if err is not None:
                job.cleanup_errors.append(f"{job.input_video}: {err}")

        job.status = JobStatus.COMPLETED
        job.current_stage = None
        job.completed_at = datetime.now(tz=timezone.utc)
        quality = job.transcript_quality or TranscriptQuality.FULL
        await self._report(progress_reporter, 100, "completed")
        logger.info(
            "job completed (job_id=%s, video=%s, quality=%s, cleanup_errors=%d)",
            job.id,
            final_video.path,
            quality.value,
            len(job.cleanup_errors),
        )
        return PipelineResult(
            job_id=job.id,
            video_path=final_video.path,
            subtitle_text=subtitle_text,
            transcript_quality=quality,
        )
