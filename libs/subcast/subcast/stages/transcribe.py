"""Transcription stage."""

from __future__ import annotations

import logging
from typing import cast

from subcast.exceptions import TranscriptionFailedError
from subcast.models.job import PipelineJob, StageName, TranscriptQuality
from subcast.pipeline.context import PipelineContext
from subcast.stages.base import Stage
from subcast.utils.fs import is_non_empty_file

logger = logging.getLogger(__name__)


class TranscribeStage(Stage):
    name = StageName.TRANSCRIBE

    def validate_input(self, context: PipelineContext) -> bool:
        return bool(context.get("job_id")) and bool(context.get("audio_path"))

    async def execute(
        self,
        context: PipelineContext,
        job: PipelineJob,
    ) -> PipelineContext:
        audio_path = str(context["audio_path"])
        logger.info("transcribe start (job_id=%s, audio=%s)", job.id, audio_path)

        result = await self.media_tool.transcribe(audio_path, str(self.layout.subtitles_dir))
        job.track(result.artifact)
        job.transcript_quality = result.quality

        if not is_non_empty_file(result.artifact.path):
            raise TranscriptionFailedError(
                f"generated subtitle file is missing or empty: {result.artifact.path}"
            )
        if result.quality == TranscriptQuality.DEGRADED:
            logger.warning(
                "transcribe produced a degraded subtitle (job_id=%s, path=%s)",
                job.id,
                result.artifact.path,
            )

        context = cast(PipelineContext, dict(context))
        context["subtitle_path"] = str(result.artifact.path)
        context["transcript_quality"] = result.quality.value
        logger.info("transcribe done (job_id=%s, subtitle=%s)", job.id, result.artifact.path)
        return context
