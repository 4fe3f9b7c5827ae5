"""Audio extraction stage."""

from __future__ import annotations

import logging
from typing import cast

from subcast.models.job import PipelineJob, StageName
from subcast.pipeline.context import PipelineContext
from subcast.stages.base import Stage

logger = logging.getLogger(__name__)


class ExtractAudioStage(Stage):
    name = StageName.EXTRACT_AUDIO

    def validate_input(self, context: PipelineContext) -> bool:
        return bool(context.get("job_id")) and bool(context.get("video_path"))

    async def execute(
        self,
        context: PipelineContext,
        job: PipelineJob,
    ) -> PipelineContext:
        video_path = str(context["video_path"])
        logger.info("extract_audio start (job_id=%s, video=%s)", job.id, video_path)

        artifact = await self.media_tool.extract_audio(video_path, str(self.layout.audios_dir))
        job.track(artifact)

        context = cast(PipelineContext, dict(context))
        context["audio_path"] = str(artifact.path)
        logger.info("extract_audio done (job_id=%s, audio=%s)", job.id, artifact.path)
        return context
