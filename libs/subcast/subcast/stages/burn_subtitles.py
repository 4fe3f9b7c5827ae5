"""Subtitle burn-in stage."""

from __future__ import annotations

import logging
from typing import cast

from subcast.models.job import PipelineJob, StageName
from subcast.pipeline.context import PipelineContext
from subcast.stages.base import Stage

logger = logging.getLogger(__name__)


class BurnSubtitlesStage(Stage):
    name = StageName.BURN_SUBTITLES

    def validate_input(self, context: PipelineContext) -> bool:
        return (
            bool(context.get("job_id"))
            and bool(context.get("video_path"))
            and bool(context.get("subtitle_path"))
        )

    async def execute(
        self,
        context: PipelineContext,
        job: PipelineJob,
    ) -> PipelineContext:
        video_path = str(context["video_path"])
        subtitle_path = str(context["subtitle_path"])
        logger.info(
            "burn_subtitles start (job_id=%s, video=%s, subtitle=%s)",
            job.id,
            video_path,
            subtitle_path,
        )

        artifact = await self.media_tool.burn_subtitles(
            video_path,
            subtitle_path,
            str(self.layout.videos_dir),
            temp_root=str(job.work_dir),
        )
        job.track(artifact)

        context = cast(PipelineContext, dict(context))
        context["result_path"] = str(artifact.path)
        logger.info("burn_subtitles done (job_id=%s, output=%s)", job.id, artifact.path)
        return context
