"""Stage abstractions for pipeline execution."""

from __future__ import annotations

from abc import ABC, abstractmethod

from subcast.models.job import PipelineJob, StageName
from subcast.pipeline.context import PipelineContext
from subcast.providers.media.base import MediaTool
from subcast.storage.layout import StorageLayout


class Stage(ABC):
    """Pipeline stage. Every artifact a stage creates is tracked on the job."""

    name: StageName

    def __init__(self, media_tool: MediaTool, layout: StorageLayout) -> None:
        self.media_tool = media_tool
        self.layout = layout

    @abstractmethod
    async def execute(
        self,
        context: PipelineContext,
        job: PipelineJob,
    ) -> PipelineContext:
        """Run the stage and return the updated context."""

    @abstractmethod
    def validate_input(self, context: PipelineContext) -> bool:
        """Check the context carries this stage's inputs."""
