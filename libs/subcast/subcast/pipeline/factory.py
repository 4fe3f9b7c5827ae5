"""Pipeline factories."""

from __future__ import annotations

from subcast.config import Settings
from subcast.pipeline.orchestrator import PipelineOrchestrator
from subcast.providers.media.base import MediaTool
from subcast.providers.registry import get_media_tool
from subcast.storage import get_storage_layout


def create_orchestrator(
    settings: Settings, media_tool: MediaTool | None = None
) -> PipelineOrchestrator:
    """Build the standard three-stage pipeline for the configured media provider."""
    tool = media_tool or get_media_tool(settings)
    return PipelineOrchestrator(settings, tool, layout=get_storage_layout(settings))
