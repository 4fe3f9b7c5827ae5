"""Media tools backing the pipeline stages."""

from subcast.providers.media.base import (
    MediaTool,
    ProcessRunner,
    TranscriptResult,
    TranscriptSource,
)

__all__ = ["MediaTool", "ProcessRunner", "TranscriptResult", "TranscriptSource"]
