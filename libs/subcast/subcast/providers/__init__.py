"""Provider abstractions for external tools."""

from subcast.providers.registry import get_media_tool

__all__ = ["get_media_tool"]
