"""Provider factory and registry."""

from __future__ import annotations

from typing import Any
from collections.abc import Mapping

from subcast.config import Settings
from subcast.exceptions import ConfigurationError
from subcast.providers.media.base import MediaTool, ProcessRunner


def get_media_tool(
    settings: Settings,
    *,
    provider: str | None = None,
    runner: ProcessRunner | None = None,
) -> MediaTool:
    """Get the media tool selected by `pipeline.media_provider`."""
    provider_type = str(provider or settings.pipeline.media_provider or "").strip().lower()

    match provider_type:
        case "ffmpeg_whisper" | "default":
            from subcast.providers.media.default import FFmpegWhisperMediaTool

            ffmpeg: Mapping[str, Any] = settings.ffmpeg.model_dump()
            whisper: Mapping[str, Any] = settings.whisper.model_dump()
            return FFmpegWhisperMediaTool(
                ffmpeg_bin=str(ffmpeg.get("bin") or "ffmpeg"),
                preset=str(ffmpeg.get("preset") or "fast"),
                crf=int(ffmpeg.get("crf", 23)),
                force_style=ffmpeg.get("force_style") or None,
                convert_extensions=list(ffmpeg.get("convert_extensions") or []),
                ffmpeg_timeout_s=ffmpeg.get("timeout_s"),
                whisper_bin=str(whisper.get("bin") or "whisper"),
                whisper_model=str(whisper.get("model") or "base"),
                language=str(whisper.get("language") or "en"),
                fallback_cue_duration_s=float(whisper.get("fallback_cue_duration_s", 30.0)),
                whisper_timeout_s=whisper.get("timeout_s"),
                runner=runner,
            )
        case _:
            raise ConfigurationError(f"Unknown media provider: {provider_type}")
