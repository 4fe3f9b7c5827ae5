"""Default media tool implementation (FFmpeg + Whisper CLI)."""

from __future__ import annotations

from collections.abc import Iterable

from subcast.models.artifact import MediaArtifact
from subcast.providers.media.base import MediaTool, ProcessRunner, TranscriptResult
from subcast.providers.media.ffmpeg import FFmpegProvider
from subcast.providers.media.whisper import WhisperProvider


class FFmpegWhisperMediaTool(MediaTool):
    def __init__(
        self,
        *,
        ffmpeg_bin: str = "ffmpeg",
        preset: str = "fast",
        crf: int = 23,
        force_style: str | None = None,
        convert_extensions: Iterable[str] = (".webm",),
        ffmpeg_timeout_s: float | None = None,
        whisper_bin: str = "whisper",
        whisper_model: str = "base",
        language: str = "en",
        fallback_cue_duration_s: float = 30.0,
        whisper_timeout_s: float | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._ffmpeg = FFmpegProvider(
            ffmpeg_bin=ffmpeg_bin,
            preset=preset,
            crf=crf,
            force_style=force_style,
            convert_extensions=convert_extensions,
            timeout_s=ffmpeg_timeout_s,
            runner=runner,
        )
        self._whisper = WhisperProvider(
            self._ffmpeg,
            whisper_bin=whisper_bin,
            model=whisper_model,
            language=language,
            fallback_cue_duration_s=fallback_cue_duration_s,
            timeout_s=whisper_timeout_s,
            runner=runner,
        )

    async def extract_audio(self, video_path: str, output_dir: str) -> MediaArtifact:
        return await self._ffmpeg.extract_audio(str(video_path), str(output_dir))

    async def transcribe(self, audio_path: str, output_dir: str) -> TranscriptResult:
        return await self._whisper.transcribe(str(audio_path), str(output_dir))

    async def burn_subtitles(
        self,
        video_path: str,
        subtitle_path: str,
        output_dir: str,
        *,
        temp_root: str | None = None,
    ) -> MediaArtifact:
        return await self._ffmpeg.burn_subtitles(
            str(video_path), str(subtitle_path), str(output_dir), temp_root=temp_root
        )
