"""FFmpeg-based audio extraction, container conversion and subtitle burn-in."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterable
from pathlib import Path

from subcast.exceptions import (
    BurnFailedError,
    ContainerConversionFailedError,
    ExtractionFailedError,
    InputNotFoundError,
    OutputMissingOrEmptyError,
    ProcessFailedError,
)
from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.providers.media.base import ProcessRunner
from subcast.utils.ffmpeg import resolve_ffmpeg_bin, subtitles_filter
from subcast.utils.fs import is_non_empty_file, remove_quietly, unique_token
from subcast.utils.subprocess import run_subprocess

logger = logging.getLogger(__name__)

# Canonical transcription input: mono, 16 kHz, 16-bit linear PCM.
CANONICAL_SAMPLE_RATE = 16000
CANONICAL_CHANNELS = 1
CANONICAL_AUDIO_CODEC = "pcm_s16le"


def build_extract_audio_args(ffmpeg_bin: str, video_path: str, output_path: str) -> list[str]:
    return [
        ffmpeg_bin,
        "-y",
        "-i",
        video_path,
        "-vn",
        "-ac",
        str(CANONICAL_CHANNELS),
        "-ar",
        str(CANONICAL_SAMPLE_RATE),
        "-acodec",
        CANONICAL_AUDIO_CODEC,
        "-f",
        "wav",
        output_path,
    ]


def build_resample_args(ffmpeg_bin: str, audio_path: str, output_path: str) -> list[str]:
    return [
        ffmpeg_bin,
        "-y",
        "-i",
        audio_path,
        "-ar",
        str(CANONICAL_SAMPLE_RATE),
        "-ac",
        str(CANONICAL_CHANNELS),
        output_path,
    ]


def build_convert_args(
    ffmpeg_bin: str, video_path: str, output_path: str, *, preset: str = "fast"
) -> list[str]:
    return [
        ffmpeg_bin,
        "-i",
        video_path,
        "-c:v",
        "libx264",
        "-preset",
        preset,
        "-c:a",
        "aac",
        "-y",
        output_path,
    ]


def build_burn_args(
    ffmpeg_bin: str,
    video_path: str,
    subtitle_path: str,
    output_path: str,
    *,
    preset: str = "fast",
    crf: int = 23,
    force_style: str | None = None,
) -> list[str]:
    return [
        ffmpeg_bin,
        "-i",
        video_path.replace("\\", "/"),
        "-vf",
        subtitles_filter(subtitle_path, force_style),
        "-c:v",
        "libx264",
        "-preset",
        preset,
        "-crf",
        str(crf),
        "-c:a",
        "copy",
        "-movflags",
        "+faststart",
        "-y",
        output_path.replace("\\", "/"),
    ]


def _copy_subtitle_as_utf8(src: Path, dst: Path) -> None:
    # `utf-8-sig` drops a leading BOM; the burn filter chokes on it.
    content = src.read_text(encoding="utf-8-sig", errors="replace")
    dst.write_text(content, encoding="utf-8")


class FFmpegProvider:
    def __init__(
        self,
        ffmpeg_bin: str = "ffmpeg",
        *,
        preset: str = "fast",
        crf: int = 23,
        force_style: str | None = None,
        convert_extensions: Iterable[str] = (".webm",),
        timeout_s: float | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.ffmpeg_bin = resolve_ffmpeg_bin(ffmpeg_bin)
        self.preset = preset
        self.crf = int(crf)
        self.force_style = force_style
        self.convert_extensions = {str(e).lower() for e in convert_extensions}
        self.timeout_s = timeout_s
        self._runner: ProcessRunner = runner or run_subprocess

    async def _run(self, args: list[str]) -> None:
        await self._runner(args, timeout_s=self.timeout_s, check=True)

    async def extract_audio(self, video_path: str, output_dir: str) -> MediaArtifact:
        """Extract the audio track to `<stem>-<token>.wav` (16 kHz mono PCM)."""
        video = Path(video_path)
        if not video.exists():
            raise InputNotFoundError("video", str(video))
        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        audio_path = out_dir / f"{video.stem}-{unique_token()}.wav"
        args = build_extract_audio_args(self.ffmpeg_bin, str(video), str(audio_path))
        logger.info("extracting audio: %s", " ".join(args))
        try:
            await self._run(args)
        except ProcessFailedError as exc:
            remove_quietly(audio_path)
            raise ExtractionFailedError(f"audio extraction failed: {exc}", cause=exc) from exc
        except BaseException:
            remove_quietly(audio_path)
            raise

        if not audio_path.exists():
            raise ExtractionFailedError(f"audio extraction produced no file: {audio_path}")
        logger.info("audio extraction finished: %s", audio_path)
        return MediaArtifact(
            path=audio_path,
            kind=ArtifactKind.AUDIO,
            container="wav",
            codec=CANONICAL_AUDIO_CODEC,
        )

    async def resample_audio(self, audio_path: str, output_path: str) -> str:
        """Write a 16 kHz mono copy of `audio_path` to `output_path`."""
        await self._run(build_resample_args(self.ffmpeg_bin, str(audio_path), str(output_path)))
        return str(output_path)

    def needs_conversion(self, video_path: str) -> bool:
        return Path(video_path).suffix.lower() in self.convert_extensions

    async def convert_container(self, video_path: str, output_path: str) -> MediaArtifact:
        """Re-encode a source the burn pass handles poorly (e.g. webm) into mp4."""
        logger.info("converting %s to mp4: %s", Path(video_path).suffix, output_path)
        args = build_convert_args(
            self.ffmpeg_bin, str(video_path), str(output_path), preset=self.preset
        )
        try:
            await self._run(args)
        except ProcessFailedError as exc:
            remove_quietly(output_path)
            raise ContainerConversionFailedError(
                f"container conversion failed: {exc}", cause=exc
            ) from exc
        if not is_non_empty_file(output_path):
            raise ContainerConversionFailedError(
                f"container conversion produced no output: {output_path}"
            )
        return MediaArtifact(
            path=Path(output_path), kind=ArtifactKind.VIDEO, container="mp4", codec="h264"
        )

    async def burn_subtitles(
        self,
        video_path: str,
        subtitle_path: str,
        output_dir: str,
        *,
        temp_root: str | None = None,
    ) -> MediaArtifact:
        video = Path(video_path)
        subtitle = Path(subtitle_path)
        if not video.exists():
            raise InputNotFoundError("video", str(video))
        if not subtitle.exists():
            raise InputNotFoundError("subtitle", str(subtitle))
        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        base_name = video.stem
        output_path = out_dir / f"{base_name}-subtitled.mp4"
        intermediate: Path | None = None
        temp_dir: Path | None = None
        try:
            source = video
            if self.needs_conversion(str(video)):
                intermediate = out_dir / f"{base_name}-temp.mp4"
                await self.convert_container(str(video), str(intermediate))
                source = intermediate

            if temp_root is not None:
                Path(temp_root).mkdir(parents=True, exist_ok=True)
            temp_dir = Path(tempfile.mkdtemp(prefix="burn-", dir=temp_root or str(out_dir)))
            temp_subtitle = temp_dir / "temp.srt"
            _copy_subtitle_as_utf8(subtitle, temp_subtitle)

            args = build_burn_args(
                self.ffmpeg_bin,
                str(source),
                str(temp_subtitle),
                str(output_path),
                preset=self.preset,
                crf=self.crf,
                force_style=self.force_style,
            )
            logger.info("burning subtitles: %s", " ".join(args))
            try:
                await self._run(args)
            except ProcessFailedError as exc:
                remove_quietly(output_path)
                raise BurnFailedError(f"subtitle burn failed: {exc}", cause=exc) from exc
            except BaseException:
                remove_quietly(output_path)
                raise
        finally:
            if temp_dir is not None:
                remove_quietly(temp_dir)
            if intermediate is not None:
                remove_quietly(intermediate)

        if not is_non_empty_file(output_path):
            remove_quietly(output_path)
            raise OutputMissingOrEmptyError(str(output_path))
        logger.info("subtitled video created: %s", output_path)
        return MediaArtifact(
            path=output_path, kind=ArtifactKind.VIDEO, container="mp4", codec="h264"
        )
