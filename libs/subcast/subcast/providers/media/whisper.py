"""Whisper CLI transcription provider."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from subcast.exceptions import (
    InputNotFoundError,
    ProcessFailedError,
    TranscriptionFailedError,
)
from subcast.formatters.srt import format_srt, strip_inline_timestamps
from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.models.subtitle import SubtitleDocument
from subcast.providers.media.base import ProcessRunner, TranscriptResult, TranscriptSource
from subcast.providers.media.ffmpeg import FFmpegProvider
from subcast.utils.ffmpeg import resolve_executable
from subcast.utils.fs import remove_quietly
from subcast.utils.subprocess import run_subprocess

logger = logging.getLogger(__name__)


def candidate_output_names(temp_stem: str, base_name: str, language: str) -> list[str]:
    """Subtitle filenames whisper may write, in priority order.

    Depending on version, whisper names its output after the input stem with
    or without a language suffix.
    """
    names = [
        f"{temp_stem}.{language}.srt",
        f"{temp_stem}.srt",
        f"{base_name}.{language}.srt",
    ]
    return list(dict.fromkeys(names))


def synthesize_fallback_srt(stdout_text: str, duration_s: float) -> str | None:
    """Wrap plain transcribed text in a single cue spanning `0 -> duration_s`.

    Returns None when stdout carries no text.
    """
    text = strip_inline_timestamps(stdout_text)
    if not text:
        return None
    return format_srt(SubtitleDocument.from_texts([(0.0, float(duration_s), text)]))


class WhisperProvider:
    def __init__(
        self,
        ffmpeg: FFmpegProvider,
        *,
        whisper_bin: str = "whisper",
        model: str = "base",
        language: str = "en",
        fallback_cue_duration_s: float = 30.0,
        timeout_s: float | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.ffmpeg = ffmpeg
        self.whisper_bin = resolve_executable(whisper_bin)
        self.model = model
        self.language = language
        self.fallback_cue_duration_s = float(fallback_cue_duration_s)
        self.timeout_s = timeout_s
        self._runner: ProcessRunner = runner or run_subprocess

    def build_args(self, audio_path: str, output_dir: str) -> list[str]:
        return [
            self.whisper_bin,
            audio_path,
            "--model",
            self.model,
            "--language",
            self.language,
            "--output_dir",
            output_dir,
            "--output_format",
            "srt",
        ]

    async def transcribe(self, audio_path: str, output_dir: str) -> TranscriptResult:
        audio = Path(audio_path)
        if not audio.exists():
            raise InputNotFoundError("audio", str(audio))
        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        base_name = audio.stem
        output_file = out_dir / f"{base_name}.srt"
        temp_audio = out_dir / f"{base_name}_temp.wav"

        candidates = [
            out_dir / name
            for name in candidate_output_names(temp_audio.stem, base_name, self.language)
        ]

        logger.info("transcription start (audio=%s, output_dir=%s)", audio, out_dir)
        try:
            await self.ffmpeg.resample_audio(str(audio), str(temp_audio))
            args = self.build_args(str(temp_audio), str(out_dir))
            logger.info("running whisper: %s", " ".join(args))
            result = await self._runner(args, timeout_s=self.timeout_s, check=True)
        except ProcessFailedError as exc:
            raise TranscriptionFailedError(f"transcription failed: {exc}", cause=exc) from exc
        except BaseException:
            for candidate in candidates:
                remove_quietly(candidate)
            raise
        finally:
            remove_quietly(temp_audio)

        logger.debug("checking whisper outputs: %s", [str(c) for c in candidates])
        for candidate in candidates:
            if candidate.exists():
                os.replace(candidate, output_file)
                logger.info("transcription done (found=%s, output=%s)", candidate, output_file)
                return TranscriptResult(
                    artifact=_subtitle_artifact(output_file),
                    source=TranscriptSource.CANDIDATE_FILE,
                    candidate=candidate,
                )

        fallback = synthesize_fallback_srt(result.stdout_text, self.fallback_cue_duration_s)
        if fallback is None:
            raise TranscriptionFailedError(
                "no transcription output file found and no transcription in stdout"
            )
        output_file.write_text(fallback, encoding="utf-8")
        logger.warning(
            "whisper wrote no subtitle file; synthesized single-cue fallback "
            "(output=%s, span=0-%.1fs)",
            output_file,
            self.fallback_cue_duration_s,
        )
        return TranscriptResult(
            artifact=_subtitle_artifact(output_file),
            source=TranscriptSource.SYNTHESIZED_FROM_STDOUT,
        )


def _subtitle_artifact(path: Path) -> MediaArtifact:
    return MediaArtifact(path=path, kind=ArtifactKind.SUBTITLE, container="srt")
