from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from subcast.config import Settings
from subcast.exceptions import ProcessFailedError
from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.providers.media.base import MediaTool, TranscriptResult, TranscriptSource
from subcast.storage.layout import StorageLayout
from subcast.utils.subprocess import RunResult

SAMPLE_SRT = "1\n00:00:00,000 --> 00:00:02,000\nhello world\n\n"


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        storage_root=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def layout(settings: Settings) -> StorageLayout:
    return StorageLayout(settings.storage_root).ensure()


@pytest.fixture()
def fake_bin(tmp_path) -> Callable[[str], str]:
    """Create a placeholder file so binary resolution keeps the given path."""

    def _make(name: str) -> str:
        p = tmp_path / "bin" / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")
        return str(p)

    return _make


Handler = Callable[[list[str]], RunResult]


@dataclass
class FakeRunner:
    """Process runner stand-in; records argv and delegates to per-binary handlers."""

    handlers: dict[str, Handler] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)

    async def __call__(
        self,
        args: Sequence[str],
        *,
        timeout_s: float | None = None,  # noqa: ARG002
        check: bool = True,
    ) -> RunResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)
        name = Path(argv[0]).name
        handler = self.handlers.get(name)
        result = handler(argv) if handler is not None else RunResult(0, b"", b"")
        if check and result.returncode != 0:
            raise ProcessFailedError(argv, result.returncode, result.stderr.decode())
        return result


def write_last_arg(argv: list[str]) -> RunResult:
    """ffmpeg-like behavior: write a non-empty file at the output path."""
    out = Path(argv[-1])
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(b"\x00" * 64)
    return RunResult(0, b"", b"frame=1\n")


def fail_with(code: int, stderr: bytes = b"boom") -> Handler:
    def _handler(argv: list[str]) -> RunResult:  # noqa: ARG001
        return RunResult(code, b"", stderr)

    return _handler


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


class FakeMediaTool(MediaTool):
    """Writes small placeholder artifacts; can fail at a chosen stage."""

    def __init__(
        self,
        *,
        fail_at: str | None = None,
        degraded: bool = False,
        subtitle_text: str = SAMPLE_SRT,
    ) -> None:
        self.fail_at = fail_at
        self.degraded = degraded
        self.subtitle_text = subtitle_text
        self.created: list[Path] = []
        self.calls: list[str] = []

    def _maybe_fail(self, stage: str) -> None:
        self.calls.append(stage)
        if self.fail_at == stage:
            raise ProcessFailedError([stage], 1, f"{stage} exploded")

    async def extract_audio(self, video_path: str, output_dir: str) -> MediaArtifact:
        self._maybe_fail("extract_audio")
        out = Path(output_dir) / f"{Path(video_path).stem}-audio.wav"
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"RIFF" + b"\x00" * 40)
        self.created.append(out)
        return MediaArtifact(path=out, kind=ArtifactKind.AUDIO, container="wav")

    async def transcribe(self, audio_path: str, output_dir: str) -> TranscriptResult:
        self._maybe_fail("transcribe")
        out = Path(output_dir) / f"{Path(audio_path).stem}.srt"
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.subtitle_text, encoding="utf-8")
        self.created.append(out)
        source = (
            TranscriptSource.SYNTHESIZED_FROM_STDOUT
            if self.degraded
            else TranscriptSource.CANDIDATE_FILE
        )
        return TranscriptResult(
            artifact=MediaArtifact(path=out, kind=ArtifactKind.SUBTITLE, container="srt"),
            source=source,
        )

    async def burn_subtitles(
        self,
        video_path: str,
        subtitle_path: str,  # noqa: ARG002
        output_dir: str,
        *,
        temp_root: str | None = None,
    ) -> MediaArtifact:
        if temp_root is not None:
            scratch = Path(temp_root) / "burn-scratch.srt"
            scratch.parent.mkdir(parents=True, exist_ok=True)
            scratch.write_text("scratch", encoding="utf-8")
        self._maybe_fail("burn_subtitles")
        out = Path(output_dir) / f"{Path(video_path).stem}-subtitled.mp4"
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 100)
        self.created.append(out)
        return MediaArtifact(path=out, kind=ArtifactKind.VIDEO, container="mp4")


@pytest.fixture()
def input_video(layout: StorageLayout) -> Path:
    p = layout.videos_dir / "video-1700000000000-abc123.mp4"
    p.write_bytes(b"\x00" * 256)
    return p


@pytest.fixture()
def fake_media_tool_cls() -> type[FakeMediaTool]:
    return FakeMediaTool


@pytest.fixture()
def writes_output() -> Handler:
    return write_last_arg


@pytest.fixture()
def failing() -> Callable[..., Handler]:
    return fail_with
