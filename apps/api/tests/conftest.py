from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from subcast.config import Settings
from subcast.exceptions import BurnFailedError
from subcast.models.artifact import ArtifactKind, MediaArtifact
from subcast.pipeline import PipelineOrchestrator
from subcast.providers.media.base import MediaTool, TranscriptResult, TranscriptSource
from subcast.storage import get_storage_layout
from subcast.streaming import RangeStreamer

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

API_SRT = "1\n00:00:00,000 --> 00:00:01,000\nfrom the api\n\n"


class StubMediaTool(MediaTool):
    def __init__(self) -> None:
        self.fail_burn = False

    async def extract_audio(self, video_path: str, output_dir: str) -> MediaArtifact:
        out = Path(output_dir) / f"{Path(video_path).stem}.wav"
        out.write_bytes(b"RIFF")
        return MediaArtifact(path=out, kind=ArtifactKind.AUDIO, container="wav")

    async def transcribe(self, audio_path: str, output_dir: str) -> TranscriptResult:
        out = Path(output_dir) / f"{Path(audio_path).stem}.srt"
        out.write_text(API_SRT, encoding="utf-8")
        return TranscriptResult(
            artifact=MediaArtifact(path=out, kind=ArtifactKind.SUBTITLE, container="srt"),
            source=TranscriptSource.CANDIDATE_FILE,
        )

    async def burn_subtitles(
        self,
        video_path: str,
        subtitle_path: str,  # noqa: ARG002
        output_dir: str,
        *,
        temp_root: str | None = None,  # noqa: ARG002
    ) -> MediaArtifact:
        if self.fail_burn:
            raise BurnFailedError("subtitle burn failed: ffmpeg exited with code 1")
        out = Path(output_dir) / f"{Path(video_path).stem}-subtitled.mp4"
        out.write_bytes(bytes(i % 256 for i in range(2048)))
        return MediaArtifact(path=out, kind=ArtifactKind.VIDEO, container="mp4")


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        storage_root=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
        base_url="http://testserver",
        upload_max_bytes=4096,
    )


@pytest.fixture()
def media_tool() -> StubMediaTool:
    return StubMediaTool()


@pytest.fixture()
def app(settings: Settings, media_tool: StubMediaTool) -> FastAPI:
    from routes.health import router as health_router
    from routes.videos import router as videos_router

    layout = get_storage_layout(settings)
    test_app = FastAPI()
    test_app.state.settings = settings
    test_app.state.layout = layout
    test_app.state.orchestrator = PipelineOrchestrator(settings, media_tool, layout=layout)
    test_app.state.streamer = RangeStreamer(settings.stream.chunk_size)
    test_app.include_router(videos_router)
    test_app.include_router(health_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
