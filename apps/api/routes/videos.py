"""Video upload, streaming and download routes."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel

from subcast.config import Settings
from subcast.exceptions import (
    ArtifactNotFoundError,
    RangeNotSatisfiableError,
    StageExecutionError,
)
from subcast.pipeline import PipelineOrchestrator
from subcast.storage import StorageLayout
from subcast.streaming import RangeStreamer, StreamRequest
from subcast.utils.fs import remove_quietly, unique_token

router = APIRouter(prefix="/videos", tags=["videos"])
logger = logging.getLogger("subcast.api.videos")


class UploadResponse(BaseModel):
    job_id: str
    filename: str
    video_url: str
    stream_url: str
    download_url: str
    thumbnail_url: str | None = None
    subtitle: str
    transcript_quality: str


def _settings(request: Request) -> Settings:
    settings: Settings | None = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="settings not initialized")
    return settings


def _layout(request: Request) -> StorageLayout:
    layout: StorageLayout | None = getattr(request.app.state, "layout", None)
    if layout is None:
        raise HTTPException(status_code=500, detail="storage not initialized")
    return layout


def _orchestrator(request: Request) -> PipelineOrchestrator:
    orchestrator: PipelineOrchestrator | None = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=500, detail="pipeline not initialized")
    return orchestrator


def _streamer(request: Request) -> RangeStreamer:
    streamer: RangeStreamer | None = getattr(request.app.state, "streamer", None)
    if streamer is None:
        streamer = RangeStreamer(_settings(request).stream.chunk_size)
    return streamer


def _detect_content_type(filename: str, provided: str | None) -> str:
    candidate = str(provided or "").strip().lower()
    if candidate:
        return candidate
    guessed, _ = mimetypes.guess_type(filename)
    return str(guessed or "application/octet-stream")


def _extension(filename: str | None, default: str) -> str:
    ext = Path(str(filename or "")).suffix.lower()
    if not ext or len(ext) > 10 or not ext[1:].isalnum():
        return default
    return ext


async def _write_upload_to_path(
    upload: UploadFile,
    target_path: Path,
    *,
    max_bytes: int,
    chunk_size: int = 1024 * 1024,
) -> int:
    target_path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        with target_path.open("wb") as f:
            while True:
                chunk = await upload.read(chunk_size)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise HTTPException(status_code=413, detail="file too large")
                f.write(chunk)
    except HTTPException:
        remove_quietly(target_path)
        raise
    return written


def _absolute_url(settings: Settings, path: str) -> str:
    return f"{str(settings.base_url).rstrip('/')}{path}"


@router.post("/upload", status_code=201, response_model=UploadResponse)
async def upload_video(
    request: Request,
    video: UploadFile = File(...),
    thumbnail: UploadFile | None = File(None),
):
    settings = _settings(request)
    layout = _layout(request)
    orchestrator = _orchestrator(request)

    try:
        video_type = _detect_content_type(str(video.filename or ""), video.content_type)
        if video_type not in settings.allowed_video_types:
            raise HTTPException(status_code=400, detail=f"invalid video type: {video_type}")
        if thumbnail is not None:
            image_type = _detect_content_type(
                str(thumbnail.filename or ""), thumbnail.content_type
            )
            if image_type not in settings.allowed_image_types:
                raise HTTPException(
                    status_code=400, detail=f"invalid thumbnail image type: {image_type}"
                )

        token = unique_token()
        video_path = layout.videos_dir / f"video-{token}{_extension(video.filename, '.mp4')}"
        size_bytes = await _write_upload_to_path(
            video, video_path, max_bytes=int(settings.upload_max_bytes)
        )
        if size_bytes == 0:
            remove_quietly(video_path)
            raise HTTPException(status_code=400, detail="video file is empty")

        thumbnail_url: str | None = None
        if thumbnail is not None:
            thumb_path = (
                layout.thumbnails_dir
                / f"thumbnail-{token}{_extension(thumbnail.filename, '.jpg')}"
            )
            try:
                await _write_upload_to_path(
                    thumbnail, thumb_path, max_bytes=int(settings.upload_max_bytes)
                )
            except BaseException:
                remove_quietly(video_path)
                raise
            thumbnail_url = _absolute_url(settings, layout.relative_url_path(thumb_path))
    finally:
        await video.close()
        if thumbnail is not None:
            await thumbnail.close()

    job = orchestrator.create_job(video_path)
    logger.info("upload accepted (job_id=%s, video=%s, bytes=%s)", job.id, video_path, size_bytes)
    try:
        result = await orchestrator.run(job)
    except StageExecutionError as exc:
        return JSONResponse(
            status_code=500,
            content={
                "error": "video processing failed",
                "stage": exc.stage,
                "error_code": exc.error_code.value,
                "details": exc.message,
            },
        )

    filename = result.video_path.name
    return UploadResponse(
        job_id=result.job_id,
        filename=filename,
        video_url=_absolute_url(settings, layout.relative_url_path(result.video_path)),
        stream_url=_absolute_url(settings, f"/videos/stream/{filename}"),
        download_url=_absolute_url(settings, f"/videos/download/{filename}"),
        thumbnail_url=thumbnail_url,
        subtitle=result.subtitle_text,
        transcript_quality=result.transcript_quality.value,
    )


@router.get("/stream/{filename}")
async def stream_video(request: Request, filename: str):
    layout = _layout(request)
    streamer = _streamer(request)
    try:
        path = layout.resolve_video(filename)
        request_range = request.headers.get("range")
        response = streamer.open(StreamRequest(path=path, range_header=request_range))
    except ArtifactNotFoundError:
        raise HTTPException(status_code=404, detail="video not found") from None
    except RangeNotSatisfiableError as exc:
        return JSONResponse(
            status_code=416,
            content={"error": "range not satisfiable"},
            headers={"Content-Range": f"bytes */{exc.size}", "Accept-Ranges": "bytes"},
        )
    return StreamingResponse(
        response.body,
        status_code=response.status_code,
        headers=response.headers,
        media_type=response.media_type,
    )


@router.get("/download/{filename}")
async def download_video(request: Request, filename: str):
    layout = _layout(request)
    try:
        path = layout.resolve_video(filename)
    except ArtifactNotFoundError:
        raise HTTPException(status_code=404, detail="video not found") from None
    if not path.is_file():
        raise HTTPException(status_code=404, detail="video not found")
    media_type, _ = mimetypes.guess_type(path.name)
    return FileResponse(path, media_type=media_type or "video/mp4", filename=path.name)
