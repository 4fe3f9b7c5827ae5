"""Health check routes."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from subcast.config import Settings
from subcast.utils.ffmpeg import resolve_executable, resolve_ffmpeg_bin

router = APIRouter(tags=["health"])


class ToolHealth(BaseModel):
    name: str
    path: str
    available: bool


class HealthResponse(BaseModel):
    status: str  # "ok" | "degraded"
    media_provider: str
    tools: list[ToolHealth]


def _tool(name: str, path: str) -> ToolHealth:
    return ToolHealth(name=name, path=path, available=Path(path).is_file())


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    settings: Settings | None = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="settings not initialized")

    tools = [
        _tool("ffmpeg", resolve_ffmpeg_bin(settings.ffmpeg.bin)),
        _tool("whisper", resolve_executable(settings.whisper.bin)),
    ]
    status = "ok" if all(t.available for t in tools) else "degraded"
    return HealthResponse(
        status=status,
        media_provider=str(settings.pipeline.media_provider),
        tools=tools,
    )
