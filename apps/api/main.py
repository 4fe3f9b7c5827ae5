"""SubCast API"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from subcast.config import Settings
from subcast.pipeline import create_orchestrator
from subcast.providers import get_media_tool
from subcast.storage import get_storage_layout
from subcast.streaming import RangeStreamer
from routes.health import router as health_router
from routes.videos import router as videos_router
from subcast.utils.logging_setup import setup_logging

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("subcast.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    layout = get_storage_layout(settings)
    media_tool = get_media_tool(settings)
    app.state.settings = settings
    app.state.layout = layout
    app.state.media_tool = media_tool
    app.state.orchestrator = create_orchestrator(settings, media_tool)
    app.state.streamer = RangeStreamer(settings.stream.chunk_size)
    logger.info(
        "API starting (storage_root=%s, media_provider=%s)",
        settings.storage_root,
        settings.pipeline.media_provider,
    )
    try:
        yield
    finally:
        await media_tool.close()


app = FastAPI(
    title="SubCast API",
    description="Video subtitle burn-in and streaming API",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(videos_router)
app.include_router(health_router)
app.mount(
    "/uploads",
    StaticFiles(directory=get_storage_layout(settings).uploads_dir, check_dir=False),
    name="uploads",
)
