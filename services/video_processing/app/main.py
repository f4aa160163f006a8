import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from app.config import Settings
from app.s3 import AssetTransfer
from app.scratch import setup_directories
from app.transcoder import FfmpegTranscoder, TranscodeParams
from app.video.pipeline import VideoPipeline
from app.video.router import process_router, router as video_router
from app.video.store import VideoStore
from shared.database import get_async_session_factory
from shared.middleware import error_envelope_middleware, request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Clipstream Video Processing Service

Turns raw uploads into streamable videos.

* **Ingest** — push endpoint fed by storage notifications on the raw bucket.
* **Transcode** — ffmpeg, scaled down to a fixed height with pixel aspect ratio correction.
* **Publish** — processed file uploaded to the processed bucket as `processed-<name>`.
* **Status tracking** — per-video status (Processing → Processed, Failed on error).

### Error shape
```json
{ "detail": "Human-readable message" }
```
"""

_TAGS_METADATA = [
    {
        "name": "processing",
        "description": "Storage notification push endpoint.",
    },
    {
        "name": "videos",
        "description": "Upload URLs and the processed video listing for the web client.",
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def get_settings() -> Settings:
    return Settings()


def build_pipeline(settings: Settings) -> VideoPipeline:
    """Construct the shared clients once per process."""
    session_factory = get_async_session_factory(
        settings.video_database_url,
        expire_on_commit=False,
    )
    return VideoPipeline(
        store=VideoStore(session_factory),
        transfer=AssetTransfer(settings),
        transcoder=FfmpegTranscoder(
            binary=settings.ffmpeg_binary,
            timeout_secs=settings.transcode_timeout_secs,
        ),
        params=TranscodeParams(target_height=settings.target_height),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_directories(settings.local_raw_dir, settings.local_processed_dir)
    if getattr(app.state, "pipeline", None) is None:
        app.state.pipeline = build_pipeline(settings)
    logger.info(
        "Video processing service ready (raw=%s, processed=%s)",
        settings.raw_bucket,
        settings.processed_bucket,
    )
    yield
    logger.info("Video processing service shutting down")


def create_app(
    settings: Settings | None = None,
    pipeline: VideoPipeline | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Clipstream Video Processing Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pipeline = pipeline

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(process_router)
    app.include_router(video_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"], include_in_schema=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="video-processing")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)
