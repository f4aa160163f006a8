"""
Video — HTTP routes.

``/process-video`` is called by the push subscription on every raw upload
and is not authenticated at the application level (restrict it at the
ingress). The ``/videos`` routes serve the web client.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from app.config import Settings
from app.video import controller
from app.video.dependencies import get_current_user_required, get_pipeline, get_settings
from app.video.pipeline import VideoPipeline
from app.video.schemas import (
    PushEnvelope,
    UploadUrlRequest,
    UploadUrlResponse,
    VideoListResponse,
)
from shared.models.user import CurrentUser

process_router = APIRouter(tags=["processing"])
router = APIRouter(prefix="/videos", tags=["videos"])


# ── Push delivery ────────────────────────────────────────────────────────────

@process_router.post(
    "/process-video",
    response_class=PlainTextResponse,
    summary="Process a newly uploaded raw video",
    description=(
        "Push endpoint for storage notifications. Decodes the object name, "
        "claims the video, transcodes it and publishes the result. "
        "400 means the message should not be redelivered as-is; "
        "500 means it is safe to retry."
    ),
)
async def process_video(
    envelope: PushEnvelope,
    pipeline: VideoPipeline = Depends(get_pipeline),
) -> PlainTextResponse:
    await pipeline.process(envelope.message.data)
    return PlainTextResponse("Processing Complete.")


# ── Web client ───────────────────────────────────────────────────────────────

@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    summary="Request a presigned upload URL",
    description=(
        "Generates a presigned PUT URL in the raw bucket. The returned "
        "file name encodes the uploader, which the processing pipeline "
        "uses as the video's owner."
    ),
)
async def request_upload_url(
    request: UploadUrlRequest,
    user: CurrentUser = Depends(get_current_user_required),
    pipeline: VideoPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
) -> UploadUrlResponse:
    return await controller.request_upload_url(request, user, pipeline, settings)


@router.get(
    "",
    response_model=VideoListResponse,
    summary="List processed videos",
)
async def list_videos(
    limit: int | None = Query(default=None, ge=1, le=100),
    pipeline: VideoPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
) -> VideoListResponse:
    return await controller.list_videos(pipeline, limit or settings.processed_list_limit)
