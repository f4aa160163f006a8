"""
Video — controller layer.

Receives validated input from router, calls the pipeline's collaborators,
composes the response.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fastapi import HTTPException, status

from app.video.constants import ALLOWED_UPLOAD_EXTENSIONS, UPLOAD_CONTENT_TYPES
from app.video.schemas import UploadUrlRequest, UploadUrlResponse, VideoListResponse

if TYPE_CHECKING:
    from app.config import Settings
    from app.video.pipeline import VideoPipeline
    from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def build_upload_filename(owner_id: str, extension: str, now_ms: int | None = None) -> str:
    """``<owner>-<epoch_ms>.<ext>``, the shape the notification parser expects."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{owner_id}-{now_ms}.{extension}"


async def request_upload_url(
    request: UploadUrlRequest,
    user: CurrentUser,
    pipeline: VideoPipeline,
    settings: Settings,
) -> UploadUrlResponse:
    extension = request.file_extension.lower()
    if extension not in ALLOWED_UPLOAD_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported file extension: {extension}.",
        )

    # uuid hex has no "-", so the owner id survives the first-dash split
    file_name = build_upload_filename(user.id.hex, extension)
    url = await pipeline.transfer.generate_upload_url(
        file_name, UPLOAD_CONTENT_TYPES[extension],
    )
    logger.info("Issued upload URL for %s", file_name)
    return UploadUrlResponse(
        url=url,
        file_name=file_name,
        expires_in=settings.s3_upload_expiry_seconds,
    )


async def list_videos(pipeline: VideoPipeline, limit: int) -> VideoListResponse:
    items = await pipeline.store.list_processed(limit)
    return VideoListResponse(items=items)
