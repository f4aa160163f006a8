"""
Video — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.video.constants import VideoStatus


# ── Base ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
    )


# ── Push delivery envelope ───────────────────────────────────────────────────

class PushMessage(BaseModel):
    """The ``message`` object of a push subscription delivery."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: str = Field(description="Base64-encoded JSON notification")
    message_id: str | None = Field(default=None, alias="messageId")
    attributes: dict[str, str] = Field(default_factory=dict)


class PushEnvelope(BaseModel):
    """Body posted by the message broker to ``/process-video``."""
    model_config = ConfigDict(extra="ignore")

    message: PushMessage
    subscription: str | None = None


# ── Records ──────────────────────────────────────────────────────────────────

class VideoRecord(BaseModel):
    """Stored processing state of one video; the default is an unseen video."""
    model_config = ConfigDict(from_attributes=True)

    id: str = ""
    owner_id: str = ""
    filename: str = ""
    status: VideoStatus = VideoStatus.UNDEFINED
    title: str = ""
    description: str = ""


class VideoListResponse(BaseModel):
    items: list[VideoRecord]


# ── Upload URL ───────────────────────────────────────────────────────────────

class UploadUrlRequest(_Base):
    """Request a presigned PUT URL for a raw video upload."""
    file_extension: str = Field(
        min_length=1,
        max_length=10,
        pattern=r"^[A-Za-z0-9]+$",
        description="Extension of the file being uploaded, without the dot (e.g. mp4)",
    )


class UploadUrlResponse(BaseModel):
    url: str
    file_name: str
    expires_in: int
