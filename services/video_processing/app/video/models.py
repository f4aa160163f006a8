"""
Video ORM model — SQLAlchemy 2.0 async.

One row per asset, keyed by the id derived from the storage filename.
The raw and processed files live in object storage; this table only tracks
processing state and display metadata.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shared.database import Base
from app.video.constants import VideoStatus


class Video(Base):
    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(
        String(512), nullable=False, default="", server_default="",
    )
    status: Mapped[VideoStatus] = mapped_column(
        SAEnum(
            VideoStatus,
            name="videostatus",
            create_constraint=True,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=VideoStatus.UNDEFINED,
        server_default=VideoStatus.UNDEFINED.value,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", server_default="",
    )
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default="",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_videos_status_updated", "status", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Video {self.id} owner={self.owner_id} status={self.status}>"
