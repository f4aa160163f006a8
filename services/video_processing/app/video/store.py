"""
Video — processing status store.

The ``videos`` table is the only coordination point between concurrent
deliveries. Reads never fail on a missing row (an unseen video is an
``Undefined`` record); every write failure surfaces as ``StoreError``.
"""
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import DuplicateError, StoreError
from app.video.constants import CLAIMABLE_STATUSES, VideoStatus
from app.video.models import Video
from app.video.schemas import VideoRecord

logger = logging.getLogger(__name__)


class VideoStore:
    """Status persistence over an async session factory. Safe to share across requests."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, video_id: str) -> VideoRecord:
        try:
            async with self._session_factory() as session:
                video = await session.get(Video, video_id)
        except SQLAlchemyError as exc:
            raise StoreError("read", str(exc)) from exc
        if video is None:
            return VideoRecord()
        return VideoRecord.model_validate(video)

    async def claim(self, video_id: str, owner_id: str, filename: str) -> None:
        """Move a video to PROCESSING if nobody else holds it.

        Conditional write: an existing row is only taken over from a
        claimable status, and a concurrent first insert loses on the
        primary key. Either way the loser gets ``DuplicateError``; any other
        integrity violation is a ``StoreError``.
        """
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(Video)
                    .where(
                        Video.id == video_id,
                        Video.status.in_(CLAIMABLE_STATUSES),
                    )
                    .values(
                        owner_id=owner_id,
                        filename=filename,
                        status=VideoStatus.PROCESSING,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    existing = await session.get(Video, video_id)
                    if existing is not None:
                        raise DuplicateError(video_id)
                    session.add(
                        Video(
                            id=video_id,
                            owner_id=owner_id,
                            filename=filename,
                            status=VideoStatus.PROCESSING,
                            title="",
                            description="",
                        )
                    )
        except IntegrityError as exc:
            # Only a primary-key conflict means another delivery won the claim.
            if (await self.get(video_id)).id:
                logger.info("Lost claim race for video %s", video_id)
                raise DuplicateError(video_id) from exc
            raise StoreError("claim", str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StoreError("claim", str(exc)) from exc

    async def commit_processed(
        self,
        video_id: str,
        owner_id: str,
        processed_filename: str,
    ) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                video = await session.get(Video, video_id)
                if video is None:
                    session.add(
                        Video(
                            id=video_id,
                            owner_id=owner_id,
                            filename=processed_filename,
                            status=VideoStatus.PROCESSED,
                            title="",
                            description="",
                        )
                    )
                else:
                    video.owner_id = owner_id
                    video.filename = processed_filename
                    video.status = VideoStatus.PROCESSED
        except SQLAlchemyError as exc:
            raise StoreError("commit", str(exc)) from exc

    async def mark_failed(self, video_id: str) -> None:
        """Release a PROCESSING claim so the video can be retried."""
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    update(Video)
                    .where(
                        Video.id == video_id,
                        Video.status == VideoStatus.PROCESSING,
                    )
                    .values(status=VideoStatus.FAILED)
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            raise StoreError("update", str(exc)) from exc

    async def list_processed(self, limit: int = 10) -> list[VideoRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Video)
                    .where(Video.status == VideoStatus.PROCESSED)
                    .order_by(Video.updated_at.desc(), Video.id)
                    .limit(limit)
                )
                videos = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError("read", str(exc)) from exc
        return [VideoRecord.model_validate(v) for v in videos]
