"""
Video — ingest, transcode, publish.

One call to ``VideoPipeline.process`` handles one storage notification:

  decode -> derive identity -> guard -> claim
         -> download -> convert -> upload -> commit

Everything before the claim is side-effect free, so failures there are
returned immediately. Once the claim is written, any failure or cancellation
removes both scratch files and releases the claim (status FAILED) before the
error is re-raised to the HTTP layer.
"""
from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterable

from app import scratch
from app.exceptions import DuplicateError, StoreError
from app.s3 import AssetTransfer
from app.transcoder import TranscodeParams, Transcoder
from app.video.constants import CLAIMABLE_STATUSES
from app.video.notification import VideoIdentity, decode_notification, derive_identity
from app.video.store import VideoStore

logger = logging.getLogger(__name__)

CleanupFn = Callable[[Iterable[str | os.PathLike[str]]], None]


class VideoPipeline:
    """Shared per-process service; holds no per-request state."""

    def __init__(
        self,
        *,
        store: VideoStore,
        transfer: AssetTransfer,
        transcoder: Transcoder,
        params: TranscodeParams,
        cleanup: CleanupFn = scratch.cleanup,
    ) -> None:
        self.store = store
        self.transfer = transfer
        self._transcoder = transcoder
        self._params = params
        self._cleanup = cleanup

    async def process(self, data: str) -> VideoIdentity:
        name = decode_notification(data)
        identity = derive_identity(name)
        video_id = identity.video_id

        record = await self.store.get(video_id)
        if record.status not in CLAIMABLE_STATUSES:
            logger.info("Video %s rejected: status is %s", video_id, record.status.value)
            raise DuplicateError(video_id)

        await self.store.claim(video_id, identity.owner_id, name)
        logger.info("Video %s claimed for processing", video_id)

        processed_name = identity.processed_filename
        raw_path = self.transfer.raw_path(name)
        processed_path = self.transfer.processed_path(processed_name)

        try:
            await self.transfer.download(name)
            logger.info("Video %s downloaded", video_id)
            await self._transcoder.convert(raw_path, processed_path, self._params)
            logger.info("Video %s converted", video_id)
            await self.transfer.upload(processed_name)
            logger.info("Video %s uploaded", video_id)
            await self.store.commit_processed(video_id, identity.owner_id, processed_name)
        except BaseException:
            # Cancellation too: a dropped request must not leave the claim behind.
            logger.error("Processing failed for video %s, cleaning up", video_id)
            self._cleanup([raw_path, processed_path])
            await asyncio.shield(self._release(video_id))
            raise

        logger.info("Video %s processed", video_id)
        return identity

    async def _release(self, video_id: str) -> None:
        try:
            await self.store.mark_failed(video_id)
        except StoreError:
            logger.exception("Could not mark video %s as failed", video_id)
