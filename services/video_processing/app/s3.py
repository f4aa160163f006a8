"""
Object storage transfers — S3 API via aioboto3.

Two logical buckets:
  raw        — uploads land here, keyed by the notified object name.
  processed  — transcoded output, keyed by "processed-<name>".

Each bucket has a local scratch directory; files are named exactly like
their object keys. Transfers are single-shot (no retry, no resume) and
bounded by ``transfer_timeout_secs``.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.exceptions import S3PresignError, TransferError

logger = logging.getLogger(__name__)


def _s3_session(settings: Settings) -> aioboto3.Session:
    return aioboto3.Session(
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
    )


class AssetTransfer:
    """Moves video files between the buckets and local scratch space.

    Holds one aioboto3 session for the lifetime of the process; a client is
    opened per call, so instances are safe to share between requests.
    """

    def __init__(self, settings: Settings, session: aioboto3.Session | None = None) -> None:
        self._settings = settings
        self._session = session or _s3_session(settings)
        self._raw_dir = Path(settings.local_raw_dir)
        self._processed_dir = Path(settings.local_processed_dir)
        self._timeout = settings.transfer_timeout_secs

    def raw_path(self, name: str) -> Path:
        return self._raw_dir / name

    def processed_path(self, name: str) -> Path:
        return self._processed_dir / name

    def _client(self):
        return self._session.client(
            "s3", endpoint_url=self._settings.s3_endpoint_url or None,
        )

    async def download(self, name: str) -> Path:
        """Fetch ``name`` from the raw bucket into the raw scratch directory."""
        bucket = self._settings.raw_bucket
        local_path = self.raw_path(name)

        async def _run() -> None:
            async with self._client() as s3:
                await s3.download_file(bucket, name, str(local_path))

        try:
            await asyncio.wait_for(_run(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Download of s3://%s/%s timed out", bucket, name)
            raise TransferError("download", f"Timed out after {self._timeout}s.") from exc
        except (BotoCoreError, ClientError, OSError) as exc:
            logger.error("Failed to download s3://%s/%s: %s", bucket, name, exc)
            raise TransferError("download", str(exc)) from exc

        logger.info("s3://%s/%s downloaded to %s", bucket, name, local_path)
        return local_path

    async def upload(self, name: str) -> str:
        """Publish the processed scratch file ``name`` under the same key."""
        bucket = self._settings.processed_bucket
        local_path = self.processed_path(name)

        async def _run() -> None:
            if not local_path.is_file():
                raise FileNotFoundError(f"No processed file at {local_path}")
            async with self._client() as s3:
                await s3.upload_file(str(local_path), bucket, name)

        try:
            await asyncio.wait_for(_run(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Upload of %s to s3://%s timed out", local_path, bucket)
            raise TransferError("upload", f"Timed out after {self._timeout}s.") from exc
        except (BotoCoreError, ClientError, OSError) as exc:
            logger.error("Failed to upload %s to s3://%s: %s", local_path, bucket, exc)
            raise TransferError("upload", str(exc)) from exc

        logger.info("%s uploaded to s3://%s/%s", local_path, bucket, name)
        return f"s3://{bucket}/{name}"

    async def generate_upload_url(self, file_name: str, content_type: str) -> str:
        """Return a presigned PUT URL for ``file_name`` in the raw bucket."""
        if not self._settings.aws_access_key_id:
            raise S3PresignError()
        try:
            async with self._client() as s3:
                url: str = await s3.generate_presigned_url(
                    "put_object",
                    Params={
                        "Bucket": self._settings.raw_bucket,
                        "Key": file_name,
                        "ContentType": content_type,
                    },
                    ExpiresIn=self._settings.s3_upload_expiry_seconds,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Presign failed for %s: %s", file_name, exc)
            raise S3PresignError() from exc
        return url
