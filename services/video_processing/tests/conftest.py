from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.exceptions import DuplicateError, StoreError
from app.main import create_app
from app.transcoder import TranscodeParams, Transcoder
from app.video.constants import CLAIMABLE_STATUSES, VideoStatus
from app.video.pipeline import VideoPipeline
from app.video.schemas import VideoRecord
from app.video.store import VideoStore
from shared.database import create_all, get_async_session_factory


# ── Fakes ────────────────────────────────────────────────────────────────────

class FakeStore:
    """In-memory stand-in for VideoStore that records every call."""

    def __init__(self) -> None:
        self.records: dict[str, VideoRecord] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(operation, "database unavailable")

    async def get(self, video_id: str) -> VideoRecord:
        self.calls.append(("get", video_id))
        self._maybe_fail("read")
        return self.records.get(video_id, VideoRecord())

    async def claim(self, video_id: str, owner_id: str, filename: str) -> None:
        self.calls.append(("claim", video_id, owner_id, filename))
        self._maybe_fail("claim")
        current = self.records.get(video_id, VideoRecord())
        if current.status not in CLAIMABLE_STATUSES:
            raise DuplicateError(video_id)
        self.records[video_id] = current.model_copy(
            update={
                "id": video_id,
                "owner_id": owner_id,
                "filename": filename,
                "status": VideoStatus.PROCESSING,
            }
        )

    async def commit_processed(self, video_id: str, owner_id: str, processed_filename: str) -> None:
        self.calls.append(("commit_processed", video_id, owner_id, processed_filename))
        self._maybe_fail("commit")
        current = self.records.get(video_id, VideoRecord())
        self.records[video_id] = current.model_copy(
            update={
                "id": video_id,
                "owner_id": owner_id,
                "filename": processed_filename,
                "status": VideoStatus.PROCESSED,
            }
        )

    async def mark_failed(self, video_id: str) -> None:
        self.calls.append(("mark_failed", video_id))
        self._maybe_fail("update")
        current = self.records.get(video_id)
        if current is not None and current.status == VideoStatus.PROCESSING:
            self.records[video_id] = current.model_copy(update={"status": VideoStatus.FAILED})

    async def list_processed(self, limit: int = 10) -> list[VideoRecord]:
        self.calls.append(("list_processed", limit))
        processed = [r for r in self.records.values() if r.status == VideoStatus.PROCESSED]
        return processed[:limit]

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeTransfer:
    """Writes scratch files locally instead of talking to a bucket."""

    def __init__(self, raw_dir: Path, processed_dir: Path) -> None:
        self.raw_dir = raw_dir
        self.processed_dir = processed_dir
        self.calls: list[tuple[str, str]] = []
        self.errors: dict[str, Exception] = {}
        self.presign_calls: list[tuple[str, str]] = []

    def raw_path(self, name: str) -> Path:
        return self.raw_dir / name

    def processed_path(self, name: str) -> Path:
        return self.processed_dir / name

    async def download(self, name: str) -> Path:
        self.calls.append(("download", name))
        if "download" in self.errors:
            raise self.errors["download"]
        path = self.raw_path(name)
        path.write_bytes(b"raw video bytes")
        return path

    async def upload(self, name: str) -> str:
        self.calls.append(("upload", name))
        if "upload" in self.errors:
            raise self.errors["upload"]
        return f"s3://processed/{name}"

    async def generate_upload_url(self, file_name: str, content_type: str) -> str:
        self.presign_calls.append((file_name, content_type))
        return f"https://storage.example.test/raw/{file_name}?signature=abc"


class FakeTranscoder(Transcoder):
    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path, TranscodeParams]] = []
        self.error: Exception | None = None
        self.write_output = True

    async def convert(self, input_path: Path, output_path: Path, params: TranscodeParams) -> None:
        self.calls.append((input_path, output_path, params))
        if self.error is not None:
            raise self.error
        if self.write_output:
            output_path.write_bytes(b"processed video bytes")


class RecordingCleanup:
    def __init__(self) -> None:
        self.calls: list[list[Path]] = []

    def __call__(self, paths) -> None:
        paths = list(paths)
        self.calls.append(paths)
        for path in paths:
            Path(path).unlink(missing_ok=True)


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        video_database_url="sqlite+aiosqlite://",
        local_raw_dir=str(tmp_path / "raw-videos"),
        local_processed_dir=str(tmp_path / "processed-videos"),
        raw_bucket="test-raw",
        processed_bucket="test-processed",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
        aws_region="us-east-1",
        transfer_timeout_secs=5,
        transcode_timeout_secs=5,
    )


@pytest.fixture
def scratch_dirs(settings: Settings) -> tuple[Path, Path]:
    raw_dir = Path(settings.local_raw_dir)
    processed_dir = Path(settings.local_processed_dir)
    raw_dir.mkdir(parents=True, exist_ok=True)
    processed_dir.mkdir(parents=True, exist_ok=True)
    return raw_dir, processed_dir


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_transfer(scratch_dirs: tuple[Path, Path]) -> FakeTransfer:
    return FakeTransfer(*scratch_dirs)


@pytest.fixture
def fake_transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def cleanup() -> RecordingCleanup:
    return RecordingCleanup()


@pytest.fixture
def pipeline(
    fake_store: FakeStore,
    fake_transfer: FakeTransfer,
    fake_transcoder: FakeTranscoder,
    cleanup: RecordingCleanup,
) -> VideoPipeline:
    return VideoPipeline(
        store=fake_store,
        transfer=fake_transfer,
        transcoder=fake_transcoder,
        params=TranscodeParams(target_height=360),
        cleanup=cleanup,
    )


@pytest.fixture
def client(settings: Settings, pipeline: VideoPipeline) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, pipeline=pipeline)
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def store() -> AsyncGenerator[VideoStore, None]:
    session_factory = get_async_session_factory("sqlite+aiosqlite://")
    await create_all(session_factory)
    yield VideoStore(session_factory)
    await session_factory.kw["bind"].dispose()
