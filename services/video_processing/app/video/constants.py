"""
Video — static constants and enum types.
"""
import enum


class VideoStatus(str, enum.Enum):
    # Values are the literal strings the web client filters on.
    UNDEFINED = "Undefined"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    FAILED = "Failed"


# A new processing attempt may start from these states only.
CLAIMABLE_STATUSES: tuple[VideoStatus, ...] = (
    VideoStatus.UNDEFINED,
    VideoStatus.FAILED,
)

PROCESSED_PREFIX = "processed-"

# Upload URL naming: <owner>-<epoch_ms>.<ext>
ALLOWED_UPLOAD_EXTENSIONS: frozenset[str] = frozenset(
    {"mp4", "mov", "avi", "webm", "mkv", "m4v"}
)
UPLOAD_CONTENT_TYPES: dict[str, str] = {
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    "m4v": "video/x-m4v",
}
