"""
Video processing service — domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site. Every pipeline failure derives
from PipelineError; FastAPI renders them as ``{"detail": "..."}``.
"""
from fastapi import HTTPException, status


class PipelineError(HTTPException):
    """Base for every failure the ingest-transcode-publish pipeline reports."""


# ── Client input (400) ───────────────────────────────────────────────────────

_DECODE_MESSAGES: dict[str, str] = {
    "encoding": "Bad Request: Invalid base64.",
    "charset": "Bad Request: Invalid UTF-8.",
    "format": "Bad Request: Invalid JSON.",
    "missing_field": "Bad Request: Missing filename.",
    "bad_identifier": "Bad Request: Invalid filename.",
}


class DecodeError(PipelineError):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_DECODE_MESSAGES[kind],
        )


class DuplicateError(PipelineError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad Request: Video is already processing or processed.",
        )


# ── Infrastructure (500) ─────────────────────────────────────────────────────

class TransferError(PipelineError):
    def __init__(self, direction: str, reason: str = "") -> None:
        self.direction = direction
        self.reason = reason
        if direction == "download":
            message = "Failed to download raw video."
        else:
            message = "Failed to upload processed video."
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )


class ConversionError(PipelineError):
    def __init__(self, output: str = "") -> None:
        self.output = output
        message = "Failed to convert video."
        if output:
            message = f"{message} {output}"
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )


class StoreError(PipelineError):
    def __init__(self, operation: str, reason: str = "") -> None:
        self.operation = operation
        self.reason = reason
        message = f"Failed to {operation} video record."
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )


# ── Upload URL ───────────────────────────────────────────────────────────────

class S3PresignError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not generate upload URL. Please try again.",
        )
