"""
Video transcoding — pluggable capability with an ffmpeg implementation.

The pipeline only depends on ``Transcoder.convert``. ``FfmpegTranscoder``
scales the video down to a fixed output height, correcting for the sample
aspect ratio first so that anamorphic sources keep their display shape:

  ffmpeg -y -i <in> -vf scale=iw*sar:<height>:force_original_aspect_ratio=decrease <out>
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from app.exceptions import ConversionError

logger = logging.getLogger(__name__)

# Keep error bodies readable; ffmpeg prints the whole banner to stderr.
_MAX_DIAGNOSTIC_CHARS = 2000


@dataclass(frozen=True)
class TranscodeParams:
    target_height: int = 360

    def scale_filter(self) -> str:
        return f"scale=iw*sar:{self.target_height}:force_original_aspect_ratio=decrease"


class Transcoder(ABC):
    """Converts a local input file into a local output file."""

    @abstractmethod
    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        params: TranscodeParams,
    ) -> None:
        """Write the converted video to ``output_path`` or raise ConversionError."""
        ...


class FfmpegTranscoder(Transcoder):
    def __init__(self, binary: str = "ffmpeg", timeout_secs: float | None = None) -> None:
        self._binary = binary
        self._timeout = timeout_secs

    def build_args(
        self,
        input_path: Path,
        output_path: Path,
        params: TranscodeParams,
    ) -> list[str]:
        return [
            self._binary,
            "-y",
            "-i", str(input_path),
            "-vf", params.scale_filter(),
            str(output_path),
        ]

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        params: TranscodeParams,
    ) -> None:
        args = self.build_args(input_path, output_path, params)
        logger.info("Running %s", " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Error executing %s: %s", self._binary, exc)
            raise ConversionError(f"Could not start {self._binary}: {exc}") from exc

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            logger.error("%s timed out after %ss on %s", self._binary, self._timeout, input_path)
            raise ConversionError(f"Timed out after {self._timeout}s.") from exc
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            logger.warning("%s cancelled on %s, process killed", self._binary, input_path)
            raise

        if proc.returncode != 0:
            diagnostic = stderr.decode("utf-8", errors="replace").strip()
            logger.error("FFmpeg error (exit %s): %s", proc.returncode, diagnostic)
            raise ConversionError(diagnostic[-_MAX_DIAGNOSTIC_CHARS:])

        logger.info("Converted %s -> %s", input_path, output_path)
