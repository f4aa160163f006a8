"""Local scratch directories and best-effort cleanup."""
from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def setup_directories(*dirs: str | os.PathLike[str]) -> None:
    for directory in dirs:
        Path(directory).mkdir(parents=True, exist_ok=True)


def cleanup(paths: Iterable[str | os.PathLike[str]]) -> None:
    """Delete each file that exists. Never raises; failures are logged."""
    for path in paths:
        local_path = Path(path)
        if not local_path.exists():
            logger.info("File not found at %s, skipping the delete.", local_path)
            continue
        try:
            local_path.unlink()
        except OSError as exc:
            logger.error("Failed to delete file at %s: %s", local_path, exc)
        else:
            logger.info("File deleted at %s", local_path)
