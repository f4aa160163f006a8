"""
Video — request dependencies.

The pipeline and settings are built once in the app lifespan and kept on
``app.state``; handlers receive them through these dependencies so tests can
swap them with ``app.dependency_overrides``.
"""
from fastapi import Request

from app.config import Settings
from app.video.pipeline import VideoPipeline
from shared.auth import get_current_user_optional, get_current_user_required

__all__ = [
    "get_current_user_optional",
    "get_current_user_required",
    "get_pipeline",
    "get_settings",
]


def get_pipeline(request: Request) -> VideoPipeline:
    return request.app.state.pipeline


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
