"""Shared API dependencies: settings, content manager."""

from __future__ import annotations

from fastapi import Request

from backend.config import Settings
from backend.exceptions import InternalServerError
from backend.filesystem.content_manager import ContentManager


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_content_manager(request: Request) -> ContentManager:
    """Get content manager from app state."""
    cm: ContentManager | None = getattr(request.app.state, "content_manager", None)
    if cm is None:
        raise InternalServerError("Content manager accessed before application startup")
    return cm
