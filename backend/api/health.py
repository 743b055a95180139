"""Health check endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_content_manager
from backend.filesystem.content_manager import ContentManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str
    version: str
    pages: int


@router.get("/api/health", response_model=HealthResponse)
async def health_check(
    content_manager: Annotated[ContentManager, Depends(get_content_manager)],
) -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    try:
        page_count = len(content_manager.site_config.pages)
    except (OSError, ValueError):
        logger.warning("Health check could not read site configuration", exc_info=True)
        return HealthResponse(status="degraded", version=VERSION, pages=0)

    return HealthResponse(status="ok", version=VERSION, pages=page_count)
