"""Rendered HTML page routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from backend.api.deps import get_content_manager, get_settings
from backend.config import Settings
from backend.filesystem.content_manager import ContentManager
from backend.filesystem.toml_manager import PAGE_ID_PATTERN
from backend.services.page_service import render_home_html, render_page_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site"])


@router.get("/", response_class=HTMLResponse)
async def home(
    content_manager: Annotated[ContentManager, Depends(get_content_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HTMLResponse:
    """Render the home page."""
    html = render_home_html(content_manager, settings.templates_dir)
    if html is None:
        raise HTTPException(status_code=404, detail="No pages configured")
    return HTMLResponse(html)


@router.get("/{page_id}", response_class=HTMLResponse)
async def page(
    page_id: str,
    content_manager: Annotated[ContentManager, Depends(get_content_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HTMLResponse:
    """Render a page by id."""
    if not PAGE_ID_PATTERN.match(page_id):
        raise HTTPException(status_code=400, detail="Invalid page ID")
    html = render_page_html(content_manager, page_id, settings.templates_dir)
    if html is None:
        raise HTTPException(status_code=404, detail="Page not found")
    logger.debug("Rendered page %s", page_id)
    return HTMLResponse(html)
