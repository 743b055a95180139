"""Page service: page retrieval and rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from backend.rendering.renderer import render_page
from backend.schemas.page import (
    PageFileResponse,
    PageResponse,
    PageSummary,
    SiteConfigResponse,
)

if TYPE_CHECKING:
    from pathlib import Path

    from backend.filesystem.content_manager import ContentManager
    from backend.rendering.context import PageFile


def _file_response(page_file: PageFile | None) -> PageFileResponse | None:
    if page_file is None:
        return None
    return PageFileResponse(filename=page_file.filename, url=page_file.url)


def get_site_config(content_manager: ContentManager) -> SiteConfigResponse:
    """Get the site configuration with its page list."""
    cfg = content_manager.site_config
    return SiteConfigResponse(
        title=cfg.title,
        description=cfg.description,
        home=cfg.home_page_id,
        pages=[PageSummary(id=p.id, title=p.title, template=p.template) for p in cfg.pages],
    )


def get_page(content_manager: ContentManager, page_id: str) -> PageResponse | None:
    """Get page metadata with resolved file URLs."""
    page = content_manager.get_page(page_id)
    if page is None:
        return None
    return PageResponse(
        id=page.id,
        title=page.title,
        template=page.template,
        flyer1=_file_response(page.flyer1),
        flyer2=_file_response(page.flyer2),
    )


def render_page_html(
    content_manager: ContentManager,
    page_id: str,
    templates_dir: Path | None = None,
) -> str | None:
    """Render a page to HTML, or return None if the page does not exist."""
    page = content_manager.get_page(page_id)
    if page is None:
        return None
    return render_page(page, content_manager.render_config, templates_dir=templates_dir)


def render_home_html(
    content_manager: ContentManager,
    templates_dir: Path | None = None,
) -> str | None:
    """Render the site's home page, or return None if the site has no pages."""
    home_id = content_manager.site_config.home_page_id
    if home_id is None:
        return None
    return render_page_html(content_manager, home_id, templates_dir)
