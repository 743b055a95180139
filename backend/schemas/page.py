"""Page-related schemas."""

from __future__ import annotations

from pydantic import BaseModel


class PageSummary(BaseModel):
    """Page entry in the site listing."""

    id: str
    title: str
    template: str


class PageFileResponse(BaseModel):
    """A file attached to a page."""

    filename: str
    url: str


class PageResponse(BaseModel):
    """Page content response."""

    id: str
    title: str
    template: str
    flyer1: PageFileResponse | None = None
    flyer2: PageFileResponse | None = None


class SiteConfigResponse(BaseModel):
    """Site configuration response."""

    title: str
    description: str
    home: str | None
    pages: list[PageSummary]
