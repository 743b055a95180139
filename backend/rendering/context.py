"""Objects exposed to page templates as ``page`` and ``config``."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Urls:
    """Base URLs under which static files are served. Each ends with ``/``."""

    templates: str
    assets: str


@dataclass(frozen=True)
class PageFile:
    """A file attached to a page, e.g. one side of a flyer."""

    filename: str
    url: str


@dataclass(frozen=True)
class Page:
    """A page as seen by a template. Immutable for the duration of a render."""

    id: str
    title: str
    template: str = "basic-page"
    flyer1: PageFile | None = None
    flyer2: PageFile | None = None


@dataclass(frozen=True)
class RenderConfig:
    """Process-wide values available to every template."""

    urls: Urls
    site_title: str = ""
