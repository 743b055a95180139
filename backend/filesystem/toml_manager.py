"""TOML configuration reader/writer for index.toml."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import tomli_w

from backend.rendering.renderer import PAGE_TEMPLATES

if TYPE_CHECKING:
    from pathlib import Path

PAGE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass
class PageConfig:
    """A page entry from index.toml. Flyer values are filenames, not URLs."""

    id: str
    title: str
    template: str = "basic-page"
    flyer1: str | None = None
    flyer2: str | None = None


@dataclass
class SiteConfig:
    """Parsed site configuration from index.toml."""

    title: str = "My Site"
    description: str = ""
    home: str | None = None
    pages: list[PageConfig] = field(default_factory=list)

    def find_page(self, page_id: str) -> PageConfig | None:
        return next((p for p in self.pages if p.id == page_id), None)

    @property
    def home_page_id(self) -> str | None:
        """The configured home page, falling back to the first page."""
        if self.home is not None:
            return self.home
        return self.pages[0].id if self.pages else None


def _str_field(table: dict[str, Any], key: str, where: str) -> str | None:
    """Return an optional string value, rejecting other TOML types."""
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{where} field {key!r} must be a string, got {type(value).__name__}")
    return value


def _parse_page(page_data: Any) -> PageConfig:
    if not isinstance(page_data, dict):
        raise ValueError(f"Page entry must be a table: {page_data!r}")
    if "id" not in page_data:
        msg = f"Page entry missing required 'id' field: {page_data}"
        raise ValueError(msg)
    page_id = _str_field(page_data, "id", "Page entry")
    if page_id is None or not PAGE_ID_PATTERN.match(page_id):
        raise ValueError(f"Invalid page id: {page_id!r}")

    where = f"Page {page_id!r}"
    template = _str_field(page_data, "template", where)
    if template is None:
        template = "basic-page"
    if template not in PAGE_TEMPLATES:
        raise ValueError(f"Page {page_id!r} uses unknown template {template!r}")

    flyers: dict[str, str | None] = {}
    for key in ("flyer1", "flyer2"):
        value = _str_field(page_data, key, where)
        if value is not None and ("/" in value or "\\" in value or value in {"", ".", ".."}):
            raise ValueError(f"Page {page_id!r} has an invalid {key} filename: {value!r}")
        flyers[key] = value

    title = _str_field(page_data, "title", where)
    return PageConfig(
        id=page_id,
        title=title if title is not None else page_id.title(),
        template=template,
        flyer1=flyers["flyer1"],
        flyer2=flyers["flyer2"],
    )


def parse_site_config(content_dir: Path) -> SiteConfig:
    """Parse index.toml from the content directory.

    Raises ``tomllib.TOMLDecodeError`` for malformed files and ``ValueError``
    for well-formed files with invalid or wrongly typed entries.
    """
    index_path = content_dir / "index.toml"
    if not index_path.exists():
        return SiteConfig()

    data = tomllib.loads(index_path.read_text(encoding="utf-8"))
    site_data = data.get("site", {})
    if not isinstance(site_data, dict):
        raise ValueError("[site] must be a table")
    pages_data = data.get("pages", [])
    if not isinstance(pages_data, list):
        raise ValueError("[[pages]] must be an array of tables")

    pages: list[PageConfig] = []
    seen: set[str] = set()
    for page_data in pages_data:
        page = _parse_page(page_data)
        if page.id in seen:
            raise ValueError(f"Duplicate page id: {page.id!r}")
        seen.add(page.id)
        pages.append(page)

    home = _str_field(site_data, "home", "[site]")
    if home is not None and home not in seen:
        raise ValueError(f"Home page {home!r} is not defined in [[pages]]")

    title = _str_field(site_data, "title", "[site]")
    return SiteConfig(
        title=title if title is not None else "My Site",
        description=_str_field(site_data, "description", "[site]") or "",
        home=home,
        pages=pages,
    )


def write_site_config(content_dir: Path, config: SiteConfig) -> None:
    """Write site configuration back to index.toml."""
    site_data: dict[str, Any] = {
        "title": config.title,
        "description": config.description,
    }
    if config.home is not None:
        site_data["home"] = config.home

    pages_data: list[dict[str, Any]] = []
    for page in config.pages:
        entry: dict[str, Any] = {"id": page.id, "title": page.title, "template": page.template}
        if page.flyer1 is not None:
            entry["flyer1"] = page.flyer1
        if page.flyer2 is not None:
            entry["flyer2"] = page.flyer2
        pages_data.append(entry)

    index_path = content_dir / "index.toml"
    index_path.write_bytes(tomli_w.dumps({"site": site_data, "pages": pages_data}).encode("utf-8"))
