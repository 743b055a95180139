"""Content directory reader: site config, pages and their stored files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import quote

from backend.filesystem.toml_manager import SiteConfig, parse_site_config
from backend.rendering.context import Page, PageFile, RenderConfig

if TYPE_CHECKING:
    from pathlib import Path

    from backend.rendering.context import Urls

logger = logging.getLogger(__name__)

DEFAULT_INDEX_TOML = (
    '[site]\ntitle = "My Site"\n\n'
    '[[pages]]\nid = "flyer"\ntitle = "Flyer"\ntemplate = "basic-page"\n'
)


def ensure_content_dir(content_dir: Path) -> None:
    """Ensure required content scaffold entries exist without overwriting existing files."""
    if content_dir.exists() and not content_dir.is_dir():
        msg = f"Content path exists but is not a directory: {content_dir}"
        raise NotADirectoryError(msg)

    if not content_dir.exists():
        logger.info("Creating default content directory at %s", content_dir)
        content_dir.mkdir(parents=True)

    files_dir = content_dir / "assets" / "files"
    if not files_dir.exists():
        files_dir.mkdir(parents=True)
        logger.info("Created missing content scaffold directory: %s", files_dir)

    index_toml = content_dir / "index.toml"
    if not index_toml.exists():
        index_toml.write_text(DEFAULT_INDEX_TOML, encoding="utf-8")
        logger.info("Created missing content scaffold file: %s", index_toml)


@dataclass
class ContentManager:
    """Reads pages from the content directory and resolves their file URLs."""

    content_dir: Path
    urls: Urls
    _site_config: SiteConfig | None = field(default=None, repr=False)

    @property
    def files_dir(self) -> Path:
        return self.content_dir / "assets" / "files"

    @property
    def site_config(self) -> SiteConfig:
        """Get site configuration, loading if needed."""
        if self._site_config is None:
            self._site_config = parse_site_config(self.content_dir)
        return self._site_config

    def reload_config(self) -> None:
        """Reload site configuration from disk."""
        self._site_config = parse_site_config(self.content_dir)

    @property
    def render_config(self) -> RenderConfig:
        return RenderConfig(urls=self.urls, site_title=self.site_config.title)

    def file_url(self, page_id: str, filename: str) -> str:
        """Public URL of a file stored for a page."""
        return f"{self.urls.assets}{quote(page_id)}/{quote(filename)}"

    def flyer_path(self, page_id: str, filename: str) -> Path:
        """Resolve a stored page file, rejecting paths outside the files directory."""
        full_path = (self.files_dir / page_id / filename).resolve()
        if not full_path.is_relative_to(self.files_dir.resolve()):
            raise ValueError(f"Path traversal detected: {page_id}/{filename}")
        return full_path

    def _page_file(self, page_id: str, filename: str | None) -> PageFile | None:
        if filename is None:
            return None
        if not self.flyer_path(page_id, filename).is_file():
            logger.warning("Page %s references missing file %s", page_id, filename)
        return PageFile(filename=filename, url=self.file_url(page_id, filename))

    def get_page(self, page_id: str) -> Page | None:
        """Build the template-facing page object for a page id."""
        page_cfg = self.site_config.find_page(page_id)
        if page_cfg is None:
            return None
        return Page(
            id=page_cfg.id,
            title=page_cfg.title,
            template=page_cfg.template,
            flyer1=self._page_file(page_cfg.id, page_cfg.flyer1),
            flyer2=self._page_file(page_cfg.id, page_cfg.flyer2),
        )
