"""Shared test fixtures for Flyersite."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from backend.config import Settings
from backend.filesystem.content_manager import ContentManager
from backend.main import create_app, init_content
from backend.rendering.context import Urls

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

TEST_INDEX_TOML = (
    '[site]\ntitle = "Test Site"\ndescription = "Flyers"\n\n'
    '[[pages]]\nid = "flyer"\ntitle = "Flyer"\ntemplate = "basic-page"\n\n'
    '[[pages]]\nid = "spring"\ntitle = "Spring Flyer"\ntemplate = "flyer-page"\n'
    'flyer1 = "page1.png"\nflyer2 = "page2.png"\n'
)


@asynccontextmanager
async def create_test_client(settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client with a fully initialized app.

    Manually performs the work of the application lifespan because
    ASGITransport does not trigger it.
    """
    app = create_app(settings)
    init_content(app, settings)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def tmp_content_dir(tmp_path: Path) -> Path:
    """Create a temporary content directory with two pages and their files."""
    content = tmp_path / "content"
    files = content / "assets" / "files" / "spring"
    files.mkdir(parents=True)
    (files / "page1.png").write_bytes(b"\x89PNG\r\n\x1a\nfront")
    (files / "page2.png").write_bytes(b"\x89PNG\r\n\x1a\nback")
    (content / "index.toml").write_text(TEST_INDEX_TOML, encoding="utf-8")
    return content


@pytest.fixture
def test_settings(tmp_content_dir: Path) -> Settings:
    """Create test settings with temporary paths."""
    return Settings(
        _env_file=None,
        debug=True,
        content_dir=tmp_content_dir,
    )


@pytest.fixture
def content_manager(tmp_content_dir: Path) -> ContentManager:
    return ContentManager(
        content_dir=tmp_content_dir,
        urls=Urls(templates="/site/templates/", assets="/site/assets/files/"),
    )


@pytest.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(test_settings) as ac:
        yield ac
