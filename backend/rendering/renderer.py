"""Jinja2-based page renderer."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

if TYPE_CHECKING:
    from backend.rendering.context import Page, RenderConfig

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

PAGE_TEMPLATES: frozenset[str] = frozenset({"basic-page", "flyer-page"})


class RenderError(RuntimeError):
    """Raised when a page cannot be rendered (unknown template, missing value)."""


@lru_cache(maxsize=8)
def get_environment(templates_dir: Path = DEFAULT_TEMPLATES_DIR) -> Environment:
    """Return the shared Jinja2 environment for a templates directory."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_page(
    page: Page,
    config: RenderConfig,
    *,
    templates_dir: Path | None = None,
) -> str:
    """Render a page to a complete HTML document.

    The output depends only on ``page`` and ``config``; rendering the same
    pair twice yields identical text.
    """
    if page.template not in PAGE_TEMPLATES:
        raise RenderError(f"Unknown page template: {page.template}")

    env = get_environment(templates_dir or DEFAULT_TEMPLATES_DIR)
    try:
        template = env.get_template(f"{page.template}.html")
        return template.render(page=page, config=config)
    except TemplateNotFound as exc:
        raise RenderError(f"Template file not found: {exc.name}") from exc
    except TemplateSyntaxError as exc:
        raise RenderError(f"Template syntax error in {exc.name}:{exc.lineno}: {exc}") from exc
    except UndefinedError as exc:
        logger.warning("Page %s references a missing value: %s", page.id, exc)
        raise RenderError(f"Page {page.id!r} is missing a value: {exc}") from exc
