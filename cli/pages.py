"""CLI for managing and exporting Flyersite pages."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from backend.config import Settings
from backend.filesystem.content_manager import ContentManager, ensure_content_dir
from backend.filesystem.toml_manager import PageConfig, write_site_config
from backend.rendering.context import Urls
from backend.rendering.renderer import PAGE_TEMPLATES, RenderError, render_page


class CliError(Exception):
    """User-facing CLI error; printed to stderr with exit status 1."""


def build_content_manager(args: argparse.Namespace) -> ContentManager:
    """Create a content manager from CLI arguments, falling back to settings."""
    settings = Settings()
    urls = Urls(
        templates=args.templates_url or settings.templates_url,
        assets=args.assets_url or settings.assets_url,
    )
    if not urls.templates.endswith("/") or not urls.assets.endswith("/"):
        raise CliError("Base URLs must end with '/'")
    return ContentManager(content_dir=Path(args.dir), urls=urls)


def _render(cm: ContentManager, page_id: str) -> str:
    page = cm.get_page(page_id)
    if page is None:
        raise CliError(f"Page not found: {page_id}")
    try:
        return render_page(page, cm.render_config)
    except RenderError as exc:
        raise CliError(str(exc)) from exc


def cmd_list(cm: ContentManager) -> None:
    for page in cm.site_config.pages:
        print(f"{page.id}\t{page.template}\t{page.title}")


def cmd_add(cm: ContentManager, args: argparse.Namespace) -> None:
    """Append a page to index.toml."""
    ensure_content_dir(cm.content_dir)
    config = cm.site_config
    if config.find_page(args.id) is not None:
        raise CliError(f"Page already exists: {args.id}")
    if args.template == "flyer-page" and (args.flyer1 is None or args.flyer2 is None):
        raise CliError("flyer-page requires --flyer1 and --flyer2")

    config.pages.append(
        PageConfig(
            id=args.id,
            title=args.title if args.title is not None else args.id.title(),
            template=args.template,
            flyer1=args.flyer1,
            flyer2=args.flyer2,
        )
    )
    write_site_config(cm.content_dir, config)
    # Re-parse so an invalid entry is reported now rather than at serve time.
    try:
        cm.reload_config()
    except ValueError as exc:
        config.pages.pop()
        write_site_config(cm.content_dir, config)
        raise CliError(str(exc)) from exc
    print(f"Added page {args.id}")


def cmd_render(cm: ContentManager, args: argparse.Namespace) -> None:
    html = _render(cm, args.id)
    if args.out is None:
        sys.stdout.write(html)
    else:
        Path(args.out).write_text(html, encoding="utf-8")
        print(f"Wrote {args.out}")


def cmd_export(cm: ContentManager, args: argparse.Namespace) -> None:
    """Render every page to OUT_DIR/<id>.html.

    Nothing is written unless every page renders.
    """
    out_dir = Path(args.out_dir)
    rendered = {page_cfg.id: _render(cm, page_cfg.id) for page_cfg in cm.site_config.pages}
    out_dir.mkdir(parents=True, exist_ok=True)
    for page_id, html in rendered.items():
        (out_dir / f"{page_id}.html").write_text(html, encoding="utf-8")
    print(f"Exported {len(rendered)} pages to {out_dir}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flyersite-pages",
        description="Manage and export Flyersite pages",
    )
    parser.add_argument("--dir", "-d", default="content", help="Content directory")
    parser.add_argument("--templates-url", help="Base URL of template static files")
    parser.add_argument("--assets-url", help="Base URL of page files")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List pages")

    add = subparsers.add_parser("add", help="Add a page to index.toml")
    add.add_argument("id", help="Page id")
    add.add_argument("--title", help="Page title (default: id title-cased)")
    add.add_argument("--template", choices=sorted(PAGE_TEMPLATES), default="basic-page")
    add.add_argument("--flyer1", help="Filename of flyer page one")
    add.add_argument("--flyer2", help="Filename of flyer page two")

    render = subparsers.add_parser("render", help="Render a page to HTML")
    render.add_argument("id", help="Page id")
    render.add_argument("--out", "-o", help="Output file (default: stdout)")

    export = subparsers.add_parser("export", help="Render all pages into a directory")
    export.add_argument("out_dir", help="Output directory")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cm = build_content_manager(args)
        if args.command == "list":
            cmd_list(cm)
        elif args.command == "add":
            cmd_add(cm, args)
        elif args.command == "render":
            cmd_render(cm, args)
        elif args.command == "export":
            cmd_export(cm, args)
    except (CliError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
