"""Tests for index.toml parsing and writing."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING

import pytest

from backend.filesystem.toml_manager import (
    PageConfig,
    SiteConfig,
    parse_site_config,
    write_site_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_parse_pages(tmp_content_dir: Path) -> None:
    config = parse_site_config(tmp_content_dir)

    assert config.title == "Test Site"
    assert config.description == "Flyers"
    assert [p.id for p in config.pages] == ["flyer", "spring"]
    spring = config.find_page("spring")
    assert spring is not None
    assert spring.template == "flyer-page"
    assert spring.flyer1 == "page1.png"
    assert spring.flyer2 == "page2.png"


def test_missing_index_returns_defaults(tmp_path: Path) -> None:
    config = parse_site_config(tmp_path)
    assert config.title == "My Site"
    assert config.pages == []
    assert config.home_page_id is None


def test_defaults_for_optional_page_fields(tmp_path: Path) -> None:
    (tmp_path / "index.toml").write_text('[[pages]]\nid = "about-us"\n')
    page = parse_site_config(tmp_path).pages[0]
    assert page.title == "About-Us"
    assert page.template == "basic-page"
    assert page.flyer1 is None


def test_home_defaults_to_first_page(tmp_content_dir: Path) -> None:
    assert parse_site_config(tmp_content_dir).home_page_id == "flyer"


def test_explicit_home(tmp_path: Path) -> None:
    (tmp_path / "index.toml").write_text(
        '[site]\nhome = "b"\n\n[[pages]]\nid = "a"\n\n[[pages]]\nid = "b"\n'
    )
    assert parse_site_config(tmp_path).home_page_id == "b"


def test_write_site_config_roundtrip(tmp_path: Path) -> None:
    config = SiteConfig(
        title="Flyers",
        description="Event flyers",
        home="spring",
        pages=[
            PageConfig(id="flyer", title="Flyer"),
            PageConfig(
                id="spring",
                title="Spring",
                template="flyer-page",
                flyer1="front.png",
                flyer2="back.png",
            ),
        ],
    )

    write_site_config(tmp_path, config)

    assert parse_site_config(tmp_path) == config


def test_write_omits_unset_flyers(tmp_path: Path) -> None:
    write_site_config(tmp_path, SiteConfig(pages=[PageConfig(id="flyer", title="Flyer")]))
    data = tomllib.loads((tmp_path / "index.toml").read_text())
    assert data["pages"] == [{"id": "flyer", "title": "Flyer", "template": "basic-page"}]
    assert "home" not in data["site"]


class TestInvalidConfig:
    def test_corrupted_index_toml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text("this is not valid [toml\n!@#$%")
        with pytest.raises(tomllib.TOMLDecodeError):
            parse_site_config(tmp_path)

    def test_page_missing_id(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[[pages]]\ntitle = "No id"\n')
        with pytest.raises(ValueError, match="missing required 'id'"):
            parse_site_config(tmp_path)

    def test_invalid_page_id(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[[pages]]\nid = "../etc"\n')
        with pytest.raises(ValueError, match="Invalid page id"):
            parse_site_config(tmp_path)

    def test_unknown_template(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[[pages]]\nid = "a"\ntemplate = "gallery"\n')
        with pytest.raises(ValueError, match="unknown template"):
            parse_site_config(tmp_path)

    def test_duplicate_page_id(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[[pages]]\nid = "a"\n\n[[pages]]\nid = "a"\n')
        with pytest.raises(ValueError, match="Duplicate page id"):
            parse_site_config(tmp_path)

    def test_unknown_home(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[site]\nhome = "nope"\n\n[[pages]]\nid = "a"\n')
        with pytest.raises(ValueError, match="Home page"):
            parse_site_config(tmp_path)

    @pytest.mark.parametrize("filename", ["../secret.png", "sub/page.png", "..", ""])
    def test_flyer_filename_must_be_plain(self, tmp_path: Path, filename: str) -> None:
        (tmp_path / "index.toml").write_text(
            f'[[pages]]\nid = "a"\ntemplate = "flyer-page"\nflyer1 = "{filename}"\n'
        )
        with pytest.raises(ValueError, match="invalid flyer1"):
            parse_site_config(tmp_path)

    @pytest.mark.parametrize(
        "page_toml",
        [
            'id = 5\n',
            'id = "a"\ntitle = 3\n',
            'id = "a"\ntemplate = ["x"]\n',
            'id = "a"\ntemplate = "flyer-page"\nflyer1 = 5\n',
            'id = "a"\ntemplate = "flyer-page"\nflyer2 = true\n',
        ],
    )
    def test_wrongly_typed_page_field(self, tmp_path: Path, page_toml: str) -> None:
        (tmp_path / "index.toml").write_text(f"[[pages]]\n{page_toml}")
        with pytest.raises(ValueError, match="must be a string"):
            parse_site_config(tmp_path)

    @pytest.mark.parametrize(
        "site_toml",
        ['title = 1\n', 'description = ["x"]\n', 'home = 2\n'],
    )
    def test_wrongly_typed_site_field(self, tmp_path: Path, site_toml: str) -> None:
        (tmp_path / "index.toml").write_text(f"[site]\n{site_toml}\n[[pages]]\nid = \"a\"\n")
        with pytest.raises(ValueError, match="must be a string"):
            parse_site_config(tmp_path)

    def test_site_must_be_table(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('site = "x"\n')
        with pytest.raises(ValueError, match=r"\[site\] must be a table"):
            parse_site_config(tmp_path)

    def test_pages_must_be_array(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('pages = "x"\n')
        with pytest.raises(ValueError, match="array of tables"):
            parse_site_config(tmp_path)

    def test_empty_template_is_unknown(self, tmp_path: Path) -> None:
        (tmp_path / "index.toml").write_text('[[pages]]\nid = "a"\ntemplate = ""\n')
        with pytest.raises(ValueError, match="unknown template"):
            parse_site_config(tmp_path)
