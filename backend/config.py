"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.rendering.context import Urls

_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Flyersite application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    debug: bool = False
    expose_docs: bool = False

    # Paths
    content_dir: Path = Path("./content")
    templates_dir: Path = _PACKAGE_DIR / "templates"
    static_dir: Path = _PACKAGE_DIR / "static"

    # Public base URLs
    templates_url: str = "/site/templates/"
    assets_url: str = "/site/assets/files/"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    trusted_hosts: list[str] = Field(default_factory=list)

    # Response hardening
    security_headers_enabled: bool = True
    content_security_policy: str = (
        "default-src 'self'; "
        "style-src 'self'; "
        "img-src 'self' https: data:; "
        "base-uri 'self'; "
        "form-action 'self'; "
        "frame-ancestors 'none'"
    )

    @field_validator("templates_url", "assets_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Base URL must not be empty")
        return value if value.endswith("/") else f"{value}/"

    def urls(self) -> Urls:
        """Public base URLs handed to page templates."""
        return Urls(templates=self.templates_url, assets=self.assets_url)

    def effective_content_security_policy(self) -> str:
        """CSP with the stylesheet origin of a remote ``templates_url`` allowed."""
        policy = self.content_security_policy
        parts = urlsplit(self.templates_url)
        if not policy or parts.scheme not in {"http", "https"} or not parts.netloc:
            return policy
        origin = f"{parts.scheme}://{parts.netloc}"

        directives = [d.strip() for d in policy.split(";") if d.strip()]
        for i, directive in enumerate(directives):
            name, _, sources = directive.partition(" ")
            if name == "style-src":
                if origin not in sources.split():
                    directives[i] = f"{directive} {origin}"
                break
        else:
            directives.append(f"style-src 'self' {origin}")
        return "; ".join(directives)
