"""FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
import tomllib
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.trustedhost import TrustedHostMiddleware

from backend.api.health import VERSION
from backend.api.health import router as health_router
from backend.api.pages import router as pages_router
from backend.api.site import router as site_router
from backend.config import Settings
from backend.exceptions import InternalServerError
from backend.filesystem.content_manager import ContentManager, ensure_content_dir
from backend.rendering.renderer import RenderError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def init_content(app: FastAPI, settings: Settings) -> ContentManager:
    """Create the content scaffold and attach a content manager to the app."""
    ensure_content_dir(settings.content_dir)
    content_manager = ContentManager(content_dir=settings.content_dir, urls=settings.urls())
    app.state.content_manager = content_manager
    return content_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: startup and shutdown."""
    settings: Settings = app.state.settings
    _configure_logging(settings.debug)
    logger.info("Starting Flyersite (debug=%s)", settings.debug)

    try:
        content_manager = init_content(app, settings)
    except Exception as exc:
        logger.critical(
            "Failed to initialize content directory at %s: %s.", settings.content_dir, exc
        )
        raise

    try:
        site_config = content_manager.site_config
    except (tomllib.TOMLDecodeError, ValueError) as exc:
        logger.critical("Invalid site configuration in %s: %s", settings.content_dir, exc)
        raise
    logger.info("Loaded %d pages for %r", len(site_config.pages), site_config.title)

    yield

    logger.info("Flyersite stopped")


def _mount_path(url: str) -> str | None:
    """Local mount path for a base URL, or None for URLs served elsewhere."""
    if not url.startswith("/") or url.startswith("//"):
        return None
    return url.rstrip("/") or None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    docs_enabled = settings.debug or settings.expose_docs

    app = FastAPI(
        title="Flyersite",
        description="Flyer pages rendered from a content directory",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=500)

    trusted_hosts = settings.trusted_hosts or (
        ["localhost", "127.0.0.1", "::1", "test", "testserver"] if settings.debug else []
    )
    if trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

    content_security_policy = settings.effective_content_security_policy()

    @app.middleware("http")
    async def security_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        if settings.security_headers_enabled:
            response.headers.setdefault("X-Content-Type-Options", "nosniff")
            response.headers.setdefault("X-Frame-Options", "DENY")
            response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
            if content_security_policy:
                response.headers.setdefault(
                    "Content-Security-Policy",
                    content_security_policy,
                )
        return response

    app.include_router(health_router)
    app.include_router(pages_router)

    # Static mounts must precede the catch-all page route.
    templates_mount = _mount_path(settings.templates_url)
    if templates_mount is not None:
        app.mount(
            templates_mount,
            StaticFiles(directory=str(settings.static_dir), check_dir=False),
            name="templates",
        )
    assets_mount = _mount_path(settings.assets_url)
    if assets_mount is not None:
        app.mount(
            assets_mount,
            StaticFiles(directory=str(settings.content_dir / "assets" / "files"), check_dir=False),
            name="assets",
        )

    app.include_router(site_router)

    # Global exception handlers

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = err.get("loc", ())
            field = str(loc[-1]) if loc else "unknown"
            errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        logger.warning(
            "RequestValidationError in %s %s: %s",
            request.method,
            request.url.path,
            errors,
        )
        return JSONResponse(status_code=422, content={"detail": errors})

    @app.exception_handler(RenderError)
    async def render_error_handler(request: Request, exc: RenderError) -> JSONResponse:
        logger.error(
            "RenderError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Page rendering failed"},
        )

    @app.exception_handler(tomllib.TOMLDecodeError)
    async def toml_error_handler(request: Request, exc: tomllib.TOMLDecodeError) -> JSONResponse:
        logger.error(
            "TOMLDecodeError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Invalid site configuration"},
        )

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
        if isinstance(exc, (ConnectionError, TimeoutError)):
            raise exc
        logger.error("OSError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Storage operation failed"},
        )

    @app.exception_handler(InternalServerError)
    async def internal_server_error_handler(
        request: Request, exc: InternalServerError
    ) -> JSONResponse:
        logger.error(
            "InternalServerError in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.error("ValueError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        message = str(exc) or "Invalid value"
        return JSONResponse(
            status_code=422,
            content={"detail": message},
        )

    @app.exception_handler(TypeError)
    async def type_error_handler(request: Request, exc: TypeError) -> JSONResponse:
        logger.error(
            "[BUG] TypeError in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
