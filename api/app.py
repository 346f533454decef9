"""
FastAPI application factory for the deal feed explorer.

Usage:
    python -m api.app                                  # Dev server on port 8000
    FEED_API_BASE_URL=https://feed.example.com python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

Framework: FastAPI + Jinja2 templates + HTMX.  The table is rendered on the
server; HTMX swaps the table partial on every page, size or source change so
the browser never holds feed state of its own.

Logging: one stream handler, structured JSON when APP_LOG_FORMAT=json.
CORS: configurable origins via APP_CORS_ORIGINS.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Mapping

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api.feed_source import (
    FeedSource,
    FeedSourceKind,
    SourceError,
    get_feed_sources,
)
from api.routes import feed
from api.routes import frontend as frontend_routes
from utils.config import PAGE_SIZES, AppConfig
from utils.formatting import format_count

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("deal_feed_explorer")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report configuration on startup; warn when a source cannot work."""
    _logger.info("config %s", _cfg.to_dict(redact=True))
    if not _cfg.remote_configured:
        _logger.warning("FEED_API_BASE_URL not set; only the local file source will load")
    if not _cfg.local_path.exists():
        _logger.warning("local snapshot not found at %s", _cfg.local_path)
    yield


def create_app(
    sources: Mapping[FeedSourceKind, FeedSource] | None = None,
    default_page_size: int | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        sources: Override the feed adapters (useful for testing).  When
            omitted they are built from environment configuration on first
            use.
        default_page_size: Page size the table starts with and falls back
            to; defaults to FEED_DEFAULT_PAGE_SIZE.

    Raises:
        ValueError: default_page_size is not one of PAGE_SIZES.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Deal Feed Explorer",
        summary="Paginated browser for the merger & acquisition event feed.",
        description=(
            "## Deal Feed Explorer\n\n"
            "Pages through acquisition-event records served either by the "
            "remote QueryFeed service or by a bundled JSON snapshot.\n\n"
            "### Key concepts\n"
            "- **Page numbers** are 1-based; `TotalItems` counts all pages.\n"
            "- **Source** `api` calls the remote feed with the configured "
            "developer key; `file` slices the local snapshot.\n"
            "- Records are passed through unchanged; columns are open-ended."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "feed",
                "description": "One page of feed records from either source.",
            },
            {
                "name": "meta",
                "description": "Health check.",
            },
        ],
    )
    app.state.feed_sources = dict(sources) if sources is not None else None
    if default_page_size is None:
        default_page_size = _cfg.default_page_size
    if default_page_size not in PAGE_SIZES:
        raise ValueError(
            f"default_page_size must be one of {PAGE_SIZES}, got {default_page_size}"
        )
    app.state.default_page_size = default_page_size

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and tag it with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        return response

    # ── Content Security Policy + security headers ────────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add Content-Security-Policy, X-Content-Type-Options, and X-Frame-Options."""
        response = await call_next(request)
        # HTMX is loaded from unpkg.com.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' unpkg.com; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    @app.exception_handler(SourceError)
    async def source_error_handler(request: Request, exc: SourceError):
        return JSONResponse(
            status_code=502,
            content={"error": "Feed unavailable", "detail": str(exc), "status_code": 502},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health(request: Request):
        """Report which feed sources are usable without contacting them."""
        local = get_feed_sources(request).get(FeedSourceKind.LOCAL)
        local_path = getattr(local, "path", None)
        return {
            "status": "ok",
            "remote_configured": _cfg.remote_configured,
            "local_snapshot": str(local_path) if local_path else None,
            "local_snapshot_exists": bool(local_path and Path(local_path).exists()),
        }

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(feed.router, prefix="/api/v1")

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    if templates_dir.exists():
        templates = Jinja2Templates(directory=str(templates_dir))
        templates.env.filters["fmt_count"] = format_count

        # Wire templates into the frontend router
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)

        # HTML 404/500 pages for browser routes
        frontend_routes.register_error_handlers(app)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
