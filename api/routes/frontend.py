"""
Frontend HTML routes.

Serves the Jinja2 templates for the feed table and its HTMX partials.

Routes:
    GET /                   → index.html (stats, source select, table, pager)
    GET /partials/table     → partials/table.html (HTMX swap target)

The browser holds no state of its own: every control sends the current
page, page size, source and last known total back as query parameters,
plus the ``action`` to apply.  The route rebuilds a ``TableView`` from them,
applies the action and renders the result:

    fetch dispatched        → 200, the whole table container
    page jump rejected      → 200, only the pager with the input reverted
                              (HX-Retarget: #pagination)
    guarded no-op           → 204, HTMX leaves the page untouched
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.feed_source import FeedSource, FeedSourceKind, get_feed_sources
from api.table_view import TableView, ViewState
from utils.config import DEFAULT_PAGE_SIZE, PAGE_SIZES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None

ACTIONS = ("first", "previous", "next", "last", "size", "source", "jump", "refresh")


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


def _int_param(params, name: str, default: int, minimum: int = 0) -> int:
    try:
        return max(minimum, int(params.get(name, default)))
    except (TypeError, ValueError):
        return default


def _restore_view(request: Request, sources: dict[FeedSourceKind, FeedSource]) -> TableView:
    """Rebuild view state from the query string sent by the controls."""
    params = request.query_params
    default_size = getattr(request.app.state, "default_page_size", DEFAULT_PAGE_SIZE)
    page_size = _int_param(params, "page_size", default_size, minimum=1)
    if page_size not in PAGE_SIZES:
        page_size = default_size
    page = _int_param(params, "page", 1, minimum=1)
    try:
        source = FeedSourceKind(params.get("source", FeedSourceKind.REMOTE.value))
    except ValueError:
        source = FeedSourceKind.REMOTE
    state = ViewState(
        page_number=page,
        page_size=page_size,
        total_items=_int_param(params, "total_items", 0),
        page_input=str(page),
        source=source,
    )
    return TableView(sources, state)


def _apply_action(view: TableView, request: Request) -> bool:
    """Apply the ``action`` query parameter; return whether a fetch result was applied.

    Raises:
        ValueError: unknown action or unsupported page size (→ 400).
    """
    params = request.query_params
    action = params.get("action", "refresh")
    if action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}'")

    if action == "first":
        return view.first_page()
    if action == "previous":
        return view.previous_page()
    if action == "next":
        return view.next_page()
    if action == "last":
        return view.last_page()
    if action == "size":
        try:
            new_size = int(params.get("new_page_size", ""))
        except ValueError:
            raise ValueError("new_page_size must be an integer") from None
        return view.set_page_size(new_size)
    if action == "source":
        return view.set_source(FeedSourceKind(params.get("new_source", "")))
    if action == "jump":
        view.set_page_input(params.get("page_input", ""))
        return view.submit_page_jump()
    return view.refresh()


def _context(request: Request, view: TableView) -> dict[str, Any]:
    return {
        "request":    request,
        "view":       view,
        "state":      view.state,
        "columns":    view.columns,
        "rows":       list(view.rows()),
        "stats":      view.stats(),
        "page_sizes": PAGE_SIZES,
        "sources":    list(FeedSourceKind),
    }


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(
    request: Request,
    sources: dict[FeedSourceKind, FeedSource] = Depends(get_feed_sources),
) -> HTMLResponse:
    """Main page: loads the requested (default: first) page on render."""
    view = _restore_view(request, sources)
    view.refresh()
    return _tmpl().TemplateResponse(request, "index.html", _context(request, view))


@router.get("/partials/table", response_class=HTMLResponse, include_in_schema=False)
def table_partial(
    request: Request,
    sources: dict[FeedSourceKind, FeedSource] = Depends(get_feed_sources),
) -> Response:
    """HTMX partial: apply one control action and re-render."""
    view = _restore_view(request, sources)
    if _apply_action(view, request):
        return _tmpl().TemplateResponse(request, "partials/table.html", _context(request, view))

    if request.query_params.get("action") == "jump":
        # Rejected jump: only the pager changes (input text reverted).
        return _tmpl().TemplateResponse(
            request,
            "partials/pagination.html",
            _context(request, view),
            headers={"HX-Retarget": "#pagination", "HX-Reswap": "outerHTML"},
        )
    return Response(status_code=204)


# ── Error pages ───────────────────────────────────────────────────────────────

def register_error_handlers(app: FastAPI) -> None:
    """HTML error pages for browser routes; JSON stays for /api/ and HTMX."""

    def _wants_html(request: Request) -> bool:
        return (
            not request.url.path.startswith("/api/")
            and "HX-Request" not in request.headers
            and "text/html" in request.headers.get("accept", "")
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_page(request: Request, exc: StarletteHTTPException):
        if _wants_html(request) and exc.status_code == 404:
            return _tmpl().TemplateResponse(
                request, "errors/404.html", {}, status_code=404,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "status_code": exc.status_code},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def server_error_page(request: Request, exc: Exception):
        logger.exception("unhandled error on %s", request.url.path)
        if _wants_html(request):
            return _tmpl().TemplateResponse(
                request, "errors/500.html", {}, status_code=500,
            )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc), "status_code": 500},
        )
