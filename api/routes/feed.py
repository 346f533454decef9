"""
GET /api/v1/feed endpoint.

JSON passthrough of the feed adapters: returns one page from either the
remote feed ("api") or the bundled snapshot ("file") in the feed's own
PascalCase wire shape.  Adapter failures map to 502 Bad Gateway.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.feed_source import FeedSource, FeedSourceKind, SourceError, get_feed_sources
from api.models import ErrorResponse, PageResponse

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "",
    response_model=PageResponse,
    response_model_by_alias=True,
    responses={502: {"model": ErrorResponse, "description": "Feed source failed"}},
    summary="Fetch one page of the acquisition feed",
)
def get_feed_page(
    page_number: int = Query(1, ge=1, description="1-based page number"),
    page_size: int = Query(50, ge=1, le=500, description="Records per page"),
    source: FeedSourceKind = Query(FeedSourceKind.REMOTE, description="'api' (remote) or 'file' (snapshot)"),
    sources: dict[FeedSourceKind, FeedSource] = Depends(get_feed_sources),
):
    """Return the requested page and the total record count."""
    try:
        return sources[source].fetch_page(page_number, page_size)
    except SourceError as exc:
        return JSONResponse(
            status_code=502,
            content={"error": "Feed unavailable", "detail": str(exc), "status_code": 502},
        )
