"""
Feed source adapters.

Two interchangeable strategies return one page of acquisition-event records
plus the total record count:

    RemoteFeedSource  POSTs {pageNumber, pageSize} to the feed service and
                      trusts it to paginate.
    LocalFeedSource   reads the bundled JSON snapshot on every call and
                      slices the requested page locally.

Both return a ``PageResponse`` and raise ``SourceError`` on any transport or
parse failure, so callers never care which one is active.  Neither keeps
state between calls and neither retries.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Protocol

import requests
from fastapi import Request
from pydantic import ValidationError

from api.models import FeedDocument, PageRequest, PageResponse
from utils.config import AppConfig
from utils.http import SessionManager

logger = logging.getLogger(__name__)

QUERY_FEED_PATH = "/api/developer/QueryFeed"


class SourceError(Exception):
    """A page could not be fetched or parsed.

    ``str(exc)`` is the human-readable message shown to the user.
    """


class FeedSourceKind(str, Enum):
    """Which adapter serves the table; values match the UI select options."""
    REMOTE = "api"
    LOCAL = "file"


class FeedSource(Protocol):
    def fetch_page(self, page_number: int, page_size: int) -> PageResponse: ...


def _check_page_args(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")


class RemoteFeedSource:
    """Fetch pages from the remote QueryFeed endpoint."""

    def __init__(self, base_url: str, developer_key: str,
                 session_manager: SessionManager | None = None,
                 timeout: float | None = None) -> None:
        self.url = base_url.rstrip("/") + QUERY_FEED_PATH
        self.timeout = timeout
        self._sessions = session_manager or SessionManager(
            headers={"DeveloperKey": developer_key},
        )

    def fetch_page(self, page_number: int, page_size: int) -> PageResponse:
        """POST the page request and parse the body as a ``PageResponse``.

        Raises:
            ValueError: page_number or page_size is not positive.
            SourceError: network failure, non-2xx status, or a body that is
                not a valid page response.
        """
        _check_page_args(page_number, page_size)
        body = PageRequest(page_number=page_number, page_size=page_size)
        try:
            resp = self._sessions.session.post(
                self.url,
                json=body.model_dump(by_alias=True),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SourceError(f"API request failed: {exc}") from exc

        if not resp.ok:
            raise SourceError(f"API request failed: {resp.reason}")

        try:
            return PageResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise SourceError(f"Malformed feed response: {exc}") from exc

    def close(self) -> None:
        self._sessions.close()


class LocalFeedSource:
    """Serve pages by slicing the bundled JSON snapshot."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> FeedDocument:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Failed to load test data: {exc.strerror or exc}") from exc
        try:
            return FeedDocument.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            raise SourceError(f"Failed to load test data: {exc}") from exc

    def fetch_page(self, page_number: int, page_size: int) -> PageResponse:
        """Load the whole snapshot and return the requested slice.

        A page past the end of the data comes back with no items; that is
        not an error.
        """
        _check_page_args(page_number, page_size)
        items = self._load().items
        start = (page_number - 1) * page_size
        return PageResponse(
            total_items=len(items),
            page_number=page_number,
            page_size=page_size,
            items=items[start:start + page_size],
        )


def build_feed_sources(cfg: AppConfig) -> dict[FeedSourceKind, FeedSource]:
    """Build both adapters from configuration, keyed by ``FeedSourceKind``."""
    if not cfg.remote_configured:
        logger.warning("FEED_API_BASE_URL is not set; the API source will fail until configured")
    return {
        FeedSourceKind.REMOTE: RemoteFeedSource(
            cfg.api_base_url, cfg.developer_key, timeout=cfg.timeout_seconds,
        ),
        FeedSourceKind.LOCAL: LocalFeedSource(cfg.local_path),
    }


# ── FastAPI dependency ────────────────────────────────────────────────────────

def get_feed_sources(request: Request) -> dict[FeedSourceKind, FeedSource]:
    """FastAPI dependency: the app's ``{kind: adapter}`` mapping.

    ``create_app(sources=...)`` installs the mapping on ``app.state``; when
    none was given it is built from environment configuration on first use.

    Usage in a route::

        @router.get("/example")
        def example(sources=Depends(get_feed_sources)):
            ...
    """
    sources = getattr(request.app.state, "feed_sources", None)
    if sources is None:
        sources = build_feed_sources(AppConfig.from_env())
        request.app.state.feed_sources = sources
    return sources
