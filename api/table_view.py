"""
Table view state machine for the feed explorer.

``TableView`` owns the pagination state (page, page size, source, page-jump
text, loading/error flags, the current page of records) and drives the feed
adapters.  Every page, size or source change dispatches exactly one fetch.

Fetches are tagged with a monotonically increasing sequence number when they
are dispatched.  A completion is applied only if its ticket is the latest one
dispatched, so a slow response to an older request can never overwrite the
state of a newer one.

Columns come from a fixed schema (``FEED_FIELDS``) rather than from whichever
record happens to be first on the page, so every page and every row lines up.
Keys outside the schema are appended in first-seen order.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from api.feed_source import FeedSource, FeedSourceKind, SourceError
from api.models import FEED_FIELDS, PageResponse, Record
from utils.config import DEFAULT_PAGE_SIZE, PAGE_SIZES
from utils.formatting import format_cell

logger = logging.getLogger(__name__)

ORDINAL_COLUMN = "#"
FALLBACK_ERROR = "Failed to fetch data"


def total_pages_for(total_items: int, page_size: int) -> int:
    """Number of pages needed for *total_items*; never less than 1."""
    return max(1, math.ceil(total_items / page_size))


def derive_columns(records: list[Record]) -> list[str]:
    """Return the display columns for a page of records.

    Empty page → no columns.  Otherwise the ordinal column, then the
    canonical fields, then any extra keys found on the page.
    """
    if not records:
        return []
    columns = [ORDINAL_COLUMN, *FEED_FIELDS]
    known = set(FEED_FIELDS)
    for record in records:
        for key in record:
            if key not in known:
                known.add(key)
                columns.append(key)
    return columns


@dataclass
class ViewState:
    """Everything the table renders from."""

    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_items: int = 0
    page_input: str = "1"
    source: FeedSourceKind = FeedSourceKind.REMOTE
    loading: bool = False
    error: str | None = None
    records: list[Record] = field(default_factory=list)
    loaded: bool = False

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self.page_size)

    @property
    def status(self) -> str:
        """idle | loading | success | error"""
        if self.loading:
            return "loading"
        if self.error is not None:
            return "error"
        return "success" if self.loaded else "idle"


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one dispatched fetch and the state it was issued for."""

    seq: int
    source: FeedSourceKind
    page_number: int
    page_size: int


class TableView:
    """Pagination controls, fetch lifecycle and column derivation.

    The ticket check in ``complete_fetch`` / ``fail_fetch`` holds for any
    caller that keeps one view alive across overlapping fetches.  The web
    routes build a fresh view per request and fetch synchronously, so there
    the browser enforces the same rule: every control carries
    ``hx-sync="closest .data-table-container:replace"``, which aborts the
    superseded request before its response can be swapped in.
    """

    def __init__(
        self,
        sources: Mapping[FeedSourceKind, FeedSource],
        state: ViewState | None = None,
    ) -> None:
        self.sources = sources
        self.state = state or ViewState()
        self._seq = 0
        self.fetch_count = 0

    # ── fetch lifecycle ───────────────────────────────────────────────────

    def begin_fetch(self) -> FetchTicket:
        """Dispatch a fetch for the current state and enter ``loading``."""
        self._seq += 1
        self.fetch_count += 1
        st = self.state
        st.loading = True
        st.error = None
        ticket = FetchTicket(self._seq, st.source, st.page_number, st.page_size)
        logger.info(
            "fetch seq=%d source=%s page=%d size=%d",
            ticket.seq, ticket.source.value, ticket.page_number, ticket.page_size,
        )
        return ticket

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.seq == self._seq

    def complete_fetch(self, ticket: FetchTicket, response: PageResponse) -> bool:
        """Apply *response* if *ticket* is still the latest fetch.

        Returns:
            True if the state was updated, False if the response was stale.
        """
        if not self.is_current(ticket):
            logger.debug("discarding stale response seq=%d (latest=%d)", ticket.seq, self._seq)
            return False
        st = self.state
        st.records = list(response.items)
        st.total_items = response.total_items
        st.loading = False
        st.loaded = True
        return True

    def fail_fetch(self, ticket: FetchTicket, message: str | None) -> bool:
        """Record a failed fetch; prior records are kept on screen."""
        if not self.is_current(ticket):
            logger.debug("discarding stale failure seq=%d (latest=%d)", ticket.seq, self._seq)
            return False
        self.state.error = message or FALLBACK_ERROR
        self.state.loading = False
        return True

    def run_fetch(self, ticket: FetchTicket) -> bool:
        """Call the adapter named by *ticket* and apply the outcome."""
        source = self.sources[ticket.source]
        try:
            response = source.fetch_page(ticket.page_number, ticket.page_size)
        except SourceError as exc:
            logger.warning("fetch seq=%d failed: %s", ticket.seq, exc)
            return self.fail_fetch(ticket, str(exc))
        return self.complete_fetch(ticket, response)

    def refresh(self) -> bool:
        """Fetch the page for the current state (one dispatch).

        Returns:
            True when the outcome (page or error) was applied, False when a
            newer fetch was dispatched while this one was in flight.
        """
        return self.run_fetch(self.begin_fetch())

    # ── controls ──────────────────────────────────────────────────────────

    def _go_to(self, page: int) -> bool:
        self.state.page_number = page
        self.state.page_input = str(page)
        return self.refresh()

    def first_page(self) -> bool:
        st = self.state
        if st.page_number == 1 or st.loading:
            return False
        return self._go_to(1)

    def previous_page(self) -> bool:
        st = self.state
        if st.page_number == 1 or st.loading:
            return False
        return self._go_to(st.page_number - 1)

    def next_page(self) -> bool:
        st = self.state
        if st.page_number >= st.total_pages or st.loading:
            return False
        return self._go_to(st.page_number + 1)

    def last_page(self) -> bool:
        st = self.state
        if st.page_number == st.total_pages or st.loading:
            return False
        return self._go_to(st.total_pages)

    def set_page_size(self, page_size: int) -> bool:
        if page_size not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}, got {page_size}")
        if self.state.loading:
            return False
        self.state.page_size = page_size
        return self._go_to(1)

    def set_source(self, source: FeedSourceKind) -> bool:
        if self.state.loading:
            return False
        self.state.source = FeedSourceKind(source)
        return self._go_to(1)

    def set_page_input(self, text: str) -> None:
        self.state.page_input = text

    def submit_page_jump(self) -> bool:
        """Jump to the typed page, or revert the text if it is out of range."""
        st = self.state
        try:
            page = int(st.page_input.strip())
        except ValueError:
            page = 0
        if 1 <= page <= st.total_pages:
            st.page_number = page
            st.page_input = str(page)
            return self.refresh()
        st.page_input = str(st.page_number)
        return False

    # ── rendering helpers ─────────────────────────────────────────────────

    @property
    def columns(self) -> list[str]:
        return derive_columns(self.state.records)

    def ordinal(self, row_index: int) -> int:
        st = self.state
        return (st.page_number - 1) * st.page_size + row_index + 1

    def rows(self) -> Iterator[list[str]]:
        """Yield each record as a list of display strings, one per column."""
        columns = self.columns
        for index, record in enumerate(self.state.records):
            yield [
                str(self.ordinal(index)) if col == ORDINAL_COLUMN
                else format_cell(col, record.get(col))
                for col in columns
            ]

    def stats(self) -> dict[str, Any]:
        return {
            "rows": len(self.state.records),
            "columns": len(self.columns),
            "total_items": self.state.total_items,
        }
