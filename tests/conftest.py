"""
Pytest fixtures for the deal feed explorer tests.

Provides a synthetic 120-record feed, a snapshot file written to tmp_path,
a stub source that records every call (and can be told to fail), and a
TestClient wired to both through ``create_app(sources=...)``.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from api.feed_source import FeedSourceKind, LocalFeedSource, SourceError  # noqa: E402
from api.models import PageResponse  # noqa: E402

TOTAL_RECORDS = 120


# ── Helpers ───────────────────────────────────────────────────────────────────

def make_record(i: int) -> dict:
    """Deterministic acquisition-event record; odd ids carry a sub-type."""
    return {
        "Record Id": f"rec-{i:04d}",
        "Published Date": f"2024-03-{(i % 28) + 1:02d}T12:00:00Z",
        "Acquiree Company": f"Target {i}",
        "Acquirer Company": f"Buyer {i % 7}",
        "MAStatus": "Completed",
        "Acquisition Type": {
            "Acquisition Type": "Acquisition",
            "Acquisition Sub Type": "Majority" if i % 2 else "",
        },
    }


class StubSource:
    """In-memory feed source that records each fetch_page call."""

    def __init__(self, records=None, error=None):
        self.records = list(records) if records is not None else []
        self.error = error
        self.calls: list[tuple[int, int]] = []

    def fetch_page(self, page_number: int, page_size: int) -> PageResponse:
        self.calls.append((page_number, page_size))
        if self.error is not None:
            raise SourceError(self.error)
        start = (page_number - 1) * page_size
        return PageResponse(
            total_items=len(self.records),
            page_number=page_number,
            page_size=page_size,
            items=self.records[start:start + page_size],
        )


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def records():
    return [make_record(i) for i in range(1, TOTAL_RECORDS + 1)]


@pytest.fixture
def snapshot_path(tmp_path, records):
    """The synthetic feed written as a ``{"Items": [...]}`` snapshot."""
    path = tmp_path / "test-data.json"
    path.write_text(json.dumps({"Items": records}), encoding="utf-8")
    return path


@pytest.fixture
def remote_stub(records):
    return StubSource(records)


@pytest.fixture
def local_source(snapshot_path):
    return LocalFeedSource(snapshot_path)


@pytest.fixture
def sources(remote_stub, local_source):
    return {FeedSourceKind.REMOTE: remote_stub, FeedSourceKind.LOCAL: local_source}


@pytest.fixture
def client(sources):
    return TestClient(create_app(sources=sources), raise_server_exceptions=False)
