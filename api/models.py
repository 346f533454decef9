"""
Pydantic models for the feed wire format and the explorer API.

The remote feed and the local snapshot both speak the same PascalCase JSON
shape (``TotalItems``, ``PageNumber``, ``PageSize``, ``Items``).  Models
accept and emit those aliases while exposing snake_case attributes in Python.

Records themselves stay open-ended dicts: whatever keys arrive are kept.
``FEED_FIELDS`` lists the canonical acquisition-event fields in the order the
feed publishes them; the table view uses it as its column schema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ── Canonical record schema ───────────────────────────────────────────────────

_COMPANY_ATTRIBUTES = (
    "Display Name", "Usearch Id", "Id", "Website", "Website Unified",
    "ZoomInfo Url", "Industry", "Revenue", "Headquarters", "Employees",
    "Phone Number", "NAICS Code", "SIC Code", "Popular Searches",
    "Stock Symbol", "Ticker", "Logo Url", "LinkedIn Url", "Twitter Url",
    "Facebook Url", "PitchBook Url",
)

FEED_FIELDS: tuple[str, ...] = (
    "Published Date",
    "Acquiree Company",
    "Acquiree Company Ticker From Article",
    "Acquirer Company",
    "Acquirer Company Ticker From Article",
    "MAStatus",
    "MAType",
    "Deal Value",
    "Industry",
    *(f"Acquiree Company {attr}" for attr in _COMPANY_ATTRIBUTES),
    *(f"Acquirer Company {attr}" for attr in _COMPANY_ATTRIBUTES),
    "Source URL",
    "Source Domain Name",
    "Record Id",
    "Article Id",
    "Article Title",
    "Article Group Id",
    "Tag",
    "Acquisition Type",
    "Is Primary Company",
    "Primary Companies",
    "All Companies",
    "Categories",
    "Subcategories",
    "Events",
    "Impact",
    "Credible",
    "Confirmation",
    "Source Formality Type",
    "Article Formality Type",
)

Record = dict[str, Any]


# ── Wire models ───────────────────────────────────────────────────────────────

class PageRequest(BaseModel):
    """JSON body POSTed to the remote feed endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    page_number: int = Field(..., ge=1, alias="pageNumber", examples=[1])
    page_size: int = Field(..., ge=1, alias="pageSize", examples=[50])


class PageResponse(BaseModel):
    """One page of feed records plus the total count across all pages."""
    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(..., ge=0, alias="TotalItems",
                             description="Total records across all pages", examples=[1204])
    page_number: int = Field(..., ge=1, alias="PageNumber", examples=[1])
    page_size: int = Field(..., ge=1, alias="PageSize", examples=[50])
    items: list[Record] = Field(default_factory=list, alias="Items",
                                description="Records on this page, in feed order")


class FeedDocument(BaseModel):
    """The bundled JSON snapshot: the whole feed, unpaginated."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    items: list[Record] = Field(..., alias="Items")


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Feed unavailable"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[502])
