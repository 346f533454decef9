"""Output formatting utilities for the deal feed explorer.

Provides reusable functions for:
- Rendering a record field value as table-cell text
- Formatting counts for the stats bar
"""

import json
from typing import Any, Dict, Optional, Tuple

# Categorical fields: field name -> (type key, sub-type key) inside the
# nested object.  Other nested values fall through to JSON text.
CATEGORICAL_FIELDS: Dict[str, Tuple[str, str]] = {
    "Acquisition Type": ("Acquisition Type", "Acquisition Sub Type"),
}


def format_categorical(value: Dict[str, Any], type_key: str, subtype_key: str) -> str:
    """Render a type/sub-type pair as ``"type - subtype"`` or bare ``type``.

    Examples:
        format_categorical({"T": "Merger", "S": "Stock"}, "T", "S") -> "Merger - Stock"
        format_categorical({"T": "Merger", "S": ""}, "T", "S") -> "Merger"
    """
    kind = value.get(type_key) or ""
    subtype = value.get(subtype_key) or ""
    return f"{kind} - {subtype}" if subtype else str(kind)


def format_cell(field: str, value: Any) -> str:
    """Format one record field for display in the table.

    Args:
        field: Field name (column key)
        value: Raw value from the record; may be missing (None)

    Returns:
        Display text.  Registered categorical objects render as
        ``"type - subtype"``, other structured values as compact JSON,
        scalars as-is and missing values as an empty string.

    Examples:
        format_cell("Acquisition Type", {"Acquisition Type": "Acquisition",
                    "Acquisition Sub Type": "Majority"}) -> "Acquisition - Majority"
        format_cell("Tag", {"a": 1}) -> '{"a":1}'
        format_cell("Industry", None) -> ""
    """
    if value is None:
        return ""
    if isinstance(value, dict):
        keys = CATEGORICAL_FIELDS.get(field)
        if keys is not None:
            return format_categorical(value, *keys)
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), separators=(",", ":"), ensure_ascii=False)
    return str(value)


def format_count(value: Optional[int]) -> str:
    """Format a count with thousands separator.

    Examples:
        format_count(1234567) -> "1,234,567"
        format_count(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:,d}"
