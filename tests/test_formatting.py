"""
Tests for utils/formatting.py

format_cell, format_categorical, format_count.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    CATEGORICAL_FIELDS,
    format_categorical,
    format_cell,
    format_count,
)


class TestFormatCell:
    def test_categorical_with_subtype(self):
        value = {"Acquisition Type": "Acquisition", "Acquisition Sub Type": "Majority"}
        assert format_cell("Acquisition Type", value) == "Acquisition - Majority"

    def test_categorical_empty_subtype(self):
        value = {"Acquisition Type": "Merger", "Acquisition Sub Type": ""}
        assert format_cell("Acquisition Type", value) == "Merger"

    def test_categorical_missing_subtype(self):
        assert format_cell("Acquisition Type", {"Acquisition Type": "Merger"}) == "Merger"

    def test_unregistered_mapping_renders_json(self):
        assert format_cell("Primary Companies", {"Id": 7, "Name": "Acme"}) == '{"Id":7,"Name":"Acme"}'

    def test_list_renders_json(self):
        assert format_cell("Categories", ["M&A", "Tech"]) == '["M&A","Tech"]'

    def test_non_ascii_kept(self):
        assert format_cell("Tag", {"city": "Zürich"}) == '{"city":"Zürich"}'

    @pytest.mark.parametrize("value,expected", [
        ("Completed", "Completed"),
        ("", ""),
        (42, "42"),
        (True, "True"),
        (None, ""),
    ])
    def test_scalars(self, value, expected):
        assert format_cell("MAStatus", value) == expected

    def test_registry_is_extensible(self, monkeypatch):
        monkeypatch.setitem(CATEGORICAL_FIELDS, "Deal Kind", ("Kind", "Sub"))
        assert format_cell("Deal Kind", {"Kind": "Asset", "Sub": "Partial"}) == "Asset - Partial"


class TestFormatCategorical:
    def test_none_subtype(self):
        assert format_categorical({"T": "Merger", "S": None}, "T", "S") == "Merger"

    def test_missing_type(self):
        assert format_categorical({}, "T", "S") == ""


class TestFormatCount:
    def test_thousands(self):
        assert format_count(1234567) == "1,234,567"

    def test_zero(self):
        assert format_count(0) == "0"

    def test_none(self):
        assert format_count(None) == "-"
