"""
Tests for date normalization and amount formatting.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from delivery_ledger.formatters import (
    FullDate,
    YearOnly,
    Unparseable,
    normalize_date,
    canonical_date,
    format_display_date,
    format_amount,
    parse_amount,
)


class TestNormalizeDate:

    @pytest.mark.parametrize("value", ["2025-01-16", "16/01/2025", " 2025-1-16 ", "16/1/2025"])
    def test_full_dates(self, value):
        assert normalize_date(value) == FullDate(2025, 1, 16)

    def test_date_objects(self):
        assert normalize_date(date(2024, 2, 29)) == FullDate(2024, 2, 29)
        assert normalize_date(datetime(2024, 3, 1, 12, 30)) == FullDate(2024, 3, 1)

    def test_year_only(self):
        assert normalize_date("2025") == YearOnly(2025)

    @pytest.mark.parametrize("value", ["", None, "hello", "2025/01/16", "31/02/2025", "2025-13-01", "25"])
    def test_unparseable(self, value):
        assert isinstance(normalize_date(value), Unparseable)

    def test_canonical_forms(self):
        assert canonical_date("05/03/2025") == "2025-03-05"
        assert canonical_date("2025") == "2025"
        assert canonical_date("") == ""
        assert canonical_date(None) == ""

    def test_canonical_rejects_bad_dates(self):
        with pytest.raises(ValueError, match="Invalid date"):
            canonical_date("30/02/2025")


class TestDisplay:

    def test_display_date(self):
        assert format_display_date("2025-01-16") == "16/01/2025"
        assert format_display_date("2025") == "2025"
        assert format_display_date("") == ""

    def test_format_amount(self):
        assert format_amount(Decimal("6662")) == "6 662,00"
        assert format_amount(Decimal("-1234567.891")) == "-1 234 567,89"
        assert format_amount(None) == ""


class TestParseAmount:

    @pytest.mark.parametrize("value,expected", [
        ("1870", Decimal("1870")),
        ("1 870,50", Decimal("1870.50")),
        ("1,870.50", Decimal("1870.50")),
        ("1.870,50", Decimal("1870.50")),
        ("12.345.678,90", Decimal("12345678.90")),
        ("1870.50 DA", Decimal("1870.50")),
        (2702, Decimal("2702")),
        (12.5, Decimal("12.5")),
    ])
    def test_parses(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "1.2.3"])
    def test_empty_or_garbage(self, value):
        assert parse_amount(value) is None
