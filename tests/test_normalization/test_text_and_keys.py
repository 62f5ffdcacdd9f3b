"""Tests for label cleaning, line classification, amount parsing and key lookup."""

from decimal import Decimal

import pytest

from statementflow.models.enums import CategoryKey, LineType
from statementflow.normalization.key_maps import (
    QUICKBOOKS_UNIFIED_KEYS,
    ROOTFI_UNIFIED_KEYS,
    resolve_key,
)
from statementflow.normalization.text import classify_line, clean_line_item_title, parse_amount


class TestCleanLineItemTitle:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Product A", "product_a"),
            ("R&D (Labs)", "randd_labs"),
            ("Travel  & Meals", "travel_and_meals"),
            ("Fees: 2023/Q1", "fees_2023q1"),
            ("income", "income"),
        ],
    )
    def test_clean(self, title, expected):
        assert clean_line_item_title(title) == expected


class TestClassifyLine:
    def test_normal(self):
        assert classify_line("Consulting Fees") is LineType.NORMAL

    def test_total_needs_trailing_space(self):
        assert classify_line("Total Income") is LineType.TOTAL
        assert classify_line("Totals") is LineType.NORMAL

    def test_summary_and_net_prefixes(self):
        assert classify_line("Summary of accounts") is LineType.SUMMARY
        assert classify_line("Net Income") is LineType.SUMMARY
        assert classify_line("  net operating income") is LineType.SUMMARY


class TestParseAmount:
    def test_numbers(self):
        assert parse_amount("100") == Decimal("100")
        assert parse_amount("-12.34") == Decimal("-12.34")

    def test_missing_is_zero(self):
        assert parse_amount(None) == Decimal("0")
        assert parse_amount("   ") == Decimal("0")

    @pytest.mark.parametrize("raw", ["abc", "1,000", "NaN", "Infinity"])
    def test_invalid_is_none(self, raw):
        assert parse_amount(raw) is None


class TestResolveKey:
    def test_exact(self):
        assert resolve_key(QUICKBOOKS_UNIFIED_KEYS, "NetOperatingIncome") is CategoryKey.OPERATING_INCOME

    def test_case_insensitive(self):
        assert resolve_key(QUICKBOOKS_UNIFIED_KEYS, "grossprofit") is CategoryKey.GROSS_PROFIT

    def test_unknown_and_empty(self):
        assert resolve_key(QUICKBOOKS_UNIFIED_KEYS, "Mystery") is None
        assert resolve_key(QUICKBOOKS_UNIFIED_KEYS, "") is None
        assert resolve_key(QUICKBOOKS_UNIFIED_KEYS, None) is None

    def test_rootfi_map(self):
        assert resolve_key(ROOTFI_UNIFIED_KEYS, "non_operating_revenue") is CategoryKey.OTHER_INCOME
        assert resolve_key(ROOTFI_UNIFIED_KEYS, "earnings_before_taxes") is CategoryKey.NET_OTHER_INCOME

    def test_maps_are_read_only(self):
        with pytest.raises(TypeError):
            QUICKBOOKS_UNIFIED_KEYS["Other"] = CategoryKey.INCOME  # type: ignore[index]
