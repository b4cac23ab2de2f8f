"""Tests for digest.filters module."""

import pytest

from digest.config import FilterConfig
from digest.filters import clean_headline, passes_filters

RULES = FilterConfig(
    min_length=40,
    max_length=150,
    exclude_patterns=["javascript", "cookie", "advertisement"],
    keywords=["bitcoin", "crypto", "stock"],
)


class TestCleanHeadline:
    @pytest.mark.parametrize("raw, expected", [
        ("Bitcoin &amp; Ethereum surge", "Bitcoin & Ethereum surge"),
        ("Stock &lt;div&gt;test&lt;/div&gt;", "Stock test"),
        ("Market closes higher", "Market closes higher"),
        ("  Multiple   spaces  ", "Multiple spaces"),
        ("Oil &quot;shock&quot; ahead&#8217;s", 'Oil "shock" aheads'),
        ("<b>Bold</b> move", "Bold move"),
    ])
    def test_cleaning(self, raw: str, expected: str) -> None:
        assert clean_headline(raw) == expected

    def test_empty(self) -> None:
        assert clean_headline("   ") == ""


class TestPassesFilters:
    @pytest.mark.parametrize("headline, expected", [
        ("Bitcoin surges past $100000 as institutional adoption grows", True),
        ("Stock market reaches new all-time high today", True),
        ("Enable javascript to view this content", False),
        ("A", False),
        ("Federal Reserve holds interest rates steady this week", False),
    ])
    def test_rules(self, headline: str, expected: bool) -> None:
        assert passes_filters(headline, RULES) is expected

    def test_too_long(self) -> None:
        assert passes_filters("Bitcoin " * 30, RULES) is False

    def test_exclusion_is_case_insensitive(self) -> None:
        assert passes_filters("Crypto firms update COOKIE policy after stock probe", RULES) is False

    def test_no_keywords_accepts_anything_in_range(self) -> None:
        rules = FilterConfig(min_length=10, max_length=100)
        assert passes_filters("Federal Reserve holds interest rates steady", rules) is True
