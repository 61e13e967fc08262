"""Tests for CLDR plural category selection through Babel."""

from __future__ import annotations

from decimal import Decimal

import pytest

from precompile_intl.runtime import select_plural_category


class TestCardinal:
    """Cardinal rules per locale."""

    @pytest.mark.parametrize(
        ("n", "expected"),
        [(0, "other"), (1, "one"), (2, "other"), (1.5, "other"), (Decimal("1.0"), "other")],
    )
    def test_english(self, n: int | float | Decimal, expected: str) -> None:
        """English has one/other; visible fraction digits make 1.0 'other'."""
        assert select_plural_category(n, "en") == expected

    @pytest.mark.parametrize(
        ("n", "expected"), [(1, "one"), (2, "few"), (5, "many"), (21, "one"), (22, "few")]
    )
    def test_russian(self, n: int, expected: str) -> None:
        """Russian uses one/few/many."""
        assert select_plural_category(n, "ru") == expected

    @pytest.mark.parametrize(
        ("n", "expected"),
        [(0, "zero"), (1, "one"), (2, "two"), (3, "few"), (11, "many"), (100, "other")],
    )
    def test_arabic(self, n: int, expected: str) -> None:
        """Arabic uses all six categories."""
        assert select_plural_category(n, "ar") == expected

    def test_no_plural_distinction(self) -> None:
        """Japanese has only 'other'."""
        assert select_plural_category(1, "ja") == "other"

    def test_bcp47_and_posix_tags(self) -> None:
        """Region subtags in either notation are accepted."""
        assert select_plural_category(5, "ru-RU") == "many"
        assert select_plural_category(5, "ru_RU") == "many"


class TestOrdinal:
    """Ordinal rules."""

    @pytest.mark.parametrize(
        ("n", "expected"),
        [(1, "one"), (2, "two"), (3, "few"), (4, "other"), (11, "other"), (12, "other"),
         (13, "other"), (21, "one"), (102, "two")],
    )
    def test_english(self, n: int, expected: str) -> None:
        """English ordinals distinguish st/nd/rd/th."""
        assert select_plural_category(n, "en", ordinal=True) == expected


class TestUnknownLocale:
    """Unknown locales fall back instead of failing."""

    def test_cardinal_fallback(self) -> None:
        """one for 1, other otherwise."""
        assert select_plural_category(1, "xx") == "one"
        assert select_plural_category(5, "xx") == "other"

    def test_ordinal_fallback(self) -> None:
        """Ordinals fall back to other."""
        assert select_plural_category(1, "xx", ordinal=True) == "other"

    def test_invalid_tag(self) -> None:
        """Malformed tags behave like unknown ones."""
        assert select_plural_category(1, "not a locale!") == "one"
