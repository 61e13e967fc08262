"""Locale context for number, date and time formatting.

Uses Babel for CLDR-compliant formatting without touching the process-wide
`locale` module.

Architecture:
    - LocaleContext: Immutable per-locale formatter, cached by locale tag
    - Style strings from compiled messages are resolved here: named styles,
      ICU number skeletons, user-defined named formats, and raw CLDR patterns
    - Every failure raises FormattingError carrying a fallback string; the
      helpers decide what to do with it

Python 3.13+. Uses Babel for i18n.
"""

import logging
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from precompile_intl.constants import (
    DATETIME_STYLES,
    DEFAULT_CURRENCY,
    DEFAULT_DATE_STYLE,
    DEFAULT_LOCALE,
    DEFAULT_TIME_STYLE,
    MAX_LOCALE_CACHE_SIZE,
)
from precompile_intl.diagnostics import ErrorTemplate, FormattingError
from precompile_intl.locale_utils import normalize_locale

__all__ = ["LocaleContext", "NumberStyle"]

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = "#,##0"
_SKELETON_PREFIX = "::"

# Errors Babel raises for malformed values or patterns.
_FORMAT_ERRORS = (
    ValueError,
    TypeError,
    InvalidOperation,
    OverflowError,
    OSError,
    AttributeError,
    KeyError,
)


@dataclass(frozen=True, slots=True)
class NumberStyle:
    """Resolved number style.

    Attributes:
        kind: decimal, integer, percent, currency, scientific, compact or pattern
        currency: ISO 4217 code for the currency kind
        pattern: CLDR pattern for the pattern kind
        compact_format: "short" or "long" for the compact kind
    """

    kind: str
    currency: str | None = None
    pattern: str | None = None
    compact_format: str = "short"

    @classmethod
    def parse(cls, style: str | None, *, currency: str = DEFAULT_CURRENCY) -> "NumberStyle":
        """Resolve a style argument as written in a message.

        Raises:
            ValueError: For an unrecognized `::` skeleton

        Examples:
            >>> NumberStyle.parse("percent").kind
            'percent'
            >>> NumberStyle.parse("EUR")
            NumberStyle(kind='currency', currency='EUR', pattern=None, compact_format='short')
            >>> NumberStyle.parse("::currency/JPY").currency
            'JPY'
            >>> NumberStyle.parse("#,##0.00").kind
            'pattern'
        """
        if style is None or style == "decimal":
            return cls("decimal")
        if style.startswith(_SKELETON_PREFIX):
            return cls._parse_skeleton(style[len(_SKELETON_PREFIX) :], currency=currency)
        match style:
            case "integer" | "percent" | "scientific":
                return cls(style)
            case "currency":
                return cls("currency", currency=currency)
            case "compact" | "compact-short":
                return cls("compact")
            case "compact-long":
                return cls("compact", compact_format="long")
        if len(style) == 3 and style.isascii() and style.isalpha() and style.isupper():
            return cls("currency", currency=style)
        return cls("pattern", pattern=style)

    @classmethod
    def _parse_skeleton(cls, skeleton: str, *, currency: str) -> "NumberStyle":
        tokens = skeleton.split()
        if len(tokens) != 1:
            msg = f"Unsupported number skeleton: '{skeleton}'"
            raise ValueError(msg)
        stem, _, option = tokens[0].partition("/")
        match stem:
            case "percent" | "integer" | "scientific" if not option:
                return cls(stem)
            case "currency":
                return cls("currency", currency=option or currency)
            case "compact-short" | "K" if not option:
                return cls("compact")
            case "compact-long" | "KK" if not option:
                return cls("compact", compact_format="long")
        msg = f"Unsupported number skeleton: '{skeleton}'"
        raise ValueError(msg)


def _to_number(value: object) -> int | float | Decimal:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float | Decimal):
        return value
    if isinstance(value, str):
        return Decimal(value.strip())
    msg = f"expected a number, got {type(value).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() to construct instances; it caches one
    instance per locale tag and falls back to the default locale for tags
    Babel does not know.

    Examples:
        >>> ctx = LocaleContext.create("en-US")
        >>> ctx.format_number(1234.5)
        '1,234.5'
        >>> LocaleContext.create("de-DE").format_number(1234.5)
        '1.234,5'
        >>> ctx.format_number(0.25, "percent")
        '25%'

    Thread Safety:
        Instances are immutable. The class-level cache is guarded by an RLock.
    """

    _cache: ClassVar[OrderedDict[str, "LocaleContext"]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_code: str) -> "LocaleContext":
        """Get the (cached) context for a locale tag.

        Unknown or invalid tags log a warning and format with the default
        locale's rules; locale_code keeps the requested tag and is_fallback
        is set.

        Example:
            >>> ctx = LocaleContext.create("xx-UNKNOWN")
            >>> (ctx.locale_code, ctx.is_fallback)
            ('xx-UNKNOWN', True)
        """
        cache_key = normalize_locale(locale_code)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        try:
            babel_locale = Locale.parse(cache_key)
        except UnknownLocaleError as e:
            logger.warning(
                "Unknown locale '%s': %s. Falling back to %s", locale_code, e, DEFAULT_LOCALE
            )
            babel_locale = Locale.parse(DEFAULT_LOCALE)
            used_fallback = True
        except ValueError as e:
            logger.warning(
                "Invalid locale format '%s': %s. Falling back to %s", locale_code, e, DEFAULT_LOCALE
            )
            babel_locale = Locale.parse(DEFAULT_LOCALE)
            used_fallback = True

        ctx = cls(locale_code=locale_code, _babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if cache_key in cls._cache:
                return cls._cache[cache_key]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                evicted, _ = cls._cache.popitem(last=False)
                logger.debug("Evicted LocaleContext for '%s'", evicted)
            cls._cache[cache_key] = ctx
            return ctx

    @property
    def babel_locale(self) -> Locale:
        """Babel Locale used for formatting."""
        return self._babel_locale

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def format_number(
        self,
        value: object,
        style: str | None = None,
        *,
        currency: str = DEFAULT_CURRENCY,
        formats: Mapping[str, str] | None = None,
    ) -> str:
        """Format a number with a message style.

        Args:
            value: int, float, Decimal, or a numeric string
            style: None (decimal), a named style, an ISO 4217 code, a `::`
                skeleton, a key of formats, or a CLDR pattern
            currency: Currency of the plain "currency" style
            formats: Named number formats mapping a name to a style string

        Raises:
            FormattingError: With str(value) as fallback

        Examples:
            >>> ctx = LocaleContext.create("en")
            >>> ctx.format_number(1234.5, "integer")
            '1,234'
            >>> ctx.format_number(9.5, "EUR")
            '€9.50'
            >>> ctx.format_number(1500, "compact")
            '2K'
        """
        if formats and style is not None and style in formats:
            style = formats[style]
        try:
            number = _to_number(value)
            resolved = NumberStyle.parse(style, currency=currency)
            return self._format_number(number, resolved)
        except _FORMAT_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.number_format_failed(value, style, self.locale_code, str(e)),
                fallback_value=str(value),
            ) from e

    def _format_number(self, number: int | float | Decimal, style: NumberStyle) -> str:
        locale = self.babel_locale
        match style.kind:
            case "decimal":
                return str(babel_numbers.format_decimal(number, locale=locale))
            case "integer":
                return str(babel_numbers.format_decimal(number, format=_INTEGER_PATTERN, locale=locale))
            case "percent":
                return str(babel_numbers.format_percent(number, locale=locale))
            case "scientific":
                return str(babel_numbers.format_scientific(number, locale=locale))
            case "compact":
                return str(
                    babel_numbers.format_compact_decimal(
                        number, format_type=style.compact_format, locale=locale
                    )
                )
            case "currency":
                return str(
                    babel_numbers.format_currency(
                        number, style.currency or DEFAULT_CURRENCY, locale=locale
                    )
                )
            case _:
                return str(babel_numbers.format_decimal(number, format=style.pattern, locale=locale))

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------

    def format_date(
        self,
        value: object,
        style: str | None = None,
        *,
        formats: Mapping[str, str] | None = None,
    ) -> str:
        """Format the date part of a value.

        Args:
            value: date, datetime, ISO 8601 string, or POSIX timestamp (UTC)
            style: short, medium, long, full, a key of formats, or a CLDR pattern

        Raises:
            FormattingError: With the ISO form (or str) of value as fallback

        Example:
            >>> LocaleContext.create("en-US").format_date(date(2025, 10, 27), "short")
            '10/27/25'
        """
        resolved = self._resolve_datetime_style(style, formats, DEFAULT_DATE_STYLE)
        try:
            moment = self._to_date(value)
            return str(babel_dates.format_date(moment, format=resolved, locale=self.babel_locale))
        except _FORMAT_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.datetime_format_failed(value, style, self.locale_code, str(e)),
                fallback_value=self._datetime_fallback(value),
            ) from e

    def format_time(
        self,
        value: object,
        style: str | None = None,
        *,
        formats: Mapping[str, str] | None = None,
    ) -> str:
        """Format the time part of a value.

        A plain date formats as midnight.

        Raises:
            FormattingError: With the ISO form (or str) of value as fallback

        Example:
            >>> LocaleContext.create("en-US").format_time(time(14, 30), "HH:mm")
            '14:30'
        """
        resolved = self._resolve_datetime_style(style, formats, DEFAULT_TIME_STYLE)
        try:
            moment = self._to_time(value)
            return str(babel_dates.format_time(moment, format=resolved, locale=self.babel_locale))
        except _FORMAT_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.datetime_format_failed(value, style, self.locale_code, str(e)),
                fallback_value=self._datetime_fallback(value),
            ) from e

    @staticmethod
    def _resolve_datetime_style(
        style: str | None, formats: Mapping[str, str] | None, default: str
    ) -> str:
        if style is None:
            return default
        if style in DATETIME_STYLES:
            return style
        if formats and style in formats:
            return formats[style]
        # Anything else is a CLDR pattern
        return style

    @staticmethod
    def _to_date(value: object) -> date:
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return datetime.fromisoformat(value.strip())
        if isinstance(value, int | float) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=UTC)
        msg = f"expected a date, got {type(value).__name__}"
        raise TypeError(msg)

    @staticmethod
    def _to_time(value: object) -> time | datetime:
        if isinstance(value, datetime | time):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        if isinstance(value, str):
            text = value.strip()
            try:
                return datetime.fromisoformat(text)
            except ValueError:
                return time.fromisoformat(text)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=UTC)
        msg = f"expected a time, got {type(value).__name__}"
        raise TypeError(msg)

    @staticmethod
    def _datetime_fallback(value: object) -> str:
        if isinstance(value, date | time):
            return value.isoformat()
        return str(value)
