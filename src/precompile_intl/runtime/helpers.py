"""Formatting helpers called by compiled message templates.

Generated modules import these under underscore aliases
(``from precompile_intl.runtime.helpers import plural as _plural``).
They read the active locale and configuration from the default store and
never raise: formatting failures are logged and replaced by a fallback
string.

Python 3.13+. Uses Babel (through LocaleContext and plural rules).
"""

import logging
import math
from collections.abc import Mapping
from decimal import Decimal

from precompile_intl.constants import OTHER_KEY, PLURAL_CATEGORY_KEYS
from precompile_intl.diagnostics import ErrorTemplate, FormattingError

from .locale_context import LocaleContext
from .plural_rules import select_plural_category
from .store import default_store
from .types import FormatValue

__all__ = [
    "date",
    "interpolate",
    "number",
    "plural",
    "select",
    "time",
]

logger = logging.getLogger(__name__)

type Branches = Mapping[str | int | float, str]


def _context() -> LocaleContext:
    return LocaleContext.create(default_store.formatting_locale)


def _fallback(error: FormattingError) -> str:
    logger.warning("%s", error)
    return error.fallback_value


def interpolate(value: object) -> str:
    """Plain `{name}` argument: the value's string form."""
    return str(value)


def number(value: FormatValue, style: str | None = None) -> str:
    """Locale-aware number, `{n, number[, style]}` and the plural `#`.

    Args:
        value: Number or numeric string
        style: Style as written in the message (see LocaleContext.format_number)
    """
    config = default_store.config
    try:
        return _context().format_number(
            value, style, currency=config.currency, formats=config.named_formats("number")
        )
    except FormattingError as e:
        return _fallback(e)


def date(value: FormatValue, style: str | None = None) -> str:
    """Locale-aware date, `{d, date[, style]}`."""
    try:
        return _context().format_date(
            value, style, formats=default_store.config.named_formats("date")
        )
    except FormattingError as e:
        return _fallback(e)


def time(value: FormatValue, style: str | None = None) -> str:
    """Locale-aware time, `{t, time[, style]}`."""
    try:
        return _context().format_time(
            value, style, formats=default_store.config.named_formats("time")
        )
    except FormattingError as e:
        return _fallback(e)


def _adjust(value: object, offset: int) -> int | float | Decimal:
    """Numeric value minus offset.

    Raises:
        TypeError: If value is neither a number nor a string
        decimal.InvalidOperation: If a string value is not numeric
    """
    if isinstance(value, str):
        return Decimal(value.strip()) - offset
    if isinstance(value, int | float | Decimal):
        return value - offset
    msg = f"expected a number, got {type(value).__name__}"
    raise TypeError(msg)


def _exact_key(n: int | float | Decimal) -> int | float | None:
    """Normalize a number the way generated exact keys are written."""
    if isinstance(n, float) and not math.isfinite(n):
        return None
    if isinstance(n, Decimal) and not n.is_finite():
        return None
    return int(n) if n == int(n) else float(n)


def plural(
    value: FormatValue,
    branches: Branches,
    *,
    offset: int = 0,
    ordinal: bool = False,
) -> str:
    """Pick the branch of a plural or selectordinal construct.

    Order of precedence: exact `=N` match on the offset-adjusted value, then
    the CLDR category of the adjusted value, then `other`.

    Args:
        value: Number (or numeric string) the construct is keyed on
        branches: Rendered branch texts keyed by exact number, compacted
            category, or OTHER_KEY
        offset: Subtracted from value before matching
        ordinal: Use ordinal rules

    Example:
        >>> plural(0, {0: "no cats", "o": "one cat", "": "many cats"})
        'no cats'
    """
    other = branches.get(OTHER_KEY, "")
    locale = default_store.formatting_locale
    try:
        adjusted = _adjust(value, offset)
    except (TypeError, ArithmeticError) as e:
        logger.warning("%s", ErrorTemplate.plural_category_failed(value, locale, str(e)))
        return other

    exact = _exact_key(adjusted)
    if exact is not None and exact in branches:
        return branches[exact]
    try:
        category = select_plural_category(adjusted, locale, ordinal=ordinal)
    except FormattingError as e:
        logger.warning("%s", e)
        return other
    return branches.get(PLURAL_CATEGORY_KEYS[category], other)


def select(value: object, branches: Mapping[str, str]) -> str:
    """Pick the branch whose key equals str(value), else `other`.

    Example:
        >>> select("female", {"male": "He", "female": "She", "": "They"})
        'She'
    """
    key = str(value)
    if key != OTHER_KEY and key in branches:
        return branches[key]
    return branches.get(OTHER_KEY, "")
