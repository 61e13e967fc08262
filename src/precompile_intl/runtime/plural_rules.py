"""CLDR plural rules using Babel.

Narrow category interface used by the plural helper. Everything
locale-specific about pluralization lives behind select_plural_category,
so the data source can change without touching compiler or helpers.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

import logging
from decimal import Decimal

from babel.core import UnknownLocaleError as BabelUnknownLocaleError

from precompile_intl.diagnostics import ErrorTemplate, FormattingError
from precompile_intl.enums import PluralCategory
from precompile_intl.locale_utils import get_babel_locale

__all__ = ["select_plural_category"]

logger = logging.getLogger(__name__)


def select_plural_category(
    n: int | float | Decimal, locale: str, *, ordinal: bool = False
) -> str:
    """Select the CLDR plural category of a number.

    Args:
        n: Number to categorize
        locale: Locale tag (BCP-47 or POSIX)
        ordinal: Use ordinal rules (selectordinal) instead of cardinal

    Returns:
        One of "zero", "one", "two", "few", "many", "other"

    Raises:
        FormattingError: If the rule cannot be evaluated for n; the
            fallback value is "other"

    Examples:
        >>> select_plural_category(0, "lv")
        'zero'
        >>> select_plural_category(5, "ru")
        'many'
        >>> select_plural_category(2, "en", ordinal=True)
        'two'
        >>> select_plural_category(42, "ja")
        'other'

    Unknown or invalid locales fall back to the one/other rule for
    cardinals and to "other" for ordinals.
    """
    try:
        locale_obj = get_babel_locale(locale)
    except (BabelUnknownLocaleError, ValueError):
        logger.debug("No plural rules for locale '%s', using one/other", locale)
        if ordinal:
            return PluralCategory.OTHER.value
        return PluralCategory.ONE.value if abs(n) == 1 else PluralCategory.OTHER.value

    rule = locale_obj.ordinal_form if ordinal else locale_obj.plural_form
    try:
        return rule(n)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise FormattingError(
            ErrorTemplate.plural_category_failed(n, locale, str(e)),
            fallback_value=PluralCategory.OTHER.value,
        ) from e
