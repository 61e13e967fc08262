"""Locale tag utilities.

The runtime keys dictionaries by BCP-47 tags ("en-US"), Babel wants POSIX
identifiers ("en_US"). Tags are normalized to BCP-47 at the store boundary;
conversion to POSIX happens only when talking to Babel.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from precompile_intl.constants import DEFAULT_LOCALE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "locale_chain",
    "normalize_locale",
    "parent_tags",
    "to_bcp47",
]

_PSEUDO_LOCALES = frozenset({"C", "POSIX", ""})


def to_bcp47(tag: str) -> str:
    """Normalize a locale tag to hyphenated BCP-47 form.

    Accepts POSIX identifiers too; an encoding or modifier suffix is dropped.

    Raises:
        ValueError: If the tag is empty

    Example:
        >>> to_bcp47("pt_BR")
        'pt-BR'
        >>> to_bcp47("de_DE.UTF-8")
        'de-DE'
    """
    cleaned = tag.strip().split(".", 1)[0].split("@", 1)[0]
    if not cleaned:
        msg = f"Invalid locale tag: {tag!r}"
        raise ValueError(msg)
    return cleaned.replace("_", "-")


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 tag to the POSIX form Babel parses.

    Example:
        >>> normalize_locale("en-US")
        'en_US'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a cached Babel Locale for a BCP-47 or POSIX tag.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect the host locale as a BCP-47 tag.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable
    3. LC_MESSAGES environment variable
    4. LANG environment variable

    "C" and "POSIX" pseudo-locales are ignored.

    Args:
        raise_on_failure: Raise RuntimeError instead of returning the
            default locale when nothing is detected

    Raises:
        RuntimeError: If raise_on_failure is True and no locale is set
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
    except (ValueError, AttributeError):
        system_locale = None
    if system_locale and system_locale not in _PSEUDO_LOCALES:
        return to_bcp47(system_locale)

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var, "")
        if value.split(".", 1)[0] not in _PSEUDO_LOCALES:
            return to_bcp47(value)

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)
    return DEFAULT_LOCALE


def parent_tags(tag: str) -> tuple[str, ...]:
    """Tag followed by its truncation parents, most specific first.

    Example:
        >>> parent_tags("zh-Hant-TW")
        ('zh-Hant-TW', 'zh-Hant', 'zh')
    """
    parts = tag.split("-")
    return tuple("-".join(parts[:size]) for size in range(len(parts), 0, -1))


def locale_chain(tag: str, fallback: str | None = None) -> tuple[str, ...]:
    """Lookup chain: the tag and its parents, then the fallback and its parents.

    Duplicates keep their first position.

    Example:
        >>> locale_chain("fr-CA", "en-US")
        ('fr-CA', 'fr', 'en-US', 'en')
        >>> locale_chain("en-GB", "en")
        ('en-GB', 'en')
    """
    chain = list(parent_tags(tag))
    if fallback is not None:
        chain.extend(parent_tags(fallback))
    return tuple(dict.fromkeys(chain))
