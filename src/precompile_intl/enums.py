"""Enumerations for precompile-intl type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class FormatType(StrEnum):
    """Format type keyword of an ICU argument.

    StrEnum provides automatic string conversion: str(FormatType.PLURAL) == "plural"
    """

    NUMBER = "number"
    """Number directive: {count, number, percent}"""

    DATE = "date"
    """Date directive: {when, date, short}"""

    TIME = "time"
    """Time directive: {when, time, short}"""

    PLURAL = "plural"
    """Cardinal plural: {count, plural, one {...} other {...}}"""

    SELECTORDINAL = "selectordinal"
    """Ordinal plural: {place, selectordinal, one {#st} other {#th}}"""

    SELECT = "select"
    """Select: {gender, select, male {...} other {...}}"""


class PluralCategory(StrEnum):
    """CLDR plural category."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class LocaleDetection(StrEnum):
    """Directive for detecting the initial locale from the host environment."""

    SYSTEM = "system"
    """Use the process locale (locale module, then LC_ALL, LC_MESSAGES, LANG)."""


__all__ = [
    "FormatType",
    "LocaleDetection",
    "PluralCategory",
]
