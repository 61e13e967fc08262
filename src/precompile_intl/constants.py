"""Shared constants for precompile-intl.

Centralized configuration constants used by the compiler and the runtime.
Placing constants here avoids circular imports and keeps the reserved keys
that generated code and helpers must agree on in one place.

Constants are grouped by domain:
- Limits: recursion and input size protection for the parser
- Branch keys: reserved and compacted keys shared by compiler and helpers
- Helpers: names of runtime helpers callable from generated code
- Defaults: runtime formatting defaults

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Limits
    "MAX_DEPTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_LOCALE_CACHE_SIZE",
    # Branch keys
    "OTHER_KEY",
    "PLURAL_CATEGORIES",
    "PLURAL_CATEGORY_KEYS",
    # Helpers
    "HELPER_NAMES",
    "HELPER_ALIAS_PREFIX",
    "DEFAULT_RUNTIME_MODULE",
    "MULTI_ARG_PARAM",
    "SANITIZED_PARAM",
    # Defaults
    "DEFAULT_LOCALE",
    "DEFAULT_CURRENCY",
    "DEFAULT_DATE_STYLE",
    "DEFAULT_TIME_STYLE",
    "DATETIME_STYLES",
]

# ============================================================================
# LIMITS
# ============================================================================

# Maximum nesting of plural/select constructs inside one message.
# Real messages rarely nest more than three levels; anything near this
# limit is malformed or adversarial. The generated expression nests a call,
# a dict and an f-string per level, and CPython's parser rejects such
# expressions somewhere past 60 levels; the limit stays safely below that.
MAX_DEPTH: int = 50

# Maximum length of a single message source, in characters.
MAX_MESSAGE_LENGTH: int = 1024 * 1024

# Maximum cached LocaleContext instances.
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# BRANCH KEYS
# ============================================================================

# Reserved key of the mandatory `other` branch in generated branch mappings.
# Author keys and compacted prefixes are never empty, so this cannot collide.
OTHER_KEY: str = ""

# CLDR plural category vocabulary, in CLDR order.
PLURAL_CATEGORIES: tuple[str, ...] = ("zero", "one", "two", "few", "many", "other")

# Plural categories in generated branch mappings: each category's shortest
# prefix not shared with another category, `other` on the reserved key.
PLURAL_CATEGORY_KEYS: dict[str, str] = {
    "zero": "z",
    "one": "o",
    "two": "t",
    "few": "f",
    "many": "m",
    "other": OTHER_KEY,
}

# ============================================================================
# HELPERS
# ============================================================================

# Runtime helpers generated code may call, in canonical import order.
HELPER_NAMES: tuple[str, ...] = ("interpolate", "number", "date", "time", "plural", "select")

# Generated code imports helpers under this prefix (e.g. `number as _number`)
# so argument names such as `number` or `date` never shadow them.
HELPER_ALIAS_PREFIX: str = "_"

# Module generated sources import helpers from.
DEFAULT_RUNTIME_MODULE: str = "precompile_intl.runtime.helpers"

# Parameter of templates that take a mapping of several arguments.
MULTI_ARG_PARAM: str = "a"

# Parameter used when a single argument name is not a safe identifier.
SANITIZED_PARAM: str = "_v"

# ============================================================================
# DEFAULTS
# ============================================================================

# Locale used by helpers before any locale has been activated.
DEFAULT_LOCALE: str = "en"

# Currency used by the `currency` number style unless configured.
DEFAULT_CURRENCY: str = "USD"

DEFAULT_DATE_STYLE: str = "medium"
DEFAULT_TIME_STYLE: str = "medium"

# Named CLDR date/time format widths understood by Babel.
DATETIME_STYLES: frozenset[str] = frozenset({"short", "medium", "long", "full"})
