"""Type aliases for the locale runtime.

Provides semantic type aliases used by the store, the helpers and user code
annotating loaders and message dictionaries.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Awaitable, Callable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

__all__ = [
    "FormatValue",
    "Loader",
    "LoaderResult",
    "LocaleCode",
    "MessageDictionary",
    "MessageKey",
    "MissingMessageHandler",
    "Template",
]

type LocaleCode = str
"""BCP-47 locale tag (e.g., 'en', 'fr-CA', 'zh-Hant-TW')."""

type MessageKey = str
"""Key of a message in a dictionary (e.g., 'greeting', 'cart.items')."""

type Template = str | Callable[[Any], str]
"""Compiled message: a string, or a callable taking the argument value(s)."""

type MessageDictionary = dict[MessageKey, Template]
"""Resolved templates of one locale."""

type LoaderResult = Mapping[MessageKey, Template]
"""Dictionary fragment produced by a loader."""

type Loader = Callable[[], LoaderResult | Awaitable[LoaderResult]] | Awaitable[LoaderResult]
"""Deferred dictionary source: a sync or async callable, or an awaitable."""

type MissingMessageHandler = Callable[[LocaleCode, MessageKey], str]
"""Called with (locale, key) when a message is missing from every chain member."""

type FormatValue = int | float | Decimal | str | date | datetime | time | None
"""Values the number/date/time helpers understand."""
