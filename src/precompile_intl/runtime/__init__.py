"""Locale runtime package.

Provides the locale store that compiled templates are registered with, the
formatting helpers that generated code calls, and the Babel-backed locale
context and plural rules behind them.

Python 3.13+.
"""

from .locale_context import LocaleContext, NumberStyle
from .observable import Observable
from .plural_rules import select_plural_category
from .store import (
    FallbackInfo,
    IntlConfig,
    LocaleStore,
    LocaleSwitch,
    add_messages,
    default_store,
    format_message,
    get_template,
    init,
    is_loading,
    locale,
    register,
    set_active_locale,
    wait_locale,
)
from .types import Loader, LocaleCode, MessageDictionary, MessageKey, Template

__all__ = [
    "FallbackInfo",
    "IntlConfig",
    "Loader",
    "LocaleCode",
    "LocaleContext",
    "LocaleStore",
    "LocaleSwitch",
    "MessageDictionary",
    "MessageKey",
    "NumberStyle",
    "Observable",
    "Template",
    "add_messages",
    "default_store",
    "format_message",
    "get_template",
    "init",
    "is_loading",
    "locale",
    "register",
    "select_plural_category",
    "set_active_locale",
    "wait_locale",
]
