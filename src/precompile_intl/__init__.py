"""precompile-intl - ICU messages compiled to Python at build time.

Compiles ICU MessageFormat messages (plural, selectordinal, select, number,
date, time) into small Python expressions ahead of time, and provides the
locale runtime those expressions run against. No message parsing happens at
runtime; CLDR data comes from Babel.

Public API:
    compile_messages - Compile a message dictionary (templates + module source)
    compile_message - Compile one message
    parse_message - Parse one message to its AST
    LocaleStore - Dictionaries, loaders, fallback chains, active locale
    init, add_messages, register, set_active_locale, format_message,
    get_template, wait_locale, locale, is_loading - Default store surface

Exceptions:
    IntlError - Base exception class
    IntlSyntaxError - Malformed message at compile time
    MissingMessageError - Key missing along the whole fallback chain
    UnknownLocaleError - Nothing known for a locale's chain
    LocaleLoadFailedError - A loader failed while switching locales

Submodules:
    precompile_intl.syntax - AST node types and parser
    precompile_intl.compiler - Key compaction and code generation
    precompile_intl.runtime.helpers - Helpers imported by generated code
    precompile_intl.build - Build-tool integration (JSON/mapping to module)
    precompile_intl.introspection - Argument extraction
    precompile_intl.diagnostics - Diagnostic codes, templates and formatting
"""

from .compiler import CompilationResult, CompiledMessage, compile_message, compile_messages
from .diagnostics import (
    IntlError,
    IntlSyntaxError,
    LocaleLoadFailedError,
    MissingMessageError,
    UnknownLocaleError,
)
from .enums import LocaleDetection
from .runtime import (
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
from .syntax import parse_message

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402 - after public API imports
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("precompile-intl")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CompilationResult",
    "CompiledMessage",
    "IntlError",
    "IntlSyntaxError",
    "LocaleDetection",
    "LocaleLoadFailedError",
    "LocaleStore",
    "LocaleSwitch",
    "MissingMessageError",
    "UnknownLocaleError",
    "__version__",
    "add_messages",
    "compile_message",
    "compile_messages",
    "default_store",
    "format_message",
    "get_template",
    "init",
    "is_loading",
    "locale",
    "parse_message",
    "register",
    "set_active_locale",
    "wait_locale",
]
