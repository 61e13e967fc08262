"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Reference errors (missing messages, unknown locales)
        2000-2999: Runtime errors (loading, invalid arguments)
        3000-3999: Syntax errors (message compilation failures)
        4000-4999: Formatting errors (locale-aware formatting fallbacks)
    """

    # Reference errors (1000-1999)
    MESSAGE_NOT_FOUND = 1001
    LOCALE_UNKNOWN = 1002

    # Runtime errors (2000-2999)
    LOCALE_LOAD_FAILED = 2001
    LOADER_RESULT_INVALID = 2002
    EVENT_LOOP_REQUIRED = 2003
    NO_ACTIVE_LOCALE = 2004

    # Syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    UNEXPECTED_CHARACTER = 3002
    UNBALANCED_BRACE = 3003
    ARGUMENT_NAME_EXPECTED = 3004
    UNKNOWN_FORMAT_TYPE = 3005
    MISSING_OTHER_BRANCH = 3006
    DUPLICATE_BRANCH_KEY = 3007
    POUND_OUTSIDE_PLURAL = 3008
    UNKNOWN_PLURAL_CATEGORY = 3009
    INVALID_EXACT_KEY = 3010
    INVALID_OFFSET = 3011
    BRANCH_BODY_EXPECTED = 3012
    NESTING_DEPTH_EXCEEDED = 3013
    MESSAGE_TOO_LONG = 3014

    # Formatting errors (4000-4999)
    NUMBER_FORMAT_FAILED = 4001
    DATETIME_FORMAT_FAILED = 4002
    PLURAL_CATEGORY_FAILED = 4003


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or line or
                column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough context for both
    humans (build logs) and tools (editor integrations).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for runtime errors)
        hint: Suggestion for fixing the error
        message_key: Key of the message the error belongs to, when known
        locale_code: Locale involved in a runtime error, when known
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    message_key: str | None = None
    locale_code: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[MISSING_OTHER_BRANCH]: Missing 'other' branch in plural argument 'count'
              --> line 1, column 1
              = help: Every plural and select argument needs an 'other' branch

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
