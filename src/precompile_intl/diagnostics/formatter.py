"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


def _escape_control(text: str) -> str:
    """Escape control characters so message text cannot forge log lines."""
    return "".join(
        ch if ch >= " " or ch == "\t" else f"\\x{ord(ch):02x}" for ch in text
    )


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.message_not_found("hello", "en")))
        MESSAGE_NOT_FOUND: Message 'hello' not found for locale 'en' or its fallbacks
    """

    output_format: OutputFormat = OutputFormat.RUST

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    @staticmethod
    def _format_rust(diagnostic: Diagnostic) -> str:
        message = _escape_control(diagnostic.message)
        lines = [f"{diagnostic.severity}[{diagnostic.code.name}]: {message}"]
        if diagnostic.span is not None:
            location = f"line {diagnostic.span.line}, column {diagnostic.span.column}"
            if diagnostic.message_key is not None:
                location = f"{_escape_control(diagnostic.message_key)}:{location}"
            lines.append(f"  --> {location}")
        elif diagnostic.message_key is not None:
            lines.append(f"  --> {_escape_control(diagnostic.message_key)}")
        if diagnostic.locale_code is not None:
            lines.append(f"  = locale: {_escape_control(diagnostic.locale_code)}")
        if diagnostic.hint:
            lines.append(f"  = help: {diagnostic.hint}")
        return "\n".join(lines)

    @staticmethod
    def _format_simple(diagnostic: Diagnostic) -> str:
        return f"{diagnostic.code.name}: {_escape_control(diagnostic.message)}"

    @staticmethod
    def _format_json(diagnostic: Diagnostic) -> str:
        data: dict[str, object] = {
            "code": diagnostic.code.name,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
        }
        if diagnostic.span is not None:
            data["span"] = {
                "start": diagnostic.span.start,
                "end": diagnostic.span.end,
                "line": diagnostic.span.line,
                "column": diagnostic.span.column,
            }
        if diagnostic.hint is not None:
            data["hint"] = diagnostic.hint
        if diagnostic.message_key is not None:
            data["message_key"] = diagnostic.message_key
        if diagnostic.locale_code is not None:
            data["locale"] = diagnostic.locale_code
        return json.dumps(data, ensure_ascii=False)
