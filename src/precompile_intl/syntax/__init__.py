"""ICU message syntax: AST node types and the parser.

Python 3.13+. Zero external dependencies.
"""

from .ast import (
    ArgName,
    ArgRef,
    Branch,
    BranchKey,
    Element,
    Literal,
    Message,
    NumberFormat,
    PluralFormat,
    Pound,
    SelectFormat,
    Span,
    TimeFormat,
)
from .cursor import Cursor
from .parser import MessageParser, parse_message

__all__ = [
    "ArgName",
    "ArgRef",
    "Branch",
    "BranchKey",
    "Cursor",
    "Element",
    "Literal",
    "Message",
    "MessageParser",
    "NumberFormat",
    "PluralFormat",
    "Pound",
    "SelectFormat",
    "Span",
    "TimeFormat",
    "parse_message",
]
