"""ICU message AST (Abstract Syntax Tree) node definitions.

Covers the ICU subset the compiler understands: literal text, argument
references, number/date/time directives, plural/selectordinal/select with
recursive branch bodies, and the `#` placeholder.
Includes type guards as static methods (eliminates isinstance chains at call sites).

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TypeIs

from precompile_intl.enums import FormatType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Span",
    # Message structure
    "Message",
    "Branch",
    # Elements
    "Literal",
    "ArgRef",
    "NumberFormat",
    "TimeFormat",
    "PluralFormat",
    "SelectFormat",
    "Pound",
    # Type aliases
    "ArgName",
    "BranchKey",
    "Element",
]

type ArgName = str | int
"""Argument name: str for named arguments, int for positional ({0})."""

type BranchKey = str | int | Decimal
"""Branch key: category or author string, or exact numeric value from =N."""


@dataclass(frozen=True, slots=True)
class Span:
    """Source position span.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


# ============================================================================
# ELEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal text, with ICU quoting already resolved.

    Example:
        "I have '{'braces'}'" -> Literal(text="I have {braces}")
    """

    text: str
    span: Span | None = None

    @staticmethod
    def guard(element: object) -> TypeIs["Literal"]:
        """Type guard for Literal."""
        return isinstance(element, Literal)


@dataclass(frozen=True, slots=True)
class ArgRef:
    """Plain argument reference: {name} or {0}."""

    name: ArgName
    span: Span | None = None

    @staticmethod
    def guard(element: object) -> TypeIs["ArgRef"]:
        """Type guard for ArgRef."""
        return isinstance(element, ArgRef)


@dataclass(frozen=True, slots=True)
class NumberFormat:
    """Number directive: {amount, number} or {ratio, number, percent}."""

    arg: ArgName
    style: str | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TimeFormat:
    """Date or time directive: {when, date, short} or {when, time}.

    Attributes:
        arg: Argument holding the date/time value
        style: Optional style keyword or pattern
        kind: FormatType.DATE or FormatType.TIME
    """

    arg: ArgName
    style: str | None = None
    kind: FormatType = FormatType.DATE
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Branch:
    """One `key {body}` pair of a plural or select construct.

    Example:
        "one {# cat}" -> Branch(key="one", value=Message(...))
        "=0 {no cats}" -> Branch(key=0, value=Message(...))
    """

    key: BranchKey
    value: "Message"
    span: Span | None = None

    @property
    def is_exact(self) -> bool:
        """True for =N keys (stored as numbers)."""
        return not isinstance(self.key, str)


@dataclass(frozen=True, slots=True)
class PluralFormat:
    """Cardinal or ordinal plural construct.

    Attributes:
        arg: Numeric argument the branches are selected on
        ordinal: True for selectordinal
        offset: Value subtracted before exact and category matching
        branches: Branches in source order; always contains an 'other' branch
    """

    arg: ArgName
    branches: tuple[Branch, ...]
    ordinal: bool = False
    offset: int = 0
    span: Span | None = None

    @staticmethod
    def guard(element: object) -> TypeIs["PluralFormat"]:
        """Type guard for PluralFormat."""
        return isinstance(element, PluralFormat)


@dataclass(frozen=True, slots=True)
class SelectFormat:
    """Select construct keyed by author-chosen strings."""

    arg: ArgName
    branches: tuple[Branch, ...]
    span: Span | None = None

    @staticmethod
    def guard(element: object) -> TypeIs["SelectFormat"]:
        """Type guard for SelectFormat."""
        return isinstance(element, SelectFormat)


@dataclass(frozen=True, slots=True)
class Pound:
    """`#` placeholder, bound to the enclosing plural's argument."""

    arg: ArgName
    span: Span | None = None


# ============================================================================
# MESSAGE
# ============================================================================


type Element = Literal | ArgRef | NumberFormat | TimeFormat | PluralFormat | SelectFormat | Pound


@dataclass(frozen=True, slots=True)
class Message:
    """Parsed message: the top level or a branch body.

    Adjacent literal text is always merged into a single Literal by the parser.
    """

    elements: tuple[Element, ...]
    span: Span | None = None

    @property
    def is_static(self) -> bool:
        """True when the message contains nothing but literal text."""
        return all(Literal.guard(element) for element in self.elements)

    @property
    def text(self) -> str:
        """Concatenated literal text (meaningful only for static messages)."""
        return "".join(element.text for element in self.elements if Literal.guard(element))
