"""Message introspection: argument extraction from parsed ICU messages.

Walks a Message AST and reports every argument reference with the format
type it is used with. The compiler uses the distinct names, in first-seen
order, to decide a template's calling convention.

Key features:
- Pattern matching for AST traversal
- Frozen dataclasses with slots for results
- Branch bodies are visited in source order, so first-seen order is stable

Python 3.13+.
"""

from dataclasses import dataclass
from typing import assert_never

from precompile_intl.enums import FormatType
from precompile_intl.syntax.ast import (
    ArgName,
    ArgRef,
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
from precompile_intl.syntax.parser import parse_message

__all__ = [
    "ArgumentInfo",
    "argument_names",
    "extract_arguments",
    "introspect",
]


@dataclass(frozen=True, slots=True)
class ArgumentInfo:
    """Immutable metadata about one argument usage in a message."""

    name: ArgName
    """Argument name (int for positional arguments)."""

    format_type: FormatType | None
    """Format type the argument is used with, None for plain {name}."""

    span: Span | None = None
    """Source position span for tooling."""


def _walk(elements: tuple[Element, ...], found: list[ArgumentInfo]) -> None:
    for element in elements:
        match element:
            case Literal() | Pound():
                # Pound refers to the enclosing plural argument, already recorded
                continue
            case ArgRef(name=name, span=span):
                found.append(ArgumentInfo(name, None, span))
            case NumberFormat(arg=arg, span=span):
                found.append(ArgumentInfo(arg, FormatType.NUMBER, span))
            case TimeFormat(arg=arg, kind=kind, span=span):
                found.append(ArgumentInfo(arg, kind, span))
            case PluralFormat(arg=arg, ordinal=ordinal, branches=branches, span=span):
                kind = FormatType.SELECTORDINAL if ordinal else FormatType.PLURAL
                found.append(ArgumentInfo(arg, kind, span))
                for branch in branches:
                    _walk(branch.value.elements, found)
            case SelectFormat(arg=arg, branches=branches, span=span):
                found.append(ArgumentInfo(arg, FormatType.SELECT, span))
                for branch in branches:
                    _walk(branch.value.elements, found)
            case _ as unreachable:
                assert_never(unreachable)


def extract_arguments(message: Message) -> tuple[ArgumentInfo, ...]:
    """List every argument usage in source order, including nested branches.

    Example:
        >>> msg = parse_message("{n, plural, one {{who} has # cat} other {{who} has # cats}}")
        >>> [(info.name, info.format_type) for info in extract_arguments(msg)]
        [('n', <FormatType.PLURAL: 'plural'>), ('who', None), ('who', None)]
    """
    found: list[ArgumentInfo] = []
    _walk(message.elements, found)
    return tuple(found)


def argument_names(message: Message) -> tuple[ArgName, ...]:
    """Distinct argument names in first-seen order."""
    return tuple(dict.fromkeys(info.name for info in extract_arguments(message)))


def introspect(source: str) -> tuple[ArgumentInfo, ...]:
    """Parse a message source and extract its arguments.

    Raises:
        IntlSyntaxError: If the message is malformed
    """
    return extract_arguments(parse_message(source))
