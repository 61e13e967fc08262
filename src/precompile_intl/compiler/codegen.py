"""Generate Python expression source from a parsed ICU message.

Each message becomes a single expression: a string literal when the message
is static, otherwise a lambda whose body calls the runtime helpers. Literal
text next to dynamic parts is folded into one f-string (PEP 701 allows the
nested quotes that branch mappings need).

Output is deterministic: equal ASTs always produce byte-identical source,
so generated modules diff cleanly between builds.

Python 3.13+. Zero external dependencies.
"""

import keyword
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import assert_never

from precompile_intl.constants import (
    DEFAULT_RUNTIME_MODULE,
    HELPER_ALIAS_PREFIX,
    HELPER_NAMES,
    MULTI_ARG_PARAM,
    SANITIZED_PARAM,
)
from precompile_intl.enums import FormatType
from precompile_intl.introspection import argument_names
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
    TimeFormat,
)

from .keys import plural_output_key, select_output_key

__all__ = [
    "CodeGenerator",
    "GeneratedCode",
    "quote",
    "render_module",
]

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape(text: str, *, in_fstring: bool = False) -> str:
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif in_fstring and ch in "{}":
            out.append(ch * 2)
        elif not ch.isprintable():
            code = ord(ch)
            if code <= 0xFF:
                out.append(f"\\x{code:02x}")
            elif code <= 0xFFFF:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
        else:
            out.append(ch)
    return "".join(out)


def quote(text: str) -> str:
    """Render text as a double-quoted Python string literal.

    Unlike repr(), the quote character never depends on the content.

    Example:
        >>> print(quote('say "hi"\\n'))
        "say \\"hi\\"\\n"
    """
    return f'"{_escape(text)}"'


def _number_literal(key: int | Decimal) -> str:
    if isinstance(key, int):
        return str(key)
    # Helpers normalize non-integral values to float before exact matching
    return repr(float(key))


@dataclass(frozen=True, slots=True)
class GeneratedCode:
    """Expression source plus what it needs at runtime."""

    expression: str
    helpers: frozenset[str]
    arguments: tuple[ArgName, ...]


@dataclass(slots=True)
class _Context:
    """Mutable state for one generate() call."""

    param: str | None
    helpers: set[str] = field(default_factory=set)


class CodeGenerator:
    """Turn Message ASTs into Python expressions calling runtime helpers.

    Calling convention of the generated expression:
        - no arguments: a string literal
        - one distinct argument: ``lambda name: ...`` called with the value
        - several: ``lambda a: ...`` reading ``a["name"]`` or ``a[0]``

    Example:
        >>> gen = CodeGenerator()
        >>> print(gen.generate(parse_message("Hello {name}!")))
        lambda name: f"Hello {_interpolate(name)}!"
    """

    __slots__ = ()

    def generate(self, message: Message) -> str:
        """Generate the expression source for a message."""
        return self.generate_code(message).expression

    def generate_code(self, message: Message) -> GeneratedCode:
        """Generate the expression source with its helper and argument sets."""
        names = argument_names(message)
        if not names:
            return GeneratedCode(quote(message.text), frozenset(), ())

        if len(names) == 1:
            param = self._single_param(names[0])
            ctx = _Context(param=param)
        else:
            param = MULTI_ARG_PARAM
            ctx = _Context(param=None)
        body = self._message(message, ctx)
        return GeneratedCode(f"lambda {param}: {body}", frozenset(ctx.helpers), names)

    @staticmethod
    def _single_param(name: ArgName) -> str:
        if (
            isinstance(name, str)
            and name.isidentifier()
            and name.isascii()
            and not keyword.iskeyword(name)
            and not keyword.issoftkeyword(name)
            and not name.startswith(HELPER_ALIAS_PREFIX)
            and name != MULTI_ARG_PARAM
        ):
            return name
        return SANITIZED_PARAM

    # ------------------------------------------------------------------
    # Bodies
    # ------------------------------------------------------------------

    def _message(self, message: Message, ctx: _Context) -> str:
        """Expression for a message body (top level or a branch)."""
        elements = message.elements
        if message.is_static:
            return quote(message.text)
        if len(elements) == 1:
            return self._element(elements[0], ctx)

        parts: list[str] = []
        for element in elements:
            if Literal.guard(element):
                parts.append(_escape(element.text, in_fstring=True))
            else:
                parts.append("{" + self._element(element, ctx) + "}")
        return 'f"' + "".join(parts) + '"'

    def _access(self, name: ArgName, ctx: _Context) -> str:
        if ctx.param is not None:
            return ctx.param
        if isinstance(name, int):
            return f"{MULTI_ARG_PARAM}[{name}]"
        return f"{MULTI_ARG_PARAM}[{quote(name)}]"

    def _call(self, helper: str, args: Iterable[str], ctx: _Context) -> str:
        ctx.helpers.add(helper)
        return f"{HELPER_ALIAS_PREFIX}{helper}({', '.join(args)})"

    def _element(self, element: Element, ctx: _Context) -> str:
        match element:
            case Literal(text=text):
                return quote(text)
            case ArgRef(name=name):
                return self._call("interpolate", [self._access(name, ctx)], ctx)
            case NumberFormat(arg=arg, style=style):
                args = [self._access(arg, ctx)]
                if style is not None:
                    args.append(quote(style))
                return self._call("number", args, ctx)
            case TimeFormat(arg=arg, style=style, kind=kind):
                args = [self._access(arg, ctx)]
                if style is not None:
                    args.append(quote(style))
                helper = "time" if kind is FormatType.TIME else "date"
                return self._call(helper, args, ctx)
            case Pound(arg=arg):
                # The original value, not the offset-adjusted one
                return self._call("number", [self._access(arg, ctx)], ctx)
            case PluralFormat():
                return self._plural(element, ctx)
            case SelectFormat():
                return self._select(element, ctx)
            case _ as unreachable:
                assert_never(unreachable)

    def _plural(self, element: PluralFormat, ctx: _Context) -> str:
        entries: list[str] = []
        for branch in element.branches:
            key = plural_output_key(branch.key)
            key_src = quote(key) if isinstance(key, str) else _number_literal(key)
            entries.append(f"{key_src}: {self._message(branch.value, ctx)}")

        args = [self._access(element.arg, ctx), "{" + ", ".join(entries) + "}"]
        if element.offset:
            args.append(f"offset={element.offset}")
        if element.ordinal:
            args.append("ordinal=True")
        return self._call("plural", args, ctx)

    def _select(self, element: SelectFormat, ctx: _Context) -> str:
        entries = [
            f"{quote(select_output_key(branch.key))}: {self._message(branch.value, ctx)}"
            for branch in element.branches
        ]
        args = [self._access(element.arg, ctx), "{" + ", ".join(entries) + "}"]
        return self._call("select", args, ctx)


# ============================================================================
# MODULES
# ============================================================================


def render_module(
    expressions: Mapping[str, str],
    helpers: Iterable[str],
    *,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
) -> str:
    """Render a Python module defining ``messages`` from compiled expressions.

    Only the helpers actually used are imported, in canonical order, each
    aliased with a leading underscore.

    Args:
        expressions: Message key to expression source, in output order
        helpers: Helper names referenced by the expressions
        runtime_module: Module the helpers are imported from

    Returns:
        Module source text ending with a newline
    """
    used = set(helpers)
    unknown = used.difference(HELPER_NAMES)
    if unknown:
        msg = f"Unknown runtime helpers: {sorted(unknown)}"
        raise ValueError(msg)

    lines = ['"""Compiled messages. Generated by precompile-intl; do not edit."""', ""]
    if used:
        imports = ", ".join(
            f"{name} as {HELPER_ALIAS_PREFIX}{name}" for name in HELPER_NAMES if name in used
        )
        lines.extend([f"from {runtime_module} import {imports}", ""])

    if expressions:
        lines.append("messages = {")
        lines.extend(f"    {quote(key)}: {expr}," for key, expr in expressions.items())
        lines.append("}")
    else:
        lines.append("messages = {}")
    return "\n".join(lines) + "\n"
