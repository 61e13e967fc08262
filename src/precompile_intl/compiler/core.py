"""Compile ICU messages into templates and generated module source.

compile_message() handles one message: parse, generate the expression,
evaluate it against the runtime helpers. compile_messages() does the same
for a whole dictionary, collecting per-key syntax errors instead of stopping
at the first one (unless strict).

Python 3.13+.
"""

import importlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from precompile_intl.constants import DEFAULT_RUNTIME_MODULE, HELPER_ALIAS_PREFIX
from precompile_intl.diagnostics import ErrorTemplate, IntlSyntaxError, SourceSpan
from precompile_intl.runtime.types import MessageKey, Template
from precompile_intl.syntax.ast import ArgName
from precompile_intl.syntax.parser import MessageParser

from .codegen import CodeGenerator, render_module

__all__ = [
    "CompilationResult",
    "CompiledMessage",
    "compile_message",
    "compile_messages",
]

logger = logging.getLogger(__name__)

_DEFAULT_PARSER = MessageParser()
_GENERATOR = CodeGenerator()


@dataclass(frozen=True, slots=True)
class CompiledMessage:
    """One compiled message.

    Attributes:
        source: ICU message text
        expression: Python expression source of the template
        helpers: Runtime helper names the expression calls
        arguments: Distinct argument names in first-seen order
        template: Evaluated template (str or callable)
    """

    source: str
    expression: str
    helpers: frozenset[str]
    arguments: tuple[ArgName, ...]
    template: Template

    @property
    def is_static(self) -> bool:
        """True when the template is a plain string."""
        return isinstance(self.template, str)


def _evaluate(expression: str, helpers: frozenset[str], filename: str) -> Template:
    runtime = importlib.import_module(DEFAULT_RUNTIME_MODULE)
    namespace = {f"{HELPER_ALIAS_PREFIX}{name}": getattr(runtime, name) for name in helpers}
    code = compile(expression, filename, "eval")
    template: Template = eval(code, namespace)  # noqa: S307 - expression generated from the AST
    return template


def compile_message(
    source: str, *, key: MessageKey | None = None, parser: MessageParser | None = None
) -> CompiledMessage:
    """Compile one ICU message.

    Args:
        source: ICU message text
        key: Message key, used in error reports and the code filename
        parser: Parser with custom limits (default limits otherwise)

    Returns:
        CompiledMessage with the evaluated template

    Raises:
        IntlSyntaxError: If the message is malformed

    Example:
        >>> compiled = compile_message("Hello {name}!")
        >>> compiled.template("World")
        'Hello World!'
        >>> compiled.expression
        'lambda name: f"Hello {_interpolate(name)}!"'
    """
    active_parser = parser or _DEFAULT_PARSER
    try:
        message = active_parser.parse(source)
    except IntlSyntaxError as e:
        e.message_key = key
        raise

    generated = _GENERATOR.generate_code(message)
    try:
        template = _evaluate(generated.expression, generated.helpers, f"<message {key or '?'}>")
    except (SyntaxError, RecursionError, MemoryError) as e:
        # Only reachable with a parser whose max_depth exceeds MAX_DEPTH
        span = SourceSpan(start=0, end=len(source), line=1, column=1)
        raise IntlSyntaxError(
            ErrorTemplate.expression_too_deep(span, str(e)), message_key=key
        ) from e

    return CompiledMessage(
        source=source,
        expression=generated.expression,
        helpers=generated.helpers,
        arguments=generated.arguments,
        template=template,
    )


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Outcome of compiling a dictionary of messages.

    Attributes:
        messages: Successfully compiled messages, in input order
        errors: Syntax errors by message key, in input order
    """

    messages: Mapping[MessageKey, CompiledMessage]
    errors: Mapping[MessageKey, IntlSyntaxError]

    @property
    def is_valid(self) -> bool:
        """True when every message compiled."""
        return not self.errors

    @property
    def templates(self) -> dict[MessageKey, Template]:
        """Evaluated templates, ready for LocaleStore.add_messages()."""
        return {key: compiled.template for key, compiled in self.messages.items()}

    @property
    def helpers_used(self) -> frozenset[str]:
        """Union of the helpers every compiled message calls."""
        return frozenset().union(*(compiled.helpers for compiled in self.messages.values()))

    def to_module_source(self, *, runtime_module: str = DEFAULT_RUNTIME_MODULE) -> str:
        """Render a Python module defining `messages` for the compiled keys.

        Only the helpers actually used are imported. Failed keys are absent.
        """
        return render_module(
            {key: compiled.expression for key, compiled in self.messages.items()},
            self.helpers_used,
            runtime_module=runtime_module,
        )


def compile_messages(
    messages: Mapping[MessageKey, str],
    *,
    strict: bool = False,
    parser: MessageParser | None = None,
) -> CompilationResult:
    """Compile every message of a dictionary.

    A malformed message is logged and recorded in errors; the remaining
    messages still compile.

    Args:
        messages: Message key to ICU source
        strict: Raise the first IntlSyntaxError instead of collecting
        parser: Parser with custom limits

    Raises:
        IntlSyntaxError: In strict mode, for the first malformed message
        TypeError: If a message source is not a string

    Example:
        >>> result = compile_messages({"ok": "Hi {name}", "bad": "{n, plural, =0 {none}}"})
        >>> list(result.templates), list(result.errors)
        (['ok'], ['bad'])
    """
    compiled: dict[MessageKey, CompiledMessage] = {}
    errors: dict[MessageKey, IntlSyntaxError] = {}
    for key, source in messages.items():
        if not isinstance(source, str):
            msg = f"Message '{key}' must be a string, got {type(source).__name__}"
            raise TypeError(msg)
        try:
            compiled[key] = compile_message(source, key=key, parser=parser)
        except IntlSyntaxError as e:
            if strict:
                raise
            logger.warning("Message '%s' failed to compile: %s", key, e)
            errors[key] = e

    logger.debug("Compiled %d message(s), %d error(s)", len(compiled), len(errors))
    return CompilationResult(messages=MappingProxyType(compiled), errors=MappingProxyType(errors))
