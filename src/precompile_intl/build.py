"""Build-tool integration: message documents in, Python module source out.

A bundler plugin reads a locale file, hands its text (or the decoded
mapping) to these functions and writes or serves the returned module
source. File discovery and caching stay with the caller.

Nested documents are flattened with dotted keys:

    {"cart": {"items": "{n, plural, one {# item} other {# items}}"}}
        -> key "cart.items"

Python 3.13+.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from precompile_intl.compiler import compile_messages
from precompile_intl.constants import DEFAULT_RUNTIME_MODULE
from precompile_intl.diagnostics import IntlSyntaxError

__all__ = [
    "TransformResult",
    "flatten_messages",
    "transform_json",
    "transform_messages",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransformResult:
    """Generated module source plus the messages that failed to compile.

    Attributes:
        source: Python module source defining `messages`
        errors: Syntax errors by message key (those keys are absent from source)
    """

    source: str
    errors: Mapping[str, IntlSyntaxError]

    @property
    def is_valid(self) -> bool:
        """True when every message compiled."""
        return not self.errors


def flatten_messages(nested: Mapping[str, object], sep: str = ".") -> dict[str, str]:
    """Flatten nested message groups into sep-joined keys.

    Raises:
        TypeError: If a leaf is neither a string nor a mapping

    Example:
        >>> flatten_messages({"a": {"b": "x", "c": {"d": "y"}}, "e": "z"})
        {'a.b': 'x', 'a.c.d': 'y', 'e': 'z'}
    """
    flat: dict[str, str] = {}

    def walk(group: Mapping[str, object], prefix: str) -> None:
        for name, value in group.items():
            key = f"{prefix}{sep}{name}" if prefix else str(name)
            if isinstance(value, str):
                if key in flat:
                    logger.warning("Duplicate message key '%s' after flattening", key)
                flat[key] = value
            elif isinstance(value, Mapping):
                walk(value, key)
            else:
                msg = f"Message '{key}' must be a string or a group, got {type(value).__name__}"
                raise TypeError(msg)

    walk(nested, "")
    return flat


def transform_messages(
    messages: Mapping[str, object],
    *,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
    strict: bool = False,
    sep: str = ".",
) -> TransformResult:
    """Compile a (possibly nested) message mapping into module source.

    Args:
        messages: Message keys (or groups) to ICU sources
        runtime_module: Module the generated code imports helpers from
        strict: Raise on the first malformed message
        sep: Separator joining nested group keys

    Raises:
        IntlSyntaxError: In strict mode, for the first malformed message
    """
    result = compile_messages(flatten_messages(messages, sep), strict=strict)
    return TransformResult(
        source=result.to_module_source(runtime_module=runtime_module),
        errors=result.errors,
    )


def transform_json(
    text: str | bytes,
    *,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
    strict: bool = False,
    sep: str = ".",
) -> TransformResult:
    """Compile a JSON message document into module source.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
        TypeError: If the document is not a JSON object
        IntlSyntaxError: In strict mode, for the first malformed message
    """
    document = json.loads(text)
    if not isinstance(document, dict):
        msg = f"Message document must be a JSON object, got {type(document).__name__}"
        raise TypeError(msg)
    return transform_messages(document, runtime_module=runtime_module, strict=strict, sep=sep)
