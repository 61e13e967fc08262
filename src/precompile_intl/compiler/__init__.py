"""ICU message compiler.

Turns message dictionaries into Python template expressions and generated
modules. Depends on the syntax package for parsing and on the runtime
helpers for evaluation.

Python 3.13+.
"""

from .codegen import CodeGenerator, GeneratedCode, quote, render_module
from .core import CompilationResult, CompiledMessage, compile_message, compile_messages
from .keys import PLURAL_CATEGORY_KEYS, compact_keys, plural_output_key, select_output_key

__all__ = [
    "PLURAL_CATEGORY_KEYS",
    "CodeGenerator",
    "CompilationResult",
    "CompiledMessage",
    "GeneratedCode",
    "compact_keys",
    "compile_message",
    "compile_messages",
    "plural_output_key",
    "quote",
    "render_module",
    "select_output_key",
]
