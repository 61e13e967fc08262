"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # ------------------------------------------------------------------
    # Reference errors
    # ------------------------------------------------------------------

    @staticmethod
    def message_not_found(key: str, locale: str) -> Diagnostic:
        """Message key absent from every dictionary in the fallback chain.

        Args:
            key: The message key that was not found
            locale: The locale whose chain was searched

        Returns:
            Diagnostic for MESSAGE_NOT_FOUND
        """
        msg = f"Message '{key}' not found for locale '{locale}' or its fallbacks"
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=msg,
            hint="Check that the message is defined in the loaded dictionaries",
            message_key=key,
            locale_code=locale,
        )

    @staticmethod
    def locale_unknown(locale: str, chain: tuple[str, ...]) -> Diagnostic:
        """No member of a locale's chain has messages or a loader.

        Args:
            locale: The requested locale
            chain: The fallback chain that was searched

        Returns:
            Diagnostic for LOCALE_UNKNOWN
        """
        msg = f"Unknown locale '{locale}': no messages or loaders for {', '.join(chain)}"
        return Diagnostic(
            code=DiagnosticCode.LOCALE_UNKNOWN,
            message=msg,
            hint="Call add_messages() or register() for the locale first",
            locale_code=locale,
        )

    # ------------------------------------------------------------------
    # Runtime errors
    # ------------------------------------------------------------------

    @staticmethod
    def locale_load_failed(locale: str, cause: BaseException) -> Diagnostic:
        """Asynchronous loader rejected.

        Args:
            locale: Locale the loader was registered for
            cause: Exception raised by the loader

        Returns:
            Diagnostic for LOCALE_LOAD_FAILED
        """
        msg = f"Loading messages for locale '{locale}' failed: {type(cause).__name__}: {cause}"
        return Diagnostic(
            code=DiagnosticCode.LOCALE_LOAD_FAILED,
            message=msg,
            hint="The loader will be invoked again on the next switch to this locale",
            locale_code=locale,
        )

    @staticmethod
    def loader_result_invalid(locale: str, result: object) -> Diagnostic:
        """Loader produced something other than a mapping."""
        msg = (
            f"Loader for locale '{locale}' returned {type(result).__name__}, "
            "expected a mapping of message keys to templates"
        )
        return Diagnostic(
            code=DiagnosticCode.LOADER_RESULT_INVALID,
            message=msg,
            locale_code=locale,
        )

    @staticmethod
    def event_loop_required(locale: str) -> Diagnostic:
        """Switch needs a load but no event loop is running."""
        msg = f"Switching to locale '{locale}' requires loading messages from a running event loop"
        return Diagnostic(
            code=DiagnosticCode.EVENT_LOOP_REQUIRED,
            message=msg,
            hint="Await set_active_locale() inside a coroutine, or add_messages() eagerly",
            locale_code=locale,
        )

    @staticmethod
    def no_active_locale() -> Diagnostic:
        """Lookup without an explicit locale before any locale is active."""
        return Diagnostic(
            code=DiagnosticCode.NO_ACTIVE_LOCALE,
            message="No active locale and no fallback locale configured",
            hint="Call init() or set_active_locale() first, or pass locale explicitly",
        )

    # ------------------------------------------------------------------
    # Syntax errors
    # ------------------------------------------------------------------

    @staticmethod
    def unexpected_eof(span: SourceSpan, expected: str) -> Diagnostic:
        """Message ended inside an argument or branch."""
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=f"Unexpected end of message, expected {expected}",
            span=span,
        )

    @staticmethod
    def unexpected_character(span: SourceSpan, found: str, expected: str) -> Diagnostic:
        """Character does not fit the grammar at this point."""
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_CHARACTER,
            message=f"Unexpected character {found!r}, expected {expected}",
            span=span,
        )

    @staticmethod
    def unbalanced_brace(span: SourceSpan) -> Diagnostic:
        """Closing brace with no matching opening brace."""
        return Diagnostic(
            code=DiagnosticCode.UNBALANCED_BRACE,
            message="Unbalanced '}' in message text",
            span=span,
            hint="Quote literal braces as '}'",
        )

    @staticmethod
    def argument_name_expected(span: SourceSpan) -> Diagnostic:
        """Empty argument name."""
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_NAME_EXPECTED,
            message="Expected an argument name after '{'",
            span=span,
            hint="Quote literal braces as '{'",
        )

    @staticmethod
    def unknown_format_type(span: SourceSpan, format_type: str) -> Diagnostic:
        """Format type keyword is not supported."""
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_FORMAT_TYPE,
            message=f"Unknown format type '{format_type}'",
            span=span,
            hint="Use one of: number, date, time, plural, selectordinal, select",
        )

    @staticmethod
    def missing_other_branch(span: SourceSpan, format_type: str, argument: str) -> Diagnostic:
        """Plural or select without the mandatory fallback branch."""
        return Diagnostic(
            code=DiagnosticCode.MISSING_OTHER_BRANCH,
            message=f"Missing 'other' branch in {format_type} argument '{argument}'",
            span=span,
            hint="Every plural and select argument needs an 'other' branch",
        )

    @staticmethod
    def duplicate_branch_key(span: SourceSpan, key: str) -> Diagnostic:
        """Same branch key given twice in one construct."""
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_BRANCH_KEY,
            message=f"Duplicate branch key '{key}'",
            span=span,
        )

    @staticmethod
    def pound_outside_plural(span: SourceSpan) -> Diagnostic:
        """`#` placeholder used without an enclosing plural."""
        return Diagnostic(
            code=DiagnosticCode.POUND_OUTSIDE_PLURAL,
            message="'#' is only valid inside a plural or selectordinal branch",
            span=span,
            hint="Quote a literal '#' as '#'",
        )

    @staticmethod
    def unknown_plural_category(span: SourceSpan, key: str) -> Diagnostic:
        """Plural branch key outside the CLDR category vocabulary."""
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_PLURAL_CATEGORY,
            message=f"Unknown plural category '{key}'",
            span=span,
            hint="Use zero, one, two, few, many, other, or an exact value like =0",
        )

    @staticmethod
    def invalid_exact_key(span: SourceSpan, key: str) -> Diagnostic:
        """`=N` key whose value is not a number."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_EXACT_KEY,
            message=f"Invalid exact-match key '{key}'",
            span=span,
            hint="Exact keys are '=' followed by a number, e.g. =0 or =1.5",
        )

    @staticmethod
    def invalid_offset(span: SourceSpan, detail: str) -> Diagnostic:
        """Malformed or misplaced `offset:` clause."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_OFFSET,
            message=f"Invalid offset: {detail}",
            span=span,
        )

    @staticmethod
    def branch_body_expected(span: SourceSpan, key: str) -> Diagnostic:
        """Branch key not followed by `{`."""
        return Diagnostic(
            code=DiagnosticCode.BRANCH_BODY_EXPECTED,
            message=f"Expected '{{' to open the body of branch '{key}'",
            span=span,
        )

    @staticmethod
    def nesting_depth_exceeded(span: SourceSpan, max_depth: int) -> Diagnostic:
        """Branch nesting deeper than the configured limit."""
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=f"Maximum nesting depth ({max_depth}) exceeded",
            span=span,
        )

    @staticmethod
    def expression_too_deep(span: SourceSpan, reason: str) -> Diagnostic:
        """Generated expression rejected by the Python compiler as too nested."""
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=f"Message nests too deeply for a Python expression: {reason}",
            span=span,
            hint="Keep max_depth at or below the default limit",
        )

    @staticmethod
    def message_too_long(span: SourceSpan, length: int, max_length: int) -> Diagnostic:
        """Message source exceeds the size limit; span covers the excess."""
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_TOO_LONG,
            message=f"Message length {length} exceeds maximum of {max_length} characters",
            span=span,
        )

    # ------------------------------------------------------------------
    # Formatting errors
    # ------------------------------------------------------------------

    @staticmethod
    def number_format_failed(value: object, style: str | None, locale: str, reason: str) -> Diagnostic:
        """Number could not be formatted."""
        return Diagnostic(
            code=DiagnosticCode.NUMBER_FORMAT_FAILED,
            message=f"Number formatting failed for {value!r} (style {style!r}): {reason}",
            locale_code=locale,
            severity="warning",
        )

    @staticmethod
    def datetime_format_failed(value: object, style: str | None, locale: str, reason: str) -> Diagnostic:
        """Date or time could not be formatted."""
        return Diagnostic(
            code=DiagnosticCode.DATETIME_FORMAT_FAILED,
            message=f"Date/time formatting failed for {value!r} (style {style!r}): {reason}",
            locale_code=locale,
            severity="warning",
        )

    @staticmethod
    def plural_category_failed(value: object, locale: str, reason: str) -> Diagnostic:
        """Plural category could not be computed."""
        return Diagnostic(
            code=DiagnosticCode.PLURAL_CATEGORY_FAILED,
            message=f"Plural category selection failed for {value!r}: {reason}",
            locale_code=locale,
            severity="warning",
        )
