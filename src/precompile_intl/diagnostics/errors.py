"""Exception hierarchy with structured diagnostics.

All exceptions can carry a Diagnostic object for rich error information.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, SourceSpan

__all__ = [
    "FormattingError",
    "IntlError",
    "IntlSyntaxError",
    "LocaleLoadFailedError",
    "MissingMessageError",
    "UnknownLocaleError",
]


class IntlError(Exception):
    """Base exception for all precompile-intl errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize IntlError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class IntlSyntaxError(IntlError):
    """Malformed ICU message found at compile time.

    Fatal for the offending message only; batch compilation continues with
    the remaining messages.

    Attributes:
        span: Location of the error in the message source (optional)
        message_key: Key of the message being compiled (optional)
    """

    def __init__(self, message: str | Diagnostic, *, message_key: str | None = None) -> None:
        super().__init__(message)
        self.span: SourceSpan | None = (
            self.diagnostic.span if self.diagnostic is not None else None
        )
        self.message_key = message_key

    @property
    def position(self) -> int | None:
        """Character offset of the error, or None when not tied to a location."""
        return self.span.start if self.span is not None else None


class MissingMessageError(IntlError):
    """Message key absent from every dictionary in the fallback chain.

    Recoverable: callers decide on a placeholder.

    Attributes:
        key: The message key that was requested
        locale: The locale whose chain was searched
    """

    def __init__(self, message: str | Diagnostic, *, key: str, locale: str) -> None:
        super().__init__(message)
        self.key = key
        self.locale = locale


class UnknownLocaleError(IntlError):
    """No member of the locale's chain has a dictionary or a registered loader.

    Attributes:
        locale: The requested locale
    """

    def __init__(self, message: str | Diagnostic, *, locale: str) -> None:
        super().__init__(message)
        self.locale = locale


class LocaleLoadFailedError(IntlError):
    """Asynchronous loader for a locale raised.

    The locale's dictionary stays absent and the active locale is unchanged.

    Attributes:
        locale: Locale whose loader failed
        cause: Exception raised by the loader
    """

    def __init__(self, message: str | Diagnostic, *, locale: str, cause: BaseException) -> None:
        super().__init__(message)
        self.locale = locale
        self.cause = cause


class FormattingError(IntlError):
    """Locale-aware formatting failed.

    Raised by LocaleContext and plural rule selection; the formatting
    helpers catch it and emit fallback_value instead, so compiled templates
    never raise during normal evaluation.

    Attributes:
        fallback_value: String to use in output when formatting fails
    """

    def __init__(self, message: str | Diagnostic, fallback_value: str) -> None:
        """Initialize FormattingError.

        Args:
            message: Error message string OR Diagnostic object
            fallback_value: Value to use in output when formatting fails
        """
        super().__init__(message)
        self.fallback_value = fallback_value
