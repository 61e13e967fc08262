"""ICU message parser.

Single-pass recursive-descent parser turning one ICU message string into a
:class:`~precompile_intl.syntax.ast.Message`.

Architecture:
    The parser walks an immutable :class:`~precompile_intl.syntax.cursor.Cursor`.
    Each rule takes a cursor and returns the parsed node together with the
    cursor positioned after it. Unlike a resource parser there is no error
    recovery: a message either parses completely or raises IntlSyntaxError
    pointing at the offending position.

Grammar (ICU subset):
    message   := (text | argument | '#')*
    argument  := '{' ws name ws ( '}' | ',' ws type ws ( '}' | ',' style '}' ) )
    type      := 'number' | 'date' | 'time'                  (simple)
               | 'plural' | 'selectordinal' | 'select'       (complex)
    complex   := ',' ws ('offset:' digits)? (ws key ws '{' message '}')+ ws '}'
    key       := '=' number | identifier

Quoting follows ICU's apostrophe convention: '' is a literal apostrophe, and
an apostrophe immediately before a syntax character ({ } | and # inside a
plural) starts a quoted run that ends at the next single apostrophe.
"""

from decimal import Decimal, InvalidOperation

from precompile_intl.constants import MAX_DEPTH, MAX_MESSAGE_LENGTH
from precompile_intl.diagnostics import Diagnostic, ErrorTemplate, IntlSyntaxError
from precompile_intl.enums import FormatType, PluralCategory
from precompile_intl.syntax.ast import (
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
from precompile_intl.syntax.cursor import Cursor

__all__ = ["MessageParser", "parse_message"]

# Characters that terminate argument names, type keywords and branch keys.
_NAME_STOP = frozenset("{}#,'|:")

_PLURAL_CATEGORIES = frozenset(category.value for category in PluralCategory)

_OFFSET_PREFIX = "offset:"


def _is_positional(name: str) -> bool:
    return name.isascii() and name.isdigit()


class MessageParser:
    """Recursive-descent parser for the ICU message subset.

    Attributes:
        max_depth: Maximum plural/select nesting depth
        max_length: Maximum message length in characters

    Example:
        >>> parser = MessageParser()
        >>> parser.parse("Hello {name}!").elements
        (Literal(text='Hello ', ...), ArgRef(name='name', ...), Literal(text='!', ...))
    """

    __slots__ = ("max_depth", "max_length")

    def __init__(self, *, max_depth: int = MAX_DEPTH, max_length: int = MAX_MESSAGE_LENGTH) -> None:
        self.max_depth = max_depth
        self.max_length = max_length

    def parse(self, source: str) -> Message:
        """Parse a message.

        Args:
            source: ICU message text

        Returns:
            Message AST

        Raises:
            IntlSyntaxError: On malformed input, with the offending position
        """
        if len(source) > self.max_length:
            overflow = Cursor(source, self.max_length).span_to(len(source))
            raise IntlSyntaxError(
                ErrorTemplate.message_too_long(overflow, len(source), self.max_length)
            )

        message, cursor = self._parse_body(Cursor(source, 0), plural_arg=None, depth=0)
        if not cursor.is_eof:
            # _parse_body only stops early on a closing brace
            raise IntlSyntaxError(ErrorTemplate.unbalanced_brace(cursor.span_to(cursor.pos + 1)))
        return message

    # ------------------------------------------------------------------
    # Message bodies and literal text
    # ------------------------------------------------------------------

    def _parse_body(
        self, cursor: Cursor, *, plural_arg: ArgName | None, depth: int
    ) -> tuple[Message, Cursor]:
        """Parse elements until EOF or an unquoted '}' (left unconsumed)."""
        start = cursor.pos
        elements: list[Element] = []
        text: list[str] = []
        text_start = cursor.pos

        def flush(end: int) -> None:
            if text:
                elements.append(Literal("".join(text), Span(text_start, end)))
                text.clear()

        while not cursor.is_eof:
            ch = cursor.current
            if ch == "}":
                break
            if ch == "{":
                flush(cursor.pos)
                element, cursor = self._parse_argument(cursor, plural_arg=plural_arg, depth=depth)
                elements.append(element)
                text_start = cursor.pos
            elif ch == "#":
                if plural_arg is None:
                    raise IntlSyntaxError(
                        ErrorTemplate.pound_outside_plural(cursor.span_to(cursor.pos + 1))
                    )
                flush(cursor.pos)
                elements.append(Pound(plural_arg, Span(cursor.pos, cursor.pos + 1)))
                cursor = cursor.advance()
                text_start = cursor.pos
            elif ch == "'":
                chunk, cursor = self._parse_apostrophe(cursor)
                text.append(chunk)
            else:
                text.append(ch)
                cursor = cursor.advance()

        flush(cursor.pos)
        return Message(tuple(elements), Span(start, cursor.pos)), cursor

    @staticmethod
    def _parse_apostrophe(cursor: Cursor) -> tuple[str, Cursor]:
        """Resolve ICU apostrophe quoting starting at a "'"."""
        following = cursor.peek(1)
        if following == "'":
            return "'", cursor.advance(2)
        if following is None or following not in "{}|#":
            return "'", cursor.advance()

        # Quoted run: everything up to the next single apostrophe is literal
        cursor = cursor.advance()
        chunk: list[str] = []
        while not cursor.is_eof:
            if cursor.current == "'":
                if cursor.peek(1) == "'":
                    chunk.append("'")
                    cursor = cursor.advance(2)
                    continue
                return "".join(chunk), cursor.advance()
            chunk.append(cursor.current)
            cursor = cursor.advance()
        # Unterminated quote extends to the end of the message
        return "".join(chunk), cursor

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    @staticmethod
    def _read_name(cursor: Cursor) -> tuple[str, Cursor]:
        end = cursor
        while not end.is_eof and end.current not in _NAME_STOP and not end.at_whitespace():
            end = end.advance()
        return cursor.slice_to(end.pos), end

    @staticmethod
    def _fail_unexpected(cursor: Cursor, expected: str) -> IntlSyntaxError:
        diagnostic: Diagnostic
        if cursor.is_eof:
            diagnostic = ErrorTemplate.unexpected_eof(cursor.span_to(cursor.pos), expected)
        else:
            diagnostic = ErrorTemplate.unexpected_character(
                cursor.span_to(cursor.pos + 1), cursor.current, expected
            )
        return IntlSyntaxError(diagnostic)

    def _parse_argument(
        self, cursor: Cursor, *, plural_arg: ArgName | None, depth: int
    ) -> tuple[Element, Cursor]:
        """Parse `{...}` starting at the opening brace."""
        open_cursor = cursor
        cursor = cursor.advance().skip_whitespace()

        raw_name, after_name = self._read_name(cursor)
        if not raw_name:
            if cursor.is_eof:
                raise self._fail_unexpected(cursor, "an argument name")
            raise IntlSyntaxError(ErrorTemplate.argument_name_expected(cursor.span_to(cursor.pos + 1)))
        name: ArgName = int(raw_name) if _is_positional(raw_name) else raw_name
        cursor = after_name.skip_whitespace()

        if (closed := cursor.expect("}")) is not None:
            return ArgRef(name, Span(open_cursor.pos, closed.pos)), closed
        if (after_comma := cursor.expect(",")) is None:
            raise self._fail_unexpected(cursor, "'}' or ','")

        cursor = after_comma.skip_whitespace()
        raw_type, after_type = self._read_name(cursor)
        if not raw_type:
            raise self._fail_unexpected(cursor, "a format type")
        try:
            format_type = FormatType(raw_type)
        except ValueError:
            raise IntlSyntaxError(
                ErrorTemplate.unknown_format_type(cursor.span_to(after_type.pos), raw_type)
            ) from None
        cursor = after_type.skip_whitespace()

        match format_type:
            case FormatType.NUMBER | FormatType.DATE | FormatType.TIME:
                return self._parse_simple(open_cursor, cursor, name, format_type)
            case FormatType.PLURAL | FormatType.SELECTORDINAL:
                return self._parse_complex(
                    open_cursor, cursor, name, format_type, plural_arg=name, depth=depth
                )
            case FormatType.SELECT:
                return self._parse_complex(
                    open_cursor, cursor, name, format_type, plural_arg=plural_arg, depth=depth
                )

    def _parse_simple(
        self, open_cursor: Cursor, cursor: Cursor, name: ArgName, format_type: FormatType
    ) -> tuple[Element, Cursor]:
        """Parse the optional style of number/date/time, then the closing brace."""
        style: str | None = None
        if (after_comma := cursor.expect(",")) is not None:
            end = after_comma
            while not end.is_eof and end.current not in "{}":
                end = end.advance()
            if end.is_eof or end.current == "{":
                raise self._fail_unexpected(end, "'}' after the format style")
            style = after_comma.slice_to(end.pos).strip() or None
            cursor = end

        if (closed := cursor.expect("}")) is None:
            raise self._fail_unexpected(cursor, "'}' or ','")
        span = Span(open_cursor.pos, closed.pos)
        if format_type is FormatType.NUMBER:
            return NumberFormat(name, style, span), closed
        return TimeFormat(name, style, format_type, span), closed

    def _parse_complex(
        self,
        open_cursor: Cursor,
        cursor: Cursor,
        name: ArgName,
        format_type: FormatType,
        *,
        plural_arg: ArgName | None,
        depth: int,
    ) -> tuple[Element, Cursor]:
        """Parse offset and branches of plural/selectordinal/select."""
        if (after_comma := cursor.expect(",")) is None:
            raise self._fail_unexpected(cursor, "',' before the branches")
        cursor = after_comma.skip_whitespace()

        is_plural = format_type is not FormatType.SELECT
        offset = 0
        if cursor.source.startswith(_OFFSET_PREFIX, cursor.pos):
            offset, cursor = self._parse_offset(cursor, format_type)

        branches: list[Branch] = []
        seen: set[BranchKey] = set()
        while True:
            cursor = cursor.skip_whitespace()
            if cursor.is_eof:
                raise self._fail_unexpected(cursor, "a branch key or '}'")
            if cursor.current == "}":
                break

            key_cursor = cursor
            key, cursor = self._parse_branch_key(cursor, is_plural=is_plural)
            if key in seen:
                raise IntlSyntaxError(
                    ErrorTemplate.duplicate_branch_key(
                        key_cursor.span_to(cursor.pos), key_cursor.slice_to(cursor.pos)
                    )
                )
            seen.add(key)

            cursor = cursor.skip_whitespace()
            if (body_start := cursor.expect("{")) is None:
                raise IntlSyntaxError(
                    ErrorTemplate.branch_body_expected(
                        cursor.span_to(cursor.pos + 1), key_cursor.slice_to(cursor.pos).strip()
                    )
                )
            if depth + 1 > self.max_depth:
                raise IntlSyntaxError(
                    ErrorTemplate.nesting_depth_exceeded(cursor.span_to(cursor.pos + 1), self.max_depth)
                )
            body, cursor = self._parse_body(body_start, plural_arg=plural_arg, depth=depth + 1)
            if (after_body := cursor.expect("}")) is None:
                raise self._fail_unexpected(cursor, "'}' to close the branch body")
            branches.append(Branch(key, body, Span(key_cursor.pos, after_body.pos)))
            cursor = after_body

        closed = cursor.advance()
        span = Span(open_cursor.pos, closed.pos)
        if PluralCategory.OTHER.value not in seen:
            raise IntlSyntaxError(
                ErrorTemplate.missing_other_branch(
                    open_cursor.span_to(closed.pos), format_type.value, str(name)
                )
            )

        if is_plural:
            return (
                PluralFormat(
                    name,
                    tuple(branches),
                    ordinal=format_type is FormatType.SELECTORDINAL,
                    offset=offset,
                    span=span,
                ),
                closed,
            )
        return SelectFormat(name, tuple(branches), span), closed

    def _parse_offset(self, cursor: Cursor, format_type: FormatType) -> tuple[int, Cursor]:
        start = cursor
        if format_type is FormatType.SELECT:
            raise IntlSyntaxError(
                ErrorTemplate.invalid_offset(
                    cursor.span_to(cursor.pos + len(_OFFSET_PREFIX)),
                    "offset is only allowed in plural and selectordinal arguments",
                )
            )
        cursor = cursor.advance(len(_OFFSET_PREFIX)).skip_whitespace()
        end = cursor
        while not end.is_eof and end.current.isascii() and end.current.isdigit():
            end = end.advance()
        digits = cursor.slice_to(end.pos)
        if not digits:
            raise IntlSyntaxError(
                ErrorTemplate.invalid_offset(start.span_to(end.pos + 1), "expected a non-negative integer")
            )
        return int(digits), end

    def _parse_branch_key(self, cursor: Cursor, *, is_plural: bool) -> tuple[BranchKey, Cursor]:
        if is_plural and cursor.current == "=":
            end = cursor.advance()
            while not end.is_eof and end.current not in "{}" and not end.at_whitespace():
                end = end.advance()
            raw = cursor.slice_to(end.pos)
            try:
                value = Decimal(raw[1:])
            except InvalidOperation:
                value = None
            if value is None or not value.is_finite():
                raise IntlSyntaxError(ErrorTemplate.invalid_exact_key(cursor.span_to(end.pos), raw))
            return (int(value) if value == value.to_integral_value() else value), end

        key, end = self._read_name(cursor)
        if not key:
            raise self._fail_unexpected(cursor, "a branch key")
        if is_plural and key not in _PLURAL_CATEGORIES:
            raise IntlSyntaxError(ErrorTemplate.unknown_plural_category(cursor.span_to(end.pos), key))
        return key, end


_DEFAULT_PARSER = MessageParser()


def parse_message(source: str) -> Message:
    """Parse an ICU message with default limits.

    Example:
        >>> parse_message("{count, plural, one {# cat} other {# cats}}").elements[0].arg
        'count'
    """
    return _DEFAULT_PARSER.parse(source)
