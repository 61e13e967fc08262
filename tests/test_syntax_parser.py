"""Tests for the ICU message parser.

Covers every construct of the supported subset, apostrophe quoting,
nesting, and the diagnostics raised for malformed input.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from precompile_intl.constants import MAX_DEPTH
from precompile_intl.diagnostics import DiagnosticCode, IntlSyntaxError
from precompile_intl.enums import FormatType
from precompile_intl.syntax import (
    ArgRef,
    Literal,
    Message,
    MessageParser,
    NumberFormat,
    PluralFormat,
    Pound,
    SelectFormat,
    Span,
    TimeFormat,
    parse_message,
)


def _error_code(source: str, parser: MessageParser | None = None) -> DiagnosticCode:
    with pytest.raises(IntlSyntaxError) as exc_info:
        (parser or MessageParser()).parse(source)
    assert exc_info.value.diagnostic is not None
    return exc_info.value.diagnostic.code


# ============================================================================
# LITERALS AND ARGUMENTS
# ============================================================================


class TestLiteralText:
    """Plain text and apostrophe quoting."""

    def test_plain_text(self) -> None:
        """Text without syntax is one literal."""
        message = parse_message("Hello, world!")
        assert message.elements == (Literal("Hello, world!", Span(0, 13)),)
        assert message.is_static
        assert message.text == "Hello, world!"

    def test_empty_message(self) -> None:
        """Empty source parses to an empty message."""
        message = parse_message("")
        assert message.elements == ()
        assert message.is_static
        assert message.text == ""

    def test_lone_apostrophe_is_literal(self) -> None:
        """An apostrophe not followed by syntax is kept."""
        assert parse_message("I'm here").text == "I'm here"

    def test_doubled_apostrophe(self) -> None:
        """'' yields a single apostrophe."""
        assert parse_message("It''s").text == "It's"

    def test_quoted_braces(self) -> None:
        """Quoted braces are literal text."""
        assert parse_message("I have '{'braces'}'").text == "I have {braces}"

    def test_quoted_run_spans_argument_syntax(self) -> None:
        """A quoted run keeps an argument-looking text verbatim."""
        assert parse_message("'{name}' is literal").text == "{name} is literal"

    def test_unterminated_quote_runs_to_end(self) -> None:
        """An unterminated quote extends to the end of the message."""
        assert parse_message("a '{b c").text == "a {b c"

    def test_doubled_apostrophe_inside_quoted_run(self) -> None:
        """'' inside a quoted run is one apostrophe."""
        assert parse_message("'{it''s}'").text == "{it's}"

    def test_adjacent_text_merged(self) -> None:
        """Quoting never splits the literal into several elements."""
        message = parse_message("a''b'{'c")
        assert len(message.elements) == 1
        assert message.text == "a'b{c"

    def test_trailing_apostrophe(self) -> None:
        """An apostrophe at the very end is literal."""
        assert parse_message("end'").text == "end'"

    def test_quoted_pound_outside_plural(self) -> None:
        """A quoted # is literal text at the top level."""
        message = parse_message("Issue '#'1")
        assert message.elements == (Literal("Issue #1", Span(0, 10)),)

    def test_quoted_run_starting_with_pound(self) -> None:
        """A quoted run opened by '# extends to the closing apostrophe."""
        assert parse_message("Issue '#1'").text == "Issue #1"

    def test_quoted_pound_inside_select(self) -> None:
        """A quoted # inside a select without a plural is literal."""
        (select,) = parse_message("{g, select, other {'#'}}").elements
        assert isinstance(select, SelectFormat)
        assert select.branches[0].value.text == "#"


class TestArguments:
    """Plain argument references."""

    def test_named_argument(self) -> None:
        """{name} becomes an ArgRef with its span."""
        message = parse_message("Hello {name}!")
        assert message.elements == (
            Literal("Hello ", Span(0, 6)),
            ArgRef("name", Span(6, 12)),
            Literal("!", Span(12, 13)),
        )
        assert not message.is_static

    def test_positional_argument(self) -> None:
        """{0} becomes an int-named ArgRef."""
        message = parse_message("{0} and {1}")
        assert [e.name for e in message.elements if isinstance(e, ArgRef)] == [0, 1]

    def test_whitespace_around_name(self) -> None:
        """Whitespace inside the braces is ignored."""
        assert parse_message("{ name }").elements == (ArgRef("name", Span(0, 8)),)

    def test_name_with_hyphen(self) -> None:
        """Names are not restricted to identifiers."""
        assert parse_message("{first-name}").elements[0] == ArgRef("first-name", Span(0, 12))


class TestSimpleFormats:
    """number, date and time directives."""

    def test_number_without_style(self) -> None:
        """{n, number} has no style."""
        (element,) = parse_message("{n, number}").elements
        assert element == NumberFormat("n", None, Span(0, 11))

    def test_number_with_style(self) -> None:
        """Style text is stripped."""
        (element,) = parse_message("{ ratio , number , percent }").elements
        assert isinstance(element, NumberFormat)
        assert element.arg == "ratio"
        assert element.style == "percent"

    def test_number_pattern_style(self) -> None:
        """A pattern style is kept verbatim."""
        (element,) = parse_message("{n, number, #,##0.00}").elements
        assert isinstance(element, NumberFormat)
        assert element.style == "#,##0.00"

    def test_date_and_time(self) -> None:
        """date and time produce TimeFormat with the matching kind."""
        date_element, _, time_element = parse_message("{d, date, short} at {t, time}").elements
        assert isinstance(date_element, TimeFormat)
        assert date_element.kind is FormatType.DATE
        assert date_element.style == "short"
        assert isinstance(time_element, TimeFormat)
        assert time_element.kind is FormatType.TIME
        assert time_element.style is None

    def test_empty_style_is_none(self) -> None:
        """{n, number, } has no style."""
        (element,) = parse_message("{n, number, }").elements
        assert isinstance(element, NumberFormat)
        assert element.style is None


# ============================================================================
# PLURAL AND SELECT
# ============================================================================


class TestPlural:
    """plural and selectordinal constructs."""

    def test_exact_and_category_branches(self) -> None:
        """=N keys are numbers; categories stay strings."""
        message = parse_message(
            "I have {count, plural,=0 {no cats} =1 {one cat} other {{count} cats}}"
        )
        plural = message.elements[1]
        assert isinstance(plural, PluralFormat)
        assert plural.arg == "count"
        assert not plural.ordinal
        assert [branch.key for branch in plural.branches] == [0, 1, "other"]
        assert [branch.is_exact for branch in plural.branches] == [True, True, False]
        other = plural.branches[2].value
        assert other.elements == (ArgRef("count", Span(55, 62)), Literal(" cats", Span(62, 67)))

    def test_pound_bound_to_plural_argument(self) -> None:
        """# becomes a Pound naming the enclosing plural argument."""
        (plural,) = parse_message("{n, plural, one {# item} other {# items}}").elements
        assert isinstance(plural, PluralFormat)
        first = plural.branches[0].value.elements
        assert first[0] == Pound("n", Span(17, 18))
        assert first[1] == Literal(" item", Span(18, 23))

    def test_pound_inside_nested_select(self) -> None:
        """# inside a select inside a plural still refers to the plural."""
        (plural,) = parse_message(
            "{n, plural, other {{g, select, male {# his} other {# their}}}}"
        ).elements
        assert isinstance(plural, PluralFormat)
        (select,) = plural.branches[0].value.elements
        assert isinstance(select, SelectFormat)
        pound = select.branches[0].value.elements[0]
        assert isinstance(pound, Pound)
        assert pound.arg == "n"

    def test_quoted_pound_inside_plural(self) -> None:
        """'#' inside a plural branch is literal."""
        (plural,) = parse_message("{n, plural, other {'#' {n}}}").elements
        assert isinstance(plural, PluralFormat)
        assert plural.branches[0].value.elements[0] == Literal("# ", Span(19, 23))

    def test_selectordinal(self) -> None:
        """selectordinal produces an ordinal PluralFormat."""
        (plural,) = parse_message(
            "{p, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}"
        ).elements
        assert isinstance(plural, PluralFormat)
        assert plural.ordinal
        assert [branch.key for branch in plural.branches] == ["one", "two", "few", "other"]

    def test_offset(self) -> None:
        """offset:N is recorded on the plural."""
        (plural,) = parse_message(
            "{n, plural, offset:1 =0 {nobody} one {you and # other} other {you and # others}}"
        ).elements
        assert isinstance(plural, PluralFormat)
        assert plural.offset == 1
        assert plural.branches[0].key == 0

    def test_decimal_exact_key(self) -> None:
        """Non-integral exact keys stay Decimal; integral ones become int."""
        (plural,) = parse_message("{n, plural, =1.5 {a} =2.0 {b} other {c}}").elements
        assert isinstance(plural, PluralFormat)
        assert [branch.key for branch in plural.branches] == [Decimal("1.5"), 2, "other"]

    def test_empty_branch_body(self) -> None:
        """A branch may have an empty body."""
        (plural,) = parse_message("{n, plural, one {} other {x}}").elements
        assert isinstance(plural, PluralFormat)
        assert plural.branches[0].value == Message((), Span(17, 17))

    def test_whitespace_and_newlines_between_branches(self) -> None:
        """Branches may be separated by any pattern whitespace."""
        (plural,) = parse_message("{n,plural,\n  one {a}\n  other {b}\n}").elements
        assert isinstance(plural, PluralFormat)
        assert len(plural.branches) == 2


class TestSelect:
    """select constructs."""

    def test_select_branches(self) -> None:
        """Select keys are arbitrary strings in source order."""
        (select,) = parse_message(
            "{gender, select, male {He is a good boy} female {She is a good girl} "
            "other {They are good fellas}}"
        ).elements
        assert isinstance(select, SelectFormat)
        assert [branch.key for branch in select.branches] == ["male", "female", "other"]
        assert select.branches[2].value.text == "They are good fellas"

    def test_nested_select_in_plural(self) -> None:
        """Constructs nest to arbitrary depth."""
        message = parse_message(
            "{n, plural, one {{g, select, a {x} other {y}}} other {{g, select, other {z}}}}"
        )
        (plural,) = message.elements
        assert isinstance(plural, PluralFormat)
        assert all(
            isinstance(branch.value.elements[0], SelectFormat) for branch in plural.branches
        )

    def test_select_keys_may_look_numeric(self) -> None:
        """Select keys are never interpreted as numbers."""
        (select,) = parse_message("{v, select, 1 {one} other {x}}").elements
        assert isinstance(select, SelectFormat)
        assert select.branches[0].key == "1"


# ============================================================================
# ERRORS
# ============================================================================


class TestSyntaxErrors:
    """Malformed messages raise IntlSyntaxError with a diagnostic code."""

    def test_missing_other_branch(self) -> None:
        """Plural without other is rejected."""
        code = _error_code("{count, plural, one {# item}}")
        assert code is DiagnosticCode.MISSING_OTHER_BRANCH

    def test_missing_other_branch_select(self) -> None:
        """Select without other is rejected."""
        assert _error_code("{g, select, male {he}}") is DiagnosticCode.MISSING_OTHER_BRANCH

    def test_missing_other_message_text(self) -> None:
        """The diagnostic names the argument and construct."""
        with pytest.raises(IntlSyntaxError, match="Missing 'other' branch in plural argument 'count'"):
            parse_message("{count, plural, one {# item}}")

    def test_unbalanced_closing_brace(self) -> None:
        """A stray } is reported at its position."""
        with pytest.raises(IntlSyntaxError) as exc_info:
            parse_message("Hello }")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.UNBALANCED_BRACE
        assert exc_info.value.position == 6
        assert exc_info.value.span is not None
        assert (exc_info.value.span.line, exc_info.value.span.column) == (1, 7)

    def test_unclosed_argument(self) -> None:
        """An argument running into EOF is an unexpected end."""
        assert _error_code("Hello {name") is DiagnosticCode.UNEXPECTED_EOF

    def test_unclosed_branch_body(self) -> None:
        """A branch body running into EOF is an unexpected end."""
        assert _error_code("{n, plural, other {x") is DiagnosticCode.UNEXPECTED_EOF

    def test_empty_argument(self) -> None:
        """{} has no argument name."""
        assert _error_code("{}") is DiagnosticCode.ARGUMENT_NAME_EXPECTED

    def test_unknown_format_type(self) -> None:
        """Only the supported format types are accepted."""
        assert _error_code("{n, spellout}") is DiagnosticCode.UNKNOWN_FORMAT_TYPE

    def test_duplicate_branch_key(self) -> None:
        """A key may appear once."""
        assert _error_code("{n, plural, one {a} one {b} other {c}}") is (
            DiagnosticCode.DUPLICATE_BRANCH_KEY
        )

    def test_duplicate_exact_key_by_value(self) -> None:
        """=1 and =1.0 denote the same key."""
        assert _error_code("{n, plural, =1 {a} =1.0 {b} other {c}}") is (
            DiagnosticCode.DUPLICATE_BRANCH_KEY
        )

    def test_pound_outside_plural(self) -> None:
        """# at the top level is rejected."""
        assert _error_code("# items") is DiagnosticCode.POUND_OUTSIDE_PLURAL

    def test_pound_in_select_without_plural(self) -> None:
        """# inside a select that is not inside a plural is rejected."""
        assert _error_code("{g, select, other {#}}") is DiagnosticCode.POUND_OUTSIDE_PLURAL

    def test_unknown_plural_category(self) -> None:
        """Plural keys must be CLDR categories or =N."""
        assert _error_code("{n, plural, lots {a} other {b}}") is (
            DiagnosticCode.UNKNOWN_PLURAL_CATEGORY
        )

    @pytest.mark.parametrize("key", ["=abc", "=", "=Infinity", "=NaN"])
    def test_invalid_exact_key(self, key: str) -> None:
        """=N must be a finite number."""
        assert _error_code(f"{{n, plural, {key} {{a}} other {{b}}}}") is (
            DiagnosticCode.INVALID_EXACT_KEY
        )

    def test_offset_in_select(self) -> None:
        """offset is only valid for plural and selectordinal."""
        assert _error_code("{g, select, offset:1 other {x}}") is DiagnosticCode.INVALID_OFFSET

    def test_offset_without_number(self) -> None:
        """offset: needs digits."""
        assert _error_code("{n, plural, offset:x other {x}}") is DiagnosticCode.INVALID_OFFSET

    def test_branch_without_body(self) -> None:
        """A key must be followed by a braced body."""
        with pytest.raises(IntlSyntaxError, match="Expected '\\{' to open the body of branch 'a'"):
            parse_message("{g, select, a b {x} other {y}}")

    def test_missing_comma_before_branches(self) -> None:
        """plural requires a comma before its branches."""
        assert _error_code("{n, plural}") is DiagnosticCode.UNEXPECTED_CHARACTER

    def test_error_position_on_later_line(self) -> None:
        """Line and column are computed for multi-line messages."""
        with pytest.raises(IntlSyntaxError) as exc_info:
            parse_message("line one\n  # two")
        assert exc_info.value.span is not None
        assert exc_info.value.span.line == 2
        assert exc_info.value.span.column == 3


class TestParserLimits:
    """Depth and length limits."""

    def test_nesting_within_limit(self) -> None:
        """Nesting up to max_depth is accepted."""
        parser = MessageParser(max_depth=2)
        parser.parse("{a, select, other {{b, select, other {x}}}}")

    def test_nesting_beyond_limit(self) -> None:
        """Nesting beyond max_depth is rejected."""
        parser = MessageParser(max_depth=2)
        source = "{a, select, other {{b, select, other {{c, select, other {x}}}}}}"
        assert _error_code(source, parser) is DiagnosticCode.NESTING_DEPTH_EXCEEDED

    def test_default_depth_limit(self) -> None:
        """Pathological nesting fails cleanly instead of exhausting the stack."""
        source = "{a, select, other {" * 150 + "x" + "}}" * 150
        assert _error_code(source) is DiagnosticCode.NESTING_DEPTH_EXCEEDED

    def test_default_depth_accepts_max_depth_plurals(self) -> None:
        """Plurals nested exactly MAX_DEPTH deep parse with the default parser."""
        source = "{n, plural, other {x" * MAX_DEPTH + "z" + "}}" * MAX_DEPTH
        parse_message(source)

    def test_default_depth_rejects_one_more(self) -> None:
        """One level past MAX_DEPTH is reported with the configured limit."""
        depth = MAX_DEPTH + 1
        source = "{n, plural, other {x" * depth + "z" + "}}" * depth
        with pytest.raises(IntlSyntaxError, match=f"Maximum nesting depth \\({MAX_DEPTH}\\)"):
            parse_message(source)

    def test_message_too_long(self) -> None:
        """Messages over max_length are rejected before parsing."""
        assert _error_code("123456", MessageParser(max_length=5)) is DiagnosticCode.MESSAGE_TOO_LONG

    def test_message_too_long_points_at_excess(self) -> None:
        """The length error is located at the first character past the limit."""
        with pytest.raises(IntlSyntaxError) as exc_info:
            MessageParser(max_length=5).parse("123456")
        error = exc_info.value
        assert error.position == 5
        assert error.span is not None
        assert (error.span.start, error.span.end) == (5, 6)
        assert (error.span.line, error.span.column) == (1, 6)
