"""
Unit tests for the MARC parser.

Tests marcsync.contexts.conversion.marc_parser: access forms, string and
number literals, and the position of syntax errors.
"""

import pytest

from marcsync.contexts.conversion.exceptions import MarcSyntaxError
from marcsync.contexts.conversion.marc_parser import (
    EXPECTED_ACCESS,
    EXPECTED_ASSIGN,
    EXPECTED_KEY,
    EXPECTED_LINE_END,
    EXPECTED_VALUE,
    AccessKind,
    MarcParser,
    Span,
)


def parse_value(source):
    """Parse a single-entry document and return its literal value."""
    entries = MarcParser().parse(source)
    assert len(entries) == 1
    return entries[0].value


@pytest.mark.unit
class TestAccesses:
    """Tests for the six access forms."""

    def test_object_access(self):
        """Test an object access records its key and spans."""
        entries = MarcParser().parse(".x = 1")

        assert len(entries) == 1
        access = entries[0].accesses[0]
        assert access.kind == AccessKind.OBJECT
        assert access.key == "x"
        assert access.span == Span(0, 2)
        assert entries[0].value_span == Span(5, 6)

    def test_all_access_kinds(self):
        """Test each of the six access forms in one path."""
        entries = MarcParser().parse('.a{"b c"}[i][ ](i)( ) = 1')
        kinds = [access.kind for access in entries[0].accesses]

        assert kinds == [
            AccessKind.OBJECT,
            AccessKind.MAP,
            AccessKind.ARRAY_NEW,
            AccessKind.ARRAY_LAST,
            AccessKind.TUPLE_NEW,
            AccessKind.TUPLE_LAST,
        ]
        assert entries[0].accesses[1].key == "b c"

    def test_quoted_object_key(self):
        """Test an object key may be a quoted string."""
        entries = MarcParser().parse(".\"soul affinity\" = 'fire'")

        assert entries[0].accesses[0].key == "soul affinity"

    def test_whitespace_inside_brackets(self):
        """Test spaces around the index marker are allowed."""
        entries = MarcParser().parse(".x[ i ] = 1")

        assert entries[0].accesses[1].kind == AccessKind.ARRAY_NEW

    def test_keys_may_contain_dashes(self):
        """Test bare keys may contain dashes."""
        entries = MarcParser().parse(".first-name = 'x'")

        assert entries[0].accesses[0].key == "first-name"


@pytest.mark.unit
class TestLayout:
    """Tests for comments, blank lines and line endings."""

    def test_comments_and_blank_lines_are_skipped(self):
        """Test comments, trailing comments and blank lines produce no entries."""
        source = "# heading\n\n.a = true # trailing comment\n\n   \n.b = false\n"
        entries = MarcParser().parse(source)

        assert [entry.value for entry in entries] == [True, False]

    def test_windows_line_endings(self):
        """Test CRLF line endings are accepted."""
        entries = MarcParser().parse(".a = 1\r\n.b = 2\r\n")

        assert [entry.value for entry in entries] == [1, 2]

    def test_empty_document(self):
        """Test an empty or comment-only document has no entries."""
        assert MarcParser().parse("") == []
        assert MarcParser().parse("# nothing here\n") == []

    def test_no_space_around_assignment(self):
        """Test the assignment needs no surrounding spaces."""
        assert parse_value(".a=2") == 2


@pytest.mark.unit
class TestValues:
    """Tests for literal values."""

    def test_keywords(self):
        """Test true, false and null literals."""
        assert parse_value(".a = true") is True
        assert parse_value(".a = false") is False
        assert parse_value(".a = null") is None

    def test_integers_and_decimals(self):
        """Test integers stay int and decimals or exponents become float."""
        assert parse_value(".a = -1") == -1
        assert isinstance(parse_value(".a = -1"), int)
        assert parse_value(".a = 1.0") == 1.0
        assert isinstance(parse_value(".a = 1.0"), float)
        assert parse_value(".a = 1e3") == 1000.0
        assert parse_value(".a = 2.5E-1") == 0.25

    def test_empty_containers(self):
        """Test empty object and array literals."""
        assert parse_value(".a = {}") == {}
        assert parse_value(".a = []") == []

    def test_raw_string_keeps_backslashes(self):
        """Test raw strings do not interpret escapes."""
        assert parse_value(r".a = 'raw \n stays'") == "raw \\n stays"

    def test_escaped_string(self):
        """Test simple escapes in double-quoted strings."""
        assert parse_value(r'.a = "tab\there"') == "tab\there"
        assert parse_value(r'.a = "quote \" inside"') == 'quote " inside'

    def test_unicode_escapes(self):
        """Test 4-digit, braced and surrogate pair unicode escapes."""
        assert parse_value(r'.a = "\u00e9"') == "é"
        assert parse_value(r'.a = "\u{1F600}"') == "\U0001F600"
        assert parse_value(r'.a = "\ud83d\ude00"') == "\U0001F600"

    def test_single_line_triple_quoted_raw(self):
        """Test triple quotes on one line may hold single quotes."""
        assert parse_value(".a = '''it's'''") == "it's"

    def test_multiline_string_strips_outer_line_breaks(self):
        """Test the line breaks next to the delimiters are dropped."""
        source = '.d = """\nline one\nline two\n"""\n'

        assert parse_value(source) == "line one\nline two"

    def test_multiline_raw_string(self):
        """Test a raw string spanning lines keeps backslashes."""
        source = ".d = '''\nC:\\path\n'''\n"

        assert parse_value(source) == "C:\\path"

    def test_escaped_line_breaks_in_triple_quotes_are_stripped(self):
        """Test escaped line breaks next to triple-quote delimiters are dropped."""
        assert parse_value(r'.x = """\nabc\n"""') == "abc"

    def test_escaped_line_break_in_single_quotes_is_kept(self):
        """Test an escaped line break in a double-quoted string stays in the value."""
        assert parse_value(r'.x = "a\nb"') == "a\nb"


@pytest.mark.unit
class TestSyntaxErrors:
    """Tests for syntax errors and where they point."""

    def test_missing_assignment_snippet(self):
        """Test the full snippet when `=` is missing."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(".x 1")

        assert exc_info.value.message == "\n".join([
            "error: Syntax Error",
            "  |",
            "1 | .x 1",
            "  |    ^ " + EXPECTED_ASSIGN,
            "  |",
        ])

    def test_line_without_access(self):
        """Test a line that does not start with an access."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse("x = 1")

        assert EXPECTED_ACCESS in exc_info.value.message

    def test_unclosed_map_key(self):
        """Test an opening brace with no key."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse("{")

        assert exc_info.value.message.startswith("error: Syntax Error")
        assert EXPECTED_KEY in exc_info.value.message

    def test_unknown_value(self):
        """Test a misspelled keyword is not a value."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(".x = tru")

        assert EXPECTED_VALUE in exc_info.value.message

    def test_trailing_garbage(self):
        """Test text after the value on the same line."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(".x = 1 2")

        assert EXPECTED_LINE_END in exc_info.value.message

    def test_unterminated_string(self):
        """Test a string with no closing quote on its line."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse('.x = "abc\n.y = 1')

        assert "unterminated string literal" in exc_info.value.message

    def test_multiline_string_must_start_with_line_break(self):
        """Test a string spanning lines must open with a line break."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse('.d = """abc\n"""')

        assert exc_info.value.title == "Invalid Multiline String"

    def test_escaped_line_break_in_triple_quotes_needs_outer_breaks(self):
        """Test an escaped line break in triple quotes also needs the outer line breaks."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(r'.x = """a\nb"""')

        assert exc_info.value.title == "Invalid Multiline String"

    def test_invalid_escape(self):
        """Test an unknown escape is named in the error."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(r'.a = "\q"')

        assert exc_info.value.title == "Invalid Escape"
        assert "`\\q`" in exc_info.value.message

    def test_number_out_of_range(self):
        """Test a decimal too large for a float."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse(".a = 1e999")

        assert exc_info.value.title == "Number Out Of Range"

    def test_syntax_errors_are_parse_errors(self):
        """Test syntax errors are reported as parse failures."""
        with pytest.raises(MarcSyntaxError) as exc_info:
            MarcParser().parse("=")

        assert exc_info.value.kind == "parse"
