"""
Unit tests for the JSON, YAML and TOML adapters and the Format enum.
"""

import datetime
from pathlib import Path

import pytest

from marcsync.contexts.conversion.exceptions import ParseError, SerializeError
from marcsync.contexts.conversion.formats import (
    PIVOT_FORMAT,
    Format,
    dump_json,
    dump_toml,
    dump_yaml,
    find_null_path,
    load_json,
    load_toml,
    load_yaml,
)


@pytest.mark.unit
class TestFormat:
    """Tests for format lookup."""

    def test_pivot_is_json(self):
        """Test JSON is the pivot format."""
        assert PIVOT_FORMAT is Format.TREE
        assert Format.TREE.display_name == "JSON"

    def test_from_name_accepts_tags_and_display_names(self):
        """Test lookup by tag or display name, ignoring case and spaces."""
        assert Format.from_name("primary") is Format.PRIMARY
        assert Format.from_name("MARC") is Format.PRIMARY
        assert Format.from_name(" toml ") is Format.TABLE
        assert Format.from_name("Yaml") is Format.BLOCK

    def test_from_name_unknown(self):
        """Test an unknown format name is rejected."""
        with pytest.raises(ValueError, match="Unknown format 'xml'"):
            Format.from_name("xml")

    def test_from_path(self):
        """Test the format is inferred from the file suffix."""
        assert Format.from_path(Path("doc.marc")) is Format.PRIMARY
        assert Format.from_path(Path("doc.JSON")) is Format.TREE
        assert Format.from_path(Path("doc.yml")) is Format.BLOCK
        assert Format.from_path(Path("pyproject.toml")) is Format.TABLE

    def test_from_path_unknown_suffix(self):
        """Test an unrecognized suffix is rejected."""
        with pytest.raises(ValueError):
            Format.from_path(Path("notes.txt"))


@pytest.mark.unit
class TestJson:
    """Tests for the pivot format adapter."""

    def test_load(self):
        """Test JSON scalars and arrays load as Python values."""
        assert load_json('{"a": [1, 2.5, null, true]}') == {"a": [1, 2.5, None, True]}

    def test_load_invalid(self):
        """Test malformed JSON raises a parse error for the tree format."""
        with pytest.raises(ParseError, match="^JSON parse error") as exc_info:
            load_json("{")
        assert exc_info.value.fmt is Format.TREE

    def test_load_rejects_nan(self):
        """Test the NaN constant is not accepted."""
        with pytest.raises(ParseError):
            load_json('{"a": NaN}')

    def test_load_rejects_out_of_range_numbers(self):
        """Test numbers too large for a float are not accepted."""
        with pytest.raises(ParseError, match="out of range"):
            load_json('{"a": 1e400}')

    def test_load_keeps_large_integers(self):
        """Test large integer literals load exactly."""
        assert load_json("[100000000000000000000000]") == [10**23]

    def test_dump_is_indented_and_keeps_unicode(self):
        """Test output is indented and non-ASCII text is kept as is."""
        assert dump_json({"x": "é"}) == '{\n  "x": "é"\n}'

    def test_dump_custom_indent(self):
        """Test the indent width can be changed."""
        assert dump_json([1], indent=4) == "[\n    1\n]"

    def test_dump_dates_as_iso_strings(self):
        """Test dates are written as ISO 8601 strings."""
        assert dump_json({"d": datetime.date(2024, 1, 2)}) == '{\n  "d": "2024-01-02"\n}'

    def test_dump_rejects_nan(self):
        """Test NaN cannot be written as JSON."""
        with pytest.raises(SerializeError):
            dump_json({"x": float("nan")})


@pytest.mark.unit
class TestYaml:
    """Tests for the block format adapter."""

    def test_load(self):
        """Test block YAML loads as nested values."""
        assert load_yaml("a:\n  - 1\n  - b\n") == {"a": [1, "b"]}

    def test_empty_document_is_null(self):
        """Test an empty YAML document is null."""
        assert load_yaml("") is None

    def test_load_invalid(self):
        """Test malformed YAML raises a parse error."""
        with pytest.raises(ParseError, match="^YAML parse error"):
            load_yaml("a: [1")

    def test_dump_keeps_key_order(self):
        """Test keys are written in insertion order."""
        assert dump_yaml({"b": 1, "a": 2}) == "b: 1\na: 2\n"

    def test_dump_block_style(self):
        """Test nested values are written in block style."""
        assert dump_yaml({"a": {"b": [1, 2]}}) == "a:\n  b:\n  - 1\n  - 2\n"

    def test_dump_keeps_plain_unicode(self):
        """Test non-ASCII text without line breaks is written as is."""
        assert dump_yaml({"x": "é"}) == "x: é\n"

    def test_unicode_line_breaks_survive_reload(self):
        """Test NEL, LS and PS characters in keys and strings reload unchanged."""
        for value in ({"\x85": None}, {"a": "x\u2028y"}, {"a": ["p\u2029q"]}):
            assert load_yaml(dump_yaml(value)) == value


@pytest.mark.unit
class TestToml:
    """Tests for the table format adapter."""

    def test_load(self):
        """Test TOML tables load as nested values."""
        assert load_toml("[x]\ny = 2\n") == {"x": {"y": 2}}

    def test_load_invalid(self):
        """Test malformed TOML raises a parse error."""
        with pytest.raises(ParseError, match="^TOML parse error"):
            load_toml("x = ")

    def test_dump_table(self):
        """Test nested objects are written as TOML tables."""
        assert dump_toml({"x": {"y": 2}}) == "[x]\ny = 2\n"

    def test_dump_rejects_non_table_root(self):
        """Test a list root cannot be written as TOML."""
        with pytest.raises(SerializeError, match="got list"):
            dump_toml([1, 2])

    def test_dump_rejects_null(self):
        """Test a null value is reported with its dotted path."""
        with pytest.raises(SerializeError) as exc_info:
            dump_toml({"a": {"b": None}})

        assert exc_info.value.message == "TOML has no null value (found at a.b)"
        assert exc_info.value.fmt is Format.TABLE
        assert exc_info.value.kind == "serialize"


@pytest.mark.unit
class TestFindNullPath:
    """Tests for locating nulls in a value tree."""

    def test_no_null(self):
        """Test a tree without nulls has no null path."""
        assert find_null_path({"a": [1, {"b": 2}]}) is None

    def test_nested_paths(self):
        """Test null paths use dotted keys and array indexes."""
        assert find_null_path({"a": [1, None]}) == "a[1]"
        assert find_null_path({"a": [{"b": None}]}) == "a[0].b"

    def test_root(self):
        """Test nulls at or directly under the root."""
        assert find_null_path(None) == "<root>"
        assert find_null_path([None]) == "[0]"
