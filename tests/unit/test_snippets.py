"""
Unit tests for annotated source snippets.
"""

import pytest

from marcsync.utils.snippets import ERROR, HELP, INFO, Annotation, render_snippet
from marcsync.utils.text_processing import offset_to_line_col


@pytest.mark.unit
class TestAnnotation:
    """Tests for markers and labels."""

    def test_error_level(self):
        """Test annotations default to the error level with a caret marker."""
        annotation = Annotation(0, 1, "bad")

        assert annotation.level == ERROR
        assert annotation.marker == "^"
        assert annotation.display_label == "bad"

    def test_secondary_levels(self):
        """Test info and help annotations use a dash marker and a labelled prefix."""
        assert Annotation(0, 1, "first", INFO).display_label == "info: first"
        assert Annotation(0, 1, "try this", HELP).marker == "-"


@pytest.mark.unit
class TestRenderSnippet:
    """Tests for snippet layout."""

    def test_single_annotation(self):
        """Test the full layout for one annotated line."""
        snippet = render_snippet("Oops", "abc = 1", [Annotation(0, 3, "here")])

        assert snippet == "\n".join([
            "error: Oops",
            "  |",
            "1 | abc = 1",
            "  | ^^^ here",
            "  |",
        ])

    def test_empty_span_gets_one_marker(self):
        """Test a zero-width span is still marked."""
        snippet = render_snippet("Oops", "abc", [Annotation(3, 3, "end")])

        assert "  |    ^ end" in snippet.split("\n")

    def test_span_is_clipped_to_its_line(self):
        """Test a span crossing a line break is marked on its first line only."""
        snippet = render_snippet("Oops", "ab\ncd", [Annotation(1, 5, "wide")])

        assert "  |  ^ wide" in snippet.split("\n")

    def test_gutter_grows_with_line_numbers(self):
        """Test the gutter widens for two-digit line numbers."""
        source = "\n".join(f"line {n}" for n in range(1, 12))
        offset = source.index("line 11")

        lines = render_snippet("Oops", source, [Annotation(offset, offset + 4, "x")]).split("\n")

        assert lines[1] == "   |"
        assert lines[2] == "11 | line 11"

    def test_gap_marker_between_distant_lines(self):
        """Test non-adjacent annotated lines are separated by a gap marker."""
        source = "a\nb\nc"
        snippet = render_snippet("Oops", source, [Annotation(0, 1, "one", INFO), Annotation(4, 5, "two")])

        assert snippet.split("\n")[2:7] == [
            "1 | a",
            "  | - info: one",
            "...",
            "3 | c",
            "  | ^ two",
        ]


@pytest.mark.unit
def test_offset_to_line_col():
    """Test offsets map to 1-based lines and 0-based columns, clamped at the end."""
    assert offset_to_line_col("ab\ncd", 0) == (1, 0)
    assert offset_to_line_col("ab\ncd", 4) == (2, 1)
    assert offset_to_line_col("ab\ncd", 99) == (2, 2)
