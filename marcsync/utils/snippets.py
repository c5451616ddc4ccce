"""
Annotated source snippets for error messages.

Renders a title plus the offending source lines with underlined spans and
labels, e.g.:

    error: Duplicate Assignment
      |
    1 | .x = 2
      |      - info: A value was previously assigned at this path.
    2 | .x = 3
      |      ^ Attempting to assign a new value at the same path is not allowed.
      |
"""

from dataclasses import dataclass
from typing import List, Sequence

from marcsync.utils.text_processing import offset_to_line_col

ERROR = "error"
INFO = "info"
HELP = "help"


@dataclass(frozen=True)
class Annotation:
    """
    A labelled span of source text.

    Attributes:
        start: Character offset where the span starts
        end: Character offset where the span ends (exclusive)
        label: Text printed after the underline
        level: One of "error", "info", "help"
    """

    start: int
    end: int
    label: str
    level: str = ERROR

    @property
    def marker(self) -> str:
        return "^" if self.level == ERROR else "-"

    @property
    def display_label(self) -> str:
        if self.level == ERROR:
            return self.label
        return f"{self.level}: {self.label}"


def render_snippet(title: str, source: str, annotations: Sequence[Annotation]) -> str:
    """
    Render an error title and annotated source lines.

    Spans that run past the end of their first line are underlined up to the
    end of that line; empty spans get a single marker. Non-adjacent annotated
    lines are separated by "...".

    Args:
        title: Error title (e.g. "Type Mismatch")
        source: Full source text the offsets refer to
        annotations: Spans to underline, in display order per line

    Returns:
        Multi-line error message without trailing newline
    """
    lines = source.split("\n")
    placed = []  # (line_no, column, width, annotation)
    for annotation in annotations:
        line_no, column = offset_to_line_col(source, annotation.start)
        line_text = lines[line_no - 1]
        end_column = min(column + max(annotation.end - annotation.start, 1), len(line_text))
        width = max(end_column - column, 1)
        placed.append((line_no, column, width, annotation))

    gutter = len(str(max((p[0] for p in placed), default=1)))
    blank_gutter = " " * gutter + " |"

    out: List[str] = [f"error: {title}", blank_gutter]
    previous_line = None
    for line_no in sorted({p[0] for p in placed}):
        if previous_line is not None and line_no > previous_line + 1:
            out.append("...")
        out.append(f"{line_no:>{gutter}} | {lines[line_no - 1]}".rstrip())
        for placed_line, column, width, annotation in placed:
            if placed_line != line_no:
                continue
            underline = " " * column + annotation.marker * width
            out.append(f"{blank_gutter} {underline} {annotation.display_label}".rstrip())
        previous_line = line_no
    out.append(blank_gutter)

    return "\n".join(out)
