"""
Text processing utilities for formatting and display.
"""

import difflib
import re
from typing import List, Tuple


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Original text if within max_len, otherwise truncated with "..."

    Example:
        >>> truncate_display("short", 10)
        "short"
        >>> truncate_display("this is a very long string", 10)
        "this is..."
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines, 1 for standard
                        normalization (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        pattern = r'\n[ \t]*\n(?:[ \t]*\n)*'
    else:
        pattern = r'\n[ \t]*\n(?:[ \t]*\n)+'

    replacement = '\n' * (max_consecutive + 1)

    return re.sub(pattern, replacement, content)


def get_meaningful_diff(
    text1: str,
    text2: str,
    fromfile: str = "before",
    tofile: str = "after",
    context_lines: int = 3
) -> Tuple[List[str], int]:
    """
    Compare two texts ignoring blank line differences.

    Removes all blank lines from both texts before comparing, so reflowed
    grouping (blank lines between entry groups) does not count as a change.

    Args:
        text1: Original text
        text2: Modified text
        fromfile: Label for the original in the diff header
        tofile: Label for the modified text in the diff header
        context_lines: Number of context lines around differences (default: 3)

    Returns:
        Tuple of (diff_lines, num_differences):
        - diff_lines: List of unified diff output lines
        - num_differences: Count of actual content differences (excluding headers)
    """
    lines1 = set_max_consecutive_blank_lines(text1, max_consecutive=0).strip('\n').split('\n')
    lines2 = set_max_consecutive_blank_lines(text2, max_consecutive=0).strip('\n').split('\n')

    if lines1 == lines2:
        return [], 0

    diff = list(difflib.unified_diff(
        lines1,
        lines2,
        fromfile=fromfile,
        tofile=tofile,
        lineterm='',
        n=context_lines
    ))

    # Count actual differences (lines starting with + or -, excluding headers)
    num_diffs = sum(1 for line in diff if line.startswith(('+', '-')))
    header_lines = sum(1 for line in diff if line.startswith(('---', '+++')))
    num_diffs -= header_lines

    return diff, num_diffs


def offset_to_line_col(source: str, offset: int) -> Tuple[int, int]:
    """
    Convert a character offset into a 1-indexed line and 0-indexed column.

    Offsets past the end of the source clamp to the end.

    Example:
        >>> offset_to_line_col("ab\\ncd", 4)
        (2, 1)
    """
    offset = max(0, min(offset, len(source)))
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start
