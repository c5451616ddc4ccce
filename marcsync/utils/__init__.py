"""
Shared utilities for MARCSYNC.

Common functionality used across contexts:
- Logger setup
- Annotated source snippets
- Text processing and diffs
- Timestamps
"""

from marcsync.utils.snippets import Annotation, render_snippet
from marcsync.utils.timestamp import now

__all__ = ["Annotation", "render_snippet", "now"]
