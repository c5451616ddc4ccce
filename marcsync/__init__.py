"""
MARCSYNC - MARC Synchronized Representations

Keeps one document in four interchangeable textual formats: MARC (a
line-oriented, path-assignment syntax), JSON, YAML and TOML. Editing any one
of them recomputes the other three through JSON.

Architecture:
- Conversion Context: Parsing, evaluation and rendering of every format
- Sync Context: Document state, edit transitions and formatting
"""

__version__ = "0.1.0"
