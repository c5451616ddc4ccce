"""
MARC Pattern Constants

Centralized MARC token patterns used for parsing and generation.
Organized into frozen dataclasses by category for immutability and clear grouping.

Literal patterns (*Patterns) are the exact strings the generator emits;
regex patterns (*Regex) are compiled by the parser and matched at a position.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class AccessPatterns:
    """
    Access literals as written by the generator.

    `[i]` starts a new array element, `[ ]` continues the last one.
    """
    OBJECT_PREFIX: str = '.'
    MAP_OPEN: str = '{'
    MAP_CLOSE: str = '}'
    ARRAY_NEW: str = '[i]'
    ARRAY_LAST: str = '[ ]'
    TUPLE_NEW: str = '(i)'
    TUPLE_LAST: str = '( )'


@dataclass(frozen=True)
class ValuePatterns:
    """Value literals and the assignment operator."""
    ASSIGN: str = ' = '
    TRUE: str = 'true'
    FALSE: str = 'false'
    NULL: str = 'null'
    EMPTY_OBJECT: str = '{}'
    EMPTY_ARRAY: str = '[]'
    RAW_QUOTE: str = "'"
    RAW_TRIPLE_QUOTE: str = "'''"


@dataclass(frozen=True)
class LayoutRegex:
    """Whitespace, comments and line structure."""
    HORIZONTAL_WHITESPACE: str = r'[ \t]*'
    NEWLINE: str = r'\r?\n'
    COMMENT: str = r'#[^\n]*'
    ASSIGN: str = r'='


@dataclass(frozen=True)
class AccessRegex:
    """
    Access regexes, matched directly at the parser position.

    Keys after `.` and inside `{...}` are parsed separately (identifier or string).
    """
    OBJECT_PREFIX: str = r'\.'
    MAP_OPEN: str = r'\{[ \t]*'
    MAP_CLOSE: str = r'[ \t]*\}'
    ARRAY_NEW: str = r'\[[ \t]*i[ \t]*\]'
    ARRAY_LAST: str = r'\[[ \t]*\]'
    TUPLE_NEW: str = r'\([ \t]*i[ \t]*\)'
    TUPLE_LAST: str = r'\([ \t]*\)'
    IDENTIFIER: str = r'[\w-]+'


@dataclass(frozen=True)
class StringRegex:
    """
    String literal regexes. Triple-quoted forms must be tried before single-quoted ones.

    The named group `body` is the content between the delimiters.
    """
    MULTILINE_ESCAPED: str = r'"""(?P<body>(?:[^"\\]|\\.|"(?!""))*)"""'
    MULTILINE_RAW: str = r"'''(?P<body>.*?)'''"
    SINGLELINE_ESCAPED: str = r'"(?P<body>(?:[^"\\\n]|\\.)*)"'
    SINGLELINE_RAW: str = r"'(?P<body>[^'\n]*)'"
    ESCAPE_SEQUENCE: str = (
        r'\\(?:u(?P<high>[dD][89abAB][0-9a-fA-F]{2})\\u(?P<low>[dD][c-fC-F][0-9a-fA-F]{2})'
        r'|u\{(?P<braced>[0-9a-fA-F]{1,6})\}'
        r'|u(?P<hex>[0-9a-fA-F]{4})'
        r'|(?P<char>.))'
    )


@dataclass(frozen=True)
class ValueRegex:
    """Scalar and empty-container value regexes (strings are in StringRegex)."""
    KEYWORD: str = r'(?P<keyword>true|false|null)(?![\w-])'
    DECIMAL: str = r'-?\d+(?:\.\d+(?:[eE][+-]?\d+)?|[eE][+-]?\d+)(?![\w.])'
    INTEGER: str = r'-?\d+(?![\w.])'
    EMPTY_OBJECT: str = r'\{[ \t]*\}'
    EMPTY_ARRAY: str = r'\[[ \t]*\]'


# Single-character escapes accepted inside "..." and """...""" strings
SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    '\\': '\\',
    '/': '/',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
    '0': '\0',
}

UNQUOTED_KEY_PATTERN = re.compile(AccessRegex.IDENTIFIER)
