"""
MARC Parser

Converts MARC text into a flat list of entries (access path + literal value).
Evaluation of the entries into a value tree lives in marc_evaluator.py.

A MARC document is line oriented:

    # Comment
    .materials{metal}.reflectivity = 1.0
    .entities[i].name = "hero"
    .entities[ ].material = 'metal'
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from marcsync.contexts.conversion.exceptions import MarcSyntaxError
from marcsync.contexts.conversion.marc_patterns import (
    SIMPLE_ESCAPES,
    AccessRegex,
    LayoutRegex,
    StringRegex,
    ValueRegex,
)
from marcsync.utils.snippets import Annotation


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) in the MARC source."""

    start: int
    end: int


class AccessKind(Enum):
    """Kinds of path access."""

    OBJECT = "object"
    MAP = "map"
    ARRAY_NEW = "array_new"
    ARRAY_LAST = "array_last"
    TUPLE_NEW = "tuple_new"
    TUPLE_LAST = "tuple_last"

    @property
    def container_type(self) -> str:
        """Type name of the container this access implies (used in error messages)."""
        return _CONTAINER_TYPES[self]

    @property
    def is_keyed(self) -> bool:
        return self in (AccessKind.OBJECT, AccessKind.MAP)

    @property
    def is_last(self) -> bool:
        return self in (AccessKind.ARRAY_LAST, AccessKind.TUPLE_LAST)


_CONTAINER_TYPES = {
    AccessKind.OBJECT: "Object",
    AccessKind.MAP: "Map",
    AccessKind.ARRAY_NEW: "Array",
    AccessKind.ARRAY_LAST: "Array",
    AccessKind.TUPLE_NEW: "Tuple",
    AccessKind.TUPLE_LAST: "Tuple",
}


@dataclass(frozen=True)
class Access:
    """One step of an entry's path, e.g. `.name`, `{metal}` or `[i]`."""

    kind: AccessKind
    span: Span
    key: Optional[str] = None


@dataclass
class Entry:
    """
    A single `path = value` assignment.

    Attributes:
        accesses: Non-empty access path, in source order
        value: Literal value (str, int, float, bool, None, or an empty dict/list)
        value_span: Where the literal value appears in the source
    """

    accesses: List[Access]
    value: Any
    value_span: Span


EXPECTED_ACCESS = (
    "expected a comment or an access such as `.key`, `{key}`, `[i]`, `[ ]`, `(i)` or `( )`"
)
EXPECTED_ASSIGN = "expected `=` or another access"
EXPECTED_KEY = "expected a key: an identifier or a quoted string"
EXPECTED_VALUE = "expected a value: a string, a number, `true`, `false`, `null`, `{}` or `[]`"
EXPECTED_LINE_END = "expected the end of the line after the value"


class MarcParser:
    """
    Position-based MARC parser.

    Regexes are matched at the current position (never searched ahead), so
    every syntax error can point at the exact character where parsing stopped.
    """

    def __init__(self):
        self._whitespace = re.compile(LayoutRegex.HORIZONTAL_WHITESPACE)
        self._newline = re.compile(LayoutRegex.NEWLINE)
        self._comment = re.compile(LayoutRegex.COMMENT)
        self._assign = re.compile(LayoutRegex.ASSIGN)

        self._object_prefix = re.compile(AccessRegex.OBJECT_PREFIX)
        self._map_open = re.compile(AccessRegex.MAP_OPEN)
        self._map_close = re.compile(AccessRegex.MAP_CLOSE)
        self._identifier = re.compile(AccessRegex.IDENTIFIER)
        self._positional_accesses = [
            (AccessKind.ARRAY_NEW, re.compile(AccessRegex.ARRAY_NEW)),
            (AccessKind.ARRAY_LAST, re.compile(AccessRegex.ARRAY_LAST)),
            (AccessKind.TUPLE_NEW, re.compile(AccessRegex.TUPLE_NEW)),
            (AccessKind.TUPLE_LAST, re.compile(AccessRegex.TUPLE_LAST)),
        ]

        # (regex, escaped, may span lines) - triple-quoted forms first
        self._string_forms = [
            (re.compile(StringRegex.MULTILINE_ESCAPED, re.DOTALL), True, True),
            (re.compile(StringRegex.MULTILINE_RAW, re.DOTALL), False, True),
            (re.compile(StringRegex.SINGLELINE_ESCAPED), True, False),
            (re.compile(StringRegex.SINGLELINE_RAW), False, False),
        ]
        self._escape = re.compile(StringRegex.ESCAPE_SEQUENCE, re.DOTALL)

        self._keyword = re.compile(ValueRegex.KEYWORD)
        self._decimal = re.compile(ValueRegex.DECIMAL)
        self._integer = re.compile(ValueRegex.INTEGER)
        self._empty_object = re.compile(ValueRegex.EMPTY_OBJECT)
        self._empty_array = re.compile(ValueRegex.EMPTY_ARRAY)

    def parse(self, source: str) -> List[Entry]:
        """
        Parse MARC source into entries.

        Windows line endings are normalized first, so error spans refer to the
        normalized text.

        Args:
            source: MARC document text

        Returns:
            Entries in source order (comments and blank lines dropped)

        Raises:
            MarcSyntaxError: If the text does not follow the MARC grammar
        """
        source = source.replace("\r\n", "\n")
        entries = []
        pos = 0

        while pos < len(source):
            pos = self._skip_whitespace(source, pos)
            if pos >= len(source):
                break

            match = self._newline.match(source, pos) or self._comment.match(source, pos)
            if match:
                pos = match.end()
                continue

            entry, pos = self._parse_entry(source, pos)
            entries.append(entry)
            pos = self._parse_line_end(source, pos)

        return entries

    # ------------------------------------------------------------------
    # Lines and entries
    # ------------------------------------------------------------------

    def _skip_whitespace(self, source: str, pos: int) -> int:
        return self._whitespace.match(source, pos).end()

    def _parse_line_end(self, source: str, pos: int) -> int:
        pos = self._skip_whitespace(source, pos)
        comment = self._comment.match(source, pos)
        if comment:
            pos = comment.end()
        if pos >= len(source):
            return pos
        newline = self._newline.match(source, pos)
        if not newline:
            raise MarcSyntaxError.at(source, pos, EXPECTED_LINE_END)
        return newline.end()

    def _parse_entry(self, source: str, pos: int) -> Tuple[Entry, int]:
        accesses = []
        while True:
            pos = self._skip_whitespace(source, pos)
            access, next_pos = self._parse_access(source, pos)
            if access is None:
                break
            accesses.append(access)
            pos = next_pos

        if not accesses:
            raise MarcSyntaxError.at(source, pos, EXPECTED_ACCESS)

        assign = self._assign.match(source, pos)
        if not assign:
            raise MarcSyntaxError.at(source, pos, EXPECTED_ASSIGN)

        pos = self._skip_whitespace(source, assign.end())
        value, value_span = self._parse_value(source, pos)
        return Entry(accesses=accesses, value=value, value_span=value_span), value_span.end

    # ------------------------------------------------------------------
    # Accesses and keys
    # ------------------------------------------------------------------

    def _parse_access(self, source: str, pos: int) -> Tuple[Optional[Access], int]:
        prefix = self._object_prefix.match(source, pos)
        if prefix:
            key, end = self._parse_key(source, prefix.end())
            return Access(AccessKind.OBJECT, Span(pos, end), key), end

        map_open = self._map_open.match(source, pos)
        if map_open:
            key, key_end = self._parse_key(source, map_open.end())
            map_close = self._map_close.match(source, key_end)
            if not map_close:
                raise MarcSyntaxError.at(source, key_end, "expected `}` to close the map key")
            return Access(AccessKind.MAP, Span(pos, map_close.end()), key), map_close.end()

        for kind, regex in self._positional_accesses:
            match = regex.match(source, pos)
            if match:
                return Access(kind, Span(pos, match.end())), match.end()

        return None, pos

    def _parse_key(self, source: str, pos: int) -> Tuple[str, int]:
        identifier = self._identifier.match(source, pos)
        if identifier:
            return identifier.group(0), identifier.end()

        string = self._parse_string(source, pos)
        if string is not None:
            return string

        raise MarcSyntaxError.at(source, pos, EXPECTED_KEY)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_value(self, source: str, pos: int) -> Tuple[Any, Span]:
        string = self._parse_string(source, pos)
        if string is not None:
            value, end = string
            return value, Span(pos, end)

        keyword = self._keyword.match(source, pos)
        if keyword:
            value = {"true": True, "false": False, "null": None}[keyword.group("keyword")]
            return value, Span(pos, keyword.end())

        decimal = self._decimal.match(source, pos)
        if decimal:
            value = float(decimal.group(0))
            if not math.isfinite(value):
                raise MarcSyntaxError.at(
                    source, pos, "number is too large to represent",
                    title="Number Out Of Range", end=decimal.end(),
                )
            return value, Span(pos, decimal.end())

        integer = self._integer.match(source, pos)
        if integer:
            return int(integer.group(0)), Span(pos, integer.end())

        empty_object = self._empty_object.match(source, pos)
        if empty_object:
            return {}, Span(pos, empty_object.end())

        empty_array = self._empty_array.match(source, pos)
        if empty_array:
            return [], Span(pos, empty_array.end())

        raise MarcSyntaxError.at(source, pos, EXPECTED_VALUE)

    def _parse_string(self, source: str, pos: int) -> Optional[Tuple[str, int]]:
        """Parse any of the four string forms at pos; None if no string starts there."""
        for regex, escaped, multiline in self._string_forms:
            match = regex.match(source, pos)
            if not match:
                continue

            body = match.group("body")
            if escaped:
                body = self._unescape(source, body, match.start("body"))
            # Line breaks produced by escapes count too
            if multiline and "\n" in body:
                body = self._strip_multiline_breaks(source, body, Span(pos, match.end()))
            return body, match.end()

        if source.startswith(('"', "'"), pos):
            line_end = source.find("\n", pos)
            raise MarcSyntaxError.at(
                source, pos, "unterminated string literal",
                end=len(source) if line_end == -1 else line_end,
            )
        return None

    def _strip_multiline_breaks(self, source: str, body: str, span: Span) -> str:
        """Drop the line breaks right inside the delimiters of a string that spans lines."""
        if not body.startswith("\n"):
            label = "a string that spans lines must start with a line break after its opening quotes"
        elif not body.endswith("\n"):
            label = "a string that spans lines must end with a line break before its closing quotes"
        else:
            return body[1:-1]
        raise MarcSyntaxError(
            "Invalid Multiline String", [Annotation(span.start, span.end, label)], source
        )

    def _unescape(self, source: str, body: str, body_start: int) -> str:
        def replace(match: re.Match) -> str:
            if match.group("high"):
                high = int(match.group("high"), 16)
                low = int(match.group("low"), 16)
                return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
            if match.group("hex"):
                return chr(int(match.group("hex"), 16))
            if match.group("braced"):
                code_point = int(match.group("braced"), 16)
                if code_point <= 0x10FFFF:
                    return chr(code_point)
            elif match.group("char") in SIMPLE_ESCAPES:
                return SIMPLE_ESCAPES[match.group("char")]

            raise MarcSyntaxError(
                "Invalid Escape",
                [Annotation(
                    body_start + match.start(),
                    body_start + match.end(),
                    f"unknown escape sequence `{match.group(0)}`",
                )],
                source,
            )

        return self._escape.sub(replace, body)
