"""
MARC Generator

Converts a value tree (dicts, lists, scalars) into MARC text, one
`path = value` line per leaf.

Output depends only on the value, so generating from the evaluation of
generated text reproduces it exactly (the basis of canonical formatting).
"""

import json
import math
from typing import Any, List

from marcsync.contexts.conversion.exceptions import SerializeError
from marcsync.contexts.conversion.marc_patterns import (
    UNQUOTED_KEY_PATTERN,
    AccessPatterns,
    ValuePatterns,
)


def format_key(key: str) -> str:
    """
    Format an object key, quoting it unless it is a plain identifier.

    Example:
        >>> format_key("metal")
        'metal'
        >>> format_key("soul affinity")
        '"soul affinity"'
    """
    if UNQUOTED_KEY_PATTERN.fullmatch(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def _has_control_characters(text: str) -> bool:
    """True if text holds characters that only the escaped string form can carry."""
    return any((ord(ch) < 32 and ch not in "\n\t") or ch == "\x7f" for ch in text)


def format_string(text: str) -> str:
    """
    Format a string value using the lightest literal form that can hold it.

    Preference order:
    1. 'raw'                  - single line, no single quote
    2. '''raw'''              - single line, may contain single quotes
    3. '''<newline>raw<newline>''' - spans lines
    4. "escaped"              - anything else

    Example:
        >>> format_string("fire")
        "'fire'"
        >>> format_string("it's")
        "'''it's'''"
    """
    quote = ValuePatterns.RAW_QUOTE
    triple = ValuePatterns.RAW_TRIPLE_QUOTE

    if not _has_control_characters(text):
        if "\n" not in text and quote not in text:
            return f"{quote}{text}{quote}"
        if (
            "\n" not in text
            and triple not in text
            and not text.startswith(quote)
            and not text.endswith(quote)
        ):
            return f"{triple}{text}{triple}"
        if "\n" in text and triple not in text:
            return f"{triple}\n{text}\n{triple}"

    return json.dumps(text, ensure_ascii=False)


def format_scalar(value: Any) -> str:
    """
    Format a scalar (or empty container) value.

    Raises:
        SerializeError: For non-finite floats or unsupported types
    """
    if value is None:
        return ValuePatterns.NULL
    if value is True:
        return ValuePatterns.TRUE
    if value is False:
        return ValuePatterns.FALSE
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializeError(f"MARC has no literal for the number {value}")
        return repr(value)
    if isinstance(value, str):
        return format_string(value)
    if isinstance(value, dict) and not value:
        return ValuePatterns.EMPTY_OBJECT
    if isinstance(value, list) and not value:
        return ValuePatterns.EMPTY_ARRAY
    raise SerializeError(f"MARC cannot represent a value of type {type(value).__name__}")


class MarcGenerator:
    """
    Generates MARC text from a value tree.

    Dicts are written as Objects (`.key`) and lists as Arrays (`[i]`/`[ ]`);
    the Map and Tuple access forms are never emitted.
    """

    def __init__(self, separate_groups: bool = True):
        """
        Args:
            separate_groups: Put a blank line between entries that start with
                             different top-level keys (or array elements)
        """
        self.separate_groups = separate_groups

    def generate(self, value: Any) -> str:
        """
        Generate a MARC document.

        Args:
            value: Root value; must be a dict or a non-empty list

        Returns:
            MARC text ending with a newline, or "" for an empty dict

        Raises:
            SerializeError: If the root cannot be expressed as MARC entries
        """
        if isinstance(value, dict):
            groups = [self._entries(child, AccessPatterns.OBJECT_PREFIX + format_key(str(key)))
                      for key, child in value.items()]
        elif isinstance(value, list):
            if not value:
                raise SerializeError("MARC cannot represent an empty array at the top level")
            groups = [self._element_entries(element, "") for element in value]
        else:
            raise SerializeError(
                "MARC documents need an object or an array at the top level, "
                f"got {type(value).__name__}"
            )

        separator = "\n\n" if self.separate_groups else "\n"
        text = separator.join("\n".join(lines) for lines in groups)
        return text + "\n" if text else ""

    def _entries(self, value: Any, path: str) -> List[str]:
        if isinstance(value, dict) and value:
            lines = []
            for key, child in value.items():
                lines.extend(
                    self._entries(child, path + AccessPatterns.OBJECT_PREFIX + format_key(str(key)))
                )
            return lines

        if isinstance(value, list) and value:
            lines = []
            for element in value:
                lines.extend(self._element_entries(element, path))
            return lines

        return [f"{path}{ValuePatterns.ASSIGN}{format_scalar(value)}"]

    def _element_entries(self, element: Any, path: str) -> List[str]:
        """Lines for one array element: `[i]` on the first line, `[ ]` after."""
        lines = self._entries(element, "")
        return [
            path + (AccessPatterns.ARRAY_NEW if index == 0 else AccessPatterns.ARRAY_LAST) + line
            for index, line in enumerate(lines)
        ]
