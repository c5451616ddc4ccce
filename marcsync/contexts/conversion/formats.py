"""
Document formats and the JSON / YAML / TOML adapters.

Each adapter pair converts between text and a plain Python value tree
(dict, list, str, int, float, bool, None). MARC has its own parser,
evaluator and generator modules.
"""

import datetime
import json
import math
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import tomli_w
import yaml

from marcsync.contexts.conversion.exceptions import ParseError, SerializeError


class Format(Enum):
    """The four representations of a document. TREE (JSON) is the pivot."""

    PRIMARY = "primary"
    TREE = "tree"
    BLOCK = "block"
    TABLE = "table"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def suffixes(self) -> tuple:
        return _SUFFIXES[self]

    @classmethod
    def from_name(cls, name: str) -> "Format":
        """
        Look up a format by tag ("primary") or display name ("MARC"), case-insensitive.

        Raises:
            ValueError: If the name matches no format
        """
        lowered = name.strip().lower()
        for fmt in cls:
            if lowered in (fmt.value, fmt.display_name.lower()):
                return fmt
        available = ", ".join(fmt.display_name for fmt in cls)
        raise ValueError(f"Unknown format '{name}'. Available formats: {available}")

    @classmethod
    def from_path(cls, path: Path) -> "Format":
        """
        Infer a format from a file suffix.

        Raises:
            ValueError: If the suffix belongs to no format
        """
        suffix = path.suffix.lower()
        for fmt in cls:
            if suffix in fmt.suffixes:
                return fmt
        raise ValueError(f"Cannot infer format from suffix '{suffix}' of {path.name}")


_DISPLAY_NAMES = {
    Format.PRIMARY: "MARC",
    Format.TREE: "JSON",
    Format.BLOCK: "YAML",
    Format.TABLE: "TOML",
}

_SUFFIXES = {
    Format.PRIMARY: (".marc",),
    Format.TREE: (".json",),
    Format.BLOCK: (".yaml", ".yml"),
    Format.TABLE: (".toml",),
}

PIVOT_FORMAT = Format.TREE


# ============================================================================
# JSON (pivot)
# ============================================================================


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} is out of range")
    return value


def _json_default(value: Any) -> Any:
    """Render reader-specific types (YAML/TOML dates and times) as ISO 8601 strings."""
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load_json(text: str) -> Any:
    """
    Parse strict JSON (NaN, Infinity and out-of-range numbers such as 1e400 are rejected).

    Raises:
        ParseError: If text is not valid JSON
    """
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except ValueError as e:
        raise ParseError(f"JSON parse error: {e}", fmt=Format.TREE) from e


def dump_json(value: Any, indent: Optional[int] = 2) -> str:
    """
    Pretty-print a value as JSON.

    Raises:
        SerializeError: If the value (e.g. a non-finite float) has no JSON form
    """
    try:
        return json.dumps(
            value, indent=indent, ensure_ascii=False, allow_nan=False, default=_json_default
        )
    except (TypeError, ValueError) as e:
        raise SerializeError(f"Value cannot be represented as JSON: {e}", fmt=Format.TREE) from e


# ============================================================================
# YAML
# ============================================================================


def load_yaml(text: str) -> Any:
    """
    Parse a single YAML document with the safe loader.

    An empty document parses as null.

    Raises:
        ParseError: If text is not valid YAML
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"YAML parse error: {e}", fmt=Format.BLOCK) from e


_YAML_LINE_BREAKS = ("\x85", "\u2028", "\u2029")


def _has_unicode_line_breaks(value: Any) -> bool:
    if isinstance(value, str):
        return any(char in value for char in _YAML_LINE_BREAKS)
    if isinstance(value, dict):
        return any(
            _has_unicode_line_breaks(key) or _has_unicode_line_breaks(item)
            for key, item in value.items()
        )
    if isinstance(value, list):
        return any(_has_unicode_line_breaks(item) for item in value)
    return False


def dump_yaml(value: Any, indent: int = 2, width: int = 80) -> str:
    """
    Write a value as block-style YAML, keeping key order.

    Characters YAML treats as line breaks (NEL, LS, PS) are written as
    escapes, since the reader would otherwise fold them.

    Raises:
        SerializeError: If the value cannot be represented
    """
    try:
        return yaml.safe_dump(
            value,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=not _has_unicode_line_breaks(value),
            indent=indent,
            width=width,
        )
    except yaml.YAMLError as e:
        raise SerializeError(f"Value cannot be represented as YAML: {e}", fmt=Format.BLOCK) from e


# ============================================================================
# TOML
# ============================================================================


def find_null_path(value: Any, path: str = "") -> Optional[str]:
    """
    Locate the first null inside a value tree.

    Returns:
        Dotted path with [index] parts (e.g. "materials.plastic.conductivity"),
        "<root>" for a null root, or None if there is no null

    Example:
        >>> find_null_path({"a": [1, None]})
        'a[1]'
    """
    if value is None:
        return path or "<root>"
    if isinstance(value, dict):
        for key, child in value.items():
            found = find_null_path(child, f"{path}.{key}" if path else str(key))
            if found:
                return found
    elif isinstance(value, list):
        for index, child in enumerate(value):
            found = find_null_path(child, f"{path}[{index}]")
            if found:
                return found
    return None


def load_toml(text: str) -> Any:
    """
    Parse a TOML document.

    Raises:
        ParseError: If text is not valid TOML
    """
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"TOML parse error: {e}", fmt=Format.TABLE) from e


def dump_toml(value: Any, indent: int = 4, multiline_strings: bool = False) -> str:
    """
    Write a value as TOML.

    Raises:
        SerializeError: If the root is not a table, the value contains null,
            or tomli-w rejects it
    """
    if not isinstance(value, dict):
        raise SerializeError(
            f"TOML documents need a table at the top level, got {type(value).__name__}",
            fmt=Format.TABLE,
        )

    null_path = find_null_path(value)
    if null_path:
        raise SerializeError(f"TOML has no null value (found at {null_path})", fmt=Format.TABLE)

    try:
        return tomli_w.dumps(value, multiline_strings=multiline_strings, indent=indent)
    except (TypeError, ValueError) as e:
        raise SerializeError(f"Value cannot be represented as TOML: {e}", fmt=Format.TABLE) from e
