"""
Format Converter

The conversion collaborator consumed by the sync hub: every format converts
to and from JSON (the pivot), and MARC text can be canonicalized.

This module exports:
- ConversionCollaborator: abstract contract (to_tree, from_tree, canonicalize)
- FormatConverter: implementation for MARC, JSON, YAML and TOML
- Orchestration functions: convert_text, convert_file, validate_roundtrip
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from marcsync.contexts.conversion.config_resolver import load_render_options
from marcsync.contexts.conversion.exceptions import ConversionError, MarcError, SerializeError
from marcsync.contexts.conversion.formats import (
    PIVOT_FORMAT,
    Format,
    dump_json,
    dump_toml,
    dump_yaml,
    load_json,
    load_toml,
    load_yaml,
)
from marcsync.contexts.conversion.logger import _log_debug
from marcsync.contexts.conversion.marc_evaluator import MarcEvaluator
from marcsync.contexts.conversion.marc_generator import MarcGenerator
from marcsync.contexts.conversion.marc_parser import MarcParser


class ConversionCollaborator(ABC):
    """
    Contract between the sync hub and whatever converts document text.

    Implementations must be pure from the caller's perspective: the same input
    text always produces the same output text or the same failure.
    """

    @abstractmethod
    def to_tree(self, fmt: Format, text: str) -> str:
        """
        Translate text in `fmt` into pivot (JSON) text.

        Raises:
            ParseError: If text is not valid syntax of fmt
            SerializeError: If the parsed value has no JSON form
        """

    @abstractmethod
    def from_tree(self, fmt: Format, tree_text: str) -> str:
        """
        Translate pivot (JSON) text into text in `fmt`.

        Raises:
            ParseError: If tree_text is not valid JSON
            SerializeError: If the value cannot be represented in fmt
        """

    @abstractmethod
    def canonicalize(self, text: str) -> str:
        """
        Reformat MARC text into its canonical layout. Idempotent.

        Raises:
            ParseError: If text is not valid MARC
        """


class FormatConverter(ConversionCollaborator):
    """Converts between MARC, JSON, YAML and TOML through a plain Python value tree."""

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Args:
            options: Render options (see defaults.py). Defaults to
                     load_render_options(), i.e. defaults plus optional config file.
        """
        self.options = options if options is not None else load_render_options()
        self.parser = MarcParser()
        self.evaluator = MarcEvaluator()
        self.generator = MarcGenerator(**self.options["primary"])

    def load(self, fmt: Format, text: str) -> Any:
        """
        Parse text in any format into a value tree.

        Raises:
            ParseError: If text is not valid syntax of fmt
        """
        if fmt is Format.PRIMARY:
            return self._load_marc(text)
        if fmt is Format.TREE:
            return load_json(text)
        if fmt is Format.BLOCK:
            return load_yaml(text)
        return load_toml(text)

    def dump(self, fmt: Format, value: Any) -> str:
        """
        Render a value tree as text in any format.

        Raises:
            SerializeError: If the value cannot be represented in fmt
        """
        if fmt is Format.PRIMARY:
            try:
                return self.generator.generate(value)
            except SerializeError as e:
                e.fmt = Format.PRIMARY
                raise
        if fmt is Format.TREE:
            return dump_json(value, **self.options["tree"])
        if fmt is Format.BLOCK:
            return dump_yaml(value, **self.options["block"])
        return dump_toml(value, **self.options["table"])

    def to_tree(self, fmt: Format, text: str) -> str:
        value = self.load(fmt, text)
        _log_debug(f"Parsed {fmt.display_name} ({len(text)} chars)")
        return self.dump(PIVOT_FORMAT, value)

    def from_tree(self, fmt: Format, tree_text: str) -> str:
        value = self.load(PIVOT_FORMAT, tree_text)
        output = self.dump(fmt, value)
        _log_debug(f"Rendered {fmt.display_name} ({len(output)} chars)")
        return output

    def canonicalize(self, text: str) -> str:
        return self.generator.generate(self._load_marc(text))

    def _load_marc(self, text: str) -> Any:
        source = text.replace("\r\n", "\n")
        try:
            entries = self.parser.parse(source)
            return self.evaluator.evaluate(entries, source)
        except MarcError as e:
            e.fmt = Format.PRIMARY
            raise


@lru_cache(maxsize=None)
def get_default_converter() -> FormatConverter:
    """Shared FormatConverter built from the resolved render options."""
    return FormatConverter()


# ============================================================================
# Orchestration
# ============================================================================


@dataclass
class ConversionResult:
    """Result from convert_file() orchestration function."""

    success: bool
    source: Optional[Format] = None
    target: Optional[Format] = None
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    text: Optional[str] = None
    error: Optional[str] = None
    time_s: float = 0.0


def convert_text(
    source: Format,
    target: Format,
    text: str,
    converter: Optional[ConversionCollaborator] = None,
) -> str:
    """
    Convert text between any two formats through the pivot.

    JSON input is used as the pivot text directly, so converting JSON to JSON
    returns the input unchanged.

    Raises:
        ConversionError: If either hop fails
    """
    converter = converter or get_default_converter()
    tree_text = text if source is PIVOT_FORMAT else converter.to_tree(source, text)
    if target is PIVOT_FORMAT:
        return tree_text
    return converter.from_tree(target, tree_text)


def convert_file(
    input_path: Path,
    target: Format,
    output_path: Optional[Path] = None,
    source: Optional[Format] = None,
    converter: Optional[ConversionCollaborator] = None,
) -> ConversionResult:
    """
    Convert a file to another format.

    Args:
        input_path: File to convert
        target: Target format
        output_path: Optional path to write the converted text
        source: Source format (inferred from the input suffix when omitted)
        converter: Collaborator to use (defaults to the shared FormatConverter)

    Returns:
        ConversionResult; conversion failures are reported in `error`, not raised
    """
    start_time = time.time()
    result = ConversionResult(success=False, target=target, input_path=input_path)

    try:
        result.source = source or Format.from_path(input_path)
        text = input_path.read_text(encoding="utf-8")
        result.text = convert_text(result.source, target, text, converter)
        if output_path:
            output_path.write_text(result.text, encoding="utf-8")
            result.output_path = output_path
        result.success = True
    except ConversionError as e:
        result.error = e.message
    except ValueError as e:
        result.error = str(e)
    finally:
        result.time_s = time.time() - start_time

    return result


def structurally_equal(left: Any, right: Any) -> bool:
    """
    Compare two value trees including scalar types.

    Unlike ==, true is not equal to 1 and 1 is not equal to 1.0. Key order is
    ignored (TOML writers move plain keys ahead of tables).
    """
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            structurally_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, list):
        return len(left) == len(right) and all(
            structurally_equal(a, b) for a, b in zip(left, right)
        )
    return left == right


def validate_roundtrip(
    fmt: Format,
    text: str,
    converter: Optional[ConversionCollaborator] = None,
) -> Dict:
    """
    Check pivot consistency of a document against every other format.

    For each other format B: JSON -> B -> JSON must reproduce the same value.
    Targets that cannot represent the value at all (SerializeError) are
    reported as not expressible and do not fail the validation.

    Args:
        fmt: Format of the input text
        text: Document text
        converter: Collaborator to use (defaults to the shared FormatConverter)

    Returns:
        Dict with validation results:
        {
            'source': display name,
            'targets': {name: {'success', 'expressible', 'error'}},
            'validation_passed': bool,
            'error': str or None,
            'time_ms': float
        }
    """
    converter = converter or get_default_converter()
    start_time = time.time()
    result = {
        "source": fmt.display_name,
        "targets": {},
        "validation_passed": False,
        "error": None,
        "time_ms": 0.0,
    }

    try:
        tree_text = text if fmt is PIVOT_FORMAT else converter.to_tree(fmt, text)
        value = load_json(tree_text)

        for target in Format:
            if target is fmt:
                continue
            entry = {"success": False, "expressible": True, "error": None}
            try:
                rendered = converter.from_tree(target, tree_text)
            except SerializeError as e:
                entry["expressible"] = False
                entry["error"] = e.message
                result["targets"][target.display_name] = entry
                continue

            try:
                reparsed = load_json(converter.to_tree(target, rendered))
                entry["success"] = structurally_equal(reparsed, value)
            except ConversionError as e:
                entry["error"] = e.message
            result["targets"][target.display_name] = entry

        result["validation_passed"] = all(
            entry["success"] for entry in result["targets"].values() if entry["expressible"]
        )
    except ConversionError as e:
        result["error"] = e.message
    finally:
        result["time_ms"] = (time.time() - start_time) * 1000

    return result
