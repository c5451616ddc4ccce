"""
Conversion Context

Responsibilities:
- Parses and evaluates MARC (the primary, human-authored syntax)
- Generates canonical MARC from a value tree
- Reads and writes JSON, YAML and TOML
- Routes every conversion through JSON (the pivot format)

Owns: Format enum, ConversionCollaborator contract, conversion errors
Never: Decides which representations to recompute (that is the sync context)
"""

from marcsync.contexts.conversion.converter import (
    ConversionCollaborator,
    ConversionResult,
    FormatConverter,
    convert_file,
    convert_text,
    get_default_converter,
    validate_roundtrip,
)
from marcsync.contexts.conversion.exceptions import (
    ConversionError,
    MarcEvaluationError,
    MarcSyntaxError,
    ParseError,
    SerializeError,
)
from marcsync.contexts.conversion.formats import PIVOT_FORMAT, Format

__all__ = [
    # Collaborator contract and implementation
    "ConversionCollaborator",
    "FormatConverter",
    "get_default_converter",
    # Orchestrators
    "convert_text",
    "convert_file",
    "validate_roundtrip",
    "ConversionResult",
    # Formats
    "Format",
    "PIVOT_FORMAT",
    # Errors
    "ConversionError",
    "ParseError",
    "SerializeError",
    "MarcSyntaxError",
    "MarcEvaluationError",
]
