"""Custom exceptions for the conversion context."""

from typing import Optional, Sequence

from marcsync.utils.snippets import Annotation, render_snippet


class ConversionError(Exception):
    """
    Base class for failures of the conversion collaborator.

    Attributes:
        message: Human-readable description shown in place of the format's content
        fmt: Format whose text or value could not be processed (if known)
        kind: "parse" or "serialize", set by subclasses
    """

    kind: str = "parse"

    def __init__(self, message: str, fmt=None):
        self.message = message
        self.fmt = fmt
        super().__init__(message)


class ParseError(ConversionError):
    """Exception raised when text is not valid syntax of its declared format."""

    kind = "parse"


class SerializeError(ConversionError):
    """
    Exception raised when a parsed value cannot be rendered into a target format.

    Typical causes are format-feature mismatches such as a null value on its
    way to TOML or an array at the top level of a TOML document.
    """

    kind = "serialize"


class MarcError(ParseError):
    """
    MARC failure carrying an annotated source snippet.

    Attributes:
        title: Short error title (e.g. "Type Mismatch")
        annotations: Labelled spans pointing into the MARC source
        source: The MARC source the spans refer to
    """

    def __init__(
        self,
        title: str,
        annotations: Sequence[Annotation],
        source: str,
        fmt=None,
    ):
        self.title = title
        self.annotations = list(annotations)
        self.source = source
        super().__init__(render_snippet(title, source, self.annotations), fmt=fmt)


class MarcSyntaxError(MarcError):
    """MARC text does not follow the grammar (or contains a malformed string)."""

    @classmethod
    def at(cls, source: str, position: int, label: str, title: str = "Syntax Error", end: Optional[int] = None):
        """Build a syntax error pointing at a single position (or span) of the source."""
        annotation = Annotation(position, end if end is not None else position + 1, label)
        return cls(title, [annotation], source)


class MarcEvaluationError(MarcError):
    """MARC entries are grammatical but conflict with each other."""

    pass
