"""
Document State

The immutable snapshot of the four representations of a document. A
Document is never modified; every transition builds a new one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from marcsync.contexts.conversion.formats import Format


class ErrorKind(Enum):
    """Why a representation could not be produced."""

    PARSE = "parse"
    SERIALIZE = "serialize"


@dataclass(frozen=True)
class SlotError:
    """Failure attached to a slot."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class RepresentationSlot:
    """
    One format's text plus its status.

    A slot is Ok when `error` is None. A failed slot's text is the error
    message shown in place of content, never valid syntax of its format.

    Attributes:
        text: Rendered or directly edited content, or the error message
        error: Failure details, None when Ok
    """

    text: str
    error: Optional[SlotError] = None

    def __post_init__(self):
        if self.error is not None and self.text != self.error.message:
            raise ValueError("A failed slot's text must be its error message")

    @classmethod
    def ok(cls, text: str) -> "RepresentationSlot":
        return cls(text=text)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "RepresentationSlot":
        return cls(text=message, error=SlotError(kind=kind, message=message))

    @property
    def status(self) -> str:
        """Either "Ok" or "Err"."""
        return "Ok" if self.error is None else "Err"

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class Document:
    """
    Exactly four slots, one per Format, plus the origin of the last transition.

    Attributes:
        slots: Read-only mapping Format -> RepresentationSlot
        edit_origin: Format edited by the transition that produced this
                     document (None for a document assembled by hand)
    """

    slots: Mapping[Format, RepresentationSlot]
    edit_origin: Optional[Format] = field(default=None)

    def __post_init__(self):
        missing = [fmt.display_name for fmt in Format if fmt not in self.slots]
        if missing or len(self.slots) != len(Format):
            raise ValueError(f"A document needs one slot per format (missing: {missing})")
        # Freeze a private copy so callers cannot patch the document through their dict
        object.__setattr__(self, "slots", MappingProxyType(dict(self.slots)))

    def slot(self, fmt: Format) -> RepresentationSlot:
        return self.slots[fmt]

    def __getitem__(self, fmt: Format) -> RepresentationSlot:
        return self.slots[fmt]

    def text(self, fmt: Format) -> str:
        return self.slots[fmt].text

    @property
    def is_consistent(self) -> bool:
        """True when every slot is Ok."""
        return all(slot.is_ok for slot in self.slots.values())

    @property
    def failed_formats(self) -> list:
        return [fmt for fmt in Format if self.slots[fmt].is_error]

    def with_slots(
        self,
        updates: Mapping[Format, RepresentationSlot],
        edit_origin: Optional[Format] = None,
    ) -> "Document":
        """
        Build a new document with some slots replaced.

        Args:
            updates: Slots to replace
            edit_origin: Origin recorded on the new document

        Returns:
            New Document; self is left untouched
        """
        return replace(self, slots={**self.slots, **updates}, edit_origin=edit_origin)

    @classmethod
    def from_texts(cls, texts: Mapping[Format, str]) -> "Document":
        """Assemble a document whose slots are all Ok with the given texts."""
        return cls(slots={fmt: RepresentationSlot.ok(texts[fmt]) for fmt in Format})

    def __hash__(self):
        return hash((tuple(self.slots[fmt] for fmt in Format), self.edit_origin))

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return dict(self.slots) == dict(other.slots) and self.edit_origin == other.edit_origin
