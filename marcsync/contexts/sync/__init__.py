"""
Sync Context

Responsibilities:
- Holds the four representations of one document (MARC, JSON, YAML, TOML)
- Applies an edit of any representation and recomputes the others through JSON
- Formats the MARC representation on request
- Loads the built-in example document

Owns: Document, RepresentationSlot, ErrorKind, BootstrapError
Never: Parses or renders text itself (delegates to a ConversionCollaborator)
"""

from marcsync.contexts.sync.document import Document, ErrorKind, RepresentationSlot, SlotError
from marcsync.contexts.sync.hub import reformat, transition
from marcsync.contexts.sync.loader import EXAMPLE_DOCUMENT, BootstrapError, empty_document, initial
from marcsync.contexts.sync.session import SyncSession

__all__ = [
    # State
    "Document",
    "RepresentationSlot",
    "SlotError",
    "ErrorKind",
    # Transitions
    "transition",
    "reformat",
    # Bootstrap
    "initial",
    "empty_document",
    "EXAMPLE_DOCUMENT",
    "BootstrapError",
    # Session
    "SyncSession",
]
