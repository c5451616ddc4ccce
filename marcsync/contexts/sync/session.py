"""
Sync Session

Thin holder of the current Document for callers that edit repeatedly. Each
call threads the Document returned by the hub forward; the hub itself keeps
no state.
"""

from typing import Optional

from marcsync.contexts.conversion.converter import ConversionCollaborator
from marcsync.contexts.conversion.formats import Format
from marcsync.contexts.sync.document import Document
from marcsync.contexts.sync.hub import reformat, transition
from marcsync.contexts.sync.loader import initial
from marcsync.contexts.sync.logger import _log_debug


class SyncSession:
    """
    Current document plus the operations that replace it.

    Not thread-safe: edits are applied in call order and the last one wins.

    Example:
        session = SyncSession()
        session.edit(Format.TREE, '{"x": 1}')
        print(session.document.text(Format.PRIMARY))  # .x = 1
    """

    def __init__(
        self,
        converter: Optional[ConversionCollaborator] = None,
        document: Optional[Document] = None,
    ):
        """
        Args:
            converter: Conversion collaborator passed to every transition
            document: Starting document (defaults to the example document)
        """
        self.converter = converter
        self._document = document if document is not None else initial(converter)
        self.transition_count = 0

    @property
    def document(self) -> Document:
        return self._document

    def edit(self, fmt: Format, text: str) -> Document:
        """Apply a user edit of one representation and return the new document."""
        self._document = transition(self._document, fmt, text, self.converter)
        self.transition_count += 1
        _log_debug(f"Transition #{self.transition_count} ({fmt.display_name} edited)")
        return self._document

    def reformat(self) -> Document:
        """Canonicalize the Primary representation; unchanged document if that fails."""
        updated = reformat(self._document, self.converter)
        if updated is not self._document:
            self.transition_count += 1
        self._document = updated
        return self._document

    def reset(self) -> Document:
        """Replace the current document with a fresh copy of the example."""
        self._document = initial(self.converter)
        self.transition_count = 0
        return self._document
