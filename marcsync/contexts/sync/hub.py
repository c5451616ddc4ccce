"""
Synchronization Hub

Pure transition functions over Document. Every edit flows through the pivot
(Tree/JSON): the edited text is translated into the pivot once, then the pivot
is rendered into each remaining format. No exception leaves this module; all
failures become Err slots.
"""

from typing import Callable, Optional, Tuple

from marcsync.contexts.conversion.converter import ConversionCollaborator, get_default_converter
from marcsync.contexts.conversion.exceptions import ConversionError
from marcsync.contexts.conversion.formats import PIVOT_FORMAT, Format
from marcsync.contexts.sync.document import Document, ErrorKind, RepresentationSlot
from marcsync.contexts.sync.logger import _log_warning, log_slot_failure, log_transition


def _attempt(
    call: Callable[[], str], fallback_kind: ErrorKind
) -> Tuple[Optional[str], Optional[RepresentationSlot]]:
    """
    Run one collaborator call.

    Returns:
        (text, None) on success, (None, failed slot) on failure
    """
    try:
        return call(), None
    except ConversionError as e:
        return None, RepresentationSlot.failed(ErrorKind(e.kind), e.message)
    except Exception as e:  # collaborator bugs must not escape the hub
        message = str(e) or type(e).__name__
        return None, RepresentationSlot.failed(fallback_kind, message)


def transition(
    doc: Document,
    edited: Format,
    new_text: str,
    converter: Optional[ConversionCollaborator] = None,
) -> Document:
    """
    Produce the next Document after a user edits one representation.

    The edited slot always becomes Ok with the raw text. If the edit cannot be
    translated into the pivot, every other slot takes the same failure. Otherwise
    each remaining format is rendered from the pivot independently.

    Args:
        doc: Current document (never modified)
        edited: Format the user edited
        new_text: Raw editor text
        converter: Conversion collaborator (defaults to the shared FormatConverter)

    Returns:
        New Document with edit_origin set to `edited`
    """
    converter = converter or get_default_converter()
    updates = {edited: RepresentationSlot.ok(new_text)}

    if edited is PIVOT_FORMAT:
        pivot_text = new_text
    else:
        pivot_text, failure = _attempt(
            lambda: converter.to_tree(edited, new_text), ErrorKind.PARSE
        )
        if failure is not None:
            log_slot_failure(edited.display_name, failure.error.kind.value, failure.text)
            for fmt in Format:
                if fmt is not edited:
                    updates[fmt] = failure
            log_transition(edited.display_name, [fmt.display_name for fmt in Format if fmt is not edited])
            return doc.with_slots(updates, edit_origin=edited)
        updates[PIVOT_FORMAT] = RepresentationSlot.ok(pivot_text)

    failed = []
    for target in Format:
        if target is edited or target is PIVOT_FORMAT:
            continue
        rendered, failure = _attempt(
            lambda: converter.from_tree(target, pivot_text), ErrorKind.SERIALIZE
        )
        if failure is not None:
            log_slot_failure(target.display_name, failure.error.kind.value, failure.text)
            updates[target] = failure
            failed.append(target.display_name)
        else:
            updates[target] = RepresentationSlot.ok(rendered)

    log_transition(edited.display_name, failed)
    return doc.with_slots(updates, edit_origin=edited)


def reformat(doc: Document, converter: Optional[ConversionCollaborator] = None) -> Document:
    """
    Canonicalize the Primary representation and propagate it.

    Args:
        doc: Current document
        converter: Conversion collaborator (defaults to the shared FormatConverter)

    Returns:
        transition(doc, PRIMARY, formatted) on success; `doc` itself when the
        Primary slot is failed or cannot be canonicalized
    """
    converter = converter or get_default_converter()
    primary = doc.slot(Format.PRIMARY)
    if primary.is_error:
        _log_warning("Reformat skipped: Primary slot holds an error")
        return doc

    formatted, failure = _attempt(lambda: converter.canonicalize(primary.text), ErrorKind.PARSE)
    if failure is not None:
        _log_warning(f"Reformat skipped: {failure.text.splitlines()[0] if failure.text else ''}")
        return doc

    return transition(doc, Format.PRIMARY, formatted, converter)
