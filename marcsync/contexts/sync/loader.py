"""
Initial Document Loader

Seeds a session with a fixed MARC example that exercises the main language
features, then derives the other three representations from it.
"""

from typing import Optional

from marcsync.contexts.conversion.converter import ConversionCollaborator
from marcsync.contexts.conversion.formats import Format
from marcsync.contexts.sync.document import Document, RepresentationSlot
from marcsync.contexts.sync.hub import transition
from marcsync.contexts.sync.logger import _log_error, _log_info

EXAMPLE_DOCUMENT = '''# Map
.materials{"Infinity stones"}."soul affinity" = "fire"
.materials{metal}.reflectivity = 1.0
.materials{metal}.metallic = true
.materials{plastic}.reflectivity = 0.5
.materials{plastic}.conductivity = -1

# Array of objects
.entities[i].material = "metal"
.entities[ ].name = "hero"

.entities[i].name = "monster"
.entities[ ].material = "plastic"

# Multiline string
.description = """
These are common materials.
They are found on Earth.
"""

# Raw string
.motto = 'escapes like \\n stay as written'
'''


class BootstrapError(RuntimeError):
    """Raised when the built-in example does not convert cleanly into every format."""

    pass


def empty_document() -> Document:
    """Document with every slot Ok and empty, used as the base for the first transition."""
    return Document(slots={fmt: RepresentationSlot.ok("") for fmt in Format})


def initial(converter: Optional[ConversionCollaborator] = None) -> Document:
    """
    Build the starting Document from EXAMPLE_DOCUMENT.

    Args:
        converter: Conversion collaborator (defaults to the shared FormatConverter)

    Returns:
        Document whose four slots are all Ok

    Raises:
        BootstrapError: If any representation of the example failed
    """
    doc = transition(empty_document(), Format.PRIMARY, EXAMPLE_DOCUMENT, converter)

    if not doc.is_consistent:
        failures = [f"{fmt.display_name}: {doc.slot(fmt).text}" for fmt in doc.failed_formats]
        _log_error(f"Example document failed to load ({len(failures)} slots)")
        raise BootstrapError("Example document failed to load:\n" + "\n".join(failures))

    _log_info("Loaded example document")
    return doc
