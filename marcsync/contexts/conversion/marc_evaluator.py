"""
MARC Evaluator

Applies parsed MARC entries, in order, to build the document's value tree.

Container types are inferred from the first access applied to them:
`.key` makes an Object, `{key}` a Map, `[i]`/`[ ]` an Array and `(i)`/`( )`
a Tuple. Objects and Maps both become dicts; Arrays and Tuples both become
lists. Later accesses must agree with the inferred type.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from marcsync.contexts.conversion.exceptions import MarcEvaluationError
from marcsync.contexts.conversion.marc_parser import Access, AccessKind, Entry, Span
from marcsync.utils.snippets import ERROR, HELP, INFO, Annotation


@dataclass
class Node:
    """
    Value under construction.

    Attributes:
        type_name: "Object", "Map", "Array", "Tuple" for containers, or the
                   scalar type ("String", "Integer", "Decimal", "Boolean", "Null")
        inferred_at: Span of the access (containers) or literal (scalars)
                     that determined the type
        value: Scalar value (unused for containers)
        items: dict for Object/Map, list for Array/Tuple, None for scalars
    """

    type_name: str
    inferred_at: Span
    value: Any = None
    items: Optional[Union[dict, list]] = field(default=None)

    @property
    def is_container(self) -> bool:
        return self.items is not None

    def to_python(self) -> Any:
        if isinstance(self.items, dict):
            return {key: child.to_python() for key, child in self.items.items()}
        if isinstance(self.items, list):
            return [child.to_python() for child in self.items]
        return self.value


def scalar_type_name(value: Any) -> str:
    """Type name of a literal value as shown in error messages."""
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Decimal"
    return "String"


def _container_for(access: Access) -> Node:
    items = {} if access.kind.is_keyed else []
    return Node(type_name=access.kind.container_type, inferred_at=access.span, items=items)


def _literal_node(entry: Entry) -> Node:
    if isinstance(entry.value, dict):
        return Node(type_name="Object", inferred_at=entry.value_span, items={})
    if isinstance(entry.value, list):
        return Node(type_name="Array", inferred_at=entry.value_span, items=[])
    return Node(
        type_name=scalar_type_name(entry.value), inferred_at=entry.value_span, value=entry.value
    )


class MarcEvaluator:
    """Builds a Python value (dict or list tree) from MARC entries."""

    def evaluate(self, entries: List[Entry], source: str) -> Any:
        """
        Evaluate entries into a value tree.

        Args:
            entries: Parsed entries, in source order
            source: The MARC source (for error snippets)

        Returns:
            dict or list; an empty document evaluates to an empty dict

        Raises:
            MarcEvaluationError: On type mismatches, duplicate assignments,
                or `[ ]` / `( )` with no element to continue
        """
        self._source = source
        root: Optional[Node] = None
        for entry in entries:
            root = self._set(root, entry.accesses, _literal_node(entry))

        return {} if root is None else root.to_python()

    def _set(self, node: Optional[Node], accesses: List[Access], leaf: Node) -> Node:
        if not accesses:
            return leaf

        head, tail = accesses[0], accesses[1:]

        if node is None:
            if head.kind.is_last:
                raise self._last_element_not_found(head)
            node = _container_for(head)
        elif not node.is_container or node.type_name != head.kind.container_type:
            raise self._type_mismatch(node, head)

        if head.kind.is_keyed:
            existing = node.items.get(head.key)
            if existing is not None and not tail:
                raise self._duplicate_assignment(existing, leaf)
            node.items[head.key] = self._set(existing, tail, leaf)
        elif head.kind.is_last:
            if not node.items:
                raise self._last_element_not_found(head)
            if not tail:
                raise self._duplicate_assignment(node.items[-1], leaf)
            node.items[-1] = self._set(node.items[-1], tail, leaf)
        else:
            node.items.append(self._set(None, tail, leaf))

        return node

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _type_mismatch(self, node: Node, access: Access) -> MarcEvaluationError:
        if node.is_container:
            info = (
                f"The type of the parent value was first inferred as {node.type_name} "
                "due to this access."
            )
        else:
            article = "an" if node.type_name[0] in "AEIOU" else "a"
            info = f"The parent value was assigned {article} {node.type_name} here."
        error = (
            f"Error: this access treats the parent value as {access.kind.container_type}, "
            "but it was inferred as a different type."
        )
        return MarcEvaluationError(
            "Type Mismatch",
            [
                Annotation(node.inferred_at.start, node.inferred_at.end, info, INFO),
                Annotation(access.span.start, access.span.end, error, ERROR),
            ],
            self._source,
        )

    def _duplicate_assignment(self, existing: Node, leaf: Node) -> MarcEvaluationError:
        return MarcEvaluationError(
            "Duplicate Assignment",
            [
                Annotation(
                    existing.inferred_at.start,
                    existing.inferred_at.end,
                    "A value was previously assigned at this path.",
                    INFO,
                ),
                Annotation(
                    leaf.inferred_at.start,
                    leaf.inferred_at.end,
                    "Attempting to assign a new value at the same path is not allowed.",
                    ERROR,
                ),
            ],
            self._source,
        )

    def _last_element_not_found(self, access: Access) -> MarcEvaluationError:
        if access.kind == AccessKind.TUPLE_LAST:
            hint = "Change `( )` to `(i)`"
        else:
            hint = "Change `[ ]` to `[i]`"
        return MarcEvaluationError(
            "Last Array Element Not Found",
            [
                Annotation(access.span.start, access.span.end, "Last array element not found.", ERROR),
                Annotation(access.span.start, access.span.end, hint, HELP),
            ],
            self._source,
        )
