"""Walking a schema graph along a field path."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from kube_explain.schema_management.schema_models import SchemaError, SchemaKind, SchemaNode


class FieldNotFoundError(Exception):
    """Raised when a field path segment does not exist at its depth."""

    def __init__(
        self,
        segment: str,
        available_fields: Sequence[str],
        walked_path: Sequence[str] = (),
    ) -> None:
        self.segment = segment
        self.available_fields = tuple(available_fields)
        self.walked_path = tuple(walked_path)
        location = f" in {'.'.join(self.walked_path)}" if self.walked_path else ""
        message = f'field "{segment}" does not exist{location}'
        if self.available_fields:
            message += f"; valid fields: {', '.join(self.available_fields)}"
        super().__init__(message)


@dataclass(frozen=True)
class FieldSelection:
    """Node reached by a field path, as declared by its parent."""

    field_name: str
    node: SchemaNode
    required: bool


def unwrap_field_type(node: SchemaNode) -> tuple[SchemaNode, str]:
    """Dereference and unwrap arrays/maps down to the node that lists fields.

    Returns:
      The unwrapped node and the name of the last definition passed through,
      or an empty name for inline types.
    """
    current = node
    type_name = ""
    seen: set[str] = set()
    while True:
        if current.kind is SchemaKind.REFERENCE:
            if current.reference in seen:
                raise SchemaError(f"Reference cycle without structure: {current.reference}")
            seen.add(current.reference)
            type_name = current.reference
            current = current.resolve()
        elif current.kind in (SchemaKind.ARRAY, SchemaKind.MAP) and current.element is not None:
            current = current.element
        else:
            return current, type_name


def lookup_field(root: SchemaNode, field_path: Sequence[str]) -> FieldSelection:
    """Follow `field_path` from `root`.

    Raises:
      FieldNotFoundError: If a segment is not a field of the object reached so far.
    """
    selection = FieldSelection(field_name="", node=root, required=False)
    walked: list[str] = []
    for segment in field_path:
        container, _ = unwrap_field_type(selection.node)
        if container.kind is not SchemaKind.OBJECT:
            raise FieldNotFoundError(segment, (), walked)
        if segment not in container.fields:
            raise FieldNotFoundError(segment, tuple(container.fields), walked)
        selection = FieldSelection(
            field_name=segment,
            node=container.fields[segment],
            required=segment in container.required,
        )
        walked.append(segment)
    return selection
