"""Schema management entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kube_explain.resource_mapping.group_version import GroupVersionKind


class SchemaError(Exception):
    """Raised for schema parsing or reference resolution failures."""


class SchemaNotFoundError(Exception):
    """Raised when the active schema backend does not expose the requested resource."""


class SchemaKind(str, Enum):
    """Structural kind of a schema node."""

    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"
    PRIMITIVE = "primitive"
    REFERENCE = "reference"


@dataclass(eq=False)
class SchemaNode:  # pylint: disable=too-many-instance-attributes
    """Structural description of one type.

    Object nodes own an ordered `fields` mapping. Array and map nodes describe
    their items or values through `element`. Reference nodes name a shared
    definition and resolve it lazily through `registry`, which is how
    self-referential definitions are represented.
    """

    kind: SchemaKind
    description: str = ""
    type_name: str = ""
    type_format: str = ""
    fields: dict[str, SchemaNode] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    element: SchemaNode | None = None
    enum: tuple[Any, ...] = ()
    reference: str = ""
    registry: Mapping[str, SchemaNode] | None = field(default=None, repr=False)

    def resolve(self) -> SchemaNode:
        """Follow reference chains to the first non-reference node."""
        node = self
        seen: set[str] = set()
        while node.kind is SchemaKind.REFERENCE:
            if node.reference in seen:
                raise SchemaError(f"Reference cycle without structure: {node.reference}")
            seen.add(node.reference)
            if node.registry is None or node.reference not in node.registry:
                raise SchemaError(f"Unresolvable schema reference: {node.reference}")
            node = node.registry[node.reference]
        return node

    @property
    def definition_name(self) -> str:
        """Name of the first referenced definition, or empty for inline types."""
        return self.reference if self.kind is SchemaKind.REFERENCE else ""


@dataclass(frozen=True)
class ResourceSchema:
    """Schema of one resource type as answered by a schema store."""

    group_version_kind: GroupVersionKind
    definition_name: str
    root: SchemaNode


def short_type_name(definition_name: str) -> str:
    """`io.k8s.api.core.v1.Container` -> `Container`."""
    return definition_name.rsplit(".", 1)[-1]
