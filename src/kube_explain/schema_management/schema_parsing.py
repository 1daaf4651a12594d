"""Parsing of OpenAPI definitions into the shared schema node graph."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .schema_models import SchemaError, SchemaKind, SchemaNode

_REFERENCE_PREFIXES = ("#/definitions/", "#/components/schemas/")


def parse_definitions(definitions: Any) -> dict[str, SchemaNode]:
    """Parse named definitions into nodes sharing one reference registry.

    Args:
      definitions: `definitions` (OpenAPI v2) or `components.schemas` (OpenAPI v3)
        mapping of definition name to raw schema.

    Returns:
      Ordered mapping of definition name to parsed node. References between
      definitions, including recursive ones, resolve through this mapping.

    Raises:
      SchemaError: If the mapping or one of its schemas is malformed.
    """
    if not isinstance(definitions, Mapping):
        raise SchemaError("Schema definitions must be a mapping.")
    registry: dict[str, SchemaNode] = {}
    for name, raw in definitions.items():
        registry[str(name)] = parse_schema(raw, registry=registry, path=str(name))
    return registry


def parse_schema(raw: Any, *, registry: Mapping[str, SchemaNode], path: str) -> SchemaNode:
    """Parse one raw schema object; `path` names it in error messages."""
    if not isinstance(raw, Mapping):
        raise SchemaError(f"Schema at {path} must be an object.")

    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise SchemaError(f"Schema description at {path} must be a string.")

    reference = _reference_target(raw, path)
    if reference:
        return SchemaNode(
            kind=SchemaKind.REFERENCE,
            description=description,
            reference=reference,
            registry=registry,
        )

    node_types = _schema_types(raw)
    enum = tuple(raw["enum"]) if isinstance(raw.get("enum"), list) else ()

    if raw.get("x-kubernetes-int-or-string"):
        return SchemaNode(
            kind=SchemaKind.PRIMITIVE,
            description=description,
            type_name="string",
            type_format="int-or-string",
            enum=enum,
        )

    if "array" in node_types or "items" in raw:
        items = raw.get("items")
        element = (
            parse_schema(items, registry=registry, path=f"{path}[]")
            if items is not None
            else SchemaNode(kind=SchemaKind.PRIMITIVE)
        )
        return SchemaNode(kind=SchemaKind.ARRAY, description=description, element=element)

    properties = raw.get("properties")
    additional = raw.get("additionalProperties")
    if properties is not None:
        if not isinstance(properties, Mapping):
            raise SchemaError(f"Schema properties at {path} must be a mapping.")
        return SchemaNode(
            kind=SchemaKind.OBJECT,
            description=description,
            fields={
                str(name): parse_schema(child, registry=registry, path=f"{path}.{name}")
                for name, child in properties.items()
            },
            required=_required_fields(raw.get("required"), path),
        )
    if isinstance(additional, Mapping):
        return SchemaNode(
            kind=SchemaKind.MAP,
            description=description,
            element=parse_schema(additional, registry=registry, path=f"{path}{{}}"),
        )
    if "object" in node_types:
        return SchemaNode(kind=SchemaKind.OBJECT, description=description)

    return SchemaNode(
        kind=SchemaKind.PRIMITIVE,
        description=description,
        type_name=node_types[0] if node_types else "",
        type_format=str(raw.get("format") or ""),
        enum=enum,
    )


def _reference_target(raw: Mapping[str, Any], path: str) -> str:
    target = raw.get("$ref")
    if target is None:
        all_of = raw.get("allOf")
        if isinstance(all_of, Sequence) and len(all_of) == 1 and isinstance(all_of[0], Mapping):
            target = all_of[0].get("$ref")
    if target is None:
        return ""
    if not isinstance(target, str):
        raise SchemaError(f"Schema reference at {path} must be a string.")
    for prefix in _REFERENCE_PREFIXES:
        if target.startswith(prefix):
            return target[len(prefix) :]
    raise SchemaError(f"Unsupported schema reference at {path}: {target}")


def _schema_types(raw: Mapping[str, Any]) -> tuple[str, ...]:
    node_type = raw.get("type")
    if isinstance(node_type, list):
        return tuple(value for value in node_type if isinstance(value, str) and value != "null")
    if isinstance(node_type, str):
        return (node_type,)
    return ()


def _required_fields(value: Any, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise SchemaError(f"Schema required list at {path} must be a list of names.")
    return tuple(str(name) for name in value)
