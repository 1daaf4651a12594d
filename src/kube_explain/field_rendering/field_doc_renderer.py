"""Plaintext documentation rendering for resource schemas."""

from __future__ import annotations

import textwrap
from collections.abc import Sequence
from dataclasses import dataclass

from kube_explain.schema_management.schema_models import (
    ResourceSchema,
    SchemaKind,
    SchemaNode,
    short_type_name,
)

from .field_lookup import lookup_field, unwrap_field_type

PLAINTEXT = "plaintext"
PLAINTEXT_OPENAPIV2 = "plaintext-openapiv2"
OUTPUT_FORMATS = (PLAINTEXT, PLAINTEXT_OPENAPIV2)

EMPTY_DESCRIPTION = "<empty>"
_WRAP_WIDTH = 80


class UnknownOutputFormatError(ValueError):
    """Raised for an output format name with no renderer."""


@dataclass(frozen=True)
class _Layout:
    """Indentation and labelling of one plaintext layout."""

    header_width: int
    field_indent: int
    description_indent: int
    named_types: bool
    show_group: bool
    show_enum: bool


_LAYOUTS = {
    PLAINTEXT: _Layout(
        header_width=12,
        field_indent=2,
        description_indent=4,
        named_types=True,
        show_group=True,
        show_enum=True,
    ),
    PLAINTEXT_OPENAPIV2: _Layout(
        header_width=10,
        field_indent=3,
        description_indent=5,
        named_types=False,
        show_group=False,
        show_enum=False,
    ),
}


def render_resource_documentation(
    resource: ResourceSchema,
    field_path: Sequence[str],
    *,
    recursive: bool = False,
    output_format: str = PLAINTEXT,
) -> str:
    """Render documentation of `resource` or of the field `field_path` points at.

    Without `recursive` the terminal node is described followed by the name and
    type of each direct field. With `recursive` every field at every depth is
    listed with its description; a type already open on the current descent
    path is printed as a `[recursive reference: Type]` marker instead of being
    expanded again.

    The full text is returned so callers only write complete documents.

    Raises:
      UnknownOutputFormatError: If `output_format` is not a known layout.
      FieldNotFoundError: If `field_path` leaves the schema.
    """
    layout = _LAYOUTS.get(output_format)
    if layout is None:
        raise UnknownOutputFormatError(
            f"unrecognized output format {output_format!r}; "
            f"expected one of: {', '.join(OUTPUT_FORMATS)}"
        )

    selection = lookup_field(resource.root, field_path)
    container, type_name = unwrap_field_type(selection.node)
    kind = resource.group_version_kind

    lines: list[str] = []
    if layout.show_group and kind.group:
        lines.append(_header(layout, "GROUP", kind.group))
    lines.append(_header(layout, "KIND", kind.kind))
    lines.append(_header(layout, "VERSION", kind.version))
    lines.append("")

    if field_path:
        signature = type_signature(selection.node, named=layout.named_types)
        if layout.named_types:
            label = "FIELD: "
        elif container.kind is SchemaKind.OBJECT:
            label = f"{'RESOURCE:':<{layout.header_width}}"
        else:
            label = f"{'FIELD:':<{layout.header_width}}"
        lines.append(f"{label}{selection.field_name} <{signature}>")
        lines.append("")

    description_indent = " " * layout.description_indent
    lines.append("DESCRIPTION:")
    lines.extend(_wrap(_terminal_description(selection.node, container), description_indent))

    if layout.show_enum and container.enum:
        lines.append("")
        lines.append("ENUM:")
        lines.extend(f"{description_indent}{value}" for value in container.enum)

    if container.kind is SchemaKind.OBJECT and container.fields:
        lines.append("")
        lines.append("FIELDS:")
        open_types = frozenset({type_name}) if type_name else frozenset()
        _render_fields(
            lines,
            container,
            layout=layout,
            depth=1,
            recursive=recursive,
            open_types=open_types,
        )

    return "\n".join(lines).rstrip("\n") + "\n"


def type_signature(node: SchemaNode, *, named: bool) -> str:
    """Type label shown between angle brackets, e.g. `[]Container` or `[]Object`."""
    if node.kind is SchemaKind.REFERENCE:
        if named:
            return short_type_name(node.reference)
        target = node.resolve()
        if target.kind is SchemaKind.OBJECT:
            return "Object"
        return type_signature(target, named=False)
    if node.kind is SchemaKind.ARRAY:
        return "[]" + _element_signature(node, named)
    if node.kind is SchemaKind.MAP:
        return "map[string]" + _element_signature(node, named)
    if node.kind is SchemaKind.PRIMITIVE and node.type_name:
        return node.type_name
    return "Object"


def _element_signature(node: SchemaNode, named: bool) -> str:
    if node.element is None:
        return "Object"
    return type_signature(node.element, named=named)


def _render_fields(
    lines: list[str],
    container: SchemaNode,
    *,
    layout: _Layout,
    depth: int,
    recursive: bool,
    open_types: frozenset[str],
) -> None:
    indent = " " * (layout.field_indent * depth)
    body_indent = indent + "  "
    for name, child in container.fields.items():
        suffix = " -required-" if name in container.required else ""
        signature = type_signature(child, named=layout.named_types)
        lines.append(f"{indent}{name}\t<{signature}>{suffix}")
        if not recursive:
            continue

        child_container, child_type = unwrap_field_type(child)
        if child_type and child_type in open_types:
            lines.append(f"{body_indent}[recursive reference: {short_type_name(child_type)}]")
            lines.append("")
            continue

        lines.extend(_wrap(_field_description(child, child_container), body_indent))
        if layout.show_enum and child_container.enum:
            values = ", ".join(str(value) for value in child_container.enum)
            lines.append(f"{body_indent}enum: {values}")
        lines.append("")
        if child_container.kind is SchemaKind.OBJECT and child_container.fields:
            _render_fields(
                lines,
                child_container,
                layout=layout,
                depth=depth + 1,
                recursive=recursive,
                open_types=(open_types | {child_type}) if child_type else open_types,
            )


def _terminal_description(node: SchemaNode, container: SchemaNode) -> str:
    parts = [node.description.strip()]
    if container is not node and container.description.strip() not in parts:
        parts.append(container.description.strip())
    text = "\n\n".join(part for part in parts if part)
    return text or EMPTY_DESCRIPTION


def _field_description(node: SchemaNode, container: SchemaNode) -> str:
    return node.description.strip() or container.description.strip() or EMPTY_DESCRIPTION


def _header(layout: _Layout, label: str, value: str) -> str:
    return f"{label + ':':<{layout.header_width}}{value}"


def _wrap(text: str, indent: str) -> list[str]:
    wrapped: list[str] = []
    for paragraph in text.splitlines():
        if not paragraph.strip():
            wrapped.append("")
            continue
        wrapped.extend(
            textwrap.wrap(
                paragraph,
                width=_WRAP_WIDTH,
                initial_indent=indent,
                subsequent_indent=indent,
                break_long_words=False,
                break_on_hyphens=False,
            )
        )
    return wrapped
