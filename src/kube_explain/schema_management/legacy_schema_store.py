"""Schema store backed by a pre-fetched OpenAPI v2 document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from kube_explain.resource_mapping.group_version import GroupVersionKind, GroupVersionResource

from .schema_models import ResourceSchema, SchemaError, SchemaKind, SchemaNode, SchemaNotFoundError
from .schema_parsing import parse_definitions

logger = logging.getLogger(__name__)

GROUP_VERSION_KIND_EXTENSION = "x-kubernetes-group-version-kind"


class LegacySchemaStore:
    """Read-only index of OpenAPI v2 definitions keyed by group/version/kind.

    The store is populated once and never mutated afterwards, so one instance
    can serve concurrent lookups.
    """

    backend_name = "openapi-v2"

    def __init__(
        self,
        definitions: Mapping[str, SchemaNode],
        definitions_by_kind: Mapping[GroupVersionKind, str],
    ) -> None:
        self._definitions = dict(definitions)
        self._definitions_by_kind = dict(definitions_by_kind)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> LegacySchemaStore:
        """Parse an OpenAPI v2 document and index its definitions.

        Raises:
          SchemaError: If the document has no usable `definitions` section.
        """
        if not isinstance(document, Mapping):
            raise SchemaError("OpenAPI v2 document must be an object.")
        raw_definitions = document.get("definitions")
        if raw_definitions is None:
            raise SchemaError("OpenAPI v2 document has no definitions.")
        definitions = parse_definitions(raw_definitions)
        definitions_by_kind = index_group_version_kinds(raw_definitions)
        logger.debug(
            "indexed %d OpenAPI v2 definitions (%d resource kinds)",
            len(definitions),
            len(definitions_by_kind),
        )
        return cls(definitions, definitions_by_kind)

    def lookup_resource(self, kind: GroupVersionKind) -> ResourceSchema | None:
        """Return the schema registered for `kind`, or None if the document lacks it."""
        definition_name = self._definitions_by_kind.get(kind)
        if definition_name is None:
            return None
        return ResourceSchema(
            group_version_kind=kind,
            definition_name=definition_name,
            root=SchemaNode(
                kind=SchemaKind.REFERENCE,
                reference=definition_name,
                registry=self._definitions,
            ),
        )

    def lookup(self, resource: GroupVersionResource, kind: GroupVersionKind) -> ResourceSchema:
        """Store contract: resolve by kind only; `resource` is unused by this backend."""
        del resource
        schema = self.lookup_resource(kind)
        if schema is None:
            raise SchemaNotFoundError(f'couldn\'t find resource for "{kind}"')
        return schema


def index_group_version_kinds(raw_definitions: Mapping[str, Any]) -> dict[GroupVersionKind, str]:
    """Map every `x-kubernetes-group-version-kind` entry to its definition name."""
    index: dict[GroupVersionKind, str] = {}
    for name, raw in raw_definitions.items():
        if not isinstance(raw, Mapping):
            continue
        for entry in raw.get(GROUP_VERSION_KIND_EXTENSION) or ():
            if not isinstance(entry, Mapping):
                continue
            kind = GroupVersionKind(
                group=str(entry.get("group") or ""),
                version=str(entry.get("version") or ""),
                kind=str(entry.get("kind") or ""),
            )
            index.setdefault(kind, str(name))
    return index
