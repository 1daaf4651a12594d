"""Schema store backed by lazily fetched OpenAPI v3 group-version documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from kube_explain.resource_mapping.group_version import (
    GroupVersion,
    GroupVersionKind,
    GroupVersionResource,
)

from .legacy_schema_store import GROUP_VERSION_KIND_EXTENSION, index_group_version_kinds
from .schema_models import ResourceSchema, SchemaError, SchemaKind, SchemaNode, SchemaNotFoundError
from .schema_parsing import parse_definitions

logger = logging.getLogger(__name__)

_OPERATION_KEYS = ("get", "put", "post", "delete", "patch", "head", "options")


class OpenAPIV3Source(Protocol):
    """Discovery capability needed by the versioned store."""

    def openapi_v3_paths(self) -> Mapping[str, str]: ...

    def openapi_v3_schema(self, path: str) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class _GroupVersionDocument:
    """Parsed OpenAPI v3 document for one group/version."""

    definitions: Mapping[str, SchemaNode]
    definitions_by_kind: Mapping[GroupVersionKind, str]
    kinds_by_resource: Mapping[str, str]


class VersionedSchemaStore:
    """Resolves resource schemas inside the per-group-version OpenAPI v3 documents.

    The kind is read from the document's own REST paths, so a resource whose kind
    the kind mapper could not determine can still be documented. Fetched
    documents are cached for the lifetime of the store.
    """

    backend_name = "openapi-v3"

    def __init__(self, source: OpenAPIV3Source) -> None:
        self._source = source
        self._paths: Mapping[str, str] | None = None
        self._documents: dict[str, _GroupVersionDocument] = {}

    def lookup(self, resource: GroupVersionResource, kind: GroupVersionKind) -> ResourceSchema:
        """Return the schema for `resource`; `kind` is only a fallback hint.

        Raises:
          SchemaNotFoundError: If the group/version or resource is not served.
          SchemaError: If the fetched document is malformed.
        """
        path = openapi_v3_path(resource.group_version())
        if path not in self._group_version_paths():
            raise SchemaNotFoundError(f'couldn\'t find resource for "{resource}"')
        document = self._document(path)

        kind_name = document.kinds_by_resource.get(resource.resource) or kind.kind
        if not kind_name:
            raise SchemaNotFoundError(f'couldn\'t find resource for "{resource}"')
        resolved_kind = GroupVersionKind(
            group=resource.group, version=resource.version, kind=kind_name
        )
        definition_name = document.definitions_by_kind.get(resolved_kind)
        if definition_name is None:
            raise SchemaNotFoundError(f'couldn\'t find resource for "{resolved_kind}"')
        return ResourceSchema(
            group_version_kind=resolved_kind,
            definition_name=definition_name,
            root=SchemaNode(
                kind=SchemaKind.REFERENCE,
                reference=definition_name,
                registry=document.definitions,
            ),
        )

    def _group_version_paths(self) -> Mapping[str, str]:
        if self._paths is None:
            self._paths = self._source.openapi_v3_paths()
            logger.debug("fetched %d OpenAPI v3 group-version paths", len(self._paths))
        return self._paths

    def _document(self, path: str) -> _GroupVersionDocument:
        cached = self._documents.get(path)
        if cached is not None:
            logger.debug("using cached OpenAPI v3 document for %s", path)
            return cached
        raw = self._source.openapi_v3_schema(path)
        logger.debug("fetched OpenAPI v3 document for %s", path)
        document = _parse_document(raw, path)
        self._documents[path] = document
        return document


def openapi_v3_path(group_version: GroupVersion) -> str:
    """`api/v1` for the core group, `apis/<group>/<version>` otherwise."""
    if not group_version.group:
        return f"api/{group_version.version}"
    return f"apis/{group_version.group}/{group_version.version}"


def _parse_document(raw: Any, path: str) -> _GroupVersionDocument:
    if not isinstance(raw, Mapping):
        raise SchemaError(f"OpenAPI v3 document for {path} must be an object.")
    components = raw.get("components") or {}
    if not isinstance(components, Mapping):
        raise SchemaError(f"OpenAPI v3 document for {path} has malformed components.")
    raw_schemas = components.get("schemas") or {}
    return _GroupVersionDocument(
        definitions=parse_definitions(raw_schemas),
        definitions_by_kind=index_group_version_kinds(raw_schemas),
        kinds_by_resource=_index_resource_kinds(raw.get("paths") or {}, path),
    )


def _index_resource_kinds(raw_paths: Any, document_path: str) -> dict[str, str]:
    if not isinstance(raw_paths, Mapping):
        raise SchemaError(f"OpenAPI v3 document for {document_path} has malformed paths.")
    prefix_length = len(document_path.split("/"))
    kinds: dict[str, str] = {}
    for rest_path, path_item in raw_paths.items():
        resource = _resource_segment(str(rest_path).strip("/").split("/")[prefix_length:])
        if not resource or resource in kinds or not isinstance(path_item, Mapping):
            continue
        kind = _operation_kind(path_item)
        if kind:
            kinds[resource] = kind
    return kinds


def _resource_segment(segments: list[str]) -> str:
    if not segments or segments[0] == "watch":
        return ""
    if len(segments) >= 3 and segments[0] == "namespaces" and segments[1] == "{namespace}":
        segments = segments[2:]
    if len(segments) == 1 or (len(segments) == 2 and segments[1] == "{name}"):
        return segments[0]
    return ""


def _operation_kind(path_item: Mapping[str, Any]) -> str:
    for key in _OPERATION_KEYS:
        operation = path_item.get(key)
        if not isinstance(operation, Mapping):
            continue
        extension = operation.get(GROUP_VERSION_KIND_EXTENSION)
        if isinstance(extension, Mapping) and extension.get("kind"):
            return str(extension["kind"])
    return ""
