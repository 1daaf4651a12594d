"""Versioned OpenAPI v3 schema store tests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest
from kube_explain.resource_mapping import GroupVersion, GroupVersionKind, GroupVersionResource
from kube_explain.schema_management import (
    SchemaError,
    SchemaKind,
    SchemaNotFoundError,
    VersionedSchemaStore,
    openapi_v3_path,
)

EMPTY_KIND = GroupVersionKind(group="", version="", kind="")

WIDGET_DOCUMENT: dict[str, Any] = {
    "paths": {
        "/apis/example.com/v1/namespaces/{namespace}/widgets": {
            "get": {
                "x-kubernetes-group-version-kind": {
                    "group": "example.com",
                    "version": "v1",
                    "kind": "Widget",
                }
            }
        },
        "/apis/example.com/v1/watch/namespaces/{namespace}/widgets": {
            "get": {
                "x-kubernetes-group-version-kind": {
                    "group": "example.com",
                    "version": "v1",
                    "kind": "WatchEvent",
                }
            }
        },
        "/apis/example.com/v1/namespaces/{namespace}/widgets/{name}/status": {
            "get": {
                "x-kubernetes-group-version-kind": {
                    "group": "example.com",
                    "version": "v1",
                    "kind": "Status",
                }
            }
        },
    },
    "components": {
        "schemas": {
            "com.example.v1.Widget": {
                "description": "Widget is an example custom resource.",
                "type": "object",
                "properties": {
                    "spec": {
                        "allOf": [{"$ref": "#/components/schemas/com.example.v1.WidgetSpec"}],
                        "description": "Desired state.",
                    }
                },
                "x-kubernetes-group-version-kind": [
                    {"group": "example.com", "version": "v1", "kind": "Widget"}
                ],
            },
            "com.example.v1.WidgetSpec": {
                "type": "object",
                "properties": {"size": {"type": "integer"}},
            },
        }
    },
}


class _FakeOpenAPIV3Source:
    def __init__(self, documents: Mapping[str, Mapping[str, Any]]) -> None:
        self._documents = documents
        self.path_calls = 0
        self.fetched: list[str] = []

    def openapi_v3_paths(self) -> Mapping[str, str]:
        self.path_calls += 1
        return {path: f"/openapi/v3/{path}" for path in self._documents}

    def openapi_v3_schema(self, path: str) -> Mapping[str, Any]:
        self.fetched.append(path)
        return self._documents[path]


def _widgets(version: str = "v1") -> GroupVersionResource:
    return GroupVersionResource(group="example.com", version=version, resource="widgets")


def test_openapi_v3_path_separates_core_and_named_groups() -> None:
    assert openapi_v3_path(GroupVersion(group="", version="v1")) == "api/v1"
    assert openapi_v3_path(GroupVersion(group="apps", version="v1")) == "apis/apps/v1"


def test_lookup_reads_the_kind_from_document_paths() -> None:
    source = _FakeOpenAPIV3Source({"apis/example.com/v1": WIDGET_DOCUMENT})
    store = VersionedSchemaStore(source)

    schema = store.lookup(_widgets(), EMPTY_KIND)

    assert schema.group_version_kind == GroupVersionKind(
        group="example.com", version="v1", kind="Widget"
    )
    assert schema.definition_name == "com.example.v1.Widget"
    spec = schema.root.resolve().fields["spec"]
    assert spec.kind is SchemaKind.REFERENCE
    assert spec.resolve().fields["size"].type_name == "integer"


def test_lookup_caches_paths_and_documents() -> None:
    source = _FakeOpenAPIV3Source({"apis/example.com/v1": WIDGET_DOCUMENT})
    store = VersionedSchemaStore(source)

    store.lookup(_widgets(), EMPTY_KIND)
    store.lookup(_widgets(), EMPTY_KIND)

    assert source.path_calls == 1
    assert source.fetched == ["apis/example.com/v1"]


def test_lookup_falls_back_to_the_kind_hint() -> None:
    document = {"paths": {}, "components": WIDGET_DOCUMENT["components"]}
    store = VersionedSchemaStore(_FakeOpenAPIV3Source({"apis/example.com/v1": document}))

    schema = store.lookup(
        _widgets(), GroupVersionKind(group="example.com", version="v1", kind="Widget")
    )

    assert schema.definition_name == "com.example.v1.Widget"


def test_lookup_fails_for_unserved_group_version_without_fetching() -> None:
    source = _FakeOpenAPIV3Source({"apis/example.com/v1": WIDGET_DOCUMENT})
    store = VersionedSchemaStore(source)

    with pytest.raises(SchemaNotFoundError, match="example.com/v2, Resource=widgets"):
        store.lookup(_widgets("v2"), EMPTY_KIND)
    assert source.fetched == []


def test_lookup_fails_for_unknown_resource_in_served_group() -> None:
    store = VersionedSchemaStore(_FakeOpenAPIV3Source({"apis/example.com/v1": WIDGET_DOCUMENT}))

    with pytest.raises(SchemaNotFoundError):
        store.lookup(
            GroupVersionResource(group="example.com", version="v1", resource="gadgets"),
            EMPTY_KIND,
        )


def test_malformed_document_raises_schema_error() -> None:
    store = VersionedSchemaStore(
        _FakeOpenAPIV3Source({"apis/example.com/v1": {"paths": "bogus", "components": {}}})
    )

    with pytest.raises(SchemaError, match="malformed paths"):
        store.lookup(_widgets(), EMPTY_KIND)
