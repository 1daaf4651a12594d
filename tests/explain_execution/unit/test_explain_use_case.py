"""Tests for the explain use-case service."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
from kube_explain.cluster_discovery import OfflineBundleDiscoveryClient
from kube_explain.configuration import (
    ClusterSettings,
    Configuration,
    ExplainSettings,
    OfflineSettings,
)
from kube_explain.explain_execution import (
    ExplainRequest,
    ExplainStage,
    NoInputError,
    TooManyArgumentsError,
    execute_explain,
    execute_explain_for_configuration,
)
from kube_explain.field_rendering import (
    PLAINTEXT_OPENAPIV2,
    FieldNotFoundError,
    UnknownOutputFormatError,
)
from kube_explain.resource_mapping import (
    GroupVersionKind,
    GroupVersionResource,
    KindMapper,
    MalformedVersionOverrideError,
    NoResourceMatchError,
    load_api_resources,
)
from kube_explain.schema_management import (
    ResourceSchema,
    SchemaKind,
    SchemaNode,
    SchemaNotFoundError,
    parse_definitions,
)

BUNDLE_DIR = Path(__file__).resolve().parents[3] / "samples" / "offline-bundle"

RESOURCE_LISTS: list[dict[str, Any]] = [
    {
        "groupVersion": "v1",
        "resources": [
            {"name": "pods", "singularName": "pod", "kind": "Pod", "namespaced": True, "shortNames": ["po"]},
        ],
    },
    {
        "groupVersion": "apps/v1",
        "resources": [
            {"name": "deployments", "singularName": "deployment", "kind": "Deployment", "namespaced": True},
        ],
    },
]

DEFINITIONS: dict[str, Any] = {
    "Pod": {
        "description": "Pod is a collection of containers.",
        "type": "object",
        "properties": {"spec": {"$ref": "#/definitions/PodSpec"}},
    },
    "PodSpec": {
        "description": "PodSpec is a description of a pod.",
        "type": "object",
        "properties": {"hostname": {"type": "string"}},
    },
}


class _RecordingStore:
    """Schema store answering every lookup with the sample Pod schema."""

    def __init__(self, backend_name: str) -> None:
        self.backend_name = backend_name
        self.lookups: list[tuple[GroupVersionResource, GroupVersionKind]] = []

    def lookup(self, resource: GroupVersionResource, kind: GroupVersionKind) -> ResourceSchema:
        self.lookups.append((resource, kind))
        if kind.kind and kind.kind != "Pod":
            raise SchemaNotFoundError(f'couldn\'t find resource for "{kind}"')
        registry = parse_definitions(DEFINITIONS)
        return ResourceSchema(
            group_version_kind=GroupVersionKind(
                group=resource.group, version=resource.version, kind="Pod"
            ),
            definition_name="Pod",
            root=SchemaNode(kind=SchemaKind.REFERENCE, reference="Pod", registry=registry),
        )


class _StoreFactories:
    """Builds one recording store per backend and counts constructions."""

    def __init__(self) -> None:
        self.legacy = _RecordingStore("openapi-v2")
        self.versioned = _RecordingStore("openapi-v3")
        self.legacy_builds = 0
        self.versioned_builds = 0

    def build_legacy(self) -> _RecordingStore:
        self.legacy_builds += 1
        return self.legacy

    def build_versioned(self) -> _RecordingStore:
        self.versioned_builds += 1
        return self.versioned


def _mapper() -> KindMapper:
    return KindMapper(load_api_resources(RESOURCE_LISTS))


def _explain(request: ExplainRequest, factories: _StoreFactories, *, v3: bool, out=None):
    return execute_explain(
        request,
        mapper=_mapper(),
        enable_openapi_v3=v3,
        legacy_store_factory=factories.build_legacy,
        versioned_store_factory=factories.build_versioned,
        out=out,
    )


def test_versioned_backend_renders_and_writes_output() -> None:
    factories = _StoreFactories()
    out = io.StringIO()

    outcome = _explain(ExplainRequest(arguments=("pods.spec",)), factories, v3=True, out=out)

    assert outcome.stage is ExplainStage.RENDERED
    assert outcome.backend == "openapi-v3"
    assert outcome.resolved.field_path == ("spec",)
    assert outcome.resolved.resource == GroupVersionResource(group="", version="v1", resource="pods")
    assert out.getvalue() == outcome.text
    assert "FIELD: spec <PodSpec>" in outcome.text
    assert factories.legacy_builds == 0
    assert factories.versioned.lookups[0][1] == GroupVersionKind(group="", version="v1", kind="Pod")


def test_legacy_backend_uses_openapiv2_layout() -> None:
    factories = _StoreFactories()

    outcome = _explain(ExplainRequest(arguments=("po",)), factories, v3=False)

    assert outcome.backend == "openapi-v2"
    assert outcome.text.startswith("KIND:     Pod\nVERSION:  v1\n")
    assert "   spec\t<Object>" in outcome.text
    assert factories.versioned_builds == 0


def test_api_version_override_replaces_group_version_in_versioned_backend() -> None:
    factories = _StoreFactories()

    outcome = _explain(
        ExplainRequest(arguments=("pods",), api_version="v2"), factories, v3=True
    )

    resource, _ = factories.versioned.lookups[0]
    assert resource == GroupVersionResource(group="", version="v2", resource="pods")
    assert outcome.resolved.kind.version == "v2"


def test_api_version_override_replaces_group_version_of_legacy_kind() -> None:
    factories = _StoreFactories()

    _explain(ExplainRequest(arguments=("pods",), api_version="v2"), factories, v3=False)

    _, kind = factories.legacy.lookups[0]
    assert kind == GroupVersionKind(group="", version="v2", kind="Pod")


def test_malformed_api_version_fails_before_any_fetch() -> None:
    factories = _StoreFactories()

    with pytest.raises(MalformedVersionOverrideError):
        _explain(ExplainRequest(arguments=("pods",), api_version="a/b/c"), factories, v3=True)
    assert factories.versioned_builds == 0


def test_unknown_resource_fails_without_fetching_a_schema() -> None:
    factories = _StoreFactories()
    out = io.StringIO()

    with pytest.raises(NoResourceMatchError):
        _explain(ExplainRequest(arguments=("widgets",)), factories, v3=True, out=out)
    assert factories.versioned_builds == 0
    assert factories.legacy_builds == 0
    assert out.getvalue() == ""


def test_failed_render_writes_nothing() -> None:
    factories = _StoreFactories()
    out = io.StringIO()

    with pytest.raises(FieldNotFoundError):
        _explain(ExplainRequest(arguments=("pods.spec.bogus",)), factories, v3=True, out=out)
    assert out.getvalue() == ""


def test_schema_not_found_propagates() -> None:
    factories = _StoreFactories()

    with pytest.raises(SchemaNotFoundError):
        _explain(ExplainRequest(arguments=("deployments",)), factories, v3=False)


@pytest.mark.parametrize(
    ("arguments", "error"),
    [((), NoInputError), (("",), NoInputError), (("pods", "nodes"), TooManyArgumentsError)],
)
def test_argument_count_is_validated(arguments: tuple[str, ...], error: type[Exception]) -> None:
    with pytest.raises(error):
        _explain(ExplainRequest(arguments=arguments), _StoreFactories(), v3=True)


def test_unknown_output_format_fails_before_resolution() -> None:
    factories = _StoreFactories()

    with pytest.raises(UnknownOutputFormatError):
        _explain(ExplainRequest(arguments=("widgets",), output_format="yaml"), factories, v3=True)


def test_output_format_is_ignored_by_the_legacy_backend() -> None:
    outcome = _explain(
        ExplainRequest(arguments=("pods",), output_format="yaml"), _StoreFactories(), v3=False
    )

    assert outcome.text.startswith("KIND:     Pod")


def test_versioned_backend_honours_openapiv2_output_format() -> None:
    outcome = _explain(
        ExplainRequest(arguments=("pods",), output_format=PLAINTEXT_OPENAPIV2),
        _StoreFactories(),
        v3=True,
    )

    assert outcome.text.startswith("KIND:     Pod\nVERSION:  v1\n")


def _bundle_configuration(enable_openapi_v3: bool) -> Configuration:
    return Configuration(
        path=None,
        cluster=ClusterSettings(kubeconfig=None, context=None, request_timeout_seconds=30),
        explain=ExplainSettings(enable_openapi_v3=enable_openapi_v3, output_format="plaintext"),
        offline=OfflineSettings(bundle_dir=BUNDLE_DIR),
    )


@pytest.mark.parametrize("enable_openapi_v3", [True, False])
def test_offline_bundle_documents_deployment_template(enable_openapi_v3: bool) -> None:
    outcome = execute_explain_for_configuration(
        ExplainRequest(arguments=("deploy.spec.template",)),
        _bundle_configuration(enable_openapi_v3),
    )

    assert outcome.resolved.resource == GroupVersionResource(
        group="apps", version="v1", resource="deployments"
    )
    assert outcome.resolved.kind == GroupVersionKind(group="apps", version="v1", kind="Deployment")
    assert "Template describes the pods that will be created." in outcome.text


def test_explicit_discovery_client_is_used() -> None:
    outcome = execute_explain_for_configuration(
        ExplainRequest(arguments=("crd.spec",)),
        _bundle_configuration(True),
        discovery_client=OfflineBundleDiscoveryClient(BUNDLE_DIR),
    )

    assert outcome.resolved.kind.kind == "CustomResourceDefinition"
