"""Resource path splitting tests."""

from __future__ import annotations

import pytest
from kube_explain.path_resolution import (
    split_and_parse_resource_request,
    split_and_parse_resource_request_with_matching_prefix,
    split_dot_notation,
)
from kube_explain.resource_mapping import (
    GroupVersionResource,
    KindMapper,
    NoResourceMatchError,
    load_api_resources,
)


class _RecordingResolver:
    """Wraps a mapper and records every name it was asked to resolve."""

    def __init__(self, mapper: KindMapper) -> None:
        self._mapper = mapper
        self.requests: list[str] = []

    def resource_for(
        self, requested: GroupVersionResource, *, allow_ambiguous: bool = True
    ) -> GroupVersionResource:
        self.requests.append(str(requested.group_resource()))
        return self._mapper.resource_for(requested, allow_ambiguous=allow_ambiguous)


def _resolver() -> _RecordingResolver:
    return _RecordingResolver(
        KindMapper(
            load_api_resources(
                [
                    {
                        "groupVersion": "v1",
                        "resources": [
                            {"name": "pods", "singularName": "pod", "kind": "Pod", "shortNames": ["po"]},
                        ],
                    },
                    {
                        "groupVersion": "apps/v1",
                        "resources": [
                            {"name": "deployments", "singularName": "deployment", "kind": "Deployment"},
                        ],
                    },
                ]
            )
        )
    )


def _gvr(resource: str, group: str = "", version: str = "v1") -> GroupVersionResource:
    return GroupVersionResource(group=group, version=version, resource=resource)


def test_split_dot_notation_ignores_trailing_dot() -> None:
    assert split_dot_notation("pods.spec.") == ("pods", ("spec",))
    assert split_dot_notation("pods") == ("pods", ())


def test_matching_prefix_tries_longest_prefix_first() -> None:
    resolver = _resolver()

    resource, field_path = split_and_parse_resource_request_with_matching_prefix(
        "pods.spec.containers", resolver
    )

    assert resource == _gvr("pods")
    assert field_path == ("spec", "containers")
    assert resolver.requests == ["pods.spec.containers", "pods.spec", "pods"]


def test_matching_prefix_resolves_group_qualified_resources() -> None:
    resource, field_path = split_and_parse_resource_request_with_matching_prefix(
        "deployments.apps.spec.template", _resolver()
    )

    assert resource == _gvr("deployments", group="apps")
    assert field_path == ("spec", "template")


def test_matching_prefix_accepts_the_whole_string_as_resource() -> None:
    resource, field_path = split_and_parse_resource_request_with_matching_prefix(
        "deployments.apps", _resolver()
    )

    assert resource == _gvr("deployments", group="apps")
    assert field_path == ()


def test_matching_prefix_keeps_short_name_resolution() -> None:
    resource, field_path = split_and_parse_resource_request_with_matching_prefix("po.", _resolver())

    assert resource == _gvr("pods")
    assert field_path == ()


def test_matching_prefix_reports_the_leading_token_when_nothing_matches() -> None:
    with pytest.raises(NoResourceMatchError) as excinfo:
        split_and_parse_resource_request_with_matching_prefix("podz.spec", _resolver())

    assert excinfo.value.partial_resource.resource == "podz"
    assert excinfo.value.partial_resource.group == ""


def test_explicit_version_split_only_resolves_the_first_token() -> None:
    resolver = _resolver()

    resource, field_path = split_and_parse_resource_request("deployments.spec.replicas", resolver)

    assert resource == _gvr("deployments", group="apps")
    assert field_path == ("spec", "replicas")
    assert resolver.requests == ["deployments"]


def test_explicit_version_split_does_not_read_groups_from_the_identifier() -> None:
    resource, field_path = split_and_parse_resource_request("deployments.apps", _resolver())

    assert resource == _gvr("deployments", group="apps")
    assert field_path == ("apps",)
