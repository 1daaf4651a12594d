"""Discovery resource list parsing tests."""

from __future__ import annotations

import pytest
from kube_explain.resource_mapping.api_resources import ResourceListError, load_api_resources


def test_load_api_resources_reads_discovery_lists_in_order() -> None:
    resources = load_api_resources(
        [
            {
                "groupVersion": "v1",
                "resources": [
                    {"name": "pods", "singularName": "pod", "kind": "Pod", "namespaced": True, "shortNames": ["po"]},
                    {"name": "pods/log", "kind": "Pod", "namespaced": True},
                ],
            },
            {
                "groupVersion": "apps/v1beta1",
                "preferred": False,
                "resources": [{"name": "Deployments", "kind": "Deployment", "namespaced": True}],
            },
        ]
    )

    assert [resource.resource for resource in resources] == ["pods", "deployments"]
    pods, deployments = resources
    assert pods.api_version == "v1"
    assert pods.short_names == ("po",)
    assert pods.preferred is True
    assert pods.names() == ("pods", "pod", "pod")
    assert deployments.api_version == "apps/v1beta1"
    assert deployments.singular == "deployment"
    assert deployments.preferred is False
    assert str(deployments.group_version_kind) == "apps/v1beta1, Kind=Deployment"


def test_load_api_resources_requires_group_version() -> None:
    with pytest.raises(ResourceListError, match="groupVersion"):
        load_api_resources([{"resources": []}])


def test_load_api_resources_rejects_malformed_group_version() -> None:
    with pytest.raises(ResourceListError, match="unexpected GroupVersion string"):
        load_api_resources([{"groupVersion": "a/b/c", "resources": []}])


def test_load_api_resources_requires_kind_for_each_resource() -> None:
    with pytest.raises(ResourceListError, match="requires a kind"):
        load_api_resources([{"groupVersion": "v1", "resources": [{"name": "pods"}]}])


def test_load_api_resources_rejects_scalar_short_names() -> None:
    with pytest.raises(ResourceListError, match="shortNames must be a list"):
        load_api_resources(
            [{"groupVersion": "v1", "resources": [{"name": "pods", "kind": "Pod", "shortNames": "po"}]}]
        )
