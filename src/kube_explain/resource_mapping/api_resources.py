"""Discovered API resource entities."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .group_version import (
    GroupVersionKind,
    GroupVersionResource,
    MalformedVersionOverrideError,
    parse_group_version,
)


class ResourceListError(ValueError):
    """Raised when discovered resource lists are malformed."""


@dataclass(frozen=True)
class APIResource:  # pylint: disable=too-many-instance-attributes
    """One resource type served by the cluster under one group/version."""

    group: str
    version: str
    resource: str
    singular: str
    kind: str
    short_names: tuple[str, ...]
    namespaced: bool
    preferred: bool

    @property
    def group_version_resource(self) -> GroupVersionResource:
        return GroupVersionResource(group=self.group, version=self.version, resource=self.resource)

    @property
    def group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind(group=self.group, version=self.version, kind=self.kind)

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def names(self) -> tuple[str, ...]:
        """Full names this resource answers to: plural, singular and lower-cased kind."""
        return tuple(name for name in (self.resource, self.singular, self.kind.lower()) if name)


def load_api_resources(resource_lists: Iterable[Mapping[str, Any]]) -> list[APIResource]:
    """Convert discovery resource lists into ordered APIResource entries.

    Each list is a mapping with `groupVersion`, an optional `preferred` flag and
    `resources` entries using the discovery keys (`name`, `singularName`, `kind`,
    `namespaced`, `shortNames`). Subresources such as `pods/log` are skipped.
    """
    resources: list[APIResource] = []
    for resource_list in resource_lists:
        if not isinstance(resource_list, Mapping):
            raise ResourceListError("Resource list entries must be mappings.")
        group_version_text = resource_list.get("groupVersion")
        if not isinstance(group_version_text, str) or not group_version_text:
            raise ResourceListError("Resource list requires a groupVersion string.")
        try:
            group_version = parse_group_version(group_version_text)
        except MalformedVersionOverrideError as exc:
            raise ResourceListError(str(exc)) from exc
        preferred = bool(resource_list.get("preferred", True))
        entries = resource_list.get("resources") or []
        if not isinstance(entries, Sequence):
            raise ResourceListError(f"{group_version_text}: resources must be a list.")
        for entry in entries:
            resource = _parse_resource_entry(entry, group_version_text)
            if resource is None:
                continue
            resources.append(
                APIResource(
                    group=group_version.group,
                    version=group_version.version,
                    preferred=preferred,
                    **resource,
                )
            )
    return resources


def _parse_resource_entry(entry: Any, group_version_text: str) -> dict[str, Any] | None:
    if not isinstance(entry, Mapping):
        raise ResourceListError(f"{group_version_text}: resource entries must be mappings.")
    name = entry.get("name")
    kind = entry.get("kind")
    if not isinstance(name, str) or not name:
        raise ResourceListError(f"{group_version_text}: resource entry requires a name.")
    if "/" in name:
        return None
    if not isinstance(kind, str) or not kind:
        raise ResourceListError(f"{group_version_text}: resource {name} requires a kind.")
    singular = entry.get("singularName") or kind.lower()
    short_names = entry.get("shortNames") or ()
    if isinstance(short_names, str) or not isinstance(short_names, Sequence):
        raise ResourceListError(f"{group_version_text}: {name}.shortNames must be a list.")
    return {
        "resource": name.lower(),
        "singular": str(singular).lower(),
        "kind": kind,
        "short_names": tuple(str(short_name).lower() for short_name in short_names),
        "namespaced": bool(entry.get("namespaced", False)),
    }
