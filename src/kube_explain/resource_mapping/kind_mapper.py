"""Resource name to kind resolution over discovered API resources."""

from __future__ import annotations

import difflib
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .api_resources import APIResource, load_api_resources
from .group_version import (
    GroupResource,
    GroupVersionKind,
    GroupVersionResource,
    parse_group_resource,
    parse_group_version,
)

logger = logging.getLogger(__name__)

_MAX_SUGGESTIONS = 5


class ResourceListSource(Protocol):
    """Anything able to list discovered API resources."""

    def api_resource_lists(self) -> list[Mapping[str, Any]]: ...


class ResourceMappingError(Exception):
    """Raised when a resource name cannot be mapped to a single API resource."""


class NoResourceMatchError(ResourceMappingError):
    """Raised when no known resource matches the requested name."""

    def __init__(self, partial_resource: GroupVersionResource, suggestions: Sequence[str] = ()):
        self.partial_resource = partial_resource
        self.suggestions = tuple(suggestions)
        message = f"the server doesn't have a resource type \"{_display_name(partial_resource)}\""
        if self.suggestions:
            message += f" (did you mean {', '.join(self.suggestions)}?)"
        super().__init__(message)


class AmbiguousResourceError(ResourceMappingError):
    """Raised when a name matches resources of more than one group."""

    def __init__(
        self,
        partial_resource: GroupVersionResource,
        matching_resources: Sequence[GroupVersionResource],
    ):
        self.partial_resource = partial_resource
        self.matching_resources = tuple(matching_resources)
        matches = ", ".join(str(match) for match in self.matching_resources)
        super().__init__(
            f"{_display_name(partial_resource)} matches multiple resources [{matches}]"
        )


class KindMapper:
    """Maps user-typed resource names onto canonical resources and kinds.

    Matching precedence for a requested name:

    1. full names (plural, singular or lower-cased kind) within the requested group,
    2. short names (`po` -> `pods`),
    3. short names under a group prefix (`hpa.autoscal` -> `horizontalpodautoscalers.autoscaling`).

    Matches are ordered by discovery group order and, within a group, preferred
    versions first.
    """

    def __init__(self, resources: Sequence[APIResource]) -> None:
        self._resources = tuple(resources)
        self._group_priority: dict[str, int] = {}
        for resource in self._resources:
            self._group_priority.setdefault(resource.group, len(self._group_priority))

    @property
    def api_resources(self) -> tuple[APIResource, ...]:
        return self._resources

    def known_resource_names(self) -> tuple[str, ...]:
        """Distinct plural resource names in discovery order."""
        names: dict[str, None] = {}
        for resource in self._resources:
            names.setdefault(resource.resource, None)
        return tuple(names)

    def resources_for(self, requested: GroupVersionResource) -> list[GroupVersionResource]:
        """Return every resource matching `requested`, best match first."""
        return [resource.group_version_resource for resource in self._matching_entries(requested)]

    def resource_for(
        self, requested: GroupVersionResource, *, allow_ambiguous: bool = True
    ) -> GroupVersionResource:
        """Return the single best resource for `requested`.

        Raises:
          NoResourceMatchError: If nothing matches.
          AmbiguousResourceError: If `allow_ambiguous` is false and matches span
            more than one group/resource.
        """
        entries = self._matching_entries(requested)
        if not entries:
            raise NoResourceMatchError(requested, self._suggest(requested.resource))
        distinct = {entry.group_version_resource.group_resource() for entry in entries}
        if len(distinct) > 1 and not allow_ambiguous:
            raise AmbiguousResourceError(
                requested, [entry.group_version_resource for entry in entries]
            )
        chosen = entries[0].group_version_resource
        logger.debug("resolved resource %s to %s", _display_name(requested), chosen)
        return chosen

    def kind_for(self, requested: GroupVersionResource) -> GroupVersionKind:
        """Return the kind served for `requested`. An empty version selects the preferred one."""
        entries = self._matching_entries(requested)
        if not entries:
            raise NoResourceMatchError(requested, self._suggest(requested.resource))
        return entries[0].group_version_kind

    def resolve(self, name: str) -> GroupVersionKind:
        """Resolve a possibly group-qualified name (`deployments.apps`) to its kind."""
        group_resource = parse_group_resource(name)
        resource = self.resource_for(group_resource.with_version(""))
        return self.kind_for(resource)

    def resolve_with_version(self, name: str, version: str) -> GroupVersionKind:
        """Resolve `name` under an explicit `[GROUP/]VERSION` token."""
        group_version = parse_group_version(version)
        group_resource = parse_group_resource(name)
        group = group_version.group or group_resource.group
        return self.kind_for(
            GroupVersionResource(
                group=group, version=group_version.version, resource=group_resource.resource
            )
        )

    def _matching_entries(self, requested: GroupVersionResource) -> list[APIResource]:
        expanded = self._expand(
            GroupResource(group=requested.group.lower(), resource=requested.resource.lower())
        )
        matches = [
            resource
            for resource in self._resources
            if expanded.resource in resource.names()
            and (not expanded.group or resource.group == expanded.group)
            and (not requested.version or resource.version == requested.version)
        ]
        matches.sort(key=self._priority)
        unique: dict[GroupVersionResource, APIResource] = {}
        for match in matches:
            unique.setdefault(match.group_version_resource, match)
        return list(unique.values())

    def _expand(self, requested: GroupResource) -> GroupResource:
        for resource in self._resources:
            if requested.group and resource.group != requested.group:
                continue
            if requested.resource in resource.names():
                return requested
        for resource in self._resources:
            if requested.group and resource.group != requested.group:
                continue
            if requested.resource in resource.short_names:
                return GroupResource(group=resource.group, resource=resource.resource)
        if not requested.group:
            return requested
        for resource in self._resources:
            if not resource.group.startswith(requested.group):
                continue
            if requested.resource in resource.short_names:
                return GroupResource(group=resource.group, resource=resource.resource)
        return requested

    def _priority(self, resource: APIResource) -> tuple[int, int]:
        return (self._group_priority[resource.group], 0 if resource.preferred else 1)

    def _suggest(self, name: str) -> list[str]:
        return difflib.get_close_matches(
            name.lower(), self.known_resource_names(), n=_MAX_SUGGESTIONS
        )


def build_kind_mapper(source: ResourceListSource) -> KindMapper:
    """Build a KindMapper from the resource lists served by `source`."""
    resources = load_api_resources(source.api_resource_lists())
    logger.debug("loaded %d API resources", len(resources))
    return KindMapper(resources)


def _display_name(resource: GroupVersionResource) -> str:
    return str(resource.group_resource())
