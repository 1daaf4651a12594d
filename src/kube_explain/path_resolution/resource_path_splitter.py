"""Splitting of dotted `RESOURCE.FIELD...` identifiers."""

from __future__ import annotations

import logging
from typing import Protocol

from kube_explain.resource_mapping.group_version import (
    GroupVersionResource,
    parse_group_resource,
)
from kube_explain.resource_mapping.kind_mapper import ResourceMappingError

logger = logging.getLogger(__name__)


class ResourceResolver(Protocol):
    """Subset of the kind mapper needed to split identifiers."""

    def resource_for(
        self, requested: GroupVersionResource, *, allow_ambiguous: bool = True
    ) -> GroupVersionResource: ...


def split_dot_notation(raw: str) -> tuple[str, tuple[str, ...]]:
    """Split at every dot: the first token is the resource, the rest the field path."""
    parts = raw.removesuffix(".").split(".")
    return parts[0], tuple(parts[1:])


def split_and_parse_resource_request(
    raw: str, resolver: ResourceResolver
) -> tuple[GroupVersionResource, tuple[str, ...]]:
    """Resolve the first dot-token as a resource name and keep the rest as field path.

    Used when an explicit API version is supplied; no multi-prefix search is done.
    """
    resource, field_path = split_dot_notation(raw)
    resolved = resolver.resource_for(GroupVersionResource(group="", version="", resource=resource))
    return resolved, field_path


def split_and_parse_resource_request_with_matching_prefix(
    raw: str, resolver: ResourceResolver
) -> tuple[GroupVersionResource, tuple[str, ...]]:
    """Resolve the longest dotted prefix that names a resource, the rest being field path.

    The whole string is tried first and prefixes are parsed as `resource.group`,
    so `deployments.apps.spec` resolves to the apps group with field path
    `("spec",)`.

    Raises:
      ResourceMappingError: If no prefix resolves; the error for the leading
        token is propagated.
    """
    dot_parts = raw.removesuffix(".").split(".")

    last_error: ResourceMappingError | None = None
    for index in range(len(dot_parts), 0, -1):
        group_resource = parse_group_resource(".".join(dot_parts[:index]))
        try:
            resolved = resolver.resource_for(group_resource.with_version(""))
        except ResourceMappingError as exc:
            last_error = exc
            continue
        logger.debug("prefix %s resolved to %s", group_resource, resolved)
        return resolved, tuple(dot_parts[index:])

    assert last_error is not None
    raise last_error
