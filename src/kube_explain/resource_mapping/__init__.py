"""Resource mapping exports."""

from .api_resources import APIResource, ResourceListError, load_api_resources
from .group_version import (
    GroupResource,
    GroupVersion,
    GroupVersionKind,
    GroupVersionResource,
    MalformedVersionOverrideError,
    parse_group_resource,
    parse_group_version,
)
from .kind_mapper import (
    AmbiguousResourceError,
    KindMapper,
    NoResourceMatchError,
    ResourceMappingError,
    build_kind_mapper,
)

__all__ = [
    "APIResource",
    "AmbiguousResourceError",
    "GroupResource",
    "GroupVersion",
    "GroupVersionKind",
    "GroupVersionResource",
    "KindMapper",
    "MalformedVersionOverrideError",
    "NoResourceMatchError",
    "ResourceListError",
    "ResourceMappingError",
    "build_kind_mapper",
    "load_api_resources",
    "parse_group_resource",
    "parse_group_version",
]
