"""API group, version, kind and resource identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

_VERSION_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_GROUP_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")


class MalformedVersionOverrideError(ValueError):
    """Raised when an explicit API version string is not a valid group/version."""


@dataclass(frozen=True)
class GroupVersion:
    """API group and version pair. The core group is the empty string."""

    group: str
    version: str

    def empty(self) -> bool:
        return not self.group and not self.version

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(group=self.group, version=self.version, kind=kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(group=self.group, version=self.version, resource=resource)

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


@dataclass(frozen=True)
class GroupResource:
    """Resource name qualified by its API group."""

    group: str
    resource: str

    def with_version(self, version: str) -> GroupVersionResource:
        return GroupVersionResource(group=self.group, version=version, resource=self.resource)

    def __str__(self) -> str:
        if self.group:
            return f"{self.resource}.{self.group}"
        return self.resource


@dataclass(frozen=True)
class GroupVersionKind:
    """Versioned type identity of a resource schema."""

    group: str
    version: str
    kind: str

    def empty(self) -> bool:
        return not self.group and not self.version and not self.kind

    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)

    def __str__(self) -> str:
        return f"{self.group_version()}, Kind={self.kind}"


@dataclass(frozen=True)
class GroupVersionResource:
    """Versioned resource identity as typed by users (e.g. `pods`)."""

    group: str
    version: str
    resource: str

    def empty(self) -> bool:
        return not self.group and not self.version and not self.resource

    def group_resource(self) -> GroupResource:
        return GroupResource(group=self.group, resource=self.resource)

    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)

    def __str__(self) -> str:
        return f"{self.group_version()}, Resource={self.resource}"


def parse_group_version(text: str) -> GroupVersion:
    """Parse `[GROUP/]VERSION` into a GroupVersion.

    Args:
      text: Version token such as `v1` or `apps/v1`.

    Returns:
      The parsed group/version pair. An empty string or `/` yields an empty pair.

    Raises:
      MalformedVersionOverrideError: If the token has more than one `/` or
        either part is not a valid lowercase DNS-style name.
    """
    if not text or text == "/":
        return GroupVersion(group="", version="")
    if text.count("/") > 1:
        raise MalformedVersionOverrideError(f"unexpected GroupVersion string: {text}")
    group, _, version = text.rpartition("/")
    if not _VERSION_PATTERN.match(version):
        raise MalformedVersionOverrideError(f"unexpected GroupVersion string: {text}")
    if group and not _GROUP_PATTERN.match(group):
        raise MalformedVersionOverrideError(f"unexpected GroupVersion string: {text}")
    return GroupVersion(group=group, version=version)


def parse_group_resource(text: str) -> GroupResource:
    """Split `resource.group.example` at the first dot."""
    resource, _, group = text.partition(".")
    return GroupResource(group=group, resource=resource)
