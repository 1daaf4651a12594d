"""Lookup contract shared by the schema backends."""

from __future__ import annotations

from typing import Protocol

from kube_explain.resource_mapping.group_version import GroupVersionKind, GroupVersionResource

from .schema_models import ResourceSchema


class SchemaStore(Protocol):
    """One schema backend, selected once per explain invocation."""

    backend_name: str

    def lookup(self, resource: GroupVersionResource, kind: GroupVersionKind) -> ResourceSchema:
        """Return the schema of the resource or raise SchemaNotFoundError."""
        ...
