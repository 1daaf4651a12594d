"""Explain execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kube_explain.field_rendering.field_doc_renderer import PLAINTEXT
from kube_explain.resource_mapping.group_version import GroupVersionKind, GroupVersionResource


class ExplainStage(str, Enum):
    """Pipeline stage reached by one explain invocation."""

    UNRESOLVED = "unresolved"
    RESOURCE_RESOLVED = "resource_resolved"
    SCHEMA_FETCHED = "schema_fetched"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True)
class ExplainRequest:
    """Input contract for one explain invocation."""

    arguments: tuple[str, ...]
    api_version: str = ""
    recursive: bool = False
    output_format: str = PLAINTEXT


@dataclass(frozen=True)
class ResolvedRequest:
    """Resource identity and field path produced by resolution."""

    resource: GroupVersionResource
    kind: GroupVersionKind
    field_path: tuple[str, ...]


@dataclass(frozen=True)
class ExplainOutcome:
    """Output contract for one completed explain invocation."""

    text: str
    resolved: ResolvedRequest
    backend: str
    stage: ExplainStage
