"""Explain use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TextIO

from kube_explain.cluster_discovery import DiscoveryClient, create_discovery_client
from kube_explain.configuration.runtime_settings import Configuration
from kube_explain.field_rendering.field_doc_renderer import (
    OUTPUT_FORMATS,
    PLAINTEXT_OPENAPIV2,
    UnknownOutputFormatError,
    render_resource_documentation,
)
from kube_explain.path_resolution import (
    split_and_parse_resource_request,
    split_and_parse_resource_request_with_matching_prefix,
)
from kube_explain.resource_mapping import (
    GroupVersion,
    GroupVersionKind,
    GroupVersionResource,
    KindMapper,
    ResourceMappingError,
    build_kind_mapper,
    parse_group_version,
)
from kube_explain.schema_management import LegacySchemaStore, SchemaStore, VersionedSchemaStore

from .explain_contracts import ExplainOutcome, ExplainRequest, ExplainStage, ResolvedRequest

logger = logging.getLogger(__name__)

API_RESOURCES_HINT = 'Use "kube-explain api-resources" for a complete list of supported resources.'

SchemaStoreFactory = Callable[[], SchemaStore]

_EMPTY_KIND = GroupVersionKind(group="", version="", kind="")


class NoInputError(Exception):
    """Raised when no resource identifier was given."""


class TooManyArgumentsError(Exception):
    """Raised when more than one resource identifier was given."""


class _StageTracker:
    """Records the pipeline stage reached so far."""

    def __init__(self) -> None:
        self.stage = ExplainStage.UNRESOLVED

    def advance(self, stage: ExplainStage) -> None:
        logger.debug("explain stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage


def execute_explain(
    request: ExplainRequest,
    *,
    mapper: KindMapper,
    enable_openapi_v3: bool,
    legacy_store_factory: SchemaStoreFactory,
    versioned_store_factory: SchemaStoreFactory,
    out: TextIO | None = None,
) -> ExplainOutcome:
    """Resolve, fetch and render documentation for one resource identifier.

    Exactly one schema backend is built per call: the versioned OpenAPI v3 store
    when `enable_openapi_v3` is set, the legacy OpenAPI v2 store otherwise.
    Errors from any stage propagate unchanged and nothing is written to `out`
    unless the whole document rendered.
    """
    tracker = _StageTracker()
    try:
        outcome = _run_explain(
            request,
            tracker=tracker,
            mapper=mapper,
            enable_openapi_v3=enable_openapi_v3,
            legacy_store_factory=legacy_store_factory,
            versioned_store_factory=versioned_store_factory,
        )
    except Exception:
        logger.debug("explain failed during stage %s", tracker.stage.value)
        tracker.advance(ExplainStage.FAILED)
        raise
    if out is not None:
        out.write(outcome.text)
    return outcome


def execute_explain_for_configuration(
    request: ExplainRequest,
    configuration: Configuration,
    *,
    discovery_client: DiscoveryClient | None = None,
    out: TextIO | None = None,
) -> ExplainOutcome:
    """Wire discovery, kind mapping and schema backends from `configuration` and explain."""
    client = discovery_client or create_discovery_client(configuration)
    mapper = build_kind_mapper(client)
    return execute_explain(
        request,
        mapper=mapper,
        enable_openapi_v3=configuration.explain.enable_openapi_v3,
        legacy_store_factory=lambda: LegacySchemaStore.from_document(client.openapi_v2_schema()),
        versioned_store_factory=lambda: VersionedSchemaStore(client),
        out=out,
    )


def _run_explain(
    request: ExplainRequest,
    *,
    tracker: _StageTracker,
    mapper: KindMapper,
    enable_openapi_v3: bool,
    legacy_store_factory: SchemaStoreFactory,
    versioned_store_factory: SchemaStoreFactory,
) -> ExplainOutcome:
    identifier = _validate_arguments(request.arguments)
    if enable_openapi_v3 and request.output_format not in OUTPUT_FORMATS:
        raise UnknownOutputFormatError(
            f"unrecognized output format {request.output_format!r}; "
            f"expected one of: {', '.join(OUTPUT_FORMATS)}"
        )

    override: GroupVersion | None = None
    if request.api_version:
        resource, field_path = split_and_parse_resource_request(identifier, mapper)
        override = parse_group_version(request.api_version)
    else:
        resource, field_path = split_and_parse_resource_request_with_matching_prefix(
            identifier, mapper
        )

    if enable_openapi_v3:
        if override is not None:
            resource = override.with_resource(resource.resource)
        kind = _kind_hint(mapper, resource)
        store = versioned_store_factory()
        output_format = request.output_format
    else:
        kind = _legacy_kind(mapper, resource)
        if override is not None:
            kind = override.with_kind(kind.kind)
        store = legacy_store_factory()
        output_format = PLAINTEXT_OPENAPIV2
    tracker.advance(ExplainStage.RESOURCE_RESOLVED)
    logger.debug("using %s schema backend for %s", store.backend_name, resource)

    schema = store.lookup(resource, kind)
    tracker.advance(ExplainStage.SCHEMA_FETCHED)

    text = render_resource_documentation(
        schema,
        field_path,
        recursive=request.recursive,
        output_format=output_format,
    )
    tracker.advance(ExplainStage.RENDERED)
    return ExplainOutcome(
        text=text,
        resolved=ResolvedRequest(
            resource=resource,
            kind=schema.group_version_kind,
            field_path=field_path,
        ),
        backend=store.backend_name,
        stage=tracker.stage,
    )


def _validate_arguments(arguments: Sequence[str]) -> str:
    if not arguments or not arguments[0].strip():
        raise NoInputError(f"You must specify the type of resource to explain. {API_RESOURCES_HINT}")
    if len(arguments) > 1:
        raise TooManyArgumentsError("We accept only this format: explain RESOURCE")
    return arguments[0].strip()


def _kind_hint(mapper: KindMapper, resource: GroupVersionResource) -> GroupVersionKind:
    try:
        return mapper.kind_for(resource)
    except ResourceMappingError:
        return _EMPTY_KIND


def _legacy_kind(mapper: KindMapper, resource: GroupVersionResource) -> GroupVersionKind:
    kind = _kind_hint(mapper, resource)
    if kind.empty():
        kind = mapper.kind_for(resource.group_resource().with_version(""))
    return kind
