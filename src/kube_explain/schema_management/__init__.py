"""Schema management exports."""

from .legacy_schema_store import LegacySchemaStore
from .schema_models import (
    ResourceSchema,
    SchemaError,
    SchemaKind,
    SchemaNode,
    SchemaNotFoundError,
    short_type_name,
)
from .schema_parsing import parse_definitions, parse_schema
from .schema_store import SchemaStore
from .versioned_schema_store import VersionedSchemaStore, openapi_v3_path

__all__ = [
    "LegacySchemaStore",
    "ResourceSchema",
    "SchemaError",
    "SchemaKind",
    "SchemaNode",
    "SchemaNotFoundError",
    "SchemaStore",
    "VersionedSchemaStore",
    "openapi_v3_path",
    "parse_definitions",
    "parse_schema",
    "short_type_name",
]
