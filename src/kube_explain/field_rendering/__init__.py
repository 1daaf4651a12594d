"""Field rendering exports."""

from .field_doc_renderer import (
    OUTPUT_FORMATS,
    PLAINTEXT,
    PLAINTEXT_OPENAPIV2,
    UnknownOutputFormatError,
    render_resource_documentation,
    type_signature,
)
from .field_lookup import FieldNotFoundError, FieldSelection, lookup_field, unwrap_field_type

__all__ = [
    "FieldNotFoundError",
    "FieldSelection",
    "OUTPUT_FORMATS",
    "PLAINTEXT",
    "PLAINTEXT_OPENAPIV2",
    "UnknownOutputFormatError",
    "lookup_field",
    "render_resource_documentation",
    "type_signature",
    "unwrap_field_type",
]
