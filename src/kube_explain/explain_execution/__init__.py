"""Explain execution domain exports."""

from .explain_contracts import ExplainOutcome, ExplainRequest, ExplainStage, ResolvedRequest
from .explain_use_case import (
    API_RESOURCES_HINT,
    NoInputError,
    TooManyArgumentsError,
    execute_explain,
    execute_explain_for_configuration,
)

__all__ = [
    "API_RESOURCES_HINT",
    "ExplainOutcome",
    "ExplainRequest",
    "ExplainStage",
    "NoInputError",
    "ResolvedRequest",
    "TooManyArgumentsError",
    "execute_explain",
    "execute_explain_for_configuration",
]
