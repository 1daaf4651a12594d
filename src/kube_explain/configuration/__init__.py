"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import OPENAPI_V3_ENV_VAR, ConfigurationError, load_configuration
from .runtime_settings import ClusterSettings, Configuration, ExplainSettings, OfflineSettings

__all__ = [
    "ClusterSettings",
    "Configuration",
    "ExplainSettings",
    "OfflineSettings",
    "ConfigurationError",
    "OPENAPI_V3_ENV_VAR",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
