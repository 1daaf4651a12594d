"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from kube_explain.field_rendering.field_doc_renderer import OUTPUT_FORMATS, PLAINTEXT

from .runtime_settings import ClusterSettings, Configuration, ExplainSettings, OfflineSettings

OPENAPI_V3_ENV_VAR = "KUBE_EXPLAIN_OPENAPIV3"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Configuration:
    """Load and validate the configuration file.

    Args:
      config_path: YAML or JSON configuration file. Defaults apply when omitted.
      environ: Environment used for the `KUBE_EXPLAIN_OPENAPIV3` toggle;
        defaults to `os.environ`.
    """
    environment = os.environ if environ is None else environ
    if config_path is None:
        path = None
        parsed: Any = {}
        base_path = Path.cwd()
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        text = path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(text)
        except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
            raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc
        base_path = path.parent

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    cluster = _parse_cluster_section(parsed.get("cluster"), base_path)
    explain = _parse_explain_section(parsed.get("explain"), environment)
    offline = _parse_offline_section(parsed.get("offline"), base_path)

    return Configuration(path=path, cluster=cluster, explain=explain, offline=offline)


def _parse_cluster_section(value: Any, base_path: Path) -> ClusterSettings:
    section = _optional_mapping(value, "cluster")
    kubeconfig = _optional_string(section.get("kubeconfig"), "cluster.kubeconfig")
    context = _optional_string(section.get("context"), "cluster.context")
    timeout_seconds = _require_positive_int(
        section.get("request_timeout_seconds", 30), "cluster.request_timeout_seconds"
    )
    return ClusterSettings(
        kubeconfig=_resolve_path(base_path, kubeconfig) if kubeconfig else None,
        context=context,
        request_timeout_seconds=timeout_seconds,
    )


def _parse_explain_section(value: Any, environment: Mapping[str, str]) -> ExplainSettings:
    section = _optional_mapping(value, "explain")
    enable_openapi_v3 = _require_bool(
        section.get("enable_openapi_v3", True), "explain.enable_openapi_v3"
    )
    toggle = environment.get(OPENAPI_V3_ENV_VAR)
    if toggle is not None and toggle.strip():
        enable_openapi_v3 = _parse_bool_text(toggle, OPENAPI_V3_ENV_VAR)
    output_format = _require_non_empty_string(
        section.get("output_format", PLAINTEXT), "explain.output_format"
    ).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"explain.output_format must be one of: {', '.join(OUTPUT_FORMATS)}."
        )
    return ExplainSettings(enable_openapi_v3=enable_openapi_v3, output_format=output_format)


def _parse_offline_section(value: Any, base_path: Path) -> OfflineSettings:
    section = _optional_mapping(value, "offline")
    bundle_dir = _optional_string(section.get("bundle_dir"), "offline.bundle_dir")
    if bundle_dir is None:
        return OfflineSettings(bundle_dir=None)
    resolved = _resolve_path(base_path, bundle_dir)
    if not resolved.is_dir():
        raise ConfigurationError(f"Offline bundle directory not found: {resolved}")
    return OfflineSettings(bundle_dir=resolved)


def _parse_bool_text(value: str, field_name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{field_name} must be true or false, got {value!r}.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool_text(value, field_name)
    raise ConfigurationError(f"{field_name} must be a boolean.")


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
