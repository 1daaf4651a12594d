"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ClusterSettings:
    """Kubernetes API connectivity configuration."""

    kubeconfig: Path | None
    context: str | None
    request_timeout_seconds: int


@dataclass(frozen=True)
class ExplainSettings:
    """Schema backend selection and rendering defaults."""

    enable_openapi_v3: bool
    output_format: str


@dataclass(frozen=True)
class OfflineSettings:
    """Offline bundle used instead of a live cluster when set."""

    bundle_dir: Path | None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None
    cluster: ClusterSettings
    explain: ExplainSettings
    offline: OfflineSettings
