"""Cluster discovery exports."""

from .client_factory import create_discovery_client
from .discovery_client import DiscoveryClient, DiscoveryFetchError
from .kubernetes_discovery import KubernetesDiscoveryClient
from .offline_bundle import OfflineBundleDiscoveryClient

__all__ = [
    "DiscoveryClient",
    "DiscoveryFetchError",
    "KubernetesDiscoveryClient",
    "OfflineBundleDiscoveryClient",
    "create_discovery_client",
]
