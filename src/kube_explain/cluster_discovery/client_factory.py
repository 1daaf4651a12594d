"""Selection of the discovery client for a configuration."""

from __future__ import annotations

import logging

from kube_explain.configuration.runtime_settings import Configuration

from .discovery_client import DiscoveryClient
from .kubernetes_discovery import KubernetesDiscoveryClient
from .offline_bundle import OfflineBundleDiscoveryClient

logger = logging.getLogger(__name__)


def create_discovery_client(configuration: Configuration) -> DiscoveryClient:
    """Return an offline bundle client when configured, else a live cluster client."""
    if configuration.offline.bundle_dir is not None:
        logger.debug("using offline bundle %s", configuration.offline.bundle_dir)
        return OfflineBundleDiscoveryClient(configuration.offline.bundle_dir)
    return KubernetesDiscoveryClient.from_kubeconfig(
        kubeconfig=configuration.cluster.kubeconfig,
        context=configuration.cluster.context,
        request_timeout_seconds=configuration.cluster.request_timeout_seconds,
    )
