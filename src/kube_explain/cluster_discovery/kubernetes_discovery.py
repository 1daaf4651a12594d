"""Discovery client talking to a live API server through the Kubernetes client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from .discovery_client import DiscoveryFetchError

logger = logging.getLogger(__name__)

_RESPONSE_TYPES = {"200": "object"}


class KubernetesDiscoveryClient:
    """Fetches discovery lists and OpenAPI documents through raw `ApiClient` GET requests.

    Every request carries `request_timeout_seconds` so a stalled server surfaces as
    a DiscoveryFetchError instead of hanging the invocation.
    """

    def __init__(self, api_client: client.ApiClient, *, request_timeout_seconds: int = 30) -> None:
        self._api_client = api_client
        self._request_timeout_seconds = request_timeout_seconds
        self._v3_paths: dict[str, str] | None = None

    @classmethod
    def from_kubeconfig(
        cls,
        *,
        kubeconfig: Path | None = None,
        context: str | None = None,
        request_timeout_seconds: int = 30,
    ) -> KubernetesDiscoveryClient:
        """Create a client from a kubeconfig file (default location when omitted)."""
        try:
            api_client = config.new_client_from_config(
                config_file=str(kubeconfig) if kubeconfig else None,
                context=context,
            )
        except (ConfigException, OSError) as exc:
            raise DiscoveryFetchError(f"Failed to load kubeconfig: {exc}") from exc
        return cls(api_client, request_timeout_seconds=request_timeout_seconds)

    def api_resource_lists(self) -> list[Mapping[str, Any]]:
        resource_lists: list[Mapping[str, Any]] = []

        core_versions = self._get_json("/api").get("versions") or []
        for index, version in enumerate(core_versions):
            resource_lists.append(
                {
                    "groupVersion": version,
                    "preferred": index == 0,
                    "resources": self._get_json(f"/api/{version}").get("resources") or [],
                }
            )

        for group in self._get_json("/apis").get("groups") or []:
            preferred = (group.get("preferredVersion") or {}).get("groupVersion")
            for version in group.get("versions") or []:
                group_version = version.get("groupVersion")
                if not group_version:
                    continue
                resource_lists.append(
                    {
                        "groupVersion": group_version,
                        "preferred": group_version == preferred,
                        "resources": self._get_json(f"/apis/{group_version}").get("resources")
                        or [],
                    }
                )
        logger.debug("discovered %d group versions", len(resource_lists))
        return resource_lists

    def openapi_v2_schema(self) -> Mapping[str, Any]:
        return self._get_json("/openapi/v2")

    def openapi_v3_paths(self) -> Mapping[str, str]:
        if self._v3_paths is None:
            paths = self._get_json("/openapi/v3").get("paths") or {}
            self._v3_paths = {
                str(path): str(entry.get("serverRelativeURL") or f"/openapi/v3/{path}")
                for path, entry in paths.items()
                if isinstance(entry, Mapping)
            }
        return self._v3_paths

    def openapi_v3_schema(self, path: str) -> Mapping[str, Any]:
        location = self.openapi_v3_paths().get(path, f"/openapi/v3/{path}")
        parts = urlsplit(location)
        return self._get_json(parts.path, query_params=parse_qsl(parts.query))

    def _get_json(
        self, resource_path: str, *, query_params: list[tuple[str, str]] | None = None
    ) -> Mapping[str, Any]:
        logger.debug("GET %s", resource_path)
        request = self._api_client.param_serialize(
            "GET",
            resource_path,
            query_params=query_params or [],
            header_params={"Accept": "application/json"},
            auth_settings=["BearerToken"],
        )
        try:
            response = self._api_client.call_api(
                *request, _request_timeout=self._request_timeout_seconds
            )
            response.read()
            payload = self._api_client.response_deserialize(
                response_data=response, response_types_map=_RESPONSE_TYPES
            ).data
        except ApiException as exc:
            raise DiscoveryFetchError(
                f"GET {resource_path} failed: {exc.status} {exc.reason}"
            ) from exc
        except (HTTPError, OSError) as exc:
            raise DiscoveryFetchError(f"GET {resource_path} failed: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise DiscoveryFetchError(f"GET {resource_path} returned a non-object payload.")
        return payload
