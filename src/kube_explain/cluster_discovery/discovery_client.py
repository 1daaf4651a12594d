"""Discovery capability consumed by the explain pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class DiscoveryFetchError(Exception):
    """Raised when API discovery or OpenAPI documents cannot be fetched."""


class DiscoveryClient(Protocol):
    """Source of API resource lists and OpenAPI documents for one cluster context."""

    def api_resource_lists(self) -> list[Mapping[str, Any]]:
        """Return `{"groupVersion", "preferred", "resources"}` mappings in discovery order."""
        ...

    def openapi_v2_schema(self) -> Mapping[str, Any]:
        """Return the full OpenAPI v2 (swagger) document."""
        ...

    def openapi_v3_paths(self) -> Mapping[str, str]:
        """Return OpenAPI v3 group-version paths (`api/v1`, `apis/apps/v1`) and their locations."""
        ...

    def openapi_v3_schema(self, path: str) -> Mapping[str, Any]:
        """Return the OpenAPI v3 document for one group-version path."""
        ...
