"""Discovery client serving pre-exported documents from a directory."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .discovery_client import DiscoveryFetchError

API_RESOURCES_FILENAME = "api-resources.yaml"
OPENAPI_V2_FILENAME = "openapi-v2.json"
OPENAPI_V3_DIRNAME = "openapi-v3"


class OfflineBundleDiscoveryClient:
    """Reads an offline bundle laid out as::

        api-resources.yaml          # resourceLists: [{groupVersion, preferred, resources}]
        openapi-v2.json             # /openapi/v2 response
        openapi-v3/api/v1.json      # /openapi/v3/api/v1 response
        openapi-v3/apis/<group>/<version>.json
    """

    def __init__(self, bundle_dir: Path | str) -> None:
        self._bundle_dir = Path(bundle_dir)

    @property
    def bundle_dir(self) -> Path:
        return self._bundle_dir

    def api_resource_lists(self) -> list[Mapping[str, Any]]:
        path = self._bundle_dir / API_RESOURCES_FILENAME
        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise DiscoveryFetchError(f"Failed to read {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise DiscoveryFetchError(f"Failed to parse {path}: {exc}") from exc
        resource_lists = parsed.get("resourceLists") if isinstance(parsed, Mapping) else None
        if not isinstance(resource_lists, Sequence):
            raise DiscoveryFetchError(f"{path} must define a resourceLists list.")
        return list(resource_lists)

    def openapi_v2_schema(self) -> Mapping[str, Any]:
        return self._read_json(self._bundle_dir / OPENAPI_V2_FILENAME)

    def openapi_v3_paths(self) -> Mapping[str, str]:
        root = self._bundle_dir / OPENAPI_V3_DIRNAME
        if not root.is_dir():
            raise DiscoveryFetchError(f"OpenAPI v3 directory not found: {root}")
        return {
            file_path.relative_to(root).as_posix().removesuffix(".json"): str(file_path)
            for file_path in sorted(root.rglob("*.json"))
        }

    def openapi_v3_schema(self, path: str) -> Mapping[str, Any]:
        return self._read_json(self._bundle_dir / OPENAPI_V3_DIRNAME / f"{path}.json")

    def _read_json(self, path: Path) -> Mapping[str, Any]:
        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise DiscoveryFetchError(f"Failed to read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DiscoveryFetchError(f"Failed to parse {path}: {exc}") from exc
        if not isinstance(parsed, Mapping):
            raise DiscoveryFetchError(f"{path} must contain a JSON object.")
        return parsed
