"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "kube-explain.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for kube-explain.
# Every setting is optional; remove or comment out what you do not need.

cluster:
  # Defaults to $KUBECONFIG or ~/.kube/config.
  # kubeconfig: "~/.kube/config"
  # Defaults to the kubeconfig's current context.
  # context: "<OPTIONAL>"
  # Timeout for each discovery and OpenAPI request.
  request_timeout_seconds: 30

explain:
  # Use the per-group-version OpenAPI v3 documents (true) or the
  # legacy OpenAPI v2 document (false). KUBE_EXPLAIN_OPENAPIV3 overrides this.
  enable_openapi_v3: true
  # plaintext or plaintext-openapiv2 (OpenAPI v3 backend only).
  output_format: "plaintext"

offline:
  # Directory with api-resources.yaml, openapi-v2.json and openapi-v3/.
  # When set, no cluster connection is made.
  # bundle_dir: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
