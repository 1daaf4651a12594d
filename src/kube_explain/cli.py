"""Command line interface entry point."""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from kube_explain.cluster_discovery import DiscoveryFetchError, create_discovery_client
from kube_explain.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from kube_explain.explain_execution import (
    API_RESOURCES_HINT,
    ExplainRequest,
    NoInputError,
    TooManyArgumentsError,
    execute_explain_for_configuration,
)
from kube_explain.field_rendering import (
    OUTPUT_FORMATS,
    FieldNotFoundError,
    UnknownOutputFormatError,
)
from kube_explain.resource_mapping import (
    APIResource,
    MalformedVersionOverrideError,
    ResourceListError,
    ResourceMappingError,
    build_kind_mapper,
)
from kube_explain.schema_management import SchemaError, SchemaNotFoundError

_EXPLAIN_ERRORS = (
    ConfigurationError,
    DiscoveryFetchError,
    FieldNotFoundError,
    MalformedVersionOverrideError,
    NoInputError,
    ResourceListError,
    SchemaError,
    SchemaNotFoundError,
    TooManyArgumentsError,
    UnknownOutputFormatError,
)


class CliError(Exception):
    """Custom CLI error."""


def _cluster_options(command: Callable[..., Any]) -> Callable[..., Any]:
    @click.option(
        "--config",
        "config_path",
        required=False,
        type=click.Path(path_type=str),
        help="Path to YAML/JSON kube-explain configuration file",
    )
    @click.option(
        "--kubeconfig",
        required=False,
        type=click.Path(path_type=str),
        help="Path to the kubeconfig file to use",
    )
    @click.option("--context", required=False, help="Name of the kubeconfig context to use")
    @click.option(
        "--offline-bundle",
        "offline_bundle",
        required=False,
        type=click.Path(path_type=str, file_okay=False),
        help="Directory with exported discovery and OpenAPI documents",
    )
    @functools.wraps(command)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return command(*args, **kwargs)

    return wrapper


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="kube-explain")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log discovery requests and pipeline stages to stderr.",
)
def cli(verbose: bool) -> None:
    """Documentation for Kubernetes API resources and their fields."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="explain")
@click.argument("resource", nargs=-1)
@click.option(
    "--recursive",
    is_flag=True,
    default=False,
    help="Print the fields of fields at every depth, with their descriptions.",
)
@click.option(
    "--api-version",
    "api_version",
    default="",
    help="Get different explanations for particular API version (API group/version)",
)
@click.option(
    "--output",
    "output_format",
    required=False,
    type=click.Choice(OUTPUT_FORMATS),
    help="Format in which to render the schema (OpenAPI v3 backend only)",
)
@_cluster_options
def explain(  # pylint: disable=too-many-arguments
    resource: tuple[str, ...],
    recursive: bool,
    api_version: str,
    output_format: str | None,
    config_path: str | None,
    kubeconfig: str | None,
    context: str | None,
    offline_bundle: str | None,
) -> None:
    """List the fields for supported resources.

    Fields are identified via a simple JSONPath identifier:

    \b
        <type>.<fieldName>[.<fieldName>]

    \b
    Examples:
        kube-explain explain pods
        kube-explain explain pods.spec.containers
        kube-explain explain deployments.apps.spec --recursive
    """
    try:
        configuration = _load_cli_configuration(config_path, kubeconfig, context, offline_bundle)
        outcome = execute_explain_for_configuration(
            ExplainRequest(
                arguments=resource,
                api_version=api_version,
                recursive=recursive,
                output_format=output_format or configuration.explain.output_format,
            ),
            configuration,
        )
    except ResourceMappingError as exc:
        raise CliError(f"{exc}\n{API_RESOURCES_HINT}") from exc
    except _EXPLAIN_ERRORS as exc:
        raise CliError(str(exc)) from exc
    click.echo(outcome.text, nl=False)


@cli.command(name="api-resources")
@_cluster_options
def api_resources(
    config_path: str | None,
    kubeconfig: str | None,
    context: str | None,
    offline_bundle: str | None,
) -> None:
    """Print the API resources supported by the server."""
    try:
        configuration = _load_cli_configuration(config_path, kubeconfig, context, offline_bundle)
        mapper = build_kind_mapper(create_discovery_client(configuration))
    except (ConfigurationError, DiscoveryFetchError, ResourceListError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(format_api_resources(mapper.api_resources))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML configuration template with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def format_api_resources(resources: Sequence[APIResource]) -> str:
    """Tabulate preferred-version resources as NAME, SHORTNAMES, APIVERSION, NAMESPACED, KIND."""
    rows = [("NAME", "SHORTNAMES", "APIVERSION", "NAMESPACED", "KIND")]
    rows.extend(
        (
            resource.resource,
            ",".join(resource.short_names),
            resource.api_version,
            str(resource.namespaced).lower(),
            resource.kind,
        )
        for resource in resources
        if resource.preferred
    )
    widths = [max(len(row[column]) for row in rows) for column in range(len(rows[0]))]
    return "\n".join(
        "   ".join(value.ljust(width) for value, width in zip(row, widths, strict=True)).rstrip()
        for row in rows
    )


def _load_cli_configuration(
    config_path: str | None,
    kubeconfig: str | None,
    context: str | None,
    offline_bundle: str | None,
) -> Configuration:
    configuration = load_configuration(config_path)
    cluster = replace(
        configuration.cluster,
        kubeconfig=Path(kubeconfig) if kubeconfig else configuration.cluster.kubeconfig,
        context=context or configuration.cluster.context,
    )
    offline = replace(
        configuration.offline,
        bundle_dir=Path(offline_bundle) if offline_bundle else configuration.offline.bundle_dir,
    )
    return replace(configuration, cluster=cluster, offline=offline)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
