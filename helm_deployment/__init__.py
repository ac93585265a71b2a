"""
Helm Deployment - Render local Helm charts into namespaced test deployments.
Produces a single manifest file that can be applied to a cluster with kubectl.
"""

from pathlib import Path

import click

from .config import HelmConfig, load_deployment_config
from .errors import (
    ConfigError,
    HelmDeploymentError,
    PersistenceError,
    RenderError,
    ResolutionError,
    ToolInvocationError,
)
from .executor import ShellExecutor
from .helm_executor import DEFAULT_REPO_NAME, DEFAULT_REPO_URL, compute_helm_args, helm_template
from .manifest import assemble_manifest, manifest_path, write_manifest
from .utils import generate_instance_name, log
from .values_resolver import resolve_values_file
from .yaml_deployment import YamlDeployment

__version__ = "0.1.0"


class KeyValueParamType(click.ParamType):
    """Custom Click parameter type for key=value pairs."""
    name = "key_value"

    def convert(self, value, param, ctx):
        if '=' not in value:
            self.fail(f'{value} is not a valid key=value pair', param, ctx)
        key, val = value.split('=', 1)
        return (key.strip(), val.strip())


def new_helm_deployment(config: HelmConfig, executor=None, verbose: bool = False) -> YamlDeployment:
    """
    Render the chart of a HelmConfig and write it as a namespaced manifest.

    The manifest is written to <work_dir>/<namespace>-<nanos>.yaml and starts
    with a Namespace document for config.namespace.

    Args:
        config: Deployment configuration
        executor: Command executor (default: ShellExecutor honoring config.timeout)
        verbose: Enable verbose logging

    Returns:
        YamlDeployment: Handle for the written manifest

    Raises:
        RenderError: If values resolution, rendering or writing fails.
                     The specific error is available as __cause__.
    """
    if executor is None:
        executor = ShellExecutor(timeout=config.timeout, verbose=verbose)

    instance_name = generate_instance_name(config.namespace)
    log(f"Generated Helm Instance name: {instance_name}", verbose)

    yaml_file_path = manifest_path(config.work_dir, instance_name)

    try:
        values_file = resolve_values_file(config.values_file, config.chart_dir, verbose)

        generated_yaml = helm_template(
            instance_name,
            config.namespace,
            config.chart_dir,
            config.work_dir,
            values_file,
            config.values,
            executor=executor,
            repo_name=config.repo_name,
            repo_url=config.repo_url,
            verbose=verbose,
        )

        yaml_file_path = write_manifest(yaml_file_path, assemble_manifest(config.namespace, generated_yaml))
    except HelmDeploymentError as e:
        raise RenderError(f"chart generation failed: {e}") from e

    log(f"Created Helm-generated Yaml file: {yaml_file_path}", verbose)
    return YamlDeployment(config.namespace, yaml_file_path)


@click.group()
@click.version_option(version=__version__, prog_name='helm-deployment')
def cli():
    """Helm Deployment - Render local Helm charts into test deployments.

    Packages a chart, renders it with helm template, prepends a Namespace
    document and writes the result as a single manifest file.
    """
    pass


@cli.command()
@click.option(
    '--config',
    'config_file',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='YAML file with deployment settings (command-line options take precedence)'
)
@click.option('--namespace', default=None, help='Namespace to deploy into')
@click.option(
    '--chart-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Local chart source directory'
)
@click.option(
    '--workdir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Directory for the helm workspace and the generated manifest (default: current directory)'
)
@click.option(
    '--values-file',
    default=None,
    help='Values file name under the chart directory, or a path'
)
@click.option(
    '--set',
    'overrides',
    multiple=True,
    type=KeyValueParamType(),
    help='Override a chart value (use multiple times: --set a=1 --set b.c=2)'
)
@click.option('--repo-name', envvar='HELM_DEPLOYMENT_REPO_NAME', default=None, help='Companion chart repository name')
@click.option('--repo-url', envvar='HELM_DEPLOYMENT_REPO_URL', default=None, help='Companion chart repository URL')
@click.option('--timeout', type=float, default=None, help='Seconds allowed per external command (default: no limit)')
@click.option('--apply', 'apply_manifest', is_flag=True, help='Apply the generated manifest with kubectl')
@click.option('--verbose', is_flag=True, help='Enable verbose output')
def render(config_file, namespace, chart_dir, workdir, values_file, overrides, repo_name, repo_url, timeout,
           apply_manifest, verbose):
    """Render a chart into <workdir>/<namespace>-<nanos>.yaml.

    Prints the path of the generated manifest.

    Examples:

      helm-deployment render --namespace test-ns --chart-dir ./charts/app

      helm-deployment render --config deployment.yaml --set image.tag=v2
    """
    settings = {}
    if config_file:
        log(f"Config file: {config_file}", verbose)
        try:
            settings = load_deployment_config(config_file)
        except ConfigError as e:
            raise click.ClickException(str(e))

    cli_settings = {
        "namespace": namespace,
        "chart_dir": chart_dir,
        "work_dir": workdir,
        "values_file": values_file,
        "repo_name": repo_name,
        "repo_url": repo_url,
        "timeout": timeout,
    }
    settings.update({key: value for key, value in cli_settings.items() if value is not None})

    values = dict(settings.get("values", {}))
    for key, value in overrides:
        values[key] = value
        log(f"Value override: {key}={value}", verbose)
    settings["values"] = values

    if not settings.get("namespace"):
        raise click.UsageError("Missing namespace: use --namespace or set 'namespace' in --config")
    if not settings.get("chart_dir"):
        raise click.UsageError("Missing chart directory: use --chart-dir or set 'chartDir' in --config")
    settings["work_dir"] = Path(settings.get("work_dir") or Path.cwd()).resolve()

    config = HelmConfig(**settings)
    log(f"Working directory: {config.work_dir}", verbose)

    try:
        deployment = new_helm_deployment(config, verbose=verbose)
        if apply_manifest:
            log(f"Applying {deployment.yaml_file} to namespace {deployment.namespace}...", verbose)
            deployment.apply(ShellExecutor(timeout=config.timeout, verbose=verbose))
    except HelmDeploymentError as e:
        raise click.ClickException(str(e))

    click.echo(str(deployment.yaml_file))


__all__ = [
    "cli",
    "new_helm_deployment",
    "helm_template",
    "compute_helm_args",
    "resolve_values_file",
    "load_deployment_config",
    "HelmConfig",
    "YamlDeployment",
    "ShellExecutor",
    "HelmDeploymentError",
    "ConfigError",
    "ResolutionError",
    "ToolInvocationError",
    "PersistenceError",
    "RenderError",
    "DEFAULT_REPO_NAME",
    "DEFAULT_REPO_URL",
]
