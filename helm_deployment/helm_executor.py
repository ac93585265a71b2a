"""Helm command construction and chart rendering."""

import shlex
from dataclasses import dataclass, field
from typing import Callable, Mapping, NamedTuple, Optional

from .executor import ShellExecutor
from .utils import log
from .workspace import Workspace

# Companion chart repository needed by the charts this tool renders.
DEFAULT_REPO_NAME = "istio.io"
DEFAULT_REPO_URL = "https://storage.googleapis.com/istio-prerelease/daily-build/master-latest-daily/charts"


@dataclass(frozen=True)
class RenderParams:
    """Inputs of a single chart rendering."""

    instance_name: str
    namespace: str
    chart_dir: str
    values_file: str = ""
    values: Mapping[str, str] = field(default_factory=dict)
    repo_name: str = DEFAULT_REPO_NAME
    repo_url: str = DEFAULT_REPO_URL


class HelmStep(NamedTuple):
    """A named pipeline step that builds one helm command line."""

    name: str
    build_command: Callable[[Workspace, RenderParams], str]


def _helm(workspace: Workspace, *args) -> str:
    return " ".join(["helm", "--home", shlex.quote(str(workspace.home_dir))] + list(args))


def init_command(workspace: Workspace, params: RenderParams) -> str:
    """Initialize the helm home without installing tiller."""
    return _helm(workspace, "init", "--client-only")


def repo_add_command(workspace: Workspace, params: RenderParams) -> str:
    return _helm(workspace, "repo", "add", shlex.quote(params.repo_name), shlex.quote(params.repo_url))


def package_command(workspace: Workspace, params: RenderParams) -> str:
    return _helm(
        workspace,
        "package", "-u", shlex.quote(str(params.chart_dir)),
        "-d", shlex.quote(str(workspace.chart_build_dir)),
    )


def compute_helm_args(instance_name: str, namespace: str, values_file: str = "",
                      values: Optional[Mapping[str, str]] = None) -> list[str]:
    """
    Compute helm template command-line arguments.

    Args:
        instance_name: Helm release name
        namespace: Target namespace
        values_file: Resolved values file path, empty to omit --values
        values: Overrides, one --set key=value per entry

    Returns:
        list[str]: Shell-quoted arguments that follow the chart directory
    """
    args = ["--name", shlex.quote(instance_name), "--namespace", shlex.quote(namespace)]

    if values_file:
        args.extend(["--values", shlex.quote(str(values_file))])

    for key, value in (values or {}).items():
        args.extend(["--set", shlex.quote(f"{key}={value}")])

    return args


def template_command(workspace: Workspace, params: RenderParams) -> str:
    return _helm(
        workspace,
        "template", shlex.quote(str(params.chart_dir)),
        *compute_helm_args(params.instance_name, params.namespace, params.values_file, params.values),
    )


HELM_STEPS = (
    HelmStep("init", init_command),
    HelmStep("repo-add", repo_add_command),
    HelmStep("package", package_command),
    HelmStep("template", template_command),
)


def run_helm_steps(workspace: Workspace, params: RenderParams, executor, steps=HELM_STEPS,
                   verbose: bool = False) -> str:
    """
    Run helm steps in order, stopping at the first failure.

    Returns:
        Output of the last step
    """
    output = ""
    for step in steps:
        log(f"Helm step: {step.name}", verbose)
        output = executor.execute(step.build_command(workspace, params))
    return output


def helm_template(instance_name: str, namespace: str, chart_dir, work_dir, values_file: str,
                  values: Optional[Mapping[str, str]] = None, *, executor=None,
                  repo_name: str = DEFAULT_REPO_NAME, repo_url: str = DEFAULT_REPO_URL,
                  verbose: bool = False) -> str:
    """
    Render a local chart with "helm template".

    Prepares a helm home and chart build directory under work_dir, adds the
    companion chart repository, packages the chart and renders it.

    Args:
        instance_name: Helm release name
        namespace: Target namespace
        chart_dir: Chart source directory
        work_dir: Directory that holds the helm workspace
        values_file: Resolved values file path, or "" for none
        values: --set overrides
        executor: Command executor (default: ShellExecutor)
        repo_name: Name of the companion chart repository
        repo_url: URL of the companion chart repository
        verbose: Enable verbose logging

    Returns:
        Rendered manifest text

    Raises:
        ToolInvocationError: If any helm command fails
        PersistenceError: If the workspace directories cannot be created
    """
    if executor is None:
        executor = ShellExecutor(verbose=verbose)

    workspace = Workspace.for_workdir(work_dir).create()
    params = RenderParams(
        instance_name=instance_name,
        namespace=namespace,
        chart_dir=str(chart_dir),
        values_file=values_file,
        values=dict(values or {}),
        repo_name=repo_name,
        repo_url=repo_url,
    )
    return run_helm_steps(workspace, params, executor, verbose=verbose)
