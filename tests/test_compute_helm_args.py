"""Tests for helm command construction."""

import sys
from pathlib import Path

# Add parent directory to path to import the main module
sys.path.insert(0, str(Path(__file__).parent.parent))

from helm_deployment import compute_helm_args
from helm_deployment.helm_executor import (
    HELM_STEPS,
    RenderParams,
    init_command,
    package_command,
    repo_add_command,
    template_command,
)
from helm_deployment.workspace import Workspace


def test_compute_helm_args_without_values():
    """Only name and namespace are passed when there are no values."""
    args = compute_helm_args("test-ns-1", "test-ns")

    assert args == ["--name", "test-ns-1", "--namespace", "test-ns"], \
        "Should return only instance name and namespace"


def test_compute_helm_args_with_values_file():
    """The values file is passed with --values."""
    args = compute_helm_args("test-ns-1", "test-ns", "/charts/app/values.yaml")

    assert args == ["--name", "test-ns-1", "--namespace", "test-ns", "--values", "/charts/app/values.yaml"]


def test_compute_helm_args_one_set_per_override():
    """Each override becomes exactly one --set key=value pair."""
    values = {"image.tag": "v2", "replicaCount": "3", "global.hub": "docker.io/istio"}

    args = compute_helm_args("test-ns-1", "test-ns", "", values)

    set_values = [args[i + 1] for i, arg in enumerate(args) if arg == "--set"]
    assert sorted(set_values) == sorted(f"{k}={v}" for k, v in values.items())
    assert "--values" not in args


def test_compute_helm_args_quotes_unsafe_values():
    """Values with shell metacharacters are quoted as a single argument."""
    args = compute_helm_args("test-ns-1", "test-ns", "", {"motd": "hello world"})

    assert args[-2:] == ["--set", "'motd=hello world'"]


def test_helm_steps_are_ordered():
    """Steps run init, repo-add, package, template."""
    assert [step.name for step in HELM_STEPS] == ["init", "repo-add", "package", "template"]


def test_step_commands(tmp_path):
    """Every helm command is scoped to the workspace home directory."""
    workspace = Workspace.for_workdir(tmp_path)
    params = RenderParams(
        instance_name="test-ns-42",
        namespace="test-ns",
        chart_dir="/src/chart",
        values_file="/src/chart/values.yaml",
        values={"image.tag": "v2"},
        repo_name="companion",
        repo_url="https://charts.example.com/stable",
    )
    home = workspace.home_dir

    assert init_command(workspace, params) == f"helm --home {home} init --client-only"
    assert repo_add_command(workspace, params) == \
        f"helm --home {home} repo add companion https://charts.example.com/stable"
    assert package_command(workspace, params) == \
        f"helm --home {home} package -u /src/chart -d {workspace.chart_build_dir}"
    assert template_command(workspace, params) == (
        f"helm --home {home} template /src/chart --name test-ns-42 --namespace test-ns"
        " --values /src/chart/values.yaml --set image.tag=v2"
    )
