"""Global pytest configuration and fixtures for all tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import the main module
sys.path.insert(0, str(Path(__file__).parent.parent))

from helm_deployment.errors import ToolInvocationError

RENDERED_CHART = """---
# Source: minimal/templates/configmap.yaml
apiVersion: v1
kind: ConfigMap
metadata:
  name: minimal-config
data:
  greeting: hello
"""


class FakeExecutor:
    """Records command lines instead of running them.

    Commands containing ``fail_on`` raise ToolInvocationError. The helm
    template command returns ``rendered``; everything else returns "".
    """

    def __init__(self, rendered: str = RENDERED_CHART, fail_on: str = None):
        self.rendered = rendered
        self.fail_on = fail_on
        self.commands = []

    def execute(self, command: str) -> str:
        self.commands.append(command)
        if self.fail_on and self.fail_on in command:
            raise ToolInvocationError(command, "exit status 1", "Error: simulated failure", 1)
        if " template " in command:
            return self.rendered
        return ""

    def commands_for(self, subcommand: str) -> list:
        return [command for command in self.commands if f" {subcommand} " in f"{command} "]


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def chart_dir(tmp_path):
    """A minimal valid chart with a values.yaml."""
    chart = tmp_path / "minimal"
    (chart / "templates").mkdir(parents=True)
    (chart / "Chart.yaml").write_text("apiVersion: v1\nname: minimal\nversion: 0.1.0\n")
    (chart / "values.yaml").write_text("greeting: hello\n")
    (chart / "templates" / "configmap.yaml").write_text(
        "apiVersion: v1\n"
        "kind: ConfigMap\n"
        "metadata:\n"
        "  name: {{ .Release.Name }}-config\n"
        "data:\n"
        "  greeting: {{ .Values.greeting }}\n"
    )
    return chart


@pytest.fixture
def work_dir(tmp_path):
    work = tmp_path / "work"
    work.mkdir()
    return work
