"""Handle for applying a generated manifest to a cluster."""

import shlex
from pathlib import Path

from .executor import ShellExecutor


class YamlDeployment:
    """
    A manifest file bound to a namespace.

    Creating the handle touches nothing; apply() and delete() call kubectl.
    """

    def __init__(self, namespace: str, yaml_file):
        self.namespace = namespace
        self.yaml_file = Path(yaml_file)

    def _kubectl(self, action: str) -> str:
        return " ".join([
            "kubectl", action,
            "-n", shlex.quote(self.namespace),
            "-f", shlex.quote(str(self.yaml_file)),
        ])

    def apply(self, executor=None) -> str:
        """Apply the manifest with kubectl."""
        return (executor or ShellExecutor()).execute(self._kubectl("apply"))

    def delete(self, executor=None) -> str:
        """Delete everything the manifest created."""
        return (executor or ShellExecutor()).execute(self._kubectl("delete"))

    def __repr__(self) -> str:
        return f"YamlDeployment(namespace={self.namespace!r}, yaml_file={str(self.yaml_file)!r})"
