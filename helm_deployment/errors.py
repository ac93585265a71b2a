"""Exceptions raised while provisioning a Helm-based deployment."""


class HelmDeploymentError(Exception):
    """Base class for all helm_deployment errors."""


class ConfigError(HelmDeploymentError, ValueError):
    """Deployment configuration file is malformed."""


class ResolutionError(HelmDeploymentError, FileNotFoundError):
    """Values file reference does not exist on disk."""


class ToolInvocationError(HelmDeploymentError):
    """
    External command exited non-zero, could not be started, or timed out.

    Attributes:
        command: Command line that was executed
        returncode: Exit code, or None if the process never finished
        output: Captured output of the command
    """

    def __init__(self, command: str, reason: str, output: str = "", returncode=None):
        self.command = command
        self.reason = reason
        self.output = output
        self.returncode = returncode
        message = f"failed executing command ({command}): {reason}"
        if output:
            message += f": {output}"
        super().__init__(message)


class PersistenceError(HelmDeploymentError):
    """Generated manifest could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"unable to write helm generated yaml {path}: {reason}")


class RenderError(HelmDeploymentError):
    """Chart generation failed; the specific error is chained as __cause__."""
