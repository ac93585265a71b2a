"""Shell command execution for Helm and kubectl invocations."""

import subprocess
from pathlib import Path
from typing import Optional

from .errors import ToolInvocationError
from .utils import log, log_error


class ShellExecutor:
    """
    Run command lines through the shell and return their standard output.

    Any object with an ``execute(command) -> str`` method that raises
    ToolInvocationError on failure can be used in place of this class.
    """

    def __init__(self, timeout: Optional[float] = None, cwd: Optional[Path] = None, verbose: bool = False):
        """
        Args:
            timeout: Seconds to wait for each command, None waits forever
            cwd: Working directory for commands (default: current directory)
            verbose: Enable verbose logging
        """
        self.timeout = timeout
        self.cwd = cwd
        self.verbose = verbose

    def execute(self, command: str) -> str:
        """
        Execute a command line and return its standard output.

        Unlike a combined-output runner, stderr is not part of the return
        value, so helm warnings never end up in a rendered manifest. Both
        streams are kept in ToolInvocationError.output on failure.

        Raises:
            ToolInvocationError: If the command cannot start, exits non-zero or times out
        """
        log(f"executing: {command}", self.verbose)

        try:
            process = subprocess.run(
                command,
                shell=True,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            output = _decode(e.stdout) + _decode(e.stderr)
            raise self._failure(command, f"timed out after {self.timeout}s", output) from e
        except OSError as e:
            raise self._failure(command, str(e), "") from e

        if process.returncode != 0:
            output = process.stdout + process.stderr
            raise self._failure(command, f"exit status {process.returncode}", output, process.returncode)
        elif self.verbose and process.stderr:
            log(process.stderr, self.verbose)

        return process.stdout

    def _failure(self, command: str, reason: str, output: str, returncode=None) -> ToolInvocationError:
        log_error(f"failed executing command ({command}): {reason}: {output}")
        return ToolInvocationError(command, reason, output, returncode)


def _decode(data) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
