"""Common utility functions for Helm deployments."""

import sys
import time


def log(message: str, verbose: bool = False):
    """Print message only if verbose mode is enabled."""
    if verbose:
        print(message, file=sys.stderr)


def log_error(message: str):
    """Print an error message regardless of verbosity."""
    print(message, file=sys.stderr)


def generate_instance_name(namespace: str) -> str:
    """
    Build a Helm instance name for a deployment.

    For namespace 'test-ns', returns something like 'test-ns-1729251234567890123'.
    Uniqueness relies on the nanosecond clock only.
    """
    return f"{namespace}-{time.time_ns()}"
