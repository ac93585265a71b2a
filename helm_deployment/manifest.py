"""Manifest assembly and persistence."""

import os
from pathlib import Path

from .errors import PersistenceError

NAMESPACE_TEMPLATE = """apiVersion: v1
kind: Namespace
metadata:
  name: {namespace}
  labels:
    istio-injection: disabled
"""

MANIFEST_FILE_MODE = 0o777


def namespace_manifest(namespace: str) -> str:
    """Render the Namespace document with sidecar injection disabled."""
    return NAMESPACE_TEMPLATE.format(namespace=namespace)


def assemble_manifest(namespace: str, rendered: str) -> str:
    """
    Prepend the Namespace document to rendered chart output.

    A "---" separator is added when the chart output does not start with one.
    """
    if not rendered.lstrip().startswith("---"):
        rendered = "---\n" + rendered
    return namespace_manifest(namespace) + rendered


def manifest_path(work_dir, instance_name: str) -> Path:
    return Path(work_dir) / f"{instance_name}.yaml"


def write_manifest(path: Path, content: str) -> Path:
    """
    Write manifest content, replacing any existing file.

    Returns:
        Absolute path of the written file

    Raises:
        PersistenceError: If the file cannot be written
    """
    path = Path(path).absolute()
    try:
        with open(path, "w", encoding="utf-8") as manifest_file:
            manifest_file.write(content)
        os.chmod(path, MANIFEST_FILE_MODE)
    except OSError as e:
        raise PersistenceError(path, str(e)) from e
    return path
