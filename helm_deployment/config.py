"""Deployment configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .errors import ConfigError
from .helm_executor import DEFAULT_REPO_NAME, DEFAULT_REPO_URL

# Config file key -> HelmConfig field
CONFIG_FILE_KEYS = {
    "namespace": "namespace",
    "chartDir": "chart_dir",
    "workDir": "work_dir",
    "valuesFile": "values_file",
    "values": "values",
    "repoName": "repo_name",
    "repoURL": "repo_url",
    "timeout": "timeout",
}


@dataclass(frozen=True)
class HelmConfig:
    """
    Configuration for a Helm-based deployment.

    Attributes:
        namespace: Namespace to deploy into, also the instance name prefix
        chart_dir: Local chart source directory
        work_dir: Directory for the helm workspace and the generated manifest
        values_file: File name under chart_dir or a path, "" for none
        values: --set overrides
        repo_name: Companion chart repository name
        repo_url: Companion chart repository URL
        timeout: Seconds allowed per external command, None for no limit
    """

    namespace: str
    chart_dir: Path
    work_dir: Path
    values_file: str = ""
    values: Mapping[str, str] = field(default_factory=dict)
    repo_name: str = DEFAULT_REPO_NAME
    repo_url: str = DEFAULT_REPO_URL
    timeout: Optional[float] = None

    def __post_init__(self):
        # Detach from the caller's objects
        object.__setattr__(self, "chart_dir", Path(self.chart_dir))
        object.__setattr__(self, "work_dir", Path(self.work_dir))
        object.__setattr__(self, "values", {str(k): _set_value(v) for k, v in dict(self.values).items()})


# Scalar config keys and the types they accept
CONFIG_FILE_TYPES = {
    "namespace": str,
    "chartDir": str,
    "workDir": str,
    "valuesFile": str,
    "repoName": str,
    "repoURL": str,
    "timeout": (int, float),
}


def _set_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_deployment_config(path: Path) -> dict:
    """
    Load a deployment config file.

    Relative chartDir and workDir entries are resolved against the directory
    of the config file.

    Returns:
        dict: HelmConfig keyword arguments found in the file

    Raises:
        ConfigError: If the file is not a mapping, has unknown keys or
                     values of the wrong type
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: top level must be a mapping")

    unknown = sorted(set(data) - set(CONFIG_FILE_KEYS))
    if unknown:
        raise ConfigError(f"Invalid config file {path}: unknown keys {', '.join(unknown)}")

    if "values" in data and not isinstance(data["values"] or {}, dict):
        raise ConfigError(f"Invalid config file {path}: 'values' must be a mapping")

    for key, expected in CONFIG_FILE_TYPES.items():
        value = data.get(key)
        if value is not None and (not isinstance(value, expected) or isinstance(value, bool)):
            raise ConfigError(f"Invalid config file {path}: '{key}' has invalid value {value!r}")

    kwargs = {CONFIG_FILE_KEYS[key]: value for key, value in data.items() if value is not None}
    for key in ("chart_dir", "work_dir"):
        if key in kwargs:
            directory = Path(kwargs[key])
            kwargs[key] = directory if directory.is_absolute() else path.parent / directory
    if "values" in kwargs:
        kwargs["values"] = flatten_values(kwargs["values"] or {}, path)

    return kwargs


def flatten_values(values: dict, path: Path, prefix: str = "") -> dict:
    """
    Flatten nested values into dotted --set keys.

    For {"image": {"tag": "v2"}}, returns {"image.tag": "v2"}.

    Raises:
        ConfigError: If a value is a list or other non-scalar
    """
    flat = {}
    for key, value in values.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten_values(value, path, f"{dotted}."))
        elif value is None or isinstance(value, (str, int, float, bool)):
            flat[dotted] = "null" if value is None else value
        else:
            raise ConfigError(f"Invalid config file {path}: value of '{dotted}' must be a scalar or mapping")
    return flat
