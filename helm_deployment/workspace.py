"""Helm tooling workspace under the deployment working directory."""

from dataclasses import dataclass
from pathlib import Path

from .errors import PersistenceError

HELM_HOME_DIR_NAME = "helmrepo"
CHART_BUILD_DIR_NAME = "charts"


@dataclass(frozen=True)
class Workspace:
    """
    Directories used by the Helm CLI for one provisioning call.

    Attributes:
        home_dir: Isolated Helm home (repositories, cache)
        chart_build_dir: Destination for the packaged chart archive
    """

    home_dir: Path
    chart_build_dir: Path

    @classmethod
    def for_workdir(cls, work_dir) -> "Workspace":
        work_dir = Path(work_dir)
        return cls(
            home_dir=work_dir / HELM_HOME_DIR_NAME,
            chart_build_dir=work_dir / CHART_BUILD_DIR_NAME,
        )

    def create(self) -> "Workspace":
        """
        Create both directories if missing. Existing directories are kept.

        Raises:
            PersistenceError: If a directory cannot be created
        """
        for directory in (self.home_dir, self.chart_build_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistenceError(directory, str(e)) from e
        return self
