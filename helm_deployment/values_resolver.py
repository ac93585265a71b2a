"""Values file resolution."""

from pathlib import Path

from .errors import ResolutionError
from .utils import log


def resolve_values_file(values_file: str, chart_dir, verbose: bool = False) -> str:
    """
    Convert a values file reference to an absolute file path.

    The reference is tried as given first (absolute, or relative to the current
    directory), then relative to the chart directory.

    Args:
        values_file: File name under chart_dir, or a path. Empty means no values file.
        chart_dir: Chart source directory
        verbose: Enable verbose logging

    Returns:
        Absolute path of the values file, or "" when values_file is empty

    Raises:
        ResolutionError: If the reference exists under neither location
    """
    if not values_file:
        return ""

    candidate = Path(values_file)
    if candidate.exists():
        resolved = candidate.resolve()
        log(f"Values file: {resolved}", verbose)
        return str(resolved)

    chart_relative = Path(chart_dir) / values_file
    if chart_relative.exists():
        resolved = chart_relative.resolve()
        log(f"Values file (chart-relative): {resolved}", verbose)
        return str(resolved)

    raise ResolutionError(
        f"Values file '{values_file}' not found (tried {candidate} and {chart_relative})"
    )
