"""
Locating the source checkout the package runs from.
"""

from pathlib import Path

PROJECT_MARKER = "pyproject.toml"


class ProjectRootNotFound(Exception):
    """No pyproject.toml above the start path, e.g. in an installed wheel."""


def get_project_root_dir(start: Path | None = None) -> Path:
    """
    Nearest ancestor of start that holds a pyproject.toml.

    Args:
        start: Path to search upwards from. Defaults to this package.

    Raises:
        ProjectRootNotFound: If no ancestor holds the marker file.
    """
    start = (start or Path(__file__).parent).resolve()
    for directory in (start, *start.parents):
        if (directory / PROJECT_MARKER).is_file():
            return directory
    raise ProjectRootNotFound(f"No {PROJECT_MARKER} above {start}")
