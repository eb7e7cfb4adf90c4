"""
Project root discovery.

A project is the directory holding n8n-sync.json, config/ (environment
files), workflows/ or a .git repository.
"""

from pathlib import Path

# Markers that indicate a project root, in order of priority
PROJECT_ROOT_MARKERS = [
    "n8n-sync.json",
    "config",
    "workflows",
    ".git",
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the project root by searching upward for marker files.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        Path to the project root, or None if no ancestor has a marker.

    Example:
        >>> find_project_root(Path("/project/workflows/business"))
        PosixPath('/project')
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return directory

    return None


def get_project_root(start: Path | None = None) -> Path:
    """Like find_project_root, but fall back to the start directory."""
    return find_project_root(start) or (start or Path.cwd()).resolve()
