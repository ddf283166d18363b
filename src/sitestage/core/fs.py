"""File-system checks used while resolving requests."""

from pathlib import Path


def is_file(path: Path) -> bool:
    """Check for a regular file.

    Names the file system cannot represent (too long, embedded NUL) are
    reported as missing rather than raised.
    """
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False
