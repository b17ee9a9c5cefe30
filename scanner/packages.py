"""Package boundary detection for resolved file paths."""

import re
from typing import Optional


BOUNDARY_DIR = "node_modules"

# Greedy prefix so the innermost node_modules wins for nested installs.
PACKAGE_NAME_RE = re.compile(r"^.*/node_modules/((?:@[\w.-]+/)?[\w.-]+)/")


def get_package_name(file_path: str) -> Optional[str]:
    """
    Get the name of the installed package that owns a file.

    Args:
        file_path: Absolute path of a file.

    Returns:
        ``"name"`` or ``"@scope/name"`` for files under a ``node_modules``
        directory, None for project files.
    """
    match = PACKAGE_NAME_RE.match(file_path.replace("\\", "/"))
    if match is None:
        return None
    return match.group(1)
