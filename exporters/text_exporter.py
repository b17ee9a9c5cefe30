"""Plain text exporter for dependency closures."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from graph.model import ClosureResult
from .json_exporter import get_path_str


INDENT = "  "


def to_text(
    result: ClosureResult,
    base: Optional[Path] = None,
) -> str:
    """
    Convert a closure result to a human-readable listing.

    Files are listed one per line in discovery order, with their depth when
    a depth bound was used. Packages and the last modification time follow
    when they were collected.

    Args:
        result: The closure to export.
        base: Optional base path for relative path display.

    Returns:
        Text listing.
    """
    lines: List[str] = []

    for path in result.files:
        line = get_path_str(path, base)
        if result.depths is not None and path in result.depths:
            line += f"  [depth {result.depths[path]}]"
        lines.append(line)

    if result.packages is not None:
        lines.append("")
        lines.append(f"packages ({len(result.packages)}):")
        for name in sorted(result.packages):
            lines.append(INDENT + name)

    if result.last_modified is not None:
        lines.append("")
        stamp = datetime.fromtimestamp(result.last_modified).isoformat(timespec="seconds")
        lines.append(f"last modified: {stamp}")

    return "\n".join(lines)
