"""JSON exporter for dependency closures (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from graph.model import ClosureResult


def to_json(
    result: ClosureResult,
    base: Optional[Path] = None,
    indent: int = 2,
) -> str:
    """
    Convert a closure result to JSON.

    Args:
        result: The closure to export.
        base: Optional base path; files inside it are shown relative to it.
        indent: JSON indentation level.

    Returns:
        JSON string with ``files`` and, when present, ``last_modified``,
        ``packages`` and ``depths``.
    """
    data: Dict[str, Any] = result.to_dict()
    data["files"] = [get_path_str(path, base) for path in result.files]
    if result.depths is not None:
        data["depths"] = {
            get_path_str(path, base): depth for path, depth in result.depths.items()
        }

    return json.dumps(data, indent=indent)


def get_path_str(path: str, base: Optional[Path]) -> str:
    """Get the display form of a path, relative to ``base`` when inside it."""
    if base is not None:
        try:
            return Path(path).relative_to(base).as_posix()
        except ValueError:
            pass
    return str(path).replace("\\", "/")
