"""Data model for dependency closures."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional


class FileSet:
    """
    An insertion-ordered set of absolute file paths.

    Entries come first, followed by dependencies in order of first
    discovery. When created with ``track_depth=True`` the set also records
    the depth at which each file was first added; that depth never changes.
    """

    def __init__(self, entries: Iterable[str] = (), track_depth: bool = False):
        self._files: List[str] = []
        self._members: set = set()
        self._depths: Optional[Dict[str, int]] = {} if track_depth else None

        for entry in entries:
            self.add(entry, 0)

    @property
    def files(self) -> List[str]:
        """Return the files in insertion order."""
        return list(self._files)

    @property
    def depths(self) -> Optional[Dict[str, int]]:
        """Return the depth map, or None when depths are not tracked."""
        if self._depths is None:
            return None
        return dict(self._depths)

    @property
    def tracks_depth(self) -> bool:
        return self._depths is not None

    def add(self, path: str, depth: Optional[int] = None) -> bool:
        """
        Add a file unless it is already present.

        Args:
            path: Absolute file path.
            depth: Depth to record when depths are tracked.

        Returns:
            True if the file was added, False if it was already present.

        Raises:
            ValueError: If depths are tracked and no depth is given.
        """
        if self._depths is not None and depth is None:
            raise ValueError(f"A depth is required to add {path} to a depth-tracking FileSet")
        if path in self._members:
            return False

        self._members.add(path)
        self._files.append(path)
        if self._depths is not None:
            self._depths[path] = depth
        return True

    def depth_of(self, path: str) -> Optional[int]:
        """Get the recorded depth of a file, or None if unknown."""
        if self._depths is None:
            return None
        return self._depths.get(path)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._files))

    def __repr__(self) -> str:
        return f"FileSet(files={len(self._files)}, track_depth={self.tracks_depth})"


@dataclass
class ClosureResult:
    """
    Outcome of a dependency closure computation.

    ``last_modified`` is present when modification times were tracked,
    ``packages`` when package collection was requested, and ``depths`` when
    a finite depth bound was used.
    """

    files: List[str]
    last_modified: Optional[float] = None
    packages: Optional[List[str]] = None
    depths: Optional[Dict[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as a plain dict, omitting absent fields."""
        data: Dict[str, Any] = {"files": list(self.files)}
        if self.last_modified is not None:
            data["last_modified"] = self.last_modified
        if self.packages is not None:
            data["packages"] = list(self.packages)
        if self.depths is not None:
            data["depths"] = dict(self.depths)
        return data
