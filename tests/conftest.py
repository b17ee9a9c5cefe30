"""Shared fixtures for building small JavaScript projects on disk."""

import json
from pathlib import Path

import pytest


def write_tree(root: Path, files: dict) -> Path:
    """
    Create files under ``root``.

    Values are file contents; dict values are written as JSON (for
    ``package.json`` manifests).
    """
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path):
    """Return a callable that writes a file tree into a fresh project directory."""
    root = (tmp_path / "proj").resolve()
    root.mkdir()

    def make(files: dict) -> Path:
        return write_tree(root, files)

    return make
