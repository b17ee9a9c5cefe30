"""Dependency closure data model."""

from .model import ClosureResult, FileSet

__all__ = ["ClosureResult", "FileSet"]
