"""Exporters for converting closure results to output formats."""

from .json_exporter import to_json
from .text_exporter import to_text

__all__ = ["to_json", "to_text"]
