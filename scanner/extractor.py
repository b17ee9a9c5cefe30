"""Lexical extraction of import specifiers from JavaScript source text."""

import re
from typing import List


# Escape sequences, and regex literals made only of escapes, e.g. /\//
ESCAPES_RE = re.compile(r"/(?:\\.)+/|(?:\\.)+")

# Keeps string and template literals (group 1) and blanks out regex
# literals, comments and division operators.
NOISE_RE = re.compile(
    r"""("[^"\n]*?"|`[^`]*?`|'[^'\n]*?'|(?<=[\w$)])\s*/(?![*/]))"""
    r"""|/(?!\*)(?:(?:\[[^\]]*\])|[^/])+/"""
    r"""|/\*[\S\s]+?\*/"""
    r"""|//.*$""",
    re.MULTILINE,
)

# Bare literals are matched first so that import-like text inside a string
# is consumed by the literal and never reaches the import alternative.
SPECIFIER_RE = re.compile(
    r""""[^"\n]*?"|`[^`]*?`|'[^'\n]*?'"""
    r"""|(?<!\w|\$)(?:"""
    r"""import\s*(?:[\w+$\s*,]*(?:\{[^}]+\}\s*)?from\s*)?"""
    r"""|export\s*(?:\*(?:\s*as\s+[\w$]+\s+|\s*)|\{[^}]+\}\s*)from\s*"""
    r"""|(?:import|require)\s*\(\s*"""
    r""")("|'|`)([^"'`+]+)\1"""
)


def strip_noise(source: str) -> str:
    """
    Remove comments, regex literals and escape sequences from source text.

    String and template literals are kept so that specifiers survive.
    """
    source = ESCAPES_RE.sub("", source)
    return NOISE_RE.sub(r"\1", source)


def extract_specifiers(source: str) -> List[str]:
    """
    Extract import specifiers from JavaScript source text.

    Recognizes static imports (``import x from "a"``, ``import "a"``),
    dynamic imports (``import("a")``), re-exports (``export * from "a"``,
    ``export { x } from "a"``) and ``require("a")``. Matching is textual:
    unusual formatting or computed specifiers can be missed, and the
    occasional false positive is accepted.

    Args:
        source: File contents.

    Returns:
        Specifiers in source order (duplicates kept); empty if none.
    """
    specifiers: List[str] = []
    for match in SPECIFIER_RE.finditer(strip_noise(source)):
        specifier = match.group(2)
        if specifier is not None:
            specifiers.append(specifier)
    return specifiers
