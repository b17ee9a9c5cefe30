"""Prefix alias rules applied to specifiers before resolution."""

import os
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import AliasPatternError


AliasSpec = Union[Mapping[str, str], Iterable[Any]]


@dataclass(frozen=True)
class AliasRule:
    """A compiled alias: ``pattern`` matched as a whole specifier or a ``/`` prefix."""

    pattern: str
    replacement: str
    regex: "re.Pattern[str]"


def _iter_pairs(aliases: AliasSpec) -> Iterable[Tuple[str, str]]:
    if isinstance(aliases, Mapping):
        yield from aliases.items()
        return

    for item in aliases:
        if isinstance(item, Mapping):
            try:
                yield item["pattern"], item["replacement"]
            except KeyError as e:
                raise AliasPatternError(f"Alias rule {item!r} is missing {e}") from None
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            yield item[0], item[1]
        else:
            raise AliasPatternError(f"Invalid alias rule: {item!r}")


def compile_aliases(aliases: Optional[AliasSpec], cwd: str) -> List[AliasRule]:
    """
    Compile alias rules in their given order.

    Args:
        aliases: Mapping of pattern to replacement path, or a sequence of
                 ``(pattern, replacement)`` pairs or
                 ``{"pattern": ..., "replacement": ...}`` dicts.
        cwd: Base directory for relative replacement paths.

    Returns:
        Compiled rules, in order.

    Raises:
        AliasPatternError: If a pattern is not a valid regular expression.
    """
    if not aliases:
        return []

    rules: List[AliasRule] = []
    for pattern, replacement in _iter_pairs(aliases):
        if not isinstance(pattern, str) or not isinstance(replacement, (str, os.PathLike)):
            raise AliasPatternError(f"Invalid alias rule: {pattern!r} -> {replacement!r}")
        try:
            regex = re.compile("^" + pattern.replace("$", r"\$") + "(/.*)?$")
        except re.error as e:
            raise AliasPatternError(f"Invalid alias pattern {pattern!r}: {e}") from e
        target = os.path.abspath(os.path.join(cwd, os.fspath(replacement)))
        rules.append(AliasRule(pattern=pattern, replacement=target, regex=regex))
    return rules


def rewrite_specifier(specifier: str, rules: List[AliasRule]) -> str:
    """Rewrite ``specifier`` with the first matching rule, keeping the rest of the path."""
    for rule in rules:
        match = rule.regex.match(specifier)
        if match:
            return rule.replacement + (match.group(1) or "")
    return specifier
