"""Scanner module for specifier extraction, resolution and traversal."""

from .extractor import extract_specifiers
from .aliases import AliasRule, compile_aliases, rewrite_specifier
from .resolver import ModuleResolver
from .packages import get_package_name
from .builder import TraversalContext, create_context, deps_list, deps_list_async
from .errors import AliasPatternError, ConfigError, DepsListError, ResolveError

__all__ = [
    "extract_specifiers",
    "AliasRule",
    "compile_aliases",
    "rewrite_specifier",
    "ModuleResolver",
    "get_package_name",
    "TraversalContext",
    "create_context",
    "deps_list",
    "deps_list_async",
    "AliasPatternError",
    "ConfigError",
    "DepsListError",
    "ResolveError",
]
