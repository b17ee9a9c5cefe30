"""Traversal engine that computes the dependency closure of entry files."""

import asyncio
import logging
import math
import os
from typing import Any, Dict, List, Optional, Sequence, Union

from graph.model import ClosureResult, FileSet
from .aliases import AliasRule, AliasSpec, compile_aliases, rewrite_specifier
from .errors import ConfigError, ResolveError
from .extractor import extract_specifiers
from .packages import BOUNDARY_DIR, get_package_name
from .resolver import DEFAULT_CONDITION_NAMES, DEFAULT_MAIN_FIELDS, ModuleResolver


logger = logging.getLogger(__name__)

DEFAULT_MAX_OPEN_FILES = 64

PathArg = Union[str, "os.PathLike[str]"]


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


class TraversalContext:
    """
    Mutable state shared by every file task of one closure computation.

    All mutation happens between suspension points of a single event loop:
    the check-and-insert into ``files`` is one synchronous call, so two
    tasks can never admit the same dependency.
    """

    def __init__(
        self,
        entries: Sequence[str],
        resolver: Any,
        aliases: Sequence[AliasRule] = (),
        resolve_depth: Optional[int] = None,
        track_mtime: bool = True,
        collect_packages: bool = False,
        max_open_files: int = DEFAULT_MAX_OPEN_FILES,
    ):
        self.resolver = resolver
        self.aliases = list(aliases)
        self.resolve_depth = resolve_depth
        self.files = FileSet(entries, track_depth=resolve_depth is not None)
        # dict keys keep first-seen order
        self.packages: Optional[Dict[str, None]] = {} if collect_packages else None
        self.last_modified: Optional[float] = -math.inf if track_mtime else None
        self.max_open_files = max_open_files
        self._limit: Optional[asyncio.Semaphore] = None

    async def run(self) -> ClosureResult:
        """Parse every entry and everything reachable from it."""
        self._limit = asyncio.Semaphore(self.max_open_files)
        await asyncio.gather(*(self.parse(entry) for entry in self.files))
        return self.result()

    def result(self) -> ClosureResult:
        return ClosureResult(
            files=self.files.files,
            last_modified=self.last_modified,
            packages=list(self.packages) if self.packages is not None else None,
            depths=self.files.depths,
        )

    async def parse(self, file_name: str) -> None:
        """Read one file, fold in its mtime and recurse into admitted dependencies."""
        if self.last_modified is None:
            await self._expand(file_name)
        else:
            await asyncio.gather(self._expand(file_name), self._track_mtime(file_name))

    async def _run_io(self, func, *args):
        loop = asyncio.get_running_loop()
        async with self._limit:
            return await loop.run_in_executor(None, func, *args)

    async def _track_mtime(self, file_name: str) -> None:
        stat = await self._run_io(os.stat, file_name)
        if stat.st_mtime > self.last_modified:
            self.last_modified = stat.st_mtime

    async def _expand(self, file_name: str) -> None:
        source = await self._run_io(_read_text, file_name)

        package = get_package_name(file_name)
        if self.packages is not None and package is not None:
            self.packages.setdefault(package)

        specifiers = extract_specifiers(source)
        if not specifiers:
            return

        directory = os.path.dirname(file_name)
        depth = self.files.depth_of(file_name)

        pending = []
        for specifier in specifiers:
            dependency = self._admit(directory, specifier, package, depth)
            if dependency is not None:
                pending.append(self.parse(dependency))

        if pending:
            await asyncio.gather(*pending)

    def _admit(
        self,
        directory: str,
        specifier: str,
        package: Optional[str],
        depth: Optional[int],
    ) -> Optional[str]:
        """
        Resolve a specifier and add the dependency to the file set.

        Returns the dependency path if it is new and within the depth bound,
        None otherwise. Unresolvable specifiers are skipped.
        """
        request = rewrite_specifier(specifier, self.aliases)
        try:
            dependency = self.resolver.resolve(directory, request)
        except ResolveError as e:
            logger.debug("Skipping unresolved specifier: %s", e)
            return None

        dependency_depth = None
        if self.resolve_depth is not None:
            if get_package_name(dependency) == package:
                dependency_depth = depth
            else:
                recorded = self.files.depth_of(dependency)
                dependency_depth = min(
                    depth + 1,
                    recorded if recorded is not None else self.resolve_depth,
                )
            if dependency_depth >= self.resolve_depth:
                logger.debug("Not following %s past depth %d", dependency, self.resolve_depth)
                return None

        if not self.files.add(dependency, dependency_depth):
            return None
        return dependency


def _normalize_entries(
    entries: Union[PathArg, Sequence[PathArg]],
    cwd: str,
    realpath: bool = False,
) -> List[str]:
    if isinstance(entries, (str, os.PathLike)):
        entries = [entries]

    normalized: List[str] = []
    for entry in entries:
        path = os.path.normpath(os.path.join(cwd, os.fspath(entry)))
        # Entries must match the keys the resolver hands back for them
        normalized.append(os.path.realpath(path) if realpath else path)
    if not normalized:
        raise ConfigError("At least one entry file is required")
    return normalized


def _normalize_depth(resolve_depth: Any) -> Optional[int]:
    if resolve_depth is None or resolve_depth == math.inf:
        return None
    if isinstance(resolve_depth, bool) or not isinstance(resolve_depth, int) or resolve_depth < 0:
        raise ConfigError(f"resolve_depth must be a non-negative integer, got {resolve_depth!r}")
    return resolve_depth


def create_context(
    entries: Union[PathArg, Sequence[PathArg]],
    *,
    cwd: Optional[PathArg] = None,
    aliases: Optional[AliasSpec] = None,
    extensions: Optional[Sequence[str]] = None,
    resolve_depth: Optional[int] = None,
    track_mtime: bool = True,
    collect_packages: bool = False,
    condition_names: Sequence[str] = DEFAULT_CONDITION_NAMES,
    main_fields: Sequence[str] = DEFAULT_MAIN_FIELDS,
    max_open_files: int = DEFAULT_MAX_OPEN_FILES,
    resolver: Any = None,
    **resolver_options: Any,
) -> TraversalContext:
    """
    Validate options and build the traversal context for one call.

    Configuration errors are raised here, before any file is read.
    """
    cwd = os.path.abspath(os.fspath(cwd)) if cwd is not None else os.getcwd()
    depth = _normalize_depth(resolve_depth)
    rules = compile_aliases(aliases, cwd)

    if isinstance(max_open_files, bool) or not isinstance(max_open_files, int) or max_open_files < 1:
        raise ConfigError(f"max_open_files must be a positive integer, got {max_open_files!r}")

    if resolver is None:
        if not resolver_options.get("modules"):
            resolver_options["modules"] = [BOUNDARY_DIR, os.path.join(cwd, BOUNDARY_DIR)]
        try:
            resolver = ModuleResolver(
                extensions=extensions,
                condition_names=condition_names,
                main_fields=main_fields,
                **resolver_options,
            )
        except TypeError as e:
            raise ConfigError(f"Invalid resolver options: {e}") from e
    elif resolver_options or extensions is not None:
        raise ConfigError("Resolver options cannot be combined with a custom resolver")

    entry_files = _normalize_entries(entries, cwd, realpath=getattr(resolver, "symlinks", False))

    return TraversalContext(
        entries=entry_files,
        resolver=resolver,
        aliases=rules,
        resolve_depth=depth,
        track_mtime=track_mtime,
        collect_packages=collect_packages,
        max_open_files=max_open_files,
    )


async def deps_list_async(
    entries: Union[PathArg, Sequence[PathArg]],
    **options: Any,
) -> ClosureResult:
    """
    Compute every file reachable from ``entries`` through static imports.

    Args:
        entries: One entry file or a sequence of them; relative paths are
                 taken from ``cwd``.
        **options: See :func:`create_context`. ``cwd`` (default: current
                   directory), ``aliases`` (ordered prefix rewrites),
                   ``extensions``, ``resolve_depth`` (maximum number of
                   package boundaries crossed, default unbounded),
                   ``track_mtime`` (default True), ``collect_packages``
                   (default False), ``condition_names``, ``main_fields``,
                   ``max_open_files``, a custom ``resolver``, and any other
                   :class:`ModuleResolver` keyword such as ``modules``.

    Returns:
        ClosureResult with the entries followed by their dependencies in
        order of first discovery.

    Raises:
        ConfigError: If the options are invalid.
        OSError: If any entry or dependency cannot be read.
    """
    context = create_context(entries, **options)
    return await context.run()


def deps_list(
    entries: Union[PathArg, Sequence[PathArg]],
    **options: Any,
) -> ClosureResult:
    """Synchronous form of :func:`deps_list_async`."""
    context = create_context(entries, **options)
    return asyncio.run(context.run())
