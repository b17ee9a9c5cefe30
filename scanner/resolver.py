"""Node-style module resolution for import specifiers."""

import json
import logging
import os
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import ResolveError


logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js", ".json", ".node")
DEFAULT_CONDITION_NAMES = ("import", "require", "node")
DEFAULT_MAIN_FIELDS = ("module", "main")
DEFAULT_MAIN_FILES = ("index",)

NODE_BUILTIN_MODULES = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
    "worker_threads", "zlib",
})


def split_package_specifier(specifier: str) -> Optional[Tuple[str, str]]:
    """
    Split a bare specifier into package name and exports-style subpath.

    ``"lodash/fp"`` gives ``("lodash", "./fp")``; ``"@babel/core"`` gives
    ``("@babel/core", ".")``. Returns None for a malformed scoped name.
    """
    if specifier.startswith("@"):
        parts = specifier.split("/", 2)
        if len(parts) < 2 or not parts[1]:
            return None
        name = f"{parts[0]}/{parts[1]}"
        rest = parts[2] if len(parts) > 2 else ""
    else:
        name, _, rest = specifier.partition("/")
    if not name:
        return None
    return name, "./" + rest if rest else "."


def _is_path_specifier(specifier: str) -> bool:
    return (
        specifier in (".", "..")
        or specifier.startswith(("./", "../", "/"))
        or os.path.isabs(specifier)
    )


class ModuleResolver:
    """
    Resolves import specifiers to absolute file paths the way Node and
    bundlers do.

    Relative and absolute specifiers are tried as a file, then as a file
    with each extension, then as a directory (``package.json`` main fields,
    then index files). Bare specifiers are looked up in the module
    directories; packages with an ``exports`` field resolve only through it.
    ``#`` specifiers resolve through the nearest ``imports`` field.
    """

    def __init__(
        self,
        extensions: Optional[Sequence[str]] = None,
        condition_names: Sequence[str] = DEFAULT_CONDITION_NAMES,
        main_fields: Sequence[str] = DEFAULT_MAIN_FIELDS,
        modules: Sequence[str] = ("node_modules",),
        main_files: Sequence[str] = DEFAULT_MAIN_FILES,
        exports_fields: Sequence[str] = ("exports",),
        imports_fields: Sequence[str] = ("imports",),
        symlinks: bool = True,
        builtin_modules: Iterable[str] = NODE_BUILTIN_MODULES,
    ):
        self.extensions: List[str] = list(DEFAULT_EXTENSIONS if extensions is None else extensions)
        self.condition_names = set(condition_names)
        self.main_fields = list(main_fields)
        self.modules = list(modules)
        self.main_files = list(main_files)
        self.exports_fields = list(exports_fields)
        self.imports_fields = list(imports_fields)
        self.symlinks = symlinks
        self.builtin_modules = frozenset(builtin_modules)

        self._manifest_cache: Dict[str, Optional[Dict[str, Any]]] = {}

    def resolve(self, directory: str, specifier: str) -> str:
        """
        Resolve ``specifier`` as imported from a file in ``directory``.

        Args:
            directory: Directory of the importing file.
            specifier: Import specifier as written in source.

        Returns:
            Absolute path of the resolved file.

        Raises:
            ResolveError: If the specifier is a built-in module or no file matches.
        """
        if not specifier:
            raise ResolveError(directory, specifier, "empty specifier")
        if self._is_builtin(specifier):
            raise ResolveError(directory, specifier, "built-in module")

        if specifier.startswith("#"):
            resolved = self._resolve_imports(directory, specifier)
        elif _is_path_specifier(specifier):
            path = os.path.join(directory, specifier)
            if specifier.endswith("/"):
                resolved = self._try_directory(os.path.normpath(path))
            else:
                resolved = self._resolve_path(path)
        else:
            resolved = self._resolve_package(directory, specifier)

        if resolved is None:
            raise ResolveError(directory, specifier)

        if self.symlinks:
            return os.path.realpath(resolved)
        return os.path.abspath(resolved)

    def _is_builtin(self, specifier: str) -> bool:
        if specifier.startswith("node:"):
            return True
        return specifier.split("/", 1)[0] in self.builtin_modules

    def _resolve_path(self, path: str) -> Optional[str]:
        path = os.path.normpath(path)
        return self._try_file(path) or self._try_directory(path)

    def _try_file(self, path: str) -> Optional[str]:
        if os.path.isfile(path):
            return path
        for ext in self.extensions:
            if os.path.isfile(path + ext):
                return path + ext
        return None

    def _try_index(self, directory: str) -> Optional[str]:
        if not os.path.isdir(directory):
            return None
        for name in self.main_files:
            found = self._try_file(os.path.join(directory, name))
            if found:
                return found
        return None

    def _try_directory(self, directory: str) -> Optional[str]:
        if not os.path.isdir(directory):
            return None

        manifest = self._read_manifest(directory)
        if manifest:
            for field in self.main_fields:
                entry = manifest.get(field)
                if not isinstance(entry, str) or not entry:
                    continue
                target = os.path.normpath(os.path.join(directory, entry))
                found = self._try_file(target) or self._try_index(target)
                if found:
                    return found

        return self._try_index(directory)

    def _package_dirs(self, directory: str, name: str) -> Iterator[str]:
        """Yield candidate package directories in lookup order."""
        for modules_dir in self.modules:
            if os.path.isabs(modules_dir):
                yield os.path.join(modules_dir, name)
                continue

            current = os.path.abspath(directory)
            while True:
                if os.path.basename(current) != modules_dir:
                    yield os.path.join(current, modules_dir, name)
                parent = os.path.dirname(current)
                if parent == current:
                    break
                current = parent

    def _resolve_package(self, directory: str, specifier: str) -> Optional[str]:
        split = split_package_specifier(specifier)
        if split is None:
            return None
        name, subpath = split

        for package_dir in self._package_dirs(directory, name):
            if not os.path.isdir(package_dir):
                continue

            manifest = self._read_manifest(package_dir) or {}
            exports = self._first_field(manifest, self.exports_fields)
            if exports is not None:
                # An exports map is authoritative: no fallback to file lookup
                return self._resolve_exports(package_dir, exports, subpath)

            if subpath == ".":
                found = self._try_directory(package_dir)
            else:
                found = self._resolve_path(os.path.join(package_dir, subpath))
            if found:
                return found

        return None

    def _resolve_exports(self, package_dir: str, exports: Any, subpath: str) -> Optional[str]:
        if not isinstance(exports, dict) or not any(key.startswith(".") for key in exports):
            exports = {".": exports}

        matched = _match_subpath(exports, subpath)
        if matched is None:
            logger.debug("%s does not export %s", package_dir, subpath)
            return None

        value, star = matched
        for target in self._targets(value, star):
            if not target.startswith("./"):
                continue
            path = os.path.normpath(os.path.join(package_dir, target))
            if os.path.isfile(path):
                return path
        return None

    def _resolve_imports(self, directory: str, specifier: str) -> Optional[str]:
        package_dir = self._find_package_root(directory)
        if package_dir is None:
            return None

        imports = self._first_field(self._read_manifest(package_dir) or {}, self.imports_fields)
        if not isinstance(imports, dict):
            return None

        matched = _match_subpath(imports, specifier)
        if matched is None:
            return None

        value, star = matched
        for target in self._targets(value, star):
            if target.startswith("./"):
                path = os.path.normpath(os.path.join(package_dir, target))
                if os.path.isfile(path):
                    return path
            elif not target.startswith(("#", "/", "../")):
                found = self._resolve_package(package_dir, target)
                if found:
                    return found
        return None

    def _targets(self, value: Any, star: Optional[str]) -> Iterator[str]:
        """Yield export targets in priority order, substituting ``*`` captures."""
        if isinstance(value, str):
            yield value.replace("*", star) if star is not None else value
        elif isinstance(value, list):
            for item in value:
                yield from self._targets(item, star)
        elif isinstance(value, dict):
            for condition, nested in value.items():
                if condition == "default" or condition in self.condition_names:
                    yield from self._targets(nested, star)

    def _find_package_root(self, directory: str) -> Optional[str]:
        current = os.path.abspath(directory)
        while True:
            if self._read_manifest(current) is not None:
                return current
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent

    @staticmethod
    def _first_field(manifest: Dict[str, Any], fields: Sequence[str]) -> Any:
        for field in fields:
            if field in manifest:
                return manifest[field]
        return None

    def _read_manifest(self, directory: str) -> Optional[Dict[str, Any]]:
        """Load and cache ``package.json`` from a directory."""
        path = os.path.join(directory, "package.json")
        if path in self._manifest_cache:
            return self._manifest_cache[path]

        data: Optional[Dict[str, Any]] = None
        if os.path.isfile(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except (OSError, ValueError) as e:
                logger.debug("Ignoring unreadable manifest %s: %s", path, e)
            else:
                if isinstance(loaded, dict):
                    data = loaded

        self._manifest_cache[path] = data
        return data


def _match_subpath(mapping: Dict[str, Any], request: str) -> Optional[Tuple[Any, Optional[str]]]:
    """
    Find the ``exports``/``imports`` entry for ``request``.

    Exact keys win; otherwise the ``*`` pattern with the longest prefix, and
    finally legacy directory keys ending in ``/``.
    """
    if request in mapping and "*" not in request:
        return mapping[request], None

    best: Optional[Tuple[Any, Optional[str]]] = None
    best_prefix = -1
    for key, value in mapping.items():
        if "*" in key:
            prefix, _, suffix = key.partition("*")
            if (
                request.startswith(prefix)
                and request.endswith(suffix)
                and len(request) >= len(prefix) + len(suffix)
                and len(prefix) > best_prefix
            ):
                best = value, request[len(prefix):len(request) - len(suffix)]
                best_prefix = len(prefix)
    if best is not None:
        return best

    for key, value in mapping.items():
        if key.endswith("/") and request.startswith(key) and isinstance(value, str):
            return value + request[len(key):], None
    return None
