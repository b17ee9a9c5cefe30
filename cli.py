#!/usr/bin/env python3
"""
depslist CLI

Lists every file reachable from one or more JavaScript entry files through
static imports, re-exports and require() calls.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from scanner.builder import deps_list
from scanner.config import find_config_file, load_config
from scanner.errors import ConfigError, DepsListError
from exporters import to_json, to_text


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="depslist",
        description="List the transitive file dependencies of JavaScript entry files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  depslist src/index.js                      # All files reachable from index.js
  depslist src/a.js src/b.js -f json         # JSON output for two entries
  depslist src/index.js -d 1                 # Do not follow into packages
  depslist src/index.js -a @app=src/app      # Rewrite @app/... to src/app/...
  depslist src/index.js -p --no-mtime        # Report packages, skip mtimes
        """,
    )

    parser.add_argument(
        "entries",
        nargs="+",
        help="Entry files (relative paths are taken from --cwd)",
    )

    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        help="Base directory for entries, aliases and node_modules (default: current directory)",
    )

    # Configuration file
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Configuration file (default: depslist.yaml or [tool.depslist] in pyproject.toml under --cwd)",
    )

    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Do not look for a configuration file",
    )

    # Traversal options
    parser.add_argument(
        "-a", "--alias",
        action="append",
        default=None,
        metavar="PATTERN=PATH",
        help="Rewrite specifiers starting with PATTERN to PATH (repeatable, first match wins)",
    )

    parser.add_argument(
        "-e", "--ext",
        nargs="+",
        default=None,
        help="Extensions tried by the resolver (e.g., .js .mjs .json)",
    )

    parser.add_argument(
        "-d", "--resolve-depth",
        type=int,
        default=None,
        help="Maximum number of package boundaries to cross (default: unbounded)",
    )

    parser.add_argument(
        "--no-mtime",
        action="store_true",
        help="Do not compute the last modification time",
    )

    parser.add_argument(
        "-p", "--packages",
        action="store_true",
        help="Report the packages whose files were parsed",
    )

    parser.add_argument(
        "--condition",
        nargs="+",
        default=None,
        help="Export condition names (default: import require node)",
    )

    parser.add_argument(
        "--main-field",
        nargs="+",
        default=None,
        help="package.json entry fields (default: module main)",
    )

    parser.add_argument(
        "--modules",
        nargs="+",
        default=None,
        help="Module directories to search (default: node_modules and <cwd>/node_modules)",
    )

    # Output options
    parser.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "--relative-to",
        type=str,
        default=None,
        help="Base path for relative path display (default: --cwd)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(args)


def parse_alias(value: str) -> Tuple[str, str]:
    """Split a ``PATTERN=PATH`` alias argument."""
    pattern, sep, path = value.partition("=")
    if not sep or not pattern or not path:
        raise ConfigError(f"Invalid alias '{value}', expected PATTERN=PATH")
    return pattern, path


def build_options(parsed: argparse.Namespace, cwd: Path) -> Dict[str, Any]:
    """Merge configuration file values with command line flags (flags win)."""
    options: Dict[str, Any] = {}

    if not parsed.no_config:
        config_path = Path(parsed.config) if parsed.config else find_config_file(cwd)
        if config_path is not None:
            options.update(load_config(config_path).to_options())

    if parsed.alias:
        aliases: List[Tuple[str, str]] = [parse_alias(a) for a in parsed.alias]
        options["aliases"] = aliases
    if parsed.ext:
        options["extensions"] = [ext if ext.startswith(".") else "." + ext for ext in parsed.ext]
    if parsed.resolve_depth is not None:
        options["resolve_depth"] = parsed.resolve_depth
    if parsed.no_mtime:
        options["track_mtime"] = False
    if parsed.packages:
        options["collect_packages"] = True
    if parsed.condition:
        options["condition_names"] = parsed.condition
    if parsed.main_field:
        options["main_fields"] = parsed.main_field
    if parsed.modules:
        options["modules"] = parsed.modules

    options["cwd"] = str(cwd)
    return options


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    level = logging.DEBUG if parsed.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    cwd = Path(parsed.cwd).resolve() if parsed.cwd else Path.cwd()
    if not cwd.is_dir():
        print(f"Error: '{parsed.cwd}' is not a directory", file=sys.stderr)
        return 1

    base: Optional[Path] = Path(parsed.relative_to).resolve() if parsed.relative_to else cwd

    try:
        options = build_options(parsed, cwd)
        result = deps_list(parsed.entries, **options)
    except (DepsListError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.format == "json":
        output = to_json(result, base=base)
    else:
        output = to_text(result, base=base)

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output + "\n", encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
