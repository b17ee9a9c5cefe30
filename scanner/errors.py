"""Error types raised while computing a dependency closure."""


class DepsListError(Exception):
    """Base class for all depslist errors."""


class ResolveError(DepsListError):
    """A specifier could not be resolved to a file."""

    def __init__(self, directory: str, specifier: str, reason: str = "not found"):
        self.directory = directory
        self.specifier = specifier
        self.reason = reason
        super().__init__(f"Can't resolve '{specifier}' in '{directory}': {reason}")


class ConfigError(DepsListError):
    """Invalid options or configuration file contents."""


class AliasPatternError(ConfigError):
    """An alias pattern is not a valid regular expression."""
