"""
Configuration Errors
====================

Exception hierarchy raised while building and querying a configuration tree.

Initialization errors (directory listing, file reads, parsing, overrides)
abort the whole ``initialize()`` call. Read errors (missing paths, failed
casts) are local to a single query.
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Union

PathLike = Union[str, Path]


def format_path(path: Sequence[Union[str, int]]) -> str:
    """Render a list of path segments as ``a.b[0].c``."""
    rendered = ""
    for segment in path:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif not segment or any(c in segment for c in '.[]\'"') or segment.startswith('$'):
            quote = "'" if '"' in segment else '"'
            rendered += f"[{quote}{segment}{quote}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = str(segment)
    return rendered or "$"


class ConfigError(Exception):
    """Base class for every error raised by confladder."""


class DirectoryReadError(ConfigError):
    """The configuration directory could not be listed."""

    def __init__(self, directory: PathLike, cause: Optional[BaseException] = None):
        self.directory = Path(directory)
        self.cause = cause
        super().__init__(f"Cannot read configuration directory {self.directory}: {cause}")


class FileReadError(ConfigError):
    """A matched candidate file could not be read."""

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot read configuration file {self.path}: {cause}")


class ParseError(ConfigError):
    """A format parser rejected the content of a configuration file."""

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to parse configuration file {self.path}: {cause}")


class InvalidOverrideError(ConfigError):
    """An override file leaf does not name an environment variable."""

    def __init__(self, path: Sequence[Union[str, int]], value: Any):
        self.path = list(path)
        self.value = value
        super().__init__(
            f"Override at '{format_path(self.path)}' must be an environment "
            f"variable name, got {type(value).__name__}: {value!r}"
        )


class PathNotFoundError(ConfigError):
    """A read or override path does not resolve against the tree."""

    def __init__(self, path: Union[str, Sequence[Union[str, int]]], reason: str = ""):
        self.path = path if isinstance(path, str) else format_path(path)
        self.reason = reason
        message = f"Configuration path not found: '{self.path}'"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class PathSyntaxError(ConfigError):
    """A path expression could not be parsed."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid path expression {expression!r}: {reason}")


class TypeMismatchError(ConfigError):
    """A stored value cannot be converted to the requested type."""

    def __init__(self, value: Any, target: str, reason: str = ""):
        self.value = value
        self.target = target
        message = f"Cannot convert {type(value).__name__} {value!r} to {target}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotInitializedError(ConfigError):
    """A configuration was queried before ``initialize()`` succeeded."""


class AlreadyInitializedError(ConfigError):
    """The process-wide configuration was initialized a second time."""


class FatalConfigError(ConfigError):
    """Raised by ``must_get*`` accessors when required configuration is unusable."""
