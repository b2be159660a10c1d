"""
confladder - Hierarchical Configuration Loader
==============================================

Loads a directory of YAML, JSON, JSON5, HJSON and TOML files in a fixed,
environment-aware order (default, deployment, host, instance, local),
deep-merges them and applies environment-variable overrides.

Modules:
- config: Template ladder, merge engine, overrides, path accessor and Config
- utils: Type casting helpers and logging
- cli: Command line interface
"""

__version__ = "1.0.0"
__author__ = "confladder Team"

from .config import (
    Config,
    Environment,
    ConfigError,
    DirectoryReadError,
    FileReadError,
    ParseError,
    InvalidOverrideError,
    PathNotFoundError,
    PathSyntaxError,
    TypeMismatchError,
    NotInitializedError,
    AlreadyInitializedError,
    FatalConfigError,
)
from .config import global_config

__all__ = [
    "Config",
    "Environment",
    "global_config",
    "ConfigError",
    "DirectoryReadError",
    "FileReadError",
    "ParseError",
    "InvalidOverrideError",
    "PathNotFoundError",
    "PathSyntaxError",
    "TypeMismatchError",
    "NotInitializedError",
    "AlreadyInitializedError",
    "FatalConfigError",
]
