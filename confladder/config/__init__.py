"""Configuration package.

Provides the hierarchical ``Config`` loader plus the template ladder, merge
and override building blocks it is made of.
"""
from .config_loader import Config  # noqa: F401
from .environment import Environment  # noqa: F401
from .errors import (  # noqa: F401
    ConfigError, DirectoryReadError, FileReadError, ParseError,
    InvalidOverrideError, PathNotFoundError, PathSyntaxError,
    TypeMismatchError, NotInitializedError, AlreadyInitializedError,
    FatalConfigError,
)
from .templates import ORDERED_TEMPLATES, ENV_FILE_BASENAME, CandidateFile  # noqa: F401
