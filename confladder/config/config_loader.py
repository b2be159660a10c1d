#!/usr/bin/env python3
"""Hierarchical configuration loader.

Loads every file of a configuration directory that matches the template
ladder (see ``templates.py``) for the current environment, deep-merges them
from most general to most specific, then applies the environment-variable
overrides declared in ``env.<ext>``.

Typical usage::

    config = Config('config', deployment_env='APP_ENV').initialize()
    port = config.get_int('server.port')
    timeout = config.get_duration('server.timeout', default=timedelta(seconds=30))
    dsn = config.must_get_string('database.dsn')

Every ``get*`` accessor raises ``PathNotFoundError`` or ``TypeMismatchError``
(or returns ``default`` when one is given and the path is missing). The
``must_get*`` variants log at CRITICAL and raise ``FatalConfigError``, for
startup code where missing configuration is unrecoverable.
"""
from __future__ import annotations
import os
import logging
from copy import deepcopy
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..utils import casting
from .accessor import resolve
from .environment import Environment
from .errors import (
    ConfigError, FatalConfigError, FileReadError, NotInitializedError,
    ParseError, PathNotFoundError,
)
from .merge import deep_merge
from .overrides import apply_overrides
from .parsers import DEFAULT_PARSERS, Parser
from .templates import CandidateFile, resolve_candidates

logger = logging.getLogger(__name__)

# Marks an omitted ``default``; None is a valid default
MISSING = object()


class Config:
    """Hierarchical, environment-aware configuration tree."""

    def __init__(
        self,
        directory: Union[str, os.PathLike],
        *,
        environment: Optional[Environment] = None,
        deployment: Optional[str] = None,
        deployment_env: Optional[str] = None,
        instance: Optional[str] = None,
        instance_env: Optional[str] = None,
        hostname: Optional[str] = None,
        hostname_env: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        parsers: Optional[Mapping[str, Parser]] = None,
    ):
        """
        Create a loader; nothing is read until ``initialize()``.

        Args:
            directory: Directory holding the configuration files
            environment: Prebuilt environment descriptor; excludes the
                deployment/instance/hostname options below
            deployment: Deployment tier, e.g. "production"
            deployment_env: Variable to read the deployment from
            instance: Instance id within a multi-node deployment
            instance_env: Variable to read the instance id from
            hostname: Full hostname (short hostname is derived from it)
            hostname_env: Variable to read the hostname from
            environ: Process environment to use (defaults to ``os.environ``)
            parsers: Extension-to-parser registry, in precedence order
        """
        options = (deployment, deployment_env, instance, instance_env, hostname, hostname_env)
        if environment is None:
            environment = Environment.build(
                deployment=deployment, deployment_env=deployment_env,
                instance=instance, instance_env=instance_env,
                hostname=hostname, hostname_env=hostname_env,
                environ=environ,
            )
        elif any(option is not None for option in options):
            raise ValueError("Pass either environment or deployment/instance/hostname options, not both")

        self.directory = Path(directory)
        self.environment = environment
        self._environ = environ
        self._parsers: Dict[str, Parser] = {
            ext.lower(): parser for ext, parser in (parsers or DEFAULT_PARSERS).items()
        }
        self._store: Optional[Dict[str, Any]] = None
        self._loaded_files: List[CandidateFile] = []

    # ------------------------------------------------------------------
    def initialize(self) -> 'Config':
        """
        Build the merged configuration tree.

        The new tree replaces the previous one only if every step succeeds.

        Returns:
            self

        Raises:
            DirectoryReadError: If the directory cannot be listed
            FileReadError: If a matched file cannot be read
            ParseError: If a matched file cannot be parsed
            InvalidOverrideError: If an override leaf is not a string
            PathNotFoundError: If an override path does not exist
        """
        try:
            candidates, override_file = resolve_candidates(
                self.directory, self.environment, self._parsers.keys()
            )

            store: Dict[str, Any] = {}
            for candidate in candidates:
                store = deep_merge(store, self._read(candidate))
                logger.debug(f"Merged {candidate.path.name} (template '{candidate.template}')")

            if override_file is not None:
                apply_overrides(store, self._read(override_file), self._environ)
        except ConfigError as e:
            logger.error(f"Configuration initialization failed: {e}")
            raise

        self._store = store
        self._loaded_files = candidates
        logger.info(
            f"Configuration loaded from {self.directory} - Deployment: {self.environment.deployment}, "
            f"Files: {[c.path.name for c in candidates]}"
        )
        return self

    def _read(self, candidate: CandidateFile) -> Dict[str, Any]:
        try:
            content = candidate.path.read_bytes()
        except OSError as e:
            raise FileReadError(candidate.path, e) from e

        parser = self._parsers[candidate.extension]
        try:
            return parser(content)
        except Exception as e:
            raise ParseError(candidate.path, e) from e

    # ------------------------------------------------------------------
    @property
    def is_initialized(self) -> bool:
        return self._store is not None

    @property
    def extensions(self) -> List[str]:
        """Supported extensions in precedence order."""
        return list(self._parsers)

    @property
    def loaded_files(self) -> List[CandidateFile]:
        """Files merged by the last successful ``initialize()``, in order."""
        return list(self._loaded_files)

    def as_dict(self) -> Dict[str, Any]:
        """Deep copy of the merged tree."""
        return deepcopy(self._tree())

    def _tree(self) -> Dict[str, Any]:
        if self._store is None:
            raise NotInitializedError(f"Configuration for {self.directory} has not been initialized")
        return self._store

    def __contains__(self, path: str) -> bool:
        try:
            resolve(self._tree(), path)
        except PathNotFoundError:
            return False
        return True

    def __repr__(self) -> str:
        return (f"Config(directory={str(self.directory)!r}, deployment={self.environment.deployment!r}, "
                f"instance={self.environment.instance!r}, initialized={self.is_initialized})")

    # ------------------------------------------------------------------
    def _lookup(self, path: str, cast: Optional[Callable[[Any], Any]], default: Any) -> Any:
        try:
            value = resolve(self._tree(), path)
        except PathNotFoundError:
            if default is not MISSING:
                return default
            raise
        if cast is None:
            return deepcopy(value) if isinstance(value, (dict, list)) else value
        result = cast(value)
        return deepcopy(result) if isinstance(result, dict) else result

    def _must(self, path: str, getter: Callable[[str], Any]) -> Any:
        try:
            return getter(path)
        except ConfigError as e:
            logger.critical(f"Required configuration '{path}' is unusable: {e}")
            raise FatalConfigError(f"Required configuration '{path}' is unusable: {e}") from e

    def get(self, path: str, default: Any = MISSING) -> Any:
        """Raw value at ``path``."""
        return self._lookup(path, None, default)

    def get_string(self, path: str, default: Any = MISSING) -> str:
        return self._lookup(path, casting.to_string, default)

    def get_bool(self, path: str, default: Any = MISSING) -> bool:
        return self._lookup(path, casting.to_bool, default)

    def get_int(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_int, default)

    def get_int32(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_int32, default)

    def get_int64(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_int64, default)

    def get_uint(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_uint, default)

    def get_uint32(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_uint32, default)

    def get_uint64(self, path: str, default: Any = MISSING) -> int:
        return self._lookup(path, casting.to_uint64, default)

    def get_float(self, path: str, default: Any = MISSING) -> float:
        return self._lookup(path, casting.to_float, default)

    def get_time(self, path: str, default: Any = MISSING) -> datetime:
        return self._lookup(path, casting.to_time, default)

    def get_duration(self, path: str, default: Any = MISSING) -> timedelta:
        return self._lookup(path, casting.to_duration, default)

    def get_int_list(self, path: str, default: Any = MISSING) -> List[int]:
        return self._lookup(path, casting.to_int_list, default)

    def get_string_list(self, path: str, default: Any = MISSING) -> List[str]:
        return self._lookup(path, casting.to_string_list, default)

    def get_string_map(self, path: str, default: Any = MISSING) -> Dict[str, Any]:
        return self._lookup(path, casting.to_string_map, default)

    def must_get(self, path: str) -> Any:
        return self._must(path, self.get)

    def must_get_string(self, path: str) -> str:
        return self._must(path, self.get_string)

    def must_get_bool(self, path: str) -> bool:
        return self._must(path, self.get_bool)

    def must_get_int(self, path: str) -> int:
        return self._must(path, self.get_int)

    def must_get_int32(self, path: str) -> int:
        return self._must(path, self.get_int32)

    def must_get_int64(self, path: str) -> int:
        return self._must(path, self.get_int64)

    def must_get_uint(self, path: str) -> int:
        return self._must(path, self.get_uint)

    def must_get_uint32(self, path: str) -> int:
        return self._must(path, self.get_uint32)

    def must_get_uint64(self, path: str) -> int:
        return self._must(path, self.get_uint64)

    def must_get_float(self, path: str) -> float:
        return self._must(path, self.get_float)

    def must_get_time(self, path: str) -> datetime:
        return self._must(path, self.get_time)

    def must_get_duration(self, path: str) -> timedelta:
        return self._must(path, self.get_duration)

    def must_get_int_list(self, path: str) -> List[int]:
        return self._must(path, self.get_int_list)

    def must_get_string_list(self, path: str) -> List[str]:
        return self._must(path, self.get_string_list)

    def must_get_string_map(self, path: str) -> Dict[str, Any]:
        return self._must(path, self.get_string_map)


__all__ = ["Config", "MISSING"]
