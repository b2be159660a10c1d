"""
Process-wide configuration facade.

Optional convenience wrapper around a single ``Config`` instance for code
that cannot have the configuration passed in. ``initialize()`` may succeed
only once per process; call ``reset()`` explicitly to start over. Prefer
passing a ``Config`` instance where possible.
"""

import os
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union
import logging

from .config_loader import Config, MISSING
from .errors import AlreadyInitializedError, FatalConfigError, NotInitializedError

logger = logging.getLogger(__name__)

_global_config: Optional[Config] = None


def initialize(directory: Union[str, os.PathLike], **options) -> Config:
    """
    Load and publish the process-wide configuration.

    Args:
        directory: Directory holding the configuration files
        **options: Keyword options accepted by ``Config``

    Returns:
        The initialized configuration

    Raises:
        AlreadyInitializedError: If a configuration was already published
    """
    global _global_config
    if _global_config is not None:
        raise AlreadyInitializedError(
            f"Global configuration already initialized from {_global_config.directory}"
        )

    config = Config(directory, **options).initialize()
    _global_config = config
    logger.info(f"Global configuration initialized from {config.directory}")
    return config


def reset():
    """Drop the process-wide configuration."""
    global _global_config
    _global_config = None


def is_initialized() -> bool:
    return _global_config is not None


def get_config() -> Config:
    if _global_config is None:
        raise NotInitializedError("Global configuration has not been initialized")
    return _global_config


def _required_config() -> Config:
    try:
        return get_config()
    except NotInitializedError as e:
        logger.critical(str(e))
        raise FatalConfigError(str(e)) from e


def get(path: str, default: Any = MISSING) -> Any:
    return get_config().get(path, default)


def get_string(path: str, default: Any = MISSING) -> str:
    return get_config().get_string(path, default)


def get_bool(path: str, default: Any = MISSING) -> bool:
    return get_config().get_bool(path, default)


def get_int(path: str, default: Any = MISSING) -> int:
    return get_config().get_int(path, default)


def get_int32(path: str, default: Any = MISSING) -> int:
    return get_config().get_int32(path, default)


def get_int64(path: str, default: Any = MISSING) -> int:
    return get_config().get_int64(path, default)


def get_uint(path: str, default: Any = MISSING) -> int:
    return get_config().get_uint(path, default)


def get_uint32(path: str, default: Any = MISSING) -> int:
    return get_config().get_uint32(path, default)


def get_uint64(path: str, default: Any = MISSING) -> int:
    return get_config().get_uint64(path, default)


def get_float(path: str, default: Any = MISSING) -> float:
    return get_config().get_float(path, default)


def get_time(path: str, default: Any = MISSING) -> datetime:
    return get_config().get_time(path, default)


def get_duration(path: str, default: Any = MISSING) -> timedelta:
    return get_config().get_duration(path, default)


def get_int_list(path: str, default: Any = MISSING) -> List[int]:
    return get_config().get_int_list(path, default)


def get_string_list(path: str, default: Any = MISSING) -> List[str]:
    return get_config().get_string_list(path, default)


def get_string_map(path: str, default: Any = MISSING) -> Dict[str, Any]:
    return get_config().get_string_map(path, default)


def must_get(path: str) -> Any:
    return _required_config().must_get(path)


def must_get_string(path: str) -> str:
    return _required_config().must_get_string(path)


def must_get_bool(path: str) -> bool:
    return _required_config().must_get_bool(path)


def must_get_int(path: str) -> int:
    return _required_config().must_get_int(path)


def must_get_int32(path: str) -> int:
    return _required_config().must_get_int32(path)


def must_get_int64(path: str) -> int:
    return _required_config().must_get_int64(path)


def must_get_uint(path: str) -> int:
    return _required_config().must_get_uint(path)


def must_get_uint32(path: str) -> int:
    return _required_config().must_get_uint32(path)


def must_get_uint64(path: str) -> int:
    return _required_config().must_get_uint64(path)


def must_get_float(path: str) -> float:
    return _required_config().must_get_float(path)


def must_get_time(path: str) -> datetime:
    return _required_config().must_get_time(path)


def must_get_duration(path: str) -> timedelta:
    return _required_config().must_get_duration(path)


def must_get_int_list(path: str) -> List[int]:
    return _required_config().must_get_int_list(path)


def must_get_string_list(path: str) -> List[str]:
    return _required_config().must_get_string_list(path)


def must_get_string_map(path: str) -> Dict[str, Any]:
    return _required_config().must_get_string_map(path)
