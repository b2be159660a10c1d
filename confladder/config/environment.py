#!/usr/bin/env python3
"""
Environment Descriptor

Describes where the process is running: the deployment tier, the instance id
inside a multi-node deployment and the machine's hostname. The descriptor is
what turns the fixed filename templates into concrete candidate basenames.
"""

import os
import platform
from dataclasses import dataclass, field
from typing import Mapping, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYMENT = "development"
DEFAULT_INSTANCE = ""


def short_hostname_of(hostname: str) -> str:
    """Hostname up to the first ``.``."""
    return hostname.split('.', 1)[0]


def machine_hostname() -> str:
    """Hostname of the running machine."""
    return platform.node()


@dataclass(frozen=True)
class Environment:
    """Immutable environment descriptor used to expand filename templates."""
    deployment: str = DEFAULT_DEPLOYMENT
    instance: str = DEFAULT_INSTANCE
    full_hostname: str = field(default_factory=machine_hostname)
    short_hostname: str = ""

    def __post_init__(self):
        # Frozen dataclass: derive the short name through object.__setattr__
        if not self.short_hostname:
            object.__setattr__(self, 'short_hostname', short_hostname_of(self.full_hostname))

    @classmethod
    def build(
        cls,
        deployment: Optional[str] = None,
        deployment_env: Optional[str] = None,
        instance: Optional[str] = None,
        instance_env: Optional[str] = None,
        hostname: Optional[str] = None,
        hostname_env: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'Environment':
        """
        Build a descriptor from literal values or named environment variables.

        Args:
            deployment: Literal deployment tier
            deployment_env: Variable holding the deployment ("development" if unset)
            instance: Literal instance id
            instance_env: Variable holding the instance id ("" if unset)
            hostname: Literal full hostname
            hostname_env: Variable holding the hostname (machine hostname if unset)
            environ: Environment to read from (defaults to ``os.environ``)

        Returns:
            Environment descriptor

        Raises:
            ValueError: If both a literal and its environment variable are given
        """
        environ = os.environ if environ is None else environ

        deployment = _pick('deployment', deployment, deployment_env, environ, DEFAULT_DEPLOYMENT)
        instance = _pick('instance', instance, instance_env, environ, DEFAULT_INSTANCE)
        hostname = _pick('hostname', hostname, hostname_env, environ, None)
        if hostname is None:
            hostname = machine_hostname()

        env = cls(deployment=deployment, instance=instance, full_hostname=hostname)
        logger.debug(
            f"Environment resolved - Deployment: {env.deployment}, Instance: {env.instance!r}, "
            f"Host: {env.full_hostname} ({env.short_hostname})"
        )
        return env

    def as_dict(self) -> dict:
        return {
            'deployment': self.deployment,
            'instance': self.instance,
            'short_hostname': self.short_hostname,
            'full_hostname': self.full_hostname,
        }


def _pick(name: str, literal: Optional[str], env_var: Optional[str],
          environ: Mapping[str, str], default: Optional[str]) -> Optional[str]:
    if literal is not None and env_var is not None:
        raise ValueError(f"Specify either {name} or {name}_env, not both")
    if literal is not None:
        return literal
    if env_var is not None:
        return environ.get(env_var, default)
    return default
