"""
Template Resolver
=================

Expands the fixed filename ladder for an environment and matches the
expansions against the files of a configuration directory.

Files are merged in this order, each one overriding the ones above it:

    default
    default-{instance}
    {deployment}
    {deployment}-{instance}
    {shortHostname}
    {shortHostname}-{instance}
    {shortHostname}-{deployment}
    {shortHostname}-{deployment}-{instance}
    {fullHostname}
    {fullHostname}-{instance}
    {fullHostname}-{deployment}
    {fullHostname}-{deployment}-{instance}
    local
    local-{instance}
    local-{deployment}
    local-{deployment}-{instance}

The ``env`` basename is reserved for the environment-variable override file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging

from .environment import Environment
from .errors import DirectoryReadError

logger = logging.getLogger(__name__)

ORDERED_TEMPLATES: Tuple[str, ...] = (
    'default',
    'default-{instance}',
    '{deployment}',
    '{deployment}-{instance}',
    '{shortHostname}',
    '{shortHostname}-{instance}',
    '{shortHostname}-{deployment}',
    '{shortHostname}-{deployment}-{instance}',
    '{fullHostname}',
    '{fullHostname}-{instance}',
    '{fullHostname}-{deployment}',
    '{fullHostname}-{deployment}-{instance}',
    'local',
    'local-{instance}',
    'local-{deployment}',
    'local-{deployment}-{instance}',
)

ENV_FILE_BASENAME = 'env'


@dataclass(frozen=True)
class CandidateFile:
    """A directory file matched to one template of the ladder."""
    template: str
    basename: str
    path: Path
    extension: str


def expand_template(template: str, environment: Environment) -> str:
    """Substitute every placeholder of a template verbatim."""
    return (template
            .replace('{deployment}', environment.deployment)
            .replace('{instance}', environment.instance)
            .replace('{shortHostname}', environment.short_hostname)
            .replace('{fullHostname}', environment.full_hostname))


def candidate_basenames(environment: Environment) -> List[Tuple[str, str]]:
    """
    Expand the ladder for an environment.

    Args:
        environment: Environment descriptor

    Returns:
        Ordered ``(template, basename)`` pairs, most general first
    """
    candidates = []
    for template in ORDERED_TEMPLATES:
        basename = expand_template(template, environment)
        if not basename:
            continue
        if basename == ENV_FILE_BASENAME:
            logger.warning(f"Template '{template}' expands to reserved basename '{ENV_FILE_BASENAME}', skipping")
            continue
        candidates.append((template, basename))
    return candidates


def scan_directory(directory: Union[str, Path], extensions: Iterable[str]) -> Dict[str, Path]:
    """
    List a configuration directory once and index its files by basename.

    When several files share a basename, the one whose extension comes first
    in ``extensions`` wins.

    Args:
        directory: Configuration directory
        extensions: Supported extensions in precedence order

    Returns:
        Mapping of basename (extension stripped) to file path

    Raises:
        DirectoryReadError: If the directory cannot be listed
    """
    directory = Path(directory)
    priority = {ext.lower(): rank for rank, ext in enumerate(extensions)}

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise DirectoryReadError(directory, e) from e

    files: Dict[str, Path] = {}
    for entry in entries:
        if not entry.is_file():
            continue
        ext = entry.suffix.lower()
        if ext not in priority:
            logger.debug(f"Ignoring {entry.name}: unsupported extension")
            continue

        basename = entry.stem
        current = files.get(basename)
        if current is None:
            files[basename] = entry
            continue

        if priority[ext] < priority[current.suffix.lower()]:
            winner, shadowed = entry, current
        else:
            winner, shadowed = current, entry
        logger.warning(f"Multiple files for '{basename}': using {winner.name}, ignoring {shadowed.name}")
        files[basename] = winner

    return files


def resolve_candidates(
    directory: Union[str, Path],
    environment: Environment,
    extensions: Iterable[str],
) -> Tuple[List[CandidateFile], Optional[CandidateFile]]:
    """
    Match the expanded ladder against a configuration directory.

    Args:
        directory: Configuration directory
        environment: Environment descriptor
        extensions: Supported extensions in precedence order

    Returns:
        Tuple of (ordered matched candidates, override file or None)
    """
    files = scan_directory(directory, extensions)

    matched = []
    for template, basename in candidate_basenames(environment):
        path = files.get(basename)
        if path is None:
            logger.debug(f"No file for template '{template}' ({basename})")
            continue
        matched.append(CandidateFile(template, basename, path, path.suffix.lower()))

    override_file = None
    env_path = files.get(ENV_FILE_BASENAME)
    if env_path is not None:
        override_file = CandidateFile(ENV_FILE_BASENAME, ENV_FILE_BASENAME, env_path, env_path.suffix.lower())

    return matched, override_file
