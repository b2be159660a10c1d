#!/usr/bin/env python3
"""
confladder command line

Inspect what a configuration directory resolves to for a given environment:

    confladder --config-dir config --deployment production candidates
    confladder --config-dir config --deployment-env APP_ENV get server.port --type int
    confladder --config-dir config --env-file .env dump --format json
"""

import argparse
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config.accessor import flatten_tree
from .config.config_loader import Config
from .config.errors import ConfigError
from .config.parsers import serialize
from .config.templates import candidate_basenames, scan_directory
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

GETTERS = {
    'raw': 'get',
    'string': 'get_string',
    'bool': 'get_bool',
    'int': 'get_int',
    'float': 'get_float',
    'time': 'get_time',
    'duration': 'get_duration',
    'list': 'get_string_list',
    'map': 'get_string_map',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Hierarchical configuration loader')
    parser.add_argument('--config-dir', default='config', help='Directory holding the configuration files')

    deployment = parser.add_mutually_exclusive_group()
    deployment.add_argument('--deployment', help='Deployment tier (default: development)')
    deployment.add_argument('--deployment-env', help='Environment variable holding the deployment tier')

    instance = parser.add_mutually_exclusive_group()
    instance.add_argument('--instance', help='Instance id')
    instance.add_argument('--instance-env', help='Environment variable holding the instance id')

    hostname = parser.add_mutually_exclusive_group()
    hostname.add_argument('--hostname', help='Full hostname (default: this machine)')
    hostname.add_argument('--hostname-env', help='Environment variable holding the hostname')

    parser.add_argument('--env-file', help='Load environment variables from a dotenv file first')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')
    parser.add_argument('--log-file', help='Also log to this file')

    commands = parser.add_subparsers(dest='command')
    commands.add_parser('candidates', help='Show the template ladder and the files it matches')

    get_cmd = commands.add_parser('get', help='Print the value at a path')
    get_cmd.add_argument('path', help='Path expression, e.g. server.hosts[0]')
    get_cmd.add_argument('--type', choices=sorted(GETTERS), default='raw', help='Convert the value first')

    dump_cmd = commands.add_parser('dump', help='Print the merged configuration')
    dump_cmd.add_argument('--format', choices=['yaml', 'json', 'json5', 'hjson', 'toml'], default='yaml',
                          help='Output format (toml drops null values)')
    dump_cmd.add_argument('--flat', action='store_true', help='One "path = value" line per leaf')

    return parser


def _make_config(args: argparse.Namespace) -> Config:
    return Config(
        args.config_dir,
        deployment=args.deployment, deployment_env=args.deployment_env,
        instance=args.instance, instance_env=args.instance_env,
        hostname=args.hostname, hostname_env=args.hostname_env,
    )


def _render(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, default=str)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    return str(value)


def show_candidates(config: Config):
    files = scan_directory(config.directory, config.extensions)
    env = config.environment
    print(f"Deployment: {env.deployment}  Instance: {env.instance!r}  "
          f"Host: {env.full_hostname} ({env.short_hostname})")
    for template, basename in candidate_basenames(env):
        path = files.get(basename)
        print(f"  {template:<42} {basename:<40} {path.name if path else '-'}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for command-line usage."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level, log_file=args.log_file)

    if args.command is None:
        parser.print_help()
        return 1

    if args.env_file:
        if not load_dotenv(args.env_file):
            logger.warning(f"No variables loaded from {args.env_file}")

    try:
        config = _make_config(args)

        if args.command == 'candidates':
            show_candidates(config)
            return 0

        config.initialize()

        if args.command == 'get':
            value = getattr(config, GETTERS[args.type])(args.path)
            print(_render(value))
        elif args.command == 'dump':
            tree = config.as_dict()
            if args.flat:
                for path, value in flatten_tree(tree).items():
                    print(f"{path} = {_render(value)}")
            else:
                print(serialize(tree, args.format), end='')
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
