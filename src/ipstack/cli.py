"""
Command-line interface for the ipstack client.

This module provides the ``ipstack`` entry point with commands for:
- lookup: Look up geolocation data for an IP address or domain
- config: Configuration management
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import httpx

from . import __version__
from .config import (
    DEFAULT_CONFIG_PATH,
    ClientConfig,
    build_client,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from .enums import Language
from .exceptions import ConfigurationError, DecodeError
from .options import LookupOptions


def resolve_config(args: argparse.Namespace) -> ClientConfig:
    """
    Load configuration from --config or the environment, then apply flags.

    Raises:
        ConfigurationError: If the configuration cannot be loaded
    """
    if getattr(args, "config", None):
        config = load_config_from_file(Path(args.config))
    else:
        config = load_config_from_env()

    if getattr(args, "secure", False):
        config.secure = True
    if getattr(args, "debug", False):
        config.debug = True

    return config


def cmd_lookup(args: argparse.Namespace) -> int:
    """Handle the 'lookup' command."""
    try:
        config = resolve_config(args)
        options = LookupOptions(
            fields=args.fields,
            hostname=args.hostname,
            security=args.security,
            language=args.language,
        )
        with build_client(config) as client:
            response = client.lookup(args.address, options)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2
    except DecodeError as e:
        print(f"Invalid response from API: {e.message}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1

    if not response.ok:
        print(f"API error ({response.error.kind}): {response.error}", file=sys.stderr)
        return 1

    print(json.dumps(response.result.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at {config_path}. Use --force to overwrite.")
            return 1

        config = ClientConfig(access_key=args.access_key or "")
        save_config_to_file(config, config_path)
        print(f"Configuration written to {config_path}")
        return 0

    try:
        config = load_config_from_file(config_path)
        config.validate()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 1

    if args.action == "show":
        print(f"Configuration: {config_path}")
        print(f"  Access key: {'set' if config.access_key else 'missing'}")
        print(f"  Secure (https): {config.secure}")
        print(f"  Debug: {config.debug}")
        print(f"  Timeout: {config.timeout_seconds}s")
        print(f"  Log format: {config.log_format}")
        return 0

    print(f"Configuration at {config_path} is valid.")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ipstack",
        description="Geolocation lookups against the ipstack API",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'lookup' command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Look up an IP address or domain",
    )
    lookup_parser.add_argument(
        "address",
        help="IPv4/IPv6 address or domain name (e.g., 134.201.250.155)",
    )
    lookup_parser.add_argument(
        "--fields",
        help="Comma-separated list of output fields",
    )
    lookup_parser.add_argument(
        "--hostname",
        action="store_true",
        help="Enable hostname lookup",
    )
    lookup_parser.add_argument(
        "--security",
        action="store_true",
        help="Enable the security module",
    )
    lookup_parser.add_argument(
        "--language", "-l",
        choices=[lang.value for lang in Language],
        help="Response language",
    )
    lookup_parser.add_argument(
        "--secure",
        action="store_true",
        help="Use https (paid plans only)",
    )
    lookup_parser.add_argument(
        "--debug",
        action="store_true",
        help="Log requests and responses to stderr",
    )
    lookup_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file (defaults to IPSTACK_* environment variables)",
    )
    lookup_parser.set_defaults(func=cmd_lookup)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--access-key",
        help="Access key to store when running 'init'",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
