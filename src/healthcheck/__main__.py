"""CLI entry point for healthcheck."""

from __future__ import annotations

import argparse
import logging
import os
import sys

import yaml

from . import __version__
from .config import AppConfig, load_config


def _setup_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("HEALTHCHECK_LOG_LEVEL", "")
    if not level_name:
        return
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_config_or_exit() -> AppConfig:
    try:
        return load_config()
    except (ValueError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Configuration error: could not parse config file: {e}", file=sys.stderr)
        sys.exit(1)


def _run_generate(args: argparse.Namespace, config: AppConfig) -> None:
    from .cli.generate import GenerateError, generate_bin, generate_conf
    from .paths import PathError, platform_table

    table = platform_table(tuple(config.safety.protected_paths))
    try:
        if args.command == "generate-bin":
            generate_bin(args.output or config.output.bin_dir, table)
        else:
            written = generate_conf(args.output or config.output.config_path, table, force=args.force)
            if written is None:
                sys.exit(1)
    except (PathError, GenerateError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(prog="healthcheck", description="healthcheck - lightweight health check tool")
    subparsers = parser.add_subparsers(dest="command")

    # `healthcheck generate-bin` subcommand
    bin_parser = subparsers.add_parser(
        "generate-bin", help="Copy the installed healthcheck launcher for deployment (not available under python -m)"
    )
    bin_parser.add_argument("--output", default=None, help="Output directory (default: ./bin)")

    # `healthcheck generate-conf` subcommand
    conf_parser = subparsers.add_parser("generate-conf", help="Write an example configuration file")
    conf_parser.add_argument("--output", default=None, help="Config file path (default: healthcheck.config)")
    conf_parser.add_argument("--force", action="store_true", help="Overwrite an existing file without asking")

    # Global flags
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Log path resolution details to stderr")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = _load_config_or_exit()
    _run_generate(args, config)


if __name__ == "__main__":
    main()
