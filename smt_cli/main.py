"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m smt_cli root ENTRIES [--depth N] [--[no-]big-numbers] [--json]
    python -m smt_cli prove ENTRIES KEY [--depth N] [--[no-]big-numbers] [--json]
    python -m smt_cli demo [--json]
    python -m smt_cli config --init | --show

Environment Variables:
    SMT_DEPTH             Tree depth (default: 256)
    SMT_BIG_NUMBERS       Use big-number hashes (default: false)
    SMT_PATH_ORDER        Key bit order, msb or lsb (default: msb)
    SMT_STRICT_DELETES    Raise when deleting absent keys (default: false)
    SMT_HASH_FUNCTION     Stock hash function (default: sha256)
    SMT_LOG_LEVEL         Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from smt_cli.commands import demo, prove, root
from smt_cli.config import get_default_config_template, load_config
from smt_cli.entries import EntriesFileError
from sparse_merkle.schemas.errors import SMTException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--depth", "-d",
        type=int,
        default=None,
        help="Tree depth (overrides config)",
    )
    parser.add_argument(
        "--big-numbers",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use integer keys and hashes instead of hex strings (overrides config)",
    )
    parser.add_argument(
        "--path-order",
        type=str,
        choices=["msb", "lsb"],
        default=None,
        help="Key bit order (overrides config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="smt",
        description="Sparse Merkle tree CLI - build trees, print roots, create and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./smt.yaml or ~/.config/smt/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Build a tree from an entries file and print its root",
    )
    root_parser.add_argument(
        "entries",
        type=str,
        help="JSON or YAML file mapping key -> value hash",
    )
    _add_tree_options(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create and verify a proof for one key",
        description="Works for present keys (membership) and absent keys (non-membership).",
    )
    prove_parser.add_argument(
        "entries",
        type=str,
        help="JSON or YAML file mapping key -> value hash",
    )
    prove_parser.add_argument(
        "key",
        type=str,
        help="Key to prove",
    )
    _add_tree_options(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Replay a fixed sequence of insertions into a depth-8 tree",
    )
    demo_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="smt.yaml",
        help="Path for config file (default: smt.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (SMT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: smt config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError, SMTException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (SMTException, EntriesFileError) as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
