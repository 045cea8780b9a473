"""
CLI Root Command

Build a tree from an entries file and print its root.

Usage:
    smt root entries.yaml [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from smt_cli.entries import apply_overrides, build_tree, load_entries


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = apply_overrides(args.cli_config, args)
    entries = load_entries(Path(args.entries), config.tree.big_numbers)
    tree = build_tree(config, entries)

    summary = {
        "depth": tree.depth,
        "entries": len(tree),
        "root": list(tree.root),
        "root_hash": tree.root_hash,
    }

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"depth: {summary['depth']}")
        print(f"entries: {summary['entries']}")
        print(f"root: ({tree.root[0]}, {tree.root[1]})")
        print(f"root_hash: {summary['root_hash']}")

    return EXIT_SUCCESS
