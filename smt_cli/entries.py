"""
Entries file loading for the CLI.

An entries file is JSON or YAML holding a mapping of key -> value hash,
either at the top level or under an "entries" key. Entries are inserted
in file order.

Hex mode: keys and values are used as strings. Quote them in YAML, since
unquoted digits such as 010 are read as numbers.
Big-number mode: integers are used as-is, strings are parsed with
int(text, 0) so "0x2b" and "43" both work.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from sparse_merkle.config.runtime import RuntimeConfig
from sparse_merkle.merkle import Hash, Key, SparseMerkleTree
from sparse_merkle.schemas.errors import TypeMismatchError


logger = logging.getLogger(__name__)


class EntriesFileError(Exception):
    """Raised when an entries file cannot be read or has the wrong shape."""


def coerce_value(value: Any, big_numbers: bool) -> Key:
    if big_numbers:
        if isinstance(value, str):
            try:
                return int(value, 0)
            except ValueError:
                raise TypeMismatchError(
                    f"Cannot parse {value!r} as a big number",
                    value=value,
                    expected="big number",
                ) from None
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def load_entries(path: Path, big_numbers: bool = False) -> list[tuple[Key, Hash]]:
    """Read (key, value_hash) pairs from a JSON or YAML file."""
    if not path.exists():
        raise EntriesFileError(f"Entries file not found: {path}")

    text = path.read_text()
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise EntriesFileError(f"Cannot parse entries file {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("entries"), dict):
        data = data["entries"]
    if not isinstance(data, dict):
        raise EntriesFileError(f"Entries file must hold a mapping of key -> value hash: {path}")

    return [(coerce_value(k, big_numbers), coerce_value(v, big_numbers)) for k, v in data.items()]


def build_tree(config: RuntimeConfig, entries: list[tuple[Key, Hash]]) -> SparseMerkleTree:
    """Build a tree from configuration and insert entries in order."""
    tree = SparseMerkleTree.from_config(config)
    for key, value_hash in entries:
        tree.add(key, value_hash)
    logger.info(f"Inserted {len(entries)} entries, tree holds {len(tree)}")
    return tree


def apply_overrides(config: RuntimeConfig, args: Any) -> RuntimeConfig:
    """Apply --depth / --[no-]big-numbers / --path-order flags to a config copy."""
    data = config.to_dict()
    if getattr(args, "depth", None) is not None:
        data["tree"]["depth"] = args.depth
    if getattr(args, "big_numbers", None) is not None:
        data["tree"]["big_numbers"] = args.big_numbers
    if getattr(args, "path_order", None):
        data["tree"]["path_order"] = args.path_order
    return RuntimeConfig.from_dict(data)
