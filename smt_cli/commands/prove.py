"""
CLI Prove Command

Build a tree from an entries file, then create and verify a proof for
one key. The JSON printed here is CLI output only; the engine defines
no proof wire format.

Usage:
    smt prove entries.yaml KEY [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Any

from smt_cli.entries import apply_overrides, build_tree, coerce_value, load_entries
from sparse_merkle.merkle import MerkleProof


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2


def proof_to_dict(proof: MerkleProof, valid: bool) -> dict[str, Any]:
    return {
        "key": proof.key,
        "value_hash": proof.value_hash,
        "root_hash": proof.root_hash,
        "siblings": list(proof.siblings),
        "membership": proof.is_membership,
        "valid": valid,
    }


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the proof does not verify)
    """
    config = apply_overrides(args.cli_config, args)
    entries = load_entries(Path(args.entries), config.tree.big_numbers)
    tree = build_tree(config, entries)

    key = coerce_value(args.key, config.tree.big_numbers)
    proof = tree.create_proof(key)
    valid = tree.verify_proof(proof)
    logger.info(f"Proof for key {key}: membership={proof.is_membership}, valid={valid}")

    data = proof_to_dict(proof, valid)
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        kind = "membership" if proof.is_membership else "non-membership"
        print(f"key: {proof.key}")
        print(f"proof: {kind}")
        print(f"value_hash: {proof.value_hash}")
        print(f"root_hash: {proof.root_hash}")
        print("siblings:")
        for level, sibling in enumerate(proof.siblings):
            print(f"  [{level}] {sibling}")
        print(f"valid: {str(valid).lower()}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
