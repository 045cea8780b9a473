"""
CLI Demo Command

Replays a fixed sequence of insertions into a depth-8 string-mode tree
using sha256, printing the root after each step and checking a proof
for every inserted key.

Usage:
    smt demo [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace

from sparse_merkle.crypto.hashing import sha256_hex_hash
from sparse_merkle.merkle import SparseMerkleTree


EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2

DEMO_DEPTH = 8
DEMO_ENTRIES = [
    ("2b", "44"),
    ("16", "78"),
    ("d", "e7"),
    ("10", "141"),
    ("20", "340"),
]


def demo_cmd(args: Namespace) -> int:
    """Execute the demo command."""
    tree = SparseMerkleTree(sha256_hex_hash, DEMO_DEPTH)
    steps = [{"op": "init", "root": list(tree.root), "root_hash": tree.root_hash}]

    for key, value_hash in DEMO_ENTRIES:
        tree.add(key, value_hash)
        steps.append({
            "op": f"add {key} -> {value_hash}",
            "root": list(tree.root),
            "root_hash": tree.root_hash,
        })

    proofs_ok = all(tree.verify_proof(tree.create_proof(k)) for k, _ in DEMO_ENTRIES)

    if args.json:
        print(json.dumps({"depth": DEMO_DEPTH, "steps": steps, "proofs_ok": proofs_ok}, indent=2))
    else:
        for step in steps:
            print(f"{step['op']}: root_hash={step['root_hash']}")
        print(f"proofs_ok: {str(proofs_ok).lower()}")

    return EXIT_SUCCESS if proofs_ok else EXIT_VERIFICATION_FAILED
